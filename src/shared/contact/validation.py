"""
Input validation for contact form submissions.
Checks run in a fixed order and the first failure wins.
"""

import re
from typing import Optional

from src.shared.contact.schemas import ContactSubmission


# Deliberately permissive: local@domain.tld with no whitespace
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

SPAM_DETECTED = "Spam detected"
MISSING_FIELDS = "Missing required fields"
INVALID_EMAIL = "Invalid email address"


def is_spam(submission: ContactSubmission) -> bool:
    """Honeypot check: humans never see the hp field, so any value means a bot."""
    # JSON truthiness: [] and {} count as filled; null, "", 0 and false do not
    return submission.hp not in (None, "", 0, False)


def has_required_fields(submission: ContactSubmission) -> bool:
    return bool(submission.name and submission.email and submission.message)


def is_valid_email(email: str) -> bool:
    """
    Syntactic email check.

    Args:
        email: Address to check

    Returns:
        True if the address looks like local@domain.tld
    """
    if not email:
        return False
    return EMAIL_PATTERN.fullmatch(email) is not None


def validate_submission(submission: ContactSubmission) -> Optional[str]:
    """
    Validate a submission.

    Returns:
        The client-facing error message for the first failed check, or None if valid
    """
    if is_spam(submission):
        return SPAM_DETECTED
    if not has_required_fields(submission):
        return MISSING_FIELDS
    if not is_valid_email(submission.email):
        return INVALID_EMAIL
    return None
