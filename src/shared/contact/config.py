"""Email provider configuration, read from the environment on every request."""

import os
import logging
from dataclasses import dataclass
from typing import Optional

DEFAULT_SENDGRID_API_URL = "https://api.sendgrid.com/v3/mail/send"
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class EmailConfig:
    api_key: str
    to_email: str
    api_url: str = DEFAULT_SENDGRID_API_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


def _timeout_from_env() -> float:
    raw = os.environ.get("SENDGRID_TIMEOUT_SECONDS")
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        logging.warning(f"Ignoring invalid SENDGRID_TIMEOUT_SECONDS={raw!r}")
        return DEFAULT_TIMEOUT_SECONDS
    if value <= 0:
        logging.warning(f"Ignoring non-positive SENDGRID_TIMEOUT_SECONDS={raw!r}")
        return DEFAULT_TIMEOUT_SECONDS
    return value


def load_email_config() -> Optional[EmailConfig]:
    """
    Load the SendGrid settings.

    Returns:
        EmailConfig, or None if SENDGRID_API_KEY or CONTACT_TO_EMAIL is unset or empty
    """
    api_key = os.environ.get("SENDGRID_API_KEY")
    to_email = os.environ.get("CONTACT_TO_EMAIL")
    if not api_key or not to_email:
        return None
    return EmailConfig(
        api_key=api_key,
        to_email=to_email,
        api_url=os.environ.get("SENDGRID_API_URL") or DEFAULT_SENDGRID_API_URL,
        timeout_seconds=_timeout_from_env(),
    )
