"""Pydantic schemas for the contact API."""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class ContactSubmission(BaseModel):
    """Contact form submission as posted by the portfolio page."""
    name: str = Field(default="", description="Sender name")
    email: str = Field(default="", description="Sender email address")
    message: str = Field(default="", description="Message body")
    hp: Optional[Any] = Field(default=None, description="Honeypot field, must stay empty")

    @classmethod
    def from_payload(cls, payload: Any) -> "ContactSubmission":
        """Build a submission from a decoded JSON body.

        Anything that is not a JSON object is treated as an empty body, and
        non-string values for the text fields are treated as missing.
        """
        if not isinstance(payload, dict):
            payload = {}

        def _text(key: str) -> str:
            value = payload.get(key)
            return value if isinstance(value, str) else ""

        return cls(
            name=_text("name"),
            email=_text("email"),
            message=_text("message"),
            hp=payload.get("hp"),
        )


class OutboundEmailMessage(BaseModel):
    """Email forwarded to the site owner's mailbox."""
    recipient: str
    sender: str
    subject: str
    body: str

    @classmethod
    def from_submission(cls, submission: ContactSubmission, destination: str) -> "OutboundEmailMessage":
        # Self-addressed: the owner's mailbox is both sender and recipient
        return cls(
            recipient=destination,
            sender=destination,
            subject=f"Portfolio contact from {submission.name}",
            body=f"Name: {submission.name}\nEmail: {submission.email}\n\n{submission.message}",
        )

    def to_sendgrid_payload(self) -> Dict[str, Any]:
        return {
            "personalizations": [{"to": [{"email": self.recipient}]}],
            "from": {"email": self.sender},
            "subject": self.subject,
            "content": [{"type": "text/plain", "value": self.body}],
        }


class ContactResponse(BaseModel):
    """Schema for a successful contact submission."""
    message: str


class ErrorResponse(BaseModel):
    """Schema for every contact error response."""
    error: str
