"""SendGrid client for forwarding contact messages."""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from src.shared.contact.config import EmailConfig
from src.shared.contact.schemas import OutboundEmailMessage

MAX_LOGGED_DETAIL = 500


@dataclass(frozen=True)
class SendResult:
    """Outcome of one send call. A non-2xx status is a normal result, not an exception."""
    ok: bool
    status_code: int
    detail: str = ""
    message_id: Optional[str] = None


class SendGridSender:
    """Sends one message per call with no retries."""

    def __init__(self, session: Optional[requests.Session] = None):
        self._http = session or requests

    def send(self, config: EmailConfig, message: OutboundEmailMessage) -> SendResult:
        """
        Post the message to the SendGrid v3 mail/send endpoint.

        Raises:
            requests.RequestException: on network failure or timeout
        """
        headers = {
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        }
        response = self._http.post(
            config.api_url,
            json=message.to_sendgrid_payload(),
            headers=headers,
            timeout=config.timeout_seconds,
        )
        if 200 <= response.status_code < 300:
            return SendResult(
                ok=True,
                status_code=response.status_code,
                message_id=response.headers.get("X-Message-Id"),
            )
        detail = response.text[:MAX_LOGGED_DETAIL] if response.text else ""
        logging.error(f"SendGrid error {response.status_code}: {detail}")
        return SendResult(ok=False, status_code=response.status_code, detail=detail)
