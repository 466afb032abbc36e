"""Contact route that forwards portfolio form submissions to the site owner."""

import json
import logging
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from src.shared.contact.config import load_email_config
from src.shared.contact.email_provider import SendGridSender
from src.shared.contact.rate_limit import SlidingWindowRateLimiter, now_ms
from src.shared.contact.schemas import ContactResponse, ContactSubmission, ErrorResponse, OutboundEmailMessage
from src.shared.contact.validation import SPAM_DETECTED, validate_submission

router = APIRouter(prefix="/api", tags=["contact"])

NOT_CONFIGURED = "Email service not configured. Set SENDGRID_API_KEY and CONTACT_TO_EMAIL."
TOO_MANY_REQUESTS = "Too many requests. Please try again later."


def get_client_ip(request: Request) -> str:
    """Get client IP address for rate limiting."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # First IP in the chain is the original client
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client and request.client.host else "unknown"


def get_rate_limiter(request: Request) -> SlidingWindowRateLimiter:
    return request.app.state.contact_rate_limiter


def get_email_sender(request: Request) -> SendGridSender:
    return request.app.state.email_sender


def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump(), headers=headers)


async def _read_payload(request: Request):
    body = await request.body()
    if not body:
        return {}
    try:
        return json.loads(body)
    except ValueError:
        return {}


@router.post("/send-contact")
async def send_contact(
    request: Request,
    limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter),
    sender: SendGridSender = Depends(get_email_sender),
):
    """
    Forward a contact form submission by email.

    Non-POST methods never reach this handler: the router answers them with
    405 and Allow: POST. Checks then run in order: honeypot, required fields,
    email syntax, configuration, per-IP rate limit (10 per 10 minutes). Every
    failure is answered here as {"error": ...}; nothing is raised to the caller.
    """
    try:
        submission = ContactSubmission.from_payload(await _read_payload(request))
        client_ip = get_client_ip(request)

        error = validate_submission(submission)
        if error:
            if error == SPAM_DETECTED:
                logging.warning(f"Contact honeypot triggered from {client_ip}")
            return _error(status.HTTP_400_BAD_REQUEST, error)

        config = load_email_config()
        if config is None:
            logging.error("Contact email not configured: SENDGRID_API_KEY and CONTACT_TO_EMAIL are required")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, NOT_CONFIGURED)

        now = now_ms()
        if limiter.is_over_limit(limiter.check_and_record(client_ip, now)):
            logging.warning(f"Contact rate limit exceeded for {client_ip}")
            retry_after = limiter.retry_after_seconds(client_ip, now)
            return _error(
                status.HTTP_429_TOO_MANY_REQUESTS,
                TOO_MANY_REQUESTS,
                headers={"Retry-After": str(retry_after)},
            )

        message = OutboundEmailMessage.from_submission(submission, config.to_email)
        result = await run_in_threadpool(sender.send, config, message)
        if not result.ok:
            logging.error(f"Contact email rejected by provider with status {result.status_code}")
            return _error(status.HTTP_502_BAD_GATEWAY, "Email service error")

        logging.info(f"Contact email sent for {client_ip}")
        return JSONResponse(status_code=status.HTTP_200_OK, content=ContactResponse(message="Message sent successfully").model_dump())

    except Exception as e:
        logging.error(f"send-contact error: {str(e)}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
