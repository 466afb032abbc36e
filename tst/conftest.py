import pytest
from fastapi.testclient import TestClient

from src.app import app
from src.shared.contact.email_provider import SendResult
from src.shared.contact.rate_limit import SlidingWindowRateLimiter
from src.shared.contact.routes import get_email_sender, get_rate_limiter


class FakeSender:
    def __init__(self, result=None):
        self.result = result or SendResult(ok=True, status_code=202)
        self.calls = []

    def send(self, config, message):
        self.calls.append((config, message))
        return self.result


@pytest.fixture
def email_env(monkeypatch):
    monkeypatch.setenv("SENDGRID_API_KEY", "SG.test-key")
    monkeypatch.setenv("CONTACT_TO_EMAIL", "owner@example.com")
    monkeypatch.delenv("SENDGRID_API_URL", raising=False)
    monkeypatch.delenv("SENDGRID_TIMEOUT_SECONDS", raising=False)


@pytest.fixture
def limiter():
    return SlidingWindowRateLimiter()


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def client(limiter, sender):
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    app.dependency_overrides[get_email_sender] = lambda: sender
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def valid_payload():
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "message": "Hello there,\nI liked your projects.",
        "hp": "",
    }
