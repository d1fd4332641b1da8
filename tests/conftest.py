"""Shared pytest fixtures."""

import pytest

from support_mailer.logging.context import clear_log_context
from support_mailer.notifications import NotificationService
from tests.helpers import CALLER_EMAIL, VALID_TOKEN, FakeIdentityVerifier, RecordingTransport


REQUIRED_ENV = {
    "SUPABASE_URL": "https://project.supabase.co",
    "SUPABASE_ANON_KEY": "anon-key",
    "EMAIL_API_KEY": "server-token",
}
OPTIONAL_ENV = (
    "EMAIL_SENDER",
    "EMAIL_MESSAGE_STREAM",
    "EMAIL_API_URL",
    "LOG_LEVEL",
    "ENVIRONMENT",
)


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set the required environment variables and clear the optional ones."""
    for key, value in REQUIRED_ENV.items():
        monkeypatch.setenv(key, value)
    for key in OPTIONAL_ENV:
        monkeypatch.delenv(key, raising=False)
    return dict(REQUIRED_ENV)


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def identity_verifier():
    return FakeIdentityVerifier({VALID_TOKEN: CALLER_EMAIL})


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def service(identity_verifier, transport):
    return NotificationService(identity_verifier=identity_verifier, transport=transport)


@pytest.fixture
def auth_header():
    return f"Bearer {VALID_TOKEN}"
