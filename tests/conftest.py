"""
Pytest configuration and shared fixtures for the social login tests.
"""

import os

# Set required environment variables BEFORE importing app modules
os.environ.setdefault("LOG_LEVEL", "INFO")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
# Note: This is a test-only dummy value, not a real secret
os.environ.setdefault("TOKENS_SECRET_KEY", "test-secret-key-for-testing-only")
os.environ.setdefault("PUBLIC_URI", "https://app.example.com")
os.environ.setdefault("GITHUB_CLIENT_ID", "test-client-id")
os.environ.setdefault("GITHUB_CLIENT_SECRET", "test-client-secret")

import io
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.auth.github.config import OAuthFlowConfig
from app.auth.interfaces import AccountResolver, SessionCreator
from app.core.logging_config import configure_logging
from app.tokens import TokenService

TEST_SECRET = "test-secret-key-for-testing-only"
PUBLIC_URI = "https://app.example.com"


@pytest.fixture
def token_service():
    """Token service signing with the test secret."""
    return TokenService(TEST_SECRET)


@pytest.fixture
def mock_accounts():
    """Account resolver returning profile id 42."""
    accounts = MagicMock(spec=AccountResolver)
    accounts.login_or_register = AsyncMock(return_value=SimpleNamespace(id=42))
    return accounts


@pytest.fixture
def mock_sessions():
    """Session creator whose decorator sets a recognizable cookie."""

    def decorate(request, response):
        response.set_cookie("auth-token", "session-123")
        return response

    sessions = MagicMock(spec=SessionCreator)
    sessions.create = AsyncMock(return_value=decorate)
    return sessions


@pytest.fixture
def flow_config(token_service, mock_accounts, mock_sessions):
    """Enabled GitHub flow configuration with mocked collaborators."""
    return OAuthFlowConfig(
        public_uri=PUBLIC_URI,
        tokens=token_service,
        accounts=mock_accounts,
        sessions=mock_sessions,
        client_id="test-client-id",
        client_secret="test-client-secret",
    )


class LogCapture(io.StringIO):
    def records(self) -> list:
        return [json.loads(line) for line in self.getvalue().splitlines()]

    def messages(self) -> list:
        return [record["message"] for record in self.records()]


@pytest.fixture
def captured_logs():
    """Route the JSON log sink into a buffer for the duration of a test."""
    capture = LogCapture()
    configure_logging(level="DEBUG", stream=capture)
    yield capture
    configure_logging()
