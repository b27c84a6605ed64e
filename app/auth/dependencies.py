"""
Process-wide wiring of the login flows and their collaborators.

Everything here is built once (lru_cache) and handed to routes through
FastAPI dependencies, so tests can swap any piece with
app.dependency_overrides.
"""

from datetime import timedelta
from functools import lru_cache

from app.auth.account.service import AccountService
from app.auth.github.config import OAuthFlowConfig
from app.auth.github.flow import OAuthFlow, create_github_flow
from app.auth.session.service import SessionService
from app.core.config import settings
from app.core.database import AsyncSessionLocal
from app.tokens import get_token_service


@lru_cache
def get_account_service() -> AccountService:
    return AccountService(
        AsyncSessionLocal, registration_enabled=settings.REGISTRATION_ENABLED
    )


@lru_cache
def get_session_service() -> SessionService:
    return SessionService(
        AsyncSessionLocal,
        cookie_name=settings.SESSION_COOKIE_NAME,
        max_age=timedelta(days=settings.SESSION_MAX_AGE_DAYS),
        secure=settings.SESSION_COOKIE_SECURE,
    )


@lru_cache
def get_github_flow() -> OAuthFlow:
    config = OAuthFlowConfig.from_settings(
        settings,
        tokens=get_token_service(),
        accounts=get_account_service(),
        sessions=get_session_service(),
    )
    return create_github_flow(config)
