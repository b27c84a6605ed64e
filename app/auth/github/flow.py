"""
GitHub social login flow.

Two entry points share no server-side state: ``initiate`` hands out a
signed CSRF state token inside the authorize URL, and ``callback`` accepts
only a request carrying a state token that still verifies. The callback
either redirects to the frontend with a short-lived post-auth token and a
session cookie, or to the login page with a generic error marker.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi.responses import RedirectResponse
from starlette.requests import Request
from starlette.responses import Response

from app.auth.exceptions import NotConfigured, UnableToAuthenticate

from .client import GitHubOAuthClient
from .config import OAuthFlowConfig
from .schemas import ProviderProfile

logger = logging.getLogger(__name__)

STATE_ISSUER = "oauth-login"
AUTH_ISSUER = "auth"

VERIFY_TOKEN_PATH = "/#/auth/verify-token"
LOGIN_PATH = "/#/auth/login"
LOGIN_ERROR = "unable-to-auth"


@dataclass
class AuthorizationAttempt:
    """Per-callback record of how far the flow got; never persisted."""

    state: Optional[str]
    code: Optional[str]
    step: str = "verify-state"
    access_token: Optional[str] = None
    profile: Optional[ProviderProfile] = None
    profile_id: Any = None


class OAuthFlow(ABC):
    @abstractmethod
    async def initiate(self, request: Request) -> Dict[str, str]:
        """Start a login: return the provider URL the client must visit."""
        pass

    @abstractmethod
    async def callback(self, request: Request) -> Response:
        """Finish a login from the provider's redirect."""
        pass


class DisabledOAuthFlow(OAuthFlow):
    """Stand-in used when the provider credentials are not configured."""

    async def initiate(self, request: Request) -> Dict[str, str]:
        raise NotConfigured()

    async def callback(self, request: Request) -> Response:
        raise NotConfigured()


class GitHubOAuthFlow(OAuthFlow):
    def __init__(
        self, config: OAuthFlowConfig, client: Optional[GitHubOAuthClient] = None
    ):
        self.config = config
        self.client = client or GitHubOAuthClient(config)
        self._failure_url = config.public_url(LOGIN_PATH, {"error": LOGIN_ERROR})

    async def initiate(self, request: Request) -> Dict[str, str]:
        state = self.config.tokens.issue(STATE_ISSUER, ttl=self.config.state_ttl)
        return {"redirect-uri": self.client.build_authorize_url(state)}

    async def callback(self, request: Request) -> Response:
        attempt = AuthorizationAttempt(
            state=request.query_params.get("state"),
            code=request.query_params.get("code"),
        )

        try:
            return await self._authenticate(attempt, request)
        except Exception as e:
            logger.warning(
                f"GitHub login failed at step '{attempt.step}': {type(e).__name__}: {e}"
            )
            return self._failure_response()

    async def _authenticate(
        self, attempt: AuthorizationAttempt, request: Request
    ) -> Response:
        self.config.tokens.verify(attempt.state, STATE_ISSUER)

        if attempt.code:
            attempt.step = "exchange-code"
            attempt.access_token = await self.client.exchange_code_for_token(
                attempt.state, attempt.code
            )
            if attempt.access_token:
                attempt.step = "fetch-profile"
                attempt.profile = await self.client.fetch_profile(attempt.access_token)

        if attempt.profile is None:
            raise UnableToAuthenticate("No profile obtained from GitHub")

        attempt.step = "resolve-account"
        profile = await self.config.accounts.login_or_register(
            email=attempt.profile.email,
            backend=self.config.backend,
            fullname=attempt.profile.fullname,
        )
        attempt.profile_id = profile.id

        attempt.step = "issue-token"
        token = self.config.tokens.issue(
            AUTH_ISSUER,
            {"profile-id": attempt.profile_id},
            ttl=self.config.auth_token_ttl,
        )

        attempt.step = "create-session"
        decorate = await self.config.sessions.create(attempt.profile_id)

        response = RedirectResponse(
            url=self.config.public_url(VERIFY_TOKEN_PATH, {"token": token}),
            status_code=302,
        )
        response = decorate(request, response)

        logger.info(f"GitHub login succeeded for profile {attempt.profile_id}")
        return response

    def _failure_response(self) -> Response:
        return RedirectResponse(url=self._failure_url, status_code=302)


def create_github_flow(config: OAuthFlowConfig) -> OAuthFlow:
    """Pick the flow implementation once, based on the configured credentials."""
    if config.enabled:
        return GitHubOAuthFlow(config)

    logger.info("GitHub OAuth client credentials not configured; GitHub login disabled")
    return DisabledOAuthFlow()
