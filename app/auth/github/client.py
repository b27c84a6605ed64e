"""
GitHub identity provider client for the social login flow.

Token exchange and profile fetch never raise: expired codes, a user
cancelling at GitHub, timeouts and malformed responses all come back as
None, and the flow decides what the user sees. The configured timeout
bounds each httpx phase and also the call as a whole.
"""

import asyncio
import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from .config import OAuthFlowConfig
from .schemas import ProviderProfile

logger = logging.getLogger(__name__)


class GitHubOAuthClient:
    def __init__(self, config: OAuthFlowConfig):
        self.config = config

    def build_redirect_uri(self) -> str:
        """Callback URL GitHub sends the user back to."""
        return self.config.public_url(self.config.callback_path)

    def build_authorize_url(self, state: str) -> str:
        """Generate the GitHub OAuth authorization URL carrying ``state``."""
        params = {
            "client_id": self.config.client_id,
            "redirect_uri": self.build_redirect_uri(),
            "state": state,
            "scope": self.config.scope,
        }
        return f"{self.config.authorize_url}?{urlencode(params)}"

    async def exchange_code_for_token(self, state: str, code: str) -> Optional[str]:
        """Exchange an authorization code for an access token (None on any failure)."""
        data = {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "code": code,
            "state": state,
            "redirect_uri": self.build_redirect_uri(),
        }
        headers = {
            "content-type": "application/x-www-form-urlencoded",
            "accept": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.config.http_timeout) as client:
                response = await asyncio.wait_for(
                    client.post(self.config.token_url, data=data, headers=headers),
                    timeout=self.config.http_timeout,
                )

            if response.status_code != 200:
                logger.warning(
                    f"GitHub token exchange failed with status {response.status_code}"
                )
                return None

            token_data = response.json()
            access_token = token_data.get("access_token")
            if not access_token:
                # GitHub reports invalid or expired codes as 200 + "error"
                logger.warning(
                    f"GitHub token exchange returned no access token: {token_data.get('error')}"
                )
                return None

            return access_token

        except Exception:
            logger.error("Unexpected error on GitHub token exchange", exc_info=True)
            return None

    async def fetch_profile(self, access_token: str) -> Optional[ProviderProfile]:
        """Fetch the user's email and display name (None on any failure)."""
        headers = {"authorization": f"token {access_token}"}

        try:
            async with httpx.AsyncClient(timeout=self.config.http_timeout) as client:
                response = await asyncio.wait_for(
                    client.get(self.config.user_url, headers=headers),
                    timeout=self.config.http_timeout,
                )

            if response.status_code != 200:
                logger.warning(
                    f"GitHub user info request failed with status {response.status_code}"
                )
                return None

            user_data = response.json()
            return ProviderProfile(
                email=user_data.get("email"),
                fullname=user_data.get("name"),
            )

        except Exception:
            logger.error("Unexpected error on GitHub user info request", exc_info=True)
            return None
