from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, Optional
from urllib.parse import urlencode, urlsplit, urlunsplit

from app.auth.interfaces import AccountResolver, SessionCreator
from app.core.config import Settings
from app.tokens import TokenService


@dataclass(frozen=True)
class OAuthFlowConfig:
    """
    Immutable configuration of the GitHub login flow.

    Built once per process; every URL the flow produces is derived from
    this object, never from ambient settings.
    """

    public_uri: str
    tokens: TokenService
    accounts: AccountResolver
    sessions: SessionCreator
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    backend: str = "github"
    authorize_url: str = "https://github.com/login/oauth/authorize"
    token_url: str = "https://github.com/login/oauth/access_token"
    user_url: str = "https://api.github.com/user"
    scope: str = "user:email"
    callback_path: str = "/api/oauth/github/callback"
    state_ttl: timedelta = timedelta(minutes=15)
    auth_token_ttl: timedelta = timedelta(minutes=15)
    http_timeout: float = 6.0

    def __post_init__(self):
        if not self.public_uri:
            raise ValueError("public_uri is required for the OAuth flow")

    @property
    def enabled(self) -> bool:
        return bool(self.client_id and self.client_secret)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        tokens: TokenService,
        accounts: AccountResolver,
        sessions: SessionCreator,
    ) -> "OAuthFlowConfig":
        return cls(
            public_uri=settings.PUBLIC_URI,
            tokens=tokens,
            accounts=accounts,
            sessions=sessions,
            client_id=settings.GITHUB_CLIENT_ID,
            client_secret=settings.GITHUB_CLIENT_SECRET,
            authorize_url=settings.GITHUB_AUTH_URL,
            token_url=settings.GITHUB_TOKEN_URL,
            user_url=settings.GITHUB_USER_URL,
            scope=settings.GITHUB_SCOPE,
            callback_path=f"{settings.API_PREFIX}/oauth/github/callback",
            state_ttl=timedelta(minutes=settings.OAUTH_STATE_TTL_MINUTES),
            auth_token_ttl=timedelta(minutes=settings.AUTH_TOKEN_TTL_MINUTES),
            http_timeout=settings.OAUTH_HTTP_TIMEOUT_SECONDS,
        )

    def public_url(self, path: str, params: Optional[Dict[str, str]] = None) -> str:
        """Absolute URL on the public origin; ``path`` replaces any configured path."""
        parts = urlsplit(self.public_uri)
        url = urlunsplit((parts.scheme, parts.netloc, "", "", "")) + path
        if params:
            url = f"{url}?{urlencode(params)}"
        return url
