from typing import List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: Optional[str] = None

    # Public URL the frontend is served from (redirect targets are built from it)
    PUBLIC_URI: str = "http://localhost:3449"

    # Database (PostgreSQL - local or deployed; sqlite for tests)
    DATABASE_URL: Optional[str] = None

    # GitHub OAuth (both unset disables the social login flow)
    GITHUB_CLIENT_ID: Optional[str] = None
    GITHUB_CLIENT_SECRET: Optional[str] = None
    GITHUB_AUTH_URL: str = "https://github.com/login/oauth/authorize"
    GITHUB_TOKEN_URL: str = "https://github.com/login/oauth/access_token"
    GITHUB_USER_URL: str = "https://api.github.com/user"
    GITHUB_SCOPE: str = "user:email"

    # Signed token settings
    TOKENS_SECRET_KEY: Optional[str] = None
    TOKENS_ALGORITHM: str = "HS256"
    OAUTH_STATE_TTL_MINUTES: int = 15  # Lifetime of the CSRF state token
    AUTH_TOKEN_TTL_MINUTES: int = 15  # Lifetime of the post-auth token

    # Outbound provider calls (no retries)
    OAUTH_HTTP_TIMEOUT_SECONDS: float = 6.0

    # Accounts
    REGISTRATION_ENABLED: bool = True

    # Sessions
    SESSION_COOKIE_NAME: str = "auth-token"
    SESSION_MAX_AGE_DAYS: int = 7
    SESSION_COOKIE_SECURE: bool = False

    # Log Level
    LOG_LEVEL: (
        str  # Required: Must be set in environment (e.g., INFO, DEBUG, WARNING, ERROR)
    )

    # API Configuration
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Social-Login-API"
    VERSION: str = "1.0.0"

    # CORS
    ALLOWED_ORIGINS: List[str] = []

    # Sentry Configuration
    SENTRY_DSN: Optional[str] = None  # Sentry DSN for error tracking

    # Logging Configuration
    LOGGING_FRAME_DEPTH: int = (
        6  # Frame depth for finding logging call origin in stack trace
    )

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    # --------- Properties ---------
    @property
    def is_local(self) -> bool:
        """
        Check if running in local development environment.

        Returns True only for local development (local or local_dev).
        Any other environment (dev, staging, prod) returns False.
        """
        if not self.ENVIRONMENT:
            return False
        env = self.ENVIRONMENT.lower()
        return env in ["local", "local_dev"]

    @property
    def github_oauth_enabled(self) -> bool:
        """GitHub login is available only when both client credentials are set."""
        return bool(self.GITHUB_CLIENT_ID and self.GITHUB_CLIENT_SECRET)


settings = Settings()
