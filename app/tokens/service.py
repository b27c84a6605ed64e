"""
Signed, expiring tokens used by the login flows.

Tokens are HMAC-signed JWTs carrying an issuer tag (``iss``), an absolute
expiry (``exp``) and application claims. Nothing is stored server-side:
a token is valid while its signature verifies, it has not expired and its
issuer tag matches the purpose it is checked for.
"""

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from app.core.config import settings

logger = logging.getLogger(__name__)

RESERVED_CLAIMS = frozenset({"iss", "exp"})


class InvalidToken(Exception):
    """Token is missing, malformed, tampered with, expired or has the wrong issuer."""


class TokenService:
    def __init__(self, secret_key: Optional[str], algorithm: str = "HS256"):
        if not secret_key:
            raise ValueError("Token secret key is not configured")

        self.SECRET_KEY = secret_key
        self.ALGORITHM = algorithm

    def issue(
        self,
        issuer: str,
        claims: Optional[Dict[str, Any]] = None,
        ttl: timedelta = timedelta(minutes=15),
    ) -> str:
        """Create a signed token for ``issuer`` that expires ``ttl`` from now."""
        to_encode = dict(claims or {})

        reserved = RESERVED_CLAIMS.intersection(to_encode)
        if reserved:
            raise ValueError(f"Reserved claim names: {', '.join(sorted(reserved))}")

        expire = datetime.now(timezone.utc) + ttl
        to_encode.update({"iss": issuer, "exp": expire})
        return jwt.encode(to_encode, self.SECRET_KEY, algorithm=self.ALGORITHM)

    def verify(self, token: Optional[str], issuer: str) -> Dict[str, Any]:
        """
        Verify a token issued for ``issuer`` and return its claims.

        Raises:
            InvalidToken: on a missing, malformed, tampered, expired or
                wrong-issuer token.
        """
        if not token:
            raise InvalidToken("Token is missing")

        try:
            payload = jwt.decode(
                token,
                self.SECRET_KEY,
                algorithms=[self.ALGORITHM],
                issuer=issuer,
                options={"require_exp": True, "require_iss": True},
            )
        except JWTError as e:
            logger.debug(f"Token verification failed for issuer {issuer}: {e}")
            raise InvalidToken(str(e)) from e

        return {k: v for k, v in payload.items() if k not in RESERVED_CLAIMS}


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide token service; the secret is read once from settings."""
    return TokenService(settings.TOKENS_SECRET_KEY, settings.TOKENS_ALGORITHM)
