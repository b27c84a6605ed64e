"""
Error kinds raised by the social login flows.

Inside the OAuth callback every one of these is converted into the same
failure redirect; only NotConfigured reaches the client (as a 404).
"""

from fastapi import HTTPException, status

from app.tokens import InvalidToken


class UnableToAuthenticate(Exception):
    """The provider did not yield a profile (code missing, exchange or fetch failed)."""


class AccountResolutionFailed(Exception):
    """The provider profile could not be mapped to a local account."""


class NotConfigured(HTTPException):
    """Login flow invoked while the provider credentials are not configured."""

    def __init__(self):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail="not-found")


__all__ = [
    "AccountResolutionFailed",
    "InvalidToken",
    "NotConfigured",
    "UnableToAuthenticate",
]
