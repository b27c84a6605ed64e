"""
Collaborators the login flows depend on.

The flows only see these interfaces; the database-backed implementations
live in app.auth.account and app.auth.session.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from starlette.requests import Request
from starlette.responses import Response

# Applies session side effects (cookies) to an outgoing response.
SessionDecorator = Callable[[Request, Response], Response]


class AccountResolver(ABC):
    @abstractmethod
    async def login_or_register(
        self, email: Optional[str], backend: str, fullname: Optional[str]
    ) -> Any:
        """
        Map a verified provider identity to a local account, creating it if absent.

        Returns:
            An account object exposing an ``id`` attribute

        Raises:
            AccountResolutionFailed: if the identity is rejected
        """
        pass


class SessionCreator(ABC):
    @abstractmethod
    async def create(self, profile_id: Any) -> SessionDecorator:
        """Open a session for ``profile_id`` and return its response decorator."""
        pass
