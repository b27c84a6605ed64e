import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import sessionmaker
from starlette.requests import Request
from starlette.responses import Response

from app.auth.interfaces import SessionCreator, SessionDecorator
from app.models import HttpSession

logger = logging.getLogger(__name__)


class SessionService(SessionCreator):
    """Cookie sessions backed by the http_sessions table."""

    def __init__(
        self,
        session_factory: sessionmaker,
        cookie_name: str = "auth-token",
        max_age: timedelta = timedelta(days=7),
        secure: bool = False,
    ):
        self.session_factory = session_factory
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.secure = secure

    async def create(self, profile_id: str) -> SessionDecorator:
        """Persist a new session for ``profile_id`` and return a cookie setter."""
        session_id = secrets.token_urlsafe(32)
        expires_at = datetime.now(timezone.utc) + self.max_age

        async with self.session_factory() as db:
            db.add(
                HttpSession(id=session_id, profile_id=profile_id, expires_at=expires_at)
            )
            await db.commit()

        logger.info(f"Session created for profile {profile_id}")

        def decorate(request: Request, response: Response) -> Response:
            response.set_cookie(
                key=self.cookie_name,
                value=session_id,
                max_age=int(self.max_age.total_seconds()),
                httponly=True,
                secure=self.secure or request.url.scheme == "https",
                samesite="lax",
                path="/",
            )
            return response

        return decorate
