"""
Account resolution for social logins ("login or register").
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from app.auth.exceptions import AccountResolutionFailed
from app.auth.interfaces import AccountResolver
from app.models import Profile

logger = logging.getLogger(__name__)


class AccountService(AccountResolver):
    """Maps provider identities to local profiles, creating them on first login."""

    def __init__(self, session_factory: sessionmaker, registration_enabled: bool = True):
        """
        Initialize account service.

        Args:
            session_factory: Async session factory; each call uses its own session
            registration_enabled: Whether unknown identities may create a profile
        """
        self.session_factory = session_factory
        self.registration_enabled = registration_enabled

    async def login_or_register(
        self, email: Optional[str], backend: str, fullname: Optional[str]
    ) -> Profile:
        """
        Return the profile for ``email``, registering it if it does not exist.

        Raises:
            AccountResolutionFailed: no email, blocked or inactive profile, or
                registration disabled for an unknown email
        """
        if not email:
            raise AccountResolutionFailed(f"{backend} profile has no email address")

        email = email.strip().lower()

        async with self.session_factory() as db:
            existing = await self._get_by_email(db, email)

            if existing:
                self._ensure_can_login(existing)
                logger.info(f"Existing profile logging in via {backend}: {existing.id}")
                return existing

            if not self.registration_enabled:
                raise AccountResolutionFailed("Registration is disabled")

            profile = Profile(
                id=str(uuid.uuid4()),
                email=email,
                fullname=fullname or email.split("@")[0],
                auth_backend=backend,
                is_active=True,
                is_blocked=False,
            )
            db.add(profile)
            try:
                await db.commit()
            except IntegrityError:
                # Another first login for the same email committed in between
                await db.rollback()
                existing = await self._get_by_email(db, email)
                if existing is None:
                    raise
                logger.info(f"Profile registered concurrently via {backend}: {existing.id}")
                return self._ensure_can_login(existing)

            await db.refresh(profile)

            logger.info(f"New profile registered via {backend}: {profile.id}")
            return profile

    async def get_profile(self, profile_id: str) -> Optional[Profile]:
        async with self.session_factory() as db:
            result = await db.execute(select(Profile).where(Profile.id == profile_id))
            return result.scalar_one_or_none()

    @staticmethod
    def _ensure_can_login(profile: Profile) -> Profile:
        if profile.is_blocked:
            raise AccountResolutionFailed(f"Profile {profile.id} is blocked")
        if not profile.is_active:
            raise AccountResolutionFailed(f"Profile {profile.id} is deactivated")
        return profile

    @staticmethod
    async def _get_by_email(db: AsyncSession, email: str) -> Optional[Profile]:
        result = await db.execute(
            select(Profile).where(func.lower(Profile.email) == email)
        )
        return result.scalar_one_or_none()
