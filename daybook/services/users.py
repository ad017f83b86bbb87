from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from daybook.models import User


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProxyIdentity:
    """Identity asserted by the authenticating reverse proxy."""

    subject: str
    email: str | None = None
    name: str | None = None


class UserService:
    """Map proxy identities to local users."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def resolve(self, identity: ProxyIdentity) -> User:
        """Return the user for ``identity``, creating it on first sight."""
        subject = identity.subject.strip()
        if not subject:
            raise ValueError("Identity subject must not be empty.")

        result = await self._session.execute(select(User).where(User.external_id == subject))
        user = result.scalar_one_or_none()
        if user is not None:
            if identity.email and user.email != identity.email:
                user.email = identity.email
            return user

        user = User(
            external_id=subject,
            email=identity.email,
            display_name=identity.name,
        )
        self._session.add(user)
        await self._session.flush()
        logger.info("Registered user %s for subject %s", user.id, subject)
        return user
