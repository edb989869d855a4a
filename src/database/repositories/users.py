"""
User repository.

Users are the tenants of the system, so this is the only repository that is
not owner-scoped.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import UserDB, UserRoleEnum
from ..exceptions import DatabaseConstraintError

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user accounts."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> Optional[UserDB]:
        """Get user by database ID."""
        result = await self.session.execute(
            select(UserDB).where(UserDB.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[UserDB]:
        """Get user by email (emails are stored lower-cased)."""
        result = await self.session.execute(
            select(UserDB).where(UserDB.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        email: str,
        password_hash: str,
        name: str,
        role: str = UserRoleEnum.MANAGER.value,
    ) -> UserDB:
        """
        Create a new user.

        Raises:
            DatabaseConstraintError: if the email is already taken
        """
        user = UserDB(
            email=email.lower(),
            password_hash=password_hash,
            name=name,
            role=role,
        )
        try:
            self.session.add(user)
            await self.session.flush()
        except IntegrityError as e:
            logger.warning(f"Duplicate registration for {email}: {e}")
            raise DatabaseConstraintError(f"User with email {email} already exists")

        logger.info(f"Created user {user.id}")
        return user
