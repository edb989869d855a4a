"""
Account registration, login and access token resolution.
"""

import logging
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import UserDB
from ..database.exceptions import ConflictError, DatabaseConstraintError
from ..database.repositories import UserRepository
from ..utils.security import (
    AuthenticationError,
    TokenSigner,
    get_token_signer,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """Service for user accounts and access tokens."""

    def __init__(self, session: AsyncSession, signer: Optional[TokenSigner] = None):
        self.session = session
        self.users = UserRepository(session)
        self.signer = signer or get_token_signer()

    async def register(self, email: str, password: str, name: str) -> Tuple[str, UserDB]:
        """
        Create an account and issue its first token.

        Raises:
            ConflictError: if the email is already registered
        """
        if await self.users.get_by_email(email):
            raise ConflictError("Email is already registered")

        try:
            user = await self.users.create(
                email=email,
                password_hash=hash_password(password),
                name=name,
            )
        except DatabaseConstraintError:
            # Lost a race with a concurrent registration
            raise ConflictError("Email is already registered")

        await self.session.commit()
        logger.info(f"Registered user {user.id}")
        return self.signer.issue(user.id), user

    async def login(self, email: str, password: str) -> Tuple[str, UserDB]:
        """
        Verify credentials and issue a token.

        Raises:
            AuthenticationError: on unknown email or wrong password (same message)
        """
        user = await self.users.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise AuthenticationError(INVALID_CREDENTIALS)

        return self.signer.issue(user.id), user

    async def resolve_user(self, token: str) -> UserDB:
        """
        Map a bearer token to its user.

        Raises:
            AuthenticationError: if the token is invalid, expired or its user is gone
        """
        user_id = self.signer.resolve(token)
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise AuthenticationError("User not found")
        return user
