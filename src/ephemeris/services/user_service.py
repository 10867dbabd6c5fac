"""User service — registration, login and profile updates.

Login is where the credential verifier and the token lifecycle meet:
verify the argon2 hash, then issue a fresh session token.
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ephemeris.auth.password import hash_password, needs_rehash, verify_password
from ephemeris.auth.tokens import TokenService
from ephemeris.db.models import Token, User
from ephemeris.errors import AuthenticationError, ConflictError, NotFoundError

logger = structlog.get_logger()

INVALID_CREDENTIALS = "Invalid credentials."


class UserService:
    """Business logic for accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tokens = TokenService(db)

    async def find_by_name(self, username: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.username == username.lower())
        )
        return result.scalars().first()

    async def get_by_name(self, username: str) -> User:
        user = await self.find_by_name(username)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    async def register(self, username: str, password: str) -> User:
        """Create an account. ``username`` must already be validated."""
        username = username.lower()
        if await self.find_by_name(username) is not None:
            raise ConflictError("Username already in use.")

        user = User(username=username, password=hash_password(password))
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info("user.registered", username=user.username)
        return user

    async def login(self, username: str, password: str) -> Token:
        """Check credentials and issue a session token.

        An unknown username and a wrong password give the same error.
        """
        user = await self.find_by_name(username)
        if user is None or not verify_password(password, user.password):
            logger.info("user.login_failed")
            raise AuthenticationError(INVALID_CREDENTIALS)

        # Transparently upgrade hashes made with older cost parameters
        if needs_rehash(user.password):
            user.password = hash_password(password)
            await self.db.commit()
            logger.info("user.password_rehashed", username=user.username)

        token = await self.tokens.issue(user.id)
        logger.info("user.logged_in", username=user.username)
        return token

    async def logout(self, token_id: uuid.UUID) -> None:
        await self.tokens.revoke(token_id)

    async def update(self, user: User, about: str | None) -> User:
        user.about = about
        await self.db.commit()
        await self.db.refresh(user)
        return user
