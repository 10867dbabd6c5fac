"""Session token lifecycle: issue, resolve, revoke.

A token is an opaque UUID handed to the client at login and sent back as
a bearer credential. Its row holds the owning user and an absolute
expiration. Validity is never stored: ``resolve`` compares the
expiration with the clock on every read.

Expiry is lazy. There is no sweeper; the read that finds an expired
token deletes it before reporting the expiry. That delete is not wrapped
in an explicit transaction, so two concurrent readers of the same expired
token may both issue it. Delete is idempotent, so whichever wins, the
row is gone and both callers see TokenExpiredError.
"""

import uuid
from datetime import timedelta

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ephemeris.config import settings
from ephemeris.db.models import Token, utcnow
from ephemeris.errors import InternalError, NotFoundError

logger = structlog.get_logger()


class TokenNotFoundError(NotFoundError):
    """No token with this id (never issued, revoked, or already expired)."""

    def __init__(self):
        super().__init__("Token not found.")


class TokenExpiredError(NotFoundError):
    """The token existed but its expiration has passed. It is now deleted."""

    def __init__(self):
        super().__init__("Token has expired.")


class TokenService:
    """Issues, resolves and revokes session tokens."""

    def __init__(self, db: AsyncSession, ttl: timedelta | None = None):
        self.db = db
        self.ttl = ttl if ttl is not None else timedelta(days=settings.token_ttl_days)

    async def issue(self, user_id: uuid.UUID) -> Token:
        """Create a token for ``user_id`` valid for ``ttl`` from now."""
        try:
            expiration = utcnow() + self.ttl
        except OverflowError as e:
            raise InternalError("Couldn't compute expiration date of token") from e

        token = Token(user_id=user_id, expiration=expiration)
        self.db.add(token)
        await self.db.commit()
        await self.db.refresh(token)
        return token

    async def resolve(self, token_id: uuid.UUID) -> Token:
        """Return the token if it exists and hasn't expired.

        Raises TokenNotFoundError or TokenExpiredError. An expired token is
        deleted first; if that delete fails the failure is logged and the
        expiry is still what gets reported.
        """
        result = await self.db.execute(select(Token).where(Token.id == token_id))
        token = result.scalars().first()
        if token is None:
            raise TokenNotFoundError()

        if token.is_expired():
            try:
                await self._delete(token_id)
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.warning("token.expired_cleanup_failed", error=str(e))
            raise TokenExpiredError()

        return token

    async def revoke(self, token_id: uuid.UUID) -> None:
        """Delete the token. Revoking an unknown token is a no-op."""
        await self._delete(token_id)

    async def _delete(self, token_id: uuid.UUID) -> None:
        await self.db.execute(delete(Token).where(Token.id == token_id))
        await self.db.commit()
