"""FastAPI auth dependencies.

These are used as Depends() in route handlers to turn the bearer token
from the Authorization header into the calling user.

A token that was never issued and a token that has expired produce the
same 401 with the same message, so a client can't probe whether some
token id ever existed.
"""

import uuid
from dataclasses import dataclass
from typing import Optional, Protocol

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from ephemeris.auth.tokens import TokenExpiredError, TokenNotFoundError, TokenService
from ephemeris.db.engine import get_db
from ephemeris.db.models import Token, User
from ephemeris.errors import AuthenticationError, AuthorizationError

UNKNOWN_TOKEN = "Unknown or expired token."


class Authored(Protocol):
    author: str


@dataclass
class CurrentSession:
    """The authenticated user together with the token they presented."""

    user: User
    token: Token


async def resolve_session(db: AsyncSession, token_id: uuid.UUID) -> CurrentSession:
    """Map a token id to its live token and owning user.

    Not-found, expired and ownerless tokens collapse into one
    AuthenticationError. Other failures (the store being down) propagate
    unchanged.
    """
    try:
        token = await TokenService(db).resolve(token_id)
    except (TokenNotFoundError, TokenExpiredError):
        raise AuthenticationError(UNKNOWN_TOKEN) from None

    user = await db.get(User, token.user_id)
    if user is None:
        # Orphaned token; its owner is gone
        raise AuthenticationError(UNKNOWN_TOKEN)
    return CurrentSession(user=user, token=token)


async def authenticate(db: AsyncSession, token_id: uuid.UUID) -> User:
    return (await resolve_session(db, token_id)).user


def bearer_token(authorization: Optional[str] = Header(None)) -> uuid.UUID:
    """Extract the token id from ``Authorization: Bearer <uuid>``."""
    if not authorization:
        raise AuthenticationError("Authentication required.")

    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        raise AuthenticationError("Authentication required.")

    try:
        return uuid.UUID(credentials.strip())
    except ValueError:
        # A malformed id can't exist, report it like any unknown token
        raise AuthenticationError(UNKNOWN_TOKEN) from None


async def get_current_session(
    token_id: uuid.UUID = Depends(bearer_token),
    db: AsyncSession = Depends(get_db),
) -> CurrentSession:
    return await resolve_session(db, token_id)


async def get_current_user(
    session: CurrentSession = Depends(get_current_session),
) -> User:
    """The "hard" auth dependency: 401 unless a live token is presented."""
    return session.user


def ensure_owner(user: User, record: Authored, action: str, kind: str) -> None:
    """Raise 403 unless ``user`` authored ``record``."""
    if user.username != record.author:
        raise AuthorizationError(f"You can't {action} this {kind}.")
