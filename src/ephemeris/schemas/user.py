"""Pydantic schemas for users, logins and sessions.

``password`` and internal ids are never part of a response model.
Response models serialize timestamps as camelCase (createdAt / updatedAt).
"""

import string
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ephemeris.schemas.common import ApiModel

USERNAME_CHARS = frozenset(string.ascii_lowercase + string.digits + "._")


def check_username(username: str) -> str:
    """Validate a username and return it lowercased.

    A valid username
    - is 3 to 20 characters long,
    - contains only letters, digits, underscores, and periods, and
    - has no underscore or period following an underscore or a period.
    """
    if len(username) < 3:
        raise ValueError("Username must be at least 3 characters long.")
    if len(username) > 20:
        raise ValueError("Username can be at most 20 characters long.")
    lowered = username.lower()
    if not set(lowered) <= USERNAME_CHARS:
        raise ValueError(
            "Username can contain only letters, digits, underscores, and periods."
        )
    if any(pair in lowered for pair in ("..", "._", "_.", "__")):
        raise ValueError(
            "Username can't contain an underscore or a period following an "
            "underscore or a period."
        )
    return lowered


# ─── Requests ─────────────────────────────────────────────


class Registration(BaseModel):
    username: str
    password: str = Field(min_length=6)

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        return check_username(v)


class Login(BaseModel):
    username: str
    password: str


class UserUpdate(BaseModel):
    about: Optional[str] = Field(None, max_length=160)


# ─── Responses ────────────────────────────────────────────


class UserRead(ApiModel):
    username: str
    about: Optional[str] = None
    created_at: datetime


class TokenRead(ApiModel):
    id: uuid.UUID
    expiration: datetime
    created_at: datetime
    updated_at: Optional[datetime] = None


class SessionRead(ApiModel):
    expires: datetime
    user: UserRead
