"""Pydantic schemas for comments."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ephemeris.db.models import MAX_INT_ID
from ephemeris.schemas.common import ApiModel


class CommentUpdate(BaseModel):
    message: str = Field(min_length=1, max_length=140)

    @field_validator("message")
    @classmethod
    def clean_message(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Message can't be empty.")
        return v


class CommentCreate(CommentUpdate):
    post: int = Field(ge=1, le=MAX_INT_ID)


class CommentRead(ApiModel):
    id: int
    author: str
    post: int
    message: str
    created_at: datetime
    updated_at: Optional[datetime] = None
