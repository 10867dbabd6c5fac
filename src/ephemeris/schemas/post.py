"""Pydantic schemas for posts."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ephemeris.schemas.common import ApiModel

# Query-string name → model column
POST_SORT_COLUMNS = {"id": "id", "createdAt": "created_at", "title": "title"}

PostSort = Literal["id", "createdAt", "title"]


class PostWrite(BaseModel):
    """Body for creating or replacing a post."""

    title: str = Field(min_length=1, max_length=100)
    subtitle: str = Field("", max_length=140)
    body: str

    @field_validator("body")
    @classmethod
    def strip_body(cls, v: str) -> str:
        return v.strip()


class PostRead(ApiModel):
    id: int
    author: str
    title: str
    subtitle: str
    body: str
    created_at: datetime
    updated_at: Optional[datetime] = None
