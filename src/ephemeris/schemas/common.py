"""Shared pydantic bases.

Responses use camelCase keys (createdAt, updatedAt) and are read straight
from ORM objects. Both the attribute name and the camelCase alias are
accepted on input, so FastAPI can re-validate what it serialized.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from ephemeris.db.paginate import Page

T = TypeVar("T")


class ApiModel(BaseModel):
    model_config = {
        "from_attributes": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class PageRead(ApiModel, Generic[T]):
    """Envelope for paginated listings."""

    items: list[T]
    total: int
    offset: int
    limit: int


def page_body(page: Page[Any]) -> dict[str, Any]:
    """Plain dict for a Page, so FastAPI validates the items from attributes."""
    return {
        "items": page.items,
        "total": page.total,
        "offset": page.offset,
        "limit": page.limit,
    }
