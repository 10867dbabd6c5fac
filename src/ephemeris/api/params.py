"""Query and path parameters shared by the routers.

Numbers are bounded here so an out-of-range value is rejected as a 400
before it can reach the database driver.
"""

from typing import Annotated

from fastapi import Path, Query

from ephemeris.db.models import MAX_INT_ID
from ephemeris.db.paginate import MAX_OFFSET, Direction
from ephemeris.errors import ValidationError

# Integer primary key, in a path or a query string
RecordId = Annotated[int, Path(ge=1, le=MAX_INT_ID)]
RecordRef = Annotated[int, Query(ge=1, le=MAX_INT_ID)]

PageOffset = Annotated[int, Query(ge=0, le=MAX_OFFSET)]


def sort_direction(direction: str = Query("desc", description="asc or desc")) -> Direction:
    """Case-insensitive ``direction`` query parameter."""
    try:
        return Direction.parse(direction)
    except ValueError as e:
        raise ValidationError("Invalid request.", errors={"direction": [str(e)]}) from None
