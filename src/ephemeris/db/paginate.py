"""Generic pagination for read queries.

``paginate(select(Post).where(...), offset)`` wraps any single-entity
SELECT and, on ``execute``, renders it as::

    SELECT t.*, count(*) OVER () AS total_count
    FROM (<query>) AS t
    ORDER BY t.<column> <direction>, t.<pk> <direction>
    LIMIT :limit OFFSET :offset

The window count is evaluated over the full filtered set before LIMIT and
OFFSET apply, so one round trip returns both the page and the number of
rows that matched. Rows come back as instances of the wrapped query's
entity; pagination changes row count and order, never shape.

Ties on the sort column are broken by the primary key in the same
direction so page boundaries are stable.
"""

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
from sqlalchemy.sql.elements import ColumnElement

T = TypeVar("T")

DEFAULT_LIMIT = 10
DEFAULT_COLUMN = "id"
# LIMIT and OFFSET are bound as signed 64-bit integers
MAX_OFFSET = 2**63 - 1


class Direction(enum.Enum):
    """Sort direction.

    Renders both as an ORDER BY keyword (``sql``) and as the comparison
    operator a cursor predicate needs to move forward in that order
    (``symbol``).
    """

    ASC = "asc"
    DESC = "desc"

    @property
    def sql(self) -> str:
        return self.name

    @property
    def symbol(self) -> str:
        return ">" if self is Direction.ASC else "<"

    def order(self, column: Any) -> ColumnElement:
        return column.asc() if self is Direction.ASC else column.desc()

    def compare(self, column: Any, value: Any) -> ColumnElement:
        """Predicate selecting rows that sort after ``value``."""
        return column > value if self is Direction.ASC else column < value

    @classmethod
    def parse(cls, value: str) -> "Direction":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown sort direction: {value!r}") from None

    def __str__(self) -> str:
        return self.sql


@dataclass(frozen=True)
class Page(Generic[T]):
    """One window of results plus the count of everything that matched."""

    items: list[T]
    total: int
    offset: int
    limit: int


@dataclass(frozen=True)
class Paginated(Generic[T]):
    """A read query decorated with ordering, limit, offset and window count.

    Immutable: the ``with_*`` builders return a new value.
    """

    query: Select = field(repr=False)
    offset: int = 0
    limit: int = DEFAULT_LIMIT
    column: str = DEFAULT_COLUMN
    direction: Direction = Direction.DESC

    def __post_init__(self):
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")
        if self.offset > MAX_OFFSET:
            raise ValueError(f"offset must be <= {MAX_OFFSET}, got {self.offset}")
        if self.limit < 0:
            raise ValueError(f"limit must be >= 0, got {self.limit}")

    # ─── Builders ────────────────────────────────────────

    def with_limit(self, limit: int) -> "Paginated[T]":
        return replace(self, limit=limit)

    def with_column(self, column: str) -> "Paginated[T]":
        return replace(self, column=column)

    def with_direction(self, direction: Direction) -> "Paginated[T]":
        return replace(self, direction=direction)

    # ─── Rendering ───────────────────────────────────────

    def entity(self) -> type:
        """The mapped class the wrapped query selects."""
        descriptions = self.query.column_descriptions
        if len(descriptions) != 1:
            raise TypeError("paginate() needs a query selecting exactly one entity")
        entity = descriptions[0].get("entity")
        if entity is None or descriptions[0].get("expr") is not entity:
            raise TypeError("paginate() needs a query selecting a mapped class")
        return entity

    def _window(self) -> tuple[Select, Any]:
        entity = self.entity()
        mapper = inspect(entity)
        if self.column not in mapper.column_attrs:
            raise ValueError(f"{entity.__name__} has no column {self.column!r}")

        subquery = self.query.subquery()
        row = aliased(entity, subquery)

        order_by = [self.direction.order(getattr(row, self.column))]
        for pk in mapper.primary_key:
            key = mapper.get_property_by_column(pk).key
            if key != self.column:
                order_by.append(self.direction.order(getattr(row, key)))

        statement = (
            select(row, func.count().over().label("total_count"))
            .order_by(*order_by)
            .limit(self.limit)
            .offset(self.offset)
        )
        return statement, subquery

    def statement(self) -> Select:
        return self._window()[0]

    # ─── Execution ───────────────────────────────────────

    async def execute(self, db: AsyncSession) -> Page[T]:
        statement, subquery = self._window()
        rows = (await db.execute(statement)).all()

        if rows:
            total = rows[0].total_count
        elif self.offset == 0 and self.limit > 0:
            total = 0
        else:
            # Empty window: no row carries the count, so ask for it directly.
            total = await db.scalar(select(func.count()).select_from(subquery))

        return Page(
            items=[r[0] for r in rows],
            total=int(total or 0),
            offset=self.offset,
            limit=self.limit,
        )


def paginate(query: Select, offset: int = 0) -> Paginated[Any]:
    """Wrap ``query`` with the default limit, id column and DESC order."""
    return Paginated(query=query, offset=offset)
