"""Async SQLAlchemy engine and session factory.

One engine per process with a bounded connection pool. It is checked at
startup (``check_connection`` fails fast if the store is unreachable) and
disposed at shutdown. Request handlers never touch the engine directly:
they receive an AsyncSession through the ``get_db`` dependency, which is
closed on every exit path.
"""

from typing import AsyncIterator

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ephemeris.config import settings
from ephemeris.db.models import Base

logger = structlog.get_logger()

# Connection pool: pool_size steady connections, plus max_overflow on bursts.
# echo=True in debug to see SQL queries.
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
)

# Session factory — each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def check_connection(bind: AsyncEngine = engine) -> None:
    """Open one pooled connection and run a trivial query.

    Called from the app lifespan; any error propagates and aborts startup.
    """
    logger.info("db.pool_creating", pool_size=settings.db_pool_size)
    async with bind.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("db.pool_ready")


async def create_tables(bind: AsyncEngine = engine) -> None:
    """Create every table known to the ORM metadata (idempotent)."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
