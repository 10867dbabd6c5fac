"""Test fixtures — a fresh in-memory database per test.

Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own SQLite (aiosqlite) in-memory engine. StaticPool
   keeps the single connection alive so every session sees the same data.
2. Tables are created from the ORM metadata, so no migrations are needed.
3. The app's get_db dependency is overridden to hand out that session.

Argon2 costs are turned down before anything imports ephemeris.config,
otherwise every registration would spend 64 MiB and several rounds.
"""

import os

os.environ.setdefault("EPHEMERIS_ARGON2_TIME_COST", "1")
os.environ.setdefault("EPHEMERIS_ARGON2_MEMORY_COST", "1024")
os.environ.setdefault("EPHEMERIS_ARGON2_PARALLELISM", "1")

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from ephemeris.db.engine import get_db  # noqa: E402
from ephemeris.db.models import Base  # noqa: E402
from ephemeris.main import app  # noqa: E402

TEST_DB_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture()
async def db_session():
    """Per-test session on a throwaway in-memory database."""
    engine = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest_asyncio.fixture()
async def client(db_session):
    """HTTP client with the app's get_db overridden.

    Auth is NOT mocked: tests register and log in for real and send the
    token as a bearer header, so the whole token pipeline is exercised.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
