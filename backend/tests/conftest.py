"""
Postboard Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the test suite.
How:   Environment variables are set before any app import, so the module
       level `app.main.app` can be built. API tests use their own app wired to
       an in-memory SQLite database through aiosqlite.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock standing in for AsyncSession
    ├── test_settings:   Settings for a development app on SQLite
    ├── db_engine:       In-memory SQLite engine with the schema created
    ├── db_session:      Real AsyncSession on db_engine
    ├── test_app:        create_app(test_settings, db_engine)
    ├── test_client:     HTTPX AsyncClient talking to test_app
    └── count_posts:     Coroutine returning the number of stored posts
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must happen BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_LEVEL"] = "WARNING"

from app.config import Settings  # noqa: E402
from app.database import Base, build_session_factory  # noqa: E402
from app.main import create_app  # noqa: E402
from app.models.post import Post  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.flush.side_effect = SQLAlchemyError("boom")
    """
    session = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def test_settings():
    return Settings(
        database_url="sqlite+aiosqlite://",
        environment="development",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite shared through a single connection (StaticPool), so every
    session in a test sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    async with build_session_factory(db_engine)() as session:
        yield session


@pytest.fixture
def test_app(test_settings, db_engine):
    return create_app(test_settings, db_engine)


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server needed).

    Usage:
        response = await test_client.post("/api/posts", json={...})
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def count_posts(db_engine):
    """Returns a coroutine function counting rows in the posts table."""

    async def _count() -> int:
        async with build_session_factory(db_engine)() as session:
            result = await session.execute(select(func.count(Post.id)))
            return result.scalar_one()

    return _count
