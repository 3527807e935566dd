"""
Postboard Backend: Database Engine & Session Management
========================================================

What:  Async SQLAlchemy engine construction, session factory, and the
       per-request session dependency.
How:   create_app() builds one engine per application and stores it, together
       with its session factory, on `app.state`. Route dependencies read the
       factory from the running app, so nothing here is a module global and
       tests can hand in their own engine.

Connection Pooling:
    pool_size=15, max_overflow=0:  at most 15 connections per process
    pool_pre_ping:                 stale connections are replaced before use
    command_timeout=45s:           asyncpg drops a command that sits idle longer

Every connection the pool invalidates (lost socket, timeout) is logged as a
warning, so disconnects show up between startup and shutdown.

SQLite URLs (used by the test suite) skip the pool arguments because the
aiosqlite dialect manages its own pool.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic reads for autogenerate.
    """
    pass


# ── Engine & Session Factory ──────────────────────────────────────────────
def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database URL.

    The engine is lazy: no connection is opened until the first query.
    """
    url = make_url(settings.database_url)
    engine_kwargs: Dict[str, Any] = {
        # Echo SQL only when someone explicitly asked for DEBUG logs
        "echo": settings.log_level == "DEBUG",
    }

    if url.get_backend_name() != "sqlite":
        engine_kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=0,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        if url.get_driver_name() == "asyncpg":
            engine_kwargs["connect_args"] = {"command_timeout": settings.db_socket_timeout}

    engine = create_async_engine(url, **engine_kwargs)
    event.listen(engine.sync_engine, "invalidate", log_connection_invalidated)
    return engine


def log_connection_invalidated(dbapi_connection, connection_record, exception) -> None:
    """Pool listener for connections the pool has dropped."""
    if exception is not None:
        logger.warning("Database disconnected: %s", exception)
    else:
        logger.warning("Database connection invalidated")


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps attributes readable after the service commits
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from the factory stored on app.state
        2. Yields it to the route handler
        3. On success: commits anything still pending
        4. On error: rolls back, then re-raises for the error handlers
        5. Always: closes the session (returns the connection to the pool)
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def connect(engine: AsyncEngine) -> bool:
    """
    Open one connection to confirm the database is reachable.

    Failures are logged, not raised: the server keeps starting and requests
    that need the database fail individually until it comes back.
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:
        logger.error("Database connection error: %s", exc)
        return False

    logger.info("Connected to %s database successfully", engine.url.database or engine.url.get_backend_name())
    return True


async def create_tables(engine: AsyncEngine) -> None:
    """Create any missing tables. Development only; production runs Alembic."""
    # Models must be imported so they register with Base.metadata
    from app.models import post  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """Close every pooled connection. Called from the lifespan on shutdown."""
    await engine.dispose()
    logger.info("Database connection closed")
