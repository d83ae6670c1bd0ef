"""Database connection and session management.

Async SQLAlchemy setup for SQLite (dev) and PostgreSQL (prod). Only site
settings and event RSVPs live here; posts, events, albums and staff are JSON
documents in blob storage (see lateedition.storage).

Engine behaviour is driven by Settings:
    DB_ECHO          log every SQL statement
    DB_POOL_SIZE     persistent PostgreSQL connections
    DB_MAX_OVERFLOW  burst connections above the pool size

Examples:
    >>> from lateedition.database import get_session, init_db
    >>> await init_db()  # Create tables
    >>> async with get_session() as session:
    ...     await rsvp_to_event(session, "ev1", name="Ada", email="ada@example.com")

Tests:
    - tests/unit/test_database.py
    - tests/unit/test_rsvps.py
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from lateedition.config import get_settings

logger = logging.getLogger(__name__)

# Lazily built on first use, dropped by close_db()
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def _redact(url: str) -> str:
    """Strip credentials from a connection string for logging."""
    return url.split("@")[-1]


def get_engine() -> AsyncEngine:
    """Get or create the async database engine.

    Returns:
        AsyncEngine: Shared engine for the process.

    Note:
        SQLite connections get WAL journaling, foreign keys and a 5s busy
        timeout so concurrent RSVP writers wait instead of failing.
        PostgreSQL gets a pre-pinged pool sized from DB_POOL_SIZE and
        DB_MAX_OVERFLOW.
    """
    global _engine

    if _engine is None:
        settings = get_settings()

        if settings.is_sqlite:
            _engine = create_async_engine(
                settings.DATABASE_URL,
                echo=settings.DB_ECHO,
                connect_args={"check_same_thread": False},
            )

            @event.listens_for(_engine.sync_engine, "connect")
            def set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.execute("PRAGMA busy_timeout=5000")
                cursor.close()

        else:
            _engine = create_async_engine(
                settings.DATABASE_URL,
                echo=settings.DB_ECHO,
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_pre_ping=True,
            )

        logger.info(f"Database engine created: {_redact(settings.DATABASE_URL)}")

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the session factory bound to get_engine().

    Sessions keep loaded attributes after commit so route handlers can
    serialize rows once the transaction is closed.
    """
    global _async_session_factory

    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    return _async_session_factory


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Open a session as an async context manager.

    Yields:
        AsyncSession: Committed when the block exits cleanly, rolled back
        (and the error re-raised) otherwise.

    Examples:
        >>> async with get_session() as session:
        ...     await set_setting(session, "hero_video", url)
    """
    session = get_session_factory()()

    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def init_db() -> None:
    """Create the site_settings and rsvps tables if they are missing."""
    from lateedition.models import Base

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables created")


async def check_db_connection() -> bool:
    """Run ``SELECT 1`` for the health endpoint.

    Returns:
        bool: False (with the error logged) when the database is unreachable.
    """
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


async def close_db() -> None:
    """Dispose of the engine. The next get_engine() call builds a fresh one."""
    global _engine, _async_session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
        logger.info("Database connections closed")


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped session.

    Examples:
        >>> @router.post("/{event_id}/rsvp")
        ... async def submit(session: AsyncSession = Depends(get_db_session)):
        ...     ...
    """
    async with get_session() as session:
        yield session
