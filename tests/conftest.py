"""
Pytest configuration and fixtures for Late Edition tests.

Blob storage runs on a LocalBlobBackend under tmp_path and the database is an
in-memory SQLite shared through a StaticPool, so no test needs the network.
"""
import os

# Settings are cached on first use; pin them before the app is imported.
os.environ["ADMIN_PASSWORD"] = "test-password"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["BLOB_BACKEND"] = "local"
os.environ["ENVIRONMENT"] = "development"

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from lateedition.auth.dependencies import COOKIE_NAME
from lateedition.auth.tokens import AdminTokenService
from lateedition.database import get_db_session
from lateedition.main import app
from lateedition.models import Base
from lateedition.storage.backends.local import LocalBlobBackend
from lateedition.storage.config import StorageConfig
from lateedition.storage.service import StorageService

ADMIN_PASSWORD = "test-password"


class FakeClock:
    """Settable clock for timestamp and expiry tests."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


# ============================================
# Storage
# ============================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 2, 9, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def blob_root(tmp_path):
    return tmp_path / "blobs"


@pytest.fixture
def backend(blob_root) -> LocalBlobBackend:
    return LocalBlobBackend(blob_root)


@pytest.fixture
def storage_config(blob_root) -> StorageConfig:
    return StorageConfig(root=str(blob_root))


@pytest.fixture
def storage(storage_config, backend, clock) -> StorageService:
    return StorageService(storage_config, backend, clock=clock)


# ============================================
# Database
# ============================================

@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ============================================
# API
# ============================================

@pytest.fixture
def admin_token() -> str:
    return AdminTokenService(ADMIN_PASSWORD).issue()


@pytest.fixture
async def client(storage, session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated client against the app with test storage and database."""

    async def override_get_db_session():
        async with session_factory() as session:
            yield session
            await session.commit()

    app.state.storage = storage
    app.dependency_overrides[get_db_session] = override_get_db_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client, admin_token) -> AsyncClient:
    """The same client, carrying a valid admin cookie."""
    client.cookies.set(COOKIE_NAME, admin_token)
    return client


# ============================================
# Pytest Configuration
# ============================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "fast: Fast unit tests (no I/O beyond tmp_path)"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that drive the FastAPI app end to end"
    )
