"""
Top-level pytest configuration.

Provides:
  - A fresh in-memory SQLite database (aiosqlite) with all tables per test.
  - A db_session fixture bound to that database.
  - An async_client fixture wired to the FastAPI app with Redis replaced by
    fakeredis.
  - Bearer token fixtures for a test user.
"""

from __future__ import annotations

import os
import uuid
from typing import AsyncGenerator

# ---------------------------------------------------------------------------
# Environment must be set BEFORE any app module is imported so that
# pydantic-settings picks up the test values.
# ---------------------------------------------------------------------------
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_USER", "test")
os.environ.setdefault("POSTGRES_PASSWORD", "test")
os.environ.setdefault("POSTGRES_DB", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-32c")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("PREFERENCE_LOCK_WAIT_SECONDS", "0.2")

import fakeredis
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)


# ---------------------------------------------------------------------------
# Per-test engine (SQLite in-memory, shared via StaticPool so every session in
# a test sees the same data). A fresh database per test keeps commits made by
# the service layer from leaking into other tests.
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine():
    """Create the SQLite test engine and all tables."""
    from app.core.database import Base

    # Force model modules to load so their tables register on Base.metadata
    import app.models.content_interaction  # noqa: F401
    import app.models.user_preference      # noqa: F401

    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for the current test."""
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Redis mock: fakeredis lets the preference lock run without a real
# Redis server.
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def mock_redis(monkeypatch):
    """Replace the Redis client with an in-process fakeredis instance."""
    fake_redis = fakeredis.FakeAsyncRedis(decode_responses=True)

    async def _get_redis():
        return fake_redis

    monkeypatch.setattr("app.core.cache.get_redis", _get_redis)
    return fake_redis


# ---------------------------------------------------------------------------
# Override FastAPI database dependency to use the test database.
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide an httpx AsyncClient backed by the FastAPI app.

    Each request gets its own session on the shared in-memory database, the
    way the production get_db dependency works.
    """
    from app.core.database import get_db
    from app.main import app

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Identity fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def user_token(user_id: uuid.UUID) -> str:
    """Valid access token for the test user."""
    from app.core.security import create_access_token
    return create_access_token(data={"sub": str(user_id)})


@pytest.fixture
def auth_headers(user_token: str) -> dict[str, str]:
    """Authorization headers for the test user."""
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def other_auth_headers() -> dict[str, str]:
    """Authorization headers for a second, unrelated user."""
    from app.core.security import create_access_token
    token = create_access_token(data={"sub": str(uuid.uuid4())})
    return {"Authorization": f"Bearer {token}"}
