"""Common test fixtures and configuration for pytest.

Settings are read when `tierwise` is first imported, so the environment is
prepared here before anything from the package is loaded.
"""

import os

os.environ.setdefault("FIRST_SUPERUSER", "admin@example.com")
os.environ.setdefault("AUTH_ENABLED", "false")
os.environ.setdefault("POSTGRES_PASSWORD", "tierwise-test")
os.environ.setdefault("RUN_DB_INIT", "false")

from typing import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from tierwise import models  # noqa: E402, F401
from tierwise.models._base import Base  # noqa: E402

# Import all fixtures so they are automatically available for all tests
from tests.fixtures.common import (  # noqa: E402, F401
    admin_ctx,
    admin_user,
    member_ctx,
    member_user,
    outsider_ctx,
    outsider_user,
    team,
)


# Mock DB Session for tests that must not touch storage
@pytest.fixture
async def mock_db():
    """Provide a mock DB session."""
    yield AsyncMock(spec=AsyncSession)


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite engine with all tables for each test function."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new database session.

    Each test gets a fresh database, so no cleanup is needed.
    """
    async with AsyncSession(db_engine, expire_on_commit=False) as session:
        yield session
