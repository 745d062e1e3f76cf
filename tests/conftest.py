"""
Shared pytest fixtures for all tests.

This module provides common fixtures for database sessions, settings and
the dependency container.
"""

import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Ensure test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["TESTING"] = "true"


# ============================================================================
# SETTINGS FIXTURES
# ============================================================================


@pytest.fixture
def test_settings():
    """Settings pointing at local test endpoints."""
    from app.config.settings import Settings

    return Settings(
        ENVIRONMENT="test",
        DEBUG=True,
        FUNCTIONS_BASE_URL="https://functions.test/v1",
        STORAGE_BASE_URL="https://storage.test/v1",
        SENTRY_DSN=None,
    )


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def db_url() -> str:
    """Return test database URL."""
    return os.getenv(
        "TEST_DATABASE_URL",
        "postgresql+asyncpg://postgres:@localhost/clinic_test",
    )


@pytest_asyncio.fixture
async def async_engine(db_url: str):
    """Create async database engine for testing."""
    engine = create_async_engine(db_url, echo=False, pool_pre_ping=True)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database session for each test.

    Each test gets its own session that is rolled back after the test completes.
    """
    factory = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def mock_db_session():
    """Create a mock async database session."""
    session = AsyncMock(spec=AsyncSession)
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.get = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    return session


# ============================================================================
# DEPENDENCY CONTAINER FIXTURES
# ============================================================================


@pytest.fixture
def container(test_settings):
    """DependencyContainer built from test settings; the global one is reset afterwards."""
    from app.core.container import DependencyContainer, reset_container

    yield DependencyContainer(test_settings)
    reset_container()
