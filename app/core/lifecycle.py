"""
Application lifecycle management using the FastAPI lifespan pattern.

This module follows SRP by handling only application startup/shutdown logic.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config.settings import get_settings
from app.core.container import get_container, reset_container
from app.database.async_db import dispose_async_engine

logger = logging.getLogger(__name__)


class LifecycleManager:
    """
    Manages application lifecycle events.

    Handles startup checks and graceful shutdown of shared resources.
    """

    def __init__(self) -> None:
        self._initialized = False

    async def startup(self) -> None:
        """Execute startup tasks."""
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        logger.info("Starting application lifecycle...")

        self._verify_configurations()
        get_container()

        self._initialized = True
        logger.info("Application lifecycle startup completed")

    async def shutdown(self) -> None:
        """Close HTTP clients and the database engine."""
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")

        try:
            await get_container().aclose()
        except Exception as e:
            logger.error(f"Error closing integration clients: {e}")
        reset_container()

        await dispose_async_engine()

        self._initialized = False
        logger.info("Application lifecycle shutdown completed")

    def _verify_configurations(self) -> None:
        """Log integrations that are not configured."""
        settings = get_settings()
        if not settings.FUNCTIONS_BASE_URL:
            logger.warning("FUNCTIONS_BASE_URL not configured - calendar sync and notifications will fail")
        if not settings.STORAGE_BASE_URL:
            logger.warning("STORAGE_BASE_URL not configured - treatment attachments cannot be uploaded")
        if not settings.SENTRY_DSN:
            logger.info("Sentry disabled (SENTRY_DSN not set)")


# Global lifecycle manager instance
_lifecycle_manager: LifecycleManager | None = None


def get_lifecycle_manager() -> LifecycleManager:
    """Get or create the global lifecycle manager instance."""
    global _lifecycle_manager
    if _lifecycle_manager is None:
        _lifecycle_manager = LifecycleManager()
    return _lifecycle_manager


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Usage:
        app = FastAPI(lifespan=lifespan)
    """
    lifecycle = get_lifecycle_manager()

    await lifecycle.startup()

    yield

    await lifecycle.shutdown()
