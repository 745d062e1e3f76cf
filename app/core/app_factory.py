"""
Application factory for the clinic encounters API.

Builds the FastAPI app: error tracking, CORS for the clinic front end,
request logging, domain exception handlers, the clinic routes and the
health endpoints.
"""

import logging
from typing import Annotated, Any

import sentry_sdk
from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.api.exception_handlers import register_exception_handlers
from app.api.middleware.logging_middleware import (
    CORRELATION_HEADER,
    RESPONSE_TIME_HEADER,
    USER_HEADER,
    RequestLoggingMiddleware,
)
from app.api.router import api_router
from app.config.settings import Settings, get_settings
from app.core.lifecycle import lifespan
from app.database.async_db import get_async_engine

logger = logging.getLogger(__name__)

SERVICE_TAG = "clinic-encounters"


async def ping_database() -> bool:
    """True when the database answers a trivial query."""
    try:
        async with get_async_engine().connect() as connection:
            await connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database readiness check failed: {e}")
        return False


class AppFactory:
    """
    Factory for creating and configuring the clinic FastAPI application.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    def create_app(self) -> FastAPI:
        """
        Create and configure the FastAPI application.

        Returns:
            Configured FastAPI application instance.
        """
        self._configure_error_tracking()

        app = FastAPI(
            title=self._settings.PROJECT_NAME,
            description=self._settings.PROJECT_DESCRIPTION,
            version=self._settings.VERSION,
            docs_url=f"{self._settings.API_V1_STR}/docs" if self._settings.DEBUG else None,
            redoc_url=f"{self._settings.API_V1_STR}/redoc" if self._settings.DEBUG else None,
            lifespan=lifespan,
        )

        self._configure_middleware(app)
        register_exception_handlers(app)
        app.include_router(api_router, prefix=self._settings.API_V1_STR)
        self._configure_health_endpoints(app)

        logger.info(f"Application created: {self._settings.PROJECT_NAME} ({self._settings.ENVIRONMENT})")
        return app

    def _configure_error_tracking(self) -> None:
        """Initialise Sentry only when a DSN is configured."""
        if not self._settings.SENTRY_DSN:
            return
        sentry_sdk.init(
            dsn=self._settings.SENTRY_DSN,
            environment=self._settings.ENVIRONMENT,
            release=f"{SERVICE_TAG}@{self._settings.VERSION}",
            send_default_pii=True,
        )
        sentry_sdk.set_tag("service", SERVICE_TAG)
        logger.info("Sentry error tracking enabled")

    def _configure_middleware(self, app: FastAPI) -> None:
        """
        CORS is outermost so the front end can read the correlation id and
        timing headers that the logging middleware adds.
        """
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"] if self._settings.DEBUG else self._settings.cors_origin_list,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "OPTIONS"],
            allow_headers=["Authorization", "Content-Type", USER_HEADER, CORRELATION_HEADER],
            expose_headers=[CORRELATION_HEADER, RESPONSE_TIME_HEADER],
        )
        app.add_middleware(RequestLoggingMiddleware)

    def _integration_checks(self) -> dict[str, bool]:
        """Which outbound integrations have an endpoint configured."""
        return {
            "calendar_sync": bool(self._settings.FUNCTIONS_BASE_URL and self._settings.CALENDAR_SYNC_FUNCTION),
            "notifications": bool(self._settings.FUNCTIONS_BASE_URL and self._settings.NOTIFICATION_FUNCTION),
            "file_storage": bool(self._settings.STORAGE_BASE_URL and self._settings.STORAGE_BUCKET),
        }

    def _configure_health_endpoints(self, app: FastAPI) -> None:
        settings = self._settings
        integration_checks = self._integration_checks

        @app.get("/health", tags=["health"])
        async def health_check() -> dict[str, str]:
            """Liveness: the process is up."""
            return {"status": "ok", "environment": settings.ENVIRONMENT}

        @app.get("/health/ready", tags=["health"])
        async def readiness_check(database_ok: Annotated[bool, Depends(ping_database)]) -> JSONResponse:
            """
            Readiness: the database answers. Integrations are reported and
            never fail readiness.
            """
            checks: dict[str, Any] = {"database": database_ok, **integration_checks()}
            return JSONResponse(
                status_code=status.HTTP_200_OK if database_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
                content={
                    "status": "ready" if database_ok else "unavailable",
                    "environment": settings.ENVIRONMENT,
                    "checks": checks,
                },
            )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create FastAPI application using the factory.

    Args:
        settings: Optional settings override
    """
    return AppFactory(settings).create_app()
