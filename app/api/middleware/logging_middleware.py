"""
Request logging middleware for FastAPI application.

Logs every API call with a correlation id, the acting user and timing.
"""

import logging
import time
import uuid
from collections.abc import Callable
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
USER_HEADER = "X-User-Id"
RESPONSE_TIME_HEADER = "X-Response-Time-Ms"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    HTTP middleware for request/response logging.

    The correlation id is taken from the incoming header when present and
    echoed back on the response.
    """

    EXCLUDE_PATHS: tuple[str, ...] = ("/health",)

    def __init__(self, app: ASGIApp, slow_request_ms: float = 2000.0) -> None:
        """
        Initialize logging middleware.

        Args:
            app: ASGI application
            slow_request_ms: Requests slower than this are logged as warnings
        """
        super().__init__(app)
        self._slow_request_ms = slow_request_ms

    def _should_log(self, path: str) -> bool:
        return not any(path.startswith(exclude) for exclude in self.EXCLUDE_PATHS)

    @staticmethod
    def _generate_correlation_id() -> str:
        return uuid.uuid4().hex[:8]

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or self._generate_correlation_id()
        request.state.correlation_id = correlation_id

        if not self._should_log(request.url.path):
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            return response

        actor = request.headers.get(USER_HEADER, "anonymous")
        start_time = time.perf_counter()
        logger.info(f"[{correlation_id}] --> {request.method} {request.url.path} by {actor}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"[{correlation_id}] <-- {request.method} {request.url.path} ERROR in {duration_ms:.2f}ms: {e}"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        if response.status_code >= 400 or duration_ms > self._slow_request_ms:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO
        logger.log(
            log_level,
            f"[{correlation_id}] <-- {request.method} {request.url.path} "
            f"{response.status_code} in {duration_ms:.2f}ms",
        )

        response.headers[CORRELATION_HEADER] = correlation_id
        response.headers[RESPONSE_TIME_HEADER] = f"{duration_ms:.2f}"
        return response
