"""
Logging Middleware for Correlation ID and Request Tracking

Generates or extracts a correlation ID for every request and binds it, with
the catalog session id when the path carries one, to all log lines.
"""

import re
import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from structlog.contextvars import bind_contextvars, clear_contextvars

logger = structlog.get_logger(__name__)

_SESSION_PATH = re.compile(r"/api/v1/catalog/sessions/([A-Za-z0-9_-]+)")


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to inject correlation IDs and request context into all logs.

    Features:
    - Accepts correlation_id from X-Correlation-ID header, or generates one
    - Binds correlation_id and catalog_session_id to contextvars
    - Adds correlation_id to response headers
    - Logs request/response timing
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        clear_contextvars()

        correlation_id = request.headers.get("X-Correlation-ID")
        if not correlation_id:
            correlation_id = str(uuid.uuid4())

        client_ip = request.client.host if request.client else "unknown"

        bind_contextvars(
            correlation_id=correlation_id,
            request_method=request.method,
            request_path=request.url.path,
            client_ip=client_ip,
        )

        match = _SESSION_PATH.match(request.url.path)
        if match:
            bind_contextvars(catalog_session_id=match.group(1))

        start_time = time.time()

        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            query_params=dict(request.query_params),
        )

        try:
            response = await call_next(request)

            duration_ms = int((time.time() - start_time) * 1000)
            response.headers["X-Correlation-ID"] = correlation_id

            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

            return response

        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)

            logger.error(
                "request_failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=duration_ms,
                exc_info=True,
            )

            # Re-raise to let FastAPI handle it
            raise

        finally:
            clear_contextvars()
