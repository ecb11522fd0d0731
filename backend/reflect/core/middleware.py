"""
FastAPI middleware for request context and logging
"""
import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from reflect.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

# Probes and scrapes are logged at DEBUG only
QUIET_PATHS = frozenset({"/health", "/health/detailed", "/metrics"})


def completion_level(path: str, status_code: int) -> int:
    """Log level of the per-request completion line"""
    if status_code >= 500:
        return logging.ERROR
    if path in QUIET_PATHS:
        return logging.DEBUG
    if status_code >= 400 and status_code not in (401, 404):
        return logging.WARNING
    return logging.INFO


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """
    Attach a request id and request fields to every log line of a request

    An incoming ``X-Request-ID`` is reused so the browser page and the API
    calls it makes can be correlated; otherwise a new id is generated.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        path = request.url.path

        LoggingConfig.set_context(
            request_id=request_id,
            method=request.method,
            path=path,
            client_host=request.client.host if request.client else None,
        )

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                exc_info=True,
                extra={
                    "error_type": type(e).__name__,
                    "duration_ms": int((time.time() - start_time) * 1000),
                }
            )
            raise
        else:
            logger.log(
                completion_level(path, response.status_code),
                "Request completed",
                extra={
                    "status_code": response.status_code,
                    "duration_ms": int((time.time() - start_time) * 1000),
                }
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            LoggingConfig.clear_context()
