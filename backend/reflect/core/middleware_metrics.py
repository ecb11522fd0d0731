"""
Middleware for collecting HTTP request metrics
"""
import re
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from reflect.core.metrics import (http_errors_total,
                                  http_request_duration_seconds,
                                  http_requests_total)

_UUID_SEGMENT = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def normalize_endpoint(path: str) -> str:
    """Collapse record ids in a path so metrics aggregate per route"""
    parts = path.split("/")
    return "/".join("{id}" if _UUID_SEGMENT.match(part) else part for part in parts)


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Middleware to collect HTTP request metrics for Prometheus
    """

    async def dispatch(self, request: Request, call_next):
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.time()
        status_code = 500
        error_type = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception as e:
            error_type = type(e).__name__
            raise
        finally:
            duration = time.time() - start_time
            labels = {
                "method": request.method,
                "endpoint": normalize_endpoint(request.url.path),
                "status_code": str(status_code),
            }
            http_requests_total.labels(**labels).inc()
            http_request_duration_seconds.labels(**labels).observe(duration)
            if status_code >= 400:
                http_errors_total.labels(
                    **labels,
                    error_type=error_type or f"http_{status_code}"
                ).inc()
