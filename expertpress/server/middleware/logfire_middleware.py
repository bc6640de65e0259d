"""
Request Timing Middleware.

Times every request, reports it to Logfire when monitoring is on and adds an
``X-Process-Time`` header (milliseconds) to the response. Requests slower than
``SLOW_REQUEST_MS`` are logged as warnings together with the acting staff user.
"""

import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from expertpress.core.logging_config import get_logger
from expertpress.core.monitoring import log_api_request
from expertpress.server.core.config import settings

logger = get_logger(__name__)


class LogfireMiddleware(BaseHTTPMiddleware):
    """Middleware timing requests and reporting them to Logfire."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        method = request.method
        path = request.url.path
        staff_user = request.headers.get("x-user-id")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.error(
                f"API request failed: {method} {path}",
                exc_info=True,
                extra={"method": method, "path": path, "duration_ms": duration_ms, "error": str(e)},
            )
            log_api_request(method=method, path=path, status_code=500, duration_ms=duration_ms)
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        log_api_request(method=method, path=path, status_code=response.status_code, duration_ms=duration_ms)
        response.headers["X-Process-Time"] = f"{duration_ms:.2f}"

        if duration_ms > settings.slow_request_ms:
            logger.warning(
                f"Slow API request: {method} {path} took {duration_ms:.2f}ms",
                extra={
                    "method": method,
                    "path": path,
                    "duration_ms": duration_ms,
                    "status_code": response.status_code,
                    "staff_user": staff_user,
                },
            )

        return response
