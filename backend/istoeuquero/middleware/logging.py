"""
IstoEuQuero Backend: Request Logging Middleware
================================================

What:  One access log line per request: method, path, status, duration, request ID.
How:   Times the downstream call and logs at a level chosen by status class
       (5xx ERROR, 4xx WARNING, otherwise INFO). GET /health is not logged.
Who:   Every request to the gateway, via Starlette middleware.
When:  After RequestIDMiddleware, so each line carries the request ID.

Log line:
    PUT /items/42/buy 404 12.3ms [a1b2c3d4] from 203.0.113.7

Why:
    Gift givers reach the gateway from a shared wishlist link, so the access
    log is the one place to see which wishlist or item a failing call
    touched. Uptime checks poll /health often enough that their
    lines would drown the rest.

What we log vs what we DON'T log (privacy):
    ✅ Log: method, path (holds only store ids), status, duration, request ID, client IP
    ❌ Don't log: request bodies (buyer names, e-mail addresses), credentials
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from istoeuquero.middleware.request_id import request_id_var

logger = logging.getLogger("istoeuquero.access")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request once its response is ready."""

    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        rid = request_id_var.get("")

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
