"""
IstoEuQuero Backend: Request ID Middleware
===========================================

What:  Assigns a correlation ID to each request and returns it in X-Request-ID.
How:   Reuses the client's X-Request-ID header when present, otherwise
       generates a short UUID. The ID is kept in a ContextVar for loggers and
       exception handlers, and in request.state for route handlers.
When:  Outermost application middleware; runs before logging and CORS.

Why:
    A store failure is logged once with its table, method and store status
    ("Upstream error (409): duplicate key ... [a1b2c3d4]"). The client gets
    the same ID in the error body and the header, so a report from the app
    maps straight to that log line.

    Unexpected exceptions are turned into the internal-error response here
    rather than left to Starlette's ServerErrorMiddleware. That middleware
    sits outside this one, so a response built there would go out without
    the X-Request-ID header.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from istoeuquero.exceptions import internal_error_body

logger = logging.getLogger(__name__)

# Coroutine-local: concurrent requests share the event loop thread
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Stores the request's correlation ID and echoes it on every response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
            response = JSONResponse(status_code=500, content=internal_error_body(rid))

        response.headers[REQUEST_ID_HEADER] = rid
        return response
