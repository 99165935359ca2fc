"""
IstoEuQuero Backend: Exception Hierarchy
=========================================

What:  Typed errors raised by the service and store client layers.
How:   Every error carries a (kind, message, upstream_status) triple.
       Services never pick HTTP status codes; `http_status_for()` maps the
       kind to a transport status and `error_body()` builds the JSON body.
       Both run only in the exception handlers registered by main.py.

Exception Hierarchy:
    GatewayError (base)
    ├── ValidationError   kind=validation  → 400
    ├── NotFoundError     kind=not_found   → 404
    └── UpstreamError     kind=upstream    → upstream status, or 500
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UPSTREAM = "upstream"
    INTERNAL = "internal"


class GatewayError(Exception):
    """
    Base exception for all gateway errors.

    Attributes:
        kind:             ErrorKind of this failure
        message:          Text returned to the client in the `error` field
        upstream_status:  Status reported by the external store, if any
        context:          Debug info (logged, never returned to the client)
    """

    kind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        upstream_status: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.upstream_status = upstream_status
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(GatewayError):
    """
    A required field is missing from the request body.

    Raised before any outbound call is made.
    """

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str = "Validation failed",
        fields: Optional[tuple] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["fields"] = list(fields)
        super().__init__(message=message, context=ctx)
        self.fields = fields or ()


class NotFoundError(GatewayError):
    """The store returned no record for the requested id."""

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        message: str = "Recurso não encontrado",
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class UpstreamError(GatewayError):
    """
    The external store answered with a non-2xx status or could not be reached.

    `upstream_status` is None for transport failures (refused connection,
    DNS, malformed base URL). `message` holds the store's own text and may be
    empty when the failure produced none; the service substitutes its
    per-operation fallback in that case.
    """

    kind = ErrorKind.UPSTREAM

    def __init__(
        self,
        message: str = "",
        upstream_status: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, upstream_status=upstream_status, context=context)


# ══════════════════════════════════════════════════════════════════════════
# Boundary Translation
# ══════════════════════════════════════════════════════════════════════════

_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
}


def http_status_for(exc: GatewayError) -> int:
    """Maps an error to the HTTP status returned to the client."""
    if exc.kind is ErrorKind.UPSTREAM:
        return exc.upstream_status or 500
    return _STATUS_BY_KIND.get(exc.kind, 500)


def error_body(exc: GatewayError, request_id: str = "") -> Dict[str, Any]:
    """
    Builds the JSON error body for a gateway error.

    Upstream messages are passed through verbatim. This is the one place
    that decides what store text reaches clients.
    """
    return {
        "error": exc.message,
        "kind": exc.kind.value,
        "request_id": request_id,
    }


INTERNAL_ERROR_MESSAGE = "Erro interno do servidor"


def internal_error_body(request_id: str = "") -> Dict[str, Any]:
    """Body for failures that are not GatewayErrors; details stay in the logs."""
    return {
        "error": INTERNAL_ERROR_MESSAGE,
        "kind": ErrorKind.INTERNAL.value,
        "request_id": request_id,
    }
