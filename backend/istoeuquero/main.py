"""
IstoEuQuero Backend: FastAPI Application Factory
=================================================

What:  Builds the FastAPI app: settings, store client, middleware, routes,
       exception handlers and lifecycle.
How:   `create_app(settings, store)` wires everything explicitly. The module
       level `app` is what `uvicorn istoeuquero.main:app` serves; `run()` is
       the `istoeuquero` console script.

Lifecycle:
    Startup:
    1. Configure logging
    2. Warn about missing store credentials (startup continues)
    Shutdown:
    1. Close the store client's connection pool
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from istoeuquero import __version__
from istoeuquero.config import Settings
from istoeuquero.exceptions import (
    ErrorKind,
    GatewayError,
    ValidationError,
    error_body,
    internal_error_body,
    http_status_for,
)
from istoeuquero.middleware.logging import RequestLoggingMiddleware
from istoeuquero.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from istoeuquero.routes import health, items, users, wishlists
from istoeuquero.services.store_client import SupabaseRestClient
from istoeuquero.services.wishlist_service import WishlistService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    setup_logging(settings.log_level)
    logger.info("IstoEuQuero Backend %s starting up...", __version__)

    for name in settings.missing_store_credentials():
        logger.warning("Missing environment variable %s; store calls will fail", name)

    logger.info("Store: %s", settings.supabase_url or "<unset>")

    yield

    logger.info("IstoEuQuero Backend shutting down...")
    await app.state.store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map gateway errors to HTTP responses.

    GatewayError            → http_status_for(exc), body from error_body(exc)
    RequestValidationError  → 400 (unparseable body, or a body that is not an object)
    Exception               → 500 for errors raised outside RequestIDMiddleware;
                              errors inside it are answered there, with the header
    """

    @app.exception_handler(GatewayError)
    async def handle_gateway_error(request: Request, exc: GatewayError):
        rid = request_id_var.get("")
        status = http_status_for(exc)
        if exc.kind is ErrorKind.UPSTREAM:
            logger.warning(
                "[%s] Upstream error (%s): %s | Context: %s",
                rid, exc.upstream_status, exc.message, exc.context,
            )
        else:
            logger.info("[%s] %s: %s", rid, exc.kind.value, exc.message)
        return JSONResponse(status_code=status, content=error_body(exc, rid))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        fields = tuple(
            str(err["loc"][-1]) for err in exc.errors() if err.get("loc")
        )
        error = ValidationError(message="Corpo da requisição inválido", fields=fields)
        logger.info("[%s] Invalid request body: %s", rid, exc.errors())
        return JSONResponse(status_code=400, content=error_body(error, rid))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(status_code=500, content=internal_error_body(rid))


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    store: Optional[SupabaseRestClient] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Gateway settings; read from the environment when omitted
        store:    Store client; built from `settings` when omitted
    """
    settings = settings or Settings()
    store = store or SupabaseRestClient(settings)

    app = FastAPI(
        title="IstoEuQuero API",
        description="Gift registry gateway: users, wishlists, items and purchase marking.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.wishlist_service = WishlistService(store, settings)

    # Last added runs first: RequestID → Logging → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "PUT", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "apikey"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(wishlists.router)
    app.include_router(items.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve `app` on HOST:PORT."""
    import uvicorn

    settings: Settings = app.state.settings
    setup_logging(settings.log_level)
    logger.info("IstoEuQuero Backend listening on port %d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
