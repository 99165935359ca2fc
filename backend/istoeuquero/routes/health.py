"""
IstoEuQuero Backend: Liveness Routes
=====================================

What:  GET / (plain-text banner) and GET /health ({"ok": true}).
How:   Neither touches the external store; they only report that the
       process is serving requests.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from istoeuquero.schemas.wishlist import HealthResponse

router = APIRouter(tags=["Health"])

BANNER = "🚀 IstoEuQuero Backend online"


@router.get("/", response_class=PlainTextResponse, summary="Liveness banner")
async def root() -> str:
    return BANNER


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check() -> HealthResponse:
    return HealthResponse(ok=True)
