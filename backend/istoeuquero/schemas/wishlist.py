"""
IstoEuQuero Backend: Request/Response Schemas
==============================================

What:  Pydantic models for the gateway's JSON bodies.
How:   Request fields are all optional at the schema level; required-field
       presence is checked by WishlistService so that a missing field yields
       400 with a descriptive message instead of FastAPI's default 422.
       Field values are typed `Any`: whatever JSON value the client sends
       (`{"name": 123}`) is forwarded to the store unchanged, and the store
       decides whether it fits the column.
       Records returned by the store stay opaque dicts.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

# Written to an item's status column when it is bought
PURCHASED_STATUS = "purchased"

Record = Dict[str, Any]


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserCreate(BaseModel):
    """Body of POST /users. `name` is required."""
    name: Any = Field(default=None, description="Display name (required)")
    email: Any = Field(default=None, description="Contact e-mail")

    model_config = {
        "json_schema_extra": {"example": {"name": "Ana", "email": "ana@example.com"}}
    }


class WishlistCreate(BaseModel):
    """Body of POST /wishlists. `user_id` and `title` are required."""
    user_id: Any = Field(default=None, description="Owner id (required)")
    title: Any = Field(default=None, description="Wishlist title (required)")
    description: Any = Field(default=None)
    event_date: Any = Field(default=None, description="Event date, as stored by the store")

    model_config = {
        "json_schema_extra": {
            "example": {
                "user_id": "6f1c0d3e-0000-4000-8000-000000000001",
                "title": "Aniversário",
                "description": "Presentes para a festa",
                "event_date": "2025-12-20",
            }
        }
    }


class ItemCreate(BaseModel):
    """Body of POST /wishlists/{wishlist_id}/items. `name` is required."""
    name: Any = Field(default=None, description="Item name (required)")
    url: Any = Field(default=None, description="Where to buy it")


class ItemPurchase(BaseModel):
    """Body of PUT/PATCH /items/{item_id}/buy."""
    buyer_name: Any = Field(default=None, description="Who bought the item")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class WishlistDetail(BaseModel):
    """A wishlist record plus its items, oldest first."""
    wishlist: Record
    items: List[Record] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """
    Error body for every non-2xx response.

    Example:
        {"error": "Lista não encontrada", "kind": "not_found", "request_id": "a1b2c3d4"}
    """
    error: str = Field(description="Human-readable message (store text passes through)")
    kind: str = Field(description="validation, not_found, upstream or internal")
    request_id: Any = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    ok: bool = True
