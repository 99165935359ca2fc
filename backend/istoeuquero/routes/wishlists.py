"""
IstoEuQuero Backend: Wishlist Routes
=====================================

What:  Wishlist creation, item creation, and the wishlist + items view.
How:   Path ids are passed to the store untouched (the store owns the id
       format); bodies are checked for required fields by WishlistService.

Endpoints:
    POST /wishlists                         user_id, title required
    POST /wishlists/{wishlist_id}/items     name required
    GET  /wishlists/{wishlist_id}           {"wishlist": {...}, "items": [...]}

Why:
    A shared wishlist link opens on GET /wishlists/{id}; the page needs the
    list and its items in one response, oldest item first so the order the
    owner added them in is kept.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from istoeuquero.dependencies import get_wishlist_service
from istoeuquero.schemas.wishlist import (
    ErrorResponse,
    ItemCreate,
    Record,
    WishlistCreate,
    WishlistDetail,
)
from istoeuquero.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlists", tags=["Wishlists"])


@router.post(
    "",
    responses={
        200: {"description": "Created wishlist record"},
        400: {"description": "user_id or title is missing", "model": ErrorResponse},
    },
    summary="Create a wishlist",
)
async def create_wishlist(
    payload: Optional[WishlistCreate] = None,
    service: WishlistService = Depends(get_wishlist_service),
) -> Record:
    return await service.create_wishlist(payload or WishlistCreate())


@router.post(
    "/{wishlist_id}/items",
    responses={
        200: {"description": "Created item record"},
        400: {"description": "name is missing", "model": ErrorResponse},
    },
    summary="Add an item to a wishlist",
)
async def add_item(
    wishlist_id: str,
    payload: Optional[ItemCreate] = None,
    service: WishlistService = Depends(get_wishlist_service),
) -> Record:
    """The item starts with no status; see PUT /items/{item_id}/buy."""
    return await service.add_item(wishlist_id, payload or ItemCreate())


@router.get(
    "/{wishlist_id}",
    response_model=WishlistDetail,
    responses={
        200: {"description": "Wishlist and its items, oldest item first", "model": WishlistDetail},
        404: {"description": "Wishlist not found", "model": ErrorResponse},
    },
    summary="Get a wishlist with its items",
)
async def get_wishlist(
    wishlist_id: str,
    service: WishlistService = Depends(get_wishlist_service),
) -> WishlistDetail:
    """
    Performs two reads: the wishlist by id, then its items ordered by
    `created_at` ascending. Responds 404 when the first read finds nothing.
    """
    return await service.get_wishlist_with_items(wishlist_id)
