"""
IstoEuQuero Backend: Item Routes
=================================

What:  PUT/PATCH /items/{item_id}/buy marks an item as purchased.

Why:   Both verbs are accepted because deployed clients send either one.
       Buying twice sends the same write, so a retried click is harmless.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from istoeuquero.dependencies import get_wishlist_service
from istoeuquero.schemas.wishlist import ErrorResponse, ItemPurchase, Record
from istoeuquero.services.wishlist_service import WishlistService

router = APIRouter(tags=["Items"])


@router.api_route(
    "/items/{item_id}/buy",
    methods=["PUT", "PATCH"],
    responses={
        200: {"description": "Updated item record"},
        404: {"description": "No item with this id", "model": ErrorResponse},
    },
    summary="Mark an item as purchased",
)
async def buy_item(
    item_id: str,
    payload: Optional[ItemPurchase] = None,
    service: WishlistService = Depends(get_wishlist_service),
) -> Record:
    """
    Sets the item's status to "purchased", with an optional `buyer_name`.

    Accepts both PUT and PATCH; repeated calls converge to the same state.
    """
    return await service.mark_purchased(item_id, payload or ItemPurchase())
