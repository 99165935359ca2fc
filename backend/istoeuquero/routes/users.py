"""
IstoEuQuero Backend: User Routes
=================================

What:  POST /users creates a user record in the external store.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from istoeuquero.dependencies import get_wishlist_service
from istoeuquero.schemas.wishlist import ErrorResponse, Record, UserCreate
from istoeuquero.services.wishlist_service import WishlistService

router = APIRouter(tags=["Users"])


@router.post(
    "/users",
    responses={
        200: {"description": "Created user record"},
        400: {"description": "name is missing", "model": ErrorResponse},
    },
    summary="Create a user",
)
async def create_user(
    payload: Optional[UserCreate] = None,
    service: WishlistService = Depends(get_wishlist_service),
) -> Record:
    """
    Creates a user. `name` is required, `email` optional.

    Exactly `{name, email}` is forwarded to the store; the created record is
    returned as-is.
    """
    return await service.create_user(payload or UserCreate())
