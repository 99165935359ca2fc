"""
IstoEuQuero Backend: Request Dependencies
==========================================

What:  FastAPI dependency that hands route handlers the WishlistService.
How:   `create_app()` builds one service from its Settings and stores it on
       `app.state`; this dependency reads it back for each request.
"""

from fastapi import Request

from istoeuquero.services.wishlist_service import WishlistService


def get_wishlist_service(request: Request) -> WishlistService:
    """
    Example usage in a route:
        @router.post("/users")
        async def create_user(service: WishlistService = Depends(get_wishlist_service)):
            ...
    """
    return request.app.state.wishlist_service
