# Routes package init
"""
IstoEuQuero Backend: API Routes Package
========================================

Route Inventory:
    - health.py:     GET  /                           (liveness text)
                     GET  /health                     ({"ok": true})
    - users.py:      POST /users
    - wishlists.py:  POST /wishlists
                     POST /wishlists/{wishlist_id}/items
                     GET  /wishlists/{wishlist_id}
    - items.py:      PUT|PATCH /items/{item_id}/buy

Routes stay thin: pull the body and path values, call WishlistService,
return its result. Errors propagate to the handlers registered in main.py.
"""
