# Services package init
"""
IstoEuQuero Backend: Services Layer
====================================

What:  Business logic between the routes (HTTP) and the external store.

Service Inventory:
    - SupabaseRestClient: async httpx client for the store's REST interface
    - WishlistService: presence checks and one store operation per gateway call
"""
