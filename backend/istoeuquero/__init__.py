"""
IstoEuQuero Backend: Application Package
=========================================

What: HTTP gateway for the IstoEuQuero gift registry (users, wishlists, items).
How:  Every route performs one translation from an HTTP request to a call
      against the hosted store's REST interface.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   WishlistService (presence checks) │  ← one store operation per call
    ├─────────────────────────────────────┤
    │   SupabaseRestClient (httpx)        │  ← /rest/v1/<table>
    └─────────────────────────────────────┘

    The service owns no state; records belong to the external store.
"""

__version__ = "1.0.0"
