"""
IstoEuQuero Backend: Supabase REST Client
==========================================

What:  Async client for the hosted store's generic REST interface (PostgREST).
How:   One shared httpx.AsyncClient; each call sends one request to
       {SUPABASE_URL}/rest/v1/<table> with the service credential as both
       `apikey` and bearer token. Filters use PostgREST query syntax
       (`id=eq.<value>`, `order=created_at.asc`).
Who:   Built by `create_app()` from the Settings instance; used by
       WishlistService.

Error translation:
    non-2xx response    → UpstreamError(message from body, upstream_status=status)
    httpx.HTTPError     → UpstreamError(str(exc), upstream_status=None)

    No retries. A failed write is reported once and never replayed.

When:  Opened once per app by `create_app()`, closed by the lifespan on
       shutdown. Requests share its connection pool.

Why:
    The store is reached only through its REST interface, so the gateway
    needs no database driver. Bodies are sent with httpx's `json=`, which
    also encodes non-ASCII names ("Caneca de café") as UTF-8.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from istoeuquero.config import Settings
from istoeuquero.exceptions import UpstreamError

logger = logging.getLogger(__name__)

REST_PREFIX = "/rest/v1"


def eq(value: Any) -> str:
    """PostgREST equality filter value."""
    return f"eq.{value}"


def parse_body(text: str) -> Any:
    """Decodes a response body; empty or non-JSON bodies yield None."""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def upstream_message(status_code: int, text: str, payload: Any) -> str:
    """
    Picks the error text reported by the store.

    Order: `message` field, `error` field, raw body, then `HTTP <status>`.
    """
    if isinstance(payload, dict):
        for key in ("message", "error"):
            if payload.get(key):
                return str(payload[key])
    return text or f"HTTP {status_code}"


def first_record(data: Any) -> Any:
    """Unwraps `return=representation` arrays to their first row (None if empty)."""
    if isinstance(data, list):
        return data[0] if data else None
    return data


class SupabaseRestClient:
    """
    Thin async wrapper over the store's per-table REST endpoints.

    Args:
        settings:   Gateway settings (base URL, credential, timeout)
        transport:  Optional httpx transport; tests pass httpx.MockTransport
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = settings.supabase_url
        self._key = settings.supabase_service_role
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.store_timeout),
            follow_redirects=True,
            transport=transport,
        )

    def _headers(self, prefer_return: bool) -> Dict[str, str]:
        headers = {
            "apikey": self._key,
            "Authorization": f"Bearer {self._key}",
            "Content-Type": "application/json",
        }
        if prefer_return:
            headers["Prefer"] = "return=representation"
        return headers

    def table_url(self, table: str) -> str:
        return f"{self.base_url}{REST_PREFIX}/{table}"

    async def request(
        self,
        method: str,
        table: str,
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
        prefer_return: bool = False,
    ) -> Any:
        """
        Sends one request to `table` and returns the decoded JSON body.

        Raises:
            UpstreamError: non-2xx status, or the store could not be reached
        """
        try:
            response = await self._client.request(
                method,
                self.table_url(table),
                params=params,
                headers=self._headers(prefer_return),
                json=body,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Store unreachable: %s %s: %s", method, table, exc)
            raise UpstreamError(
                message=str(exc),
                context={"table": table, "method": method, "error_type": type(exc).__name__},
            ) from exc

        text = response.text
        payload = parse_body(text)

        if not response.is_success:
            message = upstream_message(response.status_code, text, payload)
            logger.warning(
                "Store returned %d for %s %s: %s",
                response.status_code, method, table, message,
            )
            raise UpstreamError(
                message=message,
                upstream_status=response.status_code,
                context={"table": table, "method": method},
            )

        return payload

    async def insert(self, table: str, row: Dict[str, Any]) -> Any:
        """INSERT one row and return the stored representation."""
        return await self.request("POST", table, body=row, prefer_return=True)

    async def select(
        self,
        table: str,
        filters: Optional[Mapping[str, str]] = None,
        order: Optional[str] = None,
    ) -> Any:
        """SELECT rows matching PostgREST `filters`, optionally ordered."""
        params = dict(filters or {})
        if order:
            params["order"] = order
        return await self.request("GET", table, params=params)

    async def update(
        self,
        table: str,
        filters: Mapping[str, str],
        values: Dict[str, Any],
    ) -> Any:
        """PATCH rows matching `filters` and return the updated representation."""
        return await self.request(
            "PATCH", table, params=filters, body=values, prefer_return=True
        )

    async def close(self) -> None:
        """Releases pooled connections; called on application shutdown."""
        await self._client.aclose()
