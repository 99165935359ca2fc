"""
IstoEuQuero Backend: Test Configuration (conftest.py)
======================================================

What:  Shared fixtures: settings, an in-memory fake of the store's REST
       interface, and an HTTP client bound to a fresh app.
How:   The fake store is served through httpx.MockTransport, so the real
       SupabaseRestClient code path runs without any network access.

Fixture Hierarchy:
    settings      Settings with a fake store URL and key (.env ignored)
    fake_store    FakeStore: PostgREST-like tables held in dicts
    store_client  SupabaseRestClient wired to fake_store
    test_client   httpx AsyncClient for the app built from the above
"""

import json
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("LOG_LEVEL", "WARNING")

from istoeuquero.config import Settings  # noqa: E402
from istoeuquero.main import create_app  # noqa: E402
from istoeuquero.services.store_client import SupabaseRestClient  # noqa: E402

STORE_URL = "https://store.test"
STORE_KEY = "service-role-test-key"


class FakeStore:
    """
    Minimal PostgREST stand-in.

    Supports what the gateway sends: POST rows, GET with `col=eq.value`
    filters and `order=col.asc|desc`, PATCH with filters. Every request is
    recorded in `requests` for assertions. `fail_with` forces the next
    response to a given (status, body).
    """

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.requests: List[httpx.Request] = []
        self.fail_with: Optional[tuple] = None
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def _now(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def seed(self, table: str, **row: Any) -> Dict[str, Any]:
        row.setdefault("id", str(uuid4()))
        row.setdefault("created_at", self._now())
        self.tables.setdefault(table, []).append(row)
        return row

    def bodies(self, method: str) -> List[Any]:
        return [
            json.loads(r.content) for r in self.requests
            if r.method == method and r.content
        ]

    @staticmethod
    def _matches(row: Dict[str, Any], params: httpx.QueryParams) -> bool:
        for column, condition in params.multi_items():
            if column == "order":
                continue
            op, _, value = condition.partition(".")
            if op != "eq" or str(row.get(column)) != value:
                return False
        return True

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.fail_with:
            status, body = self.fail_with
            self.fail_with = None
            if isinstance(body, str):
                return httpx.Response(status, text=body)
            return httpx.Response(status, json=body)

        table = request.url.path.rsplit("/", 1)[-1]
        rows = self.tables.setdefault(table, [])
        params = request.url.params

        if request.method == "POST":
            row = json.loads(request.content)
            row["id"] = str(uuid4())
            row["created_at"] = self._now()
            rows.append(row)
            return httpx.Response(201, json=[row])

        matched = [row for row in rows if self._matches(row, params)]

        if request.method == "GET":
            order = params.get("order")
            if order:
                column, _, direction = order.partition(".")
                matched.sort(key=lambda r: r.get(column) or "", reverse=direction == "desc")
            return httpx.Response(200, json=matched)

        if request.method == "PATCH":
            changes = json.loads(request.content)
            for row in matched:
                row.update(changes)
            return httpx.Response(200, json=matched)

        return httpx.Response(405, json={"message": "method not allowed"})


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        supabase_url=STORE_URL,
        supabase_service_role=STORE_KEY,
        log_level="WARNING",
    )


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest_asyncio.fixture
async def store_client(settings, fake_store):
    client = SupabaseRestClient(settings, transport=httpx.MockTransport(fake_store.handle))
    yield client
    await client.close()


@pytest_asyncio.fixture
async def test_client(settings, store_client):
    """
    HTTPX AsyncClient talking to a fresh app through ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    app = create_app(settings=settings, store=store_client)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
