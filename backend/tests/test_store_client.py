"""
IstoEuQuero Backend: Store Client Unit Tests
=============================================

What we test:
    ✅ Credential headers and Prefer: return=representation on writes
    ✅ PostgREST filter/order query params
    ✅ Error text extraction (message → error → raw body → HTTP <status>)
    ✅ Transport failures become UpstreamError without a status
    ❌ A real hosted store (integration only)
"""

import json

import httpx
import pytest

from istoeuquero.config import Settings
from istoeuquero.exceptions import UpstreamError
from istoeuquero.services.store_client import (
    SupabaseRestClient,
    eq,
    first_record,
    parse_body,
    upstream_message,
)

from conftest import STORE_KEY, STORE_URL


class TestHelpers:

    def test_eq_filter(self):
        assert eq("abc") == "eq.abc"
        assert eq(42) == "eq.42"

    def test_parse_body_handles_empty_and_non_json(self):
        assert parse_body("") is None
        assert parse_body("<html>oops</html>") is None
        assert parse_body('[{"id": 1}]') == [{"id": 1}]

    def test_first_record(self):
        assert first_record([{"id": 1}, {"id": 2}]) == {"id": 1}
        assert first_record([]) is None
        assert first_record({"id": 3}) == {"id": 3}
        assert first_record(None) is None

    @pytest.mark.parametrize(
        "status,text,payload,expected",
        [
            (409, '{"message": "duplicate key"}', {"message": "duplicate key"}, "duplicate key"),
            (401, '{"error": "invalid token"}', {"error": "invalid token"}, "invalid token"),
            (400, '{"message": "", "error": "bad"}', {"message": "", "error": "bad"}, "bad"),
            (502, "Bad Gateway", None, "Bad Gateway"),
            (503, "", None, "HTTP 503"),
        ],
    )
    def test_upstream_message_precedence(self, status, text, payload, expected):
        assert upstream_message(status, text, payload) == expected


class TestRequests:

    @pytest.mark.asyncio
    async def test_insert_sends_credentials_and_prefer_header(self, store_client, fake_store):
        result = await store_client.insert("istoeuquero_users", {"name": "Ana", "email": None})

        request = fake_store.requests[-1]
        assert request.method == "POST"
        assert str(request.url) == f"{STORE_URL}/rest/v1/istoeuquero_users"
        assert request.headers["apikey"] == STORE_KEY
        assert request.headers["Authorization"] == f"Bearer {STORE_KEY}"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Prefer"] == "return=representation"
        assert json.loads(request.content) == {"name": "Ana", "email": None}
        assert result[0]["name"] == "Ana"

    @pytest.mark.asyncio
    async def test_non_ascii_values_survive_the_round_trip(self, store_client, fake_store):
        result = await store_client.insert(
            "istoeuquero_wishlist_items", {"name": "Caneca de café", "url": None}
        )

        assert json.loads(fake_store.requests[-1].content.decode("utf-8"))["name"] == "Caneca de café"
        assert result[0]["name"] == "Caneca de café"

    @pytest.mark.asyncio
    async def test_select_encodes_filters_and_order(self, store_client, fake_store):
        await store_client.select(
            "istoeuquero_wishlist_items",
            {"wishlist_id": eq("w-1")},
            order="created_at.asc",
        )

        request = fake_store.requests[-1]
        assert request.method == "GET"
        assert request.url.params["wishlist_id"] == "eq.w-1"
        assert request.url.params["order"] == "created_at.asc"
        assert "Prefer" not in request.headers
        assert request.content == b""

    @pytest.mark.asyncio
    async def test_update_patches_matching_rows(self, store_client, fake_store):
        fake_store.seed("istoeuquero_wishlist_items", id="i-1", name="Livro")

        result = await store_client.update(
            "istoeuquero_wishlist_items", {"id": eq("i-1")}, {"status": "purchased"}
        )

        request = fake_store.requests[-1]
        assert request.method == "PATCH"
        assert request.url.params["id"] == "eq.i-1"
        assert request.headers["Prefer"] == "return=representation"
        assert len(result) == 1
        assert result[0]["id"] == "i-1"
        assert result[0]["status"] == "purchased"


class TestErrors:

    @pytest.mark.asyncio
    async def test_non_success_raises_with_store_message(self, store_client, fake_store):
        fake_store.fail_with = (409, {"message": "duplicate key value", "code": "23505"})

        with pytest.raises(UpstreamError) as exc_info:
            await store_client.insert("istoeuquero_users", {"name": "Ana"})

        assert exc_info.value.upstream_status == 409
        assert exc_info.value.message == "duplicate key value"
        assert exc_info.value.context["table"] == "istoeuquero_users"

    @pytest.mark.asyncio
    async def test_non_json_error_body_passes_raw_text(self, store_client, fake_store):
        fake_store.fail_with = (502, "upstream proxy error")

        with pytest.raises(UpstreamError) as exc_info:
            await store_client.select("istoeuquero_wishlists")

        assert exc_info.value.upstream_status == 502
        assert exc_info.value.message == "upstream proxy error"

    @pytest.mark.asyncio
    async def test_connection_failure_has_no_status(self, settings):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = SupabaseRestClient(settings, transport=httpx.MockTransport(refuse))
        try:
            with pytest.raises(UpstreamError) as exc_info:
                await client.select("istoeuquero_wishlists")
        finally:
            await client.close()

        assert exc_info.value.upstream_status is None
        assert exc_info.value.message == "connection refused"
        assert exc_info.value.context["error_type"] == "ConnectError"

    @pytest.mark.asyncio
    async def test_unset_base_url_fails_as_upstream_error(self):
        client = SupabaseRestClient(Settings(_env_file=None, supabase_url=""))
        try:
            with pytest.raises(UpstreamError) as exc_info:
                await client.select("istoeuquero_wishlists")
        finally:
            await client.close()

        assert exc_info.value.upstream_status is None
