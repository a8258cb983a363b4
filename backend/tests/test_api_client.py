"""
SessionLog Backend — API Client Tests
=======================================

What:  Tests for ApiClient request building and error normalization.
How:   httpx.MockTransport answers requests in-process; one test runs the
       client against the real app through ASGITransport.

What we test:
    ✅ Query params, JSON bodies and the JSON-Patch content type
    ✅ Decoded JSON on 2xx, None on 204
    ✅ Non-2xx → ApiClientError carrying the server's error payload
    ✅ Network failures and undecodable bodies → TransportError
"""

import json

import httpx
import pytest

from sessionlog.client import ApiClient, ApiClientError, TransportError


def _client(handler):
    return ApiClient("http://api.test", transport=httpx.MockTransport(handler))


class TestRequests:

    @pytest.mark.asyncio
    async def test_get_forwards_params_and_decodes_json(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            return httpx.Response(200, json=[{"id": 1}])

        async with _client(handler) as api:
            result = await api.get("/api/items", {"q": "x"})

        assert seen["url"] == "http://api.test/api/items?q=x"
        assert result == [{"id": 1}]

    @pytest.mark.asyncio
    async def test_post_and_put_send_json(self):
        bodies = []

        def handler(request):
            bodies.append((request.method, json.loads(request.content)))
            return httpx.Response(200, json={"ok": True})

        async with _client(handler) as api:
            await api.post("/api/sessions", {"name": "a"})
            await api.put("/api/sessions/1")

        assert bodies == [("POST", {"name": "a"}), ("PUT", {})]

    @pytest.mark.asyncio
    async def test_patch_uses_json_patch_content_type(self):
        seen = {}

        def handler(request):
            seen["content_type"] = request.headers["Content-Type"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": 1, "name": "b"})

        operations = [{"op": "replace", "path": "/name", "value": "b"}]
        async with _client(handler) as api:
            await api.patch("/api/sessions/1", operations)

        assert seen["content_type"] == "application/json-patch+json"
        assert seen["body"] == operations

    @pytest.mark.asyncio
    async def test_delete_204_returns_none(self):
        async with _client(lambda request: httpx.Response(204)) as api:
            assert await api.delete("/api/sessions/1") is None


class TestErrorNormalization:

    @pytest.mark.asyncio
    async def test_server_error_payload_is_unwrapped(self):
        payload = {
            "error": "validation_error",
            "message": "Patch operation 0 (test /name) failed",
            "details": {"operation_index": 0},
            "request_id": "abc",
        }

        async with _client(lambda request: httpx.Response(500, json=payload)) as api:
            with pytest.raises(ApiClientError) as exc_info:
                await api.patch("/api/sessions/1", [])

        error = exc_info.value
        assert error.status_code == 500
        assert error.payload == payload
        assert error.message == payload["message"]
        assert error.url == "http://api.test/api/sessions/1"

    @pytest.mark.asyncio
    async def test_empty_404(self):
        async with _client(lambda request: httpx.Response(404)) as api:
            with pytest.raises(ApiClientError) as exc_info:
                await api.get("/api/sessions/9")

        assert exc_info.value.status_code == 404
        assert exc_info.value.payload is None
        assert not isinstance(exc_info.value, TransportError)

    @pytest.mark.asyncio
    async def test_plain_text_error_body(self):
        async with _client(lambda request: httpx.Response(502, text="Bad Gateway")) as api:
            with pytest.raises(ApiClientError) as exc_info:
                await api.get("/api/sessions")

        assert exc_info.value.payload == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_network_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as api:
            with pytest.raises(TransportError) as exc_info:
                await api.get("/api/sessions")

        assert exc_info.value.status_code is None
        assert exc_info.value.payload["error"] == "transport_error"

    @pytest.mark.asyncio
    async def test_invalid_json_on_success(self):
        async with _client(lambda request: httpx.Response(200, text="not json")) as api:
            with pytest.raises(TransportError):
                await api.get("/api/sessions")


class TestAgainstApp:

    @pytest.mark.asyncio
    async def test_round_trip_through_app(self, test_client):
        """ApiClient speaks the same contract the routes implement."""
        from sessionlog.main import app

        async with ApiClient("http://test", transport=httpx.ASGITransport(app=app)) as api:
            created = await api.post("/api/sessions", {"name": "a"})
            patched = await api.patch(
                f"/api/sessions/{created['id']}",
                [{"op": "replace", "path": "/name", "value": "b"}],
            )
            assert patched["name"] == "b"

            assert await api.delete(f"/api/sessions/{created['id']}") is None

            with pytest.raises(ApiClientError) as exc_info:
                await api.get(f"/api/sessions/{created['id']}")
            assert exc_info.value.status_code == 404
