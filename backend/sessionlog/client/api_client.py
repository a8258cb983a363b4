"""
SessionLog Backend — Async API Client
=======================================

What:  Thin async wrapper over httpx for calling a SessionLog server.
How:   Every verb goes through `_request`; every failure goes through
       `_format_error`, which unwraps the server's error body
       ({error, message, details, request_id}) into an ApiClientError.
Who:   Scripts, other services and the tests.

Behaviour:
    - 2xx with a JSON body  → decoded body
    - 2xx with no body (204) → None
    - non-2xx               → ApiClientError(status_code, payload)
    - network failure or a 2xx body that isn't JSON → TransportError

No retries, no timeout, no caching.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from sessionlog.config import settings
from sessionlog.exceptions import ApiClientError, TransportError

logger = logging.getLogger(__name__)

JSON_PATCH_CONTENT_TYPE = "application/json-patch+json"


def _format_error(exc: Exception, url: str) -> ApiClientError:
    """
    Normalize any request failure into an ApiClientError.

    HTTPStatusError → ApiClientError carrying the decoded error payload
    (the JSON body, the raw text if it isn't JSON, or None if empty).
    Anything else   → TransportError.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        payload: Any = None
        if response.content:
            try:
                payload = response.json()
            except ValueError:
                payload = response.text

        if isinstance(payload, dict) and payload.get("message"):
            message = str(payload["message"])
        else:
            message = f"{response.status_code} {response.reason_phrase}".strip()

        return ApiClientError(
            message=message,
            status_code=response.status_code,
            payload=payload,
            url=url,
        )

    if isinstance(exc, ValueError):
        return TransportError(message=f"Invalid JSON in response: {exc}", url=url)

    return TransportError(message=str(exc) or type(exc).__name__, url=url)


class ApiClient:
    """
    Async client for the resource API.

    Attributes:
        base_url: Prefix for every path, e.g. "http://localhost:8000".
                  Defaults to the API_BASE_URL setting.

    `transport` is handed to httpx.AsyncClient unchanged; tests pass an
    httpx.MockTransport or an httpx.ASGITransport here.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._client = httpx.AsyncClient(transport=transport, timeout=None)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        url = self._url(path)
        logger.debug("%s %s params=%s", method, url, params)

        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                json=json_body,
                content=content,
                headers=headers,
            )
            response.raise_for_status()
            if response.status_code == 204 or not response.content:
                return None
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            error = _format_error(e, url)
            logger.warning(
                "%s %s failed: %s (status=%s)", method, url, error.message, error.status_code
            )
            raise error from e

    # ── Verbs ─────────────────────────────────────────────────────────────

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET `path`, forwarding `params` as the query string."""
        return await self._request("GET", path, params=params)

    async def put(self, path: str, body: Any = None) -> Any:
        return await self._request("PUT", path, json_body=body if body is not None else {})

    async def post(self, path: str, body: Any = None) -> Any:
        return await self._request("POST", path, json_body=body if body is not None else {})

    async def delete(self, path: str) -> Any:
        return await self._request("DELETE", path)

    async def patch(self, path: str, operations: List[Dict[str, Any]]) -> Any:
        """PATCH `path` with a JSON-Patch document (a list of operations)."""
        return await self._request(
            "PATCH",
            path,
            content=json.dumps(operations).encode("utf-8"),
            headers={"Content-Type": JSON_PATCH_CONTENT_TYPE},
        )
