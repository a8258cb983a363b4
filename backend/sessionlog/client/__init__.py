"""
SessionLog Backend — API Client Package
=========================================

What:  Async HTTP client for the /api/<resource> surface.

    from sessionlog.client import ApiClient

    async with ApiClient("http://localhost:8000") as api:
        sessions = await api.get("/api/sessions")
"""

from sessionlog.client.api_client import ApiClient
from sessionlog.exceptions import ApiClientError, TransportError

__all__ = ["ApiClient", "ApiClientError", "TransportError"]
