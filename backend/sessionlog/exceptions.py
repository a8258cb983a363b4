"""
SessionLog Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the CRUD controller, the store and
       the API client.
Why:   Custom exceptions let the global handlers in main.py map each failure
       to its HTTP outcome without try/except in every route.
How:   Each exception carries a message, a machine-readable `code` and an
       optional context dict.
Who:   Raised by services and the API client; caught by global handlers
       (server side) or by callers of ApiClient (client side).

Exception Hierarchy:
    SessionLogError (base)
    ├── NotFoundError           → 404 Not Found, empty body
    ├── ValidationError         → 500 (patch inapplicable, schema violation)
    ├── PersistenceError        → 500 (store failure)
    └── ApiClientError          → raised client-side for non-2xx responses
        └── TransportError      → raised client-side for network/decoding failures

Every server-side error except NotFoundError is answered by the single
error responder in main.py with a 500 that carries the error detail.
"""

from typing import Any, Dict, Optional


class SessionLogError(Exception):
    """
    Base exception for all SessionLog application errors.

    Attributes:
        message:  Human-readable error description (returned in the 500 body)
        context:  Additional diagnostic info (returned as `details`)
        code:     Machine-readable error code (returned as `error`)
    """

    code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(SessionLogError):
    """
    Raised when no record exists for the requested identity.

    When:    Show, Patch or Destroy with an id the store doesn't know.
    HTTP:    404 Not Found with an empty body; nothing is written.
    """

    code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ValidationError(SessionLogError):
    """
    Raised when a body or patch cannot be applied to a record.

    When:
        - a JSON-Patch operation is malformed or fails against the current
          document (e.g. a `test` op whose value doesn't match)
        - the resulting document, or a create/upsert body, violates the
          resource's write schema
    HTTP:    500 with the failing operation / field errors in `details`.
             The record is left untouched.
    """

    code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PersistenceError(SessionLogError):
    """
    Raised when a store operation fails unexpectedly.

    When:    Connection lost mid-query, constraint violation, deadlock, etc.
    HTTP:    500 with the original error type and text in `details`.
    """

    code = "persistence_error"

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ApiClientError(SessionLogError):
    """
    Normalized failure of an ApiClient call.

    What:    The one shape every client-side failure takes.
    When:    The server answered with a non-2xx status.

    Attributes:
        status_code: HTTP status of the response (None for transport failures)
        payload:     The server's decoded error body (dict for JSON errors,
                     str for plain-text bodies, None when the body is empty)
        url:         The full URL that was requested
    """

    code = "api_error"

    def __init__(
        self,
        message: str = "API request failed",
        status_code: Optional[int] = None,
        payload: Any = None,
        url: Optional[str] = None,
    ):
        ctx: Dict[str, Any] = {"url": url}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
        self.payload = payload
        self.url = url


class TransportError(ApiClientError):
    """
    Raised when a request never produced a usable response.

    When:    Connection refused, DNS failure, protocol error, or a 2xx
             response whose body isn't valid JSON.
    `payload` carries `{"error": "transport_error", "message": ...}` so
    callers can branch on the same attribute as for server errors.
    """

    code = "transport_error"

    def __init__(self, message: str = "Network request failed", url: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=None,
            payload={"error": self.code, "message": message},
            url=url,
        )
