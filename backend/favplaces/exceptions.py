"""
Favorite Places — Custom Exception Hierarchy
=============================================

What:  Defines application-specific exceptions for each failure scenario.
How:   Each exception class carries a human-readable message, an optional
       context dict, and a class-level `kind` tag. The server's global
       exception handlers (main.py) turn the kind into an HTTP status and a
       JSON body; the client transport turns that body back into the same
       exception class.
Who:   Raised by stores, the client transport, and the synchronizer.

Exception Hierarchy:
    FavPlacesError (base, kind="error")
    ├── UnavailableError   → 503  source document unreadable
    ├── NotFoundError      → 404  place id absent from the catalog
    ├── PersistenceError   → 500  favorites document could not be written
    ├── NetworkError       → —    transport failure seen by the client
    └── SyncError          → —    user-facing failure of a client operation

The `kind` strings are the wire format: they appear as the `error` field of
every error response body.
"""

from typing import Any, Dict, Optional, Type


class FavPlacesError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    kind = "error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class UnavailableError(FavPlacesError):
    """
    Raised when a place document cannot be read or decoded.

    When:    Catalog or favorites file missing, unreadable, or not valid JSON.
    HTTP:    503 Service Unavailable
    """

    kind = "unavailable"

    def __init__(
        self,
        message: str = "Place data is temporarily unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(FavPlacesError):
    """
    Raised when a referenced place id does not exist in the catalog.

    When:    PUT /user-places with a placeId the catalog does not know.
    HTTP:    404 Not Found
    """

    kind = "not_found"

    def __init__(
        self,
        resource: str = "place",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class PersistenceError(FavPlacesError):
    """
    Raised when the favorites document cannot be written.

    When:    Disk full, permission denied, replace of the temp file failed.
    HTTP:    500 Internal Server Error

    The message returned to the client is generic; the OS error and the
    path stay in `context` and are only logged.
    """

    kind = "persistence"

    def __init__(
        self,
        message: str = "Could not save your favorite places. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NetworkError(FavPlacesError):
    """
    Raised by the client transport when a request does not produce a usable
    response: connection refused, timeout, or an HTTP status whose body does
    not name a known error kind.
    """

    kind = "network"

    def __init__(
        self,
        message: str = "Could not reach the places service",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class SyncError(FavPlacesError):
    """
    Raised by client-side operations (load, add, remove) after the failure has
    been handled locally (cache rolled back, error channel notified).

    `message` is the text meant for the user. `kind` is copied from the
    underlying failure so callers can branch on it without string matching;
    the original exception is chained as `__cause__`.
    """

    def __init__(self, message: str, cause: Optional[FavPlacesError] = None):
        super().__init__(message=message, context=dict(cause.context) if cause else {})
        self.kind = cause.kind if cause is not None else FavPlacesError.kind
        self.cause = cause


# ── Wire Mapping ──────────────────────────────────────────────────────────
# What: error kind → exception class, used by the client transport
ERROR_KINDS: Dict[str, Type[FavPlacesError]] = {
    UnavailableError.kind: UnavailableError,
    NotFoundError.kind: NotFoundError,
    PersistenceError.kind: PersistenceError,
}


def error_from_kind(kind: Optional[str], message: str) -> FavPlacesError:
    """
    Rebuild an exception from the `error` and `message` fields of a response.

    Unknown or missing kinds become NetworkError.
    """
    if kind == NotFoundError.kind:
        return NotFoundError(message=message)
    cls = ERROR_KINDS.get(kind or "")
    if cls is None:
        return NetworkError(message=message)
    return cls(message=message)
