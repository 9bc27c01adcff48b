"""
Favorite Places — Request ID Middleware
========================================

What:  Gives every request a correlation ID and returns it in X-Request-ID.
How:   A client-supplied X-Request-ID is kept when it looks like an ID
       (letters, digits, `.`, `_`, `-`, at most 64 chars); anything else is
       replaced by a fresh 12-hex-digit ID. The ID lands in a ContextVar for
       loggers and exception handlers, on `request.state`, and on the response.

The ID also appears as `request_id` in every error body, so a message shown
to a user can be matched to the server log line.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


def accept_request_id(candidate: Optional[str]) -> str:
    """Return `candidate` if it is safe to echo into logs and headers, else a new ID."""
    if candidate and _VALID_REQUEST_ID.fullmatch(candidate):
        return candidate
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags every request/response pair with a correlation ID."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = accept_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(request_id)
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
