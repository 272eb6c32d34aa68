"""
SnackTrack Backend - Request ID Middleware
===========================================

What:  Gives each incoming request a short correlation id and echoes it back
       in the X-Request-ID response header.

A client-sent X-Request-ID is reused only when it is a plain token (letters,
digits, `.`, `_`, `-`, at most 64 chars); anything else is replaced, so log
lines cannot be forged or flooded through the header.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_CLIENT_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def accept_client_request_id(value: Optional[str]) -> Optional[str]:
    """Return the client's id if it is safe to log and echo, else None."""
    if value and _CLIENT_ID.fullmatch(value):
        return value
    return None


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Outermost app middleware; everything logged below it carries the id."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accept_client_request_id(request.headers.get(REQUEST_ID_HEADER)) or new_request_id()
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
