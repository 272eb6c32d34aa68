"""
SnackTrack Backend - Origin Allow-List Middleware
==================================================

What:  Rejects browser requests whose `Origin` is not on the allow-list.
How:   Runs before routing; a disallowed origin gets 403 and the handler
       never executes. Requests without an `Origin` header (curl, scripts,
       server-to-server) pass through.
Who:   Applied to every request via Starlette middleware.

Starlette's CORSMiddleware only withholds CORS headers from disallowed
origins for simple requests; the browser then hides the response, but the
handler has already run. This middleware stops such requests at the door.
CORSMiddleware still answers preflights and adds headers for allowed origins.
"""

import logging
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

REJECTED = "Not allowed by CORS"


class OriginAllowListMiddleware(BaseHTTPMiddleware):
    """
    403 for any request carrying an `Origin` header outside `allowed_origins`.

    Response on rejection:
        HTTP 403 Forbidden
        {"error": "Not allowed by CORS"}
    """

    def __init__(self, app, allowed_origins: Iterable[str] = (), **kwargs):
        super().__init__(app, **kwargs)
        self.allowed_origins = frozenset(allowed_origins)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        origin = request.headers.get("origin")

        if origin is None or origin in self.allowed_origins:
            return await call_next(request)

        logger.warning(
            "Rejected %s %s from origin %s",
            request.method,
            request.url.path,
            origin,
        )
        request.state.error_message = REJECTED
        return JSONResponse(
            status_code=403,
            content={"error": REJECTED},
        )
