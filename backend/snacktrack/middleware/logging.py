"""
SnackTrack Backend - Access Log Middleware
===========================================

What:  One access-log line per API call naming the route handler that served
       it and, for failures, the error message the client received.

Example lines:
    PUT /api/requests/7/order -> update_ordered 200 3.1ms [a1b2c3d4]
    POST /api/login -> login 401 212.4ms [a1b2c3d4] error="Invalid username or password"
    GET /api/nope -> - 404 0.4ms [a1b2c3d4] error="Not Found"

Request bodies are never logged (they carry passwords) and neither are
response bodies (login responses carry password hashes). The error text comes
from `request.state.error_message`, which the exception handlers in
snacktrack.main fill in.
"""

import logging
import time
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from snacktrack.middleware.request_id import request_id_var

logger = logging.getLogger("snacktrack.access")

DEFAULT_QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def endpoint_name(request: Request) -> str:
    """Name of the handler the router matched, or '-' when nothing matched."""
    endpoint = request.scope.get("endpoint")
    return getattr(endpoint, "__name__", "-")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for everything except `quiet_paths` (liveness probes)."""

    def __init__(self, app: ASGIApp, quiet_paths: Optional[Iterable[str]] = None):
        super().__init__(app)
        self.quiet_paths = frozenset(quiet_paths) if quiet_paths is not None else DEFAULT_QUIET_PATHS

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.quiet_paths:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        operation = endpoint_name(request)
        error = getattr(request.state, "error_message", None)
        suffix = f' error="{error}"' if error else ""

        logger.log(
            level_for_status(response.status_code),
            "%s %s -> %s %d %.1fms [%s]%s",
            request.method,
            request.url.path,
            operation,
            response.status_code,
            elapsed_ms,
            request_id_var.get(""),
            suffix,
            extra={
                "operation": operation,
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
                "error_message": error,
            },
        )
        return response
