"""
SnackTrack Backend - Custom Exception Hierarchy
================================================

What:  Application-specific exceptions, one per error class the API exposes.
How:   Each exception carries a caller-safe message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       `{"error": message}` responses with the matching HTTP status code.
Who:   Raised by services; caught by the global handlers.

Exception Hierarchy:
    SnackTrackError (base)       → 500
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    └── DatabaseError            → 500 Internal Server Error

`context` is for server-side logs only and never reaches the response body.
"""

from typing import Any, Dict, Optional


class SnackTrackError(Exception):
    """
    Base exception for all SnackTrack application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SnackTrackError):
    """
    Raised when a request body or path parameter is malformed.

    HTTP: 400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(SnackTrackError):
    """
    Raised when a username/password pair does not match a stored user.

    HTTP: 401 Unauthorized

    The message is identical for an unknown username and a wrong password,
    so the response cannot be used to probe which usernames exist.
    """

    status_code = 401

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid username or password", context=context)


class NotFoundError(SnackTrackError):
    """
    Raised when an update or delete matches no row.

    HTTP: 404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class ConflictError(SnackTrackError):
    """
    Raised when a create would violate a uniqueness rule checked by the service.

    HTTP: 409 Conflict
    """

    status_code = 409

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(SnackTrackError):
    """
    Raised when a query, insert, update or delete fails unexpectedly.

    HTTP: 500 Internal Server Error

    The message names the failed operation only ("Failed to fetch snack
    requests"); driver errors, SQL and constraint names go to the log.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
