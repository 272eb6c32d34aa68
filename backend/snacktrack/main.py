"""
SnackTrack Backend - FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       holding its own Database (engine + pool) on app.state.
Who:   Called by uvicorn (uvicorn snacktrack.main:app), by
       `python -m snacktrack`, and by the test suite with test settings.

Application Architecture:
    ┌─────────────────────────────────────────────────────────────┐
    │                        FastAPI App                          │
    │                                                             │
    │  Middleware Chain:                                          │
    │  ┌────────┐ ┌─────────┐ ┌─────────────┐ ┌──────┐ ┌──────┐   │
    │  │ Req ID │→│ Logging │→│ Origin list │→│ GZip │→│ CORS │   │
    │  └────────┘ └─────────┘ └─────────────┘ └──────┘ └──────┘   │
    │                                                             │
    │  Routes:                                                    │
    │  ┌──────────────────┐ ┌───────────────────┐ ┌────────────┐  │
    │  │ /api/register    │ │ /api/requests ... │ │ GET /health│  │
    │  │ /api/login       │ │                   │ │            │  │
    │  └──────────────────┘ └───────────────────┘ └────────────┘  │
    │                                                             │
    │  Exception Handlers:                                        │
    │  ┌───────────────────────────────────────────────────────┐  │
    │  │ Validation→400 │ Auth→401 │ NotFound→404 │ Conflict→409│ │
    │  │ Database→500   │ anything else→500                    │  │
    │  └───────────────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Probe the datastore and log its clock
    3. Create tables if missing (failure is logged, startup continues)

    Shutdown:
    1. Dispose the engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from snacktrack import __version__
from snacktrack.config import Settings, settings as default_settings
from snacktrack.database import Database
from snacktrack.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    SnackTrackError,
    ValidationError,
)
from snacktrack.middleware.logging import RequestLoggingMiddleware
from snacktrack.middleware.origin import OriginAllowListMiddleware
from snacktrack.middleware.request_id import RequestIDMiddleware, request_id_var
from snacktrack.routes import auth, health, requests

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Our access log replaces uvicorn's; SQL echo is opt-in via LOG_LEVEL=DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if log_level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, datastore probe, schema creation.
    Shutdown: dispose the pool.

    Neither the probe nor schema creation stops the server when the
    datastore is down; requests then fail one by one with 500 until it
    comes back.
    """
    app_settings: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("SnackTrack Backend %s starting up...", __version__)

    try:
        now = await database.server_time()
        logger.info("Connected to database, server time: %s", now)
    except Exception as e:
        logger.error("Error connecting to database: %s", e)

    try:
        await database.create_schema()
    except Exception as e:
        logger.error("Error creating tables: %s", e, exc_info=True)

    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("SnackTrack Backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(
    request: Request, status_code: int, message: str, headers: Optional[dict] = None
) -> JSONResponse:
    request.state.error_message = message
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and `{"error": message}` bodies.

    Handler hierarchy:
        RequestValidationError  → 400 (FastAPI body/path parsing)
        ValidationError         → 400
        AuthenticationError     → 401
        NotFoundError           → 404
        ConflictError           → 409
        HTTPException           → its status (unknown path 404, wrong method 405)
        DatabaseError           → 500 (message names the failed operation)
        SnackTrackError (base)  → its status_code
        Exception (fallback)    → 500 "Internal server error"

    Context dicts and stack traces are logged, never returned.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Malformed JSON, missing fields, wrong types, non-integer ids."""
        errors = exc.errors()
        if not errors:
            return await handle_validation_error(request, ValidationError())
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
        return await handle_validation_error(request, ValidationError(message, field=location or None))

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning(
            "[%s] Invalid request to %s: %s", request_id_var.get(""), request.url.path, exc.message
        )
        return _error(request, 400, exc.message)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        """Same body for unknown user and wrong password; the reason is logged only."""
        logger.info("[%s] Login failed: %s", request_id_var.get(""), exc.context.get("reason"))
        return _error(request, 401, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(request, 404, exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _error(request, 409, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Router-level misses keep the `{"error": ...}` body shape."""
        return _error(request, exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("[%s] Database error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error(request, 500, exc.message)

    @app.exception_handler(SnackTrackError)
    async def handle_app_error(request: Request, exc: SnackTrackError):
        logger.error("[%s] %s: %s | Context: %s", request_id_var.get(""), type(exc).__name__, exc.message, exc.context)
        return _error(request, exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: full traceback to the log, generic message to the client."""
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error(request, 500, "Internal server error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to run with (defaults to the environment).
        database: Pre-built Database; built from `app_settings` when omitted.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="SnackTrack API",
        description="Request office snacks and drinks and track what has been ordered.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.database = database or Database.from_settings(app_settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → Origin allow-list → GZip → CORS

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["X-Request-ID"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=500)

    app.add_middleware(
        OriginAllowListMiddleware,
        allowed_origins=app_settings.cors_origins_list,
    )

    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(requests.router)
    app.include_router(health.router)

    return app


# uvicorn expects `snacktrack.main:app` to be importable
app = create_app()
