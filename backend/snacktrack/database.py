"""
SnackTrack Backend - Database Engine, Schema and Session Management
===================================================================

What:  The `Database` resource (async engine + session factory), the ORM
       base class, the schema initializer, and the per-request session
       dependency.
How:   `create_app()` builds one `Database` from settings and stores it on
       `app.state.database`. Route handlers receive sessions through
       `get_db_session`, which borrows a pooled connection for the duration
       of the request and always gives it back.
When:  Engine is created with the app; sessions are created per-request;
       the pool is disposed in the lifespan shutdown.

Connection Pooling:
    pool_size / max_overflow:  steady and burst connection counts
    pool_pre_ping:             validates connections before use
    pool_timeout:              bounded wait for a free connection
    pool_recycle=3600:         recycles connections every hour

    SQLite (used by the test suite) takes none of the pool arguments.
"""

import logging
from datetime import datetime
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from snacktrack.config import Settings

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so they share one metadata object,
    which the schema initializer uses to emit CREATE TABLE IF NOT EXISTS.
    """
    pass


class Database:
    """
    Process-wide datastore handle: one engine (and therefore one pool) plus
    the session factory bound to it.

    Creating a `Database` opens no connections; the first session does.
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 5,
        pool_pre_ping: bool = True,
        pool_timeout: float = 30.0,
        ssl: bool = False,
        echo: bool = False,
    ):
        engine_kwargs: Dict[str, Any] = {"echo": echo}
        if not url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=pool_pre_ping,
                pool_timeout=pool_timeout,
                pool_recycle=3600,
            )
        if ssl:
            # asyncpg: "require" encrypts without verifying the certificate
            engine_kwargs["connect_args"] = {"ssl": "require"}

        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)

        # expire_on_commit=False: rows stay readable after commit for
        # building the response
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_timeout=settings.db_pool_timeout,
            ssl=settings.database_ssl,
            echo=settings.log_level == "DEBUG",
        )

    async def create_schema(self) -> None:
        """
        Create `users` then `snack_requests` if they do not exist yet.

        Idempotent: existing tables and rows are left untouched
        (SQLAlchemy's checkfirst=True emits CREATE only for missing tables).
        """
        # Model modules register their tables on Base.metadata when imported
        from snacktrack.models.user import User
        from snacktrack.models.snack_request import SnackRequest

        tables = [User.__table__, SnackRequest.__table__]
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, tables=tables, checkfirst=True)
        logger.info("Tables created or already exist: %s", ", ".join(t.name for t in tables))

    async def server_time(self) -> Optional[datetime]:
        """Round-trips to the datastore and returns its clock."""
        async with self.engine.connect() as conn:
            result = await conn.execute(text("SELECT CURRENT_TIMESTAMP"))
            return result.scalar()

    async def ping(self) -> None:
        """Raises if the datastore cannot run `SELECT 1`."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Closes all pooled connections."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that lends one database session to a request.

    How it works:
        1. Takes the `Database` the app was built with (app.state.database)
        2. Opens a session and yields it to the route handler
        3. On error: rolls back whatever the handler left uncommitted
        4. Always: closes the session (returns the connection to the pool)

    Services commit their own writes, so a failing commit is reported with
    the operation's error message rather than after the response is built.

    Example usage in a route:
        @router.get("/requests")
        async def list_requests(db: AsyncSession = Depends(get_db_session)):
            return await request_service.list_all(db)
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
