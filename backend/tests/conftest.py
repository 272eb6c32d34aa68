"""
SnackTrack Backend - Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── test_settings:   Settings pointing at a per-test SQLite file
    ├── database:        Database with tables created, disposed afterwards
    ├── app:             FastAPI app wired to `database`
    ├── client:          HTTPX AsyncClient talking to `app` in-process
    └── broken_client:   client whose datastore cannot be opened
"""

import os
import tempfile

# Settings are read at import time; point them at throwaway values first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="snacktrack_test_"), "import.db"
)
os.environ["CORS_ORIGINS"] = "http://localhost:3000"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"  # bcrypt minimum keeps the suite fast
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from snacktrack.config import Settings
from snacktrack.database import Database
from snacktrack.main import create_app

ALLOWED_ORIGIN = "http://localhost:3000"


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_list(mock_db_session):
            mock_db_session.execute.return_value.mappings.return_value.all.return_value = []
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'snacks.db'}",
        cors_origins=ALLOWED_ORIGIN,
        password_hash_rounds=4,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    db = Database.from_settings(test_settings)
    await db.create_schema()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def app(test_settings, database):
    return create_app(test_settings, database)


@pytest_asyncio.fixture
async def client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server, no lifespan).

    Usage:
        async def test_health(client):
            response = await client.get("/health")
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def broken_client(tmp_path, test_settings):
    """Client whose database file lives in a directory that does not exist."""
    broken_settings = test_settings.model_copy(
        update={"database_url": f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'nowhere.db'}"}
    )
    db = Database.from_settings(broken_settings)
    transport = ASGITransport(app=create_app(broken_settings, db))
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    await db.dispose()


@pytest.fixture
def register_user(client):
    """
    Registers a user through the API and returns the new id.

    Usage:
        async def test_x(register_user):
            user_id = await register_user("bob")
    """

    async def _register(username="alice", password="s3cret", name="Alice", **extra):
        response = await client.post(
            "/api/register",
            json={"username": username, "password": password, "name": name, **extra},
        )
        assert response.status_code == 201, response.text
        return response.json()["userId"]

    return _register
