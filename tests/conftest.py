"""
Snippetbox — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test gets a fresh SQLite database file (aiosqlite driver) with
       the schema created from the ORM metadata, a controllable clock, and
       an httpx AsyncClient wired straight into the ASGI app.

Fixture Hierarchy (all function-scoped):
    ├── clock: FakeClock, advance() it to make snippets expire
    ├── engine → session_factory → snippet_model
    ├── test_app: FastAPI app sharing the same pool and clock
    ├── test_client: HTTPX AsyncClient for endpoint tests
    └── broken_session_factory: raises OperationalError on every use
"""

import os
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine

# Quiet logging BEFORE any app imports; databases come from test_settings
os.environ["LOG_LEVEL"] = "WARNING"

from snippetbox.config import Settings  # noqa: E402
from snippetbox.database import create_schema, create_session_factory  # noqa: E402
from snippetbox.main import create_app  # noqa: E402
from snippetbox.services.snippet_model import SnippetModel  # noqa: E402

START = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'snippetbox_test.db'}"


@pytest_asyncio.fixture
async def engine(database_url):
    """
    Provides an async engine over a throwaway SQLite file with the schema built.

    A generous busy timeout lets concurrent writers queue on SQLite's
    database lock instead of failing.
    """
    eng = create_async_engine(database_url, connect_args={"timeout": 30})
    await create_schema(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def snippet_model(session_factory, clock):
    return SnippetModel(session_factory, clock=clock)


@pytest.fixture
def broken_session_factory():
    """
    A session factory that fails like a dead database connection.

    Usage:
        model = SnippetModel(broken_session_factory)
        with pytest.raises(StorageError): await model.latest()
    """
    return MagicMock(
        side_effect=OperationalError(
            "SELECT 1", {}, ConnectionRefusedError("connection refused")
        )
    )


@pytest.fixture
def test_settings(database_url):
    return Settings(database_url=database_url, log_level="WARNING")


@pytest.fixture
def test_app(test_settings, session_factory, clock):
    return create_app(test_settings, session_factory=session_factory, clock=clock)


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    Provides an async HTTP test client for endpoint testing.

    Redirects are not followed, so 303 responses can be asserted directly.
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
