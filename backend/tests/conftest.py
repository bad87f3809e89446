"""
CrudHub Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (settings, stores, API clients).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── memory_settings:   teas + biscuits in memory, no document store
    ├── sqlite_settings:   teas in memory, games in a temp SQLite document store
    ├── document_store:    connected DocumentStore on sqlite_settings
    ├── test_client:       HTTPX AsyncClient on a memory-only app
    └── document_client:   HTTPX AsyncClient on the SQLite-backed app
"""

import os
import tempfile

# Override settings for testing BEFORE any crudhub imports
# Why: the module-level app in crudhub.main is built from these values
os.environ["DATABASE_URL"] = (
    "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(prefix="crudhub_test_"), "test.db")
)
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from crudhub.config import Settings
from crudhub.database import DocumentStore
from crudhub.main import create_app


@pytest.fixture
def memory_settings():
    """Two seeded memory resources and no document store at all."""
    return Settings(
        memory_resources="teas,biscuits",
        document_resources="",
        log_level="WARNING",
    )


@pytest.fixture
def sqlite_settings(tmp_path):
    """
    Teas in memory, games in a fresh SQLite file per test.

    One connection attempt and no backoff keep failure tests fast.
    """
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'crudhub.db'}",
        memory_resources="teas",
        document_resources="games",
        store_connect_attempts=1,
        store_connect_min_wait=0,
        store_connect_max_wait=0,
        log_level="WARNING",
    )


@pytest.fixture
def unreachable_settings(tmp_path):
    """A document store URL pointing into a directory that does not exist."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'crudhub.db'}",
        memory_resources="teas",
        document_resources="games",
        store_connect_attempts=1,
        store_connect_min_wait=0,
        store_connect_max_wait=0,
        fail_fast_on_store_error=False,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def document_store(sqlite_settings):
    """A connected store with the documents table created."""
    store = DocumentStore(sqlite_settings)
    await store.connect()
    yield store
    await store.dispose()


async def _client_for(app_settings):
    app = create_app(app_settings)
    registry = app.state.registry
    # ASGITransport does not run the lifespan; connect the way startup would
    await registry.connect_all(fail_fast=app_settings.fail_fast_on_store_error)
    transport = ASGITransport(app=app)
    client = AsyncClient(transport=transport, base_url="http://test")
    return app, client


@pytest_asyncio.fixture
async def test_client(memory_settings):
    """
    HTTPX AsyncClient talking to a memory-only app.

    Usage:
        async def test_index(test_client):
            response = await test_client.get("/api/teas")
            assert response.status_code == 200
    """
    app, client = await _client_for(memory_settings)
    async with client:
        yield client
    await app.state.registry.close_all()


@pytest_asyncio.fixture
async def document_client(sqlite_settings):
    """HTTPX AsyncClient talking to an app whose games live in SQLite."""
    app, client = await _client_for(sqlite_settings)
    async with client:
        yield client
    await app.state.registry.close_all()
