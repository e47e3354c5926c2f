"""Shared pytest fixtures for all test suites."""

import os
from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from globetrotter.app.adapters.amadeus import get_amadeus_client
from globetrotter.app.api.deps import get_store
from globetrotter.app.db.inmemory import InMemoryItineraryStore
from globetrotter.app.db.models import Base
from globetrotter.app.db.sql_repositories import SqlItineraryStore
from globetrotter.app.main import app
from tests.fakes import FakeAmadeus


@pytest.fixture
def fake_amadeus() -> FakeAmadeus:
    return FakeAmadeus()


@pytest.fixture
def store() -> InMemoryItineraryStore:
    """Fresh in-memory itinerary store."""
    return InMemoryItineraryStore()


@pytest_asyncio.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the full schema.

    StaticPool keeps the single in-memory database alive across sessions.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def sql_store(sqlite_engine: AsyncEngine) -> AsyncGenerator[SqlItineraryStore, None]:
    """SQL itinerary store over the in-memory SQLite engine."""
    async with AsyncSession(sqlite_engine, expire_on_commit=False) as session:
        yield SqlItineraryStore(session)


@pytest.fixture
def api_client(
    store: InMemoryItineraryStore, fake_amadeus: FakeAmadeus
) -> Generator[TestClient, None, None]:
    """Test client wired to the in-memory store and the fake provider."""
    provider = fake_amadeus.client()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_amadeus_client] = lambda: provider

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sql_api_client(tmp_path: Path) -> Generator[TestClient, None, None]:
    """Test client backed by a file SQLite database through the real SQL store.

    NullPool opens a fresh connection per session, so the engine can be used
    from the TestClient's event loop.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    async def override_get_store() -> AsyncGenerator[SqlItineraryStore, None]:
        async with AsyncSession(engine, expire_on_commit=False) as session:
            yield SqlItineraryStore(session)

    async def create_schema() -> None:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    app.dependency_overrides[get_store] = override_get_store

    try:
        with TestClient(app) as client:
            client.portal.call(create_schema)
            yield client
            client.portal.call(engine.dispose)
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def postgres_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine for PostgreSQL integration tests.

    Requires DATABASE_URL to be set to a real PostgreSQL connection string.
    Tests using this fixture should be marked with @pytest.mark.postgres.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        pytest.skip("DATABASE_URL not set - skipping postgres test")

    if not database_url.startswith(("postgresql://", "postgresql+asyncpg://")):
        pytest.skip(f"DATABASE_URL is not PostgreSQL: {database_url}")

    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    engine = create_async_engine(database_url, poolclass=NullPool, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
