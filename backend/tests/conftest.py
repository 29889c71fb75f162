"""
Happy Thoughts API — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    ├── mock_db_session: AsyncMock session for store-failure paths (no DB needed)
    ├── database: Database handle on a fresh SQLite file per test
    ├── db_session: A session on that database
    ├── seed_thoughts: Inserts thoughts with strictly increasing created_at
    └── test_client: HTTPX AsyncClient bound to an app serving `database`
"""

import os
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any application imports, so the
# module-level app never points at a real PostgreSQL instance
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./happy_thoughts_test.db"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from happy_thoughts.database import Database
from happy_thoughts.models.thought import Thought

SEED_START = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async store session.

    Usage:
        async def test_store_down(mock_db_session):
            mock_db_session.execute.side_effect = OperationalError(...)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def database(tmp_path):
    """A Database on a throwaway SQLite file with the schema created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'thoughts.db'}")
    await db.create_schema()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def seed_thoughts(database):
    """
    Returns an async helper inserting `count` thoughts one minute apart.

    Thought i has message "Thought number i" and created_at SEED_START + i
    minutes, so the newest thought is the last one returned. Returns the
    inserted ids, oldest first.
    """
    async def _seed(count: int, hearts: int = 0):
        thoughts = [
            Thought(
                message=f"Thought number {i}",
                hearts=hearts,
                created_at=SEED_START + timedelta(minutes=i),
            )
            for i in range(count)
        ]
        async with database.session() as session:
            session.add_all(thoughts)
        return [thought.id for thought in thoughts]

    return _seed


@pytest_asyncio.fixture
async def test_client(database):
    """
    Provides an async HTTP test client for endpoint testing.

    ASGITransport does not run the lifespan, so the schema comes from the
    `database` fixture rather than AUTO_CREATE_SCHEMA.

    Usage:
        async def test_index(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    from happy_thoughts.main import create_app

    app = create_app(database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
