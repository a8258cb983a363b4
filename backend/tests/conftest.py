"""
SessionLog Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (real SQLite database, stores,
       API client).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── test_engine:          In-memory SQLite engine with all tables created
    ├── test_session_factory: async_sessionmaker bound to test_engine
    ├── db_session:           One AsyncSession for store/controller tests
    ├── session_store:        SqlAlchemyStore over the `sessions` model
    ├── log_store:            SqlAlchemyStore over the `logs` model
    └── test_client:          HTTPX AsyncClient talking to the FastAPI app

Every test gets a fresh database, so auto-assigned ids start at 1.
"""

import os

# Override settings for testing BEFORE any sessionlog imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from sessionlog.database import Base, get_db_session
from sessionlog.resources import LOGS, SESSIONS
from sessionlog.services.store import SqlAlchemyStore


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_engine():
    """
    In-memory SQLite engine with the schema created.

    StaticPool keeps a single connection, so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def session_store(db_session):
    return SqlAlchemyStore(SESSIONS.model, db_session)


@pytest.fixture
def log_store(db_session):
    return SqlAlchemyStore(LOGS.model, db_session)


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(test_session_factory):
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient configured to talk to our FastAPI app.
    How:     ASGITransport routes requests directly to the app (no server,
             no lifespan); get_db_session is overridden to use the test
             database with the same commit/rollback behaviour.

    Usage:
        async def test_index(test_client):
            response = await test_client.get("/api/sessions")
            assert response.status_code == 200
    """
    from sessionlog.main import app

    async def override_get_db_session():
        async with test_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
