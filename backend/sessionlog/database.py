"""
SessionLog Backend — Database Session Management
==================================================

What:  Async SQLAlchemy engine, session factory, FastAPI dependency and
       startup helpers.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine with connection pooling, provides a session
       dependency that auto-commits on success and auto-rolls-back on error.
Who:   Used by route handlers via FastAPI's dependency injection system and
       by the application lifespan.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling Strategy:
    pool_size=20, max_overflow=10, pool_pre_ping, pool_recycle=3600 for
    PostgreSQL. SQLite URLs get the dialect's default pool (pool sizing
    arguments are rejected by SQLite's StaticPool).
"""

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from sessionlog.config import settings

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    """Pool options for the configured database URL."""
    options: Dict[str, Any] = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: records stay readable after commit, which the
# routes rely on when serializing the response
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Models inherit from this class to share one metadata object, which both
    `init_models()` and Alembic read.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back (a rejected patch or failed save never
           leaves a partial write behind) and re-raises
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/sessions")
        async def index(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def wait_for_database(target: AsyncEngine = engine) -> None:
    """
    Block startup until the database answers `SELECT 1`.

    What:  Retries the connectivity probe with exponential backoff + jitter.
    When:  Called once from the application lifespan.
    Why:   In docker-compose the API container routinely starts before
           PostgreSQL accepts connections.

    Raises:
        OperationalError | OSError: after `db_connect_attempts` failed probes.
    """

    @retry(
        stop=stop_after_attempt(settings.db_connect_attempts),
        wait=wait_exponential_jitter(initial=1, max=settings.db_connect_wait),
        retry=retry_if_exception_type((OperationalError, OSError)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _probe() -> None:
        async with target.connect() as conn:
            await conn.execute(text("SELECT 1"))

    await _probe()
    logger.info("Database reachable")


async def init_models(target: AsyncEngine = engine) -> None:
    """
    Create all tables registered on `Base.metadata` that don't exist yet.

    The model modules must be imported before this runs so their tables are
    registered; `sessionlog.resources` does that.
    """
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Gracefully closes all connections in the pool (application shutdown)."""
    await engine.dispose()
