"""
DevCamper API — Database Session Management
============================================

What:  Async SQLAlchemy engine construction, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   `build_engine()` creates an async engine from Settings; the app factory
       stores the engine and session factory on `app.state`; the session
       dependency auto-commits on success and auto-rolls-back on error.
Who:   Used by route handlers and guard dependencies via FastAPI's Depends().
When:  Engine is created by `create_app()`; sessions are created per-request.

Connection Pooling Strategy (PostgreSQL):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite (used by the test suite) manages its own pool, so the pool
    arguments are only passed for server databases.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from devcamper.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to register with the shared metadata
    that Alembic and the test suite use to create the schema.
    """
    pass


# ── Engine Configuration ──────────────────────────────────────────────────
def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine described by `settings.database_url`."""
    engine_kwargs = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.database_url.startswith("sqlite"):
        engine_kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **engine_kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False: responses are serialized from ORM objects, and an
    expired attribute would trigger a lazy load outside the session context.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory stored on app.state
        2. Yields it to the route handler and its guard dependencies
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises, so the global
           exception handlers can build the error envelope

    Guard dependencies (`protect`, `check_existence_ownership`) and the
    advanced-results dependency share this session, because FastAPI caches a
    dependency's value for the duration of one request.
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_schema(engine: AsyncEngine) -> None:
    """
    Create all tables registered on Base.metadata.

    Production schemas are managed by Alembic; this helper exists for the
    test suite and throwaway local databases.
    """
    # Import models so they register with Base.metadata
    from devcamper import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
