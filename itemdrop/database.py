"""
ItemDrop Backend - Database Session Management
================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates one async engine with connection pooling per process and
       provides a session dependency that commits on success and rolls back
       on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling:
    pool_size / max_overflow:  from settings (PostgreSQL only)
    pool_pre_ping:             validates connections before use
    pool_recycle=3600:         recycles connections every hour
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from itemdrop.config import settings


def _engine_options(url: str) -> Dict[str, Any]:
    """Pool sizing applies to server databases; SQLite (tests, local runs) opens a connection per use."""
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if url.startswith("sqlite"):
        options["poolclass"] = NullPool
    else:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine & Session Factory ──────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options(settings.database_url))

# expire_on_commit=False: the item id stays readable after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises
        5. Always: closes the session (returns connection to pool)

    Tests replace this dependency through `app.dependency_overrides`.
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
async def dispose_engine() -> None:
    """Close all pooled connections. Called during application shutdown."""
    await engine.dispose()
