"""
Snippetbox — Database Engine & Session Management
===================================================

What:  Async SQLAlchemy engine, session factory and declarative base.
How:   `create_engine()` builds the pooled async engine from settings;
       `create_session_factory()` wraps it in an `async_sessionmaker` that the
       storage model opens one session per operation from.
Who:   Used by the app factory (main.py), SnippetModel, Alembic and tests.
When:  Engine is created once at startup and disposed at shutdown.

Connection Pooling:
    pool_size / max_overflow bound the number of physical connections shared
    by all in-flight requests. The pool hands each session its own connection,
    so concurrent inserts and reads need no extra locking in the application.
    SQLite URLs (tests, local development) use SQLAlchemy's default pool for
    that dialect and skip the sizing options.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from snippetbox.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic reads for migrations and
    `create_schema()` uses to build tables directly.
    """
    pass


def create_engine(settings: Settings) -> AsyncEngine:
    """
    Build the async engine (and its connection pool) for the configured URL.

    Args:
        settings: Application settings carrying DATABASE_URL and pool sizing.

    Returns:
        AsyncEngine: not yet connected; the first checkout opens a connection.
    """
    options = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps row attributes readable after commit
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def ping(engine: AsyncEngine) -> None:
    """
    Verify the database is reachable by running `SELECT 1`.

    Raises:
        sqlalchemy.exc.SQLAlchemyError / OSError: when the backend is down or
        the credentials are rejected. The caller decides whether that is fatal.
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def create_schema(engine: AsyncEngine) -> None:
    """Create every mapped table that does not exist yet (tests, local dev)."""
    # Importing the models registers them on Base.metadata
    from snippetbox.models import snippet  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """Close every pooled connection. Called from the app lifespan on shutdown."""
    await engine.dispose()
