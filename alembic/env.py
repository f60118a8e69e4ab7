"""
Alembic Migration Environment
===============================

What:  Applies the revisions in alembic/versions to the snippet store.
How:   The URL comes from Snippetbox settings (DATABASE_URL), never from
       alembic.ini. A single unpooled async engine is opened and Alembic's
       sync migration API runs on it through run_sync().
Who:   `alembic upgrade head`, `alembic downgrade base` and
       `alembic revision --autogenerate`. Online mode only.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine
from alembic import context

from snippetbox.config import get_settings
from snippetbox.database import Base

# Registers the snippets table on Base.metadata for --autogenerate
from snippetbox.models.snippet import Snippet  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def apply_revisions(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=Base.metadata,
        # autogenerate reports column type changes, e.g. the title length
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


async def migrate(database_url: str) -> None:
    engine = create_async_engine(database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(apply_revisions)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    raise SystemExit("offline (--sql) migrations are not supported; run against a database")

asyncio.run(migrate(get_settings().database_url))
