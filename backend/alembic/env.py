"""Alembic environment — migrations for the `snapshot_documents` table.

Only used with STORAGE_BACKEND=sql. The URL comes from the application
Settings, so migrations always target the same database the API writes to.

Design Decisions:
    - Settings (pydantic-settings) over a second URL parser: DATABASE_URL,
      .env and the postgresql:// → postgresql+asyncpg:// rewrite are shared
      with the running app
    - alembic.ini's sqlalchemy.url is a fallback for tooling runs without a
      BOT_TOKEN in the environment
"""

import asyncio
from logging.config import fileConfig

from pydantic import ValidationError
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

from storefront.config import get_settings
from storefront.db.base import Base
# Import all models so Base.metadata has them
from storefront.models.snapshot_document import SnapshotDocument  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    try:
        return get_settings().database_url
    except ValidationError:
        # Settings refuse to load without BOT_TOKEN; schema work does not need it
        return config.get_main_option("sqlalchemy.url")


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of executing it."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = _database_url()
    engine = async_engine_from_config(
        section, prefix="sqlalchemy.", poolclass=pool.NullPool,
    )
    async with engine.connect() as connection:
        await connection.run_sync(_run_sync)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
