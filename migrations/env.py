# 📄 File: migrations/env.py
# 🧭 Purpose (Layman Explanation):
# Tells Alembic how to reach the garden database so table changes can be rolled out
# safely in development and production.
# 🧪 Purpose (Technical Summary):
# Alembic environment for the shared garden schema. Uses the same async driver URL as
# the service (asyncpg in production, aiosqlite locally) and runs migrations through an
# async engine; offline mode renders SQL from the URL alone.
# 🔗 Dependencies:
# - alembic (migration tool)
# - SQLAlchemy (async engine)
# - python-dotenv (environment variables)
# - app.shared.config.settings (database URL)
# 🔄 Connected Modules / Calls From:
# - alembic CLI commands (upgrade, downgrade, revision)

import asyncio
import os
import sys
from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config

load_dotenv()

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from app.shared.config.settings import get_settings
from app.shared.infrastructure.database.connection import Base

# Registers the garden tables on Base.metadata for autogenerate
from app.modules.shared_garden.infrastructure.database.models import (  # noqa: F401
    GardenDocumentModel,
    WalletModel,
)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

exclude_tables = config.get_main_option("exclude_tables", "")


def get_database_url() -> str:
    """DATABASE_URL when set, otherwise built from the DB_* settings."""
    return os.getenv("DATABASE_URL") or get_settings().database_url


def include_object(object, name, type_, reflected, compare_to):
    """Skip tables listed in the exclude_tables option."""
    if type_ == "table" and name in exclude_tables.split(","):
        return False
    return True


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    Calls to context.execute() here emit the given string to the script output.
    """
    context.configure(
        url=get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        include_object=include_object,
        # SQLite needs batch mode to alter tables
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_database_url()

    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
