# 📄 File: migrations/env.py
# 🧭 Purpose (Layman Explanation):
# Tells Alembic how to reach the database and which tables (plants and treatment steps) it is
# responsible for, so database changes can be applied safely in every environment.
# 🧪 Purpose (Technical Summary):
# Alembic environment for async SQLAlchemy: loads .env, reads the async database URL from
# Settings-compatible environment variables, targets DatabaseBase.metadata and runs
# migrations through an async engine (asyncpg).
# 🔗 Dependencies:
# - alembic (migration tool)
# - SQLAlchemy (ORM, async engine)
# - asyncpg (PostgreSQL async driver)
# - python-dotenv (environment variables)
# 🔄 Connected Modules / Calls From:
# - alembic CLI commands (upgrade, downgrade, revision)

import asyncio
import os
from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config

# Load environment variables
load_dotenv()

# Import the database base class
from plant_health.shared.config.database import DatabaseBase  # noqa: E402

# Import module models so autogenerate sees their tables
from plant_health.modules.plant_diagnosis.infrastructure.database.models import (  # noqa: E402,F401
    PlantModel,
    TreatmentModel,
)

# This is the Alembic Config object
config = context.config

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Set the target metadata for 'autogenerate' support
target_metadata = DatabaseBase.metadata

# Supabase-managed schemas are never touched by these migrations
SUPABASE_SCHEMAS = {"auth", "storage", "realtime", "vault", "extensions"}


def get_database_url() -> str:
    """
    Get the async database URL from environment variables.

    Returns:
        str: Database connection URL
    """
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        return database_url

    db_host = os.getenv("DB_HOST", "localhost")
    db_port = os.getenv("DB_PORT", "5432")
    db_user = os.getenv("DB_USER", "postgres")
    db_password = os.getenv("DB_PASSWORD", "")
    db_name = os.getenv("DB_NAME", "postgres")

    return f"postgresql+asyncpg://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


def include_object(object, name, type_, reflected, compare_to):
    """Skip objects living in Supabase-managed schemas."""
    if getattr(object, "schema", None) in SUPABASE_SCHEMAS:
        return False
    return True


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    Emits SQL to the script output without a database connection.
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
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """
    Run migrations through an async engine.
    """
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_database_url()

    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        connect_args={"statement_cache_size": 0} if "asyncpg" in configuration["sqlalchemy.url"] else {},
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """
    Run migrations in 'online' mode.
    """
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
