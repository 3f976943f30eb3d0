# 📄 File: plant_health/shared/config/database.py
#
# 🧭 Purpose (Layman Explanation):
# Describes how to connect to the database that keeps every plant and its treatment steps,
# and provides the common base that all database tables are built from.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy declarative base with a constraint naming convention, plus environment-aware
# async engine keyword arguments (pooled asyncpg for PostgreSQL, single-connection aiosqlite
# for local SQLite files).
#
# 🔗 Dependencies:
# - SQLAlchemy declarative base and pools
# - plant_health.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - plant_health.shared.infrastructure.database.connection
# - plant_diagnosis infrastructure models
# - migrations/env.py

from typing import Any, Dict

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from .settings import Settings


# =============================================================================
# ENGINE CONFIGURATION
# =============================================================================

def build_engine_kwargs(settings: Settings) -> Dict[str, Any]:
    """
    Get SQLAlchemy async engine configuration for the configured database.

    Args:
        settings: Application settings

    Returns:
        Keyword arguments for ``create_async_engine``
    """
    if settings.is_sqlite:
        return {
            "url": settings.database_url,
            "echo": settings.DB_ECHO,
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }

    return {
        "url": settings.database_url,
        "echo": settings.DB_ECHO,
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
        "connect_args": {
            "server_settings": {
                "application_name": f"plant_health_{settings.ENVIRONMENT}",
                "jit": "off",
            },
            "command_timeout": 60,
            # Supabase's pgbouncer does not support prepared statement caching
            "statement_cache_size": 0,
        },
    }


# =============================================================================
# DATABASE MODELS BASE CLASS
# =============================================================================

# Naming convention for database constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata = MetaData(naming_convention=convention)


class DatabaseBase(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Provides the shared metadata (and its naming convention) so Alembic
    autogenerate sees every table.
    """
    metadata = metadata
