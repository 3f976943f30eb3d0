# 📄 File: plant_health/shared/infrastructure/database/connection.py
#
# 🧭 Purpose (Layman Explanation):
# Opens and looks after the connection to the database that stores plants and treatment steps,
# and can tell the health endpoint whether the database is answering.
#
# 🧪 Purpose (Technical Summary):
# Async SQLAlchemy engine lifecycle (initialize/close), connection event listeners
# (SQLite foreign-key enforcement so treatment rows cascade with their plant), and a health check.
#
# 🔗 Dependencies:
# - sqlalchemy (async engine, events)
# - plant_health.shared.config (settings, engine kwargs)
#
# 🔄 Connected Modules / Calls From:
# - plant_health.main (lifespan startup/shutdown, stored on app.state)
# - plant_health.shared.infrastructure.database.session
# - plant_health.api.v1.health (readiness probe)

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from plant_health.shared.config.database import build_engine_kwargs
from plant_health.shared.config.settings import Settings
from plant_health.shared.core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class DatabaseConnectionManager:
    """
    Owns the async engine for one application instance.

    Created by the application lifespan and passed to the session manager;
    there is no module-level engine.
    """

    def __init__(self, settings: Settings, engine: Optional[AsyncEngine] = None):
        self.settings = settings
        self._engine: Optional[AsyncEngine] = engine
        self._health_check_query = text("SELECT 1")

        if engine is not None:
            register_connection_events(engine)

    async def initialize(self) -> None:
        """Create the engine with the configured pool."""
        if self._engine is not None:
            logger.warning("Database engine already initialized")
            return

        try:
            logger.info("Initializing database connection pool...")
            self._engine = create_async_engine(**build_engine_kwargs(self.settings))
            register_connection_events(self._engine)
            logger.info("✅ Database connection initialized")
        except Exception as e:
            logger.error(f"Failed to initialize database connection: {e}")
            raise DatabaseError(f"Database initialization failed: {e}", operation="initialize") from e

    async def health_check(self) -> Dict[str, Any]:
        """
        Run ``SELECT 1`` once and return a structured status.

        Returns:
            Dict with ``status`` (healthy/unhealthy), ``timestamp`` and optional ``error``
        """
        timestamp = datetime.now(timezone.utc).isoformat()

        if not self.is_initialized:
            return {"status": "unhealthy", "error": "Database engine not initialized", "timestamp": timestamp}

        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(self._health_check_query)
                result.scalar()
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return {"status": "unhealthy", "error": str(e), "timestamp": timestamp}

        return {"status": "healthy", "timestamp": timestamp}

    async def close(self) -> None:
        """Dispose the engine and its pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            logger.info("Database connections closed")

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise DatabaseError("Database engine not initialized", operation="engine")
        return self._engine

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None


def register_connection_events(engine: AsyncEngine) -> None:
    """Register SQLAlchemy connection event listeners."""

    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        """Enable foreign keys on SQLite so ON DELETE CASCADE applies."""
        if engine.dialect.name != "sqlite":
            return
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
