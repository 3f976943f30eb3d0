# 📄 File: plant_health/shared/infrastructure/database/session.py
#
# 🧭 Purpose (Layman Explanation):
# Gives each request its own short conversation with the database and makes sure everything
# said in that conversation is either saved together or thrown away together.
#
# 🧪 Purpose (Technical Summary):
# Async SQLAlchemy session factory with a commit-on-success / rollback-on-error unit of work,
# and the FastAPI dependency that yields one session per request.
#
# 🔗 Dependencies:
# - sqlalchemy.ext.asyncio (AsyncSession, async_sessionmaker)
# - plant_health.shared.infrastructure.database.connection
# - fastapi (Request for app.state access)
#
# 🔄 Connected Modules / Calls From:
# - plant_health.main (lifespan builds the manager)
# - plant_diagnosis presentation dependencies (repository wiring)

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import exc
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from plant_health.shared.core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """
    Manages database sessions with transaction handling and automatic cleanup.
    """

    def __init__(self, engine: AsyncEngine):
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=True,
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get an async database session with automatic transaction management.

        The transaction commits when the block exits normally and rolls back
        when it raises. Application errors are re-raised unchanged;
        SQLAlchemy errors are wrapped in ``DatabaseError``.

        Yields:
            AsyncSession: Database session
        """
        session: AsyncSession = self._session_factory()

        try:
            yield session
            await session.commit()
            logger.debug("Database transaction committed successfully")

        except exc.SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database error occurred, transaction rolled back: {e}")
            raise DatabaseError(f"Database operation failed: {e}") from e

        except Exception:
            await session.rollback()
            logger.debug("Transaction rolled back after application error")
            raise

        finally:
            await session.close()


# FastAPI dependency for getting database sessions
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides one database session per request.

    Usage:
        @router.get("/plants")
        async def list_plants(db: AsyncSession = Depends(get_db_session)):
            ...

    Yields:
        AsyncSession: Database session bound to the request's unit of work
    """
    session_manager: DatabaseSessionManager = request.app.state.session_manager
    async with session_manager.get_session() as session:
        yield session
