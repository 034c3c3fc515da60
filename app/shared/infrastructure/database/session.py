# 📄 File: app/shared/infrastructure/database/session.py
#
# 🧭 Purpose (Layman Explanation):
# Hands out database sessions (like conversations with the database) so that every
# garden change gets its own clean conversation that either fully happens or not at all.
#
# 🧪 Purpose (Technical Summary):
# Async SQLAlchemy session factory management. Transaction boundaries belong to the
# callers (the garden store opens one transaction per update attempt).
#
# 🔗 Dependencies:
# - sqlalchemy.ext.asyncio (AsyncSession, async_sessionmaker)
# - app/shared/infrastructure/database/connection.py (database engine)
#
# 🔄 Connected Modules / Calls From:
# - app.main (startup)
# - Shared garden dependency wiring (GardenStoreImpl construction)

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.shared.core.exceptions import DatabaseError
from app.shared.infrastructure.database.connection import get_database_engine

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """
    Owns the session factory bound to the application engine.
    """

    def __init__(self):
        self._session_factory: Optional[async_sessionmaker] = None
        self._initialized = False

    def initialize(self, engine: Optional[AsyncEngine] = None) -> None:
        """Initialize the session factory with database engine."""
        engine = engine or get_database_engine()
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Keep objects accessible after commit
            autoflush=False,         # Stores flush explicitly inside their transactions
        )
        self._initialized = True
        logger.info("Database session factory initialized successfully")

    @property
    def session_factory(self) -> async_sessionmaker:
        if not self._initialized or self._session_factory is None:
            raise DatabaseError("Session manager not initialized", operation="session_factory")
        return self._session_factory

    def close(self) -> None:
        self._session_factory = None
        self._initialized = False

    def is_initialized(self) -> bool:
        """Check if session manager is initialized."""
        return self._initialized


# Global session manager instance
session_manager = DatabaseSessionManager()


def initialize_sessions() -> None:
    """Initialize the global database session manager."""
    session_manager.initialize()
