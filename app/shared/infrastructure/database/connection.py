# 📄 File: app/shared/infrastructure/database/connection.py
#
# 🧭 Purpose (Layman Explanation):
# Manages the connection to the database where shared gardens live, making sure we can
# talk to it and handling many connections without overwhelming it.
#
# 🧪 Purpose (Technical Summary):
# Async SQLAlchemy engine management with connection pooling, health checks with retry,
# the declarative Base for ORM models, and table creation for development setups.
# PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for local runs and tests.
#
# 🔗 Dependencies:
# - sqlalchemy (async engine)
# - app/shared/config/settings.py (database configuration)
# - asyncpg / aiosqlite (async drivers)
#
# 🔄 Connected Modules / Calls From:
# - app/shared/infrastructure/database/session.py (session management)
# - Garden ORM models (Base)
# - app.main (startup/shutdown), app.api.v1.health (health probe)

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from app.shared.config.settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class DatabaseConnectionManager:
    """
    Manages database connections with connection pooling,
    health monitoring, and automatic retry logic.
    """

    def __init__(self, database_url: Optional[str] = None):
        self._engine: Optional[AsyncEngine] = None
        self._database_url = database_url or settings.database_url
        self._health_check_query = text("SELECT 1")
        self._retry_attempts = 3
        self._retry_delay = 1.0

    @property
    def is_sqlite(self) -> bool:
        return self._database_url.startswith("sqlite")

    def _build_connection_params(self) -> Dict[str, Any]:
        """Build SQLAlchemy connection parameters from settings."""
        if self.is_sqlite:
            # One connection per session; SQLite serializes writers itself
            return {
                "url": self._database_url,
                "echo": settings.debug,
                "poolclass": NullPool,
                "connect_args": {"timeout": 30},
            }

        return {
            "url": self._database_url,
            "echo": settings.debug,
            "pool_pre_ping": True,  # Validate connections before use
            "pool_recycle": settings.database_pool_recycle,
            "pool_size": settings.database_pool_size,
            "max_overflow": settings.database_max_overflow,
            "pool_timeout": settings.database_pool_timeout,
            "connect_args": {
                "server_settings": {
                    "application_name": "shared_garden_backend",
                    "jit": "off"
                },
                "command_timeout": 60,
                "statement_cache_size": 0,
            }
        }

    async def initialize(self) -> None:
        """Initialize database engine with connection pooling."""
        if self._engine is not None:
            logger.warning("Database engine already initialized")
            return

        logger.info("Initializing database connection pool...")
        self._engine = create_async_engine(**self._build_connection_params())

        health = await self.health_check()
        if health["status"] != "healthy":
            await self.close()
            raise ConnectionError(health.get("error", "Database unreachable"))

        logger.info("Database connection pool initialized successfully")

    async def health_check(self) -> dict:
        """
        Perform database health check and return structured status.
        """
        if self._engine is None:
            return {
                "status": "unhealthy",
                "error": "Database engine not initialized",
                "timestamp": datetime.now(timezone.utc).isoformat()
            }

        for attempt in range(self._retry_attempts):
            try:
                async with self._engine.begin() as conn:
                    result = await conn.execute(self._health_check_query)
                    result.scalar()

                logger.debug("Database health check passed")
                return {
                    "status": "healthy",
                    "timestamp": datetime.now(timezone.utc).isoformat()
                }

            except Exception as e:
                logger.warning(
                    f"Database health check failed (attempt {attempt + 1}/{self._retry_attempts}): {e}"
                )
                if attempt < self._retry_attempts - 1:
                    await asyncio.sleep(self._retry_delay * (2 ** attempt))

        logger.error("Database health check failed after all retry attempts")
        return {
            "status": "unhealthy",
            "error": "Database health check failed after all retry attempts",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    async def create_tables(self) -> None:
        """Create any missing tables registered on Base."""
        if self._engine is None:
            raise RuntimeError("Database engine not initialized")
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Close database engine and all connections."""
        if self._engine is None:
            logger.warning("Database engine not initialized, nothing to close")
            return

        logger.info("Closing database connection pool...")
        await self._engine.dispose()
        self._engine = None
        logger.info("Database connection pool closed successfully")

    @property
    def engine(self) -> Optional[AsyncEngine]:
        """Get the SQLAlchemy async engine."""
        return self._engine

    @property
    def is_initialized(self) -> bool:
        """Check if database engine is initialized."""
        return self._engine is not None


# Global database connection manager instance
db_manager = DatabaseConnectionManager()


async def initialize_database() -> None:
    """Initialize the global database connection manager."""
    logger.info("Starting database initialization...")
    await db_manager.initialize()
    if settings.DB_CREATE_TABLES:
        await db_manager.create_tables()
    logger.info("Database initialization completed successfully.")


async def close_database() -> None:
    """Close the global database connection manager."""
    await db_manager.close()


def get_database_engine() -> AsyncEngine:
    """
    Get the database engine instance.

    Raises:
        RuntimeError: If database is not initialized
    """
    if not db_manager.is_initialized:
        raise RuntimeError("Database not initialized. Call initialize_database() first.")

    return db_manager.engine


async def database_health_check() -> dict:
    """Perform database health check."""
    return await db_manager.health_check()
