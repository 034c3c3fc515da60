# 📄 File: app/shared/config/redis.py
#
# 🧭 Purpose (Layman Explanation):
# Configuration for the Redis server that relays "your garden just changed" messages
# between the service instances both partners happen to be connected to.
#
# 🧪 Purpose (Technical Summary):
# Redis configuration with connection pooling and environment-specific socket settings
# for the pub/sub change feed.
#
# 🔗 Dependencies:
# - redis Python package (redis.asyncio)
# - app.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - app.modules.shared_garden.infrastructure.external.change_feed (RedisChangeFeed)
# - app.api.v1.health (redis probe)

from typing import Any, Dict

import redis.asyncio as redis
from redis.asyncio import ConnectionPool, Redis

from .settings import get_settings

settings = get_settings()


# =============================================================================
# REDIS CONFIGURATION CLASS
# =============================================================================

class RedisConfig:
    """Redis configuration class with connection management."""

    def __init__(self):
        self.settings = settings
        self._connection_pool: ConnectionPool | None = None
        self._redis_client: Redis | None = None

    @property
    def redis_url(self) -> str:
        """Get Redis connection URL."""
        return self.settings.redis_url

    @property
    def connection_kwargs(self) -> Dict[str, Any]:
        """Get Redis connection configuration."""

        base_config = {
            "encoding": "utf-8",
            "decode_responses": True,
            "retry_on_timeout": True,
            "health_check_interval": 30,
        }

        # Environment-specific configurations
        if self.settings.is_production:
            base_config.update({
                "socket_timeout": 5.0,
                "socket_connect_timeout": 5.0,
                "socket_keepalive": True,
            })
        elif self.settings.is_development:
            base_config.update({
                "socket_connect_timeout": 10.0,
            })

        return base_config

    @property
    def pool_kwargs(self) -> Dict[str, Any]:
        """Get Redis connection pool configuration."""
        return {
            "max_connections": self.settings.REDIS_MAX_CONNECTIONS,
            **self.connection_kwargs
        }

    def create_connection_pool(self) -> ConnectionPool:
        """Create Redis connection pool."""
        if self._connection_pool is None:
            self._connection_pool = ConnectionPool.from_url(
                self.redis_url,
                **self.pool_kwargs
            )
        return self._connection_pool

    def create_redis_client(self) -> Redis:
        """Create Redis client with connection pool."""
        if self._redis_client is None:
            pool = self.create_connection_pool()
            self._redis_client = Redis(connection_pool=pool)
        return self._redis_client

    async def health_check(self) -> Dict[str, Any]:
        """Ping Redis and report a structured status."""
        try:
            await self.create_redis_client().ping()
            return {"status": "healthy"}
        except redis.RedisError as e:
            return {"status": "unhealthy", "error": str(e)}

    async def close_connections(self):
        """Close Redis connections and cleanup."""
        if self._redis_client:
            await self._redis_client.aclose()
            self._redis_client = None

        if self._connection_pool:
            await self._connection_pool.disconnect()
            self._connection_pool = None


# Global Redis configuration instance
redis_config = RedisConfig()
