"""
Redis client configuration and connection management.
Backs the per-session history and shopping list of the FoodBuddy API.
"""

import json
from typing import Any, Optional, List
import redis.asyncio as redis
from redis.asyncio import ConnectionPool
import structlog

from foodbuddy.core.config import settings

logger = structlog.get_logger(__name__)


class RedisClient:
    """Async Redis client with connection pooling and error handling.

    Every operation logs and degrades instead of raising: reads return
    empty values and writes return False when Redis is unreachable.
    """

    def __init__(self, url: Optional[str] = None):
        self.url = url or settings.redis_url
        self.pool: Optional[ConnectionPool] = None
        self.client: Optional[redis.Redis] = None

    async def connect(self):
        """Initialize Redis connection pool."""
        try:
            self.pool = ConnectionPool.from_url(
                self.url,
                max_connections=20,
                retry_on_timeout=True,
                socket_keepalive=True,
                health_check_interval=30,
                decode_responses=True,
            )

            self.client = redis.Redis(connection_pool=self.pool)

            await self.client.ping()
            logger.info("Redis connection established successfully")

        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise

    async def disconnect(self):
        """Close Redis connections gracefully."""
        if self.client:
            await self.client.close()
        if self.pool:
            await self.pool.disconnect()
        self.client = None
        self.pool = None
        logger.info("Redis connections closed")

    async def ping(self) -> bool:
        """Check that the Redis server answers."""
        try:
            if not self.client:
                await self.connect()
            return await self.client.ping() is True
        except Exception as e:
            logger.error(f"Redis PING error: {e}")
            return False

    async def delete(self, *keys: str) -> int:
        """Delete keys from Redis."""
        try:
            if not self.client:
                await self.connect()

            return await self.client.delete(*keys)

        except Exception as e:
            logger.error(f"Redis DELETE error for keys {keys}: {e}")
            return 0

    async def push_capped(self, key: str, value: Any, limit: int, ttl: Optional[int] = None) -> bool:
        """Push a JSON value to the head of a list and trim it to `limit` entries."""
        try:
            if not self.client:
                await self.connect()

            async with self.client.pipeline(transaction=True) as pipe:
                pipe.lpush(key, json.dumps(value, default=str))
                pipe.ltrim(key, 0, limit - 1)
                if ttl:
                    pipe.expire(key, ttl)
                await pipe.execute()

            return True

        except Exception as e:
            logger.error(f"Redis LPUSH error for key {key}: {e}")
            return False

    async def append(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Append a JSON value to the tail of a list."""
        try:
            if not self.client:
                await self.connect()

            await self.client.rpush(key, json.dumps(value, default=str))
            if ttl:
                await self.client.expire(key, ttl)

            return True

        except Exception as e:
            logger.error(f"Redis RPUSH error for key {key}: {e}")
            return False

    async def get_list(self, key: str) -> List[Any]:
        """Read a whole JSON list, head first."""
        try:
            if not self.client:
                await self.connect()

            values = await self.client.lrange(key, 0, -1)

        except Exception as e:
            logger.error(f"Redis LRANGE error for key {key}: {e}")
            return []

        items = []
        for value in values:
            try:
                items.append(json.loads(value))
            except json.JSONDecodeError:
                logger.warning("Skipping unreadable list entry", key=key)
        return items

    async def remove_value(self, key: str, value: Any) -> int:
        """Remove every occurrence of a JSON value from a list."""
        try:
            if not self.client:
                await self.connect()

            return await self.client.lrem(key, 0, json.dumps(value, default=str))

        except Exception as e:
            logger.error(f"Redis LREM error for key {key}: {e}")
            return 0


# Global Redis client instance
redis_client = RedisClient()


# Cache key generators
class CacheKeys:
    """Cache key generators for session-scoped data."""

    @staticmethod
    def history(session_id: str) -> str:
        return f"foodbuddy:history:{session_id}"

    @staticmethod
    def shopping_list(session_id: str) -> str:
        return f"foodbuddy:shopping_list:{session_id}"


# Cache TTL constants (in seconds)
class CacheTTL:
    """Cache TTL constants for session-scoped data."""

    HISTORY = 2592000  # 30 days
    SHOPPING_LIST = 2592000  # 30 days
