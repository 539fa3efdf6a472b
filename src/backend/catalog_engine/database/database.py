"""
Redis connection management for catalog settings.

Durable listing preferences and session-scoped filters are stored in Redis when
it is enabled and reachable; otherwise the in-memory fallback is used.
"""

import logging
import os
from typing import Optional

from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class RedisManager:
    """
    Redis manager for catalog settings.

    Features:
    - Durable preference storage
    - Session-scoped filter storage with TTL
    - Async connection pooling
    """

    def __init__(self):
        """Initialize Redis manager with .env configuration."""
        self.redis_url = os.getenv("REDIS_URL")
        self.redis_host = os.getenv("REDIS_HOST", "localhost")
        self.redis_port = int(os.getenv("REDIS_PORT", "6379"))
        self.redis_password = os.getenv("REDIS_PASSWORD")
        self.redis_db = int(os.getenv("REDIS_DB", "0"))
        self.enable_caching = os.getenv("ENABLE_REDIS_CACHING", "true").lower() == "true"
        self.session_ttl = int(os.getenv("SESSION_SETTINGS_TTL", "86400"))

        self.client: Optional[Redis] = None
        self._initialized = False

    async def init_redis(self):
        """Initialize Redis connection."""
        if self._initialized:
            return

        try:
            if self.redis_url:
                self.client = Redis.from_url(
                    self.redis_url,
                    decode_responses=True,
                    encoding="utf-8"
                )
            else:
                self.client = Redis(
                    host=self.redis_host,
                    port=self.redis_port,
                    password=self.redis_password,
                    db=self.redis_db,
                    decode_responses=True,
                    encoding="utf-8"
                )

            await self.client.ping()
            self._initialized = True
            logger.info(f"Redis connected: {self.redis_host}:{self.redis_port}")

        except Exception as e:
            logger.error(f"Redis connection failed: {e}")
            self.client = None
            raise

    async def close(self):
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.client = None
            self._initialized = False
            logger.info("Redis connection closed")


# Global manager instance
redis_manager = RedisManager()


async def init_redis():
    """Initialize Redis connection."""
    await redis_manager.init_redis()


async def get_redis_client() -> Optional[Redis]:
    """
    Get the Redis client, connecting on first use.

    Returns:
        Redis client instance
    """
    if not redis_manager._initialized:
        await redis_manager.init_redis()

    return redis_manager.client


async def close_redis():
    """Close Redis connections."""
    await redis_manager.close()
