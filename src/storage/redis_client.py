"""
Fpyx — Redis Client Manager.

Manages async Redis connection lifecycle.
"""

from __future__ import annotations

import logging
from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.config import settings

logger = logging.getLogger("fpyx.storage.redis")


class RedisManager:
    """Manages a shared async Redis connection pool."""

    def __init__(self) -> None:
        self.client: Optional[aioredis.Redis] = None

    async def connect(self, url: Optional[str] = None) -> None:
        """Connect to Redis."""
        url = url or settings.redis_url
        client = aioredis.from_url(
            url,
            decode_responses=True,
            max_connections=settings.redis_max_connections,
            socket_timeout=settings.redis_socket_timeout,
            socket_connect_timeout=settings.redis_socket_timeout,
        )
        # If ping fails, self.client stays None
        await client.ping()
        self.client = client
        logger.info("Redis connected: %s", url)

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.client = None
            logger.info("Redis disconnected")

    async def health_check(self) -> bool:
        """Check if Redis is reachable."""
        if self.client is None:
            return False
        try:
            await self.client.ping()
        except (RedisError, OSError):
            logger.debug("Redis ping failed", exc_info=True)
            return False
        return True


redis_manager = RedisManager()
