"""
Fpyx — Redis-backed Rate Limiter.

Sliding-window rate limiter using Redis sorted sets, keyed on the
request fingerprint hash.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Optional

from redis.exceptions import RedisError

from src.config import settings
from src.storage.redis_client import redis_manager

logger = logging.getLogger("fpyx.mitigation.rate_limiter")


class RateLimiter:
    """
    Sliding-window rate limiter.

    Each bucket is a Redis sorted set of request timestamps; members older
    than the window are pruned on every check. Without Redis the limiter
    fails open.
    """

    KEY_PREFIX = "rl:fp:"

    def __init__(self, limit: Optional[int] = None, window_sec: Optional[int] = None) -> None:
        self.limit = limit if limit is not None else settings.rate_limit_per_fingerprint
        self.window_sec = window_sec if window_sec is not None else settings.rate_limit_window_sec

    def bucket_key(self, fingerprint_hash: str) -> str:
        return f"{self.KEY_PREFIX}{fingerprint_hash}"

    async def allow(self, fingerprint_hash: str) -> bool:
        """Return True if the request is within rate limits."""
        allowed, _ = await self.allow_with_count(fingerprint_hash)
        return allowed

    async def allow_with_count(self, fingerprint_hash: str) -> tuple[bool, int]:
        """Record one request and return (allowed, current_count)."""
        redis = redis_manager.client
        if redis is None:
            return True, 0  # No Redis → fail-open

        now = time.time()
        window_start = now - self.window_sec
        # Unique member per request so zadd doesn't deduplicate
        member = f"{now}:{uuid.uuid4().hex[:8]}"
        key = self.bucket_key(fingerprint_hash)

        try:
            pipe = redis.pipeline()
            pipe.zremrangebyscore(key, "-inf", window_start)
            pipe.zadd(key, {member: now})
            pipe.zcard(key)
            pipe.expire(key, self.window_sec + 10)
            results = await pipe.execute()
        except RedisError as exc:
            logger.warning("Rate limit check failed for %s, allowing: %s", key, exc)
            return True, 0

        count = int(results[2])  # zcard result
        return count <= self.limit, count

    async def get_count(self, fingerprint_hash: str) -> int:
        """Current request count for a bucket in the window."""
        redis = redis_manager.client
        if redis is None:
            return 0
        window_start = time.time() - self.window_sec
        try:
            return await redis.zcount(self.bucket_key(fingerprint_hash), window_start, "+inf")
        except RedisError as exc:
            logger.warning("Rate limit count failed: %s", exc)
            return 0


rate_limiter = RateLimiter()
