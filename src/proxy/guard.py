"""
Fpyx — Rate-Limit Guard Middleware.

Fingerprints every incoming request, charges it to the fingerprint's
bucket and answers 429 once the bucket is over its limit.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict, deque
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from fastapi import Request, Response

from src.config import fingerprint_options, settings
from src.fingerprint.core import fingerprint
from src.mitigation.rate_limiter import rate_limiter

logger = logging.getLogger("fpyx.proxy.guard")


# ── Real-time traffic counters ──────────────────────────────


@dataclass
class TrafficCounters:
    """In-memory counters for the stats endpoint."""
    total_requests: int = 0
    rate_limited_requests: int = 0
    allowed_requests: int = 0
    max_fingerprints: int = 10000
    # Most recently seen fingerprints, oldest evicted first
    fingerprints: OrderedDict = field(default_factory=OrderedDict)
    # Per-second request timestamps for RPS calculation
    _request_times: deque = field(default_factory=lambda: deque(maxlen=10000))

    @property
    def requests_per_second(self) -> float:
        """Calculate RPS from last 10 seconds."""
        cutoff = time.time() - 10
        count = sum(1 for t in self._request_times if t > cutoff)
        return count / 10.0

    def record_request(self, fingerprint_hash: str) -> None:
        self.total_requests += 1
        self.fingerprints[fingerprint_hash] = None
        self.fingerprints.move_to_end(fingerprint_hash)
        while len(self.fingerprints) > self.max_fingerprints:
            self.fingerprints.popitem(last=False)
        self._request_times.append(time.time())


traffic = TrafficCounters(max_fingerprints=settings.max_tracked_fingerprints)


def is_exempt(path: str) -> bool:
    return any(path == p or path.startswith(p.rstrip("/") + "/") for p in settings.exempt_paths)


async def rate_limit_guard(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """
    HTTP middleware.

    Pipeline:
      1. Skip exempt paths
      2. Fingerprint the request
      3. Sliding-window check on the fingerprint bucket
      4. 429 or forward to the app with rate-limit headers
    """
    if is_exempt(request.url.path):
        return await call_next(request)

    result = fingerprint(request, fingerprint_options(settings))
    traffic.record_request(result.hash)

    allowed, count = await rate_limiter.allow_with_count(result.hash)
    if not allowed:
        traffic.rate_limited_requests += 1
        logger.info(
            "Rate limit exceeded for %s (%d/%d, ip=%s)",
            result.hash, count, rate_limiter.limit, result.traits.ip,
        )
        return Response(
            status_code=429,
            content="Too Many Requests",
            headers={"Retry-After": str(rate_limiter.window_sec)},
        )

    traffic.allowed_requests += 1
    response = await call_next(request)
    response.headers["X-RateLimit-Limit"] = str(rate_limiter.limit)
    response.headers["X-RateLimit-Remaining"] = str(max(rate_limiter.limit - count, 0))
    return response
