"""
Fpyx — REST API Routes.

Health, traffic stats and a fingerprint echo for checking proxy headers.
"""

from __future__ import annotations

import time

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from src.config import fingerprint_options, settings
from src.fingerprint.core import fingerprint
from src.mitigation.rate_limiter import rate_limiter
from src.proxy.guard import traffic
from src.storage.redis_client import redis_manager

router = APIRouter(tags=["Fpyx API"])


# ── Schemas ──────────────────────────────────────────────


class StatsResponse(BaseModel):
    uptime: float
    total_requests: int
    allowed_requests: int
    rate_limited_requests: int
    unique_fingerprints: int
    requests_per_second: float
    rate_limit: int
    window_sec: int


class BucketResponse(BaseModel):
    hash: str
    count: int
    limit: int
    window_sec: int


# ── State ────────────────────────────────────────────────

_start_time = time.time()


# ── Endpoints ────────────────────────────────────────────


@router.get("/health")
async def health_check():
    """Simple health check."""
    return {
        "status": "healthy",
        "version": "0.1.0",
        "redis": await redis_manager.health_check(),
    }


@router.get("/stats", response_model=StatsResponse)
async def get_stats():
    """Return current traffic counters."""
    return StatsResponse(
        uptime=time.time() - _start_time,
        total_requests=traffic.total_requests,
        allowed_requests=traffic.allowed_requests,
        rate_limited_requests=traffic.rate_limited_requests,
        unique_fingerprints=len(traffic.fingerprints),
        requests_per_second=round(traffic.requests_per_second, 2),
        rate_limit=rate_limiter.limit,
        window_sec=rate_limiter.window_sec,
    )


@router.get("/fingerprint")
async def get_fingerprint(request: Request):
    """Fingerprint of the calling request, with the parts that were hashed."""
    return fingerprint(request, fingerprint_options(settings)).to_dict()


@router.get("/buckets/{fingerprint_hash}", response_model=BucketResponse)
async def get_bucket(fingerprint_hash: str):
    """Current window count for a fingerprint bucket."""
    if len(fingerprint_hash) > 128:
        raise HTTPException(status_code=400, detail="Fingerprint hash too long")
    return BucketResponse(
        hash=fingerprint_hash,
        count=await rate_limiter.get_count(fingerprint_hash),
        limit=rate_limiter.limit,
        window_sec=rate_limiter.window_sec,
    )
