"""
Fpyx — Application Entry Point.

Starts the FastAPI application with the fingerprint rate-limit guard
and the API endpoints.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import settings
from src.api.routes import router as api_router
from src.proxy.guard import rate_limit_guard
from src.storage.redis_client import redis_manager

logger = logging.getLogger("fpyx")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup / shutdown lifecycle."""
    # ── Startup ──────────────────────────────────────────
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        force=True,
    )
    logger.info("Fpyx v%s starting…", "0.1.0")

    # Connect Redis (graceful — works without it in dev mode)
    try:
        await redis_manager.connect()
    except Exception as exc:
        logger.warning(
            "Redis unavailable (%s) — running without rate limiting. "
            "Set FPYX_REDIS_URL for enforcement.",
            exc,
        )

    logger.info(
        "Fingerprint scope: ip_headers=%s method=%s path=%s",
        ",".join(settings.ip_headers),
        settings.include_method,
        settings.include_path,
    )
    logger.info(
        "Limit: %d requests / %ds per fingerprint",
        settings.rate_limit_per_fingerprint,
        settings.rate_limit_window_sec,
    )

    yield

    # ── Shutdown ─────────────────────────────────────────
    await redis_manager.disconnect()
    logger.info("Fpyx stopped.")


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        description="Request fingerprinting for anonymous rate limiting",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(rate_limit_guard)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level,
    )
