"""
Fpyx — Configuration via Pydantic Settings.

All settings are loaded from environment variables or .env file.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from src.fingerprint.constants import DEFAULT_IP_HEADERS
from src.fingerprint.models import FingerprintOptions
from src.fingerprint.normalizers import collapse_ids


class Settings(BaseSettings):
    """Application-wide settings loaded from env / .env."""

    # ── General ──────────────────────────────────────────────
    app_name: str = "Fpyx"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"

    # ── Fingerprint ──────────────────────────────────────────
    ip_headers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IP_HEADERS),
        description="Trusted client IP headers, highest precedence first",
    )
    include_method: bool = Field(
        default=False, description="Scope buckets per HTTP method",
    )
    include_path: bool = Field(
        default=False, description="Scope buckets per URL path",
    )
    collapse_path_ids: bool = Field(
        default=False,
        description="Replace numeric / UUID path segments with ':id'",
    )

    # ── Redis ────────────────────────────────────────────────
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for rate limit windows",
    )
    redis_max_connections: int = Field(
        default=50, description="Connection pool size for the Redis client",
    )
    redis_socket_timeout: float = Field(
        default=2.0, description="Seconds before a Redis command times out",
    )

    # ── Rate Limits ──────────────────────────────────────────
    rate_limit_per_fingerprint: int = Field(
        default=100, description="Requests per window per fingerprint",
    )
    rate_limit_window_sec: int = Field(
        default=60, description="Sliding window length in seconds",
    )
    exempt_paths: list[str] = Field(
        default_factory=lambda: ["/api/health", "/api/docs", "/api/redoc", "/openapi.json"],
        description="Paths never counted against a bucket",
    )
    max_tracked_fingerprints: int = Field(
        default=10000,
        description="Recent fingerprints kept in memory for /api/stats",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"debug", "info", "warning", "error", "critical"}
        if v.lower() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.lower()

    @field_validator("ip_headers")
    @classmethod
    def lowercase_ip_headers(cls, v: list[str]) -> list[str]:
        return [name.strip().lower() for name in v if name.strip()]

    model_config = {
        "env_prefix": "FPYX_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


def fingerprint_options(cfg: Settings) -> FingerprintOptions:
    """FingerprintOptions matching the configured scoping."""
    return FingerprintOptions(
        ip_headers=tuple(cfg.ip_headers),
        include_method=cfg.include_method,
        include_path=cfg.include_path,
        path_normalizer=collapse_ids if cfg.collapse_path_ids else None,
    )


# Singleton
settings = Settings()
