"""
Fpyx — Fingerprint Data Model.

Value types produced and consumed by the fingerprint pipeline. All are
created fresh per call and carry no identity beyond their fields.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, Optional, Sequence

from src.fingerprint.hash import HashFunction

PathNormalizer = Callable[[str], str]


@dataclass(frozen=True)
class RequestSource:
    """Minimal request shape for callers without a full request object."""

    headers: Any
    method: Optional[str] = None
    url: Any = None  # str or a parsed URL exposing ``.path``


@dataclass(frozen=True)
class FingerprintTraits:
    """Coarse request traits. ``None`` means absent, never ``""``."""

    ip: Optional[str] = None
    user_agent: Optional[str] = None
    accept_language: Optional[str] = None
    method: Optional[str] = None
    path: Optional[str] = None


@dataclass(frozen=True)
class FingerprintOptions:
    """Per-call knobs. ``ip_headers=None`` selects ``DEFAULT_IP_HEADERS``."""

    ip_headers: Optional[Sequence[str]] = None
    include_method: bool = False
    include_path: bool = False
    path_normalizer: Optional[PathNormalizer] = None
    hash_fn: Optional[HashFunction] = None


@dataclass(frozen=True)
class FingerprintResult:
    """Digest plus the exact segments that were joined and hashed."""

    hash: str
    parts: tuple[str, ...]
    traits: FingerprintTraits

    def to_dict(self) -> dict:
        return {
            "hash": self.hash,
            "parts": list(self.parts),
            "traits": asdict(self.traits),
        }
