"""
Fpyx — Request Fingerprinting.

Derives a compact, deterministic rate-limit bucket key from coarse request
traits: trusted client IP, User-Agent, Accept-Language and, on request,
HTTP method and URL path. Traits are serialized into labelled segments,
joined with ``|``, UTF-8 encoded and hashed (FNV-1a 64 by default).

This is not identity, tracking or authentication. Clients behind one NAT,
VPN or corporate egress are expected to share a bucket.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from src.fingerprint.hash import hash_bytes
from src.fingerprint.models import FingerprintOptions, FingerprintResult, FingerprintTraits
from src.fingerprint.traits import extract_traits

logger = logging.getLogger("fpyx.fingerprint")

PART_SEPARATOR = "|"


def fingerprint(source: Any, options: Optional[FingerprintOptions] = None) -> FingerprintResult:
    """
    Fingerprint a request or request-like record.

    Exceptions raised by ``options.hash_fn`` or ``options.path_normalizer``
    propagate unchanged.
    """
    options = options or FingerprintOptions()
    traits = extract_traits(source, options)
    parts = build_parts(traits)
    payload = PART_SEPARATOR.join(parts).encode("utf-8")

    hash_fn = options.hash_fn or hash_bytes
    digest = hash_fn(payload)
    logger.debug("Fingerprint %s from %d part(s)", digest, len(parts))
    return FingerprintResult(hash=digest, parts=parts, traits=traits)


def build_parts(traits: FingerprintTraits) -> tuple[str, ...]:
    """
    Ordered payload segments.

    ``ip``/``ua``/``al`` are always present (empty when absent);
    ``method``/``path`` appear only when set.
    """
    segments = [
        f"ip:{traits.ip or ''}",
        f"ua:{traits.user_agent or ''}",
        f"al:{traits.accept_language or ''}",
    ]
    if traits.method is not None:
        segments.append(f"method:{traits.method}")
    if traits.path is not None:
        segments.append(f"path:{traits.path}")
    return tuple(segments)
