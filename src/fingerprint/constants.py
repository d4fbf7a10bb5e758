"""
Fpyx — Fingerprint Constants.

Immutable values shared by every fingerprint call.
"""

from __future__ import annotations

# FNV-1a 64-bit parameters
FNV_OFFSET_BASIS_64 = 0xCBF29CE484222325
FNV_PRIME_64 = 0x100000001B3
FNV_MASK_64 = 0xFFFFFFFFFFFFFFFF

# Default precedence of client IP headers. Override to match your trusted proxy chain.
DEFAULT_IP_HEADERS: tuple[str, ...] = (
    "cf-connecting-ip",
    "fastly-client-ip",
    "fly-client-ip",
    "true-client-ip",
    "forwarded",
    "x-forwarded-for",
    "x-real-ip",
)

# Placeholder tokens a proxy writes when it has no address
INVALID_IP_TOKENS: frozenset[str] = frozenset({"", "unknown", "null", "none"})

# Base used to resolve root-relative URL strings
PLACEHOLDER_BASE_URL = "http://localhost"
