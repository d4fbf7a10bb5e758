"""
Fpyx — Client IP Extraction.

Resolves a single client IP from an ordered list of trusted proxy headers.
Understands RFC 7239 ``Forwarded``, the de-facto ``X-Forwarded-For`` chain,
and plain single-address headers (``CF-Connecting-IP``, ``X-Real-IP`` …).

Only headers written by your own edge proxy should appear in the precedence
list: anything a client can send, a client can forge.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional, Sequence

from src.fingerprint.constants import INVALID_IP_TOKENS
from src.fingerprint.headers import get_header

logger = logging.getLogger("fpyx.fingerprint.ip")

FORWARDED_HEADER = "forwarded"
X_FORWARDED_FOR_HEADER = "x-forwarded-for"

# Unambiguous IPv4 "address:port". IPv6 literals never match.
_IPV4_WITH_PORT = re.compile(r"[0-9]{1,3}(?:\.[0-9]{1,3}){3}:[0-9]+")
_QUOTED_PAIR = re.compile(r"\\(.)")


def resolve_client_ip(headers: Any, precedence: Sequence[str]) -> Optional[str]:
    """
    Return the first valid client IP found in ``precedence`` order, or None.

    A header whose candidate is invalid (``unknown``, obfuscated ``_token``,
    empty brackets …) does not stop the scan; the next header is tried.
    """
    for header_name in precedence:
        value = get_header(headers, header_name)
        if value is None:
            continue

        normalized_name = header_name.lower()
        if normalized_name == FORWARDED_HEADER:
            candidate = parse_forwarded(value)
        elif normalized_name == X_FORWARDED_FOR_HEADER:
            candidate = take_first_list_entry(value)
        else:
            candidate = value.strip()

        ip = normalize_ip_candidate(candidate)
        if ip is not None:
            logger.debug("Client IP %s resolved from %s", ip, normalized_name)
            return ip

    return None


extract_client_ip = resolve_client_ip


def parse_forwarded(value: str) -> Optional[str]:
    """
    Extract the ``for=`` value of an RFC 7239 ``Forwarded`` header.

    The first group (comma-separated) that carries a ``for`` directive wins,
    even when its value turns out to be unusable. Quoted values are unquoted
    and their backslash escapes resolved; brackets and ports are left for
    :func:`normalize_ip_candidate`.
    """
    for group in _split_outside_quotes(value, ","):
        for directive in _split_outside_quotes(group, ";"):
            key, sep, raw_value = directive.partition("=")
            if not sep:
                continue
            if key.strip().lower() != "for":
                continue
            return _unquote(raw_value.strip())
    return None


def take_first_list_entry(value: str) -> str:
    """Leftmost entry of a comma-separated list, trimmed."""
    return value.split(",", 1)[0].strip()


def normalize_ip_candidate(value: Optional[str]) -> Optional[str]:
    """
    Validate a raw IP candidate and strip any port.

    Returns None for placeholders (``unknown``, ``null``, ``none``), RFC 7239
    obfuscated identifiers and malformed bracketed literals.
    """
    if value is None:
        return None

    trimmed = value.strip()
    if not trimmed:
        return None

    if trimmed.lower() in INVALID_IP_TOKENS:
        return None

    if trimmed.startswith("_"):
        return None

    # Unterminated quoted-string from a malformed Forwarded header
    if trimmed.startswith('"'):
        return None

    if trimmed.startswith("["):
        closing = trimmed.find("]")
        if closing <= 1:
            return None
        return trimmed[1:closing]

    if _IPV4_WITH_PORT.fullmatch(trimmed):
        return trimmed[: trimmed.rfind(":")]

    return trimmed


# ── Internal ─────────────────────────────────────────────


def _split_outside_quotes(value: str, separator: str) -> list[str]:
    """Split on ``separator`` except inside double-quoted strings."""
    parts: list[str] = []
    current: list[str] = []
    in_quotes = False
    escaped = False

    for char in value:
        if escaped:
            escaped = False
        elif in_quotes and char == "\\":
            escaped = True
        elif char == '"':
            in_quotes = not in_quotes
        elif char == separator and not in_quotes:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)

    parts.append("".join(current))
    return parts


def _unquote(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return _QUOTED_PAIR.sub(r"\1", value[1:-1])
    return value
