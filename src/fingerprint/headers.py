"""
Fpyx — Header Lookup.

Case-insensitive, multi-value aware access over the header containers a
Python web stack hands out: Starlette / Werkzeug / httpx ``Headers``, plain
dicts, or raw ``(name, value)`` pair lists such as an ASGI scope's.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional


def get_header(headers: Any, name: str) -> Optional[str]:
    """
    Return every value of header ``name`` joined with ``", "``, or None.

    Containers exposing ``getlist`` / ``get_list`` are trusted to do their
    own case folding; anything else is scanned pair by pair.
    """
    if headers is None:
        return None

    getlist = getattr(headers, "getlist", None) or getattr(headers, "get_list", None)
    if callable(getlist):
        values = [_text(v) for v in getlist(name)]
    else:
        values = _scan(headers, name.lower())

    values = [v for v in values if v is not None]
    if not values:
        return None
    return ", ".join(values)


def safe_trim(value: Optional[str]) -> Optional[str]:
    """Trimmed value, or None if missing or blank."""
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def _scan(headers: Any, target: str) -> list[Optional[str]]:
    items = headers.items() if isinstance(headers, Mapping) else headers
    values: list[Optional[str]] = []
    for key, value in items:
        if _text(key).lower() != target:
            continue
        if isinstance(value, (list, tuple)):
            values.extend(_text(v) for v in value)
        else:
            values.append(_text(value))
    return values


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value)
