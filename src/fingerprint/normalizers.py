"""
Fpyx — Path Normalizers.

Collapse high-cardinality path segments so ``/users/1`` and ``/users/2``
share one rate-limit bucket.
"""

from __future__ import annotations

import re

_UUID_SEGMENT = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
_DIGITS = re.compile(r"[0-9]+")


def collapse_ids(path: str, token: str = ":id") -> str:
    """
    Replace segments that are entirely a UUID or digits with ``token``.

    >>> collapse_ids("/users/123/profile")
    '/users/:id/profile'
    """
    segments = []
    for segment in path.split("/"):
        if _UUID_SEGMENT.match(segment) or _DIGITS.fullmatch(segment):
            segments.append(token)
        else:
            segments.append(segment)
    return "/".join(segments)
