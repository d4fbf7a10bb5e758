"""
Fpyx — FNV-1a 64-bit Hash.

Fast, non-cryptographic digest used as the default fingerprint hash.
Not suitable where collision resistance or unforgeability matters.
"""

from __future__ import annotations

from typing import Callable

from src.fingerprint.constants import FNV_MASK_64, FNV_OFFSET_BASIS_64, FNV_PRIME_64

HashFunction = Callable[[bytes], str]


def hash_bytes(data: bytes) -> str:
    """
    FNV-1a 64 over ``data``, as a 16-character lowercase hex string.

    >>> hash_bytes(b"hello")
    'a430d84680aabd0b'
    """
    value = FNV_OFFSET_BASIS_64
    for byte in data:
        value ^= byte
        value = (value * FNV_PRIME_64) & FNV_MASK_64
    return f"{value:016x}"


fnv1a64_hex = hash_bytes
