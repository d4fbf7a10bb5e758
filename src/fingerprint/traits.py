"""
Fpyx — Trait Extraction.

Turns a request (a Starlette/FastAPI ``Request``, any object exposing
``headers``/``method``/``url``, a :class:`RequestSource` or a plain mapping)
into :class:`FingerprintTraits`. Pure computation: no I/O, no DNS.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional
from urllib.parse import quote, urljoin, urlsplit

from src.fingerprint.constants import DEFAULT_IP_HEADERS, PLACEHOLDER_BASE_URL
from src.fingerprint.headers import get_header, safe_trim
from src.fingerprint.ip_extraction import resolve_client_ip
from src.fingerprint.models import (
    FingerprintOptions,
    FingerprintTraits,
    PathNormalizer,
    RequestSource,
)

# Characters a browser leaves unescaped in a URL path
_PATH_SAFE = "/%:@!$&'()*+,;=-._~"


def extract_traits(source: Any, options: FingerprintOptions) -> FingerprintTraits:
    """Build the trait set for ``source`` under ``options``."""
    headers = _read(source, "headers")
    ip_headers = options.ip_headers if options.ip_headers is not None else DEFAULT_IP_HEADERS

    return FingerprintTraits(
        ip=resolve_client_ip(headers, ip_headers),
        user_agent=safe_trim(get_header(headers, "user-agent")),
        accept_language=safe_trim(get_header(headers, "accept-language")),
        method=extract_method(source) if options.include_method else None,
        path=(
            extract_path(_read(source, "url"), options.path_normalizer)
            if options.include_path
            else None
        ),
    )


def is_request_like(source: Any) -> bool:
    """True for full request objects (string ``method`` plus a ``url``)."""
    if isinstance(source, RequestSource):
        return False
    return isinstance(getattr(source, "method", None), str) and getattr(source, "url", None) is not None


def extract_method(source: Any) -> Optional[str]:
    if is_request_like(source):
        return source.method
    return _read(source, "method")


def extract_path(url_value: Any, normalizer: Optional[PathNormalizer] = None) -> Optional[str]:
    """
    Path component of ``url_value``, optionally passed through ``normalizer``.

    Strings are resolved against a placeholder origin so ``/a/b?x=1`` and
    ``https://host/a/b`` both yield ``/a/b``. A string that fails to parse
    is kept only when it already looks root-relative. Backslashes count as
    slashes and the path is percent-encoded, as a browser resolves it.
    """
    if url_value is None:
        return None

    path: Optional[str]
    if isinstance(url_value, str):
        try:
            parsed = urlsplit(urljoin(PLACEHOLDER_BASE_URL, url_value.replace("\\", "/")))
        except ValueError:
            path = url_value if url_value.startswith("/") else None
        else:
            path = quote(parsed.path or ("/" if parsed.netloc else ""), safe=_PATH_SAFE)
    elif getattr(url_value, "path", None) is not None:
        path = str(url_value.path)
    else:
        path = None

    if path is None:
        return None
    if normalizer is not None:
        return normalizer(path)
    return path


def _read(source: Any, name: str) -> Any:
    # Starlette requests are Mappings over the ASGI scope; attributes win
    if hasattr(source, name):
        return getattr(source, name)
    if isinstance(source, Mapping):
        return source.get(name)
    return None
