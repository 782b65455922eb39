from __future__ import annotations

import re
from typing import Final

from ada_url import URL

SPECIAL_PROTOCOLS: Final[frozenset[str]] = frozenset(
    {
        "ftp:",
        "file:",
        "http:",
        "https:",
        "ws:",
        "wss:",
    }
)
_URL_LIKE_PREFIXES: Final[tuple[str, ...]] = ("/", "./", "../")
_SURROGATE: Final[re.Pattern[str]] = re.compile("[\ud800-\udfff]")


class InvalidBaseURLError(ValueError):
    def __init__(self, base_url: str) -> None:
        super().__init__(f"E_URL_BASE_INVALID: base URL must be an absolute URL: {base_url!r}")
        self.code = "E_URL_BASE_INVALID"
        self.message = f"base URL must be an absolute URL: {base_url!r}"
        self.base_url = base_url


def _to_usv_string(text: str) -> str:
    """Replace lone surrogates with U+FFFD, keeping surrogate pairs as one code point."""
    if _SURROGATE.search(text) is None:
        return text
    return text.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


def parse_url(input_text: str, base: str | None = None) -> URL | None:
    try:
        if base is None:
            return URL(_to_usv_string(input_text))
        return URL(_to_usv_string(input_text), _to_usv_string(base))
    except ValueError:
        return None


def serialize_url(url: URL) -> str:
    return url.href


def parse_base_url(base_url: str) -> str:
    parsed = parse_url(base_url)
    if parsed is None:
        raise InvalidBaseURLError(base_url)
    return serialize_url(parsed)


def is_special(url: URL) -> bool:
    return url.protocol in SPECIAL_PROTOCOLS


def is_url_like(specifier: str) -> bool:
    return specifier.startswith(_URL_LIKE_PREFIXES)


def resolve_url_like_module_specifier(specifier: str, base_url: str) -> URL | None:
    """Parse ``specifier`` as a URL, relative to ``base_url`` only for ``/``, ``./`` and ``../``.

    Anything else must already be an absolute URL. ``None`` marks a bare specifier
    for keys and an invalid target for addresses.
    """
    if is_url_like(specifier):
        return parse_url(specifier, base_url)
    return parse_url(specifier)


def is_absolute_url(text: str) -> bool:
    return parse_url(text) is not None
