from .parse import (
    SPECIAL_PROTOCOLS,
    InvalidBaseURLError,
    is_absolute_url,
    is_special,
    parse_base_url,
    parse_url,
    resolve_url_like_module_specifier,
    serialize_url,
)

__all__ = [
    "InvalidBaseURLError",
    "SPECIAL_PROTOCOLS",
    "is_absolute_url",
    "is_special",
    "parse_base_url",
    "parse_url",
    "resolve_url_like_module_specifier",
    "serialize_url",
]
