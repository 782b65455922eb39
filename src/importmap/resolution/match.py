from __future__ import annotations

from ada_url import URL

from importmap.ir import Blocked, SpecifierMap
from importmap.urls import is_absolute_url, is_special, parse_url, serialize_url

from .errors import ResolutionErrorCode, build_resolution_error


def _prefix_applies(specifier_key: str, normalized_specifier: str, as_url: URL | None) -> bool:
    if not specifier_key.endswith("/"):
        return False
    if not normalized_specifier.startswith(specifier_key):
        return False
    return as_url is None or is_special(as_url)


def _resolve_prefix_match(
    specifier_key: str,
    address: str,
    normalized_specifier: str,
) -> str:
    if not is_absolute_url(address) or not address.endswith("/"):
        raise build_resolution_error(
            ResolutionErrorCode.E_RESOLVE_ADDRESS_INVARIANT,
            f"address '{address}' for prefix '{specifier_key}' must be an absolute URL ending with '/'",
            normalized_specifier,
            witness=(specifier_key, address),
        )

    after_prefix = normalized_specifier[len(specifier_key) :]
    url = parse_url(after_prefix, address)
    if url is None:
        raise build_resolution_error(
            ResolutionErrorCode.E_RESOLVE_REMAINDER_UNPARSEABLE,
            f"'{after_prefix}' could not be parsed relative to '{address}'",
            normalized_specifier,
            witness=(specifier_key, address),
        )

    resolved = serialize_url(url)
    if not resolved.startswith(address):
        raise build_resolution_error(
            ResolutionErrorCode.E_RESOLVE_BACKTRACKING,
            f"resolution backtracks above its prefix '{specifier_key}'",
            normalized_specifier,
            witness=(specifier_key, address),
        )
    return resolved


def resolve_imports_match(
    normalized_specifier: str,
    as_url: URL | None,
    specifier_map: SpecifierMap,
) -> str | None:
    """Return the address a specifier map gives ``normalized_specifier``, or ``None``.

    The map must be ordered longest key first, so the first prefix hit is the most
    specific one. Blocked entries, unparseable remainders and backtracking raise
    ``ResolutionError`` instead of falling through.
    """
    for entry in specifier_map:
        if entry.key == normalized_specifier:
            if isinstance(entry.address, Blocked):
                raise build_resolution_error(
                    ResolutionErrorCode.E_RESOLVE_BLOCKED_EXACT,
                    f"resolution of '{entry.key}' was blocked by a null entry",
                    normalized_specifier,
                    witness=(entry.key,),
                )
            if not is_absolute_url(entry.address.url):
                raise build_resolution_error(
                    ResolutionErrorCode.E_RESOLVE_ADDRESS_INVARIANT,
                    f"address '{entry.address.url}' for '{entry.key}' must be an absolute URL",
                    normalized_specifier,
                    witness=(entry.key, entry.address.url),
                )
            return entry.address.url

        if _prefix_applies(entry.key, normalized_specifier, as_url):
            if isinstance(entry.address, Blocked):
                raise build_resolution_error(
                    ResolutionErrorCode.E_RESOLVE_BLOCKED_PREFIX,
                    f"resolution below prefix '{entry.key}' was blocked by a null entry",
                    normalized_specifier,
                    witness=(entry.key,),
                )
            return _resolve_prefix_match(entry.key, entry.address.url, normalized_specifier)
    return None
