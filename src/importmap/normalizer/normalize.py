from __future__ import annotations

from collections.abc import Mapping
from typing import NamedTuple

from importmap.diagnostics import DiagnosticEvent
from importmap.ir import (
    BLOCKED,
    Address,
    ImportMap,
    Mapped,
    RawImportMap,
    ScopeEntry,
    Scopes,
    SpecifierMap,
    SpecifierMapEntry,
)
from importmap.urls import (
    parse_base_url,
    parse_url,
    resolve_url_like_module_specifier,
    serialize_url,
)

from .warnings import NormalizationWarningCode, build_normalization_warning


class NormalizationResult(NamedTuple):
    import_map: ImportMap
    diagnostics: tuple[DiagnosticEvent, ...]


def _by_key_length_descending[T](items: Mapping[str, T]) -> list[tuple[str, T]]:
    # sorted() stays stable with reverse=True, so equal-length keys keep input order.
    return sorted(items.items(), key=lambda item: len(item[0]), reverse=True)


def _require_mapping(value: object, field_name: str) -> Mapping[str, object]:
    if not isinstance(value, Mapping):
        raise TypeError(f"{field_name} must be a mapping, got {type(value).__name__}")
    return value


def normalize_specifier_key(
    specifier_key: str,
    base_url: str,
    *,
    diagnostics: list[DiagnosticEvent],
    scope_prefix: str | None = None,
) -> str | None:
    if not specifier_key:
        diagnostics.append(
            build_normalization_warning(
                NormalizationWarningCode.EMPTY_SPECIFIER_KEY,
                "specifier key cannot be an empty string",
                specifier_key="",
                scope_prefix=scope_prefix,
            )
        )
        return None
    url = resolve_url_like_module_specifier(specifier_key, base_url)
    if url is not None:
        return serialize_url(url)
    return specifier_key


def _normalize_address(
    specifier_key: str,
    normalized_key: str,
    value: object,
    base_url: str,
    *,
    diagnostics: list[DiagnosticEvent],
    scope_prefix: str | None,
) -> Address:
    if not isinstance(value, str):
        diagnostics.append(
            build_normalization_warning(
                NormalizationWarningCode.NOT_STRING_ADDRESS,
                f"address for '{specifier_key}' must be a string; the key is now blocked",
                specifier_key=specifier_key,
                scope_prefix=scope_prefix,
                witness={"value_type": type(value).__name__},
            )
        )
        return BLOCKED

    address_url = resolve_url_like_module_specifier(value, base_url)
    if address_url is None:
        diagnostics.append(
            build_normalization_warning(
                NormalizationWarningCode.INVALID_ADDRESS,
                f"address '{value}' for '{specifier_key}' is not a valid URL",
                specifier_key=specifier_key,
                scope_prefix=scope_prefix,
                address=value,
            )
        )
        return BLOCKED

    address = serialize_url(address_url)
    if specifier_key.endswith("/") and not address.endswith("/"):
        diagnostics.append(
            build_normalization_warning(
                NormalizationWarningCode.ADDRESS_TRAILING_SLASH,
                f"address '{address}' for prefix key '{specifier_key}' must end with '/'",
                specifier_key=specifier_key,
                scope_prefix=scope_prefix,
                address=address,
                witness={"normalized_key": normalized_key},
            )
        )
        return BLOCKED
    return Mapped(address)


def sort_and_normalize_specifier_map(
    original_map: Mapping[str, object],
    base_url: str,
    *,
    diagnostics: list[DiagnosticEvent],
    scope_prefix: str | None = None,
) -> SpecifierMap:
    normalized: dict[str, Address] = {}
    for specifier_key, value in original_map.items():
        normalized_key = normalize_specifier_key(
            specifier_key,
            base_url,
            diagnostics=diagnostics,
            scope_prefix=scope_prefix,
        )
        if normalized_key is None:
            continue
        # A repeated normalized key keeps its first position and takes the latest address.
        normalized[normalized_key] = _normalize_address(
            specifier_key,
            normalized_key,
            value,
            base_url,
            diagnostics=diagnostics,
            scope_prefix=scope_prefix,
        )
    return SpecifierMap(
        tuple(
            SpecifierMapEntry(key, address)
            for key, address in _by_key_length_descending(normalized)
        )
    )


def sort_and_normalize_scopes(
    original_map: Mapping[str, object],
    base_url: str,
    *,
    diagnostics: list[DiagnosticEvent],
) -> Scopes:
    normalized: dict[str, SpecifierMap] = {}
    for scope_prefix, potential_specifier_map in original_map.items():
        specifier_map = _require_mapping(potential_specifier_map, f"scopes[{scope_prefix!r}]")
        scope_prefix_url = parse_url(scope_prefix, base_url)
        if scope_prefix_url is None:
            diagnostics.append(
                build_normalization_warning(
                    NormalizationWarningCode.INVALID_SCOPE_PREFIX,
                    f"scope prefix '{scope_prefix}' is not a parseable URL; the scope is dropped",
                    scope_prefix=scope_prefix,
                )
            )
            continue
        normalized_prefix = serialize_url(scope_prefix_url)
        normalized[normalized_prefix] = sort_and_normalize_specifier_map(
            specifier_map,
            base_url,
            diagnostics=diagnostics,
            scope_prefix=normalized_prefix,
        )
    return Scopes(
        tuple(
            ScopeEntry(prefix, imports)
            for prefix, imports in _by_key_length_descending(normalized)
        )
    )


def normalize_import_map(raw: RawImportMap | Mapping[str, object], base_url: str) -> NormalizationResult:
    """Sort and normalize a raw import map against ``base_url``.

    Malformed entries never abort the call: they are dropped or blocked and
    reported as warning diagnostics, in the order they were encountered. The
    ``integrity`` section is accepted and ignored.

    Raises:
        InvalidBaseURLError: ``base_url`` is not an absolute URL.
        TypeError: the top level, ``imports`` or ``scopes`` is not a mapping.
    """
    serialized_base_url = parse_base_url(base_url)
    document = _require_mapping(raw, "import map")
    diagnostics: list[DiagnosticEvent] = []

    raw_imports = document.get("imports")
    imports = (
        sort_and_normalize_specifier_map(
            _require_mapping(raw_imports, "imports"),
            serialized_base_url,
            diagnostics=diagnostics,
        )
        if raw_imports is not None
        else SpecifierMap()
    )
    raw_scopes = document.get("scopes")
    scopes = (
        sort_and_normalize_scopes(
            _require_mapping(raw_scopes, "scopes"),
            serialized_base_url,
            diagnostics=diagnostics,
        )
        if raw_scopes is not None
        else Scopes()
    )
    return NormalizationResult(
        import_map=ImportMap(imports=imports, scopes=scopes),
        diagnostics=tuple(diagnostics),
    )
