from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from importmap.ir import ImportMap
from importmap.urls import parse_base_url, resolve_url_like_module_specifier, serialize_url

from .errors import ResolutionError, ResolutionErrorCode, build_resolution_error
from .match import resolve_imports_match


@dataclass(frozen=True, slots=True)
class ResolutionOutcome:
    specifier: str
    resolved_url: str | None
    error: ResolutionError | None

    def __post_init__(self) -> None:
        if (self.resolved_url is None) == (self.error is None):
            raise ValueError("exactly one of resolved_url or error must be set")

    @property
    def ok(self) -> bool:
        return self.error is None


def scope_applies(scope_prefix: str, base_url: str) -> bool:
    if scope_prefix == base_url:
        return True
    return scope_prefix.endswith("/") and base_url.startswith(scope_prefix)


def resolve_module_specifier(specifier: str, import_map: ImportMap, base_url: str) -> str:
    """Resolve ``specifier`` referenced from ``base_url`` through a normalized import map.

    Applicable scopes are tried most specific first, then the top-level imports.
    An unmapped URL-like specifier resolves to its own serialization; an unmapped
    bare specifier raises ``ResolutionError``.
    """
    serialized_base_url = parse_base_url(base_url)
    as_url = resolve_url_like_module_specifier(specifier, serialized_base_url)
    normalized_specifier = serialize_url(as_url) if as_url is not None else specifier

    for scope in import_map.scopes:
        if not scope_applies(scope.prefix, serialized_base_url):
            continue
        scope_match = resolve_imports_match(normalized_specifier, as_url, scope.imports)
        if scope_match is not None:
            return scope_match

    top_level_match = resolve_imports_match(normalized_specifier, as_url, import_map.imports)
    if top_level_match is not None:
        return top_level_match

    if as_url is not None:
        return normalized_specifier

    raise build_resolution_error(
        ResolutionErrorCode.E_RESOLVE_BARE_SPECIFIER_UNMAPPED,
        f"bare specifier '{specifier}' is not remapped by the import map",
        specifier,
    )


def resolve_module_specifiers(
    specifiers: Iterable[str],
    import_map: ImportMap,
    base_url: str,
) -> tuple[ResolutionOutcome, ...]:
    outcomes: list[ResolutionOutcome] = []
    for specifier in specifiers:
        try:
            resolved = resolve_module_specifier(specifier, import_map, base_url)
        except ResolutionError as exc:
            outcomes.append(ResolutionOutcome(specifier, None, exc))
        else:
            outcomes.append(ResolutionOutcome(specifier, resolved, None))
    return tuple(outcomes)
