from __future__ import annotations

import pytest

from importmap.ir import ImportMap, RawImportMap
from importmap.normalizer import normalize_import_map
from importmap.resolution import (
    ResolutionError,
    ResolutionErrorCode,
    ResolutionOutcome,
    resolve_imports_match,
    resolve_module_specifier,
    resolve_module_specifiers,
    scope_applies,
)
from importmap.urls import InvalidBaseURLError, resolve_url_like_module_specifier

pytestmark = pytest.mark.unit

_MAP_BASE = "https://example.com/app/"
_REFERRER = "https://example.com/app/main.js"


def _map(raw: RawImportMap) -> ImportMap:
    return normalize_import_map(raw, _MAP_BASE).import_map


def _error_code(specifier: str, import_map: ImportMap, base_url: str = _REFERRER) -> str:
    with pytest.raises(ResolutionError) as exc_info:
        resolve_module_specifier(specifier, import_map, base_url)
    return exc_info.value.detail.code


def test_exact_bare_mapping() -> None:
    import_map = _map({"imports": {"a": "/lib/a.js"}})
    assert resolve_module_specifier("a", import_map, _REFERRER) == "https://example.com/lib/a.js"


def test_prefix_mapping_appends_remainder() -> None:
    import_map = _map({"imports": {"a/": "/lib/a/"}})
    assert resolve_module_specifier("a/b.js", import_map, _REFERRER) == (
        "https://example.com/lib/a/b.js"
    )
    assert resolve_module_specifier("a/", import_map, _REFERRER) == "https://example.com/lib/a/"


def test_longest_prefix_wins() -> None:
    import_map = _map({"imports": {"a/": "/x/", "a/b/": "/y/"}})
    assert resolve_module_specifier("a/b/c.js", import_map, _REFERRER) == (
        "https://example.com/y/c.js"
    )
    assert resolve_module_specifier("a/c.js", import_map, _REFERRER) == "https://example.com/x/c.js"


def test_exact_key_beats_shorter_prefix() -> None:
    import_map = _map({"imports": {"a/": "/x/", "a/b": "/exact.js"}})
    assert resolve_module_specifier("a/b", import_map, _REFERRER) == "https://example.com/exact.js"


def test_url_like_specifier_is_remapped_by_its_canonical_form() -> None:
    import_map = _map({"imports": {"/app/a.js": "/b.js"}})
    assert resolve_module_specifier("./a.js", import_map, _REFERRER) == "https://example.com/b.js"
    assert resolve_module_specifier(
        "https://example.com/app/a.js", import_map, _REFERRER
    ) == ("https://example.com/b.js")


def test_special_url_prefix_remap() -> None:
    import_map = _map({"imports": {"https://cdn.example.org/": "/vendor/"}})
    assert resolve_module_specifier(
        "https://cdn.example.org/pkg/index.js", import_map, _REFERRER
    ) == ("https://example.com/vendor/pkg/index.js")


def test_non_special_url_never_prefix_matches() -> None:
    import_map = _map({"imports": {"data:text/": "/blocked/"}})
    assert resolve_module_specifier("data:text/javascript,1", import_map, _REFERRER) == (
        "data:text/javascript,1"
    )


def test_unmapped_url_like_specifiers_pass_through() -> None:
    import_map = _map({"imports": {"a": "/lib/a.js"}})
    assert resolve_module_specifier("./x.js", import_map, _REFERRER) == (
        "https://example.com/app/x.js"
    )
    assert resolve_module_specifier("https://cdn.example.org/x.js", import_map, _REFERRER) == (
        "https://cdn.example.org/x.js"
    )


def test_unmapped_bare_specifier_fails() -> None:
    code = _error_code("lodash", _map({"imports": {"a": "/lib/a.js"}}))
    assert code == ResolutionErrorCode.E_RESOLVE_BARE_SPECIFIER_UNMAPPED.value


def test_blocked_exact_and_prefix_entries_fail_without_fallthrough() -> None:
    import_map = _map({"imports": {"a": None, "p/": None, "p/x": "/x.js", "b/": "/b/"}})
    assert _error_code("a", import_map) == ResolutionErrorCode.E_RESOLVE_BLOCKED_EXACT.value
    assert _error_code("p/y", import_map) == ResolutionErrorCode.E_RESOLVE_BLOCKED_PREFIX.value
    assert resolve_module_specifier("p/x", import_map, _REFERRER) == "https://example.com/x.js"


def test_blocked_scope_entry_does_not_fall_through_to_top_level() -> None:
    import_map = _map(
        {
            "imports": {"a": "/top-a.js"},
            "scopes": {"/app/": {"a": None}},
        }
    )
    assert _error_code("a", import_map) == ResolutionErrorCode.E_RESOLVE_BLOCKED_EXACT.value
    assert resolve_module_specifier("a", import_map, "https://example.com/other.js") == (
        "https://example.com/top-a.js"
    )


def test_backtracking_above_prefix_fails() -> None:
    import_map = _map({"imports": {"a/": "/lib/a/"}})
    with pytest.raises(ResolutionError) as exc_info:
        resolve_module_specifier("a/../../etc", import_map, _REFERRER)
    detail = exc_info.value.detail
    assert detail.code == ResolutionErrorCode.E_RESOLVE_BACKTRACKING.value
    assert detail.specifier == "a/../../etc"
    assert detail.witness == ("a/", "https://example.com/lib/a/")
    assert str(exc_info.value).startswith("E_RESOLVE_BACKTRACKING: ")


def test_absolute_remainder_escaping_the_prefix_fails() -> None:
    import_map = _map({"imports": {"a/": "/lib/a/"}})
    assert _error_code("a/https://evil.example.net/x.js", import_map) == (
        ResolutionErrorCode.E_RESOLVE_BACKTRACKING.value
    )


def test_unparseable_remainder_fails() -> None:
    import_map = _map({"imports": {"a/": "/lib/a/"}})
    assert _error_code("a/http://[", import_map) == (
        ResolutionErrorCode.E_RESOLVE_REMAINDER_UNPARSEABLE.value
    )


def test_hand_built_map_violating_address_invariant_fails() -> None:
    import_map = ImportMap.from_dict({"imports": {"a/": "https://example.com/lib", "b": "/rel"}})
    assert _error_code("a/x", import_map) == ResolutionErrorCode.E_RESOLVE_ADDRESS_INVARIANT.value
    assert _error_code("b", import_map) == ResolutionErrorCode.E_RESOLVE_ADDRESS_INVARIANT.value


def test_host_only_url_key_maps_its_exact_url() -> None:
    import_map = _map({"imports": {"https://example.org": "/lib/a.js"}})
    assert resolve_module_specifier("https://example.org", import_map, _REFERRER) == (
        "https://example.com/lib/a.js"
    )
    assert resolve_module_specifier("https://example.org/", import_map, _REFERRER) == (
        "https://example.com/lib/a.js"
    )
    # Used as a prefix, the serialized key points at a module address, not a directory.
    assert _error_code("https://example.org/x.js", import_map) == (
        ResolutionErrorCode.E_RESOLVE_ADDRESS_INVARIANT.value
    )


def test_scope_wins_over_top_level() -> None:
    import_map = _map(
        {
            "imports": {"a": "/top/a.js"},
            "scopes": {"https://example.com/app/": {"a": "/scoped/a.js"}},
        }
    )
    assert resolve_module_specifier("a", import_map, "https://example.com/app/page.html") == (
        "https://example.com/scoped/a.js"
    )
    assert resolve_module_specifier("a", import_map, "https://example.com/page.html") == (
        "https://example.com/top/a.js"
    )


def test_unmatched_scope_falls_through_to_less_specific_scope_then_top_level() -> None:
    import_map = _map(
        {
            "imports": {"c": "/top-c.js"},
            "scopes": {
                "/": {"b": "/root-b.js"},
                "/app/deep/": {"a": "/deep-a.js"},
            },
        }
    )
    referrer = "https://example.com/app/deep/mod.js"
    assert resolve_module_specifier("a", import_map, referrer) == "https://example.com/deep-a.js"
    assert resolve_module_specifier("b", import_map, referrer) == "https://example.com/root-b.js"
    assert resolve_module_specifier("c", import_map, referrer) == "https://example.com/top-c.js"


def test_scope_without_trailing_slash_applies_only_on_exact_base() -> None:
    import_map = _map({"scopes": {"/app/page.js": {"a": "/exact-a.js"}}})
    assert resolve_module_specifier("a", import_map, "https://example.com/app/page.js") == (
        "https://example.com/exact-a.js"
    )
    assert _error_code("a", import_map, "https://example.com/app/page.js/x") == (
        ResolutionErrorCode.E_RESOLVE_BARE_SPECIFIER_UNMAPPED.value
    )


def test_scope_applies() -> None:
    assert scope_applies("https://example.com/app/", "https://example.com/app/x.js")
    assert scope_applies("https://example.com/app.js", "https://example.com/app.js")
    assert not scope_applies("https://example.com/app", "https://example.com/app/x.js")
    assert not scope_applies("https://example.com/app/", "https://example.com/other/x.js")


def test_resolve_imports_match_returns_none_when_nothing_matches() -> None:
    import_map = _map({"imports": {"a/": "/lib/a/"}})
    as_url = resolve_url_like_module_specifier("b", _REFERRER)
    assert resolve_imports_match("b", as_url, import_map.imports) is None


def test_invalid_base_url_is_a_precondition_error() -> None:
    with pytest.raises(InvalidBaseURLError):
        resolve_module_specifier("a", ImportMap(), "not a url")


def test_batch_resolution_reports_each_outcome() -> None:
    import_map = _map({"imports": {"a": "/lib/a.js", "blocked": None}})
    outcomes = resolve_module_specifiers(["a", "blocked", "lodash"], import_map, _REFERRER)
    assert [outcome.ok for outcome in outcomes] == [True, False, False]
    assert outcomes[0].resolved_url == "https://example.com/lib/a.js"
    assert outcomes[1].error is not None
    assert outcomes[1].error.detail.code == ResolutionErrorCode.E_RESOLVE_BLOCKED_EXACT.value
    assert outcomes[2].error is not None
    assert outcomes[2].error.detail.code == (
        ResolutionErrorCode.E_RESOLVE_BARE_SPECIFIER_UNMAPPED.value
    )


def test_outcome_requires_exactly_one_result() -> None:
    with pytest.raises(ValueError):
        ResolutionOutcome("a", None, None)
