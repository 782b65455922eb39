from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .models import DiagnosticStage, Severity


@dataclass(frozen=True, slots=True)
class DiagnosticCatalogEntry:
    code: str
    severity: Severity
    stage: DiagnosticStage
    suggested_action: str

    def __post_init__(self) -> None:
        if not self.code:
            raise ValueError("diagnostic catalog code must be non-empty")
        if not self.suggested_action:
            raise ValueError(
                f"diagnostic catalog entry '{self.code}' suggested_action must be non-empty"
            )


def _entry(
    code: str,
    severity: Severity,
    stage: DiagnosticStage,
    suggested_action: str,
) -> DiagnosticCatalogEntry:
    return DiagnosticCatalogEntry(
        code=code,
        severity=severity,
        stage=stage,
        suggested_action=suggested_action,
    )


def _build_catalog(
    entries: tuple[DiagnosticCatalogEntry, ...],
) -> Mapping[str, DiagnosticCatalogEntry]:
    catalog: dict[str, DiagnosticCatalogEntry] = {}
    for entry in entries:
        if entry.code in catalog:
            raise ValueError(f"duplicate diagnostic catalog code: {entry.code}")
        catalog[entry.code] = entry
    return MappingProxyType(catalog)


_CATALOG_ENTRIES: tuple[DiagnosticCatalogEntry, ...] = (
    _entry(
        "W_NORM_EMPTY_SPECIFIER_KEY",
        Severity.WARNING,
        DiagnosticStage.NORMALIZE,
        "remove the empty specifier key from the import map",
    ),
    _entry(
        "W_NORM_ADDRESS_NOT_STRING",
        Severity.WARNING,
        DiagnosticStage.NORMALIZE,
        "map the specifier key to a URL string, or remove it to stop blocking it",
    ),
    _entry(
        "W_NORM_ADDRESS_INVALID",
        Severity.WARNING,
        DiagnosticStage.NORMALIZE,
        "use an absolute URL or a path starting with /, ./ or ../",
    ),
    _entry(
        "W_NORM_ADDRESS_TRAILING_SLASH",
        Severity.WARNING,
        DiagnosticStage.NORMALIZE,
        "end the address with / when its specifier key ends with /",
    ),
    _entry(
        "W_NORM_SCOPE_PREFIX_INVALID",
        Severity.WARNING,
        DiagnosticStage.NORMALIZE,
        "use a scope prefix that parses as a URL against the import map base URL",
    ),
    _entry(
        "E_RESOLVE_BARE_SPECIFIER_UNMAPPED",
        Severity.ERROR,
        DiagnosticStage.RESOLVE,
        "add an imports or scopes entry for the bare specifier",
    ),
    _entry(
        "E_RESOLVE_BLOCKED_EXACT",
        Severity.ERROR,
        DiagnosticStage.RESOLVE,
        "map the specifier key to a valid URL or stop importing it",
    ),
    _entry(
        "E_RESOLVE_BLOCKED_PREFIX",
        Severity.ERROR,
        DiagnosticStage.RESOLVE,
        "map the prefix key to a valid URL ending with / or stop importing below it",
    ),
    _entry(
        "E_RESOLVE_REMAINDER_UNPARSEABLE",
        Severity.ERROR,
        DiagnosticStage.RESOLVE,
        "fix the specifier part after the matched prefix so it parses as a relative URL",
    ),
    _entry(
        "E_RESOLVE_BACKTRACKING",
        Severity.ERROR,
        DiagnosticStage.RESOLVE,
        "remove .. segments that climb above the matched prefix",
    ),
    _entry(
        "E_RESOLVE_ADDRESS_INVARIANT",
        Severity.ERROR,
        DiagnosticStage.RESOLVE,
        "normalize the import map before resolving against it",
    ),
    _entry(
        "E_URL_BASE_INVALID",
        Severity.ERROR,
        DiagnosticStage.LOAD,
        "pass an absolute base URL such as https://example.com/",
    ),
    _entry(
        "E_LOAD_FILE_UNREADABLE",
        Severity.ERROR,
        DiagnosticStage.LOAD,
        "check that the import map path exists and is readable",
    ),
    _entry(
        "E_LOAD_SYNTAX_INVALID",
        Severity.ERROR,
        DiagnosticStage.LOAD,
        "fix the JSON or YAML syntax of the import map document",
    ),
    _entry(
        "E_LOAD_SHAPE_INVALID",
        Severity.ERROR,
        DiagnosticStage.LOAD,
        "make the top level an object with optional imports, scopes and integrity objects",
    ),
    _entry(
        "E_CONFIG_INVALID",
        Severity.ERROR,
        DiagnosticStage.LOAD,
        "fix the configuration file keys and value types",
    ),
    _entry(
        "E_CLI_OPTIONS_INVALID",
        Severity.ERROR,
        DiagnosticStage.LOAD,
        "provide the missing option on the command line or in the configuration file",
    ),
    _entry(
        "E_CLI_INTERNAL",
        Severity.ERROR,
        DiagnosticStage.LOAD,
        "report the failure with the input import map and command line",
    ),
)


CANONICAL_DIAGNOSTIC_CATALOG: Mapping[str, DiagnosticCatalogEntry] = _build_catalog(
    _CATALOG_ENTRIES
)

REQUIRED_CATALOG_FIELDS: tuple[str, ...] = ("code", "severity", "stage", "suggested_action")
