from __future__ import annotations

import json
from collections.abc import Iterable

from .models import DiagnosticEvent, DiagnosticStage, Severity

_SEVERITY_RANK: dict[Severity, int] = {
    Severity.ERROR: 0,
    Severity.WARNING: 1,
}

_STAGE_RANK: dict[DiagnosticStage, int] = {
    DiagnosticStage.LOAD: 0,
    DiagnosticStage.NORMALIZE: 1,
    DiagnosticStage.RESOLVE: 2,
}


def canonical_witness_json(witness: object | None) -> str:
    if witness is None:
        return ""
    return json.dumps(witness, sort_keys=True, separators=(",", ":"), ensure_ascii=True)


def _optional_sort_key(value: str | None) -> tuple[int, str]:
    if value is None:
        return (1, "")
    return (0, value)


def diagnostic_sort_key(
    event: DiagnosticEvent,
) -> tuple[int, int, str, tuple[int, str], tuple[int, str], tuple[int, str], str, str]:
    return (
        _SEVERITY_RANK[event.severity],
        _STAGE_RANK[event.stage],
        event.code,
        _optional_sort_key(event.scope_prefix),
        _optional_sort_key(event.specifier_key),
        _optional_sort_key(event.specifier),
        event.message,
        canonical_witness_json(event.witness),
    )


def sort_diagnostics(events: Iterable[DiagnosticEvent]) -> list[DiagnosticEvent]:
    return sorted(events, key=diagnostic_sort_key)
