from __future__ import annotations

import logging
from collections.abc import Iterable

from importmap.resolution.errors import ResolutionError

from .catalog import CANONICAL_DIAGNOSTIC_CATALOG
from .models import DiagnosticEvent, DiagnosticStage, Severity

_INTERNAL_CODE = "E_CLI_INTERNAL"
_LOG_LEVELS: dict[Severity, int] = {
    Severity.ERROR: logging.ERROR,
    Severity.WARNING: logging.WARNING,
}


def build_diagnostic_event(  # noqa: PLR0913
    *,
    code: str,
    message: str,
    specifier_key: str | None = None,
    scope_prefix: str | None = None,
    address: str | None = None,
    specifier: str | None = None,
    source: str | None = None,
    witness: object | None = None,
    severity: Severity | None = None,
    stage: DiagnosticStage | None = None,
    suggested_action: str | None = None,
) -> DiagnosticEvent:
    if not code:
        raise ValueError("diagnostic code must be non-empty")
    if not message:
        raise ValueError("diagnostic message must be non-empty")
    if source is not None and not source:
        raise ValueError("diagnostic source must be non-empty when provided")

    catalog_entry = CANONICAL_DIAGNOSTIC_CATALOG.get(code)
    resolved_severity = (
        severity
        if severity is not None
        else _require_catalog_field(
            code=code,
            field_name="severity",
            value=(None if catalog_entry is None else catalog_entry.severity),
        )
    )
    resolved_stage = (
        stage
        if stage is not None
        else _require_catalog_field(
            code=code,
            field_name="stage",
            value=(None if catalog_entry is None else catalog_entry.stage),
        )
    )
    resolved_action = (
        suggested_action
        if suggested_action is not None
        else _require_catalog_field(
            code=code,
            field_name="suggested_action",
            value=(None if catalog_entry is None else catalog_entry.suggested_action),
        )
    )
    if not resolved_action:
        raise ValueError("diagnostic suggested_action must be non-empty")

    return DiagnosticEvent(
        code=code,
        severity=resolved_severity,
        message=message,
        suggested_action=resolved_action,
        stage=resolved_stage,
        specifier_key=specifier_key,
        scope_prefix=scope_prefix,
        address=address,
        specifier=specifier,
        source=source,
        witness=witness,
    )


def adapt_resolution_error(error: ResolutionError) -> DiagnosticEvent:
    detail = error.detail
    witness: dict[str, object] = {"specifier": detail.specifier}
    if detail.witness is not None:
        witness["matched"] = list(detail.witness)
    return build_diagnostic_event(
        code=detail.code,
        message=detail.message,
        specifier=detail.specifier,
        witness=witness,
    )


def adapt_boundary_error(error: Exception, *, source: str) -> DiagnosticEvent:
    """Map a coded boundary error (base URL, loader, config) onto a diagnostic.

    Errors without a catalogued ``code`` are reported as internal failures.
    """
    code = getattr(error, "code", None)
    message = getattr(error, "message", None)
    if not isinstance(code, str) or code not in CANONICAL_DIAGNOSTIC_CATALOG:
        code = _INTERNAL_CODE
        message = None
    if not isinstance(message, str) or not message:
        message = _exception_message(error)
    return build_diagnostic_event(
        code=code,
        message=message,
        source=source,
        witness={"error_type": type(error).__name__},
    )


def log_diagnostics(events: Iterable[DiagnosticEvent], logger: logging.Logger) -> None:
    for event in events:
        logger.log(
            _LOG_LEVELS[event.severity],
            "%s [%s] %s (%s)",
            event.code,
            event.stage,
            event.message,
            event.suggested_action,
        )


def _exception_message(error: Exception) -> str:
    message = str(error).strip()
    if message:
        return message
    return type(error).__name__


def _require_catalog_field[T](*, code: str, field_name: str, value: T | None) -> T:
    if value is None:
        raise ValueError(
            f"diagnostic code '{code}' is not in canonical catalog; explicit {field_name} is required"
        )
    return value
