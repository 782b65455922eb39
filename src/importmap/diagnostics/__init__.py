from .adapters import (
    adapt_boundary_error,
    adapt_resolution_error,
    build_diagnostic_event,
    log_diagnostics,
)
from .catalog import CANONICAL_DIAGNOSTIC_CATALOG, REQUIRED_CATALOG_FIELDS
from .models import DiagnosticEvent, DiagnosticStage, Severity
from .sort import canonical_witness_json, diagnostic_sort_key, sort_diagnostics

__all__ = [
    "CANONICAL_DIAGNOSTIC_CATALOG",
    "DiagnosticEvent",
    "DiagnosticStage",
    "REQUIRED_CATALOG_FIELDS",
    "Severity",
    "adapt_boundary_error",
    "adapt_resolution_error",
    "build_diagnostic_event",
    "canonical_witness_json",
    "diagnostic_sort_key",
    "log_diagnostics",
    "sort_diagnostics",
]
