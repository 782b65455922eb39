from .errors import ResolutionError, ResolutionErrorCode, ResolutionErrorDetail
from .match import resolve_imports_match
from .resolve import (
    ResolutionOutcome,
    resolve_module_specifier,
    resolve_module_specifiers,
    scope_applies,
)

__all__ = [
    "ResolutionError",
    "ResolutionErrorCode",
    "ResolutionErrorDetail",
    "ResolutionOutcome",
    "resolve_imports_match",
    "resolve_module_specifier",
    "resolve_module_specifiers",
    "scope_applies",
]
