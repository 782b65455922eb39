from .normalize import (
    NormalizationResult,
    normalize_import_map,
    normalize_specifier_key,
    sort_and_normalize_scopes,
    sort_and_normalize_specifier_map,
)
from .warnings import NormalizationWarningCode

__all__ = [
    "NormalizationResult",
    "NormalizationWarningCode",
    "normalize_import_map",
    "normalize_specifier_key",
    "sort_and_normalize_scopes",
    "sort_and_normalize_specifier_map",
]
