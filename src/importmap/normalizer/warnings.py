from __future__ import annotations

from enum import StrEnum

from importmap.diagnostics import DiagnosticEvent, build_diagnostic_event


class NormalizationWarningCode(StrEnum):
    EMPTY_SPECIFIER_KEY = "W_NORM_EMPTY_SPECIFIER_KEY"
    NOT_STRING_ADDRESS = "W_NORM_ADDRESS_NOT_STRING"
    INVALID_ADDRESS = "W_NORM_ADDRESS_INVALID"
    ADDRESS_TRAILING_SLASH = "W_NORM_ADDRESS_TRAILING_SLASH"
    INVALID_SCOPE_PREFIX = "W_NORM_SCOPE_PREFIX_INVALID"


def build_normalization_warning(
    code: NormalizationWarningCode,
    message: str,
    *,
    specifier_key: str | None = None,
    scope_prefix: str | None = None,
    address: str | None = None,
    witness: object | None = None,
) -> DiagnosticEvent:
    return build_diagnostic_event(
        code=code.value,
        message=message,
        specifier_key=specifier_key,
        scope_prefix=scope_prefix,
        address=address,
        witness=witness,
    )
