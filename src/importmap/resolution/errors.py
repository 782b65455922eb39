from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ResolutionErrorCode(StrEnum):
    E_RESOLVE_BARE_SPECIFIER_UNMAPPED = "E_RESOLVE_BARE_SPECIFIER_UNMAPPED"
    E_RESOLVE_BLOCKED_EXACT = "E_RESOLVE_BLOCKED_EXACT"
    E_RESOLVE_BLOCKED_PREFIX = "E_RESOLVE_BLOCKED_PREFIX"
    E_RESOLVE_REMAINDER_UNPARSEABLE = "E_RESOLVE_REMAINDER_UNPARSEABLE"
    E_RESOLVE_BACKTRACKING = "E_RESOLVE_BACKTRACKING"
    E_RESOLVE_ADDRESS_INVARIANT = "E_RESOLVE_ADDRESS_INVARIANT"


@dataclass(frozen=True, slots=True)
class ResolutionErrorDetail:
    code: str
    message: str
    specifier: str
    witness: tuple[str, ...] | None = None


class ResolutionError(ValueError):
    def __init__(self, detail: ResolutionErrorDetail) -> None:
        super().__init__(f"{detail.code}: {detail.message}")
        self.detail = detail


def build_resolution_error(
    code: ResolutionErrorCode,
    message: str,
    specifier: str,
    witness: tuple[str, ...] | None = None,
) -> ResolutionError:
    return ResolutionError(
        ResolutionErrorDetail(
            code=code.value,
            message=message,
            specifier=specifier,
            witness=witness,
        )
    )
