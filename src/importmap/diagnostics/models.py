from __future__ import annotations

from enum import StrEnum
from typing import cast

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class DiagnosticStage(StrEnum):
    LOAD = "load"
    NORMALIZE = "normalize"
    RESOLVE = "resolve"


def _normalize_json(value: object) -> object:
    if value is None or isinstance(value, bool | int | float | str):
        return value
    if isinstance(value, list | tuple):
        return [_normalize_json(item) for item in value]
    if isinstance(value, dict):
        raw_dict = cast(dict[object, object], value)
        string_keys: list[str] = []
        for key in raw_dict:
            if not isinstance(key, str):
                raise ValueError("witness object keys must be strings")
            string_keys.append(key)
        normalized: dict[str, object] = {}
        for key in sorted(string_keys):
            normalized[key] = _normalize_json(raw_dict[key])
        return normalized
    raise ValueError("witness must be JSON-serializable")


class DiagnosticEvent(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    code: str = Field(min_length=1)
    severity: Severity
    message: str = Field(min_length=1)
    suggested_action: str = Field(min_length=1)
    stage: DiagnosticStage

    # The empty string is a legitimate key here: it is what an empty-key warning reports.
    specifier_key: str | None = None
    scope_prefix: str | None = None
    address: str | None = None
    specifier: str | None = None
    source: str | None = Field(default=None, min_length=1)

    witness: object | None = None

    @field_validator("witness", mode="before")
    @classmethod
    def _validate_and_normalize_witness(cls, witness: object) -> object:
        if witness is None:
            return None
        return _normalize_json(witness)

    @model_validator(mode="after")
    def _validate_context_presence(self) -> DiagnosticEvent:
        if (
            self.specifier_key is None
            and self.scope_prefix is None
            and self.specifier is None
            and self.source is None
        ):
            raise ValueError(
                "at least one context value is required: "
                "specifier_key, scope_prefix, specifier, or source"
            )
        return self
