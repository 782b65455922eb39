from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Final, cast

import yaml  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

_YAML_SUFFIXES: Final[frozenset[str]] = frozenset({".yaml", ".yml"})
_MAPPING_SECTIONS: Final[tuple[str, ...]] = ("imports", "scopes", "integrity")


class ImportMapLoadError(ValueError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


def load_import_map_document(path: str | Path) -> dict[str, object]:
    """Read an import map document from JSON, or from YAML for ``.yaml``/``.yml`` files.

    Only the outer shape is checked: a mapping whose ``imports``, ``scopes`` and
    ``integrity`` members, when present, are mappings too. Entry values are left
    to the normalizer, which reports them as diagnostics.
    """
    target = Path(path)
    try:
        text = target.read_text(encoding="utf-8")
    except OSError as exc:
        raise ImportMapLoadError(
            "E_LOAD_FILE_UNREADABLE",
            f"cannot read import map '{target.as_posix()}': {exc.strerror or exc}",
        ) from exc
    payload = parse_import_map_text(text, yaml_syntax=target.suffix.lower() in _YAML_SUFFIXES)
    logger.debug("loaded import map document %s", target.as_posix())
    return payload


def parse_import_map_text(text: str, *, yaml_syntax: bool = False) -> dict[str, object]:
    try:
        payload: object = yaml.safe_load(text) if yaml_syntax else json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ImportMapLoadError(
            "E_LOAD_SYNTAX_INVALID",
            f"import map is not valid {'YAML' if yaml_syntax else 'JSON'}: {exc}",
        ) from exc
    return _require_import_map_shape(payload)


def _require_import_map_shape(payload: object) -> dict[str, object]:
    document = _require_string_keyed_mapping(payload, "import map")
    for section in _MAPPING_SECTIONS:
        if section not in document:
            continue
        value = _require_string_keyed_mapping(document[section], section)
        if section == "scopes":
            for scope_prefix, scope_map in value.items():
                _require_string_keyed_mapping(scope_map, f"scopes[{scope_prefix!r}]")
    return document


def _require_string_keyed_mapping(value: object, field_name: str) -> dict[str, object]:
    if not isinstance(value, Mapping):
        raise ImportMapLoadError(
            "E_LOAD_SHAPE_INVALID",
            f"{field_name} must be an object, got {type(value).__name__}",
        )
    raw = cast(Mapping[object, object], value)
    for key in raw:
        if not isinstance(key, str):
            raise ImportMapLoadError(
                "E_LOAD_SHAPE_INVALID",
                f"{field_name} keys must be strings, got {key!r}",
            )
    return {cast(str, key): item for key, item in raw.items()}
