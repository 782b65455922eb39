from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import cache
from pathlib import Path
from typing import Final

import yaml  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME: Final[str] = "importmap.yaml"
_CONFIG_KEYS: Final[frozenset[str]] = frozenset(
    {"import_map", "import_map_base_url", "base_url", "strict"}
)


class ConfigError(ValueError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


@dataclass(frozen=True, slots=True)
class CliConfig:
    import_map: Path | None = None
    import_map_base_url: str | None = None
    base_url: str | None = None
    strict: bool = False


def load_cli_config(path: str | Path) -> CliConfig:
    return _load_cli_config_cached(str(Path(path).resolve()))


@cache
def _load_cli_config_cached(path: str) -> CliConfig:
    target = Path(path)
    raw = _read_yaml_file(target)
    unknown = sorted(set(raw) - _CONFIG_KEYS)
    if unknown:
        raise ConfigError("E_CONFIG_INVALID", f"unknown config keys: {', '.join(unknown)}")

    import_map = _optional_string(raw, "import_map")
    config = CliConfig(
        import_map=(target.parent / import_map) if import_map is not None else None,
        import_map_base_url=_optional_string(raw, "import_map_base_url"),
        base_url=_optional_string(raw, "base_url"),
        strict=_optional_bool(raw, "strict", default=False),
    )
    logger.debug("loaded CLI config %s", target.as_posix())
    return config


def _read_yaml_file(path: Path) -> Mapping[str, object]:
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(
            "E_CONFIG_INVALID", f"cannot read config '{path.as_posix()}': {exc.strerror or exc}"
        ) from exc
    except yaml.YAMLError as exc:
        raise ConfigError("E_CONFIG_INVALID", f"config is not valid YAML: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ConfigError("E_CONFIG_INVALID", "config top level must be a mapping")
    return payload


def _optional_string(raw: Mapping[str, object], key: str) -> str | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value:
        raise ConfigError("E_CONFIG_INVALID", f"{key} must be a non-empty string")
    return value


def _optional_bool(raw: Mapping[str, object], key: str, *, default: bool) -> bool:
    value = raw.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigError("E_CONFIG_INVALID", f"{key} must be a boolean")
    return value
