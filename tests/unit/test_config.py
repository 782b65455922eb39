from __future__ import annotations

from pathlib import Path

import pytest

from importmap.loader import CliConfig, ConfigError, load_cli_config

pytestmark = pytest.mark.unit


def _write(tmp_path: Path, text: str, name: str = "importmap.yaml") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_config_values_are_loaded(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "import_map: maps/site.json\n"
        "import_map_base_url: https://example.com/app/\n"
        "base_url: https://example.com/app/main.js\n"
        "strict: true\n",
    )
    config = load_cli_config(path)
    assert config.import_map == tmp_path.resolve() / "maps" / "site.json"
    assert config.import_map_base_url == "https://example.com/app/"
    assert config.base_url == "https://example.com/app/main.js"
    assert config.strict is True


def test_empty_config_uses_defaults(tmp_path: Path) -> None:
    config = load_cli_config(_write(tmp_path, "", name="empty.yaml"))
    assert config == CliConfig()


def test_config_loading_is_cached_per_path(tmp_path: Path) -> None:
    path = _write(tmp_path, "strict: true\n", name="cached.yaml")
    assert load_cli_config(path) is load_cli_config(str(path))


@pytest.mark.parametrize(
    "text",
    [
        "unknown_key: 1\n",
        "strict: maybe\n",
        "base_url: 3\n",
        "import_map: ''\n",
        "- a\n- b\n",
        "base_url: [unclosed\n",
    ],
)
def test_invalid_config_is_rejected(tmp_path: Path, text: str) -> None:
    path = _write(tmp_path, text, name="invalid.yaml")
    with pytest.raises(ConfigError) as exc_info:
        load_cli_config(path)
    assert exc_info.value.code == "E_CONFIG_INVALID"


def test_missing_config_file_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as exc_info:
        load_cli_config(tmp_path / "absent.yaml")
    assert exc_info.value.code == "E_CONFIG_INVALID"
