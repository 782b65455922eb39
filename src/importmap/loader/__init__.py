from .config import DEFAULT_CONFIG_FILENAME, CliConfig, ConfigError, load_cli_config
from .documents import ImportMapLoadError, load_import_map_document, parse_import_map_text

__all__ = [
    "CliConfig",
    "ConfigError",
    "DEFAULT_CONFIG_FILENAME",
    "ImportMapLoadError",
    "load_cli_config",
    "load_import_map_document",
    "parse_import_map_text",
]
