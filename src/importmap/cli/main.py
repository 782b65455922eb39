from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from enum import StrEnum
from pathlib import Path
from typing import Final

import typer

from importmap.diagnostics import (
    DiagnosticEvent,
    Severity,
    adapt_boundary_error,
    adapt_resolution_error,
    log_diagnostics,
    sort_diagnostics,
)
from importmap.ir import Address, ImportMap, address_to_json, hash_import_map
from importmap.loader import (
    DEFAULT_CONFIG_FILENAME,
    CliConfig,
    ConfigError,
    ImportMapLoadError,
    load_cli_config,
    load_import_map_document,
)
from importmap.normalizer import NormalizationResult, normalize_import_map
from importmap.resolution import ResolutionOutcome, resolve_module_specifiers
from importmap.urls import InvalidBaseURLError, parse_base_url

logger = logging.getLogger(__name__)

app = typer.Typer(help="Import map normalization and module specifier resolution CLI")

_NORMALIZE_OUTPUT_SCHEMA_ID: Final[str] = "importmap/normalize_output_v1"
_RESOLVE_OUTPUT_SCHEMA_ID: Final[str] = "importmap/resolve_output_v1"
_OUTPUT_SCHEMA_VERSION: Final[int] = 1
_CLI_OPTIONS_INVALID = "E_CLI_OPTIONS_INVALID"
_CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help=f"YAML config file; defaults to ./{DEFAULT_CONFIG_FILENAME} when present",
)
_STRICT_OPTION = typer.Option(
    None,
    "--strict/--no-strict",
    help="Exit with code 1 when normalization produced warnings",
)
_LOGGING_STATE: dict[str, bool] = {"verbose": False}


class OutputFormat(StrEnum):
    TEXT = "text"
    JSON = "json"


class CliOptionsError(ValueError):
    def __init__(self, message: str) -> None:
        super().__init__(f"{_CLI_OPTIONS_INVALID}: {message}")
        self.code = _CLI_OPTIONS_INVALID
        self.message = message


_BOUNDARY_ERRORS: Final[tuple[type[Exception], ...]] = (
    CliOptionsError,
    ConfigError,
    ImportMapLoadError,
    InvalidBaseURLError,
)


@app.callback()
def _configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log diagnostics and debug output"),
) -> None:
    _LOGGING_STATE["verbose"] = verbose
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def normalize(
    import_map: Path | None = typer.Argument(None, help="Import map document (.json/.yaml)"),
    base_url: str | None = typer.Option(
        None,
        "--base-url",
        help="Base URL the import map is normalized against",
    ),
    format: OutputFormat = typer.Option(
        OutputFormat.TEXT,
        "--format",
        help="Output format: text|json",
        show_default=True,
    ),
    strict: bool | None = _STRICT_OPTION,
    config: Path | None = _CONFIG_OPTION,
) -> None:
    """Normalize an import map and report dropped or blocked entries."""
    result: NormalizationResult | None = None
    strict_mode = bool(strict)
    try:
        settings = _load_settings(config)
        strict_mode = settings.strict if strict is None else strict
        map_path = _require_option(import_map or settings.import_map, "IMPORT_MAP")
        effective_base_url = _require_option(
            base_url or settings.import_map_base_url or settings.base_url,
            "--base-url",
        )
        result = normalize_import_map(load_import_map_document(map_path), effective_base_url)
        diagnostics = tuple(sort_diagnostics(result.diagnostics))
    except _BOUNDARY_ERRORS as exc:
        diagnostics = (adapt_boundary_error(exc, source="cli.normalize"),)
    except Exception as exc:  # pragma: no cover - defensive boundary path
        diagnostics = (adapt_boundary_error(exc, source="cli.normalize"),)

    _log_if_verbose(diagnostics)
    exit_code = _derive_exit_code(diagnostics, strict=strict_mode)
    if format is OutputFormat.JSON:
        typer.echo(
            _build_normalize_json_output(
                import_map=None if result is None else result.import_map,
                diagnostics=diagnostics,
                exit_code=exit_code,
            )
        )
    else:
        if result is not None:
            _print_import_map(result.import_map)
        _print_diagnostics(diagnostics)
    raise typer.Exit(code=exit_code)


@app.command()
def resolve(
    specifiers: list[str] = typer.Argument(..., help="Module specifiers to resolve"),
    import_map: Path | None = typer.Option(
        None,
        "--import-map",
        help="Import map document (.json/.yaml)",
    ),
    base_url: str | None = typer.Option(
        None,
        "--base-url",
        help="URL of the referencing module",
    ),
    import_map_base_url: str | None = typer.Option(
        None,
        "--import-map-base-url",
        help="Base URL for normalizing the import map; defaults to --base-url",
    ),
    format: OutputFormat = typer.Option(
        OutputFormat.TEXT,
        "--format",
        help="Output format: text|json",
        show_default=True,
    ),
    strict: bool | None = _STRICT_OPTION,
    config: Path | None = _CONFIG_OPTION,
) -> None:
    """Resolve module specifiers through an import map."""
    outcomes: tuple[ResolutionOutcome, ...] = ()
    strict_mode = bool(strict)
    try:
        settings = _load_settings(config)
        strict_mode = settings.strict if strict is None else strict
        map_path = _require_option(import_map or settings.import_map, "--import-map")
        referrer_url = parse_base_url(_require_option(base_url or settings.base_url, "--base-url"))
        map_base_url = import_map_base_url or settings.import_map_base_url or referrer_url
        result = normalize_import_map(load_import_map_document(map_path), map_base_url)
        outcomes = resolve_module_specifiers(specifiers, result.import_map, referrer_url)
        diagnostics = tuple(
            sort_diagnostics(
                [
                    *result.diagnostics,
                    *(
                        adapt_resolution_error(outcome.error)
                        for outcome in outcomes
                        if outcome.error is not None
                    ),
                ]
            )
        )
    except _BOUNDARY_ERRORS as exc:
        diagnostics = (adapt_boundary_error(exc, source="cli.resolve"),)
    except Exception as exc:  # pragma: no cover - defensive boundary path
        diagnostics = (adapt_boundary_error(exc, source="cli.resolve"),)

    _log_if_verbose(diagnostics)
    exit_code = _derive_exit_code(diagnostics, strict=strict_mode)
    if format is OutputFormat.JSON:
        typer.echo(
            _build_resolve_json_output(
                outcomes=outcomes,
                diagnostics=diagnostics,
                exit_code=exit_code,
            )
        )
    else:
        _print_outcomes(outcomes)
        _print_diagnostics(diagnostics)
    raise typer.Exit(code=exit_code)


def _load_settings(config: Path | None) -> CliConfig:
    if config is not None:
        return load_cli_config(config)
    default_path = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if default_path.is_file():
        return load_cli_config(default_path)
    return CliConfig()


def _require_option[T](value: T | None, option_name: str) -> T:
    if value is None:
        raise CliOptionsError(f"{option_name} is required (command line or config file)")
    return value


def _log_if_verbose(diagnostics: Sequence[DiagnosticEvent]) -> None:
    if _LOGGING_STATE["verbose"]:
        log_diagnostics(diagnostics, logger)


def _has_severity(diagnostics: Sequence[DiagnosticEvent], severity: Severity) -> bool:
    return any(event.severity == severity for event in diagnostics)


def _derive_exit_code(diagnostics: Sequence[DiagnosticEvent], *, strict: bool) -> int:
    if _has_severity(diagnostics, Severity.ERROR):
        return 2
    if strict and _has_severity(diagnostics, Severity.WARNING):
        return 1
    return 0


def _status(exit_code: int) -> str:
    if exit_code == 2:
        return "fail"
    if exit_code == 1:
        return "degraded"
    return "pass"


def _build_normalize_json_output(
    *,
    import_map: ImportMap | None,
    diagnostics: Sequence[DiagnosticEvent],
    exit_code: int,
) -> str:
    payload: dict[str, object] = {
        "schema": _NORMALIZE_OUTPUT_SCHEMA_ID,
        "schema_version": _OUTPUT_SCHEMA_VERSION,
        "status": _status(exit_code),
        "exit_code": exit_code,
        "import_map": None if import_map is None else import_map.as_dict(),
        "import_map_sha256": None if import_map is None else hash_import_map(import_map),
        "diagnostics": [event.model_dump(mode="json", exclude_none=True) for event in diagnostics],
    }
    return json.dumps(payload, ensure_ascii=True, separators=(",", ":"))


def _build_resolve_json_output(
    *,
    outcomes: Sequence[ResolutionOutcome],
    diagnostics: Sequence[DiagnosticEvent],
    exit_code: int,
) -> str:
    payload: dict[str, object] = {
        "schema": _RESOLVE_OUTPUT_SCHEMA_ID,
        "schema_version": _OUTPUT_SCHEMA_VERSION,
        "status": _status(exit_code),
        "exit_code": exit_code,
        "results": [
            {
                "specifier": outcome.specifier,
                "resolved_url": outcome.resolved_url,
                "error_code": None if outcome.error is None else outcome.error.detail.code,
            }
            for outcome in outcomes
        ],
        "diagnostics": [event.model_dump(mode="json", exclude_none=True) for event in diagnostics],
    }
    return json.dumps(payload, ensure_ascii=True, separators=(",", ":"))


def _print_import_map(import_map: ImportMap) -> None:
    for entry in import_map.imports:
        typer.echo(f"IMPORT key={entry.key} address={_format_address(entry.address)}")
    for scope in import_map.scopes:
        typer.echo(f"SCOPE prefix={scope.prefix} entries={len(scope.imports)}")
        for entry in scope.imports:
            typer.echo(
                "IMPORT"
                f" scope={scope.prefix}"
                f" key={entry.key}"
                f" address={_format_address(entry.address)}"
            )


def _format_address(address: Address) -> str:
    url = address_to_json(address)
    return "null" if url is None else url


def _print_outcomes(outcomes: Sequence[ResolutionOutcome]) -> None:
    for outcome in outcomes:
        if outcome.resolved_url is not None:
            typer.echo(f"RESOLVED specifier={outcome.specifier} url={outcome.resolved_url}")


def _print_diagnostics(diagnostics: Sequence[DiagnosticEvent]) -> None:
    for event in diagnostics:
        typer.echo(
            "DIAG"
            f" severity={event.severity}"
            f" stage={event.stage}"
            f" code={event.code}"
            f" message={event.message}"
        )


def main() -> None:
    app()
