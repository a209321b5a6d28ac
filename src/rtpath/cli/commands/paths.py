from __future__ import annotations

import json
import os
import sys
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
import yaml
from result import is_err

from rtpath.config import ConfigError, load_build_config
from rtpath.core import PathCalculation, PathConfigError, calculate, select_platform
from rtpath.core import which as which_executable
from rtpath.settings import Settings


class OutputFormat(str, Enum):
    YAML = "yaml"
    JSON = "json"


FormatOption = Annotated[
    OutputFormat,
    typer.Option("--format", "-f", show_default=True, case_sensitive=False, help="Output format (yaml or json)."),
]
ProgramNameOption = Annotated[
    str | None,
    typer.Option("--program-name", "-p", help="Invocation name of the runtime. Defaults to the running interpreter."),
]
HomeOption = Annotated[
    str | None,
    typer.Option("--home", help="Home override, '<prefix>[:<exec_prefix>]'. Skips the library search."),
]
PythonPathOption = Annotated[
    str | None,
    typer.Option("--pythonpath", help="Run-time search path entries placed first."),
]
BuildConfigOption = Annotated[
    Path | None,
    typer.Option("--build-config", "-c", help="YAML file with build-time defaults."),
]
NoWarningsOption = Annotated[
    bool,
    typer.Option("--no-warnings", help="Do not print diagnostics when libraries cannot be found."),
]


def show(
    program_name: ProgramNameOption = None,
    home: HomeOption = None,
    pythonpath: PythonPathOption = None,
    build_config: BuildConfigOption = None,
    no_warnings: NoWarningsOption = False,
    details: Annotated[bool, typer.Option("--details", help="Include intermediate search results.")] = False,
    format: FormatOption = OutputFormat.YAML,
) -> None:
    """Print the computed path configuration."""
    calculation = _run(program_name, home, pythonpath, build_config, no_warnings)
    payload = calculation.model_dump(mode="json") if details else calculation.config.model_dump(mode="json")
    typer.echo(_format_payload(payload, format))


def search_path(
    program_name: ProgramNameOption = None,
    home: HomeOption = None,
    pythonpath: PythonPathOption = None,
    build_config: BuildConfigOption = None,
    no_warnings: NoWarningsOption = False,
) -> None:
    """Print the module search path, one entry per line."""
    calculation = _run(program_name, home, pythonpath, build_config, no_warnings)
    delimiter = select_platform().delimiter
    for entry in (calculation.config.module_search_path or "").split(delimiter):
        typer.echo(entry)


def which(name: Annotated[str, typer.Argument(help="Program name to look up on PATH.")]) -> None:
    """Print the first executable called NAME on PATH."""
    path_env = os.getenv("PATH")
    if path_env is None:
        typer.secho(f"{name}: PATH is not set", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)

    result = which_executable(name, path_env, delimiter=select_platform().delimiter)
    if is_err(result):
        _handle_calculation_error(result.err_value)
        raise typer.Exit(code=1)

    if result.ok_value is None:
        typer.secho(f"{name}: not found on PATH", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.echo(result.ok_value)


def _run(
    program_name: str | None,
    home: str | None,
    pythonpath: str | None,
    build_config: Path | None,
    no_warnings: bool,
) -> PathCalculation:
    settings = Settings()

    build = settings.build
    if build_config is not None:
        loaded = load_build_config(build_config, base=settings.build)
        if is_err(loaded):
            _handle_config_error(loaded.err_value)
            raise typer.Exit(code=1)
        build = loaded.ok_value

    context = settings.to_context(os.getenv("PATH"), build)
    overrides: dict[str, object] = {}
    if pythonpath is not None:
        overrides["pythonpath_env"] = pythonpath
    if no_warnings:
        overrides["warnings"] = False
    context = context.model_copy(update=overrides)

    pathconfig = settings.to_pathconfig(program_name or sys.executable)
    if home is not None:
        pathconfig = pathconfig.model_copy(update={"home": home})

    result = calculate(pathconfig, context, diagnostics=_echo_diagnostic)
    if is_err(result):
        _handle_calculation_error(result.err_value)
        raise typer.Exit(code=1)
    return result.ok_value


def _echo_diagnostic(message: str) -> None:
    typer.secho(message, err=True, fg=typer.colors.YELLOW)


def _format_payload(payload: dict[str, object], format: OutputFormat) -> str:
    if format is OutputFormat.JSON:
        return json.dumps(payload, indent=2, sort_keys=True)
    return yaml.safe_dump(payload, sort_keys=True)


def _handle_calculation_error(error: PathConfigError) -> None:
    typer.secho(f"[{error.kind}] {error.message}", err=True, fg=typer.colors.RED)


def _handle_config_error(error: ConfigError) -> None:
    message = error.message
    expected_path = getattr(error, "expected_path", None)
    error_path = getattr(error, "path", None)
    if expected_path is not None:
        message = f"{message} (expected at {expected_path})"
    elif error_path is not None:
        message = f"{message} ({error_path})"

    typer.secho(message, err=True, fg=typer.colors.RED)


__all__ = ["search_path", "show", "which"]
