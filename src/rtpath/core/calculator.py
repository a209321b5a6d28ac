"""Top-level path calculation.

Inputs are a ``CalculationContext`` (compile-time defaults plus the PATH and
run-time search path values) and a partially filled ``PathConfig``. Fields
the caller already set are kept; the rest are computed:

1. locate the executable (``program_full_path``),
2. derive ``argv0_path`` from it, honouring ``pyvenv.cfg``,
3. search for the prefix, then build the zip path from it,
4. search for the exec-prefix,
5. assemble the module search path and reduce both prefixes to their
   public form.

Failing to find a prefix is not an error: the compiled-in defaults are used
and, when warnings are enabled, a diagnostic is written to the sink.
"""

from __future__ import annotations

import sys
from collections.abc import Callable

from result import Ok, Result, is_err

from rtpath.common import create_logger

from .base_dir import derive_base_directory
from .executable import locate_executable
from .models import CalculationContext, PathCalculation, PathConfig, PathConfigError
from .platform import PlatformCapabilities, select_platform
from .prefixes import finalize_exec_prefix, finalize_prefix, search_for_exec_prefix, search_for_prefix
from .search_path import build_module_search_path, build_zip_path

logger = create_logger("calculator")

type DiagnosticSink = Callable[[str], None]

PREFIX_NOT_FOUND = "Could not find platform independent libraries <prefix>"
EXEC_PREFIX_NOT_FOUND = "Could not find platform dependent libraries <exec_prefix>"


def stderr_sink(message: str) -> None:
    print(message, file=sys.stderr)


def calculate(
    pathconfig: PathConfig,
    context: CalculationContext,
    *,
    platform: PlatformCapabilities | None = None,
    diagnostics: DiagnosticSink = stderr_sink,
) -> Result[PathCalculation, PathConfigError]:
    platform = platform or select_platform()
    emitted: list[str] = []

    def warn(message: str) -> None:
        if context.warnings:
            emitted.append(message)
            diagnostics(message)

    logger.debug("Calculating path configuration", program_name=pathconfig.program_name, platform=platform.name)

    program_full_path = pathconfig.program_full_path
    if not program_full_path:
        located = locate_executable(pathconfig.program_name, context.path_env, platform, limit=context.max_path)
        if is_err(located):
            return located
        program_full_path = located.ok_value

    argv0_path = derive_base_directory(program_full_path, context, platform)
    if is_err(argv0_path):
        return argv0_path

    prefix = search_for_prefix(context, pathconfig, argv0_path.ok_value, platform.delimiter)
    if is_err(prefix):
        return prefix
    if not prefix.ok_value.found:
        warn(PREFIX_NOT_FOUND)

    zip_path = build_zip_path(prefix.ok_value, context)
    if is_err(zip_path):
        return zip_path

    exec_prefix = search_for_exec_prefix(context, pathconfig, argv0_path.ok_value, platform.delimiter)
    if is_err(exec_prefix):
        return exec_prefix
    if not exec_prefix.ok_value.found:
        warn(EXEC_PREFIX_NOT_FOUND)

    if not (prefix.ok_value.found and exec_prefix.ok_value.found):
        warn(f"Consider setting ${context.home_env_var} to <prefix>[:<exec_prefix>]")

    updates: dict[str, str] = {}
    if not pathconfig.program_full_path:
        updates["program_full_path"] = program_full_path
    if not pathconfig.module_search_path:
        updates["module_search_path"] = build_module_search_path(
            context,
            prefix.ok_value.path,
            exec_prefix.ok_value.path,
            zip_path.ok_value,
            platform.delimiter,
        )
    if not pathconfig.prefix:
        updates["prefix"] = finalize_prefix(prefix.ok_value, context)
    if not pathconfig.exec_prefix:
        updates["exec_prefix"] = finalize_exec_prefix(exec_prefix.ok_value, context)

    config = pathconfig.model_copy(update=updates)
    logger.debug(
        "Path configuration calculated",
        prefix=config.prefix,
        exec_prefix=config.exec_prefix,
        prefix_provenance=prefix.ok_value.provenance.value,
        exec_prefix_provenance=exec_prefix.ok_value.provenance.value,
    )

    return Ok(
        PathCalculation(
            config=config,
            argv0_path=argv0_path.ok_value,
            prefix=prefix.ok_value,
            exec_prefix=exec_prefix.ok_value,
            zip_path=zip_path.ok_value,
            warnings=emitted,
        )
    )


def calculate_path_config(
    pathconfig: PathConfig,
    context: CalculationContext,
    *,
    platform: PlatformCapabilities | None = None,
    diagnostics: DiagnosticSink = stderr_sink,
) -> Result[PathConfig, PathConfigError]:
    """Fill in the empty fields of ``pathconfig``."""
    return calculate(pathconfig, context, platform=platform, diagnostics=diagnostics).map(
        lambda calculation: calculation.config
    )
