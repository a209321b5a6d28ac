"""Locate the absolute path of the running executable."""

from __future__ import annotations

from result import Ok, Result, is_err

from rtpath.common import create_logger
from rtpath.constants import MAXPATHLEN, SEP

from .landmarks import is_executable_file
from .models import PathConfigError, PathTooLongError
from .platform import PlatformCapabilities
from .primitives import absolutize, check_length, join

logger = create_logger("executable")


def which(
    program_name: str,
    path_env: str,
    *,
    delimiter: str,
    limit: int = MAXPATHLEN,
) -> Result[str | None, PathTooLongError]:
    """Return the first ``<entry>/<program_name>`` on ``path_env`` that is an executable file."""
    for entry in path_env.split(delimiter):
        candidate = check_length(entry, limit).and_then(lambda base: join(base, program_name, limit=limit))
        if is_err(candidate):
            return candidate

        if is_executable_file(candidate.ok_value):
            logger.debug("Executable found on PATH", path=candidate.ok_value)
            return Ok(candidate.ok_value)

    return Ok(None)


def add_exe_suffix(path: str, suffix: str, *, limit: int = MAXPATHLEN) -> Result[str, PathTooLongError]:
    """Append ``suffix`` unless present, keeping it only if the result is executable."""
    if path.lower().endswith(suffix.lower()):
        return Ok(path)

    suffixed = check_length(f"{path}{suffix}", limit)
    if is_err(suffixed):
        return suffixed

    if is_executable_file(suffixed.ok_value):
        return suffixed
    return Ok(path)


def _find_program(
    program_name: str,
    path_env: str | None,
    platform: PlatformCapabilities,
    limit: int,
) -> Result[str, PathConfigError]:
    # A name containing a separator was invoked by path, not looked up.
    if SEP in program_name:
        return check_length(program_name, limit)

    native = platform.native_executable_path()
    if is_err(native):
        return native
    if native.ok_value and native.ok_value.startswith(SEP):
        logger.debug("Executable reported by platform", platform=platform.name, path=native.ok_value)
        return check_length(native.ok_value, limit)

    if path_env is not None:
        found = which(program_name, path_env, delimiter=platform.delimiter, limit=limit)
        if is_err(found):
            return found
        if found.ok_value is not None:
            return Ok(found.ok_value)

    return Ok("")


def locate_executable(
    program_name: str,
    path_env: str | None,
    platform: PlatformCapabilities,
    *,
    limit: int = MAXPATHLEN,
) -> Result[str, PathConfigError]:
    """Resolve ``program_name`` to an absolute executable path.

    Returns ``Ok("")`` when nothing can be determined; later searches then
    fall back to the compiled-in defaults.
    """
    result = _find_program(program_name, path_env, platform, limit)
    if is_err(result):
        return result

    full_path = result.ok_value
    if not full_path:
        logger.debug("Executable could not be located", program_name=program_name)
        return Ok("")

    absolute = absolutize(full_path, limit=limit)
    if is_err(absolute):
        return absolute
    full_path = absolute.ok_value

    if platform.exe_suffix:
        return add_exe_suffix(full_path, platform.exe_suffix, limit=limit)
    return Ok(full_path)
