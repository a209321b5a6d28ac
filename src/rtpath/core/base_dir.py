"""Derive the directory prefix searches start from (``argv0_path``)."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from result import Err, Ok, Result, is_err

from rtpath.common import create_logger
from rtpath.constants import MAX_SYMLINK_HOPS, MAXPATHLEN, SEP, VENV_CONFIG, VENV_HOME_KEY

from .landmarks import looks_like_library_root
from .models import CalculationContext, PathConfigError, PathTooLongError, SymlinkLoopError
from .platform import PlatformCapabilities
from .primitives import check_length, is_absolute, join, reduce_to_parent, reduce_times

logger = create_logger("base_dir")


def _readlink(path: str) -> str | None:
    try:
        return os.readlink(path)
    except (OSError, ValueError):
        return None


def resolve_symlinks(
    path: str,
    *,
    limit: int = MAXPATHLEN,
    max_hops: int = MAX_SYMLINK_HOPS,
) -> Result[str, PathConfigError]:
    """Follow ``path`` while it is a symlink.

    Relative targets are resolved against the directory holding the link.
    Fails once ``max_hops`` links have been followed.
    """
    hops = 0
    while (target := _readlink(path)) is not None:
        if is_absolute(target):
            step = check_length(target, limit)
        else:
            parent = reduce_to_parent(path)
            if not parent and is_absolute(path):
                parent = SEP
            step = join(parent, target, limit=limit)
        if is_err(step):
            return step
        path = step.ok_value

        hops += 1
        if hops >= max_hops:
            return Err(
                SymlinkLoopError(
                    path=path,
                    hops=hops,
                    message="maximum number of symbolic links reached",
                )
            )

    if hops:
        logger.debug("Symlinks resolved", path=path, hops=hops)
    return Ok(path)


def _framework_base(
    program_full_path: str,
    context: CalculationContext,
    platform: PlatformCapabilities,
) -> Result[str, PathConfigError]:
    library = platform.framework_library_path()
    if is_err(library):
        return library
    if not library.ok_value:
        return Ok(program_full_path)

    # A framework inside a build tree only carries the library itself, not Lib/.
    candidate = join(reduce_to_parent(library.ok_value), context.lib_python, limit=context.max_path)
    if is_err(candidate):
        return candidate

    installed = looks_like_library_root(candidate.ok_value, landmark=context.landmark, limit=context.max_path)
    if is_err(installed):
        return installed
    if installed.ok_value:
        logger.debug("Using framework location", path=library.ok_value)
        return check_length(library.ok_value, context.max_path)
    return Ok(program_full_path)


def derive_argv0_path(
    program_full_path: str,
    context: CalculationContext,
    platform: PlatformCapabilities,
) -> Result[str, PathConfigError]:
    """Directory of the (symlink-resolved) executable or framework library."""
    start = check_length(program_full_path, context.max_path)
    if is_err(start):
        return start

    base = _framework_base(start.ok_value, context, platform)
    if is_err(base):
        return base

    return resolve_symlinks(base.ok_value, limit=context.max_path).map(reduce_to_parent)


def find_env_config_value(lines: Iterable[str], key: str) -> str | None:
    """Value of the first ``key = value`` line; ``#`` lines are comments."""
    for line in lines:
        if line.startswith("#"):
            continue
        name, sep, value = line.partition("=")
        if not sep or name.strip() != key:
            continue
        value = value.strip()
        if value:
            return value
    return None


def _read_lines(filename: str) -> list[str] | None:
    try:
        return Path(filename).read_text(encoding="utf-8", errors="surrogateescape").splitlines()
    except (OSError, ValueError):
        return None


def read_venv_home(argv0_path: str, *, limit: int = MAXPATHLEN) -> Result[str | None, PathTooLongError]:
    """Read ``home`` from ``pyvenv.cfg`` next to the executable or one directory up.

    Only the first file that can be opened is consulted.
    """
    filename = join(argv0_path, VENV_CONFIG, limit=limit)
    if is_err(filename):
        return filename

    lines = _read_lines(filename.ok_value)
    if lines is None:
        filename = join(reduce_times(filename.ok_value, 2), VENV_CONFIG, limit=limit)
        if is_err(filename):
            return filename
        lines = _read_lines(filename.ok_value)
        if lines is None:
            return Ok(None)

    home = find_env_config_value(lines, VENV_HOME_KEY)
    logger.debug("Virtual environment config read", path=filename.ok_value, home=home)
    if home is None:
        return Ok(None)
    return check_length(home, limit)


def derive_base_directory(
    program_full_path: str,
    context: CalculationContext,
    platform: PlatformCapabilities,
) -> Result[str, PathConfigError]:
    """``argv0_path``, replaced by the virtual environment's ``home`` when one is configured."""
    argv0_path = derive_argv0_path(program_full_path, context, platform)
    if is_err(argv0_path):
        return argv0_path

    home = read_venv_home(argv0_path.ok_value, limit=context.max_path)
    if is_err(home):
        return home
    return Ok(home.ok_value or argv0_path.ok_value)
