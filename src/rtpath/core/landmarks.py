"""Filesystem predicates used to recognise library roots and executables.

A failed ``stat`` is a negative answer, never an error.
"""

from __future__ import annotations

import os
import stat

from result import Ok, Result, is_err

from rtpath.common import create_logger
from rtpath.constants import LANDMARK, MAXPATHLEN

from .models import PathTooLongError
from .primitives import join

logger = create_logger("landmarks")


def _stat(path: str) -> os.stat_result | None:
    try:
        return os.stat(path)
    except (OSError, ValueError):
        return None


def is_regular_file(path: str) -> bool:
    info = _stat(path)
    return info is not None and stat.S_ISREG(info.st_mode)


def is_executable_file(path: str) -> bool:
    info = _stat(path)
    if info is None or not stat.S_ISREG(info.st_mode):
        return False
    return bool(info.st_mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))


def is_directory(path: str) -> bool:
    info = _stat(path)
    return info is not None and stat.S_ISDIR(info.st_mode)


def looks_like_library_root(
    directory: str,
    *,
    landmark: str = LANDMARK,
    limit: int = MAXPATHLEN,
) -> Result[bool, PathTooLongError]:
    """Check for ``directory/<landmark>`` or its compiled form ``<landmark>c``."""
    candidate = join(directory, landmark, limit=limit)
    if is_err(candidate):
        return candidate

    filename = candidate.ok_value
    if is_regular_file(filename):
        logger.debug("Landmark found", path=filename)
        return Ok(True)

    compiled = f"{filename}c"
    if len(compiled) <= limit and is_regular_file(compiled):
        logger.debug("Compiled landmark found", path=compiled)
        return Ok(True)

    return Ok(False)
