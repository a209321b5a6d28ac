"""Path primitives with an explicit maximum length.

Working values are plain ``str``. The length bound is enforced wherever a
value is composed (``join``, ``absolutize``) or copied into a fixed-capacity
``PathBuffer``; nothing is ever truncated.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass

from result import Err, Ok, Result, is_err

from rtpath.constants import MAXPATHLEN, SEP

from .models import DecodeError, PathTooLongError


@dataclass
class PathBuffer:
    """Fixed-capacity destination for a path, terminator included in ``capacity``."""

    capacity: int = MAXPATHLEN + 1
    value: str = ""

    def clear(self) -> None:
        self.value = ""


def is_absolute(path: str) -> bool:
    return path.startswith(SEP)


def bounded_copy(dst: PathBuffer, src: str) -> Result[None, PathTooLongError]:
    """Copy ``src`` into ``dst`` only if it fits; on failure ``dst`` is left empty."""
    if len(src) >= dst.capacity:
        dst.clear()
        return Err(
            PathTooLongError(
                path=src,
                limit=dst.capacity - 1,
                message="path configuration: path too long",
            )
        )
    dst.value = src
    return Ok(None)


def check_length(path: str, limit: int = MAXPATHLEN) -> Result[str, PathTooLongError]:
    buffer = PathBuffer(capacity=limit + 1)
    return bounded_copy(buffer, path).map(lambda _: buffer.value)


def join(base: str, component: str, *, limit: int = MAXPATHLEN) -> Result[str, PathTooLongError]:
    """Append ``component`` to ``base`` with exactly one separator between them.

    An absolute ``component`` replaces ``base``.
    """
    if is_absolute(component):
        joined = component
    elif base and not base.endswith(SEP):
        joined = f"{base}{SEP}{component}"
    else:
        joined = f"{base}{component}"
    return check_length(joined, limit)


def join_all(base: str, *components: str, limit: int = MAXPATHLEN) -> Result[str, PathTooLongError]:
    result: Result[str, PathTooLongError] = check_length(base, limit)
    for component in components:
        result = result.and_then(lambda path, part=component: join(path, part, limit=limit))
    return result


def absolutize(
    path: str,
    *,
    limit: int = MAXPATHLEN,
    getcwd: Callable[[], str] = os.getcwd,
) -> Result[str, PathTooLongError]:
    """Resolve ``path`` against the working directory.

    When the working directory is unavailable the path is returned as is.
    """
    if is_absolute(path):
        return check_length(path, limit)

    try:
        cwd = getcwd()
    except OSError:
        return check_length(path, limit)

    cwd_result = check_length(cwd, limit)
    if is_err(cwd_result):
        return cwd_result

    if path.startswith(f".{SEP}"):
        path = path[2:]
    return join(cwd_result.ok_value, path, limit=limit)


def reduce_to_parent(path: str) -> str:
    """Truncate ``path`` at its last separator.

    ``/usr/lib`` becomes ``/usr``, ``/usr`` becomes the empty string, and so
    does a path without any separator.
    """
    index = path.rfind(SEP)
    if index < 0:
        return ""
    return path[:index]


def reduce_times(path: str, times: int) -> str:
    for _ in range(times):
        path = reduce_to_parent(path)
    return path


def decode_path(
    raw: bytes,
    source: str,
    *,
    encoding: str = "utf-8",
    errors: str = "surrogateescape",
) -> Result[str, DecodeError]:
    try:
        return Ok(raw.decode(encoding, errors))
    except (UnicodeDecodeError, LookupError) as exc:
        return Err(DecodeError(source=source, message=f"cannot decode {source}: {exc}"))
