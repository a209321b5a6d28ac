"""Search for the platform independent (prefix) and dependent (exec-prefix) library roots.

Both searches try, in order: the home override, a build-tree marker next to
``argv0_path``, a walk from ``argv0_path`` up to the root, and the
compiled-in default. The working value they produce is the library
directory itself (``<prefix>/lib/python3.9`` and
``<exec_prefix>/lib/python3.9/lib-dynload``); ``finalize_*`` reduces it to
the public root.
"""

from __future__ import annotations

from collections.abc import Callable

from result import Ok, Result, is_err

from rtpath.common import create_logger
from rtpath.constants import (
    BUILD_LIB_DIR,
    BUILD_MARKER,
    EXEC_PREFIX_FALLBACK_DIR,
    LIB_DYNLOAD,
    MAXPATHLEN,
    PYBUILDDIR_MARKER,
    SEP,
)

from .landmarks import is_directory, is_regular_file, looks_like_library_root
from .models import CalculationContext, PathConfig, PathConfigError, PathTooLongError, Provenance, SearchResult
from .primitives import absolutize, decode_path, join, join_all, reduce_to_parent, reduce_times

logger = create_logger("prefix")

_PREFIX_LEVELS = 2
_EXEC_PREFIX_LEVELS = 3


def _walk_up(
    start: str,
    context: CalculationContext,
    suffix: tuple[str, ...],
    accept: Callable[[str], Result[bool, PathTooLongError]],
) -> Result[str | None, PathTooLongError]:
    """Test ``<candidate>/<suffix...>`` for each ancestor of ``start``, nearest first."""
    current = absolutize(start, limit=context.max_path)
    if is_err(current):
        return current

    candidate = current.ok_value
    while True:
        probe = join_all(candidate, *suffix, limit=context.max_path)
        if is_err(probe):
            return probe

        accepted = accept(probe.ok_value)
        if is_err(accepted):
            return accepted
        if accepted.ok_value:
            return Ok(probe.ok_value)

        candidate = reduce_to_parent(candidate)
        if not candidate:
            return Ok(None)


def search_for_prefix(
    context: CalculationContext,
    pathconfig: PathConfig,
    argv0_path: str,
    delimiter: str,
) -> Result[SearchResult, PathConfigError]:
    limit = context.max_path

    def is_library_root(directory: str) -> Result[bool, PathTooLongError]:
        return looks_like_library_root(directory, landmark=context.landmark, limit=limit)

    if pathconfig.home:
        home = pathconfig.home_prefix(delimiter) or ""
        logger.debug("Prefix taken from home override", home=home)
        return join(home, context.lib_python, limit=limit).map(SearchResult.walk)

    marker = join(argv0_path, BUILD_MARKER, limit=limit)
    if is_err(marker):
        return marker
    if is_regular_file(marker.ok_value):
        build_lib = join_all(argv0_path, context.vpath, BUILD_LIB_DIR, limit=limit)
        if is_err(build_lib):
            return build_lib
        in_build_tree = is_library_root(build_lib.ok_value)
        if is_err(in_build_tree):
            return in_build_tree
        if in_build_tree.ok_value:
            logger.debug("Prefix found in build tree", path=build_lib.ok_value)
            return Ok(SearchResult.build_marker(build_lib.ok_value))

    walked = _walk_up(argv0_path, context, (context.lib_python,), is_library_root)
    if is_err(walked):
        return walked
    if walked.ok_value is not None:
        logger.debug("Prefix found by walking up", path=walked.ok_value)
        return Ok(SearchResult.walk(walked.ok_value))

    default = join(context.prefix, context.lib_python, limit=limit)
    if is_err(default):
        return default
    at_default = is_library_root(default.ok_value)
    if is_err(at_default):
        return at_default
    if at_default.ok_value:
        logger.debug("Prefix found at compiled-in default", path=default.ok_value)
        return Ok(SearchResult.walk(default.ok_value))

    logger.debug("Prefix not found", default=default.ok_value)
    return Ok(SearchResult.not_found(default.ok_value))


def _read_pybuilddir(
    argv0_path: str,
    *,
    limit: int = MAXPATHLEN,
) -> Result[str | None, PathConfigError]:
    """Contents of ``argv0_path/pybuilddir.txt``, used verbatim as a relative path."""
    filename = join(argv0_path, PYBUILDDIR_MARKER, limit=limit)
    if is_err(filename):
        return filename
    if not is_regular_file(filename.ok_value):
        return Ok(None)

    try:
        with open(filename.ok_value, "rb") as handle:
            raw = handle.read(limit)
    except OSError:
        return Ok(None)

    return decode_path(raw, PYBUILDDIR_MARKER)


def search_for_exec_prefix(
    context: CalculationContext,
    pathconfig: PathConfig,
    argv0_path: str,
    delimiter: str,
) -> Result[SearchResult, PathConfigError]:
    limit = context.max_path

    if pathconfig.home:
        home = pathconfig.home_exec_prefix(delimiter) or ""
        logger.debug("Exec-prefix taken from home override", home=home)
        return join_all(home, context.lib_python, LIB_DYNLOAD, limit=limit).map(SearchResult.walk)

    builddir = _read_pybuilddir(argv0_path, limit=limit)
    if is_err(builddir):
        return builddir
    if builddir.ok_value is not None:
        logger.debug("Exec-prefix found in build tree", builddir=builddir.ok_value)
        return join(argv0_path, builddir.ok_value, limit=limit).map(SearchResult.build_marker)

    def dynload_exists(directory: str) -> Result[bool, PathTooLongError]:
        return Ok(is_directory(directory))

    walked = _walk_up(argv0_path, context, (context.lib_python, LIB_DYNLOAD), dynload_exists)
    if is_err(walked):
        return walked
    if walked.ok_value is not None:
        logger.debug("Exec-prefix found by walking up", path=walked.ok_value)
        return Ok(SearchResult.walk(walked.ok_value))

    default = join_all(context.exec_prefix, context.lib_python, LIB_DYNLOAD, limit=limit)
    if is_err(default):
        return default
    if is_directory(default.ok_value):
        logger.debug("Exec-prefix found at compiled-in default", path=default.ok_value)
        return Ok(SearchResult.walk(default.ok_value))

    # The compiled-in exec-prefix is taken to be version-qualified already, so
    # the not-found working value skips the versioned library directory.
    fallback = join(context.exec_prefix, EXEC_PREFIX_FALLBACK_DIR, limit=limit)
    if is_err(fallback):
        return fallback
    logger.debug("Exec-prefix not found", fallback=fallback.ok_value)
    return Ok(SearchResult.not_found(fallback.ok_value))


def _finalize(result: SearchResult, default: str, levels: int) -> str:
    match result.provenance:
        case Provenance.WALK:
            return reduce_times(result.path, levels) or SEP
        case Provenance.BUILD_MARKER:
            return result.path
        case Provenance.NOT_FOUND:
            return default


def finalize_prefix(result: SearchResult, context: CalculationContext) -> str:
    """Public prefix: ``/usr/local/lib/python3.9`` becomes ``/usr/local``."""
    return _finalize(result, context.prefix, _PREFIX_LEVELS)


def finalize_exec_prefix(result: SearchResult, context: CalculationContext) -> str:
    """Public exec-prefix: ``/usr/local/lib/python3.9/lib-dynload`` becomes ``/usr/local``."""
    return _finalize(result, context.exec_prefix, _EXEC_PREFIX_LEVELS)
