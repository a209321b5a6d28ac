"""Compose the zip archive path and the module search path."""

from __future__ import annotations

from collections.abc import Sequence

from result import Result

from rtpath.constants import SEP

from .models import CalculationContext, PathTooLongError, SearchResult
from .prefixes import finalize_prefix
from .primitives import is_absolute, join


def build_zip_path(prefix: SearchResult, context: CalculationContext) -> Result[str, PathTooLongError]:
    """``<prefix>/lib/python39.zip`` on the reduced prefix, or on the compiled-in one
    when the prefix came from a build tree or was not found."""
    basis = finalize_prefix(prefix, context) if prefix.from_walk else context.prefix
    return join(basis, context.zip_relpath, limit=context.max_path)


def merge_with_prefix(prefix: str, fragments: Sequence[str]) -> list[str]:
    """Anchor each relative fragment at ``prefix``; absolute ones are kept as is.

    A separator is added only when ``prefix`` does not already end with one
    and the fragment is non-empty, so an empty fragment yields ``prefix``
    itself.
    """
    merged = []
    for fragment in fragments:
        if is_absolute(fragment):
            merged.append(fragment)
            continue
        needs_separator = bool(prefix) and not prefix.endswith(SEP) and bool(fragment)
        merged.append(f"{prefix}{SEP if needs_separator else ''}{fragment}")
    return merged


def build_module_search_path(
    context: CalculationContext,
    prefix: str,
    exec_prefix: str,
    zip_path: str,
    delimiter: str,
) -> str:
    """Join, in order: the run-time override, the zip archive, the default
    fragments anchored at ``prefix``, and ``exec_prefix``.

    ``prefix`` and ``exec_prefix`` are the working library directories, not
    the reduced public roots. Nothing is checked for existence here.
    """
    entries: list[str] = []
    if context.pythonpath_env:
        entries.append(context.pythonpath_env)
    entries.append(zip_path)
    entries.extend(merge_with_prefix(prefix, context.default_search_path))
    entries.append(exec_prefix)
    return delimiter.join(entries)
