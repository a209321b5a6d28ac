"""rtpath - compute where a language runtime finds its libraries.

By default, rtpath's internal logging is disabled when used as a library.
Library users can enable logging by calling rtpath.enable_logging().
"""

from rtpath.common import disable_library_logging, enable_library_logging
from rtpath.core import (
    CalculationContext,
    PathCalculation,
    PathConfig,
    PathConfigError,
    Provenance,
    SearchResult,
    calculate,
    calculate_path_config,
)

disable_library_logging()

enable_logging = enable_library_logging

__all__ = [
    "CalculationContext",
    "PathCalculation",
    "PathConfig",
    "PathConfigError",
    "Provenance",
    "SearchResult",
    "calculate",
    "calculate_path_config",
    "enable_logging",
]
