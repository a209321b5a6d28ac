"""Runtime path calculation: executable, prefixes and module search path."""

from .calculator import DiagnosticSink, calculate, calculate_path_config, stderr_sink
from .executable import locate_executable, which
from .models import (
    CalculationContext,
    CalculationError,
    DecodeError,
    PathCalculation,
    PathConfig,
    PathConfigError,
    PathTooLongError,
    Provenance,
    SearchResult,
    SymlinkLoopError,
)
from .platform import PlatformCapabilities, PosixPlatform, select_platform

__all__ = [
    "CalculationContext",
    "CalculationError",
    "DecodeError",
    "DiagnosticSink",
    "PathCalculation",
    "PathConfig",
    "PathConfigError",
    "PathTooLongError",
    "PlatformCapabilities",
    "PosixPlatform",
    "Provenance",
    "SearchResult",
    "SymlinkLoopError",
    "calculate",
    "calculate_path_config",
    "locate_executable",
    "select_platform",
    "stderr_sink",
    "which",
]
