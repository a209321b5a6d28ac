"""Build configuration for rtpath."""

from .loader import load_build_config
from .models import (
    BuildConfig,
    ConfigError,
    ConfigIOError,
    ConfigNotFoundError,
    ConfigValidationError,
    ConfigYamlError,
)

__all__ = [
    "BuildConfig",
    "ConfigError",
    "ConfigIOError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "ConfigYamlError",
    "load_build_config",
]
