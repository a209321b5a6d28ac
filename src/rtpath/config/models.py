"""Pydantic models for build configuration and its loading errors."""

from __future__ import annotations

import sys
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from rtpath.constants import LANDMARK


def _running_version() -> str:
    return f"{sys.version_info.major}.{sys.version_info.minor}"


class BuildConfig(BaseModel):
    """Values a runtime is configured with at build time."""

    model_config = ConfigDict(extra="forbid")

    prefix: str = "/usr/local"
    exec_prefix: str = "/usr/local"
    version: str = Field(default_factory=_running_version, pattern=r"^\d+\.\d+")
    runtime_name: str = "python"
    vpath: str = "."
    default_search_path: list[str] = Field(default_factory=lambda: [""])
    landmark: str = LANDMARK


class ConfigNotFoundError(BaseModel):
    """Configuration file not found at expected location."""

    model_config = ConfigDict(extra="forbid")

    expected_path: Path
    message: str


class ConfigYamlError(BaseModel):
    """YAML parsing error in configuration file."""

    model_config = ConfigDict(extra="forbid")

    path: Path
    line: int | None = None
    column: int | None = None
    message: str


class ConfigValidationError(BaseModel):
    """Schema validation error in configuration."""

    model_config = ConfigDict(extra="forbid")

    path: Path
    field: str | None = None
    message: str


class ConfigIOError(BaseModel):
    """File I/O error reading configuration."""

    model_config = ConfigDict(extra="forbid")

    path: Path
    message: str


type ConfigError = ConfigNotFoundError | ConfigYamlError | ConfigValidationError | ConfigIOError
