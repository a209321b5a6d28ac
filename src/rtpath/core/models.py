"""Pydantic models for path calculation inputs, outputs and errors."""

from __future__ import annotations

import re
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rtpath.constants import DEFAULT_HOME_ENV_VAR, LANDMARK, MAXPATHLEN

_VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)")


class CalculationError(BaseModel):
    """Base error for a path calculation that cannot continue."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    message: str


class PathTooLongError(CalculationError):
    """A composed path exceeded the maximum path length."""

    kind: Literal["path_too_long"] = "path_too_long"
    path: str
    limit: int


class SymlinkLoopError(CalculationError):
    """Symlink chasing did not settle within the hop bound."""

    kind: Literal["symlink_loop"] = "symlink_loop"
    path: str
    hops: int


class DecodeError(CalculationError):
    """An externally supplied byte string could not be decoded."""

    kind: Literal["decode"] = "decode"
    source: str


type PathConfigError = PathTooLongError | SymlinkLoopError | DecodeError


class Provenance(str, Enum):
    """How a prefix or exec-prefix search concluded."""

    WALK = "walk"
    BUILD_MARKER = "build_marker"
    NOT_FOUND = "not_found"


class SearchResult(BaseModel):
    """Working value of a prefix or exec-prefix search and how it was obtained."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str
    provenance: Provenance

    @classmethod
    def walk(cls, path: str) -> SearchResult:
        return cls(path=path, provenance=Provenance.WALK)

    @classmethod
    def build_marker(cls, path: str) -> SearchResult:
        return cls(path=path, provenance=Provenance.BUILD_MARKER)

    @classmethod
    def not_found(cls, path: str) -> SearchResult:
        return cls(path=path, provenance=Provenance.NOT_FOUND)

    @property
    def found(self) -> bool:
        return self.provenance is not Provenance.NOT_FOUND

    @property
    def from_walk(self) -> bool:
        return self.provenance is Provenance.WALK


class CalculationContext(BaseModel):
    """Immutable inputs of one path calculation.

    The compile-time values (``prefix``, ``exec_prefix``, ``version``,
    ``vpath``, ``default_search_path``) describe where the runtime was
    configured to be installed. ``path_env`` and ``pythonpath_env`` are the
    run-time environment values supplied by the caller.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    path_env: str | None = None
    pythonpath_env: str | None = None
    prefix: str = "/usr/local"
    exec_prefix: str = "/usr/local"
    version: str
    runtime_name: str = Field(default="python", min_length=1)
    vpath: str = "."
    default_search_path: tuple[str, ...] = ("",)
    landmark: str = Field(default=LANDMARK, min_length=1)
    warnings: bool = True
    home_env_var: str = DEFAULT_HOME_ENV_VAR
    max_path: int = Field(default=MAXPATHLEN, gt=0)

    @field_validator("version")
    @classmethod
    def _validate_version(cls, value: str) -> str:
        if not _VERSION_PATTERN.match(value):
            raise ValueError(f"Version must start with '<major>.<minor>', got '{value}'")
        return value

    @property
    def lib_python(self) -> str:
        """Library directory relative to a prefix, e.g. ``lib/python3.9``."""
        return f"lib/{self.runtime_name}{self.version}"

    @property
    def version_token(self) -> str:
        match = _VERSION_PATTERN.match(self.version)
        if match is None:
            raise ValueError(f"Version must start with '<major>.<minor>', got '{self.version}'")
        return f"{match.group(1)}{match.group(2)}"

    @property
    def zip_relpath(self) -> str:
        return f"lib/{self.runtime_name}{self.version_token}.zip"


class PathConfig(BaseModel):
    """Path configuration of a runtime process.

    Fields a caller fills in before calculation are kept as given; only the
    empty ones are computed.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    program_name: str
    home: str | None = None
    program_full_path: str | None = None
    prefix: str | None = None
    exec_prefix: str | None = None
    module_search_path: str | None = None

    def home_prefix(self, delimiter: str) -> str | None:
        """Prefix part of ``home`` (everything before the first delimiter)."""
        if not self.home:
            return None
        return self.home.split(delimiter, 1)[0]

    def home_exec_prefix(self, delimiter: str) -> str | None:
        """Exec-prefix part of ``home``, or the whole value when it holds one directory."""
        if not self.home:
            return None
        _, sep, rest = self.home.partition(delimiter)
        return rest if sep else self.home


class PathCalculation(BaseModel):
    """Everything one calculation produced, intermediate values included."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    config: PathConfig
    argv0_path: str
    prefix: SearchResult
    exec_prefix: SearchResult
    zip_path: str
    warnings: list[str] = Field(default_factory=list)
