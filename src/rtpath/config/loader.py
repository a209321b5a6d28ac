"""Build configuration file loading and validation."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError
from result import Err, Ok, Result

from rtpath.common import create_logger

from .models import (
    BuildConfig,
    ConfigError,
    ConfigIOError,
    ConfigNotFoundError,
    ConfigValidationError,
    ConfigYamlError,
)

logger = create_logger("config")


def load_build_config(path: Path, base: BuildConfig | None = None) -> Result[BuildConfig, ConfigError]:
    """Load a YAML build config, overlaying its keys on ``base``."""
    if not path.exists() or not path.is_file():
        return Err(
            ConfigNotFoundError(
                expected_path=path,
                message="Build configuration file not found.",
            ),
        )

    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        return Err(ConfigIOError(path=path, message=str(exc)))

    try:
        data = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        line = getattr(mark, "line", None)
        column = getattr(mark, "column", None)
        return Err(
            ConfigYamlError(
                path=path,
                line=(line + 1) if line is not None else None,
                column=(column + 1) if column is not None else None,
                message=str(exc),
            ),
        )

    if not isinstance(data, dict):
        return Err(
            ConfigValidationError(
                path=path,
                field=None,
                message="Configuration root must be a mapping of keys to values.",
            ),
        )

    merged = (base or BuildConfig()).model_dump() | data
    try:
        config = BuildConfig.model_validate(merged)
    except ValidationError as exc:
        error_details = exc.errors()
        field = None
        message = str(exc)
        if error_details:
            first = error_details[0]
            loc = first.get("loc") or ()
            field = ".".join(str(part) for part in loc) or None
            message = first.get("msg", message)
        return Err(ConfigValidationError(path=path, field=field, message=message))

    logger.debug("Build config loaded", path=str(path), keys=sorted(data))
    return Ok(config)
