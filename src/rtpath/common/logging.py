"""Logging utilities for rtpath using Loguru.

Core modules log each search decision through a scoped logger
(``create_logger("prefix")``). The CLI writes those records to a rotating
file; as a library, rtpath stays silent until ``enable_library_logging``.
"""

import sys
from pathlib import Path
from typing import Literal

import loguru
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from rtpath.constants import APP_NAME

from .models import AppInfo
from .paths import get_data_directory


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(default=True)
    log_level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_file: str | None = Field(default=None)
    rotation: str = Field(default="1 MB")
    retention: str = Field(default="7 days")
    format: Literal["json", "text"] = Field(default="text")


def setup_cli_logging(app_info: AppInfo, config: LoggingConfig) -> int:
    """Send records from every ``rtpath`` scope to a rotating log file."""
    logger.enable(APP_NAME)
    logger.remove()
    logger.configure(extra={"scope": "cli", "env": app_info.environment})

    log_file = Path(config.log_file).expanduser() if config.log_file else _get_default_log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    rendering: dict[str, object] = {"serialize": True} if config.format == "json" else {"format": _get_text_format()}
    handler_id = logger.add(
        log_file,
        level=config.log_level,
        rotation=config.rotation,
        retention=config.retention,
        diagnose=False,
        **rendering,
    )

    logger.debug(
        "CLI logging initialized",
        log_file=str(log_file),
        level=config.log_level,
        format=config.format,
        version=app_info.version,
    )

    return handler_id



def disable_library_logging() -> None:
    logger.disable(APP_NAME)


def enable_library_logging(level: str = "INFO") -> int:
    logger.enable(APP_NAME)
    logger.remove()

    handler_id = logger.add(
        sys.stderr,
        level=level,
        format=_get_text_format(),
        colorize=False,
    )

    return handler_id


def create_logger(scope: str) -> "loguru.Logger":
    return logger.bind(scope=scope)


def _get_text_format() -> str:
    return "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} | {extra}\n{exception}"


def _get_default_log_file_path() -> Path:
    return get_data_directory() / "logs" / f"{APP_NAME}.log"
