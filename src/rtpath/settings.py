from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rtpath.common import AppInfo, LoggingConfig
from rtpath.config import BuildConfig
from rtpath.constants import DEFAULT_HOME_ENV_VAR, ENV_PREFIX
from rtpath.core import CalculationContext, PathConfig


class Settings(BaseSettings):
    app: AppInfo = Field(default_factory=AppInfo)
    build: BuildConfig = Field(default_factory=BuildConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    home: str | None = None
    pythonpath: str | None = None
    warnings: bool = True
    home_env_var: str = DEFAULT_HOME_ENV_VAR

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        nested_model_default_partial_update=True,
        extra="ignore",
    )

    def to_context(self, path_env: str | None, build: BuildConfig | None = None) -> CalculationContext:
        build = build or self.build
        return CalculationContext(
            path_env=path_env,
            pythonpath_env=self.pythonpath,
            prefix=build.prefix,
            exec_prefix=build.exec_prefix,
            version=build.version,
            runtime_name=build.runtime_name,
            vpath=build.vpath,
            default_search_path=tuple(build.default_search_path),
            landmark=build.landmark,
            warnings=self.warnings,
            home_env_var=self.home_env_var,
        )

    def to_pathconfig(self, program_name: str) -> PathConfig:
        return PathConfig(program_name=program_name, home=self.home)


__all__ = [
    "Settings",
]
