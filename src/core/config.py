"""Configuración central (pydantic-settings).

Fuentes, en orden:
- Variables de entorno `AGXCL_*`.
- `.env` del proyecto.
- `.env` de usuario (`get_user_env_file()`).
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR_NAME = "agxcl"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _platform_config_root() -> Path:
    home = Path.home()
    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA") or home / "AppData" / "Roaming")
    if sys.platform == "darwin":
        return home / "Library" / "Application Support"
    return Path(os.environ.get("XDG_CONFIG_HOME") or home / ".config")


def get_user_config_dir() -> Path:
    """Directory holding the user-level `.env` (`~/.config/agxcl` on Linux)."""

    return _platform_config_root() / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Central application settings.

    Values come from `AGXCL_*` environment variables, then the project `.env`,
    then the user-level `.env`.
    """

    model_config = SettingsConfigDict(
        env_prefix="AGXCL_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the global user config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
        validate_assignment=True,
    )

    api_key: str | None = Field(
        default=None,
        description="Bearer token sent to the AgeFix API when set.",
    )
    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Per-request timeout for API calls (seconds). None disables it.",
    )
    probe_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for each liveness probe during `validate` (seconds).",
    )
    config_filename: str = Field(
        default="agxcl.config.json",
        min_length=1,
        description="Project configuration file name, looked up in the working directory.",
    )
    default_network: str = Field(
        default="development",
        min_length=1,
        description="Network used when `--network` is not given.",
    )
    user_agent: str = Field(
        default="agxcl-cli/1.0 (+https://agefix.com)",
        min_length=1,
        description="User-Agent for API requests.",
    )
    log_level: LogLevel = Field(
        default="WARNING",
        description="Root log level when `--verbose` is not set.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value
