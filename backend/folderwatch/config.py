"""
Watcher settings.

Read from FOLDERWATCH_* environment variables. Every setting has a default,
so an empty environment yields a working (rootless) watcher.
"""

import os
from typing import Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_ROOT = "FOLDERWATCH_ROOT"
ENV_SKIP_HIDDEN = "FOLDERWATCH_SKIP_HIDDEN"
ENV_FOLLOW_SYMLINKS = "FOLDERWATCH_FOLLOW_SYMLINKS"
ENV_ADJUST_TIMEOUT = "FOLDERWATCH_ADJUST_TIMEOUT"
ENV_EVENT_LOG_SIZE = "FOLDERWATCH_EVENT_LOG_SIZE"
ENV_LOG_LEVEL = "FOLDERWATCH_LOG_LEVEL"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def parse_bool(value: str) -> bool:
    """Parse an environment flag. Raises ValueError for anything unrecognized."""
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise ValueError(f"Not a boolean value: {value!r}")


class WatcherSettings(BaseModel):
    """Runtime configuration for the folder watcher service."""

    model_config = ConfigDict(extra="forbid")

    root: Optional[str] = Field(
        default=None, description="Folder to scan at startup (none if unset)"
    )
    skip_hidden: bool = Field(
        default=True, description="Skip dot-folders during a rescan"
    )
    follow_symlinks: bool = Field(
        default=False, description="Descend into symlinked folders during a rescan"
    )
    adjust_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Upper bound on a rescan issued over HTTP"
    )
    event_log_size: int = Field(
        default=200, ge=1, description="Number of watch events kept in memory"
    )
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "WatcherSettings":
        """
        Build settings from the environment.

        Args:
            environ: Mapping to read instead of os.environ (for tests)

        Raises:
            ValueError: If a variable is set to an unparseable value
        """
        env = os.environ if environ is None else environ
        values = {}

        root = env.get(ENV_ROOT, "").strip()
        if root:
            values["root"] = root
        if ENV_SKIP_HIDDEN in env:
            values["skip_hidden"] = parse_bool(env[ENV_SKIP_HIDDEN])
        if ENV_FOLLOW_SYMLINKS in env:
            values["follow_symlinks"] = parse_bool(env[ENV_FOLLOW_SYMLINKS])
        if ENV_ADJUST_TIMEOUT in env:
            values["adjust_timeout_seconds"] = float(env[ENV_ADJUST_TIMEOUT])
        if ENV_EVENT_LOG_SIZE in env:
            values["event_log_size"] = int(env[ENV_EVENT_LOG_SIZE])
        if ENV_LOG_LEVEL in env:
            values["log_level"] = env[ENV_LOG_LEVEL]

        return cls(**values)
