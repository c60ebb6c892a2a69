"""Configuration management for syncwatch."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from syncwatch.errors import ConfigError

SYNCWATCH_DIR = Path.home() / ".syncwatch"
CONFIG_FILE = SYNCWATCH_DIR / "config.yaml"

DEFAULT_SYNC_COMMAND = ["unison", "{profile}", "-auto", "-batch"]


class _ConfigModel(BaseModel):
    """Accept both snake_case and camelCase keys, reject unknown ones."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class ProfileConfig(_ConfigModel):
    """Directories to watch and path substrings to ignore for one profile."""

    include: list[str] = Field(..., min_length=1, description="Directories to watch")
    exclude: list[str] = Field(
        default_factory=list, description="Substrings that exclude a path"
    )

    @field_validator("include")
    @classmethod
    def expand_include(cls, v: list[str]) -> list[str]:
        """Expand ~ and environment variables in watched directories."""
        expanded = []
        for path in v:
            if not path.strip():
                raise ValueError("Include paths must not be empty")
            expanded.append(os.path.expandvars(os.path.expanduser(path)))
        return expanded

    @field_validator("exclude")
    @classmethod
    def validate_exclude(cls, v: list[str]) -> list[str]:
        """An empty substring would exclude every path."""
        if any(not pattern for pattern in v):
            raise ValueError("Exclusion patterns must not be empty")
        return v


class SyncConfig(_ConfigModel):
    """Top-level syncwatch configuration."""

    profiles: dict[str, ProfileConfig] = Field(..., min_length=1)
    debounce_ms: int = Field(default=10000, gt=0, description="Quiet period before syncing")
    max_wait_ms: int = Field(
        default=60000, gt=0, description="Upper bound from first change to sync"
    )
    run_on_startup: bool = Field(default=True, description="Sync every profile at startup")
    log_unison_stdout: bool = Field(
        default=True, description="Show sync process output instead of discarding it"
    )
    restart_delay_ms: int = Field(
        default=1000, gt=0, description="Delay before restarting a stopped watcher"
    )
    backend: Literal["watchdog", "inotifywait"] = Field(
        default="watchdog", description="Change event source"
    )
    sync_command: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SYNC_COMMAND),
        min_length=1,
        description="Sync command argv; {profile} is replaced by the profile name",
    )

    @field_validator("profiles")
    @classmethod
    def validate_profile_names(cls, v: dict[str, ProfileConfig]) -> dict[str, ProfileConfig]:
        """Profile names are used on the sync command line."""
        for name in v:
            if not name.strip():
                raise ValueError("Profile names must not be empty")
        return v

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    @property
    def max_wait_seconds(self) -> float:
        return self.max_wait_ms / 1000

    @property
    def restart_delay_seconds(self) -> float:
        return self.restart_delay_ms / 1000


def parse_config(data: Any, source: str = "<dict>") -> SyncConfig:
    """Validate a configuration mapping.

    Args:
        data: Parsed configuration data.
        source: Where the data came from, for error messages.

    Returns:
        Validated SyncConfig.

    Raises:
        ConfigError: If the data is not a valid configuration.
    """
    if data is None:
        raise ConfigError(f"Empty configuration: {source}")

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a mapping: {source}")

    try:
        return SyncConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid configuration in {source}",
            errors=[dict(error) for error in e.errors()],
        ) from e


def load_config(path: Path | str | None = None) -> SyncConfig:
    """Load and validate the syncwatch configuration file.

    Args:
        path: Path to the YAML file. Defaults to ~/.syncwatch/config.yaml.

    Returns:
        Validated SyncConfig.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    path = Path(path) if path is not None else CONFIG_FILE

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    return parse_config(data, source=str(path))
