"""Error classification for syncwatch."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Classification of errors for handling decisions."""

    RECOVERABLE = "recoverable"  # Logged, service keeps running
    FATAL = "fatal"  # Abort before anything starts


@dataclass
class SyncWatchError(Exception):
    """Base error with classification and context."""

    message: str
    category: ErrorCategory = ErrorCategory.RECOVERABLE
    profile: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        if self.profile:
            return f"[{self.profile}] {self.message}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class SourceUnavailable(SyncWatchError):
    """A change-event source stopped producing events.

    The supervisor restarts the source after a fixed delay.
    """

    exit_code: int | None = None


@dataclass
class SyncFailure(SyncWatchError):
    """The sync process exited with a nonzero status."""

    exit_code: int = 1


@dataclass
class SyncInProgressError(SyncWatchError):
    """A second sync was requested while one is in flight for the profile."""


class ConfigError(SyncWatchError):
    """Error loading or validating configuration."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message=message, category=ErrorCategory.FATAL)
        self.errors = errors or []
