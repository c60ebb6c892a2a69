"""syncwatch scheduling system.

This module provides the per-profile debounce scheduler, the sync process
trigger, change sources built on watchdog or inotifywait, and the
supervisor that keeps those sources running.
"""

from .clock import AsyncioClock, Clock, ManualClock
from .dispatch import EventDispatcher, ExclusionFilter
from .profile import ProfileScheduler, ProfileState, SchedulerState
from .service import SyncService
from .sources import (
    ChangeEvent,
    ChangeForwarder,
    ChangeSource,
    InotifywaitSource,
    WatchdogSource,
    create_source,
    parse_inotify_line,
)
from .supervisor import supervise
from .trigger import SyncTrigger

__all__ = [
    "AsyncioClock",
    "ChangeEvent",
    "ChangeForwarder",
    "ChangeSource",
    "Clock",
    "EventDispatcher",
    "ExclusionFilter",
    "InotifywaitSource",
    "ManualClock",
    "ProfileScheduler",
    "ProfileState",
    "SchedulerState",
    "SyncService",
    "SyncTrigger",
    "WatchdogSource",
    "create_source",
    "parse_inotify_line",
    "supervise",
]
