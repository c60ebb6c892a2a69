"""Per-profile debounce and coalescing scheduler.

Each profile owns one ProfileScheduler. Changes open a burst: the debounce
timer is re-armed on every change, the max-wait timer is armed once at the
start of the burst. Whichever fires first starts a sync. While a sync is in
flight, further changes only mark a rerun, which starts immediately when
the current sync completes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, MutableMapping, Protocol

if TYPE_CHECKING:
    from .clock import Clock, TimerHandle

logger = logging.getLogger(__name__)


class CompletionFuture(Protocol):
    """Minimal future interface for a sync in flight."""

    def add_done_callback(self, fn: Callable[[Any], object], /) -> None: ...

    def cancelled(self) -> bool: ...

    def exception(self) -> BaseException | None: ...

    def result(self) -> int: ...


SyncInvoker = Callable[[str], CompletionFuture]


class SchedulerState(str, Enum):
    """Observable state of a profile scheduler."""

    IDLE = "idle"
    COALESCING = "coalescing"
    RUNNING = "running"
    RUNNING_DIRTY = "running_dirty"


@dataclass
class ProfileState:
    """Mutable state of one profile, owned by its scheduler."""

    running: bool = False
    rerun_pending: bool = False
    debounce_deadline: TimerHandle | None = None
    max_wait_deadline: TimerHandle | None = None


class ProfileLogger(logging.LoggerAdapter):
    """Prefix every message with the profile name."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.extra['profile']}] {msg}", kwargs


class ProfileScheduler:
    """Debounce state machine for a single profile.

    All methods must be called from the thread that owns the clock; the
    running flag is never touched from anywhere else, so no lock is needed.
    """

    def __init__(
        self,
        profile_id: str,
        invoke: SyncInvoker,
        clock: Clock,
        debounce_seconds: float,
        max_wait_seconds: float,
    ) -> None:
        """Initialize the scheduler.

        Args:
            profile_id: Name of the profile this scheduler owns.
            invoke: Starts a sync for a profile and returns a future for its exit code.
            clock: Timer source for the debounce and max-wait deadlines.
            debounce_seconds: Quiet period that must pass before a burst syncs.
            max_wait_seconds: Upper bound from the first change of a burst to its sync.
        """
        self.profile_id = profile_id
        self.debounce_seconds = debounce_seconds
        self.max_wait_seconds = max_wait_seconds
        self._invoke = invoke
        self._clock = clock
        self._state = ProfileState()
        self.log = ProfileLogger(logger, {"profile": profile_id})

    @property
    def state(self) -> SchedulerState:
        s = self._state
        if s.running:
            return SchedulerState.RUNNING_DIRTY if s.rerun_pending else SchedulerState.RUNNING
        if s.debounce_deadline is not None or s.max_wait_deadline is not None:
            return SchedulerState.COALESCING
        return SchedulerState.IDLE

    @property
    def profile_state(self) -> ProfileState:
        return self._state

    def on_change(self) -> None:
        """Handle a change notification that passed the exclusion filter."""
        s = self._state

        if s.running:
            if not s.rerun_pending:
                s.rerun_pending = True
                self.log.info("Change detected while syncing, scheduling rerun.")
            return

        # Max-wait is armed once per burst and never pushed back
        if s.max_wait_deadline is None:
            s.max_wait_deadline = self._clock.call_later(
                self.max_wait_seconds, self._on_max_wait_fire
            )

        if s.debounce_deadline is not None:
            s.debounce_deadline.cancel()
        s.debounce_deadline = self._clock.call_later(self.debounce_seconds, self._on_debounce_fire)

    def request_sync(self, reason: str = "Sync requested.") -> None:
        """Sync now without waiting for the debounce window.

        If a sync is already running, a rerun is recorded instead.
        """
        if self._state.running:
            self.on_change()
            return

        self.log.info(reason)
        self._start_sync()

    def shutdown(self) -> None:
        """Cancel any armed timers and drop a pending rerun."""
        self._clear_timers()
        self._state.rerun_pending = False

    def _on_debounce_fire(self) -> None:
        self._state.debounce_deadline = None
        self.log.info("Debounce ended, syncing.")
        self._start_sync()

    def _on_max_wait_fire(self) -> None:
        self._state.max_wait_deadline = None
        self.log.info("Max wait reached, forcing sync.")
        self._start_sync()

    def _start_sync(self) -> None:
        s = self._state
        if s.running:
            self.log.debug("Already syncing, skipping trigger.")
            return

        self._clear_timers()
        s.running = True

        try:
            future = self._invoke(self.profile_id)
        except Exception:
            self.log.exception("Failed to start sync")
            self._on_sync_done(-1)
            return

        future.add_done_callback(self._on_sync_future_done)

    def _on_sync_future_done(self, future: CompletionFuture) -> None:
        if future.cancelled():
            self.log.warning("Sync was cancelled")
            exit_code = -1
        elif (exc := future.exception()) is not None:
            self.log.error(f"Sync raised {type(exc).__name__}: {exc}")
            exit_code = -1
        else:
            exit_code = future.result()

        self._on_sync_done(exit_code)

    def _on_sync_done(self, exit_code: int) -> None:
        s = self._state
        if not s.running:
            self.log.debug(f"Ignoring completion (code {exit_code}) with no sync in flight")
            return

        if exit_code == 0:
            self.log.debug("Sync completed")
        else:
            self.log.warning(f"Sync failed with exit code {exit_code}")

        s.running = False

        if s.rerun_pending:
            s.rerun_pending = False
            self.log.info("Pending changes detected, rerunning sync.")
            self._start_sync()

    def _clear_timers(self) -> None:
        s = self._state
        if s.debounce_deadline is not None:
            s.debounce_deadline.cancel()
            s.debounce_deadline = None
        if s.max_wait_deadline is not None:
            s.max_wait_deadline.cancel()
            s.max_wait_deadline = None
