"""Wiring of sources, schedulers and the sync trigger for all profiles."""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import TYPE_CHECKING, Callable, Iterable

from .clock import AsyncioClock, Clock
from .dispatch import EventDispatcher, ExclusionFilter
from .profile import ProfileScheduler
from .sources import ChangeSource, EventCallback, create_source
from .supervisor import supervise
from .trigger import SyncTrigger

if TYPE_CHECKING:
    from syncwatch.config import SyncConfig

logger = logging.getLogger(__name__)

SourceFactory = Callable[[str, EventCallback], ChangeSource]


class SyncService:
    """Runs one scheduler per profile and keeps their watchers alive.

    Profiles are fully independent: each has its own scheduler, exclusion
    list and watcher tasks. Everything runs on a single asyncio loop.
    """

    def __init__(
        self,
        config: SyncConfig,
        trigger: SyncTrigger | None = None,
        clock: Clock | None = None,
        source_factory: SourceFactory | None = None,
        profiles: Iterable[str] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            config: Validated configuration.
            trigger: Sync launcher. Defaults to one built from the config.
            clock: Timer source. Defaults to the running asyncio loop.
            source_factory: Builds a change source for (path, callback).
            profiles: Subset of profile names to run. Defaults to all.

        Raises:
            KeyError: If a requested profile is not configured.
        """
        self.config = config
        self.trigger = trigger or SyncTrigger(
            command=config.sync_command,
            show_output=config.log_unison_stdout,
        )
        self.clock = clock or AsyncioClock()
        self._source_factory = source_factory or functools.partial(create_source, config.backend)
        self.dispatcher = EventDispatcher()
        self.schedulers: dict[str, ProfileScheduler] = {}
        self._tasks: list[asyncio.Task[None]] = []

        selected = list(profiles) if profiles is not None else list(config.profiles)
        for name in selected:
            if name not in config.profiles:
                raise KeyError(f"Unknown profile: {name}")

            scheduler = ProfileScheduler(
                profile_id=name,
                invoke=self.trigger.invoke,
                clock=self.clock,
                debounce_seconds=config.debounce_seconds,
                max_wait_seconds=config.max_wait_seconds,
            )
            self.schedulers[name] = scheduler
            self.dispatcher.register(scheduler, ExclusionFilter(config.profiles[name].exclude))

    @property
    def is_running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    def start(self) -> None:
        """Start watchers for every include directory and the startup syncs."""
        if self.is_running:
            return

        for name, scheduler in self.schedulers.items():
            profile = self.config.profiles[name]
            scheduler.log.info(f"Watching via {self.config.backend}: {', '.join(profile.include)}")

            callback = functools.partial(self.dispatcher.dispatch, name)
            for path in profile.include:
                source = self._source_factory(path, callback)
                task = asyncio.ensure_future(
                    supervise(source, self.config.restart_delay_seconds, log=scheduler.log)
                )
                self._tasks.append(task)

            if self.config.run_on_startup:
                scheduler.request_sync("Initial startup sync triggered.")

        logger.info(f"Sync service started for {len(self.schedulers)} profile(s)")

    def stop(self) -> None:
        """Stop all watchers and cancel pending timers.

        Syncs already in flight are left to finish on their own.
        """
        for task in self._tasks:
            task.cancel()
        self._tasks.clear()

        for scheduler in self.schedulers.values():
            scheduler.shutdown()

        logger.info("Sync service stopped")

    async def run(self) -> None:
        """Run until cancelled."""
        self.start()
        tasks = list(self._tasks)
        try:
            # Supervisors only finish by cancellation
            await asyncio.gather(*tasks)
        finally:
            self.stop()
