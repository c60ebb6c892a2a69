"""Sync process launcher for syncwatch profiles."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Sequence

from syncwatch.config import DEFAULT_SYNC_COMMAND
from syncwatch.errors import SyncFailure, SyncInProgressError

from .profile import ProfileLogger

logger = logging.getLogger(__name__)

EXIT_NOT_FOUND = 127
EXIT_CANNOT_EXECUTE = 126


class SyncTrigger:
    """Start the external sync command for a profile.

    Invocation is fire-and-forget: ``invoke`` returns a task that resolves
    to the process exit code. A nonzero exit is logged but never raised.
    """

    def __init__(
        self,
        command: Sequence[str] | None = None,
        show_output: bool = True,
    ) -> None:
        """Initialize the trigger.

        Args:
            command: Argv template; ``{profile}`` is replaced by the profile name.
            show_output: Let the sync process write to our stdout/stderr.
        """
        self.command = list(command) if command is not None else list(DEFAULT_SYNC_COMMAND)
        self.show_output = show_output
        self._in_flight: set[str] = set()

    def is_busy(self, profile_id: str) -> bool:
        """Check whether a sync is in flight for a profile."""
        return profile_id in self._in_flight

    def build_command(self, profile_id: str) -> list[str]:
        """Substitute the profile name into the command template."""
        return [arg.replace("{profile}", profile_id) for arg in self.command]

    def invoke(self, profile_id: str) -> asyncio.Task[int]:
        """Start a sync in the background.

        Args:
            profile_id: Profile to sync.

        Returns:
            Task resolving to the process exit code.

        Raises:
            SyncInProgressError: If a sync is already running for the profile.
        """
        if profile_id in self._in_flight:
            raise SyncInProgressError(
                message="Sync already in progress",
                profile=profile_id,
            )

        self._in_flight.add(profile_id)
        task = asyncio.ensure_future(self.run(profile_id))
        task.add_done_callback(lambda _: self._in_flight.discard(profile_id))
        return task

    async def run(self, profile_id: str) -> int:
        """Run the sync command to completion.

        No timeout applies: once started, a sync runs until the tool exits.

        Args:
            profile_id: Profile to sync.

        Returns:
            The exit code of the sync process.
        """
        log = ProfileLogger(logger, {"profile": profile_id})
        argv = self.build_command(profile_id)
        stdio = None if self.show_output else asyncio.subprocess.DEVNULL

        log.info(f"Starting sync: {' '.join(argv)}")
        started_at = datetime.now()

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=stdio,
                stderr=stdio,
            )
        except FileNotFoundError as e:
            log.error(f"Sync command not found: {e}")
            return EXIT_NOT_FOUND
        except OSError as e:
            log.error(f"Cannot start sync command: {e}")
            return EXIT_CANNOT_EXECUTE

        exit_code = await proc.wait()
        duration = (datetime.now() - started_at).total_seconds()
        log.info(f"Sync exited with code {exit_code} after {duration:.1f}s")
        return exit_code

    async def run_checked(self, profile_id: str) -> None:
        """Run the sync command and raise if it fails.

        Raises:
            SyncFailure: If the sync process exits with a nonzero status.
        """
        exit_code = await self.run(profile_id)
        if exit_code != 0:
            raise SyncFailure(
                message=f"Sync failed with exit code {exit_code}",
                profile=profile_id,
                exit_code=exit_code,
            )
