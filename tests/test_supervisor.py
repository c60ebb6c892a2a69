"""Tests for the change source supervisor."""

from __future__ import annotations

import asyncio
import logging

import pytest

from syncwatch.errors import SourceUnavailable
from syncwatch.scheduler import ChangeSource, supervise


class StopSupervisor(BaseException):
    """Escapes the restart loop, like cancellation does."""


class FlakySource(ChangeSource):
    """Source that fails a number of times, then stops the test."""

    def __init__(self, failures: list[BaseException | None]) -> None:
        super().__init__("/docs", lambda event: None)
        self.failures = failures
        self.runs = 0

    async def run(self) -> None:
        self.runs += 1
        outcome = self.failures.pop(0) if self.failures else StopSupervisor()
        if outcome is not None:
            raise outcome


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class TestSupervise:
    """Tests for supervise."""

    @pytest.mark.asyncio
    async def test_restarts_with_fixed_delay(self) -> None:
        """Test every stop is followed by the same restart delay."""
        source = FlakySource(
            [
                SourceUnavailable(message="inotifywait exited (code 1)", exit_code=1),
                SourceUnavailable(message="inotifywait exited (code 1)", exit_code=1),
                SourceUnavailable(message="inotifywait exited (code 1)", exit_code=1),
            ]
        )
        sleep = RecordingSleep()

        with pytest.raises(StopSupervisor):
            await supervise(source, restart_delay=1.0, sleep=sleep)

        assert source.runs == 4
        assert sleep.delays == [1.0, 1.0, 1.0]

    @pytest.mark.asyncio
    async def test_unexpected_errors_restart(self) -> None:
        """Test arbitrary exceptions from a source are restarted too."""
        source = FlakySource([RuntimeError("boom"), OSError("gone")])
        sleep = RecordingSleep()

        with pytest.raises(StopSupervisor):
            await supervise(source, restart_delay=2.5, sleep=sleep)

        assert source.runs == 3
        assert sleep.delays == [2.5, 2.5]

    @pytest.mark.asyncio
    async def test_normal_return_restarts(self) -> None:
        """Test a source that returns is treated as stopped."""
        source = FlakySource([None])
        sleep = RecordingSleep()

        with pytest.raises(StopSupervisor):
            await supervise(source, restart_delay=1.0, sleep=sleep)

        assert source.runs == 2
        assert sleep.delays == [1.0]

    @pytest.mark.asyncio
    async def test_restart_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test restarts are logged as warnings, not raised."""
        source = FlakySource([SourceUnavailable(message="inotifywait exited (code 1)")])

        with caplog.at_level(logging.INFO, logger="syncwatch.scheduler.supervisor"):
            with pytest.raises(StopSupervisor):
                await supervise(source, restart_delay=1.0, sleep=RecordingSleep())

        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert warnings == ["inotifywait exited (code 1), restarting watcher in 1s..."]

    @pytest.mark.asyncio
    async def test_cancellation_stops_loop(self) -> None:
        """Test cancelling the supervisor task ends it."""

        class BlockingSource(ChangeSource):
            async def run(self) -> None:
                await asyncio.Event().wait()

        task = asyncio.ensure_future(supervise(BlockingSource("/docs", lambda e: None), 1.0))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
