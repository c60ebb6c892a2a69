"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from concurrent.futures import Future
from pathlib import Path
from typing import Any

import pytest
import yaml

from syncwatch.scheduler import ManualClock, ProfileScheduler


class FakeInvoker:
    """Records sync invocations; each returns a future completed by the test."""

    def __init__(self, clock: ManualClock | None = None) -> None:
        self.clock = clock
        self.calls: list[str] = []
        self.started_at: list[float] = []
        self.futures: list[Future[int]] = []

    def __call__(self, profile_id: str) -> Future[int]:
        future: Future[int] = Future()
        self.calls.append(profile_id)
        self.started_at.append(self.clock.now if self.clock else 0.0)
        self.futures.append(future)
        return future

    @property
    def in_flight(self) -> int:
        return sum(1 for f in self.futures if not f.done())

    def finish(self, exit_code: int = 0) -> None:
        """Complete the most recent sync."""
        self.futures[-1].set_result(exit_code)


@pytest.fixture
def clock() -> ManualClock:
    """Create a manual clock starting at t=0."""
    return ManualClock()


@pytest.fixture
def invoker(clock: ManualClock) -> FakeInvoker:
    """Create a fake sync invoker bound to the manual clock."""
    return FakeInvoker(clock)


@pytest.fixture
def scheduler(clock: ManualClock, invoker: FakeInvoker) -> ProfileScheduler:
    """Create a scheduler with 10s debounce and 60s max wait."""
    return ProfileScheduler(
        profile_id="home",
        invoke=invoker,
        clock=clock,
        debounce_seconds=10.0,
        max_wait_seconds=60.0,
    )


@pytest.fixture
def config_data(tmp_path: Path) -> dict[str, Any]:
    """A valid configuration mapping watching directories under tmp_path."""
    documents = tmp_path / "Documents"
    pictures = tmp_path / "Pictures"
    documents.mkdir()
    pictures.mkdir()
    return {
        "debounce_ms": 10000,
        "max_wait_ms": 60000,
        "run_on_startup": False,
        "log_unison_stdout": False,
        "profiles": {
            "home": {
                "include": [str(documents), str(pictures)],
                "exclude": [".cache", "Downloads"],
            },
        },
    }


@pytest.fixture
def config_file(tmp_path: Path, config_data: dict[str, Any]) -> Path:
    """Write config_data to a YAML file."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(config_data))
    return path
