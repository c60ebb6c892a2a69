"""Change event sources for watched directories."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Callable, Literal

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from syncwatch.errors import SourceUnavailable

logger = logging.getLogger(__name__)

INOTIFY_EVENTS = "create,delete,modify,move"
INOTIFY_FORMAT = "%e %w%f"


@dataclass(frozen=True)
class ChangeEvent:
    """A single filesystem change notification."""

    kind: str
    path: str


EventCallback = Callable[[ChangeEvent], None]


def parse_inotify_line(line: str) -> ChangeEvent | None:
    """Parse one line of ``inotifywait --format '%e %w%f'`` output.

    Args:
        line: Raw output line, e.g. ``"CREATE,ISDIR /home/user/new dir"``.

    Returns:
        The parsed event, or None for blank lines.
    """
    line = line.strip()
    if not line:
        return None

    kind, _, path = line.partition(" ")
    return ChangeEvent(kind=kind, path=path)


def _decode(path: str | bytes) -> str:
    return path if isinstance(path, str) else path.decode()


class ChangeForwarder(FileSystemEventHandler):
    """Watchdog handler that hands change events to the asyncio loop.

    Runs on the observer thread; events are queued onto the loop with
    call_soon_threadsafe, which preserves their arrival order.
    """

    # Map watchdog event types to inotify-style kinds
    EVENT_KINDS = {
        "created": "CREATE",
        "deleted": "DELETE",
        "modified": "MODIFY",
        "moved": "MOVE",
    }

    def __init__(self, loop: asyncio.AbstractEventLoop, callback: EventCallback) -> None:
        super().__init__()
        self._loop = loop
        self._callback = callback

    def to_change_events(self, event: FileSystemEvent) -> list[ChangeEvent]:
        """Translate a watchdog event; opened/closed events produce nothing."""
        kind = self.EVENT_KINDS.get(event.event_type)
        if kind is None:
            return []

        if event.is_directory:
            kind = f"{kind},ISDIR"

        paths = [_decode(event.src_path)]
        dest_path = getattr(event, "dest_path", "")
        if dest_path:
            # A move changes both the source and the destination tree
            paths.append(_decode(dest_path))

        return [ChangeEvent(kind=kind, path=path) for path in paths]

    def on_any_event(self, event: FileSystemEvent) -> None:
        for change in self.to_change_events(event):
            self._loop.call_soon_threadsafe(self._callback, change)


class ChangeSource:
    """Produces change events for one directory until it stops.

    ``run`` never returns normally: when the underlying watcher goes away
    it raises SourceUnavailable so the supervisor can restart it.
    """

    def __init__(self, path: str, on_event: EventCallback) -> None:
        self.path = path
        self.on_event = on_event

    async def run(self) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"


class WatchdogSource(ChangeSource):
    """Recursive watchdog observer on a directory."""

    def __init__(
        self,
        path: str,
        on_event: EventCallback,
        poll_interval: float = 1.0,
    ) -> None:
        super().__init__(path, on_event)
        self.poll_interval = poll_interval

    def _is_watching(self, observer: Observer) -> bool:
        # Deleting the watched root stops its emitter while the observer thread lives on
        if not observer.is_alive() or not os.path.isdir(self.path):
            return False
        emitters = observer.emitters
        return bool(emitters) and all(emitter.is_alive() for emitter in emitters)

    async def run(self) -> None:
        handler = ChangeForwarder(asyncio.get_running_loop(), self.on_event)
        observer = Observer()

        try:
            observer.schedule(handler, self.path, recursive=True)
            observer.start()
        except OSError as e:
            raise SourceUnavailable(message=f"Cannot watch {self.path}: {e}") from e

        logger.debug(f"Watchdog observer started on {self.path}")

        try:
            while self._is_watching(observer):
                await asyncio.sleep(self.poll_interval)
        finally:
            observer.stop()
            observer.join(timeout=5.0)

        raise SourceUnavailable(message=f"Watchdog observer on {self.path} stopped")


class InotifywaitSource(ChangeSource):
    """``inotifywait -m -r`` subprocess on a directory."""

    def build_command(self) -> list[str]:
        return [
            "inotifywait",
            "-m",
            "-r",
            "-e",
            INOTIFY_EVENTS,
            "--format",
            INOTIFY_FORMAT,
            self.path,
        ]

    async def run(self) -> None:
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.build_command(),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            raise SourceUnavailable(message=f"Cannot start inotifywait: {e}") from e

        try:
            if proc.stdout is not None:
                async for raw in proc.stdout:
                    event = parse_inotify_line(raw.decode("utf-8", errors="replace"))
                    if event is not None:
                        self.on_event(event)
            exit_code = await proc.wait()
        finally:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()

        raise SourceUnavailable(
            message=f"inotifywait exited (code {exit_code})",
            exit_code=exit_code,
        )


def create_source(
    backend: Literal["watchdog", "inotifywait"],
    path: str,
    on_event: EventCallback,
) -> ChangeSource:
    """Build the change source for a backend name.

    Raises:
        ValueError: If the backend is unknown.
    """
    if backend == "watchdog":
        return WatchdogSource(path, on_event)
    if backend == "inotifywait":
        return InotifywaitSource(path, on_event)
    raise ValueError(f"Unknown change source backend: {backend}")
