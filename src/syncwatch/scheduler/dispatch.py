"""Routing of change events to profile schedulers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .profile import ProfileScheduler
    from .sources import ChangeEvent


class ExclusionFilter:
    """Substring-based path exclusion for one profile."""

    def __init__(self, patterns: Sequence[str]) -> None:
        self.patterns = tuple(patterns)

    def is_excluded(self, path: str) -> bool:
        return any(pattern in path for pattern in self.patterns)


class EventDispatcher:
    """Forward change events to the scheduler of the profile that watches them.

    Excluded paths are dropped silently.
    """

    def __init__(self) -> None:
        self._routes: dict[str, tuple[ExclusionFilter, ProfileScheduler]] = {}

    def register(
        self,
        scheduler: ProfileScheduler,
        exclusion: ExclusionFilter,
    ) -> None:
        self._routes[scheduler.profile_id] = (exclusion, scheduler)

    @property
    def profiles(self) -> list[str]:
        return list(self._routes)

    def dispatch(self, profile_id: str, event: ChangeEvent) -> bool:
        """Apply one change event.

        Args:
            profile_id: Profile whose watcher produced the event.
            event: The change event.

        Returns:
            True if the event reached the scheduler, False if it was excluded.

        Raises:
            KeyError: If no scheduler is registered for the profile.
        """
        exclusion, scheduler = self._routes[profile_id]
        if exclusion.is_excluded(event.path):
            return False

        scheduler.log.info(f"{event.kind}: {event.path}")
        scheduler.on_change()
        return True
