"""Restart loop for change event sources."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_never,
    wait_fixed,
)

from syncwatch.errors import SourceUnavailable

if TYPE_CHECKING:
    from .sources import ChangeSource

logger = logging.getLogger(__name__)


async def supervise(
    source: ChangeSource,
    restart_delay: float,
    log: logging.Logger | logging.LoggerAdapter | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> None:
    """Keep a change source running forever.

    Whenever the source stops, it is restarted after a fixed delay. There is
    no backoff growth and no attempt limit; only cancellation ends the loop.

    Args:
        source: The source to run.
        restart_delay: Seconds to wait before each restart.
        log: Logger for restart messages. Defaults to the module logger.
        sleep: Awaitable sleep used between restarts.
    """
    log = log or logger

    def log_restart(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(exc, SourceUnavailable):
            log.warning(f"{exc.message}, restarting watcher in {restart_delay:g}s...")
        else:
            log.error(
                f"Watcher for {source.path} crashed ({exc!r}), "
                f"restarting in {restart_delay:g}s..."
            )

    retryer = AsyncRetrying(
        stop=stop_never,
        wait=wait_fixed(restart_delay),
        retry=retry_if_exception_type(Exception),
        before_sleep=log_restart,
        sleep=sleep,
        reraise=True,
    )

    async for attempt in retryer:
        with attempt:
            number = attempt.retry_state.attempt_number
            if number > 1:
                log.info(f"Restarting watcher for {source.path} (attempt {number})")
            await source.run()
            raise SourceUnavailable(message=f"Watcher for {source.path} returned")
