"""Timer scheduling for turn phases.

The coordinator only ever talks to a Scheduler, so production code runs on
the asyncio event loop while tests can drive a manual clock.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled before it fires."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs a callback once after a delay in seconds."""

    def schedule_after(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Scheduler backed by ``loop.call_later``.

    Callbacks run on the event loop thread, one at a time.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def schedule_after(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        logger.debug("Scheduling %s in %.3fs", getattr(callback, "__name__", callback), delay)
        return loop.call_later(delay, callback)
