"""AsyncioScheduler - SchedulerPort backed by the running asyncio event loop."""

import asyncio
import logging
from typing import Any, Callable, Coroutine

from ports.scheduler import SchedulerPort, TimerHandle

logger = logging.getLogger(__name__)


class _AsyncioTimer(TimerHandle):
    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()


class AsyncioScheduler(SchedulerPort):
    def __init__(self, loop: asyncio.AbstractEventLoop = None):
        self._loop = loop
        self._tasks: set[asyncio.Task] = set()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return _AsyncioTimer(self.loop.call_later(delay, callback))

    def spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        # Keep a strong reference until the task finishes.
        task = self.loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
