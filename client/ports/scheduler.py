"""SchedulerPort - abstract clock and task scheduling used by the poller."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Coroutine


class TimerHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        """Disarm the timer. Cancelling a fired or cancelled timer is a no-op."""


class SchedulerPort(ABC):
    @abstractmethod
    def now(self) -> float:
        """Monotonic time in seconds."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once after delay seconds."""

    @abstractmethod
    def spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        """Run a coroutine in the background without waiting for it."""
