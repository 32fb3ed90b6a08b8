"""Scheduler abstraction for buffered flush timing.

Flush timing goes through an explicit scheduler so it is deterministic
under test: ``ManualScheduler`` only fires callbacks when advanced.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Protocol


class ScheduledCall(Protocol):
    """Handle to a pending callback."""

    def cancel(self) -> None: ...


class Scheduler(ABC):
    """Runs callbacks after a delay and reports the current time."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        """Run callback after delay seconds."""
        pass

    @abstractmethod
    def now_ms(self) -> int:
        """Current time in epoch milliseconds."""
        pass


class AsyncioScheduler(Scheduler):
    """Scheduler backed by the running event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        return asyncio.get_running_loop().call_later(delay, callback)

    def now_ms(self) -> int:
        return int(time.time() * 1000)


class _ManualCall:
    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Scheduler driven by explicit ``advance`` calls.

    Useful in tests and in hosts that pump their own frame clock.
    """

    def __init__(self, start: float = 0.0) -> None:
        self.time = start
        self._calls: list[_ManualCall] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = _ManualCall(self.time + delay, callback)
        self._calls.append(call)
        return call

    def now_ms(self) -> int:
        return int(self.time * 1000)

    @property
    def pending(self) -> int:
        """Number of callbacks still waiting to fire."""
        return sum(1 for call in self._calls if not call.cancelled)

    def advance(self, seconds: float) -> int:
        """Move time forward, firing due callbacks in order. Returns fired count."""
        deadline = self.time + seconds
        fired = 0
        while True:
            due = [c for c in self._calls if not c.cancelled and c.when <= deadline]
            if not due:
                break
            call = min(due, key=lambda c: c.when)
            self._calls.remove(call)
            self.time = max(self.time, call.when)
            call.callback()
            fired += 1
        self._calls = [c for c in self._calls if not c.cancelled]
        self.time = deadline
        return fired
