"""Timer scheduling: schedule(delay_ms, action) returning a cancellable handle."""

import asyncio
import heapq
import itertools
from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs an action once after a delay in milliseconds."""

    def schedule(self, delay_ms: int, action: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Scheduler on an asyncio event loop via ``loop.call_later``."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule(self, delay_ms: int, action: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay_ms / 1000, action)


class _VirtualHandle:
    __slots__ = ("due_ms", "seq", "action", "cancelled")

    def __init__(self, due_ms: int, seq: int, action: Callable[[], None]) -> None:
        self.due_ms = due_ms
        self.seq = seq
        self.action = action
        self.cancelled = False

    def __lt__(self, other: "_VirtualHandle") -> bool:
        return (self.due_ms, self.seq) < (other.due_ms, other.seq)

    def cancel(self) -> None:
        self.cancelled = True


class VirtualScheduler:
    """Deterministic scheduler driven by a manual clock.

    Nothing fires until advance() moves the clock past a timer's due time.
    Timers due at the same instant fire in the order they were scheduled.
    """

    def __init__(self) -> None:
        self.now_ms = 0
        self.scheduled_count = 0
        self._queue: list[_VirtualHandle] = []
        self._seq = itertools.count()

    def schedule(self, delay_ms: int, action: Callable[[], None]) -> _VirtualHandle:
        handle = _VirtualHandle(self.now_ms + max(delay_ms, 0), next(self._seq), action)
        heapq.heappush(self._queue, handle)
        self.scheduled_count += 1
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for h in self._queue if not h.cancelled)

    def advance(self, ms: int) -> None:
        """Move the clock forward, firing every timer that comes due."""
        target = self.now_ms + ms
        while self._queue and self._queue[0].due_ms <= target:
            handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now_ms = handle.due_ms
            handle.action()
        self.now_ms = target

    def run_until_idle(self, limit_ms: int = 600_000) -> None:
        """Fire timers until none are pending or the clock passes limit_ms."""
        while self.pending and self.now_ms < limit_ms:
            next_due = min(h.due_ms for h in self._queue if not h.cancelled)
            self.advance(next_due - self.now_ms)
