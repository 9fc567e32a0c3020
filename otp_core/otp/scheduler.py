"""
Eviction Schedulers
===================
One-shot deferred callbacks used by the challenge store for eager expiry.
"""

import asyncio
import heapq
import itertools
import threading
import time
from typing import Callable, List, Optional, Protocol, Tuple
import structlog

logger = structlog.get_logger(__name__)


class EvictionHandle(Protocol):
    def cancel(self) -> None: ...


class EvictionScheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> EvictionHandle: ...


class ScheduledEviction:
    """A pending callback in a TimerQueueScheduler."""

    __slots__ = ("deadline", "callback", "cancelled")

    def __init__(self, deadline: float, callback: Callable[[], None]):
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class TimerQueueScheduler:
    """
    Runs every callback from one daemon worker thread.

    Deadlines sit in a heap; the worker sleeps until the earliest one is due.
    Cancelled entries are discarded when they reach the head of the heap.
    Works without an event loop, so it is the default.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._heap: List[Tuple[float, int, ScheduledEviction]] = []
        self._sequence = itertools.count()
        self._condition = threading.Condition()
        self._worker: Optional[threading.Thread] = None

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledEviction:
        entry = ScheduledEviction(self._clock() + max(delay, 0.0), callback)
        with self._condition:
            heapq.heappush(self._heap, (entry.deadline, next(self._sequence), entry))
            if self._worker is None or not self._worker.is_alive():
                self._worker = threading.Thread(
                    target=self._run, name="otp-eviction", daemon=True
                )
                self._worker.start()
            self._condition.notify()
        return entry

    def pending(self) -> int:
        """Number of scheduled callbacks not yet run or cancelled."""
        with self._condition:
            return sum(1 for _, _, entry in self._heap if not entry.cancelled)

    def _next_due(self) -> ScheduledEviction:
        with self._condition:
            while True:
                while self._heap and self._heap[0][2].cancelled:
                    heapq.heappop(self._heap)
                if not self._heap:
                    self._condition.wait()
                    continue
                wait = self._heap[0][0] - self._clock()
                if wait <= 0:
                    return heapq.heappop(self._heap)[2]
                self._condition.wait(wait)

    def _run(self) -> None:
        while True:
            entry = self._next_due()
            if entry.cancelled:
                continue
            try:
                entry.callback()
            except Exception:
                logger.exception("Eviction callback failed")


class AsyncioScheduler:
    """
    Runs each callback with ``loop.call_later``.

    Must be used from the thread running the loop.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def schedule(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(delay, 0.0), callback)
