"""
Delayed, cancellable callbacks.

A ScheduledTask checks its own cancelled flag at execution time, so a task
cancelled after its timer fired (but before it ran) still does nothing.
"""

from __future__ import annotations

import heapq
import itertools
import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Tuple


class ScheduledTask:
    """Handle for one deferred callback."""

    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._lock = threading.Lock()
        self._cancelled = False
        self._fired = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True

    def run(self) -> None:
        """Invoke the callback once, unless cancelled."""
        with self._lock:
            if self._cancelled or self._fired:
                return
            self._fired = True
        self._callback()


class Scheduler(ABC):
    @abstractmethod
    def after(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        """Run `callback` once after `delay` seconds unless the task is cancelled."""
        raise NotImplementedError

    @staticmethod
    def _check_delay(delay: float) -> None:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")


class ThreadingScheduler(Scheduler):
    """Real-time scheduler backed by daemon threading.Timer threads."""

    def __init__(self) -> None:
        self._timers: List[threading.Timer] = []
        self._lock = threading.Lock()

    def after(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        self._check_delay(delay)
        task = ScheduledTask(callback)
        timer = threading.Timer(delay, task.run)
        timer.daemon = True
        with self._lock:
            self._timers = [t for t in self._timers if t.is_alive()]
            self._timers.append(timer)
        timer.start()
        return task

    def shutdown(self) -> None:
        """Stop timers that have not fired yet."""
        with self._lock:
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()


class ManualScheduler(Scheduler):
    """
    Virtual-clock scheduler. Nothing runs until advance() / run_all() is called,
    and callbacks run on the caller's thread.
    """

    def __init__(self) -> None:
        self.now: float = 0.0
        self._queue: List[Tuple[float, int, ScheduledTask]] = []
        self._seq = itertools.count()

    def after(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        self._check_delay(delay)
        task = ScheduledTask(callback)
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), task))
        return task

    @property
    def pending(self) -> int:
        """Number of queued tasks that are not cancelled."""
        return sum(1 for _, _, task in self._queue if not task.cancelled)

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running due tasks in deadline order.

        Returns:
            Number of tasks whose callback actually ran.
        """
        deadline = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= deadline:
            due, _, task = heapq.heappop(self._queue)
            self.now = due
            if task.cancelled:
                continue
            task.run()
            ran += 1
        self.now = deadline
        return ran

    def run_all(self, limit: int = 100) -> int:
        """Run queued tasks (including ones they schedule) until none remain."""
        ran = 0
        while self._queue and ran < limit:
            due = self._queue[0][0]
            ran += self.advance(max(0.0, due - self.now))
        return ran

