"""Manual scheduler for testing.

Provides a virtual clock that only moves when the test advances it, so
timer-driven behaviour can be asserted deterministically.
"""

import heapq
import itertools
from collections.abc import Callable
from typing import Any

from . import TimerHandle


class ManualScheduler:
    """Virtual-time scheduler for tests.

    Implements the Scheduler protocol. Nothing runs until advance() or
    run_pending() is called.
    """

    def __init__(self, start: float = 0.0) -> None:
        """Initialize the manual scheduler.

        Args:
            start: Initial virtual time in seconds
        """
        self._now = start
        self._heap: list[tuple[float, int, TimerHandle]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        """Return the current virtual time."""
        return self._now

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        """Schedule callback delay virtual seconds from now."""
        handle = TimerHandle(self._now + max(0.0, delay), callback, args)
        self._push(handle)
        return handle

    def call_every(self, interval: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        """Schedule callback every interval virtual seconds."""
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")
        handle = TimerHandle(self._now + interval, callback, args, interval=interval)
        self._push(handle)
        return handle

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queue callback at the current virtual time."""
        self._push(TimerHandle(self._now, callback, args))

    def _push(self, handle: TimerHandle) -> None:
        heapq.heappush(self._heap, (handle.when, next(self._counter), handle))

    def advance(self, seconds: float) -> int:
        """Move virtual time forward, running every callback that falls due.

        Callbacks scheduled while advancing run too if they fall inside the
        window.

        Args:
            seconds: Virtual seconds to advance

        Returns:
            Number of callbacks that ran
        """
        # Tolerance keeps 10 x 0.1s from missing a deadline at 1.0s
        target = self._now + seconds + 1e-9
        ran = 0
        while self._heap:
            when, _, handle = self._heap[0]
            if when > target:
                break
            heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            self._now = max(self._now, when)
            handle.run()
            ran += 1
            if handle.repeating and not handle.cancelled:
                handle.when += handle.interval
                self._push(handle)
        self._now = max(self._now, target - 1e-9)
        return ran

    def run_pending(self) -> int:
        """Run callbacks that are due at the current virtual time."""
        return self.advance(0.0)

    @property
    def pending(self) -> int:
        """Number of live scheduled callbacks."""
        return sum(1 for _, _, handle in self._heap if not handle.cancelled)

    def pending_handles(self) -> list[TimerHandle]:
        """Live handles in due order."""
        return [h for _, _, h in sorted(self._heap) if not h.cancelled]


__all__ = ["ManualScheduler"]
