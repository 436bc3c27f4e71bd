"""Real-time event loop.

A single thread runs every scheduled callback in due order. Other threads
(stdin reader, platform IPC readers) hand work to it with post().
"""

import heapq
import itertools
import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from . import TimerHandle

logger = logging.getLogger(__name__)


class EventLoop:
    """Cooperative single-threaded scheduler backed by a timer heap.

    Usage:
        loop = EventLoop()
        loop.call_later(1.0, print, "tick")
        loop.run()  # blocks until loop.stop()
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the event loop.

        Args:
            clock: Monotonic time source in seconds
        """
        self._clock = clock
        self._heap: list[tuple[float, int, TimerHandle]] = []
        self._ready: list[TimerHandle] = []
        self._counter = itertools.count()
        self._cond = threading.Condition()
        self._running = False
        self._stopping = False

    def now(self) -> float:
        """Return the loop's monotonic time."""
        return self._clock()

    @property
    def is_running(self) -> bool:
        """Return True while run() is executing."""
        return self._running

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        """Run callback once after delay seconds."""
        handle = TimerHandle(self.now() + max(0.0, delay), callback, args)
        self._push(handle)
        return handle

    def call_every(self, interval: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        """Run callback every interval seconds until cancelled."""
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")
        handle = TimerHandle(self.now() + interval, callback, args, interval=interval)
        self._push(handle)
        return handle

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queue callback to run on the loop thread (thread-safe)."""
        with self._cond:
            self._ready.append(TimerHandle(self.now(), callback, args))
            self._cond.notify()

    def _push(self, handle: TimerHandle) -> None:
        with self._cond:
            heapq.heappush(self._heap, (handle.when, next(self._counter), handle))
            self._cond.notify()

    def run(self) -> None:
        """Run callbacks until stop() is called."""
        if self._running:
            raise RuntimeError("Event loop is already running")

        self._running = True
        self._stopping = False
        logger.debug("Event loop started")
        try:
            while True:
                batch = self._next_batch()
                if batch is None:
                    break
                for handle in batch:
                    handle.run()
                    if handle.repeating and not handle.cancelled:
                        handle.when += handle.interval
                        self._push(handle)
        finally:
            self._running = False
            logger.debug("Event loop stopped")

    def _next_batch(self) -> list[TimerHandle] | None:
        """Wait for due callbacks. Returns None once stop() was requested."""
        with self._cond:
            while True:
                if self._stopping:
                    return None

                if self._ready:
                    batch, self._ready = self._ready, []
                    return batch

                now = self.now()
                while self._heap and self._heap[0][2].cancelled:
                    heapq.heappop(self._heap)

                if self._heap and self._heap[0][0] <= now:
                    return [heapq.heappop(self._heap)[2]]

                timeout = self._heap[0][0] - now if self._heap else None
                self._cond.wait(timeout=timeout)

    def run_for(self, seconds: float) -> None:
        """Run the loop for a fixed amount of wall time."""
        self.call_later(seconds, self.stop)
        self.run()

    def stop(self) -> None:
        """Ask the loop to exit after the current callback (thread-safe)."""
        with self._cond:
            self._stopping = True
            self._cond.notify()

    def close(self) -> None:
        """Drop every pending callback."""
        with self._cond:
            for _, _, handle in self._heap:
                handle.cancel()
            self._heap.clear()
            self._ready.clear()

    @property
    def pending(self) -> int:
        """Number of live scheduled callbacks."""
        with self._cond:
            live = sum(1 for _, _, h in self._heap if not h.cancelled)
            return live + len(self._ready)


__all__ = ["EventLoop"]
