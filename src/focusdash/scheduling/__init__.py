"""Scheduling module for the focus dashboard.

Every timer, interval and platform callback in the dashboard runs on one
cooperative execution queue. Components only see the Scheduler protocol;
the dashboard runs on EventLoop while tests drive ManualScheduler.
"""

import logging
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class TimerHandle:
    """A scheduled callback that can be cancelled before it runs.

    Repeating handles (interval set) are rescheduled after each run until
    cancelled.
    """

    __slots__ = ("_args", "_callback", "_cancelled", "interval", "when")

    def __init__(
        self,
        when: float,
        callback: Callable[..., Any],
        args: tuple[Any, ...] = (),
        interval: float | None = None,
    ) -> None:
        self.when = when
        self.interval = interval
        self._callback = callback
        self._args = args
        self._cancelled = False

    def cancel(self) -> None:
        """Cancel the callback. Safe to call more than once."""
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        """Return True if the handle was cancelled."""
        return self._cancelled

    @property
    def repeating(self) -> bool:
        """Return True for interval handles."""
        return self.interval is not None

    def run(self) -> None:
        """Run the callback, logging instead of propagating its errors."""
        if self._cancelled:
            return
        try:
            self._callback(*self._args)
        except Exception:
            logger.exception(f"Scheduled callback {self._callback!r} failed")

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "pending"
        return f"<TimerHandle {self._callback!r} when={self.when:.3f} {state}>"


class Scheduler(Protocol):
    """Interface for the single-threaded execution queue."""

    def now(self) -> float:
        """Return the scheduler's monotonic time in seconds."""
        ...

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        """Run callback once after delay seconds.

        Args:
            delay: Seconds to wait (negative values run as soon as possible)
            callback: Callable to run on the queue
            *args: Positional arguments for the callback

        Returns:
            Handle that cancels the callback
        """
        ...

    def call_every(self, interval: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        """Run callback every interval seconds, first run after one interval."""
        ...

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queue callback to run as soon as possible.

        This is the only method that may be called from other threads.
        """
        ...


def cancel_handle(handle: TimerHandle | None) -> None:
    """Cancel a handle if present."""
    if handle is not None:
        handle.cancel()


from .loop import EventLoop  # noqa: E402
from .manual import ManualScheduler  # noqa: E402

__all__ = [
    "EventLoop",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
    "cancel_handle",
]
