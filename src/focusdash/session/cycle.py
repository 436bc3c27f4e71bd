"""Cycle scheduling.

Decides what follows an expired interval and arms the settle timer that
applies the transition.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .models import DEFAULT_DURATIONS, SessionMode

if TYPE_CHECKING:
    from ..scheduling import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_SETTLE_DELAY = 1.0


@dataclass(frozen=True)
class Transition:
    """The interval that follows an expired one."""

    next_mode: SessionMode
    next_duration: int
    next_cycle_count: int


class CycleScheduler:
    """Alternates Study and Short Break intervals.

    A completed Study interval counts as one cycle; a completed break does
    not. The transition is applied settle_delay seconds after expiry so the
    finished indicator can show, and is dropped if cancel() runs first.
    """

    def __init__(
        self,
        scheduler: "Scheduler",
        durations: dict[SessionMode, int] | None = None,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
    ) -> None:
        """Initialize the cycle scheduler.

        Args:
            scheduler: Execution queue for the settle timer
            durations: Seconds per mode (defaults to 45/10 minutes)
            settle_delay: Seconds between expiry and transition
        """
        self._scheduler = scheduler
        self._durations = dict(durations or DEFAULT_DURATIONS)
        self._settle_delay = settle_delay
        self._pending: TimerHandle | None = None

    def on_expiry(self, mode: SessionMode, completed_cycles: int) -> Transition:
        """Compute the interval that follows mode.

        Args:
            mode: The mode that just expired
            completed_cycles: Cycle count before the transition

        Returns:
            Next mode, its duration and the new cycle count
        """
        if mode is SessionMode.STUDY:
            next_mode = SessionMode.SHORT_BREAK
            cycles = completed_cycles + 1
        else:
            next_mode = SessionMode.STUDY
            cycles = completed_cycles
        return Transition(next_mode, self._durations[next_mode], cycles)

    def schedule(
        self,
        mode: SessionMode,
        completed_cycles: int,
        apply: Callable[[Transition], None],
    ) -> None:
        """Arm the auto-advance for an expired interval.

        Any auto-advance still pending is replaced.

        Args:
            mode: The mode that just expired
            completed_cycles: Cycle count at expiry
            apply: Called with the transition once the settle delay passes
        """
        self.cancel()
        transition = self.on_expiry(mode, completed_cycles)
        self._pending = self._scheduler.call_later(
            self._settle_delay, self._fire, transition, apply
        )
        logger.debug(f"Auto-advance to {transition.next_mode.value} in {self._settle_delay}s")

    def _fire(self, transition: Transition, apply: Callable[[Transition], None]) -> None:
        self._pending = None
        apply(transition)

    def cancel(self) -> None:
        """Drop the pending auto-advance, if any."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
            logger.debug("Pending auto-advance cancelled")

    @property
    def has_pending(self) -> bool:
        """Return True while an auto-advance is armed."""
        return self._pending is not None

    def duration(self, mode: SessionMode) -> int:
        """Seconds configured for mode."""
        return self._durations[mode]


__all__ = ["CycleScheduler", "DEFAULT_SETTLE_DELAY", "Transition"]
