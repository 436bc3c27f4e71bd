"""Session countdown clock.

Implements the run/pause/reset countdown that drives Study and Short Break
intervals. The clock owns its state for the lifetime of the process and
only changes it through start, pause, reset, switch_mode and tick.
"""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from .cycle import CycleScheduler, Transition
from .models import DEFAULT_DURATIONS, SessionMode, SessionState

if TYPE_CHECKING:
    from ..bridge import PlaybackBridge
    from ..config import TimerConfig
    from ..feedback import SoundCue
    from ..scheduling import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionState], None]


class SessionClock:
    """Countdown clock with automatic Study/Break alternation.

    Usage:
        clock = SessionClock(scheduler, bridge, sound_cue)
        unsubscribe = clock.subscribe(render)
        clock.start()

    Expiry stops the clock, raises is_finished, plays the sound cue and
    hands the cycle scheduler the auto-advance. Nothing on that path is
    allowed to raise back into the tick.
    """

    def __init__(
        self,
        scheduler: "Scheduler",
        bridge: "PlaybackBridge | None" = None,
        sound_cue: "SoundCue | None" = None,
        config: "TimerConfig | None" = None,
        cycles: CycleScheduler | None = None,
    ) -> None:
        """Initialize the session clock in Study mode, idle.

        Args:
            scheduler: Execution queue for ticks and delays
            bridge: Playback bridge invoked on start
            sound_cue: Tone played on expiry
            config: Timer configuration (durations and delays)
            cycles: Cycle scheduler; built from config when omitted
        """
        self._scheduler = scheduler
        self._bridge = bridge
        self._sound_cue = sound_cue

        durations = dict(DEFAULT_DURATIONS)
        self._tick_interval = 1.0
        self._finished_display = 2.0
        settle_delay = 1.0
        if config is not None:
            durations[SessionMode.STUDY] = config.study_seconds
            durations[SessionMode.SHORT_BREAK] = config.short_break_seconds
            self._tick_interval = config.tick_interval
            self._finished_display = config.finished_display
            settle_delay = config.settle_delay

        self._cycles = cycles or CycleScheduler(scheduler, durations, settle_delay)

        self._mode = SessionMode.STUDY
        self._seconds_remaining = self._cycles.duration(self._mode)
        self._is_running = False
        self._is_finished = False
        self._completed_cycles = 0

        self._tick_handle: TimerHandle | None = None
        self._finished_handle: TimerHandle | None = None
        self._listeners: list[SessionListener] = []

    # -- state ------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        """Snapshot of the current state."""
        return SessionState(
            mode=self._mode,
            seconds_remaining=self._seconds_remaining,
            is_running=self._is_running,
            is_finished=self._is_finished,
            completed_cycles=self._completed_cycles,
        )

    @property
    def mode(self) -> SessionMode:
        return self._mode

    @property
    def seconds_remaining(self) -> int:
        return self._seconds_remaining

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def is_finished(self) -> bool:
        return self._is_finished

    @property
    def completed_cycles(self) -> int:
        return self._completed_cycles

    @property
    def has_pending_advance(self) -> bool:
        """Return True while an auto-advance waits for its settle delay."""
        return self._cycles.has_pending

    def duration(self, mode: SessionMode) -> int:
        """Seconds in a full interval of mode."""
        return self._cycles.duration(mode)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener called with a snapshot after every change.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Session listener failed")

    # -- operations -------------------------------------------------------

    def start(self) -> None:
        """Start counting down and ask the bridge to start music.

        Does nothing when already running or when no time is left.
        """
        if self._is_running or self._seconds_remaining <= 0:
            return

        self._is_running = True
        self._cancel_tick()
        self._tick_handle = self._scheduler.call_every(self._tick_interval, self.tick)
        logger.debug(f"Clock started: {self._mode.value} {self._seconds_remaining}s left")
        self._notify()

        if self._bridge is not None:
            try:
                self._bridge.invoke()
            except Exception as e:
                logger.debug(f"Playback bridge failed on start: {e}")

    def pause(self) -> None:
        """Stop counting down, keeping the remaining time."""
        self._cancel_tick()
        if not self._is_running:
            return
        self._is_running = False
        logger.debug(f"Clock paused: {self._seconds_remaining}s left")
        self._notify()

    def reset(self) -> None:
        """Stop and refill the current mode's full duration."""
        self._cycles.cancel()
        self._cancel_tick()
        self._cancel_finished()
        self._is_running = False
        self._is_finished = False
        self._seconds_remaining = self._cycles.duration(self._mode)
        logger.debug(f"Clock reset: {self._mode.value}")
        self._notify()

    def switch_mode(self, mode: SessionMode) -> None:
        """Stop and load a full interval of mode.

        Cancels any pending auto-advance so it cannot apply a second
        transition on top of this one.
        """
        self._cycles.cancel()
        self._cancel_tick()
        self._cancel_finished()
        self._is_running = False
        self._is_finished = False
        self._mode = mode
        self._seconds_remaining = self._cycles.duration(mode)
        logger.info(f"Switched to {mode.label} ({self._seconds_remaining}s)")
        self._notify()

    def tick(self) -> None:
        """Count down one second, handling expiry at zero."""
        if not self._is_running or self._seconds_remaining <= 0:
            return

        self._seconds_remaining -= 1
        if self._seconds_remaining == 0:
            self._expire()
        self._notify()

    def close(self) -> None:
        """Cancel every timer the clock owns. State is kept."""
        self._cycles.cancel()
        self._cancel_tick()
        self._cancel_finished()
        self._is_running = False

    # -- internals --------------------------------------------------------

    def _expire(self) -> None:
        self._cancel_tick()
        self._is_running = False
        self._is_finished = True
        logger.info(f"{self._mode.label} session finished")

        if self._sound_cue is not None:
            try:
                self._sound_cue.play()
            except Exception as e:
                logger.debug(f"Sound cue failed: {e}")

        self._cancel_finished()
        self._finished_handle = self._scheduler.call_later(
            self._finished_display, self._clear_finished
        )
        self._cycles.schedule(self._mode, self._completed_cycles, self._apply_transition)

    def _clear_finished(self) -> None:
        self._finished_handle = None
        if self._is_finished:
            self._is_finished = False
            self._notify()

    def _apply_transition(self, transition: Transition) -> None:
        # A restart during the settle delay means the user has moved on.
        if self._is_running or self._seconds_remaining > 0:
            return

        self._mode = transition.next_mode
        self._seconds_remaining = transition.next_duration
        self._completed_cycles = transition.next_cycle_count
        logger.info(
            f"Advanced to {self._mode.label} "
            f"(completed cycles: {self._completed_cycles})"
        )
        self._notify()

    def _cancel_tick(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _cancel_finished(self) -> None:
        if self._finished_handle is not None:
            self._finished_handle.cancel()
            self._finished_handle = None


__all__ = ["SessionClock", "SessionListener"]
