"""Unit tests for the session clock."""

from unittest.mock import MagicMock

import pytest

from focusdash.bridge import PlaybackBridge
from focusdash.config import TimerConfig
from focusdash.feedback import MockSoundCue
from focusdash.scheduling import ManualScheduler
from focusdash.session import SessionClock, SessionMode, SessionState


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Create a manual scheduler."""
    return ManualScheduler()


@pytest.fixture
def cue() -> MockSoundCue:
    """Create a recording sound cue."""
    return MockSoundCue()


@pytest.fixture
def clock(scheduler: ManualScheduler, cue: MockSoundCue) -> SessionClock:
    """Create a clock with default durations."""
    return SessionClock(scheduler, PlaybackBridge(), cue)


class TestSessionState:
    """Tests for SessionState and SessionMode."""

    def test_format_clock(self) -> None:
        """Test MM:SS rendering."""
        state = SessionState(SessionMode.STUDY, 2700, False, False, 0)
        assert state.format_clock() == "45:00"

        state = SessionState(SessionMode.SHORT_BREAK, 65, False, False, 0)
        assert state.format_clock() == "01:05"

    def test_mode_values(self) -> None:
        """Test mode identifiers."""
        assert SessionMode.STUDY.value == "study"
        assert SessionMode.SHORT_BREAK.value == "shortBreak"

    @pytest.mark.parametrize(
        ("text", "mode"),
        [
            ("study", SessionMode.STUDY),
            ("Break", SessionMode.SHORT_BREAK),
            ("short_break", SessionMode.SHORT_BREAK),
            ("shortBreak", SessionMode.SHORT_BREAK),
        ],
    )
    def test_parse_mode(self, text: str, mode: SessionMode) -> None:
        """Test user-typed mode names."""
        assert SessionMode.parse(text) is mode

    def test_parse_unknown_mode(self) -> None:
        """Test unknown mode names are rejected."""
        with pytest.raises(ValueError):
            SessionMode.parse("nap")


class TestInitialState:
    """Tests for the clock's starting state."""

    def test_starts_idle_in_study(self, clock: SessionClock) -> None:
        """Test a new clock is a full, idle Study interval."""
        state = clock.state
        assert state.mode is SessionMode.STUDY
        assert state.seconds_remaining == 2700
        assert state.is_running is False
        assert state.is_finished is False
        assert state.completed_cycles == 0

    def test_durations_from_config(self, scheduler: ManualScheduler) -> None:
        """Test configured durations replace the defaults."""
        clock = SessionClock(scheduler, config=TimerConfig(study_seconds=60, short_break_seconds=30))
        assert clock.seconds_remaining == 60
        assert clock.duration(SessionMode.SHORT_BREAK) == 30


class TestStartPause:
    """Tests for start() and pause()."""

    def test_start_runs_and_ticks(self, clock: SessionClock, scheduler: ManualScheduler) -> None:
        """Test start counts down once per second."""
        clock.start()
        assert clock.is_running is True

        scheduler.advance(3.0)
        assert clock.seconds_remaining == 2697

    def test_start_invokes_bridge(self, scheduler: ManualScheduler) -> None:
        """Test start asks the bridge to play."""
        bridge = PlaybackBridge()
        sink = MagicMock()
        bridge.register(sink)
        clock = SessionClock(scheduler, bridge)

        clock.start()

        sink.play.assert_called_once()

    def test_start_with_empty_bridge(self, scheduler: ManualScheduler) -> None:
        """Test start with nothing registered still runs."""
        clock = SessionClock(scheduler, PlaybackBridge())
        clock.start()
        assert clock.is_running is True

    def test_bridge_failure_does_not_block_start(self, scheduler: ManualScheduler) -> None:
        """Test a raising bridge is ignored."""
        bridge = MagicMock()
        bridge.invoke.side_effect = RuntimeError("no player")
        clock = SessionClock(scheduler, bridge)

        clock.start()

        assert clock.is_running is True

    def test_start_twice_is_noop(self, clock: SessionClock, scheduler: ManualScheduler) -> None:
        """Test a second start does not double the tick rate."""
        clock.start()
        clock.start()
        scheduler.advance(2.0)
        assert clock.seconds_remaining == 2698

    def test_start_requires_remaining_time(self, scheduler: ManualScheduler) -> None:
        """Test start is refused at zero."""
        clock = SessionClock(scheduler, config=TimerConfig(study_seconds=1))
        clock.start()
        scheduler.advance(1.0)
        assert clock.seconds_remaining == 0

        clock.start()
        assert clock.is_running is False

    def test_pause_stops_ticking(self, clock: SessionClock, scheduler: ManualScheduler) -> None:
        """Test pause keeps the remaining time."""
        clock.start()
        scheduler.advance(5.0)
        clock.pause()
        scheduler.advance(5.0)

        assert clock.is_running is False
        assert clock.seconds_remaining == 2695
        assert scheduler.pending == 0


class TestResetAndSwitch:
    """Tests for reset() and switch_mode()."""

    def test_reset_refills_current_mode(self, clock: SessionClock, scheduler: ManualScheduler) -> None:
        """Test reset restores the full duration."""
        clock.start()
        scheduler.advance(10.0)
        clock.reset()

        assert clock.is_running is False
        assert clock.is_finished is False
        assert clock.seconds_remaining == 2700

    @pytest.mark.parametrize("mode", list(SessionMode))
    def test_switch_mode_sets_full_duration(
        self, clock: SessionClock, scheduler: ManualScheduler, mode: SessionMode
    ) -> None:
        """Test switch_mode loads the mode's duration and stops."""
        clock.start()
        scheduler.advance(3.0)

        clock.switch_mode(mode)

        assert clock.mode is mode
        assert clock.seconds_remaining == clock.duration(mode)
        assert clock.is_running is False

    def test_switch_mode_keeps_cycles(self, clock: SessionClock) -> None:
        """Test manual switching does not count cycles."""
        clock.switch_mode(SessionMode.SHORT_BREAK)
        clock.switch_mode(SessionMode.STUDY)
        assert clock.completed_cycles == 0


class TestTick:
    """Tests for tick() and expiry."""

    def test_ticks_reach_exactly_zero(self, scheduler: ManualScheduler) -> None:
        """Test N ticks from N end at zero and never below."""
        clock = SessionClock(scheduler, config=TimerConfig(study_seconds=5))
        clock.start()
        for _ in range(5):
            clock.tick()
        assert clock.seconds_remaining == 0

        clock.tick()
        assert clock.seconds_remaining == 0

    def test_tick_while_paused_is_ignored(self, clock: SessionClock) -> None:
        """Test ticks only count while running."""
        clock.tick()
        assert clock.seconds_remaining == 2700

    def test_expiry_stops_and_flags_finished(self, scheduler: ManualScheduler, cue: MockSoundCue) -> None:
        """Test expiry stops, flags finished and plays the cue."""
        clock = SessionClock(scheduler, sound_cue=cue, config=TimerConfig(study_seconds=3))
        clock.start()
        scheduler.advance(3.0)

        assert clock.is_running is False
        assert clock.is_finished is True
        assert cue.play_count == 1

    def test_finished_clears_after_display_delay(self, scheduler: ManualScheduler) -> None:
        """Test the finished flag is cosmetic and clears after 2s."""
        clock = SessionClock(scheduler, config=TimerConfig(study_seconds=3))
        clock.start()
        scheduler.advance(3.0)

        scheduler.advance(1.9)
        assert clock.is_finished is True

        scheduler.advance(0.1)
        assert clock.is_finished is False

    def test_sound_failure_does_not_halt_countdown(self, scheduler: ManualScheduler) -> None:
        """Test a raising cue leaves the expiry path intact."""
        cue = MockSoundCue(fail_with=RuntimeError("autoplay blocked"))
        clock = SessionClock(scheduler, sound_cue=cue, config=TimerConfig(study_seconds=2))
        clock.start()
        scheduler.advance(2.0)

        assert clock.is_finished is True
        assert clock.is_running is False

        scheduler.advance(1.0)
        assert clock.mode is SessionMode.SHORT_BREAK
        assert clock.completed_cycles == 1


class TestAutoAdvance:
    """Tests for the automatic Study/Break alternation."""

    def test_full_study_interval(self, clock: SessionClock, scheduler: ManualScheduler) -> None:
        """Test a full 2700s Study interval advances to a 600s break."""
        clock.start()
        scheduler.advance(2700.0)

        assert clock.is_running is False
        assert clock.is_finished is True
        assert clock.mode is SessionMode.STUDY

        scheduler.advance(1.0)

        assert clock.mode is SessionMode.SHORT_BREAK
        assert clock.seconds_remaining == 600
        assert clock.completed_cycles == 1

    def test_break_returns_to_study_without_counting(self, scheduler: ManualScheduler) -> None:
        """Test Break -> Study keeps the cycle count."""
        clock = SessionClock(scheduler, config=TimerConfig(study_seconds=2, short_break_seconds=2))
        clock.start()
        scheduler.advance(3.0)
        assert clock.completed_cycles == 1

        clock.start()
        scheduler.advance(3.0)

        assert clock.mode is SessionMode.STUDY
        assert clock.seconds_remaining == 2
        assert clock.completed_cycles == 1

    def test_switch_mode_cancels_pending_advance(self, scheduler: ManualScheduler) -> None:
        """Test a manual switch during the settle delay wins."""
        clock = SessionClock(scheduler, config=TimerConfig(study_seconds=2))
        clock.start()
        scheduler.advance(2.0)
        assert clock.has_pending_advance is True

        clock.switch_mode(SessionMode.STUDY)
        scheduler.advance(5.0)

        assert clock.mode is SessionMode.STUDY
        assert clock.seconds_remaining == 2
        assert clock.completed_cycles == 0

    def test_reset_cancels_pending_advance(self, scheduler: ManualScheduler) -> None:
        """Test reset during the settle delay prevents the transition."""
        clock = SessionClock(scheduler, config=TimerConfig(study_seconds=2))
        clock.start()
        scheduler.advance(2.0)

        clock.reset()
        scheduler.advance(5.0)

        assert clock.mode is SessionMode.STUDY
        assert clock.completed_cycles == 0
        assert clock.has_pending_advance is False


class TestListeners:
    """Tests for state subscriptions."""

    def test_listener_receives_snapshots(self, clock: SessionClock, scheduler: ManualScheduler) -> None:
        """Test listeners see every change."""
        states: list[SessionState] = []
        clock.subscribe(states.append)

        clock.start()
        scheduler.advance(2.0)

        assert [s.seconds_remaining for s in states] == [2700, 2699, 2698]
        assert states[0].is_running is True

    def test_unsubscribe(self, clock: SessionClock) -> None:
        """Test unsubscribed listeners are not called."""
        states: list[SessionState] = []
        unsubscribe = clock.subscribe(states.append)
        unsubscribe()

        clock.reset()
        assert states == []

    def test_failing_listener_does_not_break_tick(
        self, clock: SessionClock, scheduler: ManualScheduler
    ) -> None:
        """Test listener errors are contained."""
        clock.subscribe(MagicMock(side_effect=RuntimeError("render failed")))
        clock.start()
        scheduler.advance(2.0)
        assert clock.seconds_remaining == 2698

    def test_close_cancels_timers(self, clock: SessionClock, scheduler: ManualScheduler) -> None:
        """Test close leaves nothing scheduled."""
        clock.start()
        clock.close()
        assert scheduler.pending == 0
