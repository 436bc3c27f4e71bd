"""Session data model.

Defines the countdown modes and the state snapshot handed to observers.
"""

from dataclasses import dataclass
from enum import Enum


class SessionMode(Enum):
    """Countdown interval kinds."""

    STUDY = "study"
    SHORT_BREAK = "shortBreak"

    @property
    def label(self) -> str:
        """Human-readable mode name."""
        return "Study" if self is SessionMode.STUDY else "Break"

    @classmethod
    def parse(cls, text: str) -> "SessionMode":
        """Parse a mode name as typed by a user.

        Raises:
            ValueError: If the text names no mode.
        """
        key = text.strip().lower().replace("_", "").replace("-", "").replace(" ", "")
        aliases = {
            "study": cls.STUDY,
            "work": cls.STUDY,
            "focus": cls.STUDY,
            "break": cls.SHORT_BREAK,
            "shortbreak": cls.SHORT_BREAK,
            "rest": cls.SHORT_BREAK,
        }
        if key not in aliases:
            raise ValueError(f"Unknown session mode: {text!r}")
        return aliases[key]


DEFAULT_DURATIONS: dict[SessionMode, int] = {
    SessionMode.STUDY: 45 * 60,
    SessionMode.SHORT_BREAK: 10 * 60,
}


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of the session clock.

    Attributes:
        mode: Current interval kind.
        seconds_remaining: Seconds left in the interval, never negative.
        is_running: Whether the clock is counting down.
        is_finished: Transient flag raised when an interval expires.
        completed_cycles: Number of Study intervals completed.
    """

    mode: SessionMode
    seconds_remaining: int
    is_running: bool
    is_finished: bool
    completed_cycles: int

    def format_clock(self) -> str:
        """Format remaining time as MM:SS."""
        return format_clock(self.seconds_remaining)


def format_clock(seconds: int) -> str:
    """Format a number of seconds as MM:SS."""
    mins, secs = divmod(max(0, seconds), 60)
    return f"{mins:02d}:{secs:02d}"


__all__ = ["DEFAULT_DURATIONS", "SessionMode", "SessionState", "format_clock"]
