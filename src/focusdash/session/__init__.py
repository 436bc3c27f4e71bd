"""Session module for the focus dashboard.

Provides the countdown clock and the Study/Break cycle policy.
"""

from focusdash.session.clock import SessionClock, SessionListener
from focusdash.session.cycle import CycleScheduler, Transition
from focusdash.session.models import (
    DEFAULT_DURATIONS,
    SessionMode,
    SessionState,
    format_clock,
)

__all__ = [
    "DEFAULT_DURATIONS",
    "CycleScheduler",
    "SessionClock",
    "SessionListener",
    "SessionMode",
    "SessionState",
    "Transition",
    "format_clock",
]
