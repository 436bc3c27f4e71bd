"""Feedback module for the focus dashboard.

Provides the notification tone played when a session expires.
"""

from typing import Protocol


class SoundCue(Protocol):
    """Interface for the session-expiry notification sound.

    Implementations must never let a playback failure escape; a missing
    or blocked audio device is not an error the countdown cares about.
    """

    def play(self) -> None:
        """Play the notification tone once."""
        ...


from .tone import MockSoundCue, ToneCue, generate_decay_tone  # noqa: E402

__all__ = [
    "MockSoundCue",
    "SoundCue",
    "ToneCue",
    "generate_decay_tone",
]
