"""Notification tone synthesis.

The tone is a sine wave with an exponentially decaying gain envelope,
rendered to 16-bit mono PCM and handed to a freshly created audio output.
"""

import logging
import math
import struct
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..errors import SoundError

if TYPE_CHECKING:
    from ..audio.playback import AudioPlayback
    from ..config import SoundConfig

logger = logging.getLogger(__name__)


def generate_decay_tone(
    frequency: int,
    duration_ms: int,
    start_gain: float = 0.3,
    end_gain: float = 0.01,
    sample_rate: int = 22050,
) -> bytes:
    """Generate a sine tone whose gain ramps exponentially.

    Args:
        frequency: Tone frequency in Hz
        duration_ms: Duration in milliseconds
        start_gain: Gain at the first sample (0-1]
        end_gain: Gain at the last sample (0-1]
        sample_rate: Sample rate in Hz

    Returns:
        Raw PCM audio bytes (16-bit mono)

    Raises:
        ValueError: If a gain is not positive (exponential ramps cannot reach 0)
    """
    if start_gain <= 0 or end_gain <= 0:
        raise ValueError("Exponential gain ramp requires positive gains")

    num_samples = int(sample_rate * duration_ms / 1000)
    if num_samples == 0:
        return b""

    ratio = end_gain / start_gain
    last = max(1, num_samples - 1)
    audio_data = []

    for i in range(num_samples):
        t = i / sample_rate
        gain = start_gain * ratio ** (i / last)
        sample = int(32767 * gain * math.sin(2 * math.pi * frequency * t))
        audio_data.append(struct.pack("<h", sample))

    return b"".join(audio_data)


class ToneCue:
    """Plays the expiry tone through a new audio output on every call.

    The output is created per call and dropped afterwards, so a device that
    appears or disappears between sessions is picked up without restarts.
    """

    def __init__(
        self,
        playback_factory: "Callable[[], AudioPlayback]",
        config: "SoundConfig | None" = None,
    ) -> None:
        """Initialize the tone cue.

        Args:
            playback_factory: Creates the audio output used for one tone
            config: Sound configuration
        """
        self._playback_factory = playback_factory
        self._enabled = True
        self._frequency = 800
        self._duration_ms = 500
        self._start_gain = 0.3
        self._end_gain = 0.01
        self._sample_rate = 22050

        if config is not None:
            self._enabled = config.enabled
            self._frequency = config.frequency
            self._duration_ms = config.duration_ms
            self._start_gain = config.start_gain
            self._end_gain = config.end_gain
            self._sample_rate = config.sample_rate

    def render(self) -> bytes:
        """Render the configured tone to PCM."""
        return generate_decay_tone(
            self._frequency,
            self._duration_ms,
            start_gain=self._start_gain,
            end_gain=self._end_gain,
            sample_rate=self._sample_rate,
        )

    def play(self) -> None:
        """Play the tone, ignoring any failure."""
        if not self._enabled:
            return

        try:
            self._play()
        except SoundError as e:
            logger.debug(f"Notification tone skipped: {e}")

    def _play(self) -> None:
        try:
            playback = self._playback_factory()
            playback.play_async(self.render(), self._sample_rate)
        except Exception as e:
            raise SoundError(str(e)) from e

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable the tone."""
        self._enabled = enabled

    @property
    def is_enabled(self) -> bool:
        """Return True if the tone is enabled."""
        return self._enabled


class MockSoundCue:
    """Mock sound cue for testing.

    Counts plays and can be told to raise, to check the countdown survives.
    """

    def __init__(self, fail_with: Exception | None = None) -> None:
        self._fail_with = fail_with
        self.play_count = 0

    def play(self) -> None:
        """Record a play, then raise if configured to fail."""
        self.play_count += 1
        if self._fail_with is not None:
            raise self._fail_with


__all__ = ["MockSoundCue", "ToneCue", "generate_decay_tone"]
