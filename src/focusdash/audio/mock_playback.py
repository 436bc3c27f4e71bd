"""Mock audio playback for testing."""


class MockAudioPlayback:
    """Mock audio playback for testing.

    Records all audio that would be played for later verification.
    Implements the AudioPlayback protocol.
    """

    def __init__(self, fail_with: Exception | None = None) -> None:
        """Initialize mock playback.

        Args:
            fail_with: Exception to raise from every play call
        """
        self._fail_with = fail_with
        self._is_playing = False
        self._played_audio: list[tuple[bytes, int]] = []

    def play(self, audio: bytes, sample_rate: int) -> None:
        """Record audio that would be played (synchronous)."""
        if self._fail_with is not None:
            raise self._fail_with
        self._played_audio.append((audio, sample_rate))

    def play_async(self, audio: bytes, sample_rate: int) -> None:
        """Record audio that would be played (async)."""
        self.play(audio, sample_rate)
        self._is_playing = True

    def stop(self) -> None:
        """Stop mock playback."""
        self._is_playing = False

    @property
    def is_playing(self) -> bool:
        """Return True if 'playing'."""
        return self._is_playing

    @property
    def play_count(self) -> int:
        """Get number of times play was called."""
        return len(self._played_audio)

    @property
    def played_audio(self) -> bytes | None:
        """Get the last played audio bytes."""
        if not self._played_audio:
            return None
        return self._played_audio[-1][0]

    @property
    def played_sample_rate(self) -> int | None:
        """Get the sample rate of the last played audio."""
        if not self._played_audio:
            return None
        return self._played_audio[-1][1]

    def clear(self) -> None:
        """Clear recorded audio."""
        self._played_audio.clear()


__all__ = ["MockAudioPlayback"]
