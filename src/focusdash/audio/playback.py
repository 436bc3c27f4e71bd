"""Audio playback protocol.

Defines the interface for audio output that the notification tone is
played through.
"""

from typing import Protocol


class AudioPlayback(Protocol):
    """Interface for audio output playback."""

    def play(self, audio: bytes, sample_rate: int) -> None:
        """Play audio data synchronously.

        Blocks until playback is complete.

        Args:
            audio: Raw PCM audio bytes (16-bit, mono)
            sample_rate: Sample rate in Hz

        Raises:
            RuntimeError: If playback fails
        """
        ...

    def play_async(self, audio: bytes, sample_rate: int) -> None:
        """Play audio data asynchronously.

        Returns immediately while audio plays in background.

        Args:
            audio: Raw PCM audio bytes (16-bit, mono)
            sample_rate: Sample rate in Hz

        Raises:
            RuntimeError: If playback cannot be started
        """
        ...

    def stop(self) -> None:
        """Stop current playback.

        Safe to call even if nothing is playing.
        """
        ...

    @property
    def is_playing(self) -> bool:
        """Return True if audio is currently playing."""
        ...


__all__ = ["AudioPlayback"]
