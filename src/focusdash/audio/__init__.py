"""Audio output for the focus dashboard.

Usage:
    playback = create_audio_playback(config.sound)

    # For testing, use the mock implementation
    from focusdash.audio.mock_playback import MockAudioPlayback
"""

from typing import TYPE_CHECKING

from .playback import AudioPlayback

if TYPE_CHECKING:
    from ..config import SoundConfig


def create_audio_playback(
    config: "SoundConfig | None" = None,
    use_mock: bool = False,
) -> AudioPlayback:
    """Create an audio playback instance.

    Args:
        config: Sound configuration (uses defaults if None)
        use_mock: If True, return mock implementation for testing

    Returns:
        AudioPlayback implementation

    Raises:
        RuntimeError: If no audio backend is available
    """
    if use_mock:
        from .mock_playback import MockAudioPlayback

        return MockAudioPlayback()

    device_name = config.output_device if config is not None else "default"

    from .backends.portaudio import PortAudioPlayback

    return PortAudioPlayback(device_name=device_name)


__all__ = [
    "AudioPlayback",
    "create_audio_playback",
]
