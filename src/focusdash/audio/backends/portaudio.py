"""PortAudio output backend using PyAudio.

Provides an AudioPlayback implementation that opens a fresh PortAudio
stream for every clip.
"""

import logging
import threading
from typing import Any

# PyAudio import with fallback for type hints
try:
    import pyaudio

    PYAUDIO_AVAILABLE = True
except ImportError:
    PYAUDIO_AVAILABLE = False
    pyaudio = None

logger = logging.getLogger(__name__)


class PortAudioPlayback:
    """Audio playback using PyAudio.

    Implements the AudioPlayback protocol.
    """

    def __init__(self, device_name: str = "default") -> None:
        """Initialize PortAudio playback.

        Args:
            device_name: Audio output device name or "default"

        Raises:
            RuntimeError: If PyAudio is not available
        """
        if not PYAUDIO_AVAILABLE:
            raise RuntimeError("PyAudio not available. Install with: pip install pyaudio")

        self._device_name = device_name
        self._is_playing = False
        self._stop_flag = threading.Event()
        self._play_thread: threading.Thread | None = None

    def _get_device_index(self, pa: Any) -> int | None:
        """Get device index for configured device name."""
        if self._device_name == "default":
            return None

        for i in range(pa.get_device_count()):
            info = pa.get_device_info_by_index(i)
            if self._device_name.lower() in info["name"].lower() and info["maxOutputChannels"] > 0:
                return i

        return None

    def play(self, audio: bytes, sample_rate: int) -> None:
        """Play audio synchronously."""
        self._is_playing = True
        self._stop_flag.clear()

        pa = pyaudio.PyAudio()
        try:
            stream = pa.open(
                format=pyaudio.paInt16,
                channels=1,
                rate=sample_rate,
                output=True,
                output_device_index=self._get_device_index(pa),
            )

            try:
                chunk_size = 1024
                for i in range(0, len(audio), chunk_size * 2):
                    if self._stop_flag.is_set():
                        break
                    stream.write(audio[i : i + chunk_size * 2])
            finally:
                stream.stop_stream()
                stream.close()
        finally:
            pa.terminate()
            self._is_playing = False

    def play_async(self, audio: bytes, sample_rate: int) -> None:
        """Play audio asynchronously in background thread."""
        self._stop_flag.clear()
        self._play_thread = threading.Thread(
            target=self._play_background,
            args=(audio, sample_rate),
            daemon=True,
            name="sound-cue",
        )
        self._play_thread.start()

    def _play_background(self, audio: bytes, sample_rate: int) -> None:
        try:
            self.play(audio, sample_rate)
        except Exception as e:
            logger.debug(f"Background playback failed: {e}")
            self._is_playing = False

    def stop(self) -> None:
        """Stop current playback."""
        self._stop_flag.set()
        if self._play_thread is not None:
            self._play_thread.join(timeout=1.0)
            self._play_thread = None
        self._is_playing = False

    @property
    def is_playing(self) -> bool:
        """Return True if audio is playing."""
        return self._is_playing


__all__ = ["PYAUDIO_AVAILABLE", "PortAudioPlayback"]
