"""Playback bridge between the session clock and the media session.

The clock asks the bridge to start music when a session starts. The media
session registers itself as the sink while it has something to play. The
clock never holds a reference to the media session itself.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class PlaybackSink(Protocol):
    """Anything that can be asked to start playback."""

    def play(self) -> None:
        """Start playback if possible."""
        ...


class NullSink:
    """Sink used while nothing is registered; does nothing."""

    def play(self) -> None:
        """Do nothing."""
        return None

    def __repr__(self) -> str:
        return "<NullSink>"


NULL_SINK = NullSink()


class PlaybackBridge:
    """A single registerable invocation slot.

    Fire-and-forget: invoke() never retries, never returns a result and
    never raises.
    """

    def __init__(self) -> None:
        self._sink: PlaybackSink = NULL_SINK

    def register(self, sink: PlaybackSink) -> None:
        """Install sink, replacing any previous registration."""
        self._sink = sink
        logger.debug(f"Playback sink registered: {sink!r}")

    def unregister(self, sink: PlaybackSink | None = None) -> None:
        """Clear the slot.

        Args:
            sink: If given, only clear the slot when it still holds this
                sink, so a late unregister cannot remove a newer sink.
        """
        if sink is not None and self._sink is not sink:
            return
        self._sink = NULL_SINK
        logger.debug("Playback sink cleared")

    @property
    def is_registered(self) -> bool:
        """Return True if a real sink is installed."""
        return self._sink is not NULL_SINK

    def invoke(self) -> None:
        """Ask the registered sink to play."""
        try:
            self._sink.play()
        except Exception as e:
            logger.debug(f"Playback sink failed: {e}")


__all__ = ["NULL_SINK", "NullSink", "PlaybackBridge", "PlaybackSink"]
