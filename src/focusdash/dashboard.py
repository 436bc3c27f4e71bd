"""Dashboard composition root.

Wires the session clock, playlist and media session together. The clock
reaches the media session only through the playback bridge.
"""

import logging
from typing import TYPE_CHECKING, Any

from .audio import create_audio_playback
from .bridge import PlaybackBridge
from .feedback import MockSoundCue, SoundCue, ToneCue
from .media import MediaSession, Playlist, PlaylistItem, create_media_platform
from .session import SessionClock

if TYPE_CHECKING:
    from .config import FocusConfig
    from .media import MediaPlatform
    from .scheduling import Scheduler

logger = logging.getLogger(__name__)


class Dashboard:
    """The focus dashboard's components and their wiring.

    Attributes:
        bridge: Invocation slot between clock and media session.
        clock: Study/Break countdown.
        playlist: Items the media session plays from.
        media: Owner of the hosted player instance.
    """

    def __init__(
        self,
        config: "FocusConfig",
        scheduler: "Scheduler",
        platform: "MediaPlatform",
        sound_cue: SoundCue | None = None,
    ) -> None:
        self.config = config
        self.scheduler = scheduler
        self.bridge = PlaybackBridge()
        self.clock = SessionClock(scheduler, self.bridge, sound_cue, config.timer)
        self.playlist = Playlist()
        self.media = MediaSession(platform, scheduler, config.media)
        self._unsubscribe = self.playlist.subscribe(self._on_selection)
        self._mounted = False

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    def mount(self, mount_target: Any = None) -> None:
        """Attach the media session and start the platform bootstrap."""
        if self._mounted:
            return
        self.media.mount(self.bridge, mount_target)
        self._mounted = True
        current = self.playlist.current
        if current is not None:
            self.media.select_item(current)

    def unmount(self) -> None:
        """Detach the media session and destroy its player."""
        if not self._mounted:
            return
        self.media.unmount()
        self._mounted = False

    def _on_selection(self, item: PlaylistItem | None) -> None:
        if not self._mounted:
            return
        if item is None:
            self.media.clear_selection()
        else:
            self.media.select_item(item)

    def shutdown(self) -> None:
        """Cancel every timer and release the player."""
        logger.debug("Shutting down dashboard")
        self.clock.close()
        self.media.close()
        self._unsubscribe()
        self._mounted = False


def build_dashboard(
    config: "FocusConfig",
    scheduler: "Scheduler",
    use_mock_platform: bool = False,
    use_mock_audio: bool = False,
) -> Dashboard:
    """Create a dashboard with platform-appropriate collaborators.

    Args:
        config: Loaded configuration
        scheduler: Execution queue for every component
        use_mock_platform: Use the in-memory media platform
        use_mock_audio: Record the expiry tone instead of playing it

    Returns:
        Unmounted Dashboard
    """
    platform = create_media_platform(scheduler, config.media, use_mock=use_mock_platform)

    sound_cue: SoundCue
    if use_mock_audio:
        sound_cue = MockSoundCue()
    else:
        sound_cue = ToneCue(
            lambda: create_audio_playback(config.sound),
            config.sound,
        )

    return Dashboard(config, scheduler, platform, sound_cue)


__all__ = ["Dashboard", "build_dashboard"]
