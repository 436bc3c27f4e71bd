"""Media module for the focus dashboard.

Provides the playlist, the hosted platform contract and the media
session that owns the single player instance.

Usage:
    platform = create_media_platform(scheduler, config.media)
    session = MediaSession(platform, scheduler, config.media)

    # For testing, use the mock platform
    from focusdash.media.mock import MockPlatform
"""

from typing import TYPE_CHECKING

from focusdash.media.platform import (
    MediaPlatform,
    PlatformPlayer,
    PlayerConfig,
    PlayerState,
)
from focusdash.media.playlist import (
    Playlist,
    PlaylistItem,
    PlaylistState,
    extract_item_id,
)
from focusdash.media.session import (
    BootstrapState,
    InstanceState,
    MediaSession,
    PlaybackProgress,
)

if TYPE_CHECKING:
    from focusdash.config import MediaConfig
    from focusdash.scheduling import Scheduler


def create_media_platform(
    scheduler: "Scheduler",
    config: "MediaConfig | None" = None,
    use_mock: bool = False,
) -> MediaPlatform:
    """Create the hosted media platform client.

    Args:
        scheduler: Queue that receives platform callbacks
        config: Media configuration (uses defaults if None)
        use_mock: If True, return an in-memory platform whose players
            become ready on the next scheduler turn

    Returns:
        MediaPlatform implementation
    """
    if use_mock:
        from focusdash.media.mock import MockPlatform

        return MockPlatform(auto_ready=True, scheduler=scheduler)

    from focusdash.media.backends.mpv import MpvPlatform

    if config is None:
        return MpvPlatform(scheduler)
    return MpvPlatform(scheduler, mpv_path=config.mpv_path, ipc_timeout=config.ipc_timeout)


__all__ = [
    "BootstrapState",
    "InstanceState",
    "MediaPlatform",
    "MediaSession",
    "PlatformPlayer",
    "PlaybackProgress",
    "PlayerConfig",
    "PlayerState",
    "Playlist",
    "PlaylistItem",
    "PlaylistState",
    "create_media_platform",
    "extract_item_id",
]
