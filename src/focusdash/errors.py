"""Error types for the focus dashboard.

Custom exceptions shared by the session clock, playlist, media session
and sound cue.
"""


class FocusError(Exception):
    """Base exception for focus dashboard errors."""

    pass


class ValidationError(FocusError):
    """Raised when user input is rejected without changing any state."""

    pass


class DuplicateItemError(ValidationError):
    """Raised when a playlist item with the same id already exists."""

    def __init__(self, item_id: str) -> None:
        """Initialize duplicate item error.

        Args:
            item_id: The id that is already present in the playlist.
        """
        super().__init__(f"Item already in playlist: {item_id}")
        self.item_id = item_id


class ConfigError(FocusError):
    """Raised when a configuration file cannot be applied."""

    pass


class PlatformError(FocusError):
    """Base exception for failures inside the external media platform."""

    pass


class PlatformUnavailableError(PlatformError):
    """Raised when the platform client cannot be bootstrapped."""

    pass


class TransientPlatformError(PlatformError):
    """Raised when a player call fails because the instance is not ready."""

    pass


class FatalInstanceError(PlatformError):
    """Raised when a player instance can no longer be used and must be recreated."""

    pass


class SoundError(FocusError):
    """Raised when the notification tone cannot be synthesized or played."""

    pass


__all__ = [
    "ConfigError",
    "DuplicateItemError",
    "FatalInstanceError",
    "FocusError",
    "PlatformError",
    "PlatformUnavailableError",
    "SoundError",
    "TransientPlatformError",
    "ValidationError",
]
