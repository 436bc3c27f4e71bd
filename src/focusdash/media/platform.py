"""External media platform contract.

Describes what the media session needs from a hosted streaming platform:
a one-time bootstrap, a player factory and the player instance methods.
Platform callbacks must be delivered on the dashboard's scheduler.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Protocol


class PlayerState(IntEnum):
    """Player states reported through the state-change callback."""

    UNSTARTED = -1
    ENDED = 0
    PLAYING = 1
    PAUSED = 2
    BUFFERING = 3
    CUED = 5


class PlatformPlayer(Protocol):
    """A live player instance created by the platform.

    Every method may raise while the instance is not ready.
    """

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def stop(self) -> None: ...

    def load_item(self, item_id: str) -> None:
        """Swap the source in place and start loading it."""
        ...

    def seek(self, seconds: float, allow_seek_ahead: bool = True) -> None: ...

    def get_current_time(self) -> float: ...

    def get_duration(self) -> float:
        """Item duration in seconds; 0 until the platform knows it."""
        ...

    def destroy(self) -> None:
        """Release the instance. Completion is not reported."""
        ...


ReadyCallback = Callable[[PlatformPlayer], None]
StateChangeCallback = Callable[[PlatformPlayer, PlayerState], None]
ErrorCallback = Callable[[PlatformPlayer, str], None]


@dataclass
class PlayerConfig:
    """Configuration handed to the platform's player factory.

    Attributes:
        item_id: Item the new player is bound to.
        player_vars: Whitelisted display flags.
        on_ready: Called once the player accepts commands.
        on_state_change: Called on every playback state change.
        on_error: Called when the current source cannot be played.
    """

    item_id: str
    player_vars: dict[str, int] = field(default_factory=dict)
    on_ready: ReadyCallback | None = None
    on_state_change: StateChangeCallback | None = None
    on_error: ErrorCallback | None = None


class MediaPlatform(Protocol):
    """Interface for the hosted streaming platform."""

    def bootstrap(self, on_loaded: Callable[[], None]) -> None:
        """Load the platform client library.

        on_loaded is called (on the scheduler) once the factory is usable.

        Raises:
            PlatformUnavailableError: If the client cannot be loaded
        """
        ...

    def create_player(self, mount_target: Any, config: PlayerConfig) -> PlatformPlayer:
        """Create a player bound to config.item_id inside mount_target.

        The player is usable once config.on_ready fires.
        """
        ...


__all__ = [
    "ErrorCallback",
    "MediaPlatform",
    "PlatformPlayer",
    "PlayerConfig",
    "PlayerState",
    "ReadyCallback",
    "StateChangeCallback",
]
