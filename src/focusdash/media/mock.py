"""Mock media platform for testing.

Provides a controllable in-memory platform whose players record every
call and only become ready when told to.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ..errors import PlatformUnavailableError, TransientPlatformError
from .platform import PlayerConfig, PlayerState

if TYPE_CHECKING:
    from ..scheduling import Scheduler


class MockPlayer:
    """Mock player instance.

    Transport and query calls raise TransientPlatformError until the
    player is ready, like the hosted platform does.
    """

    def __init__(self, mount_target: Any, config: PlayerConfig) -> None:
        self.mount_target = mount_target
        self.config = config
        self.item_id = config.item_id
        self.ready = False
        self.destroyed = False
        self.current_time = 0.0
        self.duration = 0.0
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.fail_on: set[str] = set()
        self.emit_states = True

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.fail_on:
            raise RuntimeError(f"{name} failed")
        if not self.ready and name != "destroy":
            raise TransientPlatformError(f"{name} called before ready")

    def calls_to(self, name: str) -> list[tuple[Any, ...]]:
        """Arguments of every call to name."""
        return [args for call, args in self.calls if call == name]

    def fire_ready(self) -> None:
        """Deliver the ready callback."""
        self.ready = True
        if self.config.on_ready is not None:
            self.config.on_ready(self)

    def emit(self, state: PlayerState) -> None:
        """Deliver a state-change callback."""
        if self.config.on_state_change is not None:
            self.config.on_state_change(self, state)

    def emit_error(self, message: str) -> None:
        """Deliver an error callback, as for a source that cannot play."""
        if self.config.on_error is not None:
            self.config.on_error(self, message)

    def play(self) -> None:
        self._record("play")
        if self.emit_states:
            self.emit(PlayerState.PLAYING)

    def pause(self) -> None:
        self._record("pause")
        if self.emit_states:
            self.emit(PlayerState.PAUSED)

    def stop(self) -> None:
        self._record("stop")
        self.current_time = 0.0

    def load_item(self, item_id: str) -> None:
        self._record("load_item", item_id)
        self.item_id = item_id
        self.current_time = 0.0

    def seek(self, seconds: float, allow_seek_ahead: bool = True) -> None:
        self._record("seek", seconds, allow_seek_ahead)
        self.current_time = seconds

    def get_current_time(self) -> float:
        self._record("get_current_time")
        return self.current_time

    def get_duration(self) -> float:
        self._record("get_duration")
        return self.duration

    def destroy(self) -> None:
        self._record("destroy")
        self.destroyed = True
        self.ready = False


class MockPlatform:
    """Mock hosted platform.

    Implements the MediaPlatform protocol. By default bootstrap completes
    synchronously and players wait for fire_ready(); pass a scheduler with
    auto_ready=True to have ready callbacks posted automatically.
    """

    def __init__(
        self,
        auto_load: bool = True,
        auto_ready: bool = False,
        scheduler: "Scheduler | None" = None,
        unavailable: bool = False,
    ) -> None:
        self._auto_load = auto_load
        self._auto_ready = auto_ready
        self._scheduler = scheduler
        self._unavailable = unavailable
        self._on_loaded: list[Callable[[], None]] = []
        self.bootstrap_calls = 0
        self.players: list[MockPlayer] = []
        self.fail_create = False
        self.default_duration = 0.0

    def bootstrap(self, on_loaded: Callable[[], None]) -> None:
        self.bootstrap_calls += 1
        if self._unavailable:
            raise PlatformUnavailableError("mock platform unavailable")
        if self._auto_load:
            on_loaded()
        else:
            self._on_loaded.append(on_loaded)

    def complete_bootstrap(self) -> None:
        """Deliver held bootstrap callbacks."""
        callbacks, self._on_loaded = self._on_loaded, []
        for callback in callbacks:
            callback()

    def create_player(self, mount_target: Any, config: PlayerConfig) -> MockPlayer:
        if self.fail_create:
            raise RuntimeError("player creation failed")
        player = MockPlayer(mount_target, config)
        player.duration = self.default_duration
        self.players.append(player)
        if self._auto_ready and self._scheduler is not None:
            self._scheduler.post(player.fire_ready)
        return player

    @property
    def live_players(self) -> list[MockPlayer]:
        """Players that have not been destroyed."""
        return [p for p in self.players if not p.destroyed]

    @property
    def last_player(self) -> MockPlayer | None:
        return self.players[-1] if self.players else None


__all__ = ["MockPlatform", "MockPlayer"]
