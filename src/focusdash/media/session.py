"""Media session lifecycle.

Owns the single live player instance of the hosted platform. Selection
changes reuse the instance by swapping its source after a short debounce;
teardown destroys it and keeps creation blocked for a cooldown, because
the platform never reports when a destroy has actually finished.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..errors import FatalInstanceError, PlatformUnavailableError
from .platform import PlayerConfig, PlayerState

if TYPE_CHECKING:
    from ..bridge import PlaybackBridge
    from ..config import MediaConfig
    from ..scheduling import Scheduler, TimerHandle
    from .platform import MediaPlatform, PlatformPlayer
    from .playlist import PlaylistItem

logger = logging.getLogger(__name__)


class InstanceState(Enum):
    """Lifecycle of the player instance."""

    ABSENT = "absent"
    CREATING = "creating"
    READY = "ready"
    DESTROYING = "destroying"


class BootstrapState(Enum):
    """Progress of the one-time platform bootstrap."""

    NOT_STARTED = "not_started"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class PlaybackProgress:
    """Snapshot of playback position.

    Attributes:
        current_time: Position in seconds.
        duration: Item length in seconds, 0 while unknown.
        is_playing: Whether the platform reports playback.
        item_id: Item the instance is bound to.
    """

    current_time: float = 0.0
    duration: float = 0.0
    is_playing: bool = False
    item_id: str | None = None

    @property
    def fraction(self) -> float:
        """Played fraction in [0, 1]."""
        if self.duration <= 0:
            return 0.0
        return min(1.0, max(0.0, self.current_time / self.duration))


ProgressListener = Callable[[PlaybackProgress], None]


class MediaSession:
    """Owns exactly one player instance of the hosted platform.

    Usage:
        session = MediaSession(platform, scheduler, config.media)
        session.mount(bridge, mount_target)
        session.select_item(item)
        ...
        session.unmount()

    All methods must be called on the scheduler's thread. Calls into the
    platform never raise out of this class.
    """

    def __init__(
        self,
        platform: "MediaPlatform",
        scheduler: "Scheduler",
        config: "MediaConfig | None" = None,
    ) -> None:
        """Initialize an empty session.

        Args:
            platform: Hosted platform client
            scheduler: Execution queue for debounce, cooldown and polling
            config: Media configuration
        """
        self._platform = platform
        self._scheduler = scheduler

        self._debounce = 0.1
        self._cooldown = 0.5
        self._poll_interval = 0.1
        self._max_failures = 2
        self._player_vars: dict[str, int] = {}
        if config is not None:
            self._debounce = config.debounce
            self._cooldown = config.destroy_cooldown
            self._poll_interval = config.poll_interval
            self._max_failures = max(0, config.max_load_failures)
            self._player_vars = dict(config.player_vars)

        self._bootstrap = BootstrapState.NOT_STARTED
        self._bootstrap_waiters: list[Callable[[], None]] = []
        self._mount_target: Any = None
        self._bridge: PlaybackBridge | None = None

        self._state = InstanceState.ABSENT
        self._player: PlatformPlayer | None = None
        self._pending: PlatformPlayer | None = None
        self._destroying = False
        self._bound_id: str | None = None
        self._requested_id: str | None = None
        self._recreate_after_cooldown = False
        self._failures = 0

        self._debounce_handle: TimerHandle | None = None
        self._poll_handle: TimerHandle | None = None
        self._cooldown_handle: TimerHandle | None = None

        self._current_time = 0.0
        self._duration = 0.0
        self._is_playing = False
        self._listeners: list[ProgressListener] = []

    # -- observation ------------------------------------------------------

    @property
    def instance_state(self) -> InstanceState:
        return self._state

    @property
    def bootstrap_state(self) -> BootstrapState:
        return self._bootstrap

    @property
    def is_destroying(self) -> bool:
        return self._destroying

    @property
    def is_ready(self) -> bool:
        """Return True when commands reach a live instance."""
        return self._player is not None and not self._destroying

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def is_polling(self) -> bool:
        return self._poll_handle is not None

    @property
    def bound_item_id(self) -> str | None:
        """Item the current instance plays."""
        return self._bound_id

    @property
    def selected_item_id(self) -> str | None:
        """Most recently selected item."""
        return self._requested_id

    def get_progress(self) -> PlaybackProgress:
        """Current position and sticky duration."""
        return PlaybackProgress(
            current_time=self._current_time,
            duration=self._duration,
            is_playing=self._is_playing,
            item_id=self._bound_id,
        )

    def subscribe(self, listener: ProgressListener) -> Callable[[], None]:
        """Register a listener for progress and state changes.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        progress = self.get_progress()
        for listener in list(self._listeners):
            try:
                listener(progress)
            except Exception:
                logger.exception("Progress listener failed")

    # -- mounting ---------------------------------------------------------

    def mount(self, bridge: "PlaybackBridge | None", mount_target: Any = None) -> None:
        """Attach to the dashboard and start the platform bootstrap.

        Args:
            bridge: Bridge to register play() with while an item is selected
            mount_target: Where the platform should render its player
        """
        self._bridge = bridge
        self.ensure_ready(mount_target)
        self._sync_bridge()

    def unmount(self) -> None:
        """Detach from the bridge and destroy the instance."""
        if self._bridge is not None:
            self._bridge.unregister(self)
        self._bridge = None
        self._recreate_after_cooldown = False
        self.teardown()

    def _sync_bridge(self) -> None:
        if self._bridge is None:
            return
        if self._requested_id is not None:
            self._bridge.register(self)
        else:
            self._bridge.unregister(self)

    # -- bootstrap --------------------------------------------------------

    def ensure_ready(self, mount_target: Any = None, on_ready: Callable[[], None] | None = None) -> None:
        """Load the platform client once; later calls join the same load.

        Args:
            mount_target: Where players are rendered (kept from earlier calls if None)
            on_ready: Called once the platform is loaded
        """
        if mount_target is not None:
            self._mount_target = mount_target

        if self._bootstrap is BootstrapState.LOADED:
            if on_ready is not None:
                on_ready()
            return

        if on_ready is not None:
            self._bootstrap_waiters.append(on_ready)

        if self._bootstrap is BootstrapState.LOADING:
            return

        self._bootstrap = BootstrapState.LOADING
        logger.debug("Bootstrapping media platform")
        try:
            self._platform.bootstrap(self._on_platform_loaded)
        except PlatformUnavailableError as e:
            self._bootstrap = BootstrapState.FAILED
            self._bootstrap_waiters.clear()
            logger.warning(f"Media platform unavailable: {e}")
        except Exception as e:
            self._bootstrap = BootstrapState.FAILED
            self._bootstrap_waiters.clear()
            logger.warning(f"Media platform bootstrap failed: {e}")

    def _on_platform_loaded(self) -> None:
        if self._bootstrap is BootstrapState.LOADED:
            return
        self._bootstrap = BootstrapState.LOADED
        logger.debug("Media platform loaded")

        waiters, self._bootstrap_waiters = self._bootstrap_waiters, []
        for waiter in waiters:
            try:
                waiter()
            except Exception:
                logger.exception("Bootstrap waiter failed")

        if self._requested_id is not None and self._state is InstanceState.ABSENT:
            self._create(self._requested_id)

    # -- selection --------------------------------------------------------

    def select_item(self, item: "PlaylistItem | str") -> None:
        """Bind playback to an item.

        Creates the instance when there is none, otherwise swaps its source
        after the debounce delay. Rapid reselection collapses into a single
        swap to the last item. Selections made before the platform is
        loaded or during a destroy cooldown are applied afterwards.

        A source that cannot be loaded or played tears the instance down
        and recreates it after the cooldown, at most max_load_failures
        times in a row before the session stays absent.
        """
        item_id = item if isinstance(item, str) else item.id
        if item_id != self._requested_id:
            self._failures = 0
        self._requested_id = item_id
        self._sync_bridge()

        if self._bootstrap is not BootstrapState.LOADED:
            if self._bootstrap is BootstrapState.NOT_STARTED:
                self.ensure_ready()
            return

        if self._destroying:
            self._recreate_after_cooldown = True
            return

        if self._state is InstanceState.ABSENT:
            self._create(item_id)
            return

        if self._state is InstanceState.CREATING:
            # The ready callback swaps to the latest request.
            return

        self._cancel_debounce()
        if item_id == self._bound_id:
            return
        self._debounce_handle = self._scheduler.call_later(self._debounce, self._swap_source)

    def clear_selection(self) -> None:
        """Forget the selected item and destroy the instance."""
        self._requested_id = None
        self._recreate_after_cooldown = False
        self._sync_bridge()
        self.teardown()

    def _create(self, item_id: str) -> None:
        if self._destroying or self._player is not None or self._pending is not None:
            return

        config = PlayerConfig(
            item_id=item_id,
            player_vars=dict(self._player_vars),
            on_ready=self._on_player_ready,
            on_state_change=self._on_player_state_change,
            on_error=self._on_player_error,
        )
        try:
            self._pending = self._platform.create_player(self._mount_target, config)
        except Exception as e:
            logger.warning(f"Could not create player for {item_id}: {e}")
            self._state = InstanceState.ABSENT
            return

        self._state = InstanceState.CREATING
        self._bound_id = item_id
        self._reset_progress()
        logger.debug(f"Creating player for {item_id}")

    def _swap_source(self) -> None:
        self._debounce_handle = None
        target = self._requested_id
        player = self._player
        if player is None or self._destroying or target is None or target == self._bound_id:
            return

        try:
            self._load(player, target)
        except FatalInstanceError as e:
            self._on_fatal_error(target, e)
            return

        self._bound_id = target
        self._stop_polling()
        self._reset_progress()
        logger.debug(f"Loaded {target} into existing player")
        self._notify()

    def _load(self, player: "PlatformPlayer", item_id: str) -> None:
        try:
            player.load_item(item_id)
        except Exception as e:
            raise FatalInstanceError(f"Loading {item_id} failed: {e}") from e

    def _on_fatal_error(self, item_id: str, error: FatalInstanceError) -> None:
        self._failures += 1
        self.teardown()
        if self._failures > self._max_failures:
            logger.error(
                f"{error}; giving up on {item_id} after {self._failures - 1} recreated players"
            )
            return

        logger.warning(f"{error}; recreating player for {item_id}")
        self._recreate_after_cooldown = True

    # -- platform callbacks -----------------------------------------------

    def _on_player_ready(self, player: "PlatformPlayer") -> None:
        if self._destroying or player is not self._pending:
            logger.debug("Ignoring ready callback from a discarded player")
            return

        self._pending = None
        self._player = player
        self._state = InstanceState.READY
        logger.debug(f"Player ready for {self._bound_id}")

        self._adopt_duration(player)
        self._notify()

        if self._requested_id is not None and self._requested_id != self._bound_id:
            self._cancel_debounce()
            self._debounce_handle = self._scheduler.call_later(self._debounce, self._swap_source)

    def _on_player_state_change(self, player: "PlatformPlayer", state: PlayerState) -> None:
        if self._destroying or player is not self._player:
            return

        if state is PlayerState.PLAYING:
            self._is_playing = True
            self._failures = 0
            self._start_polling()
        elif state in (PlayerState.PAUSED, PlayerState.ENDED):
            self._is_playing = False
            self._stop_polling()
        else:
            return
        self._notify()

    def _on_player_error(self, player: "PlatformPlayer", message: str) -> None:
        if self._destroying or (player is not self._player and player is not self._pending):
            return
        item_id = self._bound_id or self._requested_id or "?"
        self._on_fatal_error(item_id, FatalInstanceError(f"Playing {item_id} failed: {message}"))

    # -- transport --------------------------------------------------------

    def _call(self, method: str, *args: Any) -> bool:
        player = self._player
        if player is None or self._destroying:
            return False
        try:
            getattr(player, method)(*args)
        except Exception as e:
            logger.debug(f"Player {method} ignored: {e}")
            return False
        return True

    def play(self) -> None:
        """Start playback; no-op without a ready instance."""
        self._call("play")

    def pause(self) -> None:
        """Pause playback; no-op without a ready instance."""
        self._call("pause")

    def toggle_play(self) -> None:
        """Pause when playing, play otherwise."""
        if self._is_playing:
            self.pause()
        else:
            self.play()

    def stop(self) -> None:
        """Stop playback and progress polling."""
        if self._call("stop"):
            self._is_playing = False
            self._stop_polling()
            self._notify()

    def seek(self, seconds: float) -> None:
        """Jump to a position, clamped to the known duration."""
        target = max(0.0, float(seconds))
        if self._duration > 0:
            target = min(target, self._duration)
        if self._call("seek", target, True):
            self._current_time = target
            self._notify()

    # -- progress polling -------------------------------------------------

    def _start_polling(self) -> None:
        self._stop_polling()
        self._poll_handle = self._scheduler.call_every(self._poll_interval, self._poll)

    def _stop_polling(self) -> None:
        if self._poll_handle is not None:
            self._poll_handle.cancel()
            self._poll_handle = None

    def _poll(self) -> None:
        player = self._player
        if player is None or self._destroying:
            self._stop_polling()
            return
        try:
            self._current_time = float(player.get_current_time())
        except Exception as e:
            logger.debug(f"Progress query failed: {e}")
        self._adopt_duration(player)
        self._notify()

    def _adopt_duration(self, player: "PlatformPlayer") -> None:
        if self._duration > 0:
            return
        try:
            duration = float(player.get_duration())
        except Exception as e:
            logger.debug(f"Duration not available yet: {e}")
            return
        if duration > 0:
            self._duration = duration

    def _reset_progress(self) -> None:
        self._current_time = 0.0
        self._duration = 0.0
        self._is_playing = False

    # -- teardown ---------------------------------------------------------

    def teardown(self) -> None:
        """Destroy the instance and block creation for the cooldown."""
        self._cancel_debounce()
        self._stop_polling()

        doomed = self._player or self._pending
        if doomed is None:
            return

        self._destroying = True
        self._state = InstanceState.DESTROYING
        self._recreate_after_cooldown = False
        self._player = None
        self._pending = None
        self._bound_id = None
        self._reset_progress()

        try:
            doomed.destroy()
        except Exception as e:
            logger.debug(f"Ignoring destroy error: {e}")

        logger.debug(f"Player destroyed, creation blocked for {self._cooldown}s")
        self._cancel_cooldown()
        self._cooldown_handle = self._scheduler.call_later(self._cooldown, self._end_cooldown)
        self._notify()

    def _end_cooldown(self) -> None:
        self._cooldown_handle = None
        self._destroying = False
        self._state = InstanceState.ABSENT
        logger.debug("Destroy cooldown elapsed")

        if self._recreate_after_cooldown and self._requested_id is not None:
            self._recreate_after_cooldown = False
            if self._bootstrap is BootstrapState.LOADED:
                self._create(self._requested_id)

    def close(self) -> None:
        """Release everything immediately, including a running cooldown."""
        if self._bridge is not None:
            self._bridge.unregister(self)
            self._bridge = None
        self._requested_id = None
        self.teardown()
        self._cancel_cooldown()
        self._destroying = False
        self._state = InstanceState.ABSENT

    def _cancel_debounce(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

    def _cancel_cooldown(self) -> None:
        if self._cooldown_handle is not None:
            self._cooldown_handle.cancel()
            self._cooldown_handle = None

    def __repr__(self) -> str:
        return f"<MediaSession {self._state.value} item={self._bound_id}>"


__all__ = [
    "BootstrapState",
    "InstanceState",
    "MediaSession",
    "PlaybackProgress",
    "ProgressListener",
]
