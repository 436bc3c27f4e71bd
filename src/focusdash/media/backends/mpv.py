"""Hosted-media backend driving the mpv player.

mpv resolves the platform's watch URLs through yt-dlp and is controlled
over its JSON IPC socket. Each player owns one mpv process; IPC events
arrive on a reader thread and are handed to the scheduler with post().
"""

import json
import logging
import shutil
import socket
import subprocess
import tempfile
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ...errors import PlatformUnavailableError, TransientPlatformError
from ..platform import PlayerConfig, PlayerState

if TYPE_CHECKING:
    from ...scheduling import Scheduler

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={item_id}"

# Observed property ids
_PAUSE = 1
_TIME_POS = 2
_DURATION = 3

# Seconds mpv gets to exit after quit before it is killed
_REAP_TIMEOUT = 2.0


def build_command(binary: str, socket_path: Path, config: PlayerConfig, mount_target: Any) -> list[str]:
    """Build the mpv command line for a player.

    Display flags the platform understands are mapped onto mpv options;
    flags without an mpv equivalent are ignored.
    """
    flags = config.player_vars
    args = [
        binary,
        "--idle=yes",
        "--no-terminal",
        "--force-window=no",
        f"--input-ipc-server={socket_path}",
        "--ytdl-format=bestaudio/best",
    ]
    if not flags.get("autoplay", 0):
        args.append("--pause")
    if not flags.get("controls", 1):
        args.append("--osc=no")
    if flags.get("disablekb", 0):
        args.append("--input-default-bindings=no")
    if not flags.get("fs", 1):
        args.append("--fs=no")
    if mount_target is None:
        args.append("--no-video")
    else:
        args.append(f"--wid={mount_target}")
    args.append(WATCH_URL.format(item_id=config.item_id))
    return args


class MpvPlayer:
    """One mpv process controlled over IPC.

    Position and duration are served from observed properties, so queries
    never block the scheduler thread.
    """

    def __init__(
        self,
        binary: str,
        config: PlayerConfig,
        scheduler: "Scheduler",
        mount_target: Any = None,
        ipc_timeout: float = 5.0,
    ) -> None:
        """Initialize the player. Nothing runs until start().

        Args:
            binary: Path to the mpv executable
            config: Player configuration with callbacks
            scheduler: Queue that receives platform callbacks
            mount_target: Native window id to embed into, or None for audio only
            ipc_timeout: Seconds to wait for the IPC socket
        """
        self._binary = binary
        self._config = config
        self._scheduler = scheduler
        self._mount_target = mount_target
        self._ipc_timeout = ipc_timeout

        self._dir = Path(tempfile.mkdtemp(prefix="focusdash-mpv-"))
        self._socket_path = self._dir / "ipc.sock"
        self._process: subprocess.Popen | None = None
        self._sock: socket.socket | None = None
        self._write_lock = threading.Lock()
        self._reader: threading.Thread | None = None
        self._closed = threading.Event()

        self._ready = False
        self._paused = True
        self._time_pos = 0.0
        self._duration = 0.0
        self._request_id = 0

    def start(self) -> None:
        """Spawn mpv and connect to it in the background."""
        cmd = build_command(self._binary, self._socket_path, self._config, self._mount_target)
        logger.debug(f"Starting mpv: {' '.join(cmd)}")
        self._process = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        self._reader = threading.Thread(target=self._run, daemon=True, name="mpv-ipc")
        self._reader.start()

    # -- IPC ----------------------------------------------------------------

    def _connect(self) -> socket.socket | None:
        deadline = time.monotonic() + self._ipc_timeout
        while time.monotonic() < deadline and not self._closed.is_set():
            if self._process is not None and self._process.poll() is not None:
                return None
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            try:
                sock.connect(str(self._socket_path))
                return sock
            except OSError:
                sock.close()
                time.sleep(0.05)
        return None

    def _run(self) -> None:
        sock = self._connect()
        if sock is None:
            if not self._closed.is_set():
                logger.warning("mpv IPC socket did not come up")
                self._report_error("mpv IPC socket did not come up")
            self._kill()
            self._reap()
            return

        self._sock = sock
        for prop_id, name in ((_PAUSE, "pause"), (_TIME_POS, "time-pos"), (_DURATION, "duration")):
            self._send(["observe_property", prop_id, name])

        self._ready = True
        if self._config.on_ready is not None:
            self._scheduler.post(self._config.on_ready, self)

        buffer = b""
        while not self._closed.is_set():
            try:
                chunk = sock.recv(4096)
            except OSError:
                break
            if not chunk:
                break
            buffer += chunk
            while b"\n" in buffer:
                line, buffer = buffer.split(b"\n", 1)
                if line.strip():
                    self._handle_line(line)

        self._ready = False
        if not self._closed.is_set():
            self._report_error("mpv IPC connection lost")
            self._kill()
        self._reap()
        logger.debug("mpv IPC reader finished")

    def _handle_line(self, line: bytes) -> None:
        try:
            message = json.loads(line)
        except ValueError:
            logger.debug(f"Unparseable mpv message: {line!r}")
            return

        event = message.get("event")
        if event == "property-change":
            self._on_property(message.get("id"), message.get("data"))
        elif event == "file-loaded":
            self._emit(PlayerState.PAUSED if self._paused else PlayerState.PLAYING)
        elif event == "start-file":
            self._emit(PlayerState.BUFFERING)
        elif event == "end-file":
            reason = message.get("reason")
            if reason == "eof":
                self._emit(PlayerState.ENDED)
            elif reason == "error":
                self._report_error(message.get("file_error") or "source could not be loaded")

    def _on_property(self, prop_id: int | None, data: Any) -> None:
        if prop_id == _PAUSE and isinstance(data, bool):
            self._paused = data
            self._emit(PlayerState.PAUSED if data else PlayerState.PLAYING)
        elif prop_id == _TIME_POS and isinstance(data, int | float):
            self._time_pos = float(data)
        elif prop_id == _DURATION and isinstance(data, int | float):
            self._duration = float(data)

    def _emit(self, state: PlayerState) -> None:
        if self._config.on_state_change is not None and not self._closed.is_set():
            self._scheduler.post(self._config.on_state_change, self, state)

    def _report_error(self, text: str) -> None:
        if self._config.on_error is not None and not self._closed.is_set():
            self._scheduler.post(self._config.on_error, self, text)

    def _send(self, command: list[Any]) -> None:
        sock = self._sock
        if sock is None:
            raise TransientPlatformError("mpv is not connected yet")
        with self._write_lock:
            self._request_id += 1
            payload = {"command": command, "request_id": self._request_id}
            sock.sendall(json.dumps(payload).encode() + b"\n")

    def _require_ready(self) -> None:
        if not self._ready:
            raise TransientPlatformError("mpv player is not ready")

    # -- PlatformPlayer -----------------------------------------------------

    def play(self) -> None:
        self._require_ready()
        self._send(["set_property", "pause", False])

    def pause(self) -> None:
        self._require_ready()
        self._send(["set_property", "pause", True])

    def stop(self) -> None:
        self._require_ready()
        self._send(["set_property", "pause", True])
        self._send(["seek", 0, "absolute"])

    def load_item(self, item_id: str) -> None:
        self._require_ready()
        self._time_pos = 0.0
        self._duration = 0.0
        self._send(["loadfile", WATCH_URL.format(item_id=item_id), "replace"])

    def seek(self, seconds: float, allow_seek_ahead: bool = True) -> None:
        self._require_ready()
        mode = "absolute" if allow_seek_ahead else "absolute+keyframes"
        self._send(["seek", float(seconds), mode])

    def get_current_time(self) -> float:
        self._require_ready()
        return self._time_pos

    def get_duration(self) -> float:
        self._require_ready()
        return self._duration

    def destroy(self) -> None:
        """Ask mpv to quit without waiting for it.

        The reader thread reaps the process once the socket closes.
        """
        self._closed.set()
        self._ready = False
        try:
            self._send(["quit"])
        except (OSError, TransientPlatformError):
            self._kill()
        finally:
            if self._sock is not None:
                try:
                    # Wakes the reader thread, which then reaps mpv
                    self._sock.shutdown(socket.SHUT_RDWR)
                except OSError:
                    pass
                self._sock.close()
                self._sock = None
        shutil.rmtree(self._dir, ignore_errors=True)

    def _kill(self) -> None:
        if self._process is not None and self._process.poll() is None:
            self._process.terminate()

    def _reap(self) -> None:
        """Wait for mpv to exit so it does not linger as a zombie.

        Runs on the reader thread, never on the scheduler.
        """
        process = self._process
        if process is None:
            return
        try:
            process.wait(timeout=_REAP_TIMEOUT)
        except subprocess.TimeoutExpired:
            logger.debug("mpv did not exit after quit; killing it")
            process.kill()
            process.wait()


class MpvPlatform:
    """Hosted platform backed by the mpv executable.

    Implements the MediaPlatform protocol.
    """

    def __init__(self, scheduler: "Scheduler", mpv_path: str = "mpv", ipc_timeout: float = 5.0) -> None:
        """Initialize the platform.

        Args:
            scheduler: Queue that receives platform callbacks
            mpv_path: mpv executable name or path
            ipc_timeout: Seconds to wait for a player's IPC socket
        """
        self._scheduler = scheduler
        self._mpv_path = mpv_path
        self._ipc_timeout = ipc_timeout
        self._binary: str | None = None

    @property
    def is_available(self) -> bool:
        """Check if the mpv executable can be found."""
        return shutil.which(self._mpv_path) is not None

    def bootstrap(self, on_loaded: Callable[[], None]) -> None:
        """Locate mpv; on_loaded is posted once it is found."""
        if self._binary is None:
            binary = shutil.which(self._mpv_path)
            if binary is None:
                raise PlatformUnavailableError(f"mpv not found: {self._mpv_path}")
            if shutil.which("yt-dlp") is None:
                logger.warning("yt-dlp not found; mpv may not be able to open hosted URLs")
            self._binary = binary
        self._scheduler.post(on_loaded)

    def create_player(self, mount_target: Any, config: PlayerConfig) -> MpvPlayer:
        """Spawn a new mpv player bound to config.item_id."""
        if self._binary is None:
            raise PlatformUnavailableError("mpv platform used before bootstrap")
        player = MpvPlayer(
            self._binary,
            config,
            self._scheduler,
            mount_target=mount_target,
            ipc_timeout=self._ipc_timeout,
        )
        player.start()
        return player


__all__ = ["MpvPlatform", "MpvPlayer", "WATCH_URL", "build_command"]
