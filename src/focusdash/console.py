"""Console front end for the dashboard.

Renders session and playback state as text and turns typed commands into
dashboard operations. Input is read on a helper thread; every command runs
on the scheduler.
"""

import sys
import threading
from collections.abc import Callable
from typing import TextIO

from .dashboard import Dashboard
from .errors import ValidationError
from .media import PlaybackProgress, Playlist
from .session import SessionMode, SessionState, format_clock

HELP_TEXT = """\
Commands:
  start | pause | reset       control the countdown
  mode study|break            switch interval
  add URL                     add a video to the playlist
  select ID | remove ID       choose or delete a playlist item
  list                        show the playlist
  play | stop | toggle        control the music
  seek SECONDS                jump within the current video
  status                      show the dashboard
  quit                        exit"""


def format_progress(progress: PlaybackProgress) -> str:
    """Render playback position like '1:05 / 3:20'."""

    def fmt(seconds: float) -> str:
        if seconds < 0:
            return "0:00"
        mins, secs = divmod(int(seconds), 60)
        return f"{mins}:{secs:02d}"

    return f"{fmt(progress.current_time)} / {fmt(progress.duration)}"


def format_session(state: SessionState) -> str:
    """Render the countdown line."""
    status = "running" if state.is_running else "paused"
    if state.is_finished:
        status = "finished!"
    return (
        f"[{state.mode.label}] {format_clock(state.seconds_remaining)} {status} "
        f"- completed cycles: {state.completed_cycles}"
    )


def format_playlist(playlist: Playlist) -> str:
    """Render the playlist, marking the current item."""
    if not len(playlist):
        return "Playlist is empty"
    lines = []
    for item in playlist.items:
        marker = "*" if item.id == playlist.current_id else " "
        lines.append(f"{marker} {item.id:<14} {item.title:<10} {item.source_url}")
    return "\n".join(lines)


class ConsoleDashboard:
    """Text front end bound to a dashboard.

    Usage:
        console = ConsoleDashboard(dashboard, stop=loop.stop)
        console.attach()
        console.start_input()
        loop.run()
    """

    def __init__(
        self,
        dashboard: Dashboard,
        stop: Callable[[], None] | None = None,
        out: TextIO | None = None,
    ) -> None:
        """Initialize the console.

        Args:
            dashboard: Dashboard to drive
            stop: Called when the user quits
            out: Stream for output (default: stdout)
        """
        self._dashboard = dashboard
        self._stop = stop
        self._out = out or sys.stdout
        self._last_state: SessionState | None = None
        self._unsubscribes: list[Callable[[], None]] = []
        self._reader: threading.Thread | None = None
        self._commands: dict[str, Callable[[str], str | None]] = {
            "start": lambda _: self._dashboard.clock.start(),
            "pause": lambda _: self._dashboard.clock.pause(),
            "reset": lambda _: self._dashboard.clock.reset(),
            "mode": self._cmd_mode,
            "add": self._cmd_add,
            "select": self._cmd_select,
            "remove": self._cmd_remove,
            "list": lambda _: format_playlist(self._dashboard.playlist),
            "play": lambda _: self._dashboard.media.play(),
            "stop": lambda _: self._dashboard.media.stop(),
            "toggle": lambda _: self._dashboard.media.toggle_play(),
            "seek": self._cmd_seek,
            "status": lambda _: self.render(),
            "help": lambda _: HELP_TEXT,
            "quit": self._cmd_quit,
        }

    def attach(self) -> None:
        """Subscribe to state changes worth printing."""
        self._unsubscribes.append(self._dashboard.clock.subscribe(self._on_session))

    def detach(self) -> None:
        for unsubscribe in self._unsubscribes:
            unsubscribe()
        self._unsubscribes.clear()

    def render(self) -> str:
        """Full status text."""
        dashboard = self._dashboard
        lines = [format_session(dashboard.clock.state)]
        current = dashboard.playlist.current
        if current is None:
            lines.append("Music: no video selected")
        else:
            progress = dashboard.media.get_progress()
            state = "playing" if progress.is_playing else dashboard.media.instance_state.value
            lines.append(f"Music: {current.title} ({current.id}) {state} {format_progress(progress)}")
        return "\n".join(lines)

    def _write(self, text: str) -> None:
        self._out.write(text + "\n")
        self._out.flush()

    def _on_session(self, state: SessionState) -> None:
        previous = self._last_state
        self._last_state = state
        if previous is None:
            return
        if state.is_finished and not previous.is_finished:
            self._write(f"{previous.mode.label} session complete!")
        elif state.mode is not previous.mode and state.is_finished:
            # Automatic advance; manual switches are echoed by the command
            self._write(
                f"Up next: {state.mode.label} {format_clock(state.seconds_remaining)} "
                f"- completed cycles: {state.completed_cycles}"
            )

    # -- commands -----------------------------------------------------------

    def execute(self, line: str) -> str | None:
        """Run one command line and return its output."""
        line = line.strip()
        if not line:
            return None
        name, _, arg = line.partition(" ")
        handler = self._commands.get(name.lower())
        if handler is None:
            return f"Unknown command: {name}\n{HELP_TEXT}"
        try:
            return handler(arg.strip())
        except ValidationError as e:
            return f"Error: {e}"

    def _cmd_mode(self, arg: str) -> str | None:
        try:
            mode = SessionMode.parse(arg)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        self._dashboard.clock.switch_mode(mode)
        return format_session(self._dashboard.clock.state)

    def _cmd_add(self, arg: str) -> str:
        item = self._dashboard.playlist.add(arg)
        return f"Added {item.title} ({item.id})"

    def _cmd_select(self, arg: str) -> str:
        item = self._dashboard.playlist.select(arg)
        return f"Selected {item.title} ({item.id})"

    def _cmd_remove(self, arg: str) -> str:
        item = self._dashboard.playlist.remove(arg)
        return f"Removed {item.title} ({item.id})"

    def _cmd_seek(self, arg: str) -> None:
        try:
            seconds = float(arg)
        except ValueError as e:
            raise ValidationError(f"Not a number of seconds: {arg!r}") from e
        self._dashboard.media.seek(seconds)

    def _cmd_quit(self, _: str) -> str:
        if self._stop is not None:
            self._stop()
        return "Bye"

    # -- input ----------------------------------------------------------------

    def handle_line(self, line: str) -> None:
        """Execute a line and print its output (runs on the scheduler)."""
        output = self.execute(line)
        if output:
            self._write(output)

    def start_input(self, stream: TextIO | None = None) -> None:
        """Read commands from stream on a daemon thread."""
        stream = stream or sys.stdin
        scheduler = self._dashboard.scheduler

        def read_loop() -> None:
            for line in stream:
                scheduler.post(self.handle_line, line)
            # EOF behaves like quit
            scheduler.post(self.handle_line, "quit")

        self._reader = threading.Thread(target=read_loop, daemon=True, name="console-input")
        self._reader.start()


__all__ = [
    "ConsoleDashboard",
    "HELP_TEXT",
    "format_playlist",
    "format_progress",
    "format_session",
]
