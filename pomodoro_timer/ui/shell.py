from __future__ import annotations

"""Terminal front end.

A line-oriented command prompt (`start`, `pause`, `resume`, `reset`, `stop`,
`status`, `watch`) over the same TimerService the window uses. Ticks come
from a ThreadTickSource; every command runs while holding the ticker's lock.
"""

import cmd
import logging
import threading
import time
from typing import Callable, TextIO

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from pomodoro_timer.core.config import AppSettings
from pomodoro_timer.core.errors import PomodoroError
from pomodoro_timer.core.models import POMODOROS_PER_CYCLE, SessionType, TimerState
from pomodoro_timer.core.service import TimerService, TimerStateView
from pomodoro_timer.ui.notifications import LoggingNotificationSink


logger = logging.getLogger(__name__)

WATCH_REFRESH_SECONDS = 0.5

ACTIVE_STATES = {TimerState.RUNNING, TimerState.PAUSED}

STATE_LABELS = {
    TimerState.RUNNING: "⏱  RUNNING",
    TimerState.PAUSED: "⏸  PAUSED",
    TimerState.IDLE: "⏹  IDLE",
    TimerState.COMPLETED: "✓  COMPLETED",
    TimerState.READY: "⏺  READY",
}

SESSION_LABELS = {
    SessionType.WORK: "🍅 Work Session",
    SessionType.SHORT_BREAK: "☕ Short Break",
    SessionType.LONG_BREAK: "🌴 Long Break",
}

SESSION_STYLES = {
    SessionType.WORK: "red",
    SessionType.SHORT_BREAK: "green",
    SessionType.LONG_BREAK: "blue",
}


def format_clock(seconds: int) -> str:
    return f"{seconds // 60}:{seconds % 60:02d}"


def format_cycle(cycle: int) -> str:
    dots = "".join("●" if i < cycle else "○" for i in range(POMODOROS_PER_CYCLE))
    return f"{dots} ({cycle}/{POMODOROS_PER_CYCLE})"


def status_panel(view: TimerStateView) -> Panel:
    grid = Table.grid(padding=(0, 1))
    grid.add_column(style="bold")
    grid.add_column()
    grid.add_row("Status:", STATE_LABELS[view.state])
    grid.add_row("Time:", format_clock(view.remaining_seconds))
    grid.add_row("Type:", SESSION_LABELS[view.session_type])
    grid.add_row("Cycle:", format_cycle(view.current_cycle))
    grid.add_row("Today:", f"🍅 {view.completed_pomodoros}")
    return Panel(grid, title="Pomodoro", border_style=SESSION_STYLES[view.session_type], expand=False)


class ShellNotificationSink(LoggingNotificationSink):
    """Rings the terminal bell and prints completion notices."""

    def __init__(self, console: Console, settings: AppSettings) -> None:
        self._console = console
        self._settings = settings

    def on_tick(self) -> None:
        super().on_tick()
        if self._settings.tick_sound:
            self._console.bell()

    def on_alarm(self) -> None:
        super().on_alarm()
        if self._settings.alarm_sound:
            self._console.bell()

    def on_session_completed(self, completed_type: SessionType, next_type: SessionType) -> None:
        super().on_session_completed(completed_type, next_type)
        self._console.print(
            f"[bold]Session completed:[/] {completed_type.display_name}. "
            f"Next session: {next_type.display_name}"
        )


class TimerShell(cmd.Cmd):
    intro = "Pomodoro timer. Type 'help' for commands, 'quit' to leave."
    prompt = "pomodoro> "

    def __init__(
        self,
        service: TimerService,
        console: Console,
        lock: threading.RLock | None = None,
        stdin: TextIO | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(stdin=stdin, stdout=console.file)
        if stdin is not None:
            self.use_rawinput = False
        self.service = service
        self.console = console
        self.lock = lock or threading.RLock()
        self._sleep = sleep

    def run(self) -> None:
        try:
            self.cmdloop()
        except KeyboardInterrupt:
            self.console.print()
            self.do_quit("")

    def precmd(self, line: str) -> str:
        # Accept the "timer <command>" form as well.
        words = line.split(maxsplit=1)
        if words and words[0] == "timer":
            return words[1] if len(words) > 1 else "help"
        return line

    def onecmd(self, line: str) -> bool:
        if line.strip().startswith("watch"):
            # Watch takes the lock per frame so ticks keep flowing.
            return super().onecmd(line)
        with self.lock:
            return super().onecmd(line)

    def emptyline(self) -> bool:
        return False

    def default(self, line: str) -> None:
        self.console.print(f"✗ Unknown command: {line.split()[0]}. Type 'help' for commands.")

    def do_start(self, arg: str) -> None:
        """start [minutes]  Start the next session, or a custom WORK session of the given length."""
        arg = arg.strip()
        if arg and not arg.lstrip("-").isdigit():
            self.console.print(f"✗ Error starting timer: minutes must be a whole number, got {arg!r}")
            return
        try:
            started = self.service.start_custom(int(arg)) if arg else self.service.start_normal()
        except PomodoroError as exc:
            self.console.print(f"✗ Error starting timer: {exc}")
            return
        if not started:
            self.console.print("ℹ  Timer is already running")
            return
        view = self.service.current_state()
        custom = " (custom duration)" if arg else ""
        self.console.print(
            f"✓ Timer started: {format_clock(view.remaining_seconds)} "
            f"{view.session_type.display_name}{custom}\nRun 'watch' to see live updates"
        )

    def do_pause(self, arg: str) -> None:
        """pause  Pause the running timer."""
        view = self.service.current_state()
        if view.state == TimerState.PAUSED:
            self.console.print("ℹ  Timer is already paused")
        elif self.service.pause():
            self.console.print(f"⏸  Timer paused at {format_clock(view.remaining_seconds)}")
        else:
            self.console.print("✗ No timer running")

    def do_resume(self, arg: str) -> None:
        """resume  Resume a paused timer."""
        view = self.service.current_state()
        if view.state == TimerState.RUNNING:
            self.console.print("ℹ  Timer is already running")
        elif self.service.resume():
            self.console.print("▶  Timer resumed")
        else:
            self.console.print("✗ No timer to resume")

    def do_reset(self, arg: str) -> None:
        """reset  Abandon the current session and go back to the start of the cycle."""
        self.service.reset()
        self.console.print("🔄 Timer reset")

    def do_stop(self, arg: str) -> None:
        """stop  Stop the timer; an active session is recorded as stopped."""
        self.service.stop()
        self.console.print("⏹  Timer stopped")

    def do_status(self, arg: str) -> None:
        """status  Show the current timer status."""
        self.console.print(status_panel(self.service.current_state()))

    def do_watch(self, arg: str) -> None:
        """watch  Live countdown until the session ends. Ctrl+C returns to the prompt."""
        with self.lock:
            view = self.service.current_state()
        if view.state not in ACTIVE_STATES:
            self.console.print(status_panel(view))
            self.console.print("ℹ  No active session to watch")
            return
        try:
            with Live(status_panel(view), console=self.console, auto_refresh=False) as live:
                while view.state in ACTIVE_STATES:
                    self._sleep(WATCH_REFRESH_SECONDS)
                    with self.lock:
                        view = self.service.current_state()
                    live.update(status_panel(view), refresh=True)
        except KeyboardInterrupt:
            self.console.print("Left watch mode")
            return
        if view.state == TimerState.COMPLETED:
            self.console.print(f"Up next: {view.session_type.display_name}. Run 'start' to begin it.")

    def do_quit(self, arg: str) -> bool:
        """quit  Leave the shell; an active session is recorded as stopped."""
        with self.lock:
            if self.service.is_active:
                self.service.stop()
            self.service.shutdown()
        logger.info("Shell closed")
        return True

    do_exit = do_quit

    def do_EOF(self, arg: str) -> bool:  # noqa: N802
        self.console.print()
        return self.do_quit(arg)
