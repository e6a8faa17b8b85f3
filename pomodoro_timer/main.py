from __future__ import annotations

"""Entry point of the Pomodoro timer.

Sets up logging, opens the history database, wires the timer service to its
tick source and notification sink, and runs either the main window or, with
``--shell``, the terminal command prompt.
"""

import argparse
import logging
import sys
from pathlib import Path

from PyQt6.QtWidgets import QApplication
from rich.console import Console

from pomodoro_timer.core.config import AppSettings
from pomodoro_timer.core.service import TimerService
from pomodoro_timer.data.storage import Storage
from pomodoro_timer.ui.main_window import MainWindow
from pomodoro_timer.ui.notifications import QtNotificationSink
from pomodoro_timer.ui.shell import ShellNotificationSink, TimerShell
from pomodoro_timer.ui.styles import apply_theme
from pomodoro_timer.ui.ticker import QtTickSource, ThreadTickSource


def default_db_path() -> Path:
    """SQLite file in the current directory."""
    return Path.cwd() / "pomodoro.db"


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pomodoro-timer", description="Pomodoro work/break timer")
    parser.add_argument("--db", type=Path, default=default_db_path(), help="path to the history database")
    parser.add_argument("--log-level", default="INFO", help="logging level (DEBUG, INFO, ...)")
    parser.add_argument("--shell", action="store_true", help="run the terminal command prompt instead of the window")
    return parser.parse_args(argv)


def run_window(storage: Storage, settings: AppSettings) -> int:
    app = QApplication(sys.argv[:1])
    apply_theme(app)

    notifications = QtNotificationSink(settings)
    service = TimerService(
        tick_source=QtTickSource(app),
        notifications=notifications,
        history=storage,
    )

    window = MainWindow(service=service, storage=storage, settings=settings)
    notifications.set_parent(window)

    window.show()
    return app.exec()


def run_shell(storage: Storage, settings: AppSettings, console: Console | None = None) -> int:
    console = console or Console()
    ticker = ThreadTickSource()
    service = TimerService(
        tick_source=ticker,
        notifications=ShellNotificationSink(console, settings),
        history=storage,
    )
    TimerShell(service, console, lock=ticker.lock).run()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )

    storage = Storage(args.db)
    storage.init_db()
    settings = AppSettings.load(storage)

    if args.shell:
        return run_shell(storage, settings)
    return run_window(storage, settings)


if __name__ == "__main__":
    raise SystemExit(main())
