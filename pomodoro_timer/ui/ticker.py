from __future__ import annotations

import threading
from typing import Callable

from PyQt6.QtCore import QObject, QTimer

from pomodoro_timer.core.ports import TickSource


TICK_INTERVAL_MS = 1000


class QtTickSource(TickSource):
    """1 Hz tick source running on the Qt event loop of the calling thread."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._callback: Callable[[], None] | None = None
        self._timer = QTimer(parent)
        self._timer.setInterval(TICK_INTERVAL_MS)
        self._timer.timeout.connect(self._on_timeout)

    def start_ticking(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer.start()

    def stop_ticking(self) -> None:
        self._timer.stop()
        self._callback = None

    def pause_ticking(self) -> None:
        self._timer.stop()

    def resume_ticking(self) -> None:
        if self._callback is not None:
            self._timer.start()

    def _on_timeout(self) -> None:
        if self._callback is not None:
            self._callback()


class ThreadTickSource(TickSource):
    """Tick source for the terminal mode, where no Qt event loop runs.

    Each start or resume spawns a daemon thread that calls the callback every
    interval while holding `lock`. Callers that touch the service from another
    thread must hold the same lock.
    """

    def __init__(self, lock: threading.RLock | None = None, interval: float = TICK_INTERVAL_MS / 1000) -> None:
        self.lock = lock or threading.RLock()
        self._interval = interval
        self._callback: Callable[[], None] | None = None
        self._halt: threading.Event | None = None

    def start_ticking(self, callback: Callable[[], None]) -> None:
        with self.lock:
            self._callback = callback
            self._spawn()

    def stop_ticking(self) -> None:
        with self.lock:
            self._halt_thread()
            self._callback = None

    def pause_ticking(self) -> None:
        with self.lock:
            self._halt_thread()

    def resume_ticking(self) -> None:
        with self.lock:
            if self._callback is not None:
                self._spawn()

    def _spawn(self) -> None:
        self._halt_thread()
        halt = threading.Event()
        self._halt = halt
        threading.Thread(target=self._run, args=(halt,), name="pomodoro-ticker", daemon=True).start()

    def _halt_thread(self) -> None:
        if self._halt is not None:
            self._halt.set()
            self._halt = None

    def _run(self, halt: threading.Event) -> None:
        while not halt.wait(self._interval):
            with self.lock:
                # A stop issued while this thread waited for the lock wins.
                if halt.is_set() or self._callback is None:
                    return
                self._callback()
