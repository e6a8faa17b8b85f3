from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from pomodoro_timer.core.models import DailyStatistics, SessionType, TimerRecord


class TickSource(ABC):
    """Calls the registered callback once per second while started and not paused."""

    @abstractmethod
    def start_ticking(self, callback: Callable[[], None]) -> None:
        """Register the callback and begin ticking."""

    @abstractmethod
    def stop_ticking(self) -> None:
        """Stop ticking and forget the callback."""

    @abstractmethod
    def pause_ticking(self) -> None:
        """Suspend ticks, keeping the callback."""

    @abstractmethod
    def resume_ticking(self) -> None:
        """Continue ticks after pause_ticking()."""


class NotificationSink(ABC):
    @abstractmethod
    def on_tick(self) -> None:
        """Called on every second of a running session."""

    @abstractmethod
    def on_alarm(self) -> None:
        """Called once when a countdown reaches zero."""

    @abstractmethod
    def on_session_completed(self, completed_type: SessionType, next_type: SessionType) -> None:
        """Called after the rotation rule picked the next session type."""


class HistoryStore(ABC):
    @abstractmethod
    def load_today_statistics(self) -> DailyStatistics:
        """Return today's completed pomodoro count."""

    @abstractmethod
    def save_record(self, record: TimerRecord) -> int:
        """Persist a finished or stopped session and return its id."""
