from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime

from PyQt6.QtCore import QObject, pyqtSignal

from pomodoro_timer.core.models import SessionType, TimerRecord, TimerState
from pomodoro_timer.core.ports import HistoryStore, NotificationSink, TickSource
from pomodoro_timer.core.session import Session


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimerStateView:
    remaining_seconds: int
    state: TimerState
    session_type: SessionType
    completed_pomodoros: int
    current_cycle: int


class TimerService(QObject):
    """Drives the Session from the tick source and user commands.

    The session is not synchronized. Use it from the Qt GUI thread, or hold
    the ThreadTickSource lock around every call as the terminal shell does.
    """

    state_changed = pyqtSignal()
    session_completed = pyqtSignal(object, object)
    record_saved = pyqtSignal(object)

    def __init__(
        self,
        tick_source: TickSource,
        notifications: NotificationSink,
        history: HistoryStore,
    ) -> None:
        super().__init__()
        self._tick_source = tick_source
        self._notifications = notifications
        self._history = history

        today_stats = history.load_today_statistics()
        self._session = Session(on_session_started=self._on_session_started)
        self._session.initialize_from_today_stats(today_stats)
        logger.info(
            "Restored session state: %d completed pomodoros, cycle: %d",
            today_stats.completed_pomodoros,
            today_stats.current_cycle,
        )

    def start_normal(self) -> bool:
        started = self._session.start_session()
        self.state_changed.emit()
        return started

    def start_custom(self, minutes: int) -> bool:
        started = self._session.start_custom_session(minutes)
        self.state_changed.emit()
        return started

    def pause(self) -> bool:
        paused = self._session.pause_timer()
        if paused:
            self._tick_source.pause_ticking()
        self.state_changed.emit()
        return paused

    def resume(self) -> bool:
        resumed = self._session.resume_timer()
        if resumed:
            self._tick_source.resume_ticking()
        self.state_changed.emit()
        return resumed

    def reset(self) -> None:
        self._abandon_active_session()

    def stop(self) -> None:
        self._abandon_active_session()

    def current_state(self) -> TimerStateView:
        memento = self._session.create_timer_memento()
        return TimerStateView(
            remaining_seconds=memento.remaining_seconds,
            state=memento.state,
            session_type=memento.session_type,
            completed_pomodoros=self._session.completed_pomodoros,
            current_cycle=self._session.current_cycle,
        )

    @property
    def is_active(self) -> bool:
        return self._session.is_timer_running or self._session.is_timer_paused

    def shutdown(self) -> None:
        self._tick_source.stop_ticking()

    def on_tick(self) -> None:
        """Called once per second by the tick source."""
        self._notifications.on_tick()
        if self._session.tick():
            self._handle_timer_completion()
        else:
            self.state_changed.emit()

    def _on_session_started(self, session_type: SessionType, minutes: int) -> None:
        logger.info(
            "Session started. type=%s, minutes=%d, custom=%s",
            session_type.name,
            minutes,
            session_type.is_custom(minutes),
        )
        self._tick_source.start_ticking(self.on_tick)

    def _handle_timer_completion(self) -> None:
        self._tick_source.stop_ticking()
        self._notifications.on_alarm()

        completed_type = self._session.timer_session_type
        record = self._session.create_timer_record(datetime.now())
        next_type = self._session.handle_timer_completion()
        # Views show the next session before a blocking completion dialog opens.
        self.state_changed.emit()

        self._save_record(record)
        self._notifications.on_session_completed(completed_type, next_type)
        self.session_completed.emit(completed_type, next_type)

    def _abandon_active_session(self) -> None:
        record = None
        if self.is_active:
            # Capture the stop time before the session resets the timer.
            record = self._session.create_timer_record(datetime.now())
        self._session.reset_timer()
        self._tick_source.stop_ticking()
        self.state_changed.emit()
        if record is not None:
            self._save_record(record)

    def _save_record(self, record: TimerRecord) -> bool:
        try:
            self._history.save_record(record)
        except (sqlite3.Error, OSError):
            logger.exception(
                "Failed to save %s %s record; session state is kept",
                record.reason.value,
                record.session_type.name,
            )
            return False
        logger.info(
            "Saved %s %s record (%d min, %d pauses)",
            record.reason.value,
            record.session_type.name,
            record.duration_minutes,
            record.pause_count,
        )
        self.record_saved.emit(record)
        return True
