from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from pomodoro_timer.core.errors import InvalidStateError
from pomodoro_timer.core.models import (
    POMODOROS_PER_CYCLE,
    DailyStatistics,
    FinishReason,
    SessionType,
    TimerMemento,
    TimerRecord,
)
from pomodoro_timer.core.timer import CountdownTimer


logger = logging.getLogger(__name__)

POMODOROS_BEFORE_LONG_BREAK = POMODOROS_PER_CYCLE

SessionStartedHandler = Callable[[SessionType, int], None]


def _ignore_session_started(_session_type: SessionType, _minutes: int) -> None:
    pass


def next_session_type(current: SessionType, current_cycle: int) -> SessionType:
    """Work -> short break (cycles 1-3), work -> long break (cycle 4), break -> work."""
    if current == SessionType.WORK:
        if current_cycle >= POMODOROS_BEFORE_LONG_BREAK:
            return SessionType.LONG_BREAK
        return SessionType.SHORT_BREAK
    return SessionType.WORK


class Session:
    """Pomodoro rotation and bookkeeping around one exclusively owned countdown."""

    def __init__(self, on_session_started: SessionStartedHandler | None = None) -> None:
        self._completed_pomodoros = 0
        self._current_cycle = 0
        self._current_session_type = SessionType.WORK
        self._current_session_type_minutes = 0
        self._timer = CountdownTimer()
        self._on_session_started = on_session_started or _ignore_session_started

    @property
    def completed_pomodoros(self) -> int:
        return self._completed_pomodoros

    @property
    def current_cycle(self) -> int:
        return self._current_cycle

    @property
    def current_session_type(self) -> SessionType:
        return self._current_session_type

    @property
    def current_session_type_minutes(self) -> int:
        return self._current_session_type_minutes

    @property
    def timer_session_type(self) -> SessionType:
        return self._timer.session_type

    @property
    def is_timer_running(self) -> bool:
        return self._timer.is_running

    @property
    def is_timer_paused(self) -> bool:
        return self._timer.is_paused

    @property
    def is_timer_completed(self) -> bool:
        return self._timer.is_completed

    @property
    def is_timer_started(self) -> bool:
        return self._timer.started_at is not None and self._timer.initial_duration_minutes > 0

    @property
    def was_timer_stopped(self) -> bool:
        return not self._timer.is_running and not self._timer.is_completed and self._timer.started_at is not None

    def start_session(self, now: datetime | None = None) -> bool:
        return self._start(self._current_session_type.default_minutes, now)

    def start_custom_session(self, minutes: int, now: datetime | None = None) -> bool:
        return self._start(minutes, now)

    def pause_timer(self, now: datetime | None = None) -> bool:
        if not self._timer.is_running:
            return False
        self._timer.pause(now)
        return True

    def resume_timer(self, now: datetime | None = None) -> bool:
        if not self._timer.is_paused:
            return False
        self._timer.resume(now)
        return True

    def reset_timer(self, now: datetime | None = None) -> None:
        self._timer.stop(now)
        self._reset_cycle()
        self._timer.session_type = SessionType.WORK

    def tick(self) -> bool:
        return self._timer.tick()

    def handle_timer_completion(self) -> SessionType:
        if not self._timer.is_completed:
            raise InvalidStateError("Timer not completed")

        completed_type = self._timer.session_type
        if completed_type == SessionType.WORK:
            self._complete_work_session()

        next_type = next_session_type(self._current_session_type, self._current_cycle)
        if next_type == SessionType.LONG_BREAK:
            self._current_cycle = 0
        self._current_session_type = next_type

        # The timer stays COMPLETED until the next start; only its type moves on.
        self._timer.session_type = next_type
        logger.info(
            "Session completed: %s -> %s (pomodoros=%d, cycle=%d)",
            completed_type.name,
            next_type.name,
            self._completed_pomodoros,
            self._current_cycle,
        )
        return next_type

    def create_timer_record(self, finished_at: datetime, description: str = "") -> TimerRecord:
        reason = FinishReason.COMPLETED if self.is_timer_started and self.is_timer_completed else FinishReason.STOPPED
        return TimerRecord(
            started_at=self._timer.started_at,
            finished_at=finished_at,
            reason=reason,
            session_type=self._timer.session_type,
            duration_minutes=self._timer.initial_duration_minutes,
            description=description,
            pause_records=self._timer.pause_records,
        )

    def create_timer_memento(self, now: datetime | None = None) -> TimerMemento:
        if now is None:
            now = datetime.now()
        return TimerMemento(
            session_type=self._timer.session_type,
            remaining_seconds=self._timer.remaining_seconds,
            timestamp=now,
            state=self._timer.state,
        )

    def initialize_from_today_stats(self, stats: DailyStatistics) -> None:
        self._completed_pomodoros = stats.completed_pomodoros
        self._current_cycle = stats.current_cycle

    def _start(self, minutes: int, now: datetime | None) -> bool:
        if self._timer.is_running:
            return False
        session_type = self._current_session_type
        self._timer.start(minutes, now)
        self._timer.session_type = session_type
        self._current_session_type_minutes = minutes
        self._on_session_started(session_type, minutes)
        return True

    def _complete_work_session(self) -> None:
        if self._current_session_type == SessionType.WORK:
            self._completed_pomodoros += 1
            self._current_cycle += 1

    def _reset_cycle(self) -> None:
        self._current_cycle = 0
        self._current_session_type = SessionType.WORK
