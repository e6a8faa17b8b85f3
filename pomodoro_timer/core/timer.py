from __future__ import annotations

from datetime import datetime

from pomodoro_timer.core.errors import InvalidArgumentError, InvalidStateError
from pomodoro_timer.core.models import OpenPause, PauseRecord, SessionType, TimerState


class CountdownTimer:
    """Second-by-second countdown detached from any UI framework.

    The owner calls tick() once per elapsed second. Pause intervals are
    recorded so a finished session can be reported with its pause history.
    """

    def __init__(self) -> None:
        self._remaining_seconds = 0
        self._initial_duration_minutes = 0
        self._state = TimerState.IDLE
        self._session_type = SessionType.WORK
        self._started_at: datetime | None = None
        self._stopped_at: datetime | None = None
        self._open_pause: OpenPause | None = None
        self._pause_records: list[PauseRecord] = []

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def initial_duration_minutes(self) -> int:
        return self._initial_duration_minutes

    @property
    def session_type(self) -> SessionType:
        return self._session_type

    @session_type.setter
    def session_type(self, session_type: SessionType) -> None:
        self._session_type = session_type

    @property
    def started_at(self) -> datetime | None:
        return self._started_at

    @property
    def stopped_at(self) -> datetime | None:
        return self._stopped_at

    @property
    def pause_records(self) -> tuple[PauseRecord, ...]:
        return tuple(self._pause_records)

    @property
    def has_open_pause(self) -> bool:
        return self._open_pause is not None

    @property
    def is_running(self) -> bool:
        return self._state == TimerState.RUNNING

    @property
    def is_paused(self) -> bool:
        return self._state == TimerState.PAUSED

    @property
    def is_completed(self) -> bool:
        return self._state == TimerState.COMPLETED

    def start(self, minutes: int, now: datetime | None = None) -> None:
        if minutes <= 0:
            raise InvalidArgumentError("Minutes must be greater than 0")
        if self._state == TimerState.RUNNING:
            raise InvalidStateError("Timer is already running")
        if now is None:
            now = datetime.now()
        self._remaining_seconds = minutes * 60
        self._initial_duration_minutes = minutes
        self._state = TimerState.RUNNING
        self._started_at = now
        self._clear_history()

    def pause(self, now: datetime | None = None) -> None:
        if self._state != TimerState.RUNNING:
            raise InvalidStateError("Timer is not running")
        if now is None:
            now = datetime.now()
        self._state = TimerState.PAUSED
        self._open_pause = OpenPause(paused_at=now)

    def resume(self, now: datetime | None = None) -> None:
        if self._state != TimerState.PAUSED:
            raise InvalidStateError("Timer is not paused")
        if self._remaining_seconds <= 0:
            return
        if now is None:
            now = datetime.now()
        self._state = TimerState.RUNNING
        self._close_open_pause(now)

    def stop(self, now: datetime | None = None) -> None:
        if self._started_at is not None:
            if now is None:
                now = datetime.now()
            self._stopped_at = now
            self._close_open_pause(now)
        self._state = TimerState.IDLE
        self._remaining_seconds = 0

    def reset(self, minutes: int) -> None:
        if minutes <= 0:
            raise InvalidArgumentError("Minutes must be greater than 0")
        self._remaining_seconds = minutes * 60
        self._state = TimerState.READY

    def tick(self) -> bool:
        """Count one second down; returns True only on the tick that reaches zero."""
        if self._state != TimerState.RUNNING:
            return False
        if self._remaining_seconds <= 0:
            return False

        self._remaining_seconds -= 1
        if self._remaining_seconds == 0:
            self._state = TimerState.COMPLETED
            return True
        return False

    def _close_open_pause(self, now: datetime) -> None:
        if self._open_pause is None:
            return
        self._pause_records.append(self._open_pause.close(now))
        self._open_pause = None

    def _clear_history(self) -> None:
        self._pause_records.clear()
        self._stopped_at = None
        self._open_pause = None
