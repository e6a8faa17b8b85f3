from __future__ import annotations

"""Value types shared by the countdown timer, the session and the history store."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from pomodoro_timer.core.errors import InvalidArgumentError


ONGOING = -1
POMODOROS_PER_CYCLE = 4


class SessionType(str, Enum):
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def default_minutes(self) -> int:
        return _DEFAULT_MINUTES[self]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def is_break(self) -> bool:
        return self is not SessionType.WORK

    def is_custom(self, minutes: int) -> bool:
        return self.default_minutes != minutes


_DEFAULT_MINUTES = {
    SessionType.WORK: 25,
    SessionType.SHORT_BREAK: 5,
    SessionType.LONG_BREAK: 15,
}

_DISPLAY_NAMES = {
    SessionType.WORK: "Work Session",
    SessionType.SHORT_BREAK: "Short Break",
    SessionType.LONG_BREAK: "Long Break",
}


class TimerState(str, Enum):
    IDLE = "idle"
    # Time is set but not counting; only reachable through CountdownTimer.reset().
    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class FinishReason(str, Enum):
    COMPLETED = "completed"
    STOPPED = "stopped"


@dataclass(frozen=True)
class PauseRecord:
    """One pause interval; `unpaused_at` is None while the pause is still open."""

    paused_at: datetime
    unpaused_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.paused_at is None:
            raise InvalidArgumentError("paused_at cannot be None")
        if self.unpaused_at is not None and self.paused_at > self.unpaused_at:
            raise InvalidArgumentError("paused_at cannot be after unpaused_at")

    @property
    def is_still_paused(self) -> bool:
        return self.unpaused_at is None

    @property
    def pause_duration_seconds(self) -> int:
        if self.unpaused_at is None:
            return ONGOING
        return int((self.unpaused_at - self.paused_at).total_seconds())

    def __str__(self) -> str:
        duration = "ongoing" if self.is_still_paused else f"{self.pause_duration_seconds}s"
        return f"PauseRecord(paused_at={self.paused_at.isoformat()}, duration={duration})"


@dataclass(frozen=True)
class OpenPause:
    """A pause that has started but not ended yet."""

    paused_at: datetime

    def close(self, unpaused_at: datetime) -> PauseRecord:
        return PauseRecord(paused_at=self.paused_at, unpaused_at=unpaused_at)


@dataclass(frozen=True)
class TimerMemento:
    session_type: SessionType
    remaining_seconds: int
    timestamp: datetime
    state: TimerState


@dataclass(frozen=True)
class TimerRecord:
    """Finished (completed or stopped) session together with its pause history."""

    started_at: datetime
    finished_at: datetime
    reason: FinishReason
    session_type: SessionType
    duration_minutes: int
    description: str = ""
    pause_records: tuple[PauseRecord, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.started_at is None:
            raise InvalidArgumentError("started_at cannot be None")
        if self.finished_at is None:
            raise InvalidArgumentError("finished_at cannot be None")
        if self.reason is None:
            raise InvalidArgumentError("reason cannot be None")
        if self.session_type is None:
            raise InvalidArgumentError("session_type cannot be None")
        if self.duration_minutes <= 0:
            raise InvalidArgumentError("duration_minutes must be greater than 0")
        if self.started_at > self.finished_at:
            raise InvalidArgumentError("started_at cannot be after finished_at")
        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "description", self.description or "")
        object.__setattr__(self, "pause_records", tuple(self.pause_records or ()))

    @property
    def was_completed(self) -> bool:
        return self.reason == FinishReason.COMPLETED

    @property
    def was_stopped(self) -> bool:
        return self.reason == FinishReason.STOPPED

    @property
    def pause_count(self) -> int:
        return len(self.pause_records)

    @property
    def total_paused_seconds(self) -> int:
        return sum(p.pause_duration_seconds for p in self.pause_records if not p.is_still_paused)


@dataclass(frozen=True)
class DailyStatistics:
    date: date
    completed_pomodoros: int = 0

    def __post_init__(self) -> None:
        if self.date is None:
            raise InvalidArgumentError("date cannot be None")
        if self.completed_pomodoros < 0:
            raise InvalidArgumentError("completed_pomodoros cannot be negative")

    @property
    def current_cycle(self) -> int:
        # Approximation: assumes no WORK session was abandoned mid-cycle today.
        return self.completed_pomodoros % POMODOROS_PER_CYCLE

    @classmethod
    def empty(cls, day: date) -> DailyStatistics:
        return cls(date=day, completed_pomodoros=0)

    @classmethod
    def today(cls) -> DailyStatistics:
        return cls.empty(date.today())

    def is_today(self) -> bool:
        return self.date == date.today()
