from datetime import date, datetime, timedelta

import pytest

from pomodoro_timer.core.errors import InvalidArgumentError
from pomodoro_timer.core.models import (
    ONGOING,
    DailyStatistics,
    FinishReason,
    OpenPause,
    PauseRecord,
    SessionType,
    TimerRecord,
)


T0 = datetime(2026, 1, 5, 9, 0, 0)


def test_session_type_catalog() -> None:
    assert [(t.default_minutes, t.display_name) for t in SessionType] == [
        (25, "Work Session"),
        (5, "Short Break"),
        (15, "Long Break"),
    ]
    assert SessionType.WORK.is_break is False
    assert SessionType.LONG_BREAK.is_break is True
    assert SessionType.WORK.is_custom(25) is False
    assert SessionType.WORK.is_custom(30) is True


def test_pause_record_validation() -> None:
    with pytest.raises(InvalidArgumentError):
        PauseRecord(paused_at=None)
    with pytest.raises(InvalidArgumentError):
        PauseRecord(paused_at=T0, unpaused_at=T0 - timedelta(seconds=1))


def test_open_pause_reports_ongoing() -> None:
    record = PauseRecord(paused_at=T0)

    assert record.is_still_paused
    assert record.pause_duration_seconds == ONGOING
    assert "ongoing" in str(record)


def test_open_pause_closes_into_record() -> None:
    closed = OpenPause(paused_at=T0).close(T0 + timedelta(seconds=42))

    assert closed == PauseRecord(T0, T0 + timedelta(seconds=42))
    assert closed.pause_duration_seconds == 42


def _record(**overrides) -> TimerRecord:
    values = dict(
        started_at=T0,
        finished_at=T0 + timedelta(minutes=25),
        reason=FinishReason.COMPLETED,
        session_type=SessionType.WORK,
        duration_minutes=25,
    )
    values.update(overrides)
    return TimerRecord(**values)


@pytest.mark.parametrize(
    "overrides",
    [
        {"started_at": None},
        {"finished_at": None},
        {"reason": None},
        {"session_type": None},
        {"duration_minutes": 0},
        {"finished_at": T0 - timedelta(seconds=1)},
    ],
)
def test_timer_record_validation(overrides) -> None:
    with pytest.raises(InvalidArgumentError):
        _record(**overrides)


def test_timer_record_pause_totals_skip_open_pauses() -> None:
    record = _record(
        description=None,
        pause_records=[
            PauseRecord(T0 + timedelta(minutes=1), T0 + timedelta(minutes=2)),
            PauseRecord(T0 + timedelta(minutes=5), T0 + timedelta(minutes=5, seconds=30)),
            PauseRecord(T0 + timedelta(minutes=20)),
        ],
    )

    assert record.description == ""
    assert isinstance(record.pause_records, tuple)
    assert record.pause_count == 3
    assert record.total_paused_seconds == 90
    assert record.was_completed and not record.was_stopped


def test_daily_statistics_cycle_is_count_mod_four() -> None:
    assert DailyStatistics(date(2026, 1, 5), 0).current_cycle == 0
    assert DailyStatistics(date(2026, 1, 5), 3).current_cycle == 3
    assert DailyStatistics(date(2026, 1, 5), 4).current_cycle == 0
    assert DailyStatistics(date(2026, 1, 5), 9).current_cycle == 1


def test_daily_statistics_validation_and_helpers() -> None:
    with pytest.raises(InvalidArgumentError):
        DailyStatistics(date(2026, 1, 5), -1)

    today = DailyStatistics.today()
    assert today.completed_pomodoros == 0
    assert today.is_today()
    assert not DailyStatistics.empty(date(2000, 1, 1)).is_today()
