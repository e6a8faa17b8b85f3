from datetime import date, datetime, timedelta

import pytest

from pomodoro_timer.core.errors import InvalidStateError
from pomodoro_timer.core.models import DailyStatistics, FinishReason, SessionType, TimerState
from pomodoro_timer.core.session import Session, next_session_type


T0 = datetime(2026, 1, 5, 9, 0, 0)


def _complete(session: Session, minutes: int = 1) -> SessionType:
    assert session.start_custom_session(minutes, now=T0)
    for _ in range(minutes * 60):
        session.tick()
    return session.handle_timer_completion()


def test_defaults() -> None:
    session = Session()

    assert session.completed_pomodoros == 0
    assert session.current_cycle == 0
    assert session.current_session_type == SessionType.WORK
    assert session.is_timer_running is False
    assert session.is_timer_paused is False
    assert session.is_timer_started is False


def test_default_work_session_runs_25_minutes() -> None:
    session = Session()
    assert session.start_session() is True
    assert session.current_session_type_minutes == 25

    early = [session.tick() for _ in range(1499)]
    assert not any(early)
    assert session.is_timer_running

    assert session.tick() is True
    assert session.handle_timer_completion() == SessionType.SHORT_BREAK
    assert session.completed_pomodoros == 1
    assert session.current_cycle == 1


def test_start_notifies_handler_once() -> None:
    calls: list[tuple[SessionType, int]] = []
    session = Session(on_session_started=lambda t, m: calls.append((t, m)))

    assert session.start_session() is True
    assert session.start_session() is False
    assert session.start_custom_session(10) is False

    assert calls == [(SessionType.WORK, 25)]


def test_custom_session_keeps_current_type() -> None:
    calls: list[tuple[SessionType, int]] = []
    session = Session(on_session_started=lambda t, m: calls.append((t, m)))

    assert session.start_custom_session(40) is True
    assert session.current_session_type_minutes == 40
    assert session.create_timer_memento().remaining_seconds == 2400
    assert calls == [(SessionType.WORK, 40)]


def test_rotation_through_a_full_cycle() -> None:
    session = Session()

    for expected_cycle in (1, 2, 3):
        assert _complete(session) == SessionType.SHORT_BREAK
        assert session.current_cycle == expected_cycle
        assert _complete(session) == SessionType.WORK

    assert _complete(session) == SessionType.LONG_BREAK
    assert session.current_cycle == 0
    assert session.completed_pomodoros == 4

    assert _complete(session) == SessionType.WORK
    assert session.completed_pomodoros == 4
    assert session.current_cycle == 0


def test_breaks_do_not_count_as_pomodoros() -> None:
    session = Session()
    _complete(session)
    assert session.current_session_type == SessionType.SHORT_BREAK

    _complete(session)

    assert session.completed_pomodoros == 1
    assert session.current_cycle == 1


def test_completed_timer_stays_completed_until_next_start() -> None:
    session = Session()
    _complete(session)

    memento = session.create_timer_memento()
    assert memento.state == TimerState.COMPLETED
    assert memento.session_type == SessionType.SHORT_BREAK
    assert session.start_session() is True
    assert session.current_session_type_minutes == 5


def test_handle_completion_requires_completed_timer() -> None:
    session = Session()
    with pytest.raises(InvalidStateError):
        session.handle_timer_completion()

    session.start_session()
    session.tick()
    with pytest.raises(InvalidStateError):
        session.handle_timer_completion()


def test_reset_keeps_pomodoro_count() -> None:
    session = Session()
    _complete(session)
    session.start_session()

    session.reset_timer()

    assert session.completed_pomodoros == 1
    assert session.current_cycle == 0
    assert session.current_session_type == SessionType.WORK
    assert session.timer_session_type == SessionType.WORK
    assert session.create_timer_memento().state == TimerState.IDLE


def test_pause_and_resume_report_whether_applied() -> None:
    session = Session()
    assert session.pause_timer() is False
    assert session.resume_timer() is False

    session.start_session(now=T0)
    assert session.resume_timer() is False
    assert session.pause_timer(now=T0) is True
    assert session.is_timer_paused
    assert session.pause_timer() is False
    assert session.resume_timer(now=T0 + timedelta(seconds=10)) is True
    assert session.is_timer_running


def test_seeded_cycle_drives_rotation() -> None:
    session = Session()
    session.initialize_from_today_stats(DailyStatistics(date=date(2026, 1, 5), completed_pomodoros=4))

    assert session.completed_pomodoros == 4
    assert session.current_cycle == 0
    assert _complete(session) == SessionType.SHORT_BREAK
    assert session.completed_pomodoros == 5


def test_seeded_third_pomodoro_leads_to_long_break() -> None:
    session = Session()
    session.initialize_from_today_stats(DailyStatistics(date=date(2026, 1, 5), completed_pomodoros=3))

    assert _complete(session) == SessionType.LONG_BREAK
    assert session.current_cycle == 0


def test_record_for_completed_session() -> None:
    session = Session()
    session.start_custom_session(1, now=T0)
    session.pause_timer(now=T0 + timedelta(seconds=10))
    session.resume_timer(now=T0 + timedelta(seconds=40))
    for _ in range(60):
        session.tick()

    record = session.create_timer_record(T0 + timedelta(seconds=90))

    assert record.reason == FinishReason.COMPLETED
    assert record.session_type == SessionType.WORK
    assert record.started_at == T0
    assert record.duration_minutes == 1
    assert record.pause_count == 1
    assert record.total_paused_seconds == 30


def test_record_for_stopped_session() -> None:
    session = Session()
    session.start_session(now=T0)
    session.tick()

    record = session.create_timer_record(T0 + timedelta(minutes=3))

    assert record.reason == FinishReason.STOPPED
    assert record.was_stopped
    assert record.duration_minutes == 25


def test_was_timer_stopped() -> None:
    session = Session()
    assert session.was_timer_stopped is False

    session.start_session(now=T0)
    assert session.was_timer_stopped is False

    session.pause_timer(now=T0)
    assert session.was_timer_stopped is True


def test_memento_snapshot() -> None:
    session = Session()
    session.start_session(now=T0)
    session.tick()
    now = T0 + timedelta(seconds=1)

    memento = session.create_timer_memento(now=now)

    assert memento.session_type == SessionType.WORK
    assert memento.remaining_seconds == 1499
    assert memento.timestamp == now
    assert memento.state == TimerState.RUNNING


def test_next_session_type_rule() -> None:
    assert next_session_type(SessionType.WORK, 0) == SessionType.SHORT_BREAK
    assert next_session_type(SessionType.WORK, 3) == SessionType.SHORT_BREAK
    assert next_session_type(SessionType.WORK, 4) == SessionType.LONG_BREAK
    assert next_session_type(SessionType.SHORT_BREAK, 4) == SessionType.WORK
    assert next_session_type(SessionType.LONG_BREAK, 0) == SessionType.WORK
