from datetime import date, datetime, timedelta

from pomodoro_timer.core.models import FinishReason, PauseRecord, SessionType, TimerRecord
from pomodoro_timer.data.storage import Storage


def _storage(tmp_path) -> Storage:
    storage = Storage(tmp_path / "pomodoro.db")
    storage.init_db()
    return storage


def _record(finished_at: datetime, reason=FinishReason.COMPLETED, session_type=SessionType.WORK, pauses=()) -> TimerRecord:
    return TimerRecord(
        started_at=finished_at - timedelta(minutes=session_type.default_minutes),
        finished_at=finished_at,
        reason=reason,
        session_type=session_type,
        duration_minutes=session_type.default_minutes,
        pause_records=pauses,
    )


def test_init_db_creates_file(tmp_path) -> None:
    db = tmp_path / "nested" / "pomodoro.db"
    storage = Storage(db)
    storage.init_db()
    storage.init_db()
    assert db.exists()


def test_set_get_setting(tmp_path) -> None:
    storage = _storage(tmp_path)
    storage.set_setting("volume", 0)
    storage.set_setting("volume", 3)
    assert storage.get_setting("volume") == 3
    assert storage.get_setting("missing", "x") == "x"


def test_save_and_load_record_with_pauses(tmp_path) -> None:
    storage = _storage(tmp_path)
    finished = datetime(2026, 1, 5, 10, 0, 0)
    pauses = (
        PauseRecord(finished - timedelta(minutes=20), finished - timedelta(minutes=18)),
        PauseRecord(finished - timedelta(minutes=10), finished - timedelta(minutes=9)),
    )
    original = _record(finished, pauses=pauses)

    record_id = storage.save_record(original)

    assert record_id > 0
    assert storage.load_all_records() == [original]


def test_records_are_newest_first(tmp_path) -> None:
    storage = _storage(tmp_path)
    first = _record(datetime(2026, 1, 5, 9, 30))
    second = _record(datetime(2026, 1, 5, 9, 40), session_type=SessionType.SHORT_BREAK)
    storage.save_record(first)
    storage.save_record(second)

    assert storage.load_all_records() == [second, first]


def test_load_by_date_and_range(tmp_path) -> None:
    storage = _storage(tmp_path)
    days = [datetime(2026, 1, d, 12, 0) for d in (3, 4, 5, 6)]
    for finished in days:
        storage.save_record(_record(finished))

    by_date = storage.load_records_by_date(date(2026, 1, 4))
    by_range = storage.load_records_by_date_range(date(2026, 1, 4), date(2026, 1, 5))

    assert [r.finished_at for r in by_date] == [days[1]]
    assert [r.finished_at for r in by_range] == [days[2], days[1]]


def test_today_statistics_count_completed_work_only(tmp_path) -> None:
    storage = _storage(tmp_path)
    day = date(2026, 1, 5)
    noon = datetime(2026, 1, 5, 12, 0)
    for i in range(5):
        storage.save_record(_record(noon + timedelta(minutes=30 * i)))
    storage.save_record(_record(noon, reason=FinishReason.STOPPED))
    storage.save_record(_record(noon, session_type=SessionType.SHORT_BREAK))
    storage.save_record(_record(datetime(2026, 1, 4, 12, 0)))

    stats = storage.load_today_statistics(day)

    assert stats.date == day
    assert stats.completed_pomodoros == 5
    assert stats.current_cycle == 1


def test_today_statistics_empty_database(tmp_path) -> None:
    stats = _storage(tmp_path).load_today_statistics()
    assert stats.completed_pomodoros == 0
    assert stats.is_today()


def test_clear_all_records(tmp_path) -> None:
    storage = _storage(tmp_path)
    finished = datetime(2026, 1, 5, 10, 0)
    storage.save_record(_record(finished, pauses=(PauseRecord(finished - timedelta(minutes=5), finished),)))

    storage.clear_all_records()

    assert storage.load_all_records() == []
    with storage._connect() as conn:  # noqa: SLF001 - tests may inspect DB directly
        count = conn.execute("SELECT COUNT(*) AS c FROM pause_records").fetchone()["c"]
    assert count == 0


def test_load_all_records_limit_keeps_newest(tmp_path) -> None:
    storage = _storage(tmp_path)
    finished = [datetime(2026, 1, 5, 9, 0) + timedelta(hours=h) for h in range(3)]
    for when in finished:
        storage.save_record(_record(when))

    assert [r.finished_at for r in storage.load_all_records(limit=2)] == [finished[2], finished[1]]
    assert storage.load_all_records(limit=0) == []
    assert len(storage.load_all_records()) == 3
