from __future__ import annotations

"""SQLite history store: finished sessions with their pauses, plus user settings."""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterator

from pomodoro_timer.core.models import (
    DailyStatistics,
    FinishReason,
    PauseRecord,
    SessionType,
    TimerRecord,
)
from pomodoro_timer.core.ports import HistoryStore


SCHEMA_VERSION = 1

logger = logging.getLogger(__name__)


def _to_text(value: datetime | None) -> str | None:
    return value.isoformat(timespec="seconds") if value is not None else None


def _from_text(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class Storage(HistoryStore):
    """Wraps the SQLite connection and transactional operations."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        try:
            conn.execute("PRAGMA journal_mode = WAL;")
        except sqlite3.DatabaseError:
            pass
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_db(self) -> None:
        """Create all tables on first launch."""
        with self._transaction() as conn:
            conn.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)")
            row = conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
            if not row:
                conn.execute("INSERT INTO schema_version(version) VALUES (?)", (SCHEMA_VERSION,))
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS timer_records(
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    started_at TEXT NOT NULL,
                    finished_at TEXT NOT NULL,
                    reason TEXT NOT NULL,
                    session_type TEXT NOT NULL,
                    duration_minutes INTEGER NOT NULL,
                    description TEXT NOT NULL DEFAULT ''
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS pause_records(
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    record_id INTEGER NOT NULL,
                    paused_at TEXT NOT NULL,
                    unpaused_at TEXT,
                    sort_order INTEGER NOT NULL DEFAULT 0,
                    FOREIGN KEY(record_id) REFERENCES timer_records(id) ON DELETE CASCADE
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS settings(
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_timer_records_finished ON timer_records(finished_at)")

    def get_setting(self, key: str, default: Any = None) -> Any:
        with self._connect() as conn:
            row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
        if not row:
            return default
        raw = row["value"]
        try:
            return json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            return raw

    def set_setting(self, key: str, value: Any) -> None:
        payload = json.dumps(value)
        with self._transaction() as conn:
            conn.execute(
                "INSERT INTO settings(key, value) VALUES(?, ?) ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                (key, payload),
            )

    def save_record(self, record: TimerRecord) -> int:
        with self._transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO timer_records(started_at, finished_at, reason, session_type, duration_minutes, description)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    _to_text(record.started_at),
                    _to_text(record.finished_at),
                    record.reason.value,
                    record.session_type.value,
                    record.duration_minutes,
                    record.description,
                ),
            )
            record_id = int(cursor.lastrowid)
            for sort_order, pause in enumerate(record.pause_records):
                conn.execute(
                    """
                    INSERT INTO pause_records(record_id, paused_at, unpaused_at, sort_order)
                    VALUES (?, ?, ?, ?)
                    """,
                    (record_id, _to_text(pause.paused_at), _to_text(pause.unpaused_at), sort_order),
                )
        logger.debug("Saved timer record %d: %s", record_id, record)
        return record_id

    def load_all_records(self, limit: int | None = None) -> list[TimerRecord]:
        """Return records most recently finished first, at most `limit` of them."""
        return self._load_records("", (), limit=limit)

    def load_records_by_date(self, day: date) -> list[TimerRecord]:
        return self._load_records("WHERE date(finished_at) = ?", (day.isoformat(),))

    def load_records_by_date_range(self, start: date, end: date) -> list[TimerRecord]:
        """Inclusive on both ends."""
        return self._load_records(
            "WHERE date(finished_at) BETWEEN ? AND ?",
            (start.isoformat(), end.isoformat()),
        )

    def load_today_statistics(self, today: date | None = None) -> DailyStatistics:
        today = today or date.today()
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT COUNT(*) AS c
                FROM timer_records
                WHERE reason = ? AND session_type = ? AND date(finished_at) = ?
                """,
                (FinishReason.COMPLETED.value, SessionType.WORK.value, today.isoformat()),
            ).fetchone()
        stats = DailyStatistics(date=today, completed_pomodoros=int(row["c"] if row else 0))
        logger.debug(
            "Loaded statistics for %s: %d completed pomodoros, cycle: %d",
            today,
            stats.completed_pomodoros,
            stats.current_cycle,
        )
        return stats

    def clear_all_records(self) -> None:
        with self._transaction() as conn:
            conn.execute("DELETE FROM pause_records")
            conn.execute("DELETE FROM timer_records")
        logger.info("Cleared all timer records")

    def _load_records(self, where: str, params: tuple[Any, ...], limit: int | None = None) -> list[TimerRecord]:
        limit_clause = ""
        if limit is not None:
            limit_clause = "LIMIT ?"
            params = (*params, max(0, int(limit)))
        with self._connect() as conn:
            rows = conn.execute(
                f"""
                SELECT id, started_at, finished_at, reason, session_type, duration_minutes, description
                FROM timer_records
                {where}
                ORDER BY finished_at DESC, id DESC
                {limit_clause}
                """,
                params,
            ).fetchall()
            pauses: dict[int, list[PauseRecord]] = {}
            if rows:
                ids = [row["id"] for row in rows]
                placeholders = ",".join("?" for _ in ids)
                pause_rows = conn.execute(
                    f"""
                    SELECT record_id, paused_at, unpaused_at
                    FROM pause_records
                    WHERE record_id IN ({placeholders})
                    ORDER BY record_id ASC, sort_order ASC
                    """,
                    ids,
                ).fetchall()
                for pause_row in pause_rows:
                    pauses.setdefault(pause_row["record_id"], []).append(
                        PauseRecord(
                            paused_at=_from_text(pause_row["paused_at"]),
                            unpaused_at=_from_text(pause_row["unpaused_at"]),
                        )
                    )
        return [
            TimerRecord(
                started_at=_from_text(row["started_at"]),
                finished_at=_from_text(row["finished_at"]),
                reason=FinishReason(row["reason"]),
                session_type=SessionType(row["session_type"]),
                duration_minutes=row["duration_minutes"],
                description=row["description"],
                pause_records=tuple(pauses.get(row["id"], [])),
            )
            for row in rows
        ]
