"""SQLite-backed usage log storage."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

from tone_picker.logging.models import UsageLog

DEFAULT_DB_PATH = Path.home() / ".tone-picker" / "usage.db"


class UsageStore:
    """SQLite-backed store for tone adjustment usage logs with WAL mode."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS usage_logs (
                    id TEXT PRIMARY KEY,
                    session_id TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    mode TEXT NOT NULL,
                    formality_level REAL NOT NULL DEFAULT 0,
                    friendliness_level REAL NOT NULL DEFAULT 0,
                    text_length INTEGER NOT NULL DEFAULT 0,
                    cache_hit INTEGER NOT NULL DEFAULT 0,
                    elapsed_seconds REAL NOT NULL DEFAULT 0.0,
                    model TEXT,
                    input_tokens INTEGER NOT NULL DEFAULT 0,
                    output_tokens INTEGER NOT NULL DEFAULT 0,
                    estimated_cost_usd REAL NOT NULL DEFAULT 0.0,
                    success INTEGER NOT NULL DEFAULT 1,
                    error_type TEXT,
                    error_message TEXT
                )
            """)

    def save_log(self, log: UsageLog) -> None:
        """Persist a usage log entry."""
        with self._connect() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO usage_logs
                   (id, session_id, timestamp, mode, formality_level,
                    friendliness_level, text_length, cache_hit, elapsed_seconds,
                    model, input_tokens, output_tokens, estimated_cost_usd,
                    success, error_type, error_message)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    log.id,
                    log.session_id,
                    log.timestamp.isoformat(),
                    log.mode,
                    log.formality_level,
                    log.friendliness_level,
                    log.text_length,
                    1 if log.cache_hit else 0,
                    log.elapsed_seconds,
                    log.model,
                    log.input_tokens,
                    log.output_tokens,
                    log.estimated_cost_usd,
                    1 if log.success else 0,
                    log.error_type,
                    log.error_message,
                ),
            )

    def get_logs(
        self,
        session_id: str | None = None,
        limit: int = 50,
    ) -> list[UsageLog]:
        """Retrieve usage logs, newest first, optionally filtered by session_id."""
        with self._connect() as conn:
            if session_id is not None:
                rows = conn.execute(
                    "SELECT * FROM usage_logs WHERE session_id = ? ORDER BY timestamp DESC LIMIT ?",
                    (session_id, limit),
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM usage_logs ORDER BY timestamp DESC LIMIT ?",
                    (limit,),
                ).fetchall()
        return [self._row_to_log(row) for row in rows]

    def get_summary(self) -> dict:
        """Aggregate totals across all logs."""
        with self._connect() as conn:
            row = conn.execute(
                """SELECT
                       COUNT(*),
                       SUM(cache_hit),
                       SUM(input_tokens),
                       SUM(output_tokens),
                       SUM(estimated_cost_usd),
                       SUM(CASE WHEN success = 1 THEN 1 ELSE 0 END)
                   FROM usage_logs"""
            ).fetchone()
        total = row[0] or 0
        return {
            "total_requests": total,
            "cache_hits": row[1] or 0,
            "total_input_tokens": row[2] or 0,
            "total_output_tokens": row[3] or 0,
            "total_cost_usd": row[4] or 0.0,
            "success_rate": (row[5] / total * 100) if total else 0.0,
        }

    @staticmethod
    def _row_to_log(row: tuple) -> UsageLog:
        return UsageLog(
            id=row[0],
            session_id=row[1],
            timestamp=datetime.fromisoformat(row[2]),
            mode=row[3],
            formality_level=row[4],
            friendliness_level=row[5],
            text_length=row[6],
            cache_hit=bool(row[7]),
            elapsed_seconds=row[8],
            model=row[9],
            input_tokens=row[10],
            output_tokens=row[11],
            estimated_cost_usd=row[12],
            success=bool(row[13]),
            error_type=row[14],
            error_message=row[15],
        )
