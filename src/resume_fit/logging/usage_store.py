"""SQLite-backed usage log storage."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

from resume_fit.logging.models import UsageLog

DEFAULT_DB_PATH = Path.home() / ".resume-fit" / "usage.db"

_COLUMNS = (
    "id, client_id, timestamp, endpoint, input_tokens, output_tokens, "
    "latency_ms, status_code, estimated_cost_usd, success, error_message"
)


class UsageStore:
    """SQLite-backed store for request usage logs with WAL mode."""

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
                    client_id TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    endpoint TEXT NOT NULL,
                    input_tokens INTEGER NOT NULL DEFAULT 0,
                    output_tokens INTEGER NOT NULL DEFAULT 0,
                    latency_ms INTEGER NOT NULL DEFAULT 0,
                    status_code INTEGER NOT NULL DEFAULT 200,
                    estimated_cost_usd REAL NOT NULL DEFAULT 0.0,
                    success INTEGER NOT NULL DEFAULT 1,
                    error_message TEXT
                )
            """)

    def save_log(self, log: UsageLog) -> None:
        """Persist a usage log entry."""
        with self._connect() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO usage_logs ({_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    log.id,
                    log.client_id,
                    log.timestamp.isoformat(),
                    log.endpoint,
                    log.input_tokens,
                    log.output_tokens,
                    log.latency_ms,
                    log.status_code,
                    log.estimated_cost_usd,
                    1 if log.success else 0,
                    log.error_message,
                ),
            )

    def get_logs(
        self,
        client_id: str | None = None,
        limit: int = 50,
    ) -> list[UsageLog]:
        """Retrieve usage logs newest first, optionally filtered by client_id."""
        with self._connect() as conn:
            if client_id is not None:
                rows = conn.execute(
                    f"SELECT {_COLUMNS} FROM usage_logs WHERE client_id = ? "
                    "ORDER BY timestamp DESC LIMIT ?",
                    (client_id, limit),
                ).fetchall()
            else:
                rows = conn.execute(
                    f"SELECT {_COLUMNS} FROM usage_logs ORDER BY timestamp DESC LIMIT ?",
                    (limit,),
                ).fetchall()
        return [self._row_to_log(row) for row in rows]

    def get_summary(self) -> dict:
        """Aggregate request counts, tokens, latency and cost over all logs."""
        with self._connect() as conn:
            row = conn.execute(
                """SELECT
                       COUNT(*),
                       SUM(input_tokens),
                       SUM(output_tokens),
                       AVG(latency_ms),
                       SUM(estimated_cost_usd),
                       SUM(CASE WHEN success = 1 THEN 1 ELSE 0 END)
                   FROM usage_logs"""
            ).fetchone()
        total = row[0] or 0
        return {
            "total_requests": total,
            "total_input_tokens": row[1] or 0,
            "total_output_tokens": row[2] or 0,
            "avg_latency_ms": round(row[3], 1) if row[3] is not None else None,
            "total_cost_usd": row[4] or 0.0,
            "success_rate": (row[5] / total * 100) if total else 0.0,
        }

    @staticmethod
    def _row_to_log(row: tuple) -> UsageLog:
        return UsageLog(
            id=row[0],
            client_id=row[1],
            timestamp=datetime.fromisoformat(row[2]),
            endpoint=row[3],
            input_tokens=row[4],
            output_tokens=row[5],
            latency_ms=row[6],
            status_code=row[7],
            estimated_cost_usd=row[8],
            success=bool(row[9]),
            error_message=row[10],
        )
