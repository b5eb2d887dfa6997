"""SQLite store for completed analyses and their history."""

from __future__ import annotations

import re
import sqlite3
import uuid
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel

from resume_fit.errors import NotFoundError
from resume_fit.models.input import AnalysisInput
from resume_fit.models.result import CanonicalResult

DEFAULT_DB_PATH = Path.home() / ".resume-fit" / "analyses.db"
DEFAULT_HISTORY_LIMIT = 20
MAX_HISTORY_LIMIT = 100
UNTITLED_POSITION = "Untitled Position"

_TITLE_PATTERN = re.compile(r"^(?:Job Title|Position|Role):\s*(.+?)\s*$", re.IGNORECASE | re.MULTILINE)
_COMPANY_PATTERN = re.compile(r"(?:\bat|Company):\s*(.+?)\s*$", re.IGNORECASE | re.MULTILINE)


class StoredAnalysis(BaseModel):
    id: str
    created_at: datetime
    resume_text: str
    job_description: str
    result: CanonicalResult


class HistorySummary(BaseModel):
    id: str
    job_title: str
    company: str | None = None
    match_score: int
    ats_score: int
    created_at: datetime


def extract_job_title(job_description: str) -> str:
    match = _TITLE_PATTERN.search(job_description)
    return match.group(1) if match else UNTITLED_POSITION


def extract_company(job_description: str) -> str | None:
    match = _COMPANY_PATTERN.search(job_description)
    return match.group(1) if match else None


class AnalysisStore:
    """Persists canonical results together with the input they came from."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS analyses (
                    id TEXT PRIMARY KEY,
                    created_at TEXT NOT NULL,
                    resume_text TEXT NOT NULL,
                    job_description TEXT NOT NULL,
                    result_json TEXT NOT NULL,
                    match_score INTEGER NOT NULL,
                    ats_score INTEGER NOT NULL
                )
            """)

    def save(self, analysis_input: AnalysisInput, result: CanonicalResult) -> str:
        """Store a result with its input text. Returns the new analysis id."""
        analysis_id = str(uuid.uuid4())
        with self._connect() as conn:
            conn.execute(
                """INSERT INTO analyses
                   (id, created_at, resume_text, job_description, result_json,
                    match_score, ats_score)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    analysis_id,
                    datetime.now().isoformat(),
                    analysis_input.resume_text,
                    analysis_input.job_description,
                    result.model_dump_json(),
                    result.match_score,
                    result.ats_score,
                ),
            )
        return analysis_id

    def get(self, analysis_id: str) -> StoredAnalysis:
        with self._connect() as conn:
            row = conn.execute(
                """SELECT id, created_at, resume_text, job_description, result_json
                   FROM analyses WHERE id = ?""",
                (analysis_id,),
            ).fetchone()
        if row is None:
            raise NotFoundError(f"Analysis not found: {analysis_id}")
        return StoredAnalysis(
            id=row[0],
            created_at=datetime.fromisoformat(row[1]),
            resume_text=row[2],
            job_description=row[3],
            result=CanonicalResult.model_validate_json(row[4]),
        )

    def history(
        self,
        limit: int = DEFAULT_HISTORY_LIMIT,
        offset: int = 0,
    ) -> list[HistorySummary]:
        """Return analysis summaries, newest first."""
        limit = max(1, min(limit, MAX_HISTORY_LIMIT))
        offset = max(0, offset)
        with self._connect() as conn:
            rows = conn.execute(
                """SELECT id, created_at, job_description, match_score, ats_score
                   FROM analyses ORDER BY created_at DESC, rowid DESC LIMIT ? OFFSET ?""",
                (limit, offset),
            ).fetchall()
        return [
            HistorySummary(
                id=row[0],
                created_at=datetime.fromisoformat(row[1]),
                job_title=extract_job_title(row[2]),
                company=extract_company(row[2]),
                match_score=row[3],
                ats_score=row[4],
            )
            for row in rows
        ]

    def delete(self, analysis_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM analyses WHERE id = ?", (analysis_id,))
            return cursor.rowcount > 0
