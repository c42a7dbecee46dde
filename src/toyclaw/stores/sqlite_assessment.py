# src/toyclaw/stores/sqlite_assessment.py
"""SQLite store of compliance assessments."""

import asyncio
import json
import sqlite3
from datetime import datetime
from pathlib import Path

from toyclaw.models import AssessmentRecord
from toyclaw.stores.base import AssessmentStore

_COLUMNS = (
    "assessment_id, request_id, target_market, report, summary, "
    "retrieved_chunk_ids, provider, model_name, created_at"
)


class SQLiteAssessmentStore(AssessmentStore):
    """SQLite-based assessment store. The report is kept as raw JSON text."""

    def __init__(self, db_path: str) -> None:
        """Initialize the SQLite store."""
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        """Create tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS assessments (
                    assessment_id TEXT PRIMARY KEY,
                    request_id TEXT NOT NULL,
                    target_market TEXT NOT NULL,
                    report TEXT NOT NULL,
                    summary TEXT NOT NULL,
                    retrieved_chunk_ids TEXT NOT NULL,
                    provider TEXT,
                    model_name TEXT,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_request_id ON assessments(request_id)"
            )
            conn.commit()

    def _insert(self, record: AssessmentRecord) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                f"INSERT INTO assessments ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    record.assessment_id,
                    record.request_id,
                    record.target_market,
                    json.dumps(record.report, ensure_ascii=False),
                    record.summary,
                    json.dumps(record.retrieved_chunk_ids),
                    record.provider,
                    record.model_name,
                    record.created_at.isoformat(),
                ),
            )
            conn.commit()

    def _get(self, assessment_id: str) -> AssessmentRecord | None:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM assessments WHERE assessment_id = ?",
                (assessment_id,),
            ).fetchone()
        if row is None:
            return None
        return AssessmentRecord(
            assessment_id=row[0],
            request_id=row[1],
            target_market=row[2],
            report=json.loads(row[3]),
            summary=row[4],
            retrieved_chunk_ids=json.loads(row[5]),
            provider=row[6],
            model_name=row[7],
            created_at=datetime.fromisoformat(row[8]),
        )

    async def create(self, record: AssessmentRecord) -> AssessmentRecord:
        await asyncio.to_thread(self._insert, record)
        return record

    async def find_by_id(self, assessment_id: str) -> AssessmentRecord | None:
        return await asyncio.to_thread(self._get, assessment_id)
