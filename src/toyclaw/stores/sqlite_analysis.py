# src/toyclaw/stores/sqlite_analysis.py
"""SQLite store of upstream product-analysis records."""

import asyncio
import json
import sqlite3
from pathlib import Path

from toyclaw.models import AnalysisRecord, AnalysisStatus, ExtractedFeatures
from toyclaw.stores.base import AnalysisStore


class SQLiteAnalysisStore(AnalysisStore):
    """SQLite-based analysis store.

    The producer side (image analysis) writes with put(); the compliance
    service only reads.
    """

    def __init__(self, db_path: str) -> None:
        """Initialize the SQLite store."""
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        """Create tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS analyses (
                    request_id TEXT PRIMARY KEY,
                    status TEXT NOT NULL,
                    features TEXT
                )
            """)
            conn.commit()

    def put(self, record: AnalysisRecord) -> None:
        """Store an analysis record, overwriting if exists."""
        features = record.features.model_dump_json() if record.features else None
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO analyses (request_id, status, features)
                VALUES (?, ?, ?)
                """,
                (record.request_id, record.status.value, features),
            )
            conn.commit()

    def _get(self, request_id: str) -> AnalysisRecord | None:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT request_id, status, features FROM analyses WHERE request_id = ?",
                (request_id,),
            ).fetchone()
        if row is None:
            return None
        features = ExtractedFeatures.model_validate(json.loads(row[2])) if row[2] else None
        return AnalysisRecord(request_id=row[0], status=AnalysisStatus(row[1]), features=features)

    async def find_by_request_id(self, request_id: str) -> AnalysisRecord | None:
        return await asyncio.to_thread(self._get, request_id)
