"""
Life Tracker — Cloud Sync Database.

The server side of cloud sync: one row per user id holding the full JSON
snapshot of that user's most recent save. Rows are created on first save,
overwritten on every later save, and never deleted.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from src.data.models import UserDataRow

logger = logging.getLogger(__name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class UserDataDB:
    """SQLite-backed key-value store: user_id → JSON document."""

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            from src.config import settings
            db_path = settings.DATABASE_PATH

        self._db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Create the user_data table if it doesn't exist."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS user_data (
                    user_id    TEXT PRIMARY KEY,
                    data       TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
        logger.debug("user_data table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_user_data(row: sqlite3.Row) -> UserDataRow:
        return UserDataRow(
            user_id=row["user_id"],
            data=json.loads(row["data"]),
            updated_at=row["updated_at"],
        )

    def save(self, user_id: str, data: dict) -> UserDataRow:
        """Upsert: insert a row for user_id, or replace its data and refresh updated_at."""
        if not user_id:
            raise ValueError("user_id must be a non-empty string")
        if not isinstance(data, dict):
            raise ValueError("data must be a JSON object")

        now = _utc_now()
        encoded = json.dumps(data)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO user_data (user_id, data, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT (user_id)
                DO UPDATE SET data = excluded.data, updated_at = excluded.updated_at
                """,
                (user_id, encoded, now),
            )
        logger.info("Snapshot saved for user '%s' (%d bytes)", user_id, len(encoded))
        return UserDataRow(user_id=user_id, data=data, updated_at=now)

    def get(self, user_id: str) -> UserDataRow | None:
        """Fetch the stored row by exact user_id match."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM user_data WHERE user_id = ?", (user_id,)
            ).fetchone()
        if row is None:
            return None
        return self._row_to_user_data(row)

    def load(self, user_id: str) -> dict | None:
        """Return the stored document for user_id, or None if it was never saved."""
        row = self.get(user_id)
        return row.data if row is not None else None

    def count(self) -> int:
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM user_data").fetchone()[0]
