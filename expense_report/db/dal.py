"""Data Access Layer for the local key/value store.

Responsibilities
----------------
- Read and write raw string values under well-known keys.
- Keep SQL in one place; callers above this layer deal in Python values.
"""

from __future__ import annotations

from contextlib import closing
from pathlib import Path
import sqlite3
from typing import Optional

UTC_NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

# Storage keys
EXPENSES_KEY = "expense_report"
BUDGET_KEY = "monthly_budget"
LANGUAGE_KEY = "language"
THEME_KEY = "theme"


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    # ------------------------------------------------------------------
    # Key/value access
    def get_value(self, key: str) -> Optional[str]:
        with closing(self._connect()) as conn:
            cur = conn.cursor()
            cur.execute("SELECT value FROM metadata WHERE key = ?", (key,))
            row = cur.fetchone()
            return row["value"] if row else None

    def set_value(self, key: str, value: str) -> None:
        with closing(self._connect()) as conn:
            with conn:
                conn.execute(
                    f"""
                    INSERT INTO metadata (key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = ({UTC_NOW_SQL})
                    """,
                    (key, value),
                )

