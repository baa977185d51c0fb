"""SQLite database manager — key-value schema & connection handling."""
from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path

logger = logging.getLogger(__name__)

_SCHEMA_VERSION = 1

_SCHEMA_SQL = """
-- Durable key-value pairs (values are JSON-encoded)
CREATE TABLE IF NOT EXISTS kv_store (
    key            TEXT PRIMARY KEY,
    value          TEXT NOT NULL,
    updated_at     TEXT
);

-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_meta (
    key   TEXT PRIMARY KEY,
    value TEXT
);
"""


class Database:
    """Thin wrapper around SQLite for the bot's data layer."""

    def __init__(self, db_path: str = ".persistence/storage.db") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        self._conn: sqlite3.Connection | None = None
        self._ensure_schema()

    # -- connection helpers --------------------------------------------------

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
        return self._conn

    def _ensure_schema(self) -> None:
        with self._lock:
            conn = self._get_conn()
            conn.executescript(_SCHEMA_SQL)
            conn.execute(
                "INSERT OR IGNORE INTO schema_meta (key, value) VALUES (?, ?)",
                ("version", str(_SCHEMA_VERSION)),
            )
            conn.commit()
            logger.info("Database schema ensured at %s (v%s)", self._db_path, _SCHEMA_VERSION)

    def close(self) -> None:
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None

    # -- generic helpers -----------------------------------------------------

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        with self._lock:
            return self._get_conn().execute(sql, params)

    def commit(self) -> None:
        with self._lock:
            self._get_conn().commit()

    def fetchone(self, sql: str, params: tuple = ()) -> dict | None:
        with self._lock:
            row = self._get_conn().execute(sql, params).fetchone()
            return dict(row) if row else None
