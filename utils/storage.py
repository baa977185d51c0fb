"""Durable key-value storage on top of the SQLite data layer.

Values are stored JSON-encoded so that integers (owner ids) come back as
integers and strings (templates) come back as strings. All public methods are
coroutines; the blocking SQLite work runs in a worker thread.
"""
from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from utils.database import Database

logger = logging.getLogger(__name__)

DB_FILE_NAME = "storage.db"


class StorageError(RuntimeError):
    """Raised when the durable store cannot complete a read or write."""


def _now_utc() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


class Storage:
    def __init__(self, db: Database) -> None:
        self._db = db

    @classmethod
    def init(cls, directory: str | Path) -> "Storage":
        """Open (creating if needed) the store living in ``directory``."""
        path = Path(directory)
        try:
            path.mkdir(parents=True, exist_ok=True)
            db = Database(str(path / DB_FILE_NAME))
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Cannot open storage at {path}: {exc}") from exc
        return cls(db)

    def close(self) -> None:
        self._db.close()

    # -- sync primitives -----------------------------------------------------

    def _get(self, key: str) -> Any:
        row = self._db.fetchone("SELECT value FROM kv_store WHERE key = ?", (key,))
        if row is None:
            return None
        return json.loads(row["value"])

    def _set(self, key: str, value: Any) -> None:
        self._db.execute(
            "INSERT OR REPLACE INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)",
            (key, json.dumps(value, ensure_ascii=False), _now_utc()),
        )
        self._db.commit()

    def _remove(self, key: str) -> None:
        self._db.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        self._db.commit()

    # -- async API -----------------------------------------------------------

    async def _run(self, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except (sqlite3.Error, ValueError) as exc:
            raise StorageError(f"{func.__name__.lstrip('_')} failed for {args[0]!r}: {exc}") from exc

    async def get_item(self, key: str) -> Any:
        return await self._run(self._get, key)

    async def set_item(self, key: str, value: Any) -> None:
        await self._run(self._set, key, value)

    async def remove_item(self, key: str) -> None:
        await self._run(self._remove, key)
