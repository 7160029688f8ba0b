"""SQLite storage backend for SmartReply persistence.

Keeps all keys in a single ``kv`` table of one database file. The
connection is shared across threads and serialized with a lock.
"""

import json
import sqlite3
import time
from pathlib import Path
from threading import Lock
from typing import Any, List, Optional

from smartreply.errors import PersistenceError
from smartreply.logging import get_logger
from smartreply.persistence.interface import KeyValueBackend

logger = get_logger(__name__, component="sqlite_backend")


class SQLiteBackend(KeyValueBackend):
    """SQLite-based key-value storage.

    Args:
        db_path: Database file. A directory gets ``smartreply.db`` inside it.
        wal_mode: Enable write-ahead logging.
    """

    name = "sqlite"

    def __init__(self, db_path: Path | str, wal_mode: bool = True):
        db_path = Path(db_path)
        if db_path.is_dir() or not db_path.suffix:
            db_path = db_path / "smartreply.db"
        self.db_path = db_path
        self.wal_mode = wal_mode
        self._db: Optional[sqlite3.Connection] = None
        self._lock = Lock()

    def _connection(self) -> sqlite3.Connection:
        if self._db is not None:
            return self._db
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            db = sqlite3.connect(str(self.db_path), check_same_thread=False)
            if self.wal_mode:
                db.execute("PRAGMA journal_mode=WAL")
                db.execute("PRAGMA synchronous=NORMAL")
            db.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
            """)
            db.commit()
        except (OSError, sqlite3.Error) as e:
            raise PersistenceError(f"Failed to open {self.db_path}: {e}", operation="connect") from e
        logger.info("sqlite_initialized", path=str(self.db_path))
        self._db = db
        return db

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            try:
                row = self._connection().execute(
                    "SELECT value FROM kv WHERE key = ?", (key,)
                ).fetchone()
            except sqlite3.Error as e:
                raise PersistenceError(str(e), operation="get", key=key) from e
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except ValueError as e:
            raise PersistenceError(f"Corrupt value: {e}", operation="get", key=key) from e

    def set(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Value is not JSON-serializable: {e}", operation="set", key=key) from e
        with self._lock:
            try:
                db = self._connection()
                db.execute(
                    """
                    INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, payload, time.time()),
                )
                db.commit()
            except sqlite3.Error as e:
                raise PersistenceError(str(e), operation="set", key=key) from e

    def delete(self, key: str) -> bool:
        with self._lock:
            try:
                db = self._connection()
                cursor = db.execute("DELETE FROM kv WHERE key = ?", (key,))
                db.commit()
            except sqlite3.Error as e:
                raise PersistenceError(str(e), operation="delete", key=key) from e
        return cursor.rowcount > 0

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            try:
                rows = self._connection().execute(
                    "SELECT key FROM kv WHERE substr(key, 1, ?) = ? ORDER BY key",
                    (len(prefix), prefix),
                ).fetchall()
            except sqlite3.Error as e:
                raise PersistenceError(str(e), operation="keys") from e
        return [row[0] for row in rows]

    def close(self) -> None:
        with self._lock:
            if self._db is not None:
                self._db.close()
                self._db = None
