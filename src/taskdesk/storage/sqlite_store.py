# src/taskdesk/storage/sqlite_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path

from .kv_store import DEFAULT_QUOTA_BYTES, KVStoreError, StorageQuotaExceeded

logger = logging.getLogger(__name__)


class SqliteKVStore:
    """
    SQLite-backed key-value store.

    One row per key:
    - kv(key TEXT PRIMARY KEY, value TEXT, updated_at REAL)

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path, *, quota_bytes: int = DEFAULT_QUOTA_BYTES) -> None:
        self._db_path = Path(db_path)
        self._quota_bytes = int(quota_bytes)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SqliteKVStore ready db=%s quota=%s", self._db_path, self._quota_bytes)

    @property
    def path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def get(self, key: str) -> str | None:
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise KVStoreError(f"Cannot open {self._db_path}: {e}") from e
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return str(row["value"]) if row else None
        except sqlite3.Error as e:
            raise KVStoreError(f"Cannot read key {key!r}: {e}") from e
        finally:
            conn.close()

    def set(self, key: str, value: str) -> None:
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise KVStoreError(f"Cannot open {self._db_path}: {e}") from e
        try:
            if self._quota_bytes > 0:
                # length() counts characters; the quota is checked in UTF-8 bytes.
                cur = conn.execute(
                    "SELECT COALESCE(SUM(length(CAST(key AS BLOB)) + length(CAST(value AS BLOB))), 0) "
                    "FROM kv WHERE key != ?",
                    (key,),
                )
                (others,) = cur.fetchone()
                needed = int(others) + len(key.encode("utf-8")) + len(value.encode("utf-8"))
                if needed > self._quota_bytes:
                    raise StorageQuotaExceeded(needed, self._quota_bytes)

            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, time.time()),
            )
            conn.commit()
            logger.debug("SqliteKVStore set key=%s bytes=%d", key, len(value))
        except sqlite3.Error as e:
            raise KVStoreError(f"Cannot write key {key!r}: {e}") from e
        finally:
            conn.close()
