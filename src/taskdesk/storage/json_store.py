# src/taskdesk/storage/json_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

from .kv_store import DEFAULT_QUOTA_BYTES, KVStoreError, check_quota

logger = logging.getLogger(__name__)


class JsonFileKVStore:
    """
    Key-value store kept in a single JSON object on disk.

    Writes go to a temp file first and are moved into place with os.replace,
    so a crash mid-write leaves the previous file intact.
    """

    def __init__(self, path: str | Path, *, quota_bytes: int = DEFAULT_QUOTA_BYTES) -> None:
        self._path = Path(path)
        self._quota_bytes = int(quota_bytes)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("JsonFileKVStore ready path=%s quota=%s", self._path, self._quota_bytes)

    @property
    def path(self) -> Path:
        return self._path

    def close(self) -> None:
        """Compatibility hook for shutdown (no open handles)."""
        return

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError) as e:
            raise KVStoreError(f"Cannot read {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise KVStoreError(f"Store file {self._path} does not hold a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, entries: dict[str, str]) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(entries, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise KVStoreError(f"Cannot write {self._path}: {e}") from e

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        try:
            entries = self._read_all()
        except KVStoreError:
            logger.warning("Store file %s unreadable; overwriting it.", self._path)
            entries = {}

        check_quota(entries, key, value, self._quota_bytes)
        entries[key] = value
        self._write_all(entries)
        logger.debug("JsonFileKVStore set key=%s bytes=%d", key, len(value))
