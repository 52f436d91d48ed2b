# src/taskdesk/tasks/task_persistence.py

"""
Persistence adapter: task list <-> opaque key-value store.

The whole collection is stored as one JSON array under a single key.
Records keep the camelCase field names of the original storage format and
carry no schema version, so loading must tolerate missing fields:

- missing/empty title       -> UNTITLED_TASK
- missing description       -> ""
- missing dueDate           -> ""
- completed                 -> coerced to bool
- missing createdAt         -> load time
- missing or duplicate id   -> fresh integer id
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace
from datetime import datetime
from typing import Any

from ..core.ports import KeyValueStore
from ..storage.kv_store import KVStoreError
from .errors import DeserializationError, PersistenceFailed
from .task_models import UNTITLED_TASK, Task, TaskId, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "tasks"


def _coerce_id(raw: Any) -> TaskId | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str) and raw.strip():
        return raw
    return None


def _text(raw: Any, default: str = "") -> str:
    if not raw:
        return default
    return raw if isinstance(raw, str) else str(raw)


def normalize_record(raw: Mapping[str, Any], *, now_iso: str) -> Task:
    """Build a Task from one persisted record, filling defaults. The id may be None."""
    updated = raw.get("updatedAt")
    return Task(
        id=_coerce_id(raw.get("id")),  # type: ignore[arg-type]
        title=_text(raw.get("title"), UNTITLED_TASK),
        description=_text(raw.get("description")),
        due_date=_text(raw.get("dueDate")),
        completed=bool(raw.get("completed")),
        created_at=_text(raw.get("createdAt"), now_iso),
        updated_at=updated if isinstance(updated, str) and updated else None,
    )


def decode_tasks(raw: str, *, now_iso: str | None = None) -> list[Task]:
    """
    Decode a serialized collection.

    Raises DeserializationError when the payload is not a JSON array.
    Individual malformed elements are skipped, not fatal.
    """
    if now_iso is None:
        now_iso = utc_now_iso()

    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as e:
        raise DeserializationError(f"Invalid JSON in task storage: {e}") from e

    if not isinstance(data, list):
        raise DeserializationError(f"Task storage holds {type(data).__name__}, expected a list")

    tasks: list[Task] = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            logger.warning("Skipping task record #%d: not an object (%s)", i, type(item).__name__)
            continue
        tasks.append(normalize_record(item, now_iso=now_iso))

    return _ensure_unique_ids(tasks)


def _ensure_unique_ids(tasks: list[Task]) -> list[Task]:
    int_ids = [t.id for t in tasks if isinstance(t.id, int)]
    next_id = max(int_ids, default=0) + 1

    seen: set[TaskId] = set()
    out: list[Task] = []
    for t in tasks:
        task = t
        if t.id is None or t.id in seen:
            task = replace(t, id=next_id)
            logger.info("Assigned id=%s to task record with id=%r", next_id, t.id)
            next_id += 1
        seen.add(task.id)
        out.append(task)
    return out


def encode_tasks(tasks: Sequence[Task]) -> str:
    return json.dumps([t.to_record() for t in tasks], ensure_ascii=False)


class TaskPersistence:
    """
    Reads and writes the task collection under one fixed key.

    - load() never raises: storage and decode errors degrade to "no data"
    - save() raises PersistenceFailed when the store rejects the write
    """

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._kv = kv
        self._key = key
        self._clock = clock

    @property
    def key(self) -> str:
        return self._key

    def _now_iso(self) -> str:
        return utc_now_iso(self._clock() if self._clock else None)

    def load(self) -> list[Task]:
        try:
            raw = self._kv.get(self._key)
        except (KVStoreError, OSError):
            logger.exception("Failed to read tasks from storage key=%s", self._key)
            return []

        if raw is None:
            logger.info("No saved tasks under key=%s", self._key)
            return []

        try:
            tasks = decode_tasks(raw, now_iso=self._now_iso())
        except DeserializationError:
            logger.exception("Discarding unreadable task data under key=%s", self._key)
            return []

        logger.info("Loaded %d tasks from key=%s", len(tasks), self._key)
        return tasks

    def save(self, tasks: Sequence[Task]) -> None:
        try:
            payload = encode_tasks(tasks)
        except (TypeError, ValueError) as e:
            raise PersistenceFailed(f"Cannot serialize tasks: {e}") from e

        try:
            self._kv.set(self._key, payload)
        except (KVStoreError, OSError) as e:
            raise PersistenceFailed(str(e)) from e

        logger.debug("Saved %d tasks to key=%s", len(tasks), self._key)
