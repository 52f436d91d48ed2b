# src/taskdesk/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the key-value backend (JSON file or SQLite),
- wires persistence adapter + task store into AppState and loads saved tasks.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import KeyValueStore
from ..core.state import AppState
from ..storage.json_store import JsonFileKVStore
from ..storage.sqlite_store import SqliteKVStore
from ..tasks.errors import UnknownFilter
from ..tasks.task_models import TaskFilter
from ..tasks.task_persistence import TaskPersistence
from ..tasks.task_store import PersistErrorHandler, TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_path.parent.mkdir(parents=True, exist_ok=True)


def create_kv_store(settings) -> KeyValueStore:
    backend = str(getattr(settings, "storage_backend", "json")).lower()
    quota = int(getattr(settings, "storage_quota_bytes", 0))
    if backend == "sqlite":
        return SqliteKVStore(settings.store_path, quota_bytes=quota)
    return JsonFileKVStore(settings.store_path, quota_bytes=quota)


def _initial_filter(settings) -> TaskFilter:
    try:
        return TaskFilter.parse(getattr(settings, "default_filter", "all"))
    except UnknownFilter:
        logger.warning("Ignoring unknown default filter %r", getattr(settings, "default_filter", None))
        return TaskFilter.ALL


def create_initial_state(
    *,
    settings=None,
    kv_store: KeyValueStore | None = None,
    on_persist_error: PersistErrorHandler | None = None,
) -> AppState:
    """
    Create AppState from the provided settings and load saved tasks.

    Keeping settings and the store injectable makes the app easier to test and
    avoids hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if kv_store is None:
        kv_store = create_kv_store(settings)

    persistence = TaskPersistence(kv_store, key=getattr(settings, "storage_key", "tasks"))
    task_store = TaskStore(persistence, on_persist_error=on_persist_error)
    task_store.load()

    return AppState(
        settings=settings,
        kv_store=kv_store,
        task_store=task_store,
        active_filter=_initial_filter(settings),
    )
