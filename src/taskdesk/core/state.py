# src/taskdesk/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_models import TaskFilter
from ..tasks.task_store import TaskStore
from .ports import KeyValueStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    kv_store: KeyValueStore
    task_store: TaskStore

    # View state owned by the front end (search box + active filter button).
    keyword: str = ""
    active_filter: TaskFilter = TaskFilter.ALL
