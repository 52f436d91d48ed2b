# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdesk.cli.bootstrap import create_initial_state
from taskdesk.core.state import AppState
from taskdesk.tasks.task_persistence import TaskPersistence
from taskdesk.tasks.task_store import TaskStore

from .fakes import InMemoryKVStore, TickingClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="taskdesk-test",
        log_level="DEBUG",
        log_file=tmp_path / "data" / "taskdesk.log",
        data_dir=tmp_path / "data",
        storage_backend="json",
        store_path=tmp_path / "data" / "store.json",
        storage_key="tasks",
        storage_quota_bytes=0,
        default_filter="all",
        confirm_delete=True,
    )


@pytest.fixture()
def kv() -> InMemoryKVStore:
    return InMemoryKVStore()


@pytest.fixture()
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture()
def store(kv: InMemoryKVStore, clock: TickingClock) -> TaskStore:
    s = TaskStore(TaskPersistence(kv, clock=clock), clock=clock)
    s.load()
    return s


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired through the real bootstrap.

    NOTE: the JSON file store is real here (under tmp_path) because the
    round trip through disk is part of what we want to test.
    """
    return create_initial_state(settings=settings)
