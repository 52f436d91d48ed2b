# tests/test_task_store.py

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from taskdesk.tasks.errors import PersistenceFailed, TaskNotFound
from taskdesk.tasks.task_persistence import TaskPersistence
from taskdesk.tasks.task_store import MonotonicIdFactory, TaskStore

from .fakes import FrozenClock, InMemoryKVStore, TickingClock


def test_add_prepends_and_persists(store: TaskStore, kv: InMemoryKVStore) -> None:
    first = store.add("First")
    second = store.add("Write Report", "monthly", "2026-10-20")

    tasks = store.all()
    assert tasks[0] == second
    assert tasks[0].title == "Write Report"
    assert tasks[0].completed is False
    assert tasks[0].updated_at is None
    assert tasks[0].created_at.endswith("Z")
    assert tasks[1] == first
    assert first.id != second.id

    saved = json.loads(kv.data["tasks"])
    assert [r["title"] for r in saved] == ["Write Report", "First"]
    assert saved[0]["dueDate"] == "2026-10-20"
    assert "updatedAt" not in saved[0]


def test_all_returns_a_snapshot(store: TaskStore) -> None:
    store.add("A")
    snapshot = store.all()
    store.add("B")
    assert len(snapshot) == 1
    assert isinstance(snapshot, tuple)


def test_update_overwrites_fields_and_sets_updated_at(store: TaskStore) -> None:
    task = store.add("Old", "old desc", "2026-10-01")
    updated = store.update(task.id, "New", "", "")

    assert updated.id == task.id
    assert updated.title == "New"
    assert updated.description == ""
    assert updated.due_date == ""
    assert updated.created_at == task.created_at
    assert updated.updated_at is not None
    assert store.get(task.id) == updated


def test_update_missing_raises_and_keeps_collection(store: TaskStore, kv: InMemoryKVStore) -> None:
    store.add("Keep me")
    before = store.all()
    writes = kv.writes

    with pytest.raises(TaskNotFound):
        store.update(12345, "x", "y", "")

    assert store.all() == before
    assert kv.writes == writes


def test_toggle_twice_restores_completion(store: TaskStore) -> None:
    task = store.add("Toggle me")

    once = store.toggle_completed(task.id)
    twice = store.toggle_completed(task.id)

    assert once.completed is True
    assert twice.completed is False
    assert once.updated_at is not None
    assert twice.updated_at is not None
    assert once.updated_at != twice.updated_at


def test_updated_at_advances_within_one_millisecond(kv: InMemoryKVStore) -> None:
    clock = FrozenClock(datetime(2026, 10, 18, 9, 0, 0, 557_400, tzinfo=UTC))
    store = TaskStore(TaskPersistence(kv, clock=clock), clock=clock)
    task = store.add("Toggle me")

    once = store.toggle_completed(task.id)
    twice = store.toggle_completed(task.id)
    edited = store.update(task.id, "Renamed", "", "")

    assert task.created_at == "2026-10-18T09:00:00.557Z"
    assert once.updated_at == "2026-10-18T09:00:00.558Z"
    assert twice.updated_at == "2026-10-18T09:00:00.559Z"
    assert edited.updated_at == "2026-10-18T09:00:00.560Z"


def test_toggle_missing_raises(store: TaskStore) -> None:
    with pytest.raises(TaskNotFound) as exc_info:
        store.toggle_completed("nope")
    assert exc_info.value.task_id == "nope"


def test_remove_existing_and_missing(store: TaskStore) -> None:
    a = store.add("A")
    b = store.add("B")

    assert store.remove(a.id) is True
    assert [t.id for t in store.all()] == [b.id]

    before = store.all()
    assert store.remove(999) is False
    assert store.all() == before


def test_ids_unique_under_frozen_clock(kv: InMemoryKVStore) -> None:
    clock = FrozenClock(datetime(2026, 10, 18, tzinfo=UTC))
    store = TaskStore(TaskPersistence(kv, clock=clock), clock=clock)
    ids = [store.add(f"t{i}").id for i in range(50)]
    assert len(set(ids)) == 50
    assert ids == sorted(ids)


def test_ids_continue_above_loaded_ids(kv: InMemoryKVStore) -> None:
    far_future_id = 10**15
    kv.data["tasks"] = json.dumps([{"id": far_future_id, "title": "Old", "createdAt": "2026-01-01T00:00:00.000Z"}])
    clock = TickingClock()
    store = TaskStore(TaskPersistence(kv, clock=clock), clock=clock)
    store.load()

    assert store.add("New").id == far_future_id + 1


def test_id_factory_is_strictly_monotonic() -> None:
    factory = MonotonicIdFactory(FrozenClock(datetime(2026, 10, 18, tzinfo=UTC)))
    a, b, c = factory(), factory(), factory()
    assert a < b < c
    assert a == int(datetime(2026, 10, 18, tzinfo=UTC).timestamp() * 1000)


def test_persist_failure_keeps_in_memory_state(kv: InMemoryKVStore, clock: TickingClock) -> None:
    seen: list[PersistenceFailed] = []
    store = TaskStore(TaskPersistence(kv, clock=clock), clock=clock, on_persist_error=seen.append)
    store.add("Saved")
    kv.fail_writes = True

    task = store.add("Only in memory")

    assert store.all()[0] == task
    assert len(store) == 2
    assert isinstance(store.last_persist_error, PersistenceFailed)
    assert len(seen) == 1
    assert len(json.loads(kv.data["tasks"])) == 1

    kv.fail_writes = False
    store.toggle_completed(task.id)
    assert store.last_persist_error is None
    assert len(json.loads(kv.data["tasks"])) == 2


def test_load_restores_saved_collection(kv: InMemoryKVStore, clock: TickingClock) -> None:
    first = TaskStore(TaskPersistence(kv, clock=clock), clock=clock)
    a = first.add("A", "desc", "2026-10-19")
    first.toggle_completed(a.id)
    first.add("B")

    second = TaskStore(TaskPersistence(kv, clock=clock), clock=clock)
    assert second.load() == first.all()


def test_load_malformed_data_gives_empty_store(kv: InMemoryKVStore, clock: TickingClock) -> None:
    kv.data["tasks"] = "{not json"
    store = TaskStore(TaskPersistence(kv, clock=clock), clock=clock)
    assert store.load() == ()
    assert len(store) == 0
