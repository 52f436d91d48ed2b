# src/taskdesk/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import UTC, datetime, timedelta

from ..core.ports import TaskPersistencePort
from .errors import PersistenceFailed, TaskNotFound
from .task_models import Task, TaskId, utc_now_iso

logger = logging.getLogger(__name__)

PersistErrorHandler = Callable[[PersistenceFailed], None]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class MonotonicIdFactory:
    """
    Integer ids derived from the millisecond clock, strictly increasing.

    Two tasks created within the same millisecond still get distinct ids
    because the next id is max(now_ms, last + 1).
    """

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock
        self._last = 0

    def seed(self, ids: Iterable[TaskId]) -> None:
        """Make sure future ids are above every integer id already in use."""
        for tid in ids:
            if isinstance(tid, int) and not isinstance(tid, bool) and tid > self._last:
                self._last = tid

    def __call__(self) -> int:
        now_ms = int(self._clock().timestamp() * 1000)
        nid = max(now_ms, self._last + 1)
        self._last = nid
        return nid


class TaskStore:
    """
    In-memory owner of the task collection.

    The list is kept most-recent-first: add() inserts at the front.
    Every mutator persists through the persistence adapter. A failed save is
    non-fatal: the mutation is kept in memory, the error is logged, stored in
    last_persist_error and handed to on_persist_error (if provided).

    Callers only ever see tuples of frozen Task objects.
    """

    def __init__(
        self,
        persistence: TaskPersistencePort,
        *,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], TaskId] | None = None,
        on_persist_error: PersistErrorHandler | None = None,
    ) -> None:
        self._persistence = persistence
        self._clock = clock
        self._id_factory = id_factory if id_factory is not None else MonotonicIdFactory(clock)
        self._tasks: list[Task] = []
        self._last_stamp: datetime | None = None
        self.on_persist_error = on_persist_error
        self.last_persist_error: PersistenceFailed | None = None

    # ---- read API ----

    def load(self) -> tuple[Task, ...]:
        """Replace the in-memory collection with what the store holds (never raises)."""
        self._tasks = list(self._persistence.load())
        if isinstance(self._id_factory, MonotonicIdFactory):
            self._id_factory.seed(t.id for t in self._tasks)
        logger.info("TaskStore loaded total=%d", len(self._tasks))
        return self.all()

    def all(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def count(self) -> int:
        return len(self._tasks)

    def get(self, task_id: TaskId) -> Task:
        return self._tasks[self._index_of(task_id)]

    def _index_of(self, task_id: TaskId) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        raise TaskNotFound(task_id)

    def _now_iso(self) -> str:
        """Millisecond UTC timestamp, strictly later than the previous one issued."""
        now = self._clock().astimezone(UTC)
        now = now.replace(microsecond=now.microsecond // 1000 * 1000)
        if self._last_stamp is not None and now <= self._last_stamp:
            now = self._last_stamp + timedelta(milliseconds=1)
        self._last_stamp = now
        return utc_now_iso(now)

    # ---- mutators ----

    def add(self, title: str, description: str = "", due_date: str = "") -> Task:
        """
        Create a task at the front of the list.

        Precondition: title is non-empty. The UI boundary validates it;
        it is not re-checked here.
        """
        task = Task(
            id=self._id_factory(),
            title=title,
            description=description,
            due_date=due_date,
            completed=False,
            created_at=self._now_iso(),
        )
        self._tasks.insert(0, task)
        logger.debug("Task added id=%s due=%s", task.id, due_date or "-")
        self._persist()
        return task

    def update(self, task_id: TaskId, title: str, description: str, due_date: str) -> Task:
        idx = self._index_of(task_id)
        task = replace(
            self._tasks[idx],
            title=title,
            description=description,
            due_date=due_date,
            updated_at=self._now_iso(),
        )
        self._tasks[idx] = task
        logger.debug("Task updated id=%s", task_id)
        self._persist()
        return task

    def remove(self, task_id: TaskId) -> bool:
        """Delete a task. Returns False (and changes nothing) if the id is unknown."""
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        removed = len(self._tasks) != before
        logger.debug("Task remove id=%s removed=%s", task_id, removed)
        self._persist()
        return removed

    def toggle_completed(self, task_id: TaskId) -> Task:
        idx = self._index_of(task_id)
        current = self._tasks[idx]
        task = replace(current, completed=not current.completed, updated_at=self._now_iso())
        self._tasks[idx] = task
        logger.debug("Task toggled id=%s completed=%s", task_id, task.completed)
        self._persist()
        return task

    # ---- persistence ----

    def _persist(self) -> bool:
        try:
            self._persistence.save(self._tasks)
        except PersistenceFailed as e:
            self.last_persist_error = e
            logger.warning("Saving tasks failed; keeping in-memory state: %s", e)
            if self.on_persist_error is not None:
                self.on_persist_error(e)
            return False
        self.last_persist_error = None
        return True
