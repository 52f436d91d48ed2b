# src/taskdesk/tasks/errors.py

from __future__ import annotations


class TaskDeskError(Exception):
    """Base class for task list errors."""


class TaskNotFound(TaskDeskError, LookupError):
    """A mutation or lookup referenced an id that is not in the store."""

    def __init__(self, task_id: object) -> None:
        super().__init__(f"Task {task_id!r} not found")
        self.task_id = task_id


class DeserializationError(TaskDeskError, ValueError):
    """Persisted data could not be decoded into a task collection."""


class PersistenceFailed(TaskDeskError):
    """
    The underlying store rejected a write.

    Non-fatal: the in-memory collection stays the source of truth
    until the next successful save.
    """


class UnknownFilter(TaskDeskError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown filter: {name!r}")
        self.name = name
