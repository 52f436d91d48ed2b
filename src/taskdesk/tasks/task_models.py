# src/taskdesk/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum

from .errors import UnknownFilter

TaskId = int | str

UNTITLED_TASK = "Untitled task"


def utc_now_iso(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a trailing 'Z'."""
    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TaskFilter(StrEnum):
    """
    Named predicates narrowing the visible task set.

    Values are the user-facing names accepted by /filter.
    """

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"
    TODAY = "today"
    THIS_WEEK = "this-week"

    @classmethod
    def parse(cls, raw: str | TaskFilter | None) -> TaskFilter:
        if raw is None:
            return cls.ALL
        if isinstance(raw, TaskFilter):
            return raw
        name = raw.strip().lower().replace("_", "-")
        if not name:
            return cls.ALL
        try:
            return cls(name)
        except ValueError:
            raise UnknownFilter(raw) from None


@dataclass(frozen=True, slots=True)
class Task:
    id: TaskId
    title: str
    description: str = ""
    due_date: str = ""
    completed: bool = False
    created_at: str = ""
    updated_at: str | None = None

    def to_record(self) -> dict[str, object]:
        """Flat persisted shape (camelCase keys, fixed for compatibility)."""
        record: dict[str, object] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "dueDate": self.due_date,
            "completed": self.completed,
            "createdAt": self.created_at,
        }
        if self.updated_at is not None:
            record["updatedAt"] = self.updated_at
        return record


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    completed_percentage: int

    @property
    def pending(self) -> int:
        return self.total - self.completed
