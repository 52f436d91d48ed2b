# src/taskdesk/tasks/task_stats.py

from __future__ import annotations

from collections.abc import Iterable

from .task_models import Task, TaskStats


def percent(part: int, whole: int) -> int:
    """100 * part / whole rounded half-up; 0 when whole is 0."""
    if whole <= 0:
        return 0
    # integer arithmetic avoids float ties like 0.5 -> 0
    return (200 * part + whole) // (2 * whole)


def compute_stats(tasks: Iterable[Task]) -> TaskStats:
    """Counters over the full collection (search and filter do not apply)."""
    total = 0
    completed = 0
    for t in tasks:
        total += 1
        if t.completed:
            completed += 1
    return TaskStats(total=total, completed=completed, completed_percentage=percent(completed, total))
