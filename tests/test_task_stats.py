# tests/test_task_stats.py

from __future__ import annotations

import pytest

from taskdesk.tasks.task_models import Task, TaskStats
from taskdesk.tasks.task_stats import compute_stats, percent


def _tasks(*completed: bool) -> list[Task]:
    return [Task(id=i, title=f"t{i}", completed=c) for i, c in enumerate(completed)]


def test_empty_collection() -> None:
    assert compute_stats([]) == TaskStats(total=0, completed=0, completed_percentage=0)


def test_two_of_three_rounds_to_67() -> None:
    stats = compute_stats(_tasks(True, True, False))
    assert stats.total == 3
    assert stats.completed_percentage == 67
    assert stats.pending == 1


@pytest.mark.parametrize(
    ("part", "whole", "expected"),
    [(0, 5, 0), (5, 5, 100), (1, 3, 33), (1, 2, 50), (1, 8, 13), (3, 8, 38), (0, 0, 0)],
)
def test_percent_rounds_half_up(part: int, whole: int, expected: int) -> None:
    assert percent(part, whole) == expected
