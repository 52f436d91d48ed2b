# src/taskdesk/tasks/task_query.py

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from datetime import UTC, date, datetime, time, timedelta

from .task_models import Task, TaskFilter

_EPOCH = datetime.min.replace(tzinfo=UTC)
_DAY = timedelta(days=1)

THIS_WEEK_DAYS = 7


def _local_now() -> datetime:
    return datetime.now().astimezone()


def parse_timestamp(raw: str) -> datetime | None:
    """Parse an ISO timestamp; naive values are taken as UTC."""
    try:
        dt = datetime.fromisoformat(raw)
    except (TypeError, ValueError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def parse_due_date(raw: str) -> date | None:
    if not raw:
        return None
    try:
        return date.fromisoformat(raw.strip()[:10])
    except ValueError:
        return None


def matches_keyword(task: Task, needle: str) -> bool:
    """needle must already be trimmed and case-folded."""
    return needle in task.title.casefold() or needle in task.description.casefold()


def days_until(due: date, now: datetime) -> int:
    """Whole days from now until the start of the due date, rounded up."""
    due_start = datetime.combine(due, time.min, tzinfo=now.tzinfo)
    return math.ceil((due_start - now) / _DAY)


def _filter_predicate(name: TaskFilter, now: datetime) -> Callable[[Task], bool] | None:
    if name is TaskFilter.PENDING:
        return lambda t: not t.completed
    if name is TaskFilter.COMPLETED:
        return lambda t: t.completed
    if name is TaskFilter.TODAY:
        today = now.date().isoformat()
        return lambda t: t.due_date == today
    if name is TaskFilter.THIS_WEEK:

        def due_this_week(t: Task) -> bool:
            due = parse_due_date(t.due_date)
            if due is None:
                return False
            return 0 <= days_until(due, now) <= THIS_WEEK_DAYS

        return due_this_week
    return None


def _created_key(task: Task) -> datetime:
    return parse_timestamp(task.created_at) or _EPOCH


def visible_tasks(
    tasks: Iterable[Task],
    keyword: str = "",
    filter_name: str | TaskFilter = TaskFilter.ALL,
    *,
    now: datetime | None = None,
) -> tuple[Task, ...]:
    """
    Tasks to display for a keyword and a named filter, newest first.

    - keyword: trimmed, case-insensitive substring of title or description
    - filter_name: all | pending | completed | today | this-week
    - now: reference time for date filters; sampled once per call
      (defaults to the local wall clock). Naive values are taken as local time.

    Ties on created_at keep their input order. Unknown filter names raise
    UnknownFilter.
    """
    flt = TaskFilter.parse(filter_name)
    if now is None:
        now = _local_now()
    elif now.tzinfo is None:
        now = now.astimezone()

    result = list(tasks)

    needle = (keyword or "").strip().casefold()
    if needle:
        result = [t for t in result if matches_keyword(t, needle)]

    predicate = _filter_predicate(flt, now)
    if predicate is not None:
        result = [t for t in result if predicate(t)]

    result.sort(key=_created_key, reverse=True)
    return tuple(result)
