# src/taskdesk/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import cast

from ..core.state import AppState
from ..tasks.errors import TaskNotFound, UnknownFilter
from ..tasks.task_models import Task, TaskFilter, TaskId
from ..tasks.task_query import parse_due_date, visible_tasks
from ..tasks.task_stats import compute_stats

CommandConfirmer = Callable[[str], bool]


@dataclass(slots=True)
class CommandIO:
    """Front-end hooks a command may use (only confirmation for now)."""

    confirm: CommandConfirmer | None = None


CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandIO], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

FIELD_SEP = "|"
CLEAR_MARK = "-"


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        io: CommandIO | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, io or CommandIO())

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def parse_task_id(raw: str) -> TaskId:
    """Numeric ids are ints on disk; anything else is a legacy string id."""
    s = raw.strip()
    if s.lstrip("-").isdigit():
        return int(s)
    return s


def find_task(state: AppState, raw: str) -> Task:
    """
    Look a task up by the id typed on the command line.

    Digits are tried as an int first, then as a legacy string id ("123").
    """
    task_id = parse_task_id(raw)
    try:
        return state.task_store.get(task_id)
    except TaskNotFound:
        if isinstance(task_id, int):
            return state.task_store.get(raw.strip())
        raise


def split_fields(args: Sequence[str]) -> list[str]:
    """'Buy milk | 2 litres | 2026-10-20' -> ['Buy milk', '2 litres', '2026-10-20']"""
    return [p.strip() for p in " ".join(args).split(FIELD_SEP)]


def format_task(task: Task) -> str:
    mark = "[x]" if task.completed else "[ ]"
    line = f"{mark} {task.id}  {task.title}"
    if task.due_date:
        line += f"  (due {task.due_date})"
    if task.description:
        line += f"\n      {task.description}"
    return line


def format_task_list(tasks: Sequence[Task]) -> str:
    if not tasks:
        return "No matching tasks."
    return "\n".join(format_task(t) for t in tasks)


def _view_header(state: AppState, shown: int) -> str:
    parts = [f"filter={state.active_filter.value}"]
    if state.keyword:
        parts.append(f"search={state.keyword!r}")
    stats = compute_stats(state.task_store.all())
    return (
        f"Tasks ({', '.join(parts)}): showing {shown} of {stats.total}, "
        f"{stats.completed_percentage}% completed"
    )


def render_view(state: AppState) -> str:
    tasks = visible_tasks(state.task_store.all(), state.keyword, state.active_filter)
    return _view_header(state, len(tasks)) + "\n" + format_task_list(tasks)


def _with_save_warning(state: AppState, reply: str) -> str:
    err = state.task_store.last_persist_error
    if err is None:
        return reply
    return f"{reply}\nWarning: changes are kept in memory only, saving failed ({err})."


def _validate_due(raw: str) -> str | None:
    """Returns an error message, or None if raw is empty or a valid YYYY-MM-DD date."""
    if raw and parse_due_date(raw) is None:
        return f"Invalid due date {raw!r}. Use YYYY-MM-DD."
    return None


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    backend = getattr(settings, "storage_backend", "?")
    path = getattr(settings, "store_path", "?")
    key = getattr(settings, "storage_key", "tasks")
    return (
        "Status:\n"
        f"  Storage: {backend} at {path} (key={key})\n"
        f"  Tasks: {state.task_store.count()}\n"
        f"  Search: {state.keyword or '(none)'}\n"
        f"  Filter: {state.active_filter.value}"
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add title
    /add title | description
    /add title | description | YYYY-MM-DD
    """
    fields = split_fields(args) + ["", ""]
    title, description, due_date = fields[0], fields[1], fields[2]
    if not title:
        return "Usage: /add title [| description [| YYYY-MM-DD]]. Title is required."
    err = _validate_due(due_date)
    if err:
        return err

    task = state.task_store.add(title, description, due_date)
    return _with_save_warning(state, f"Added task {task.id}: {task.title}")


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit id new title | new description | YYYY-MM-DD

    Empty parts keep the current value; '-' clears description or due date.
    """
    if not args:
        return "Usage: /edit id [title] [| description [| YYYY-MM-DD]]"

    try:
        current = find_task(state, args[0])
    except TaskNotFound:
        return f"Task {args[0]} not found."

    fields = split_fields(args[1:]) + ["", ""]
    title = fields[0] or current.title

    description = current.description
    if fields[1] == CLEAR_MARK:
        description = ""
    elif fields[1]:
        description = fields[1]

    due_date = current.due_date
    if fields[2] == CLEAR_MARK:
        due_date = ""
    elif fields[2]:
        err = _validate_due(fields[2])
        if err:
            return err
        due_date = fields[2]

    task = state.task_store.update(current.id, title, description, due_date)
    return _with_save_warning(state, f"Updated task {task.id}: {task.title}")


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done id"
    try:
        task = state.task_store.toggle_completed(find_task(state, args[0]).id)
    except TaskNotFound:
        return f"Task {args[0]} not found."
    status = "completed" if task.completed else "pending"
    return _with_save_warning(state, f"Task {task.id} marked {status}.")


def cmd_rm(state: AppState, args: list[str], io: CommandIO) -> str:
    """
    /rm id      -> asks for confirmation when the front end can ask
    /rm id -y   -> no confirmation
    """
    ids = [a for a in args if a not in ("-y", "--yes")]
    if not ids:
        return "Usage: /rm id [-y]"

    try:
        task = find_task(state, ids[0])
    except TaskNotFound:
        return f"Task {ids[0]} not found."

    skip_confirm = len(ids) != len(args) or not getattr(state.settings, "confirm_delete", True)
    if not skip_confirm and io.confirm is not None:
        if not io.confirm(f"Delete task {task.id} ({task.title})?"):
            logger.debug("Delete cancelled id=%s", task.id)
            return "Cancelled."

    state.task_store.remove(task.id)
    return _with_save_warning(state, f"Deleted task {task.id}.")


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show id"
    try:
        task = find_task(state, args[0])
    except TaskNotFound:
        return f"Task {args[0]} not found."
    return (
        f"Task {task.id}\n"
        f"  Title: {task.title}\n"
        f"  Description: {task.description or '(none)'}\n"
        f"  Due: {task.due_date or '(none)'}\n"
        f"  Completed: {'yes' if task.completed else 'no'}\n"
        f"  Created: {task.created_at}\n"
        f"  Updated: {task.updated_at or '(never)'}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_view(state)


def cmd_search(state: AppState, args: list[str]) -> str:
    """/search words -> set keyword; /search -> clear it."""
    state.keyword = " ".join(args).strip()
    return render_view(state)


def cmd_filter(state: AppState, args: list[str]) -> str:
    if not args:
        names = ", ".join(f.value for f in TaskFilter)
        return f"Current filter: {state.active_filter.value}. Available: {names}."
    try:
        state.active_filter = TaskFilter.parse(args[0])
    except UnknownFilter:
        names = ", ".join(f.value for f in TaskFilter)
        return f"Unknown filter: {args[0]}. Available: {names}."
    return render_view(state)


def cmd_stats(state: AppState, args: list[str]) -> str:
    stats = compute_stats(state.task_store.all())
    return (
        f"Total: {stats.total}  Completed: {stats.completed}  "
        f"Pending: {stats.pending}  Done: {stats.completed_percentage}%"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show storage and view settings.")
registry.register("add", cmd_add, help_text="Add a task: /add title [| description [| YYYY-MM-DD]].")
registry.register(
    "edit",
    cmd_edit,
    help_text="Edit a task: /edit id [title] [| description [| YYYY-MM-DD]] ('-' clears).",
)
registry.register("done", cmd_done, help_text="Toggle completion: /done id.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm id [-y].", aliases=["delete", "del"])
registry.register("show", cmd_show, help_text="Show one task: /show id.")
registry.register("list", cmd_list, help_text="List tasks for the current search and filter.", aliases=["ls"])
registry.register("search", cmd_search, help_text="Search title/description: /search words (empty clears).")
registry.register(
    "filter",
    cmd_filter,
    help_text="Filter: /filter all | pending | completed | today | this-week.",
)
registry.register("stats", cmd_stats, help_text="Total tasks and completed percentage.")
