# src/tickbox/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from ..tasks.errors import TaskError
from ..tasks.task_models import Task
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

SEPARATOR = "================"

EXIT_OK = 0
EXIT_UNKNOWN_COMMAND = 1
EXIT_USAGE = 2


class UsageError(Exception):
    """Command was recognized but its arguments were not."""


class CommandContext:
    """
    What a command handler gets to work with.

    The store is opened lazily, so commands like `help` never read the
    backing file.
    """

    def __init__(self, open_store: Callable[[], TaskStore]) -> None:
        self._open_store = open_store
        self._store: TaskStore | None = None

    @property
    def store(self) -> TaskStore:
        if self._store is None:
            self._store = self._open_store()
        return self._store

    @property
    def store_opened(self) -> bool:
        return self._store is not None


CommandHandler = Callable[[CommandContext, list[str]], str]


@dataclass(frozen=True, slots=True)
class Command:
    name: str
    handler: CommandHandler
    help_text: str
    usage: str


@dataclass(frozen=True, slots=True)
class CommandResult:
    text: str
    exit_code: int = EXIT_OK


class CommandRegistry:
    """Maps command names (and aliases) to handlers; one command per invocation."""

    def __init__(self, prog: str = "tickbox") -> None:
        self.prog = prog
        self._commands: dict[str, Command] = {}
        self._order: list[str] = []

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        usage: str = "",
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        command = Command(name=key, handler=handler, help_text=help_text, usage=usage or key)
        self._commands[key] = command
        self._order.append(key)
        for alias in aliases:
            self._commands[alias.lower()] = command

    def get(self, name: str) -> Command | None:
        return self._commands.get(name.lower())

    def handle(self, ctx: CommandContext, name: str | None, args: list[str]) -> CommandResult:
        if not name:
            return CommandResult(f"No command given.\n\n{self.build_help()}", EXIT_UNKNOWN_COMMAND)

        command = self.get(name)
        if command is None:
            logger.debug("Unknown command %r", name)
            return CommandResult(
                f"Invalid command: {name}. Use '{self.prog} help' for usage information.",
                EXIT_UNKNOWN_COMMAND,
            )

        try:
            text = command.handler(ctx, args)
        except UsageError as e:
            return CommandResult(f"{e}\nUsage: {self.prog} {command.usage}", EXIT_USAGE)

        if ctx.store_opened and not ctx.store.last_save_ok:
            text += f"\nWarning: could not save tasks to {ctx.store.task_file.path}; this change is not on disk."
        return CommandResult(text, EXIT_OK)

    def build_help(self) -> str:
        width = max((len(self._commands[n].usage) for n in self._order), default=0)
        lines = [
            f"{self.prog}: a small to-do list for the terminal",
            "",
            "Usage:",
            f"  {self.prog} [--file PATH] <command> [args]",
            "",
            "Commands:",
        ]
        for name in self._order:
            cmd = self._commands[name]
            lines.append(f"  {cmd.usage.ljust(width)}  {cmd.help_text}")
        lines += [
            "",
            "Examples:",
            f'  {self.prog} add "Buy groceries"',
            f"  {self.prog} list",
            f"  {self.prog} complete 1",
            f"  {self.prog} delete 2",
            f"  {self.prog} delete-completed",
        ]
        return "\n".join(lines)


registry = CommandRegistry()


def format_ts(ts: datetime) -> str:
    return ts.isoformat(timespec="seconds")


def _marker(task: Task) -> str:
    return "[x]" if task.completed else "[ ]"


def _no_args(args: list[str]) -> None:
    if args:
        raise UsageError(f"Unexpected arguments: {' '.join(args)}")


def _parse_id(args: list[str]) -> int:
    if len(args) != 1:
        raise UsageError("Expected exactly one task id.")
    try:
        task_id = int(args[0])
    except ValueError:
        raise UsageError(f"Task id must be a number, got {args[0]!r}.") from None
    if task_id < 1:
        raise UsageError(f"Task id must be positive, got {task_id}.")
    return task_id


def cmd_help(ctx: CommandContext, args: list[str]) -> str:
    _no_args(args)
    return registry.build_help()


def cmd_add(ctx: CommandContext, args: list[str]) -> str:
    description = " ".join(args).strip()
    if not description:
        raise UsageError("Task description is required.")
    task = ctx.store.add(description)
    return f"Added task: {task.id} - {task.description}"


def cmd_list(ctx: CommandContext, args: list[str]) -> str:
    _no_args(args)
    tasks = ctx.store.list_tasks()
    if not tasks:
        return "No tasks to list"

    lines = ["Tasks:", SEPARATOR]
    for task in tasks:
        lines.append(f"{_marker(task)} [{task.id}] {task.description}")
        label = "Completed at" if task.completed else "Created at"
        lines.append(f"{label}: {format_ts(task.status_time)}")
        lines.append(SEPARATOR)
    return "\n".join(lines)


def cmd_list_pending(ctx: CommandContext, args: list[str]) -> str:
    _no_args(args)
    pending = ctx.store.list_pending()
    if not pending:
        return "No pending tasks"

    lines = [f"Pending tasks ({len(pending)}):", SEPARATOR]
    for task in pending:
        lines.append(f"[{task.id}] {task.description}")
        lines.append(f"Created at: {format_ts(task.created_at)}")
        lines.append(SEPARATOR)
    return "\n".join(lines)


def cmd_complete(ctx: CommandContext, args: list[str]) -> str:
    task_id = _parse_id(args)
    try:
        ctx.store.complete(task_id)
    except TaskError as e:
        return str(e)
    return f"Task {task_id} completed"


def cmd_delete(ctx: CommandContext, args: list[str]) -> str:
    task_id = _parse_id(args)
    try:
        ctx.store.delete(task_id)
    except TaskError as e:
        return str(e)
    return f"Task {task_id} deleted"


def cmd_delete_completed(ctx: CommandContext, args: list[str]) -> str:
    _no_args(args)
    store = ctx.store
    if len(store) == 0:
        return "No tasks to delete"

    removed = store.delete_completed()
    if not removed:
        return "No completed tasks to delete"

    lines = [f"Deleting completed task: {t.id} - {t.description}" for t in removed]
    noun = "task" if len(removed) == 1 else "tasks"
    lines.append(f"Deleted {len(removed)} completed {noun}")
    return "\n".join(lines)


def cmd_stats(ctx: CommandContext, args: list[str]) -> str:
    _no_args(args)
    stats = ctx.store.stats()
    lines = [
        "Task stats:",
        f"Total tasks: {stats.total}",
        f"Completed tasks: {stats.completed}",
        f"Pending tasks: {stats.pending}",
    ]
    if stats.percentage is not None:
        lines.append(f"Completion percentage: {stats.percentage:.2f}%")
    return "\n".join(lines)


registry.register("add", cmd_add, help_text="Add a new task.", usage="add <text>")
registry.register("list", cmd_list, help_text="List all tasks.", aliases=["ls"])
registry.register(
    "list-pending", cmd_list_pending, help_text="List pending tasks only.", aliases=["pending"]
)
registry.register(
    "complete", cmd_complete, help_text="Mark a task as complete.", usage="complete <id>", aliases=["done"]
)
registry.register("delete", cmd_delete, help_text="Delete a task.", usage="delete <id>", aliases=["rm"])
registry.register("delete-completed", cmd_delete_completed, help_text="Delete all completed tasks.")
registry.register("stats", cmd_stats, help_text="Show task statistics.")
registry.register("help", cmd_help, help_text="Show this help message.")
