# src/tickbox/tasks/task_file.py

"""
JSON backing file for the task store.

Layout on disk:

    {
      "tasks": [
        {"id": 1, "description": "...", "completed": false,
         "created_at": "2026-10-17T09:30:00+02:00", "completed_at": null}
      ],
      "next_id": 2
    }

Every save rewrites the whole file. There is no locking: two processes writing
the same file concurrently means the last writer wins.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_TASK_FILE = "todos.json"


def _task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "description": task.description,
        "completed": task.completed,
        "created_at": task.created_at.isoformat(),
        "completed_at": task.completed_at.isoformat() if task.completed_at else None,
    }


def _parse_ts(raw: Any, field: str) -> datetime:
    if not isinstance(raw, str):
        raise ValueError(f"{field} must be a timestamp string, got {raw!r}")
    ts = datetime.fromisoformat(raw)
    # Naive timestamps are taken as local time.
    return ts if ts.tzinfo is not None else ts.astimezone()


def _task_from_dict(raw: Any) -> Task:
    if not isinstance(raw, dict):
        raise ValueError(f"task entry must be an object, got {type(raw).__name__}")

    task_id = raw.get("id")
    if isinstance(task_id, bool) or not isinstance(task_id, int) or task_id < 1:
        raise ValueError(f"invalid task id {task_id!r}")

    description = raw.get("description")
    if not isinstance(description, str):
        raise ValueError(f"task {task_id}: description must be a string")

    completed = raw.get("completed", False)
    if not isinstance(completed, bool):
        raise ValueError(f"task {task_id}: completed must be a boolean")

    created_at = _parse_ts(raw.get("created_at"), "created_at")
    raw_completed_at = raw.get("completed_at")
    completed_at = None if raw_completed_at is None else _parse_ts(raw_completed_at, "completed_at")

    if completed and completed_at is None:
        raise ValueError(f"task {task_id}: completed without completed_at")
    if not completed and completed_at is not None:
        raise ValueError(f"task {task_id}: completed_at set on a pending task")
    if completed_at is not None and completed_at < created_at:
        raise ValueError(f"task {task_id}: completed_at precedes created_at")

    return Task(
        id=task_id,
        description=description,
        created_at=created_at,
        completed=completed,
        completed_at=completed_at,
    )


def decode_document(data: Any) -> tuple[list[Task], int]:
    """
    Turn a parsed JSON document into (tasks, next_id).

    Raises ValueError on anything that does not describe a valid store.
    """
    if not isinstance(data, dict):
        raise ValueError("top-level value must be an object")

    raw_tasks = data.get("tasks", [])
    if not isinstance(raw_tasks, list):
        raise ValueError("'tasks' must be a list")

    tasks: list[Task] = []
    seen: set[int] = set()
    for raw in raw_tasks:
        task = _task_from_dict(raw)
        if task.id in seen:
            raise ValueError(f"duplicate task id {task.id}")
        seen.add(task.id)
        tasks.append(task)

    next_id = data.get("next_id", 1)
    if isinstance(next_id, bool) or not isinstance(next_id, int) or next_id < 1:
        raise ValueError(f"invalid next_id {next_id!r}")

    max_id = max(seen, default=0)
    if next_id <= max_id:
        logger.warning("next_id=%s is not above max task id=%s; using %s", next_id, max_id, max_id + 1)
        next_id = max_id + 1

    return tasks, next_id


def encode_document(tasks: Iterable[Task], next_id: int) -> str:
    doc = {"tasks": [_task_to_dict(t) for t in tasks], "next_id": int(next_id)}
    return json.dumps(doc, ensure_ascii=False, indent=2) + "\n"


class TaskFile:
    """Reads and writes the whole task store as a single JSON document."""

    def __init__(self, path: str | Path = DEFAULT_TASK_FILE) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"TaskFile({str(self.path)!r})"

    def load(self) -> tuple[list[Task], int]:
        """
        Load (tasks, next_id).

        - missing file -> empty store, not an error
        - unreadable path (directory, permissions) -> logged, left alone, empty store
        - corrupt file -> logged, moved aside, empty store
        """
        if not self.path.exists():
            logger.debug("Task file %s does not exist; starting empty", self.path)
            return [], 1

        if not self.path.is_file():
            logger.error("Task file %s is not a regular file; starting empty", self.path)
            return [], 1

        try:
            raw = self.path.read_bytes()
        except OSError as e:
            logger.error("Failed to read task file %s: %s", self.path, e)
            return [], 1

        try:
            data = json.loads(raw.decode("utf-8"))
            tasks, next_id = decode_document(data)
        except (ValueError, RecursionError) as e:
            logger.error("Failed to parse task file %s: %s", self.path, e)
            self._preserve_corrupt()
            return [], 1

        logger.info("Loaded %d tasks from %s (next_id=%s)", len(tasks), self.path, next_id)
        return tasks, next_id

    def save(self, tasks: Iterable[Task], next_id: int) -> bool:
        """
        Rewrite the file with the full store.

        Returns False if the write failed; the error is logged, not raised.
        """
        payload = encode_document(tasks, next_id)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, "utf-8")
            os.replace(tmp, self.path)
        except OSError:
            logger.exception("Failed to save task file %s", self.path)
            with contextlib.suppress(OSError):
                tmp.unlink()
            return False

        logger.debug("Saved task file %s (next_id=%s)", self.path, next_id)
        return True

    def _preserve_corrupt(self) -> Path | None:
        stamp = datetime.now().strftime("%Y%m%dT%H%M%S")
        backup = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            os.replace(self.path, backup)
        except OSError:
            logger.exception("Could not move corrupt task file %s aside", self.path)
            return None
        logger.warning("Corrupt task file kept as %s", backup)
        return backup
