# src/tickbox/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from datetime import datetime

from .errors import TaskAlreadyCompletedError, TaskNotFoundError
from .task_file import TaskFile
from .task_models import Task, TaskStats

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _local_now() -> datetime:
    return datetime.now().astimezone()


class TaskStore:
    """
    Ordered in-memory task list backed by a TaskFile.

    - insertion order is display order
    - ids come from next_id, which only ever grows (no reuse after delete)
    - every mutation rewrites the backing file before returning

    A failed save does not undo the in-memory change; check `last_save_ok`
    to find out whether the file is in sync.
    """

    def __init__(self, task_file: TaskFile, *, clock: Clock | None = None) -> None:
        self._file = task_file
        self._clock: Clock = clock or _local_now
        self._tasks, self._next_id = task_file.load()
        self.last_save_ok = True
        logger.debug("TaskStore ready file=%s total=%s", task_file.path, len(self._tasks))

    # ---- low-level helpers ----

    def _persist(self) -> bool:
        self.last_save_ok = self._file.save(self._tasks, self._next_id)
        return self.last_save_ok

    def _index_of(self, task_id: int) -> int | None:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    # ---- read-only views ----

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def task_file(self) -> TaskFile:
        return self._file

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def get(self, task_id: int) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx is None else self._tasks[idx]

    def list_tasks(self) -> list[Task]:
        return list(self._tasks)

    def list_pending(self) -> list[Task]:
        return [t for t in self._tasks if not t.completed]

    def stats(self) -> TaskStats:
        completed = sum(1 for t in self._tasks if t.completed)
        return TaskStats(total=len(self._tasks), completed=completed)

    # ---- mutations ----

    def add(self, description: str) -> Task:
        description = (description or "").strip()
        if not description:
            raise ValueError("description is required")

        task = Task(id=self._next_id, description=description, created_at=self._clock())
        self._tasks.append(task)
        self._next_id += 1
        self._persist()

        logger.debug("Task added id=%s", task.id)
        return task

    def complete(self, task_id: int) -> Task:
        """
        Mark a task as done.

        Raises TaskNotFoundError for an unknown id and TaskAlreadyCompletedError
        if the task was completed before (nothing is changed in that case).
        """
        task = self.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        if task.completed:
            raise TaskAlreadyCompletedError(task_id)

        # A clock that went backwards must not break completed_at >= created_at.
        task.completed_at = max(self._clock(), task.created_at)
        task.completed = True
        self._persist()

        logger.debug("Task completed id=%s", task_id)
        return task

    def delete(self, task_id: int) -> Task:
        idx = self._index_of(task_id)
        if idx is None:
            raise TaskNotFoundError(task_id)

        task = self._tasks.pop(idx)
        self._persist()

        logger.debug("Task deleted id=%s", task_id)
        return task

    def delete_completed(self) -> list[Task]:
        """
        Remove every completed task in one batch.

        Returns the removed tasks in their original order ([] if none, in
        which case the file is not touched).
        """
        removed = [t for t in self._tasks if t.completed]
        if not removed:
            return []

        removed_ids = {t.id for t in removed}
        self._tasks = [t for t in self._tasks if t.id not in removed_ids]
        self._persist()

        logger.debug("Deleted %d completed tasks ids=%s", len(removed), sorted(removed_ids))
        return removed
