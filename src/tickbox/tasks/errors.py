# src/tickbox/tasks/errors.py

from __future__ import annotations


class TaskError(Exception):
    """Base class for task store errors reported back to the user."""

    def __init__(self, task_id: int, message: str) -> None:
        super().__init__(message)
        self.task_id = task_id


class TaskNotFoundError(TaskError, LookupError):
    def __init__(self, task_id: int) -> None:
        super().__init__(task_id, f"Task {task_id} not found")


class TaskAlreadyCompletedError(TaskError):
    def __init__(self, task_id: int) -> None:
        super().__init__(task_id, f"Task {task_id} is already completed")
