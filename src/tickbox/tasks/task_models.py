# src/tickbox/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class Task:
    """
    A single to-do item.

    Invariant:
    - completed is False  -> completed_at is None
    - completed is True   -> completed_at is set and >= created_at
    """

    id: int
    description: str
    created_at: datetime
    completed: bool = False
    completed_at: datetime | None = None

    @property
    def status_time(self) -> datetime:
        """Timestamp shown next to the task: completion time if done, else creation time."""
        if self.completed and self.completed_at is not None:
            return self.completed_at
        return self.created_at


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int

    @property
    def pending(self) -> int:
        return self.total - self.completed

    @property
    def percentage(self) -> float | None:
        # None for an empty store (no division by zero).
        if self.total <= 0:
            return None
        return self.completed / self.total * 100
