"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStats)
- errors.py: exceptions raised by store operations
- task_file.py: JSON backing file (load / full rewrite on save)
- task_store.py: in-memory ordered store + add/complete/delete/stats
"""

from .errors import TaskAlreadyCompletedError, TaskError, TaskNotFoundError
from .task_file import TaskFile
from .task_models import Task, TaskStats
from .task_store import TaskStore

__all__ = [
    "Task",
    "TaskAlreadyCompletedError",
    "TaskError",
    "TaskFile",
    "TaskNotFoundError",
    "TaskStats",
    "TaskStore",
]
