# src/tickbox/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root": it turns settings (plus any
command-line override) into a loaded TaskStore.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import Settings, get_settings
from ..tasks.task_file import TaskFile
from ..tasks.task_store import Clock, TaskStore

logger = logging.getLogger(__name__)


def create_task_store(
    *,
    settings: Settings | None = None,
    path: str | Path | None = None,
    clock: Clock | None = None,
) -> TaskStore:
    """
    Build a TaskStore loaded from the backing file.

    `path` wins over settings.task_file. If settings is None, falls back to
    get_settings().
    """
    if path is None:
        if settings is None:
            settings = get_settings()
        path = settings.task_file

    task_file = TaskFile(path)
    logger.debug("Opening task store at %s", task_file.path)
    return TaskStore(task_file, clock=clock)
