# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from tickbox.config import reset_settings
from tickbox.tasks.task_file import TaskFile
from tickbox.tasks.task_store import TaskStore

from .fakes import FakeClock


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Each test starts without TICKBOX_* variables and without cached settings."""
    for name in ("TICKBOX_FILE", "TICKBOX_LOG_LEVEL", "TICKBOX_LOG_DIR", "TICKBOX_APP_NAME"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture()
def task_path(tmp_path: Path) -> Path:
    return tmp_path / "todos.json"


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(task_path: Path, clock: FakeClock) -> TaskStore:
    """
    TaskStore on a real JSON file under tmp_path.

    We keep real file I/O here because load/save behaviour is part of what
    we want to test.
    """
    return TaskStore(TaskFile(task_path), clock=clock)
