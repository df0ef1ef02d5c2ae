# tests/test_main.py

from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path

import pytest

from tickbox.cli import main as main_mod


@pytest.fixture()
def cli(monkeypatch: pytest.MonkeyPatch, task_path: Path):
    """
    Run main() against a tmp task file and return (exit_code, stdout).

    Global logging is left alone; logging_setup has its own tests.
    """
    monkeypatch.setenv("TICKBOX_FILE", str(task_path))
    monkeypatch.setattr(main_mod, "setup_logging", lambda **kwargs: None)

    def run(capsys: pytest.CaptureFixture[str], *argv: str) -> tuple[int, str]:
        code = main_mod.main(list(argv))
        return code, capsys.readouterr().out

    return run


def test_add_list_and_stats_across_invocations(cli, capsys, task_path: Path) -> None:
    assert cli(capsys, "add", "Buy", "milk") == (0, "Added task: 1 - Buy milk\n")
    assert cli(capsys, "add", "Walk dog") == (0, "Added task: 2 - Walk dog\n")
    assert cli(capsys, "delete", "1") == (0, "Task 1 deleted\n")
    assert cli(capsys, "add", "Read book") == (0, "Added task: 3 - Read book\n")

    code, out = cli(capsys, "list")
    assert code == 0
    assert "[2] Walk dog" in out
    assert "[3] Read book" in out

    data = json.loads(task_path.read_text("utf-8"))
    assert data["next_id"] == 4
    assert [t["id"] for t in data["tasks"]] == [2, 3]


def test_no_command_prints_help_and_fails(cli, capsys, task_path: Path) -> None:
    code, out = cli(capsys)
    assert code == 1
    assert "Commands:" in out
    assert not task_path.exists()


def test_unknown_command_fails(cli, capsys) -> None:
    code, out = cli(capsys, "frobnicate")
    assert code == 1
    assert "Invalid command: frobnicate" in out


@pytest.mark.parametrize("argv", [["help"], ["--help"], ["-h"]])
def test_help_succeeds_without_touching_file(cli, capsys, task_path: Path, argv: list[str]) -> None:
    code, out = cli(capsys, *argv)
    assert code == 0
    assert "Examples:" in out
    assert not task_path.exists()


def test_malformed_arguments_exit_with_usage(cli, capsys) -> None:
    code, out = cli(capsys, "complete", "abc")
    assert code == 2
    assert "Usage: tickbox complete <id>" in out


def test_unknown_global_option_is_usage_error(cli, capsys) -> None:
    code, out = cli(capsys, "--bogus", "list")
    assert code == 2
    assert "tickbox help" in out


def test_file_option_overrides_environment(cli, capsys, tmp_path: Path, task_path: Path) -> None:
    other = tmp_path / "other.json"

    assert cli(capsys, "--file", str(other), "add", "elsewhere")[0] == 0

    assert other.exists()
    assert not task_path.exists()


def test_list_on_missing_file_is_empty(cli, capsys) -> None:
    assert cli(capsys, "list") == (0, "No tasks to list\n")


def test_corrupt_file_starts_empty(cli, capsys, task_path: Path) -> None:
    task_path.write_text("garbage", "utf-8")

    assert cli(capsys, "stats")[0] == 0
    assert cli(capsys, "add", "fresh") == (0, "Added task: 1 - fresh\n")
    assert list(task_path.parent.glob("todos.json.corrupt-*"))


def test_help_option_after_command_shows_help(cli, capsys, task_path: Path) -> None:
    code, out = cli(capsys, "add", "--help")

    assert code == 0
    assert "Examples:" in out
    assert "Added task" not in out
    assert not task_path.exists()


def test_file_option_after_command_is_honoured(cli, capsys, tmp_path: Path, task_path: Path) -> None:
    other = tmp_path / "other.json"
    assert cli(capsys, "add", "elsewhere", "--file", str(other))[0] == 0

    code, out = cli(capsys, "list", "--file", str(other))

    assert code == 0
    assert "[1] elsewhere" in out
    assert not task_path.exists()


def test_unknown_option_after_command_is_usage_error(cli, capsys, task_path: Path) -> None:
    code, out = cli(capsys, "add", "buy", "--urgent")

    assert code == 2
    assert "tickbox help" in out
    assert not task_path.exists()


def test_extra_words_on_list_are_usage_error(cli, capsys) -> None:
    code, out = cli(capsys, "list", "everything")

    assert code == 2
    assert "Usage: tickbox list" in out


def test_importing_package_main_does_not_run_cli(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[int] = []
    monkeypatch.setattr(main_mod, "run", lambda: calls.append(1))
    monkeypatch.delitem(sys.modules, "tickbox.__main__", raising=False)

    importlib.import_module("tickbox.__main__")

    assert calls == []
