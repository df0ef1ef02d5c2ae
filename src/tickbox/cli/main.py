# src/tickbox/cli/main.py

"""
CLI entrypoint.

Initializes logging, parses a single command, opens the task store from the
backing file and runs exactly one command against it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from ..cli.bootstrap import create_task_store
from ..cli.commands import EXIT_USAGE, CommandContext, UsageError, registry
from ..config import get_settings
from ..logging_setup import level_from_name, setup_logging

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """Report bad global options as UsageError instead of exiting."""

    def error(self, message: str):  # type: ignore[override]
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog=registry.prog, add_help=False)
    parser.add_argument("-f", "--file", default=None, help="Task file (default: $TICKBOX_FILE or todos.json).")
    parser.add_argument("-h", "--help", action="store_true", dest="show_help")
    parser.add_argument("command", nargs="?")
    parser.add_argument("args", nargs="*")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    setup_logging(console_level=level_from_name(settings.log_level), log_dir=settings.log_dir)

    try:
        # Options may appear anywhere, e.g. `tickbox list --file other.json`.
        ns = build_parser().parse_intermixed_args(list(sys.argv[1:] if argv is None else argv))
    except UsageError as e:
        print(f"{e}\nUse '{registry.prog} help' for usage information.")
        return EXIT_USAGE

    command = "help" if ns.show_help else ns.command
    path = ns.file or settings.task_file
    logger.debug("%s: command=%s args=%s file=%s", settings.app_name, command, ns.args, path)

    ctx = CommandContext(lambda: create_task_store(settings=settings, path=path))
    result = registry.handle(ctx, command, list(ns.args))
    print(result.text)
    return result.exit_code


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
