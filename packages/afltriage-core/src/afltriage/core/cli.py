"""Command-line entry point.

Usage:
  afltriage [-c CONFIG] [-v] check
  afltriage run [-c CONFIG] [-v] [--json] [--raw] [--child-output] -- ./program arg1 arg2

The global options are also accepted after the subcommand name.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from afltriage.core.display import render_json, render_report
from afltriage.core.log import setup_logging
from afltriage.core.triage import AflTriage
from afltriage.core.types.config import load_config
from afltriage.gdb import TriageError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="afltriage",
        description="Run crashing programs under gdb and print structured crash reports.",
    )
    parser.add_argument("-c", "--config", help="Path to afltriage.toml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    # Repeated on each subcommand; SUPPRESS keeps a value given before the
    # subcommand from being reset by the subparser defaults.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-c", "--config", default=argparse.SUPPRESS, help="Path to afltriage.toml"
    )
    common.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS, help="Debug logging"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser(
        "check", parents=[common], help="Check that gdb with Python support is available"
    )

    run = sub.add_parser("run", parents=[common], help="Triage one program invocation")
    run.add_argument("--json", action="store_true", help="Print the report as JSON")
    run.add_argument("--raw", action="store_true", help="Echo raw gdb output")
    run.add_argument(
        "--child-output", action="store_true", help="Show the program's own output"
    )
    run.add_argument(
        "program", nargs=argparse.REMAINDER, help="Program path followed by its arguments"
    )
    return parser


def _cmd_check(triage: AflTriage) -> int:
    return 0 if triage.check() else 1


def _cmd_run(triage: AflTriage, prog_args: List[str], console: Console) -> int:
    err_console = Console(stderr=True)
    try:
        result = triage.triage(prog_args)
    except TriageError as exc:
        err_console.print(f"[bold red]Triage failed:[/] {escape(str(exc))}", highlight=False)
        return 1

    output = triage.config.output
    if output.format == "json":
        console.out(render_json(result), highlight=False)
    else:
        render_report(result, console, show_child_output=output.show_child_output)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as exc:
        parser.error(f"config: {exc}")
    if args.verbose:
        config.verbose = True
    setup_logging(config.verbose)

    prog_args: List[str] = []
    if args.command == "run":
        prog_args = list(args.program)
        if prog_args and prog_args[0] == "--":
            prog_args = prog_args[1:]
        if not prog_args:
            parser.error("run: a program to triage is required")
        if args.json:
            config.output.format = "json"
        if args.raw:
            config.output.show_raw_output = True
        if args.child_output:
            config.output.show_child_output = True

    with AflTriage(config=config) as triage:
        if args.command == "check":
            return _cmd_check(triage)
        return _cmd_run(triage, prog_args, Console())


if __name__ == "__main__":
    sys.exit(main())
