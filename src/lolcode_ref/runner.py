from __future__ import annotations

import argparse
import logging
import os
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from lark import Tree
from rich.console import Console
from rich.logging import RichHandler

from .evaluator import execute_program
from .parser import ParseError, parse_source
from .runtime import LolRuntimeError, Scope

logger = logging.getLogger(__name__)
# Console for stderr (log records)
err_console = Console(stderr=True)

TRACE_ENV_VAR = "LOLCODE_DEBUG_PY_TRACE"

def debug_py_trace_enabled() -> bool:
    return os.environ.get(TRACE_ENV_VAR, "").lower() in ("1", "true", "yes", "on")

def parse(src: str) -> Tree:
    return parse_source(src)

def run(src: str, scope: Optional[Scope]=None) -> Scope:
    """Parse and execute a whole program; returns the root scope it ran in."""
    program = parse(src)

    return execute_program(program, scope)

def run_file(path: str) -> Scope:
    logger.debug("Running %s", path)

    return run(_load_source(path))

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Otherwise the argument is a path.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    return Path(arg).read_text(encoding="utf-8")

def report_error(exc: BaseException) -> None:
    print(f"Error: {exc}", file=sys.stderr)

    if debug_py_trace_enabled():
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), file=sys.stderr, end="")

def _build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="lolcode-ref", description="Reference LOLCODE interpreter")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log parse/run progress to stderr")

    sub = ap.add_subparsers(dest="command")

    run_p = sub.add_parser("run", help="Execute a program")
    run_p.add_argument("source", nargs="?", default="-", help="Path to a .lol file ('-' for stdin)")

    ast_p = sub.add_parser("ast", help="Print the parsed syntax tree")
    ast_p.add_argument("source", nargs="?", default="-", help="Path to a .lol file ('-' for stdin)")

    sub.add_parser("repl", help="Start the interactive prompt")

    return ap

def main(argv: Optional[List[str]]=None) -> int:
    args = _build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=args.verbose,
                rich_tracebacks=True,
            ),
        ],
    )

    command = args.command or "run"

    if command == "repl":
        from .repl import repl

        repl()
        return 0

    source_arg = getattr(args, "source", "-")

    try:
        source = _load_source(source_arg)
    except OSError as exc:
        report_error(exc)
        return 1

    try:
        if command == "ast":
            print(parse(source).pretty(), end="")
        else:
            run(source)
    except (ParseError, LolRuntimeError) as exc:
        sys.stdout.flush()
        report_error(exc)
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
