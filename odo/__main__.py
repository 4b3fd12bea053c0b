#!/usr/bin/env python3
"""odo/__main__.py: interactive front end for odo.

Usage examples
--------------
    # Interactive session; state persists between lines
    python -m odo

    # Evaluate one string and exit
    python -m odo -c 'var x = 1
    :x'

    # Show the syntax and annotated trees of every statement
    python -m odo --dump-ast --dump-semantic -c 'var x = 1'

Exit codes
----------
    0   Success.
    1   The evaluated code raised an odo error (``-c`` only; the
        interactive loop reports errors and carries on).
    2   Infrastructure failure.
"""

from __future__ import annotations

import argparse
import logging
import sys
import textwrap
from typing import Optional, Sequence, TextIO

from odo import __version__
from odo.ast import Node
from odo.dump import SexpDumper
from odo.errors import OdoError
from odo.interpreter import Interpreter, InterpreterConfig
from odo.semantic import SemanticResult

_log = logging.getLogger("odo")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2

PROMPT: str = "odo> "


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the root ``odo`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("odo")
    root.setLevel(level)
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root.addHandler(handler)


class TreeDumpObserver:
    """Prints the trees of each statement before it runs."""

    def __init__(self, stream: TextIO, syntax: bool, semantic: bool) -> None:
        self.dumper = SexpDumper(stream)
        self.syntax = syntax
        self.semantic = semantic

    def observe(self, statement: Node, analyzed: SemanticResult) -> None:
        if self.syntax:
            self.dumper.dump(statement)
        if self.semantic:
            self.dumper.dump(analyzed.node)


def run_source(
    interpreter: Interpreter,
    source: str,
    observer: Optional[TreeDumpObserver] = None,
) -> bool:
    """Evaluate *source*, print its result or error; return success."""
    try:
        result = interpreter.evaluate(source, observer)
    except OdoError as exc:
        sys.stderr.write(f"{exc}\n")
        return False
    if not result.is_nothing:
        sys.stdout.write(f"{result}\n")
    return True


def repl(interpreter: Interpreter, observer: Optional[TreeDumpObserver] = None) -> int:
    """Read lines from stdin until EOF, evaluating each one."""
    interactive = sys.stdin.isatty()
    if interactive:
        sys.stdout.write(f"odo {__version__} (end input with Ctrl-D)\n")

    while True:
        if interactive:
            sys.stdout.write(PROMPT)
            sys.stdout.flush()
        line = sys.stdin.readline()
        if not line:
            break
        if line.strip():
            run_source(interpreter, line, observer)

    if interactive:
        sys.stdout.write("\n")
    return EXIT_OK


# ===========================================================================
# Argument parser
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="odo",
        description="odo: a small statically-typed scripting language.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              odo
              odo -c 'var x = 1; :x'
              odo --dump-semantic -c 'if true { var z = 5 }'
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )
    parser.add_argument(
        "-c", "--command",
        metavar="CODE",
        help="Evaluate CODE and exit instead of reading stdin.",
    )
    parser.add_argument(
        "--dump-ast",
        action="store_true",
        help="Print each statement's syntax tree before it runs.",
    )
    parser.add_argument(
        "--dump-semantic",
        action="store_true",
        help="Print each statement's annotated tree before it runs.",
    )
    parser.add_argument(
        "--no-prelude",
        action="store_true",
        help="Do not register the built-in print functions.",
    )
    return parser


# ===========================================================================
# Entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the odo CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    config = InterpreterConfig(
        debug_stream=sys.stdout,
        source_name="<command>" if args.command is not None else "<stdin>",
        install_prelude=not args.no_prelude,
    )
    observer = None
    if args.dump_ast or args.dump_semantic:
        observer = TreeDumpObserver(sys.stdout, args.dump_ast, args.dump_semantic)

    try:
        interpreter = Interpreter(config)
        if args.command is not None:
            return EXIT_OK if run_source(interpreter, args.command, observer) else EXIT_ERROR
        return repl(interpreter, observer)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130
    except Exception as exc:
        _log.error("Unhandled exception: %s", exc, exc_info=True)
        return EXIT_INFRA


if __name__ == "__main__":
    raise SystemExit(main())
