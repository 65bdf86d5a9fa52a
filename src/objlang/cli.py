"""
objlang Command-Line Interface.

Runs the front end on a file, an inline snippet, or the built-in sample
program and prints what each stage produced.

Usage:
    objlang tokens input.obj
    objlang parse input.obj --dump
    objlang lift -c "{foo(n): n.add(2, 3), baz: 7}.baz"
    objlang check input.obj
    objlang fmt input.obj --write
    objlang lift                     # Lift the sample program
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from objlang import __version__
from objlang.compiler import SAMPLE_PROGRAM
from objlang.compiler.ast_nodes import Expression
from objlang.compiler.lexer import tokenize
from objlang.compiler.lifter import Lifter
from objlang.compiler.parser import DEFAULT_MAX_DEPTH, Parser
from objlang.compiler.printer import (
    dump_expression,
    dump_lift_result,
    format_expression,
    format_lift_result,
)
from objlang.utils.errors import ParserError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_SYNTAX_ERROR = 1
EXIT_IO_ERROR = 2


# =============================================================================
# ANSI Color Codes for Terminal Output
# =============================================================================


class Colors:
    """ANSI escape codes for colored terminal output."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls) -> None:
        """Disable all colors (for non-TTY output)."""
        cls.RED = ""
        cls.GREEN = ""
        cls.YELLOW = ""
        cls.BOLD = ""
        cls.RESET = ""


def _colors_enabled() -> bool:
    return sys.stdout.isatty() and not os.environ.get("NO_COLOR")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="objlang",
        description="objlang - parse and lift object expressions",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log pipeline details to stderr",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Deepest expression nesting accepted (default: {DEFAULT_MAX_DEPTH})",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_input_arguments(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "input",
            type=Path,
            nargs="?",
            help="Input file (defaults to the sample program)",
        )
        sub.add_argument(
            "-c",
            "--code",
            help="Source text to use instead of a file",
        )

    tokens_parser = subparsers.add_parser("tokens", help="Print the token list")
    add_input_arguments(tokens_parser)

    parse_parser = subparsers.add_parser("parse", help="Parse and print the expression")
    add_input_arguments(parse_parser)
    parse_parser.add_argument(
        "--dump",
        action="store_true",
        help="Print node kinds instead of source text",
    )

    lift_parser = subparsers.add_parser("lift", help="Lift object literals to definitions")
    add_input_arguments(lift_parser)
    lift_parser.add_argument(
        "--dump",
        action="store_true",
        help="Print node kinds instead of source text",
    )

    check_parser = subparsers.add_parser("check", help="Check syntax without output")
    add_input_arguments(check_parser)

    fmt_parser = subparsers.add_parser("fmt", aliases=["format"], help="Print in canonical form")
    add_input_arguments(fmt_parser)
    fmt_mode = fmt_parser.add_mutually_exclusive_group()
    fmt_mode.add_argument(
        "--check",
        action="store_true",
        help="Exit with 1 if the input is not in canonical form",
    )
    fmt_mode.add_argument(
        "-w",
        "--write",
        action="store_true",
        help="Rewrite the input file in place",
    )

    return parser


# =============================================================================
# Helpers
# =============================================================================


def _read_source(args: argparse.Namespace) -> tuple[str, str]:
    """
    Resolve the source text for a command.

    Returns:
        (source, filename)

    Raises:
        OSError: If the input file cannot be read
    """
    if args.code is not None:
        return args.code, "<string>"
    if args.input is not None:
        return args.input.read_text(encoding="utf-8"), str(args.input)
    return SAMPLE_PROGRAM, "<sample>"


def _parse_or_report(args: argparse.Namespace, source: str, filename: str) -> Optional[Expression]:
    """Parse ``source``, rendering diagnostics to stderr on failure."""
    parser = Parser(tokenize(source, filename), source, filename, args.max_depth)
    try:
        return parser.parse()
    except ParserError as e:
        logger.debug("parse failed: %s (found %s)", e.kind.name, e.found.name)
        if parser.diagnostics:
            print(parser.render_diagnostics(use_color=args.use_color), file=sys.stderr)
        else:
            print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return None


# =============================================================================
# Commands
# =============================================================================


def cmd_tokens(args: argparse.Namespace, source: str, filename: str) -> int:
    """Handle the tokens command."""
    for token in tokenize(source, filename):
        print(token)
    return EXIT_OK


def cmd_parse(args: argparse.Namespace, source: str, filename: str) -> int:
    """Handle the parse command."""
    tree = _parse_or_report(args, source, filename)
    if tree is None:
        return EXIT_SYNTAX_ERROR
    print(dump_expression(tree) if args.dump else format_expression(tree))
    return EXIT_OK


def cmd_lift(args: argparse.Namespace, source: str, filename: str) -> int:
    """Handle the lift command."""
    tree = _parse_or_report(args, source, filename)
    if tree is None:
        return EXIT_SYNTAX_ERROR
    result = Lifter().lift(tree)
    print(dump_lift_result(result) if args.dump else format_lift_result(result))
    return EXIT_OK


def cmd_check(args: argparse.Namespace, source: str, filename: str) -> int:
    """Handle the check command."""
    if _parse_or_report(args, source, filename) is None:
        return EXIT_SYNTAX_ERROR
    print(f"{Colors.GREEN}OK:{Colors.RESET} {filename} (no syntax errors)")
    return EXIT_OK


def cmd_fmt(args: argparse.Namespace, source: str, filename: str) -> int:
    """Handle the fmt command."""
    tree = _parse_or_report(args, source, filename)
    if tree is None:
        return EXIT_SYNTAX_ERROR
    formatted = format_expression(tree) + "\n"

    if args.check:
        if formatted != source:
            print(f"{Colors.YELLOW}Would reformat:{Colors.RESET} {filename}")
            return EXIT_SYNTAX_ERROR
        return EXIT_OK

    if args.write:
        if args.input is None:
            print(f"{Colors.RED}Error:{Colors.RESET} --write needs an input file", file=sys.stderr)
            return EXIT_IO_ERROR
        if formatted != source:
            args.input.write_text(formatted, encoding="utf-8")
            print(f"{Colors.GREEN}Formatted:{Colors.RESET} {filename}")
        return EXIT_OK

    print(formatted, end="")
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    args.use_color = _colors_enabled() and not args.no_color
    if not args.use_color:
        Colors.disable()

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    if args.max_depth < 1:
        parser.error("--max-depth must be at least 1")

    command_handlers = {
        "tokens": cmd_tokens,
        "parse": cmd_parse,
        "lift": cmd_lift,
        "check": cmd_check,
        "fmt": cmd_fmt,
        "format": cmd_fmt,
    }

    handler = command_handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return EXIT_SYNTAX_ERROR

    try:
        source, filename = _read_source(args)
    except OSError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} cannot read {args.input}: {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    logger.debug("running %s on %s", args.command, filename)
    return handler(args, source, filename)


if __name__ == "__main__":
    sys.exit(main())
