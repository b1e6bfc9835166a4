"""
Monkey CLI Entrypoint.

This module provides the command-line interface for running Monkey source code.
It supports running files or inline strings, dumping the parsed AST, and an
interactive REPL.

Features:
    - Read source from `.monkey` files or inline strings.
    - Lex, parse, and evaluate the program, printing its final value.
    - Dump the AST as JSON instead of evaluating.
    - Launch an interactive REPL with optional verbosity.

Configuration:
    - `MONKEY_LOG_LEVEL`: default for `--log-level` (fallback WARNING).
    - `MONKEY_RECURSION_LIMIT`: default for `--recursion-limit` (fallback 20000).

Exit status:
    0 success, 1 parse errors, 2 evaluation error, 3 stack exhaustion.

Example usage:
    monkey fib.monkey
    monkey -s "let x = 5; x * 2"
    monkey -s "1 + 2 * 3" --ast
    monkey --repl --verbose

Functions:
    run_monkey(source: str, is_string: bool = False, dump_ast: bool = False,
               pretty: bool = False, recursion_limit: int | None = None) -> int:
        Executes the full pipeline (lex → parse → evaluate → output).

    main() -> None:
        Parses CLI arguments and invokes the appropriate action (REPL or run).
"""

import argparse
import json
import logging
import os
import sys

from monkey.monkey_constants import DEFAULT_RECURSION_LIMIT
from monkey.monkey_env import Environment
from monkey.monkey_eval import call_with_deep_stack, evaluate
from monkey.monkey_lexer import tokenize
from monkey.monkey_object import Error, Null
from monkey.monkey_parser import parse_program

EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_EVAL_ERROR = 2
EXIT_FATAL = 3

logger = logging.getLogger(__name__)


def run_monkey(
    source: str,
    is_string: bool = False,
    dump_ast: bool = False,
    pretty: bool = False,
    recursion_limit: int | None = None,
) -> int:
    """
    Run the Monkey pipeline: lex, parse, and evaluate or dump the AST.

    Args:
        source (str): The Monkey source code or path to a `.monkey` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path. Defaults to False.
        dump_ast (bool): If True, prints the AST as JSON and skips evaluation. Defaults to False.
        pretty (bool): If True, prints formatted banners around program and result. Defaults to False.
        recursion_limit (int | None): Host recursion limit while evaluating. Defaults to
            `DEFAULT_RECURSION_LIMIT`.

    Returns:
        int: The process exit status.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.monkey'.
    """
    if not is_string and not source.endswith(".monkey"):
        raise ValueError("Only .monkey files are supported.")
    # 1. Read source
    if not is_string:
        logger.info("reading %s", source)
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Lexing and parsing
    program, errors = parse_program(tokenize(source))
    if errors:
        print(f"parser has {len(errors)} errors", file=sys.stderr)
        for msg in errors:
            print(f"parser error: {msg}", file=sys.stderr)
        return EXIT_PARSE_ERROR

    if dump_ast:
        print(json.dumps(program.to_dict(), indent=2))
        return EXIT_OK

    if pretty:
        banner = "=" * 20
        print(f"{banner}\nProgram\n{banner}\n{program}\n{banner}\n")

    # 3. Evaluation
    try:
        result = call_with_deep_stack(
            evaluate, program, Environment(), recursion_limit=recursion_limit
        )
    except RecursionError:
        print("fatal: maximum recursion depth exceeded", file=sys.stderr)
        return EXIT_FATAL

    if isinstance(result, Error):
        print(result.inspect(), file=sys.stderr)
        return EXIT_EVAL_ERROR

    # 4. Output result
    if pretty:
        print("<<< RESULT >>>")
    if not isinstance(result, Null):
        print(result.inspect())
    return EXIT_OK


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main() -> None:
    """
    Entry point for the Monkey CLI.

    Parses command-line arguments and dispatches to the appropriate mode:
    - Launches the REPL if no arguments are passed or `--repl` is specified.
    - Otherwise, runs the full pipeline (lex → parse → evaluate → output).

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--ast`: Print the parsed AST as JSON instead of evaluating.
        - `-p`, `--pretty`: Show banners around the program and its result.
        - `--repl`: Launch the interactive REPL.
        - `--verbose`: Enable verbose REPL mode.
        - `--log-level`: Logging level (default from MONKEY_LOG_LEVEL, else WARNING).
        - `--recursion-limit`: Host recursion limit (default from MONKEY_RECURSION_LIMIT).
    """
    if len(sys.argv) == 1:
        # No args passed: open REPL instead
        from monkey.monkey_repl import start_repl

        start_repl()
        return
    parser = argparse.ArgumentParser(prog="monkey")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--ast",
        dest="dump_ast",
        action="store_true",
        help="Print the parsed AST as JSON instead of evaluating",
    )
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Show program/result with banners"
    )
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL instead of running a program",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Verbose REPL mode (if --repl)"
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("MONKEY_LOG_LEVEL", "WARNING"),
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        type=str.upper,
        help="Logging level (default: $MONKEY_LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "--recursion-limit",
        type=int,
        default=os.getenv("MONKEY_RECURSION_LIMIT", DEFAULT_RECURSION_LIMIT),
        metavar="N",
        help="Host recursion limit (default: $MONKEY_RECURSION_LIMIT or %(default)s)",
    )

    args = parser.parse_args()
    configure_logging(args.log_level)
    if args.repl or args.source is None:
        from monkey.monkey_repl import start_repl

        start_repl(verbose=args.verbose, recursion_limit=args.recursion_limit)
    else:
        sys.exit(
            run_monkey(
                source=args.source,
                is_string=args.string,
                dump_ast=args.dump_ast,
                pretty=args.pretty,
                recursion_limit=args.recursion_limit,
            )
        )


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
