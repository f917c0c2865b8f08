"""
Monkey CLI Entrypoint.

This module provides the command-line interface for running Monkey source code.
It supports running files, inline source strings, AST dumps, and interactive REPL mode.

Features:
    - Read source from files or inline strings.
    - Lex, parse, and evaluate the program in a fresh environment.
    - Print the final non-null result, or all parse errors with a non-zero exit status.
    - Dump the parsed program as JSON instead of evaluating it.
    - Launch an interactive REPL with optional verbosity.

Example usage:
    monkey examples/fib.monkey
    monkey -s "let x = 5; x * 2"
    monkey -s "1 + 2 * 3" --ast
    monkey --repl --verbose

Functions:
    run_monkey(source: str, is_string: bool = False, dump_ast: bool = False,
               pretty: bool = False) -> int:
        Executes the full Monkey pipeline (lex → parse → evaluate → print).

    main() -> None:
        Parses CLI arguments and invokes the appropriate action (REPL or run).
"""

import argparse
import json
import logging
import sys

from monkey.monkey_environment import Environment
from monkey.monkey_evaluator import evaluate
from monkey.monkey_lexer import CharacterStream, Lexer
from monkey.monkey_object import NULL
from monkey.monkey_parser import Parser

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

PARSE_ERROR_BANNER = "Woops! We ran into some monkey business here!"


def print_parser_errors(errors: list[str]) -> None:
    print(PARSE_ERROR_BANNER)
    print(" parser errors:")
    for msg in errors:
        print("\t" + msg)


def run_monkey(
    source: str,
    is_string: bool = False,
    dump_ast: bool = False,
    pretty: bool = False,
) -> int:
    """
    Run the Monkey toolchain: lex, parse, and evaluate (or dump) a program.

    Args:
        source (str): The Monkey source code or path to a source file.
        is_string (bool): If True, treats `source` as raw code instead of a file path. Defaults to False.
        dump_ast (bool): If True, prints the parsed program as JSON and skips evaluation. Defaults to False.
        pretty (bool): If True, prints formatted banners around the output. Defaults to False.

    Returns:
        int: Process exit status; 1 when the program has syntax errors, else 0.

    Raises:
        OSError: If `source` names a file that cannot be read.

    Side Effects:
        - Prints results or parse errors to stdout.
    """
    # 1. Read source
    if not is_string:
        logger.debug("reading source file %s", source)
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Parsing
    parser = Parser(Lexer(CharacterStream(source, 0, 1, 1)))
    program = parser.parse_program()
    logger.debug(
        "parsed %d statement(s), %d error(s)",
        len(program.statements),
        len(parser.errors),
    )
    if parser.errors:
        print_parser_errors(parser.errors)
        return 1

    # 3. Optional AST dump
    if dump_ast:
        print(json.dumps(program.to_dict(), indent=2))
        return 0

    # 4. Evaluation
    result = evaluate(program, Environment.new())
    logger.debug("result type: %s", None if result is None else result.type())

    # 5. Output result
    if result is None or result is NULL:
        return 0
    if pretty:
        banner = "=" * 20
        print(f"{banner}\nResult\n{banner}\n{result.inspect()}\n{banner}")
    else:
        print(result.inspect())
    return 0


def main() -> None:
    """
    Entry point for the Monkey CLI.

    Parses command-line arguments and dispatches to the appropriate mode:
    - Launches the REPL if no arguments are passed or `--repl` is specified.
    - Otherwise, runs the program and exits with the resulting status.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--ast`: Print the parsed program as JSON instead of evaluating it.
        - `-p`, `--pretty`: Show banners around the result.
        - `--repl`: Launch the interactive REPL.
        - `--verbose`: Enable debug logging (and AST echo in the REPL).
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
        help="Print the parsed program as JSON instead of evaluating it",
    )
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Show result with banners"
    )
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL instead of running a program",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Debug logging; echo ASTs in the REPL"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )

    if args.repl or args.source is None:
        from monkey.monkey_repl import start_repl

        start_repl(verbose=args.verbose)
        return

    try:
        status = run_monkey(
            source=args.source,
            is_string=args.string,
            dump_ast=args.dump_ast,
            pretty=args.pretty,
        )
    except OSError as e:
        print(f"monkey: cannot read {args.source}: {e.strerror}", file=sys.stderr)
        status = 1
    sys.exit(status)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
