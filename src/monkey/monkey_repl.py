import io
import logging
import traceback

from monkey.monkey_cli import print_parser_errors
from monkey.monkey_environment import Environment
from monkey.monkey_evaluator import evaluate
from monkey.monkey_lexer import CharacterStream, Lexer
from monkey.monkey_parser import Parser

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

PROMPT = ">> "
CONTINUATION_PROMPT = ".. "
EXIT_COMMAND = ".exit"
GOODBYE = "See you next time!"
INTERRUPT_HINT = "(To exit, press Ctrl+C again or type .exit)"


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def brace_balance(line: str, in_string: bool = False) -> tuple[int, bool]:
    """
    Counts `{` minus `}` in `line`, ignoring braces inside string literals.

    `in_string` says whether a string opened on an earlier line is still open;
    the second return value is the same flag at the end of `line`.
    """
    depth = 0
    escaped = False
    for ch in line:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
    return depth, in_string


def read_entry() -> str | None:
    """
    Reads one REPL entry, continuing across lines while braces are unbalanced.

    Returns None when the user typed the exit command.
    """
    src_lines: list[str] = []
    brace_count = 0
    in_string = False
    while True:
        prompt = PROMPT if not src_lines else CONTINUATION_PROMPT
        line = input(prompt)
        if line.strip() == EXIT_COMMAND and not src_lines:
            return None
        src_lines.append(line)
        delta, in_string = brace_balance(line, in_string)
        brace_count += delta
        if brace_count <= 0:
            break
    return "\n".join(src_lines).strip()


def eval_entry(src: str, env: Environment, verbose: bool = False) -> None:
    """Parses and evaluates one entry in the session environment, printing the outcome."""
    parser = Parser(Lexer(CharacterStream(src, 0, 1, 1)))
    program = parser.parse_program()
    if parser.errors:
        print_parser_errors(parser.errors)
        return
    if verbose:
        print(f"[ast] >>> {program}")

    try:
        result = evaluate(program, env)
    except Exception:
        print_traceback()
        return
    logger.debug("entry evaluated to %r", result)
    if result is not None:
        print(result.inspect())


def start_repl(verbose: bool = False) -> None:
    print("Monkey REPL. Type '.exit' to leave.")
    env = Environment.new()
    interrupted = False

    while True:
        try:
            src = read_entry()
            if src is None:
                print(GOODBYE)
                return
            interrupted = False
            if not src:
                continue
            if src.lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue
            eval_entry(src, env, verbose)
        except KeyboardInterrupt:
            if interrupted:
                print("\n" + GOODBYE)
                return
            interrupted = True
            print("\n" + INTERRUPT_HINT)
        except EOFError:
            print("\n" + GOODBYE)
            return


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
