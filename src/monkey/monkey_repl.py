import io
import re
import traceback

from monkey.monkey_env import Environment
from monkey.monkey_eval import Evaluator, call_with_deep_stack
from monkey.monkey_lexer import tokenize
from monkey.monkey_object import Object
from monkey.monkey_parser import parse_program

PROMPT = ">> "
CONTINUATION_PROMPT = ".. "

MONKEY_FACE = r'''            __,__
   .--.  .-"     "-.  .--.
  / .. \/  .-. .-.  \/ .. \
 | |  '|  /   Y   \  |'  | |
 | \   \  \ 0 | 0 /  /   / |
  \ '- ,\.-"""""""-./, -' /
   ''-' /_   ^ ^   _\ '-''
       |  \._   _./  |
       \   \ '~' /   /
        '._ '-=-' _.'
           '-----'
'''

_STRING_LITERAL = re.compile(r'"[^"]*"?')


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def print_parser_errors(errors: list[str]) -> None:
    print(MONKEY_FACE)
    print("Woops! We ran into some monkey business here!")
    print(" parser errors:")
    for msg in errors:
        print(f"\t{msg}")


def open_delimiters(src: str) -> int:
    """Count of `(`, `[` and `{` not yet closed, ignoring string literal contents."""
    code = _STRING_LITERAL.sub("", src)
    opened = sum(code.count(c) for c in "([{")
    closed = sum(code.count(c) for c in ")]}")
    return opened - closed


def eval_source(
    src: str, env: Environment, evaluator: Evaluator, verbose: bool = False
) -> Object | None:
    """Lex, parse and evaluate one REPL entry; returns None after reporting parse errors."""
    program, errors = parse_program(tokenize(src))
    if errors:
        print_parser_errors(errors)
        return None
    if verbose:
        print(f"[ast] >>> {program}")
    return evaluator.eval(program, env)


def start_repl(verbose: bool = False, recursion_limit: int | None = None) -> None:
    print("Monkey REPL. Type 'exit' or 'quit' to leave.")
    env = Environment()
    evaluator = Evaluator()

    while True:
        try:
            src_lines: list[str] = []
            while True:
                prompt = PROMPT if not src_lines else CONTINUATION_PROMPT
                line = input(prompt)
                if line.strip() in ("exit", "quit") and not src_lines:
                    print("Exiting Monkey REPL.")
                    return
                src_lines.append(line)
                if open_delimiters("\n".join(src_lines)) <= 0:
                    break
            src = "\n".join(src_lines).strip()
            if not src:
                continue
            if src.lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue

            try:
                result = call_with_deep_stack(
                    eval_source,
                    src,
                    env,
                    evaluator,
                    verbose,
                    recursion_limit=recursion_limit,
                )
            except RecursionError:
                print("[fatal] >>> maximum recursion depth exceeded")
                continue
            except Exception:
                print_traceback()
                continue

            if result is not None:
                print(result.inspect())

        except (KeyboardInterrupt, EOFError):
            print("\nExiting Monkey REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
