import os
from collections.abc import Callable

import pytest

from monkey.monkey_env import Environment
from monkey.monkey_eval import evaluate
from monkey.monkey_lexer import tokenize
from monkey.monkey_object import Object
from monkey.monkey_parser import parse_program

# Measure coverage in subprocesses spawned by the CLI tests
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

Runner = Callable[..., Object]


def run_source(source: str, env: Environment | None = None) -> Object:
    program, errors = parse_program(tokenize(source))
    assert errors == [], f"unexpected parse errors: {errors}"
    return evaluate(program, env if env is not None else Environment())


@pytest.fixture  # type: ignore[misc]
def run() -> Runner:
    return run_source


@pytest.fixture  # type: ignore[misc]
def env() -> Environment:
    return Environment()
