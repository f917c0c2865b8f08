import os
from typing import Any

import pytest

from monkey.monkey_environment import Environment
from monkey.monkey_evaluator import evaluate
from monkey.monkey_object import Object
from monkey.monkey_parser import parse

# Monkeypatch coverage to bypass teardown crash in act/docker
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

    # Nukes the teardown assertion that fails in act
    import coverage.collector

    def safe_stop(self: Any) -> None:
        if self in getattr(self, "_collectors", []):
            self._collectors.remove(self)

    coverage.collector.Collector.stop = safe_stop


def run(source: str, env: Environment | None = None) -> Object | None:
    """Parses and evaluates `source`, failing the test on syntax errors."""
    program, errors = parse(source)
    assert errors == [], f"unexpected parse errors: {errors}"
    return evaluate(program, env if env is not None else Environment.new())


@pytest.fixture  # type: ignore[misc]
def env() -> Environment:
    return Environment.new()
