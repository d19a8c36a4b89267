import os
from collections.abc import Callable
from typing import Any

import pytest

# Monkeypatch coverage to bypass teardown crash when run under subprocess coverage
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

    import coverage.collector

    def safe_stop(self: Any) -> None:
        if self in getattr(self, "_collectors", []):
            self._collectors.remove(self)

    coverage.collector.Collector.stop = safe_stop

from gopherlang.gopher_ast import Program  # noqa: E402
from gopherlang.gopher_parser import parse  # noqa: E402


@pytest.fixture
def parse_ok() -> Callable[[str], Program]:
    """Parses source that must produce no errors."""

    def _parse(source: str) -> Program:
        program, errors = parse(source)
        assert errors == [], f"unexpected parse errors for {source!r}: {errors}"
        return program

    return _parse
