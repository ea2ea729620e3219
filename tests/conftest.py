"""Pytest configuration for the peergraph test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from peergraph.config.primitives import ExecutionOptions
from tests._helpers.builders import write_edge_list

EdgeListFactory = Callable[[Iterable[str]], Path]


@pytest.fixture
def edge_list_file(tmp_path: Path) -> EdgeListFactory:
    """Return a factory writing numbered edge-list files under tmp_path.

    Returns
    -------
    EdgeListFactory
        Callable taking raw lines and returning the written path.
    """
    counter = iter(range(1_000))

    def _write(lines: Iterable[str]) -> Path:
        return write_edge_list(tmp_path / f"graph_{next(counter)}.txt", lines)

    return _write


@pytest.fixture
def serial_execution() -> ExecutionOptions:
    """Execution options that keep every section in the test thread.

    Returns
    -------
    ExecutionOptions
        Serial options.
    """
    return ExecutionOptions.serial()


@pytest.fixture(params=["serial", "thread"])
def execution(request: pytest.FixtureRequest) -> ExecutionOptions:
    """Serial and threaded execution options for parity checks.

    Returns
    -------
    ExecutionOptions
        Options for the parametrized executor kind.
    """
    if request.param == "serial":
        return ExecutionOptions.serial()
    return ExecutionOptions(executor="thread", max_workers=3)
