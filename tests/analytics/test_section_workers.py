"""Tests for section partitioning and worker pools."""

from __future__ import annotations

import pytest
from _pytest.logging import LogCaptureFixture

from peergraph.analytics.workers import SectionRunner, partition, resolve_worker_count
from peergraph.config.primitives import ExecutionOptions
from peergraph.errors import MetricComputationError
from tests._helpers.expect import expect_equal, expect_true


def _square_sum(section: list[int]) -> int:
    return sum(value * value for value in section)


def _explode(section: list[int]) -> int:
    if 3 in section:
        message = "boom"
        raise ValueError(message)
    return len(section)


def test_partition_is_contiguous_and_balanced() -> None:
    """Chunks cover every item once, in order, with sizes differing by at most one."""
    chunks = partition(list(range(10)), 3)
    expect_equal(chunks, [[0, 1, 2, 3], [4, 5, 6], [7, 8, 9]], label="chunks")


def test_partition_never_returns_empty_chunks() -> None:
    """More sections than items yields one chunk per item."""
    expect_equal(partition([1, 2], 8), [[1], [2]], label="over-partitioned")
    expect_equal(partition([], 4), [], label="empty")
    expect_equal(partition([1, 2, 3], 0), [[1, 2, 3]], label="zero sections")


def test_resolve_worker_count_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    """Explicit counts win over the environment, which wins over the CPU default."""
    monkeypatch.setenv("PEERGRAPH_WORKERS", "5")
    expect_equal(resolve_worker_count(3), 3, label="explicit")
    expect_equal(resolve_worker_count(), 5, label="environment")
    monkeypatch.delenv("PEERGRAPH_WORKERS")
    default = resolve_worker_count()
    expect_true(2 <= default <= 8, message=f"Default worker count out of range: {default}")


def test_resolve_worker_count_ignores_invalid_env(
    monkeypatch: pytest.MonkeyPatch, caplog: LogCaptureFixture
) -> None:
    """A non-integer override is logged and ignored."""
    monkeypatch.setenv("PEERGRAPH_WORKERS", "many")
    with caplog.at_level("WARNING", logger="peergraph.analytics.workers"):
        count = resolve_worker_count()
    expect_true(2 <= count <= 8, message=f"Unexpected worker count {count}")
    expect_true(
        any("PEERGRAPH_WORKERS" in record.getMessage() for record in caplog.records),
        message="Expected a warning about the invalid override",
    )


def test_runner_returns_results_in_section_order(execution: ExecutionOptions) -> None:
    """Results line up with their sections regardless of completion order."""
    sections = partition(list(range(1, 11)), 4)
    with SectionRunner(execution, metric="test") as runner:
        results = runner.run(_square_sum, sections)
    expect_equal(results, [_square_sum(section) for section in sections], label="results")


def test_serial_runner_uses_one_worker() -> None:
    """Serial execution never consults the worker count resolution."""
    runner = SectionRunner(ExecutionOptions.serial(), metric="test")
    expect_equal(runner.worker_count, 1, label="workers")


@pytest.mark.parametrize("kind", ["serial", "thread"])
def test_task_failure_raises_metric_error(kind: str) -> None:
    """Any failing section aborts the batch with MetricComputationError."""
    options = ExecutionOptions(executor=kind, max_workers=2)  # type: ignore[arg-type]
    with (
        pytest.raises(MetricComputationError) as excinfo,
        SectionRunner(options, metric="clustering") as runner,
    ):
        runner.run(_explode, [[1, 2], [3, 4], [5]])
    expect_equal(excinfo.value.metric, "clustering", label="metric")
    expect_equal(excinfo.value.problem_detail.code, "metric.compute_failed", label="code")
    expect_true(
        isinstance(excinfo.value.__cause__, ValueError), message="Expected ValueError cause"
    )


@pytest.mark.parametrize("kind", ["serial", "thread"])
def test_task_failure_is_logged_for_every_executor(kind: str, caplog: LogCaptureFixture) -> None:
    """Serial and pooled failures both log the traceback before raising."""
    options = ExecutionOptions(executor=kind, max_workers=2)  # type: ignore[arg-type]
    with (
        caplog.at_level("ERROR", logger="peergraph.analytics.workers"),
        pytest.raises(MetricComputationError),
        SectionRunner(options, metric="degree") as runner,
    ):
        runner.run(_explode, [[3]])
    errors = [record for record in caplog.records if record.levelname == "ERROR"]
    expect_equal(len(errors), 1, label="error records")
    expect_true(errors[0].exc_info is not None, message="Expected a logged traceback")
    expect_true(
        "discarding partial results" in errors[0].getMessage(),
        message=f"Unexpected message: {errors[0].getMessage()}",
    )
