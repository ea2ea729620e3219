"""Worker pools for partitioned metric passes."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from types import TracebackType
from typing import Self, TypeVar

from peergraph.config.primitives import ExecutionOptions, ExecutorKind
from peergraph.errors import MetricComputationError

log = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8
WORKERS_ENV = "PEERGRAPH_WORKERS"

TItem = TypeVar("TItem")
TSection = TypeVar("TSection")
TResult = TypeVar("TResult")


def resolve_worker_count(max_workers: int | None = None) -> int:
    """
    Determine worker pool size with an environment override.

    Returns
    -------
    int
        Worker count respecting PEERGRAPH_WORKERS when set; otherwise a
        conservative default based on host CPU.
    """
    if max_workers is not None and max_workers > 0:
        return max_workers
    env_workers = os.getenv(WORKERS_ENV)
    if env_workers:
        try:
            value = int(env_workers)
            if value > 0:
                return value
        except ValueError:
            log.warning("Ignoring invalid %s=%s", WORKERS_ENV, env_workers)

    cpu_count = os.cpu_count() or 1
    return min(DEFAULT_MAX_WORKERS, max(2, cpu_count // 2))


def partition(items: Sequence[TItem], sections: int) -> list[list[TItem]]:
    """
    Split items into at most `sections` contiguous, disjoint, non-empty chunks.

    Parameters
    ----------
    items : Sequence[TItem]
        Ordered items to split.
    sections : int
        Upper bound on the number of chunks.

    Returns
    -------
    list[list[TItem]]
        Chunks preserving input order; empty when `items` is empty.
    """
    if not items:
        return []
    count = max(1, min(sections, len(items)))
    size, extra = divmod(len(items), count)
    chunks: list[list[TItem]] = []
    start = 0
    for idx in range(count):
        end = start + size + (1 if idx < extra else 0)
        chunks.append(list(items[start:end]))
        start = end
    return chunks


def _executor(kind: ExecutorKind, max_workers: int) -> Executor | None:
    """
    Return an executor for the requested backend.

    Parameters
    ----------
    kind
        "serial", "thread" or "process".
    max_workers
        Parallelism to use.

    Returns
    -------
    Executor | None
        Executor matching the requested backend, or None for serial runs.
    """
    if kind == "serial":
        return None
    if kind == "process":
        return ProcessPoolExecutor(max_workers=max_workers)
    return ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="peergraph")


class SectionRunner:
    """
    Run one task per section and collect results in section order.

    The pool is created on entry and reused by every `run` call until exit, so
    iterative engines pay pool start-up once per `compute`. Any task failure
    aborts the whole batch with `MetricComputationError`.
    """

    def __init__(self, options: ExecutionOptions, *, metric: str) -> None:
        self.options = options
        self.metric = metric
        self.worker_count = 1 if options.executor == "serial" else resolve_worker_count(
            options.max_workers
        )
        self._pool: Executor | None = None

    def __enter__(self) -> Self:
        self._pool = _executor(self.options.executor, self.worker_count)
        log.debug(
            "%s worker pool ready executor=%s workers=%d",
            self.metric,
            self.options.executor,
            self.worker_count,
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=True, cancel_futures=True)
            self._pool = None

    def run(
        self,
        task: Callable[[TSection], TResult],
        sections: Sequence[TSection],
    ) -> list[TResult]:
        """
        Execute `task` for every section and wait for all of them.

        Parameters
        ----------
        task : Callable[[TSection], TResult]
            Worker function; must be picklable for process pools.
        sections : Sequence[TSection]
            Independent inputs, one per task.

        Returns
        -------
        list[TResult]
            Results in the same order as `sections`.

        Raises
        ------
        MetricComputationError
            If any task raises; remaining tasks are cancelled.
        """
        if self._pool is None:
            try:
                return [task(section) for section in sections]
            except Exception as exc:
                log.exception("%s section failed; discarding partial results", self.metric)
                raise MetricComputationError(self.metric, repr(exc)) from exc

        futures: list[Future[TResult]] = [self._pool.submit(task, section) for section in sections]
        try:
            return [future.result() for future in futures]
        except Exception as exc:
            for future in futures:
                future.cancel()
            log.exception("%s worker failed; discarding partial results", self.metric)
            raise MetricComputationError(self.metric, repr(exc)) from exc


__all__ = ["SectionRunner", "partition", "resolve_worker_count"]
