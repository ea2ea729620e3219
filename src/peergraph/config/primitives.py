"""Core configuration primitives shared by the metric engines.

These frozen dataclasses are the internal representation of engine and
execution settings. Pydantic models at the CLI boundary
(`peergraph.config.models`) convert into them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ExecutorKind = Literal["serial", "thread", "process"]

DEFAULT_DAMPING = 0.85
DEFAULT_ITERATIONS = 10
DEFAULT_THRESHOLD = 1e-6
MAX_CONVERGENCE_ITERATIONS = 100
DEFAULT_TOP_N = 10


@dataclass(frozen=True)
class ExecutionOptions:
    """Worker-pool settings for partitioned metric passes.

    Attributes
    ----------
    executor : ExecutorKind
        "serial" runs sections inline, "thread" uses a thread pool and
        "process" uses a process pool.
    max_workers : int | None
        Explicit pool size; resolved from the environment or CPU count when unset.

    Notes
    -----
    The metric passes are pure-Python and CPU-bound, so under the GIL the
    default thread pool overlaps sections without running them in parallel.
    It avoids pickling the adjacency once per task, which dominates on the
    small and medium graphs typical of a single peer. Pass ``"process"`` for
    true multi-core speedup on large graphs, mainly for betweenness.
    """

    executor: ExecutorKind = "thread"
    max_workers: int | None = None

    @classmethod
    def serial(cls) -> ExecutionOptions:
        """
        Return options that run every section in the calling thread.

        Returns
        -------
        ExecutionOptions
            Serial execution options.
        """
        return cls(executor="serial", max_workers=1)


@dataclass(frozen=True)
class RankOptions:
    """PageRank parameters requested by a caller.

    Attributes
    ----------
    damping : float
        Damping factor; valid values lie in the open interval (0, 1).
    iterations : int
        Iteration count for fixed-iteration mode; must be positive.
    threshold : float | None
        Mean absolute change that stops convergence mode; None selects
        fixed-iteration mode.
    """

    damping: float = DEFAULT_DAMPING
    iterations: int = DEFAULT_ITERATIONS
    threshold: float | None = None

    @property
    def converge(self) -> bool:
        """Whether convergence mode was requested."""
        return self.threshold is not None


__all__ = [
    "DEFAULT_DAMPING",
    "DEFAULT_ITERATIONS",
    "DEFAULT_THRESHOLD",
    "DEFAULT_TOP_N",
    "MAX_CONVERGENCE_ITERATIONS",
    "ExecutionOptions",
    "ExecutorKind",
    "RankOptions",
]
