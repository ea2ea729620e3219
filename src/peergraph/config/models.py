"""
Configuration models used by the peergraph CLI and remote callers.

These Pydantic models normalize the graph path, execution backend and metric
parameters supplied at the process boundary, then convert into the frozen
primitives consumed by the engines.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from peergraph.config.primitives import (
    DEFAULT_DAMPING,
    DEFAULT_ITERATIONS,
    DEFAULT_TOP_N,
    ExecutionOptions,
    ExecutorKind,
    RankOptions,
)

MetricName = Literal["stats", "degree", "clustering", "pagerank", "betweenness", "all"]


class AnalysisConfig(BaseModel):
    """
    Request for a single metric run against one edge-list file.

    Damping, iteration and top-N values are passed through unchecked so that
    the engines apply their own reject-and-retain policy.
    """

    model_config = ConfigDict(frozen=True)

    graph_path: Path = Field(..., description="Path to a whitespace-separated edge list")
    metric: MetricName = Field("all", description="Metric to compute")
    top_n: int = Field(DEFAULT_TOP_N, description="Number of ranked nodes to report")
    damping: float = Field(DEFAULT_DAMPING, description="PageRank damping factor")
    iterations: int = Field(DEFAULT_ITERATIONS, description="PageRank fixed iteration count")
    threshold: float | None = Field(
        default=None,
        description="Mean absolute change stopping PageRank convergence mode",
    )
    executor: ExecutorKind = Field("thread", description="Worker pool backend")
    max_workers: int | None = Field(default=None, ge=1, description="Worker pool size override")
    output_json: bool = Field(default=False, description="Emit JSON instead of text")

    @field_validator("graph_path", mode="before")
    @classmethod
    def _expand_user(cls, v: Path | str) -> Path:
        """
        Expand user home markers in the graph path.

        Parameters
        ----------
        v : Path | str
            Raw value provided via CLI or configuration.

        Returns
        -------
        Path
            Expanded pathlib object.
        """
        if isinstance(v, Path):
            return v.expanduser()
        return Path(str(v)).expanduser()

    def execution_options(self) -> ExecutionOptions:
        """
        Return the worker-pool primitive for this request.

        Returns
        -------
        ExecutionOptions
            Executor kind and pool size.
        """
        return ExecutionOptions(executor=self.executor, max_workers=self.max_workers)

    def rank_options(self) -> RankOptions:
        """
        Return the PageRank primitive for this request.

        Returns
        -------
        RankOptions
            Damping, iterations and optional convergence threshold.
        """
        return RankOptions(
            damping=self.damping,
            iterations=self.iterations,
            threshold=self.threshold,
        )


__all__ = ["AnalysisConfig", "MetricName"]
