"""
PageRank by power iteration over an immutable edge-list graph.

Every iteration starts a fresh vector at ``(1 - d) / N`` and adds
``rank(u) * d / outdeg(u)`` to each out-neighbor entry of every node ``u`` with
out-edges. Sink nodes distribute nothing and their mass is not renormalised,
so total rank drops below 1.0 whenever a sink holds rank.

Source nodes are split into sections; each worker reads the previous,
immutable rank vector and returns partial contributions that are summed per
target in section order. An iteration's partials are fully merged before the
next iteration starts.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from functools import partial
from types import MappingProxyType
from typing import Literal

from peergraph.analytics.ranking import RankedNode, top_n
from peergraph.analytics.workers import SectionRunner, partition
from peergraph.config.primitives import (
    DEFAULT_DAMPING,
    DEFAULT_ITERATIONS,
    DEFAULT_THRESHOLD,
    MAX_CONVERGENCE_ITERATIONS,
    ExecutionOptions,
    RankOptions,
)
from peergraph.graphs.edge_list import EdgeListGraph

log = logging.getLogger(__name__)

RankMode = Literal["fixed", "convergence"]
SourceSection = Sequence[tuple[int, float, tuple[int, ...]]]


def _contributions(damping: float, section: SourceSection) -> dict[int, float]:
    partial_ranks: dict[int, float] = {}
    for _, rank, targets in section:
        share = rank * damping / len(targets)
        for target in targets:
            partial_ranks[target] = partial_ranks.get(target, 0.0) + share
    return partial_ranks


def mean_absolute_change(previous: Mapping[int, float], current: Mapping[int, float]) -> float:
    """
    Return the mean absolute per-node difference between two rank vectors.

    Returns
    -------
    float
        Average of ``|current[v] - previous[v]|``; 0.0 for empty vectors.
    """
    if not current:
        return 0.0
    total = sum(abs(value - previous[node]) for node, value in current.items())
    return total / len(current)


class PageRankEngine:
    """
    PageRank with fixed-iteration and convergence-threshold modes.

    Invalid damping factors, iteration counts and thresholds are rejected with a
    warning and the previous value is kept.
    """

    def __init__(
        self,
        graph: EdgeListGraph,
        *,
        damping: float = DEFAULT_DAMPING,
        iterations: int = DEFAULT_ITERATIONS,
        execution: ExecutionOptions | None = None,
    ) -> None:
        self.graph = graph
        self.execution = execution or ExecutionOptions()
        self._damping = DEFAULT_DAMPING
        self._iterations = DEFAULT_ITERATIONS
        self.set_damping(damping)
        self.set_iterations(iterations)
        self._ranks: Mapping[int, float] = MappingProxyType(self._uniform())
        self.iterations_run = 0
        self.converged = False
        self.mode: RankMode = "fixed"

    @property
    def damping(self) -> float:
        """Current damping factor."""
        return self._damping

    @property
    def iterations(self) -> int:
        """Current fixed-mode iteration count."""
        return self._iterations

    @property
    def ranks(self) -> Mapping[int, float]:
        """Most recently published rank vector."""
        return self._ranks

    def set_damping(self, value: float) -> bool:
        """
        Update the damping factor when it lies strictly between 0 and 1.

        Returns
        -------
        bool
            True when accepted; False when rejected and the previous value kept.
        """
        if not 0.0 < value < 1.0:
            log.warning(
                "Rejected damping factor %r outside (0, 1); keeping %s", value, self._damping
            )
            return False
        self._damping = float(value)
        return True

    def set_iterations(self, value: int) -> bool:
        """
        Update the fixed-mode iteration count when it is positive.

        Returns
        -------
        bool
            True when accepted; False when rejected and the previous value kept.
        """
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            log.warning(
                "Rejected iteration count %r; must be a positive integer, keeping %d",
                value,
                self._iterations,
            )
            return False
        self._iterations = value
        return True

    def configure(self, options: RankOptions) -> None:
        """Apply damping and iteration settings from a `RankOptions` primitive."""
        self.set_damping(options.damping)
        self.set_iterations(options.iterations)

    def _uniform(self) -> dict[int, float]:
        count = self.graph.node_count
        if count == 0:
            return {}
        return dict.fromkeys(self.graph.adjacency, 1.0 / count)

    def _source_sections(self, worker_count: int) -> list[list[int]]:
        sources = [node for node, targets in self.graph.adjacency.items() if targets]
        return partition(sources, worker_count)

    def _step(
        self,
        ranks: Mapping[int, float],
        sections: Sequence[Sequence[int]],
        runner: SectionRunner,
    ) -> dict[int, float]:
        adjacency = self.graph.adjacency
        base = (1.0 - self._damping) / self.graph.node_count
        fresh = dict.fromkeys(adjacency, base)
        payload = [[(node, ranks[node], adjacency[node]) for node in section] for section in sections]
        for partial_ranks in runner.run(partial(_contributions, self._damping), payload):
            for target, value in partial_ranks.items():
                fresh[target] += value
        return fresh

    def compute(self) -> Mapping[int, float]:
        """
        Run the configured number of iterations from a uniform start.

        Returns
        -------
        Mapping[int, float]
            Published rank vector.
        """
        ranks = self._uniform()
        if ranks:
            with SectionRunner(self.execution, metric="pagerank") as runner:
                sections = self._source_sections(runner.worker_count)
                for idx in range(self._iterations):
                    ranks = self._step(ranks, sections, runner)
                    log.debug("PageRank iteration %d/%d done", idx + 1, self._iterations)
        self._publish(ranks, iterations_run=self._iterations if ranks else 0, converged=False)
        self.mode = "fixed"
        log.info(
            "Computed PageRank nodes=%d damping=%.2f iterations=%d",
            self.graph.node_count,
            self._damping,
            self.iterations_run,
        )
        return self._ranks

    def compute_until_converged(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        *,
        max_iterations: int = MAX_CONVERGENCE_ITERATIONS,
    ) -> Mapping[int, float]:
        """
        Iterate until the mean absolute change falls below `threshold`.

        Parameters
        ----------
        threshold : float
            Stopping threshold on the mean absolute per-node change; must be
            positive, otherwise the default is used.
        max_iterations : int
            Iteration cap; must be a positive integer no larger than 100.
            Invalid values fall back to 100 and larger values are clamped.

        Returns
        -------
        Mapping[int, float]
            Published rank vector.
        """
        if not (math.isfinite(threshold) and threshold > 0.0):
            log.warning(
                "Rejected convergence threshold %r; using default %g", threshold, DEFAULT_THRESHOLD
            )
            threshold = DEFAULT_THRESHOLD
        if (
            isinstance(max_iterations, bool)
            or not isinstance(max_iterations, int)
            or max_iterations <= 0
        ):
            log.warning(
                "Rejected iteration cap %r; using default %d",
                max_iterations,
                MAX_CONVERGENCE_ITERATIONS,
            )
            max_iterations = MAX_CONVERGENCE_ITERATIONS
        elif max_iterations > MAX_CONVERGENCE_ITERATIONS:
            log.warning(
                "Clamping iteration cap %d to the maximum of %d",
                max_iterations,
                MAX_CONVERGENCE_ITERATIONS,
            )
            max_iterations = MAX_CONVERGENCE_ITERATIONS

        ranks = self._uniform()
        used = 0
        converged = False
        if ranks:
            with SectionRunner(self.execution, metric="pagerank") as runner:
                sections = self._source_sections(runner.worker_count)
                while used < max_iterations:
                    fresh = self._step(ranks, sections, runner)
                    used += 1
                    change = mean_absolute_change(ranks, fresh)
                    ranks = fresh
                    log.debug("PageRank iteration %d change=%.3e", used, change)
                    if change < threshold:
                        converged = True
                        break
        self._publish(ranks, iterations_run=used, converged=converged)
        self.mode = "convergence"
        log.info(
            "Computed PageRank nodes=%d damping=%.2f iterations=%d converged=%s",
            self.graph.node_count,
            self._damping,
            used,
            converged,
        )
        return self._ranks

    def run(self, options: RankOptions) -> Mapping[int, float]:
        """
        Configure from `options` and run the requested mode.

        Returns
        -------
        Mapping[int, float]
            Published rank vector.
        """
        self.configure(options)
        if options.converge and options.threshold is not None:
            return self.compute_until_converged(options.threshold)
        return self.compute()

    def _publish(self, ranks: dict[int, float], *, iterations_run: int, converged: bool) -> None:
        self._ranks = MappingProxyType(ranks)
        self.iterations_run = iterations_run
        self.converged = converged

    def top_nodes(self, n: int) -> list[RankedNode[float]]:
        """
        Return the highest-ranked nodes.

        Returns
        -------
        list[RankedNode[float]]
            Up to `n` nodes sorted by rank descending.
        """
        return top_n(self._ranks, n)

    def sink_nodes(self) -> tuple[int, ...]:
        """
        Return nodes with no out-edges.

        Returns
        -------
        tuple[int, ...]
            Nodes whose rank mass is not redistributed.
        """
        return self.graph.sink_nodes()

    def total_mass(self) -> float:
        """
        Return the sum of all rank values.

        Returns
        -------
        float
            Total rank mass; below 1.0 when sinks leak mass.
        """
        return math.fsum(self._ranks.values())

    def stats(self) -> dict[str, object]:
        """
        Summarize the rank run.

        Returns
        -------
        dict[str, object]
            Node/edge counts, damping factor, iterations used and sink count.
        """
        return {
            "Nodes": self.graph.node_count,
            "Edges": self.graph.edge_count,
            "Average outgoing edges": self.graph.average_degree(),
            "Damping factor": self._damping,
            "Iterations": self.iterations_run,
            "Mode": self.mode,
            "Converged": self.converged,
            "Sink nodes": len(self.graph.sink_nodes()),
            "Total rank mass": self.total_mass(),
        }


def compute_pagerank(
    graph: EdgeListGraph,
    options: RankOptions | None = None,
    *,
    execution: ExecutionOptions | None = None,
) -> Mapping[int, float]:
    """
    Compute PageRank for `graph` in one call.

    Returns
    -------
    Mapping[int, float]
        Rank vector for the requested mode.
    """
    return PageRankEngine(graph, execution=execution).run(options or RankOptions())


__all__ = ["PageRankEngine", "RankMode", "compute_pagerank", "mean_absolute_change"]
