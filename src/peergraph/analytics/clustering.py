"""
Local and global clustering coefficients over directed out-neighborhoods.

For a node with out-neighbor sequence ``N(v)`` of length ``k``, every unordered
index pair ``(a, b)`` of ``N(v)`` is a closed triangle when ``b`` is an
out-neighbor of ``a``. Only the ``a -> b`` direction is checked. The global
coefficient is the plain mean of every local value, including the zeros of
nodes with fewer than two out-neighbors.

Membership tests use a frozenset per node, so a target listed twice in ``a``'s
adjacency still closes the pair once. Work is O(sum deg(v)^2).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import partial
from types import MappingProxyType

from peergraph.analytics.ranking import RankedNode, top_n
from peergraph.analytics.workers import SectionRunner, partition
from peergraph.config.primitives import ExecutionOptions
from peergraph.graphs.edge_list import EdgeListGraph

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusteringResult:
    """Published clustering snapshot."""

    local: Mapping[int, float]
    global_coefficient: float


def local_coefficient(
    targets: Sequence[int], membership: Mapping[int, frozenset[int]]
) -> float:
    """
    Return the directed local clustering coefficient for one out-neighborhood.

    Parameters
    ----------
    targets : Sequence[int]
        Out-neighbors of the node, duplicates included.
    membership : Mapping[int, frozenset[int]]
        Out-neighbor set for every node in the graph.

    Returns
    -------
    float
        Closed pairs divided by ``k(k-1)/2``; 0.0 when ``k < 2``.
    """
    k = len(targets)
    if k < 2:  # noqa: PLR2004
        return 0.0
    closed = 0
    for i in range(k):
        reachable = membership[targets[i]]
        for j in range(i + 1, k):
            if targets[j] in reachable:
                closed += 1
    return closed / (k * (k - 1) / 2)


def _local_section(
    adjacency: Mapping[int, tuple[int, ...]],
    membership: Mapping[int, frozenset[int]],
    section: Sequence[int],
) -> dict[int, float]:
    return {node: local_coefficient(adjacency[node], membership) for node in section}


class ClusteringEngine:
    """Clustering coefficients over an immutable graph."""

    def __init__(self, graph: EdgeListGraph, *, execution: ExecutionOptions | None = None) -> None:
        self.graph = graph
        self.execution = execution or ExecutionOptions()
        self._result = ClusteringResult(
            local=MappingProxyType(dict.fromkeys(graph.adjacency, 0.0)),
            global_coefficient=0.0,
        )

    @property
    def result(self) -> ClusteringResult:
        """Most recently published clustering snapshot."""
        return self._result

    @property
    def coefficients(self) -> Mapping[int, float]:
        """Local coefficient per node."""
        return self._result.local

    @property
    def global_coefficient(self) -> float:
        """Mean of all local coefficients."""
        return self._result.global_coefficient

    def compute(self) -> ClusteringResult:
        """
        Compute every local coefficient and their mean.

        Returns
        -------
        ClusteringResult
            Fresh snapshot, also published on the engine.
        """
        graph = self.graph
        adjacency = graph.to_dict()
        membership = {node: frozenset(targets) for node, targets in adjacency.items()}
        local: dict[int, float] = {}
        with SectionRunner(self.execution, metric="clustering") as runner:
            sections = partition(graph.nodes(), runner.worker_count)
            task = partial(_local_section, adjacency, membership)
            for partial_result in runner.run(task, sections):
                local.update(partial_result)
        global_coefficient = sum(local.values()) / len(local) if local else 0.0
        self._result = ClusteringResult(
            local=MappingProxyType(local),
            global_coefficient=global_coefficient,
        )
        log.info(
            "Computed clustering nodes=%d global=%.6f",
            graph.node_count,
            global_coefficient,
        )
        return self._result

    def top_nodes(self, n: int) -> list[RankedNode[float]]:
        """
        Return the nodes with the highest local coefficient.

        Returns
        -------
        list[RankedNode[float]]
            Up to `n` nodes sorted descending.
        """
        return top_n(self._result.local, n)

    def stats(self) -> dict[str, object]:
        """
        Summarize the coefficient distribution.

        Returns
        -------
        dict[str, object]
            Node/edge counts, global coefficient and local extremes.
        """
        values = list(self._result.local.values())
        return {
            "Nodes": self.graph.node_count,
            "Edges": self.graph.edge_count,
            "Global clustering coefficient": self._result.global_coefficient,
            "Maximum local clustering coefficient": max(values, default=0.0),
            "Minimum local clustering coefficient": min(values, default=0.0),
        }


def compute_clustering(
    graph: EdgeListGraph, *, execution: ExecutionOptions | None = None
) -> ClusteringResult:
    """
    Compute clustering coefficients for `graph` in one call.

    Returns
    -------
    ClusteringResult
        Local coefficients and their global mean.
    """
    return ClusteringEngine(graph, execution=execution).compute()


__all__ = ["ClusteringEngine", "ClusteringResult", "compute_clustering", "local_coefficient"]
