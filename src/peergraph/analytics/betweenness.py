"""
Betweenness centrality by per-source shortest-path accumulation.

Each node is used once as a BFS source over out-edges. Every edge ``v -> w``
with ``dist(w) == dist(v) + 1`` adds ``sigma(v)`` to ``sigma(w)`` and records
``v`` as a predecessor of ``w``; parallel edges count as distinct paths in both
places. Dependencies are then accumulated farthest-first from the BFS visit
stack, which is a valid reverse topological order of the shortest-path DAG.

Sources are independent, so they are split into batches whose partial totals
are summed in batch order once every batch has finished. With ``n > 2`` nodes
the totals are divided by ``(n - 1)(n - 2)``.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import partial
from types import MappingProxyType

from peergraph.analytics.ranking import RankedNode, top_n
from peergraph.analytics.workers import SectionRunner, partition
from peergraph.config.primitives import ExecutionOptions
from peergraph.graphs.edge_list import EdgeListGraph

log = logging.getLogger(__name__)

UNREACHED = -1


@dataclass
class SourcePass:
    """Transient BFS state for one source node."""

    source: int
    distance: dict[int, int]
    sigma: dict[int, int]
    predecessors: dict[int, list[int]]
    order: list[int]


def shortest_path_dag(adjacency: Mapping[int, Sequence[int]], source: int) -> SourcePass:
    """
    Run a BFS from `source`, counting shortest paths and predecessors.

    Parameters
    ----------
    adjacency : Mapping[int, Sequence[int]]
        Out-neighbors per node.
    source : int
        BFS root.

    Returns
    -------
    SourcePass
        Distances, path counts, predecessor lists and visit order for reached nodes.
    """
    distance = {source: 0}
    sigma = {source: 1}
    predecessors: dict[int, list[int]] = {source: []}
    order: list[int] = []
    queue = deque([source])
    while queue:
        v = queue.popleft()
        order.append(v)
        next_distance = distance[v] + 1
        for w in adjacency[v]:
            if distance.get(w, UNREACHED) == UNREACHED:
                distance[w] = next_distance
                sigma[w] = 0
                predecessors[w] = []
                queue.append(w)
            if distance[w] == next_distance:
                sigma[w] += sigma[v]
                predecessors[w].append(v)
    return SourcePass(
        source=source,
        distance=distance,
        sigma=sigma,
        predecessors=predecessors,
        order=order,
    )


def accumulate_dependencies(state: SourcePass, totals: dict[int, float]) -> None:
    """Add the dependencies of one source pass to `totals`, farthest nodes first."""
    dependency = dict.fromkeys(state.order, 0.0)
    sigma = state.sigma
    for w in reversed(state.order):
        if w == state.source:
            continue
        for v in state.predecessors[w]:
            dependency[v] += sigma[v] / sigma[w] * (1.0 + dependency[w])
        totals[w] = totals.get(w, 0.0) + dependency[w]


def _source_batch(adjacency: Mapping[int, Sequence[int]], sources: Sequence[int]) -> dict[int, float]:
    totals: dict[int, float] = {}
    for source in sources:
        accumulate_dependencies(shortest_path_dag(adjacency, source), totals)
    return totals


def normalization_factor(node_count: int) -> float | None:
    """
    Return the directed normalization divisor ``(n-1)(n-2)``.

    Returns
    -------
    float | None
        Divisor, or None when ``n <= 2`` and no normalization applies.
    """
    if node_count <= 2:  # noqa: PLR2004
        return None
    return float((node_count - 1) * (node_count - 2))


class BetweennessEngine:
    """Betweenness centrality over an immutable graph."""

    def __init__(self, graph: EdgeListGraph, *, execution: ExecutionOptions | None = None) -> None:
        self.graph = graph
        self.execution = execution or ExecutionOptions()
        self._centrality: Mapping[int, float] = MappingProxyType(
            dict.fromkeys(graph.adjacency, 0.0)
        )

    @property
    def centrality(self) -> Mapping[int, float]:
        """Most recently published centrality vector."""
        return self._centrality

    def compute(self) -> Mapping[int, float]:
        """
        Accumulate dependencies from every source and normalize.

        Returns
        -------
        Mapping[int, float]
            Published centrality vector.
        """
        graph = self.graph
        adjacency = graph.to_dict()
        centrality = dict.fromkeys(adjacency, 0.0)
        with SectionRunner(self.execution, metric="betweenness") as runner:
            batches = partition(graph.nodes(), runner.worker_count)
            log.debug("Betweenness sources=%d batches=%d", graph.node_count, len(batches))
            for totals in runner.run(partial(_source_batch, adjacency), batches):
                for node, value in totals.items():
                    centrality[node] += value
        divisor = normalization_factor(graph.node_count)
        if divisor is not None:
            centrality = {node: value / divisor for node, value in centrality.items()}
        self._centrality = MappingProxyType(centrality)
        log.info(
            "Computed betweenness nodes=%d edges=%d normalized=%s",
            graph.node_count,
            graph.edge_count,
            divisor is not None,
        )
        return self._centrality

    def top_nodes(self, n: int) -> list[RankedNode[float]]:
        """
        Return the most central nodes.

        Returns
        -------
        list[RankedNode[float]]
            Up to `n` nodes sorted by centrality descending.
        """
        return top_n(self._centrality, n)

    def stats(self) -> dict[str, object]:
        """
        Summarize the centrality distribution.

        Returns
        -------
        dict[str, object]
            Node/edge counts, mean and maximum centrality and the weighted flag.
        """
        values = list(self._centrality.values())
        return {
            "Nodes": self.graph.node_count,
            "Edges": self.graph.edge_count,
            "Average betweenness centrality": sum(values) / len(values) if values else 0.0,
            "Maximum betweenness centrality": max(values, default=0.0),
            "Is weighted graph": self.graph.weighted,
        }


def compute_betweenness(
    graph: EdgeListGraph, *, execution: ExecutionOptions | None = None
) -> Mapping[int, float]:
    """
    Compute betweenness centrality for `graph` in one call.

    Returns
    -------
    Mapping[int, float]
        Normalized centrality vector.
    """
    return BetweennessEngine(graph, execution=execution).compute()


__all__ = [
    "BetweennessEngine",
    "SourcePass",
    "accumulate_dependencies",
    "compute_betweenness",
    "normalization_factor",
    "shortest_path_dag",
]
