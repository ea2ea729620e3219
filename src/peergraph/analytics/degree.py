"""In-degree and out-degree rankings."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from peergraph.analytics.ranking import RankedNode, top_n
from peergraph.analytics.workers import SectionRunner, partition
from peergraph.config.primitives import ExecutionOptions
from peergraph.graphs.edge_list import EdgeListGraph

log = logging.getLogger(__name__)

AdjacencyItems = Sequence[tuple[int, tuple[int, ...]]]


@dataclass(frozen=True)
class DegreeResult:
    """Published in/out degree snapshot for every node."""

    in_degree: Mapping[int, int]
    out_degree: Mapping[int, int]


def _in_degree_partial(section: AdjacencyItems) -> Counter[int]:
    counts: Counter[int] = Counter()
    for _, targets in section:
        counts.update(targets)
    return counts


class DegreeEngine:
    """Degree counts over an immutable graph."""

    def __init__(self, graph: EdgeListGraph, *, execution: ExecutionOptions | None = None) -> None:
        self.graph = graph
        self.execution = execution or ExecutionOptions()
        zeros = MappingProxyType(dict.fromkeys(graph.adjacency, 0))
        self._result = DegreeResult(in_degree=zeros, out_degree=zeros)

    @property
    def result(self) -> DegreeResult:
        """Most recently published degree snapshot."""
        return self._result

    @property
    def in_degree(self) -> Mapping[int, int]:
        """Incoming edge count per node."""
        return self._result.in_degree

    @property
    def out_degree(self) -> Mapping[int, int]:
        """Outgoing edge count per node."""
        return self._result.out_degree

    def compute(self) -> DegreeResult:
        """
        Count in-degree and out-degree for every node.

        Returns
        -------
        DegreeResult
            Fresh degree snapshot, also published on the engine.
        """
        graph = self.graph
        out_degree = {node: len(targets) for node, targets in graph.adjacency.items()}
        in_degree = dict.fromkeys(graph.adjacency, 0)
        with SectionRunner(self.execution, metric="degree") as runner:
            sections = partition(list(graph.adjacency.items()), runner.worker_count)
            for partial in runner.run(_in_degree_partial, sections):
                for node, count in partial.items():
                    in_degree[node] += count
        self._result = DegreeResult(
            in_degree=MappingProxyType(in_degree),
            out_degree=MappingProxyType(out_degree),
        )
        log.info("Computed degrees nodes=%d edges=%d", graph.node_count, graph.edge_count)
        return self._result

    def average_degree(self) -> float:
        """
        Return edges per node, 0.0 for an empty graph.

        Returns
        -------
        float
            Average degree.
        """
        return self.graph.average_degree()

    def top_in_degree(self, n: int) -> list[RankedNode[int]]:
        """
        Return the nodes with the most incoming edges.

        Returns
        -------
        list[RankedNode[int]]
            Up to `n` nodes sorted by in-degree descending.
        """
        return top_n(self._result.in_degree, n)

    def top_out_degree(self, n: int) -> list[RankedNode[int]]:
        """
        Return the nodes with the most outgoing edges.

        Returns
        -------
        list[RankedNode[int]]
            Up to `n` nodes sorted by out-degree descending.
        """
        return top_n(self._result.out_degree, n)

    def stats(self) -> dict[str, object]:
        """
        Summarize the degree distribution.

        Returns
        -------
        dict[str, object]
            Node/edge counts plus average, maximum and minimum in-degree.
        """
        in_values = list(self._result.in_degree.values())
        return {
            "Nodes": self.graph.node_count,
            "Edges": self.graph.edge_count,
            "Average in-degree": self.average_degree(),
            "Maximum in-degree": max(in_values, default=0),
            "Minimum in-degree": min(in_values, default=0),
        }


def compute_degrees(
    graph: EdgeListGraph, *, execution: ExecutionOptions | None = None
) -> DegreeResult:
    """
    Compute degree counts for `graph` in one call.

    Returns
    -------
    DegreeResult
        In/out degree snapshot.
    """
    return DegreeEngine(graph, execution=execution).compute()


__all__ = ["DegreeEngine", "DegreeResult", "compute_degrees"]
