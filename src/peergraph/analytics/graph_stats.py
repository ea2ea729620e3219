"""Global structural statistics for loaded graphs."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

import networkx as nx

from peergraph.graphs.edge_list import EdgeListGraph
from peergraph.graphs.nx_views import to_digraph

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GlobalGraphStats:
    """Counts and connectivity aggregates for one graph."""

    node_count: int
    edge_count: int
    distinct_edge_count: int
    self_loop_count: int
    sink_count: int
    weak_component_count: int
    scc_count: int
    density: float
    average_degree: float
    weighted: bool

    def to_dict(self) -> dict[str, object]:
        """
        Return the statistics as a plain dict.

        Returns
        -------
        dict[str, object]
            Field name to value.
        """
        return asdict(self)


def global_graph_stats(graph: EdgeListGraph) -> GlobalGraphStats:
    """
    Return global statistics for the provided graph.

    Parameters
    ----------
    graph : EdgeListGraph
        Graph to evaluate.

    Returns
    -------
    GlobalGraphStats
        Counts and structural aggregates; zeros for an empty graph.
    """
    digraph = to_digraph(graph)
    if digraph.number_of_nodes() == 0:
        log.debug("Graph is empty; statistics will be zeroed")
        return GlobalGraphStats(
            node_count=0,
            edge_count=graph.edge_count,
            distinct_edge_count=0,
            self_loop_count=0,
            sink_count=0,
            weak_component_count=0,
            scc_count=0,
            density=0.0,
            average_degree=0.0,
            weighted=graph.weighted,
        )
    return GlobalGraphStats(
        node_count=graph.node_count,
        edge_count=graph.edge_count,
        distinct_edge_count=digraph.number_of_edges(),
        self_loop_count=nx.number_of_selfloops(digraph),
        sink_count=len(graph.sink_nodes()),
        weak_component_count=nx.number_weakly_connected_components(digraph),
        scc_count=nx.number_strongly_connected_components(digraph),
        density=float(nx.density(digraph)),
        average_degree=graph.average_degree(),
        weighted=graph.weighted,
    )


__all__ = ["GlobalGraphStats", "global_graph_stats"]
