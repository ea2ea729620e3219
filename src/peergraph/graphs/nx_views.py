"""NetworkX views over loaded edge-list graphs."""

from __future__ import annotations

import networkx as nx

from peergraph.graphs.edge_list import EdgeListGraph


def to_digraph(graph: EdgeListGraph) -> nx.DiGraph:
    """
    Build a `DiGraph` of source -> target edges.

    Parallel edges are aggregated via `weight`, which counts how many times the
    edge appeared in the input. Isolated nodes are preserved.

    Parameters
    ----------
    graph : EdgeListGraph
        Loaded graph to convert.

    Returns
    -------
    nx.DiGraph
        Directed graph with multiplicity-weighted edges.
    """
    digraph = nx.DiGraph()
    digraph.add_nodes_from(graph.adjacency)
    for src, targets in graph.adjacency.items():
        for dst in targets:
            if digraph.has_edge(src, dst):
                digraph[src][dst]["weight"] += 1
            else:
                digraph.add_edge(src, dst, weight=1)
    return digraph


__all__ = ["to_digraph"]
