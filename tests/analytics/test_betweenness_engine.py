"""Tests for Brandes-style betweenness centrality."""

from __future__ import annotations

import networkx as nx
import pytest

from peergraph.analytics.betweenness import (
    BetweennessEngine,
    compute_betweenness,
    normalization_factor,
    shortest_path_dag,
)
from peergraph.config.primitives import ExecutionOptions
from peergraph.graphs.edge_list import EdgeListGraph
from peergraph.graphs.nx_views import to_digraph
from tests._helpers.builders import complete_digraph, cycle_graph, path_graph, star_graph
from tests._helpers.expect import expect_close, expect_equal, expect_vectors_close

SIMPLE_EDGES = [
    (10, 20),
    (10, 30),
    (20, 30),
    (30, 10),
    (30, 40),
    (40, 500),
    (500, 10),
    (40, 20),
    (40, 600),
]


def test_path_middle_node_is_central(execution: ExecutionOptions) -> None:
    """In 1 -> 2 -> 3 only node 2 lies between a pair."""
    centrality = compute_betweenness(path_graph(), execution=execution)
    expect_vectors_close(centrality, {1: 0.0, 2: 0.5, 3: 0.0}, label="path")


def test_two_node_graph_is_not_normalized(serial_execution: ExecutionOptions) -> None:
    """Graphs with at most two nodes skip normalization and stay at zero."""
    centrality = compute_betweenness(path_graph((1, 2)), execution=serial_execution)
    expect_equal(dict(centrality), {1: 0.0, 2: 0.0}, label="two nodes")
    expect_equal(normalization_factor(2), None, label="n=2")
    expect_equal(normalization_factor(5), 12.0, label="n=5")


@pytest.mark.parametrize(
    "graph",
    [
        path_graph((1, 2, 3, 4, 5)),
        cycle_graph((1, 2, 3, 4)),
        complete_digraph((1, 2, 3, 4)),
        star_graph(),
        EdgeListGraph.from_edges(SIMPLE_EDGES),
    ],
    ids=["path", "cycle", "complete", "star", "mixed"],
)
def test_matches_networkx_on_simple_graphs(
    graph: EdgeListGraph, execution: ExecutionOptions
) -> None:
    """Without parallel edges the result equals NetworkX's normalized betweenness."""
    expected = nx.betweenness_centrality(to_digraph(graph), normalized=True)
    centrality = compute_betweenness(graph, execution=execution)
    expect_vectors_close(centrality, expected, tol=1e-12, label="networkx")


def test_parallel_edges_count_as_distinct_paths() -> None:
    """Duplicated edges multiply shortest-path counts and predecessor entries."""
    adjacency = {1: (2, 2, 3), 2: (4,), 3: (4,), 4: ()}
    state = shortest_path_dag(adjacency, 1)
    expect_equal(state.sigma, {1: 1, 2: 2, 3: 1, 4: 3}, label="sigma")
    expect_equal(state.predecessors[2], [1, 1], label="predecessors of 2")
    expect_equal(state.distance[4], 2, label="distance")

    graph = EdgeListGraph.from_edges([(1, 2), (1, 2), (1, 3), (2, 4), (3, 4)])
    centrality = compute_betweenness(graph, execution=ExecutionOptions.serial())
    divisor = 3 * 2
    expect_close(centrality[2], (2 / 3) / divisor, label="node 2")
    expect_close(centrality[3], (1 / 3) / divisor, label="node 3")


def test_unreachable_nodes_are_skipped(serial_execution: ExecutionOptions) -> None:
    """Disconnected components contribute nothing to each other."""
    graph = EdgeListGraph.from_edges([(1, 2), (2, 3), (7, 8)])
    centrality = compute_betweenness(graph, execution=serial_execution)
    expect_close(centrality[2], 1 / (4 * 3), label="node 2")
    expect_equal(centrality[7], 0.0, label="node 7")
    state = shortest_path_dag(graph.to_dict(), 1)
    expect_equal(set(state.distance), {1, 2, 3}, label="reached")


def test_process_pool_matches_serial(serial_execution: ExecutionOptions) -> None:
    """Process workers receive plain data and produce the same vector."""
    graph = EdgeListGraph.from_edges(SIMPLE_EDGES)
    serial = compute_betweenness(graph, execution=serial_execution)
    processed = compute_betweenness(
        graph, execution=ExecutionOptions(executor="process", max_workers=2)
    )
    expect_vectors_close(processed, serial, tol=1e-12, label="process parity")


def test_engine_rankings_and_stats(serial_execution: ExecutionOptions) -> None:
    """Top nodes and stats reflect the published vector."""
    engine = BetweennessEngine(path_graph(), execution=serial_execution)
    engine.compute()
    expect_equal([entry.node for entry in engine.top_nodes(2)], [2, 1], label="ranking")
    stats = engine.stats()
    expect_close(float(stats["Average betweenness centrality"]), 0.5 / 3, label="average")
    expect_close(float(stats["Maximum betweenness centrality"]), 0.5, label="maximum")
    expect_equal(stats["Is weighted graph"], False, label="weighted")


def test_empty_graph_betweenness(serial_execution: ExecutionOptions) -> None:
    """An empty graph gives an empty vector and zeroed stats."""
    engine = BetweennessEngine(EdgeListGraph.from_edges([]), execution=serial_execution)
    expect_equal(dict(engine.compute()), {}, label="centrality")
    expect_equal(engine.stats()["Average betweenness centrality"], 0.0, label="average")


def test_repeated_compute_is_identical(execution: ExecutionOptions) -> None:
    """Computing twice over the same graph publishes the same vector."""
    engine = BetweennessEngine(EdgeListGraph.from_edges(SIMPLE_EDGES), execution=execution)
    first = dict(engine.compute())
    second = dict(engine.compute())
    expect_vectors_close(second, first, tol=0.0, label="repeat")
