"""Tests for directed local and global clustering coefficients."""

from __future__ import annotations

from peergraph.analytics.clustering import ClusteringEngine, compute_clustering, local_coefficient
from peergraph.config.primitives import ExecutionOptions
from peergraph.graphs.edge_list import EdgeListGraph
from tests._helpers.builders import complete_digraph, star_graph
from tests._helpers.expect import expect_close, expect_equal, expect_true


def test_complete_digraph_is_fully_clustered(execution: ExecutionOptions) -> None:
    """Every pair of out-neighbors is linked in a complete digraph."""
    result = compute_clustering(complete_digraph((1, 2, 3, 4)), execution=execution)
    for node, value in result.local.items():
        expect_close(value, 1.0, label=f"node {node}")
    expect_close(result.global_coefficient, 1.0, label="global")


def test_star_graph_has_zero_clustering(execution: ExecutionOptions) -> None:
    """Leaves have no out-edges so no pair is closed."""
    result = compute_clustering(star_graph(), execution=execution)
    expect_equal(set(result.local.values()), {0.0}, label="local values")
    expect_equal(result.global_coefficient, 0.0, label="global")


def test_only_forward_direction_closes_a_pair() -> None:
    """Pair (a, b) counts only when a -> b exists, not b -> a."""
    membership = {2: frozenset(), 3: frozenset({2})}
    expect_equal(local_coefficient((2, 3), membership), 0.0, label="reverse only")
    expect_equal(local_coefficient((3, 2), membership), 1.0, label="forward")


def test_duplicate_edge_does_not_close_twice(serial_execution: ExecutionOptions) -> None:
    """A repeated a -> b edge is a single membership hit."""
    graph = EdgeListGraph.from_edges([(1, 2), (1, 3), (2, 3), (2, 3)])
    engine = ClusteringEngine(graph, execution=serial_execution)
    engine.compute()
    expect_equal(engine.coefficients[1], 1.0, label="node 1")
    expect_equal(engine.coefficients[2], 0.0, label="node 2")
    expect_close(engine.global_coefficient, 1 / 3, label="global")


def test_global_is_mean_including_low_degree_nodes(serial_execution: ExecutionOptions) -> None:
    """Nodes with fewer than two out-neighbors contribute zero to the mean."""
    graph = EdgeListGraph.from_edges([(1, 2), (1, 3), (1, 4), (2, 3)])
    engine = ClusteringEngine(graph, execution=serial_execution)
    engine.compute()
    expect_close(engine.coefficients[1], 1 / 3, label="node 1")
    expect_close(engine.global_coefficient, (1 / 3) / 4, label="global")
    ranked = engine.top_nodes(2)
    expect_equal([entry.node for entry in ranked], [1, 2], label="ranking")


def test_clustering_values_are_bounded(execution: ExecutionOptions) -> None:
    """Local coefficients stay within [0, 1]."""
    graph = EdgeListGraph.from_edges(
        [(1, 2), (1, 3), (1, 4), (2, 3), (3, 4), (4, 2), (2, 1), (3, 1)]
    )
    result = compute_clustering(graph, execution=execution)
    expect_true(
        all(0.0 <= value <= 1.0 for value in result.local.values()),
        message=f"Out-of-range coefficient in {dict(result.local)}",
    )


def test_clustering_on_empty_graph(serial_execution: ExecutionOptions) -> None:
    """An empty graph yields no local values and a zero global value."""
    engine = ClusteringEngine(EdgeListGraph.from_edges([]), execution=serial_execution)
    result = engine.compute()
    expect_equal(dict(result.local), {}, label="local")
    expect_equal(result.global_coefficient, 0.0, label="global")
    expect_equal(engine.stats()["Maximum local clustering coefficient"], 0.0, label="max")


def test_repeated_compute_is_identical(execution: ExecutionOptions) -> None:
    """Computing twice over the same graph publishes the same values."""
    graph = EdgeListGraph.from_edges([(1, 2), (1, 3), (1, 4), (2, 3), (3, 4), (4, 2), (2, 1)])
    engine = ClusteringEngine(graph, execution=execution)
    first = engine.compute()
    second = engine.compute()
    expect_equal(dict(second.local), dict(first.local), label="local")
    expect_equal(second.global_coefficient, first.global_coefficient, label="global")
