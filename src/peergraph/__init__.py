"""Structural importance metrics (rank, centrality, clustering, degree) for edge-list graphs."""

from peergraph.analytics import (
    BetweennessEngine,
    ClusteringEngine,
    DegreeEngine,
    PageRankEngine,
    RankedNode,
    top_n,
)
from peergraph.errors import GraphParseError, GraphReadError, MetricComputationError
from peergraph.graphs import EdgeListGraph, load_graph

__all__ = [
    "BetweennessEngine",
    "ClusteringEngine",
    "DegreeEngine",
    "EdgeListGraph",
    "GraphParseError",
    "GraphReadError",
    "MetricComputationError",
    "PageRankEngine",
    "RankedNode",
    "load_graph",
    "top_n",
]
