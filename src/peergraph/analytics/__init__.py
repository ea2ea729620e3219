"""Metric engines, ranking and reporting over loaded edge-list graphs."""

from peergraph.analytics.betweenness import BetweennessEngine, compute_betweenness
from peergraph.analytics.clustering import ClusteringEngine, ClusteringResult, compute_clustering
from peergraph.analytics.degree import DegreeEngine, DegreeResult, compute_degrees
from peergraph.analytics.graph_stats import GlobalGraphStats, global_graph_stats
from peergraph.analytics.pagerank import PageRankEngine, compute_pagerank
from peergraph.analytics.ranking import RankedNode, top_n
from peergraph.analytics.report import MetricReport, RankingSection

__all__ = [
    "BetweennessEngine",
    "ClusteringEngine",
    "ClusteringResult",
    "DegreeEngine",
    "DegreeResult",
    "GlobalGraphStats",
    "MetricReport",
    "PageRankEngine",
    "RankedNode",
    "RankingSection",
    "compute_betweenness",
    "compute_clustering",
    "compute_degrees",
    "compute_pagerank",
    "global_graph_stats",
    "top_n",
]
