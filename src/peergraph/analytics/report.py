"""Text and JSON reports combining summary statistics with top-N rankings."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from peergraph.analytics.betweenness import BetweennessEngine
from peergraph.analytics.clustering import ClusteringEngine
from peergraph.analytics.degree import DegreeEngine
from peergraph.analytics.graph_stats import GlobalGraphStats
from peergraph.analytics.pagerank import PageRankEngine
from peergraph.analytics.ranking import RankedNode


def format_value(value: object) -> str:
    """
    Render a statistic or metric value.

    Floats use six decimal places; everything else uses `str`.

    Returns
    -------
    str
        Display string.
    """
    if isinstance(value, float):
        return f"{value:.6f}"
    return str(value)


@dataclass(frozen=True)
class RankingSection:
    """A labelled top-N list."""

    label: str
    entries: Sequence[RankedNode[int] | RankedNode[float]]

    def render_lines(self) -> list[str]:
        """
        Render the heading and one numbered line per entry.

        Returns
        -------
        list[str]
            Lines without trailing newlines.
        """
        lines = [f"Top {len(self.entries)} nodes by {self.label}:"]
        lines.extend(
            f"{idx}. node {entry.node}: {format_value(entry.value)}"
            for idx, entry in enumerate(self.entries, start=1)
        )
        return lines


@dataclass(frozen=True)
class MetricReport:
    """Statistics summary plus ranked sections for one metric run."""

    title: str
    stats: Mapping[str, object]
    sections: Sequence[RankingSection] = field(default_factory=tuple)

    def render(self) -> str:
        """
        Render the report as plain text.

        Returns
        -------
        str
            Multi-line report.
        """
        lines = [self.title, "Graph Statistics:"]
        lines.extend(f"- {key}: {format_value(value)}" for key, value in self.stats.items())
        for section in self.sections:
            lines.append("")
            lines.extend(section.render_lines())
        return "\n".join(lines)

    def to_dict(self) -> dict[str, object]:
        """
        Serialize to a JSON-friendly dict.

        Returns
        -------
        dict[str, object]
            Title, stats and ranked (node, value) pairs per section.
        """
        return {
            "title": self.title,
            "stats": dict(self.stats),
            "rankings": {
                section.label: [
                    {"node": entry.node, "value": entry.value} for entry in section.entries
                ]
                for section in self.sections
            },
        }


def graph_report(stats: GlobalGraphStats) -> MetricReport:
    """
    Build a report of global structural statistics.

    Returns
    -------
    MetricReport
        Report without rankings.
    """
    return MetricReport(
        title="Graph structure",
        stats={
            "Nodes": stats.node_count,
            "Edges": stats.edge_count,
            "Distinct edges": stats.distinct_edge_count,
            "Self loops": stats.self_loop_count,
            "Sink nodes": stats.sink_count,
            "Weakly connected components": stats.weak_component_count,
            "Strongly connected components": stats.scc_count,
            "Density": stats.density,
            "Average outgoing edges": stats.average_degree,
            "Is weighted graph": stats.weighted,
        },
    )


def degree_report(engine: DegreeEngine, n: int) -> MetricReport:
    """
    Build a report of in-degree and out-degree leaders.

    Returns
    -------
    MetricReport
        Degree statistics with in-degree and out-degree rankings.
    """
    return MetricReport(
        title="Degree ranking",
        stats=engine.stats(),
        sections=(
            RankingSection("in-degree", engine.top_in_degree(n)),
            RankingSection("out-degree", engine.top_out_degree(n)),
        ),
    )


def clustering_report(engine: ClusteringEngine, n: int) -> MetricReport:
    """
    Build a report of clustering coefficients.

    Returns
    -------
    MetricReport
        Clustering statistics with the top local coefficients.
    """
    return MetricReport(
        title="Clustering coefficient",
        stats=engine.stats(),
        sections=(RankingSection("local clustering coefficient", engine.top_nodes(n)),),
    )


def pagerank_report(engine: PageRankEngine, n: int) -> MetricReport:
    """
    Build a report of PageRank scores.

    Returns
    -------
    MetricReport
        Rank statistics with the top-ranked nodes.
    """
    return MetricReport(
        title="PageRank",
        stats=engine.stats(),
        sections=(RankingSection("PageRank", engine.top_nodes(n)),),
    )


def betweenness_report(engine: BetweennessEngine, n: int) -> MetricReport:
    """
    Build a report of betweenness centrality.

    Returns
    -------
    MetricReport
        Centrality statistics with the most central nodes.
    """
    return MetricReport(
        title="Betweenness centrality",
        stats=engine.stats(),
        sections=(RankingSection("betweenness centrality", engine.top_nodes(n)),),
    )


__all__ = [
    "MetricReport",
    "RankingSection",
    "betweenness_report",
    "clustering_report",
    "degree_report",
    "format_value",
    "graph_report",
    "pagerank_report",
]
