"""CLI entrypoint for computing graph metrics from edge-list files."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable, Iterable
from pathlib import Path

from peergraph.analytics.betweenness import BetweennessEngine
from peergraph.analytics.clustering import ClusteringEngine
from peergraph.analytics.degree import DegreeEngine
from peergraph.analytics.graph_stats import global_graph_stats
from peergraph.analytics.pagerank import PageRankEngine
from peergraph.analytics.report import (
    MetricReport,
    betweenness_report,
    clustering_report,
    degree_report,
    graph_report,
    pagerank_report,
)
from peergraph.config.models import AnalysisConfig, MetricName
from peergraph.config.primitives import DEFAULT_DAMPING, DEFAULT_ITERATIONS, DEFAULT_TOP_N
from peergraph.errors import ProblemError, log_problem, problem
from peergraph.graphs.edge_list import EdgeListGraph, load_graph

LOG = logging.getLogger("peergraph.cli")

CommandHandler = Callable[[argparse.Namespace], int]
ReportBuilder = Callable[[EdgeListGraph, AnalysisConfig], MetricReport]


# ---------------------------------------------------------------------------
# Argument parsing / logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure logging based on -v/--verbose count.

    0 -> WARNING, 1 -> INFO, 2+ -> DEBUG.
    """
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("graph_path", type=Path, help="Path to a whitespace-separated edge list")
    p.add_argument(
        "--top",
        dest="top_n",
        type=int,
        default=DEFAULT_TOP_N,
        help=f"Number of ranked nodes to report (default: {DEFAULT_TOP_N})",
    )
    p.add_argument(
        "--json",
        dest="output_json",
        action="store_true",
        help="Output as JSON for machine consumption.",
    )


def _add_execution_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--executor",
        choices=["serial", "thread", "process"],
        default="thread",
        help=(
            "Worker pool backend for partitioned passes "
            "(default: thread; process runs on multiple cores)."
        ),
    )
    p.add_argument(
        "--workers",
        dest="max_workers",
        type=int,
        default=None,
        help="Worker pool size (default: PEERGRAPH_WORKERS or derived from CPU count).",
    )


def _add_rank_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--damping",
        type=float,
        default=DEFAULT_DAMPING,
        help=f"PageRank damping factor in (0, 1) (default: {DEFAULT_DAMPING}).",
    )
    p.add_argument(
        "--iterations",
        type=int,
        default=DEFAULT_ITERATIONS,
        help=f"PageRank fixed iteration count (default: {DEFAULT_ITERATIONS}).",
    )
    p.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Run PageRank until the mean absolute change drops below this value.",
    )


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="peergraph",
        description="Compute rank, centrality, clustering and degree metrics for edge lists",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be repeated)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    commands: list[tuple[MetricName, str, bool]] = [
        ("stats", "Structural summary (components, density, sinks)", False),
        ("degree", "Rank nodes by in-degree and out-degree", True),
        ("clustering", "Local and global clustering coefficients", True),
        ("pagerank", "PageRank via power iteration", True),
        ("betweenness", "Betweenness centrality via shortest-path accumulation", True),
        ("all", "Every metric against one loaded graph", True),
    ]
    for name, help_text, parallel in commands:
        p = subparsers.add_parser(name, help=help_text)
        _add_common_args(p)
        if parallel:
            _add_execution_args(p)
        if name in {"pagerank", "all"}:
            _add_rank_args(p)
        p.set_defaults(func=_cmd_metric)
    return parser


def make_parser() -> argparse.ArgumentParser:
    """
    Public helper to construct the CLI parser (for tests/tools).

    Returns
    -------
    argparse.ArgumentParser
        Configured parser with all subcommands registered.
    """
    return _make_parser()


# ---------------------------------------------------------------------------
# Command implementations
# ---------------------------------------------------------------------------


def _config_from_args(args: argparse.Namespace) -> AnalysisConfig:
    values = {
        key: getattr(args, key)
        for key in (
            "graph_path",
            "top_n",
            "output_json",
            "executor",
            "max_workers",
            "damping",
            "iterations",
            "threshold",
        )
        if getattr(args, key, None) is not None
    }
    return AnalysisConfig(metric=args.command, **values)


def _stats_report(graph: EdgeListGraph, _cfg: AnalysisConfig) -> MetricReport:
    return graph_report(global_graph_stats(graph))


def _degree_report(graph: EdgeListGraph, cfg: AnalysisConfig) -> MetricReport:
    engine = DegreeEngine(graph, execution=cfg.execution_options())
    engine.compute()
    return degree_report(engine, cfg.top_n)


def _clustering_report(graph: EdgeListGraph, cfg: AnalysisConfig) -> MetricReport:
    engine = ClusteringEngine(graph, execution=cfg.execution_options())
    engine.compute()
    return clustering_report(engine, cfg.top_n)


def _pagerank_report(graph: EdgeListGraph, cfg: AnalysisConfig) -> MetricReport:
    engine = PageRankEngine(graph, execution=cfg.execution_options())
    engine.run(cfg.rank_options())
    return pagerank_report(engine, cfg.top_n)


def _betweenness_report(graph: EdgeListGraph, cfg: AnalysisConfig) -> MetricReport:
    engine = BetweennessEngine(graph, execution=cfg.execution_options())
    engine.compute()
    return betweenness_report(engine, cfg.top_n)


REPORT_BUILDERS: dict[str, ReportBuilder] = {
    "stats": _stats_report,
    "degree": _degree_report,
    "clustering": _clustering_report,
    "pagerank": _pagerank_report,
    "betweenness": _betweenness_report,
}


def build_reports(graph: EdgeListGraph, cfg: AnalysisConfig) -> list[MetricReport]:
    """
    Run the metric(s) requested by `cfg` against an already loaded graph.

    Returns
    -------
    list[MetricReport]
        One report per metric, in a stable order.
    """
    names = list(REPORT_BUILDERS) if cfg.metric == "all" else [cfg.metric]
    return [REPORT_BUILDERS[name](graph, cfg) for name in names]


def _write_reports(reports: Iterable[MetricReport], *, output_json: bool) -> None:
    if output_json:
        sys.stdout.write(json.dumps([report.to_dict() for report in reports], indent=2))
        sys.stdout.write("\n")
        return
    sys.stdout.write("\n\n".join(report.render() for report in reports))
    sys.stdout.write("\n")


def _cmd_metric(args: argparse.Namespace) -> int:
    """
    Load the graph once and write the requested report(s).

    Returns
    -------
    int
        Exit code (0 on success).
    """
    cfg = _config_from_args(args)
    graph = load_graph(cfg.graph_path)
    reports = build_reports(graph, cfg)
    _write_reports(reports, output_json=cfg.output_json)
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    """
    CLI entrypoint for peergraph metric commands.

    Parameters
    ----------
    argv:
        Optional argument list (defaults to sys.argv).

    Returns
    -------
    int
        Exit code (0 on success).
    """
    parser = _make_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    _setup_logging(args.verbose)

    try:
        func: CommandHandler = args.func
        return int(func(args))
    except ProblemError as exc:
        log_problem(LOG, exc.problem_detail)
        return 1
    except Exception as exc:  # noqa: BLE001
        pd = problem(
            code="cli.failure",
            title="CLI command failed",
            detail=str(exc),
            extras={"command": args.command},
        )
        log_problem(LOG, pd)
        return 1


if __name__ == "__main__":
    sys.exit(main())
