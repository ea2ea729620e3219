"""Load whitespace-separated edge lists into an immutable directed graph."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from peergraph.errors import GraphParseError, GraphReadError

log = logging.getLogger(__name__)

COMMENT_PREFIX = "#"
NODE_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class EdgeListGraph:
    """
    Directed multigraph over an arbitrary integer node-id space.

    `adjacency` maps every node id to its out-neighbors in file order with
    duplicates preserved. Every edge target is also a key, so engines never
    meet an unknown id.
    """

    adjacency: Mapping[int, tuple[int, ...]]
    edge_count: int
    weighted: bool = False
    source: Path | None = None
    _sinks: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Freeze the adjacency mapping and cache sink nodes."""
        frozen = MappingProxyType({node: tuple(targets) for node, targets in self.adjacency.items()})
        object.__setattr__(self, "adjacency", frozen)
        object.__setattr__(
            self, "_sinks", tuple(node for node, targets in frozen.items() if not targets)
        )

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[tuple[int, int]],
        *,
        nodes: Iterable[int] = (),
        weighted: bool = False,
    ) -> EdgeListGraph:
        """
        Build a graph from in-memory (source, target) pairs.

        Parameters
        ----------
        edges : Iterable[tuple[int, int]]
            Directed edges in insertion order.
        nodes : Iterable[int], optional
            Extra isolated nodes to register.
        weighted : bool, optional
            Value for the informational weighted flag.

        Returns
        -------
        EdgeListGraph
            Immutable graph containing every endpoint as a node.
        """
        builder = _AdjacencyBuilder()
        for node in nodes:
            builder.add_node(node)
        for src, dst in edges:
            builder.add_edge(src, dst)
        return builder.build(weighted=weighted)

    @property
    def node_count(self) -> int:
        """Number of distinct node ids."""
        return len(self.adjacency)

    def nodes(self) -> list[int]:
        """
        Return node ids in first-seen order.

        Returns
        -------
        list[int]
            Node identifiers.
        """
        return list(self.adjacency)

    def successors(self, node: int) -> tuple[int, ...]:
        """
        Return out-neighbors of a node, duplicates included.

        Returns
        -------
        tuple[int, ...]
            Targets of edges leaving `node`.
        """
        return self.adjacency[node]

    def out_degree(self, node: int) -> int:
        """
        Return the number of edges leaving a node.

        Returns
        -------
        int
            Length of the node's adjacency tuple.
        """
        return len(self.adjacency[node])

    def sink_nodes(self) -> tuple[int, ...]:
        """
        Return nodes with no out-edges.

        Returns
        -------
        tuple[int, ...]
            Sink node ids in first-seen order.
        """
        return self._sinks

    def average_degree(self) -> float:
        """
        Return edges per node, or 0.0 for an empty graph.

        Returns
        -------
        float
            Average out-degree (equal to average in-degree).
        """
        if self.node_count == 0:
            return 0.0
        return self.edge_count / self.node_count

    def to_dict(self) -> dict[int, tuple[int, ...]]:
        """
        Return a plain, picklable copy of the adjacency mapping.

        Returns
        -------
        dict[int, tuple[int, ...]]
            Node id to out-neighbor tuple.
        """
        return dict(self.adjacency)


class _AdjacencyBuilder:
    """Mutable accumulator used only while a graph is being parsed."""

    def __init__(self) -> None:
        self._adjacency: dict[int, list[int]] = {}
        self._edges = 0

    def add_node(self, node: int) -> None:
        self._adjacency.setdefault(node, [])

    def add_edge(self, src: int, dst: int) -> None:
        self._adjacency.setdefault(src, []).append(dst)
        self._adjacency.setdefault(dst, [])
        self._edges += 1

    def build(self, *, weighted: bool, source: Path | None = None) -> EdgeListGraph:
        return EdgeListGraph(
            adjacency={node: tuple(targets) for node, targets in self._adjacency.items()},
            edge_count=self._edges,
            weighted=weighted,
            source=source,
        )


def _parse_node_id(token: str, *, line_number: int, line: str) -> int:
    # ASCII digits only; int() alone would accept "1_0" and non-ASCII digits.
    if NODE_ID_PATTERN.fullmatch(token) is None:
        raise GraphParseError(line_number, line, f"invalid node id {token!r}")
    return int(token)


def parse_edge_lines(lines: Iterable[str], *, source: Path | None = None) -> EdgeListGraph:
    """
    Parse edge-list text into an immutable graph.

    Lines starting with ``#`` and blank lines are skipped. The first two
    whitespace-separated tokens are the source and target ids; a third token
    marks the graph as weighted and is otherwise ignored.

    Parameters
    ----------
    lines : Iterable[str]
        Raw lines, with or without trailing newlines.
    source : Path | None, optional
        File the lines came from, recorded on the graph.

    Returns
    -------
    EdgeListGraph
        Graph containing every parsed edge.

    Raises
    ------
    GraphParseError
        If a line lacks a target token or carries a non-integer id.
    """
    builder = _AdjacencyBuilder()
    weighted = False
    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if line.startswith(COMMENT_PREFIX) or not line.strip():
            continue
        parts = line.split()
        if len(parts) < 2:  # noqa: PLR2004
            raise GraphParseError(line_number, line, "expected source and target ids")
        src = _parse_node_id(parts[0], line_number=line_number, line=line)
        dst = _parse_node_id(parts[1], line_number=line_number, line=line)
        if len(parts) > 2:  # noqa: PLR2004
            weighted = True
        builder.add_edge(src, dst)
    return builder.build(weighted=weighted, source=source)


def load_graph(path: Path | str) -> EdgeListGraph:
    """
    Load an edge-list file.

    Parameters
    ----------
    path : Path | str
        Location of the edge-list file.

    Returns
    -------
    EdgeListGraph
        Immutable graph with node and edge counts.

    Raises
    ------
    GraphReadError
        If the file cannot be opened or read.
    """
    graph_path = Path(path)
    try:
        with graph_path.open(encoding="utf-8") as handle:
            graph = parse_edge_lines(handle, source=graph_path)
    except (OSError, UnicodeDecodeError) as exc:
        raise GraphReadError(graph_path, str(exc)) from exc
    log.info(
        "Loaded graph path=%s nodes=%d edges=%d weighted=%s",
        graph_path,
        graph.node_count,
        graph.edge_count,
        graph.weighted,
    )
    return graph


__all__ = ["EdgeListGraph", "load_graph", "parse_edge_lines"]
