"""Graph loading and NetworkX interop."""

from peergraph.graphs.edge_list import EdgeListGraph, load_graph, parse_edge_lines
from peergraph.graphs.nx_views import to_digraph

__all__ = ["EdgeListGraph", "load_graph", "parse_edge_lines", "to_digraph"]
