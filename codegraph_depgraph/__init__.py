"""
Codegraph Depgraph

Structural type dependency graphs for TypeScript, Java, Swift and Go,
extracted with tree-sitter.

Usage:
    from codegraph_depgraph import scan_directory, diff_graphs

    before = scan_revision("src", "HEAD~1").graph
    after = scan_directory("src").graph
    changes = diff_graphs(before, after)
"""

__version__ = "0.3.0"

from codegraph_depgraph.assembler import assemble_fragments, assemble_graph
from codegraph_depgraph.diff import diff_graphs, is_diff_empty
from codegraph_depgraph.models import (
    DependencyGraph,
    EdgeKind,
    GraphDiff,
    GraphEdge,
    GraphNode,
    NodeKind,
    deserialize_graph,
    serialize_graph,
)
from codegraph_depgraph.scanner import ScanResult, scan_directory, scan_files, scan_revision

__all__ = [
    "__version__",
    "assemble_fragments",
    "assemble_graph",
    "diff_graphs",
    "is_diff_empty",
    "DependencyGraph",
    "EdgeKind",
    "GraphDiff",
    "GraphEdge",
    "GraphNode",
    "NodeKind",
    "deserialize_graph",
    "serialize_graph",
    "ScanResult",
    "scan_directory",
    "scan_files",
    "scan_revision",
]
