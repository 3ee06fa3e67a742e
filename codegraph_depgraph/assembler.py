"""
Graph Assembler

Turns the concatenated output of all extractors into one DependencyGraph.

Steps:
1. Deduplicate nodes by (name, kind), first occurrence wins
2. Collect the surviving node names
3. Keep edges whose endpoints are both known names and differ
   (drops references to external and built-in types, and self references)
4. Deduplicate edges by (from, to, kind), first occurrence wins
5. Stamp the scan time and source revision

Pure: no I/O, input order is preserved.
"""

from collections.abc import Iterable
from datetime import datetime, timezone

from codegraph_depgraph.models import DependencyGraph, EdgeKey, Fragment, GraphEdge, GraphNode, NodeKey


def assemble_graph(
    nodes: Iterable[GraphNode],
    edges: Iterable[GraphEdge],
    commit_sha: str | None = None,
    scanned_at: datetime | None = None,
) -> DependencyGraph:
    """
    Build a deduplicated, edge-validated graph.

    Args:
        nodes: Extracted nodes in file-scan order
        edges: Extracted edges in file-scan order
        commit_sha: Source revision, if known
        scanned_at: Capture time (default: now, UTC)

    Returns:
        DependencyGraph
    """
    unique_nodes: dict[NodeKey, GraphNode] = {}
    for node in nodes:
        unique_nodes.setdefault(node.key, node)

    names = {name for name, _ in unique_nodes}

    unique_edges: dict[EdgeKey, GraphEdge] = {}
    for edge in edges:
        if edge.source == edge.target:
            continue
        if edge.source not in names or edge.target not in names:
            continue
        unique_edges.setdefault(edge.key, edge)

    return DependencyGraph(
        nodes=tuple(unique_nodes.values()),
        edges=tuple(unique_edges.values()),
        scanned_at=scanned_at or datetime.now(timezone.utc),
        commit_sha=commit_sha,
    )


def assemble_fragments(
    fragments: Iterable[Fragment],
    commit_sha: str | None = None,
    scanned_at: datetime | None = None,
) -> DependencyGraph:
    """Concatenate per-file fragments in order, then assemble."""
    nodes: list[GraphNode] = []
    edges: list[GraphEdge] = []
    for fragment in fragments:
        nodes.extend(fragment.nodes)
        edges.extend(fragment.edges)
    return assemble_graph(nodes, edges, commit_sha=commit_sha, scanned_at=scanned_at)
