"""
Graph Diff Engine

Symmetric difference of two graphs by identity key.

- Nodes compare by (name, kind): a moved declaration (new file or line) is
  not a change.
- Edges compare by (from, to, kind): a changed edge kind shows up as the old
  edge removed and the new edge added.

Output order follows the order of the graph each item comes from.
"""

from collections.abc import Hashable, Iterable
from typing import TypeVar

from codegraph_depgraph.models import DependencyGraph, GraphDiff, GraphEdge, GraphNode

T = TypeVar("T", GraphNode, GraphEdge)


def diff_graphs(before: DependencyGraph, after: DependencyGraph) -> GraphDiff:
    """
    Compute what changed between two graphs.

    Args:
        before: Baseline graph
        after: Current graph

    Returns:
        GraphDiff with added/removed nodes and edges
    """
    before_nodes = _by_key(before.nodes)
    after_nodes = _by_key(after.nodes)
    before_edges = _by_key(before.edges)
    after_edges = _by_key(after.edges)

    return GraphDiff(
        added_nodes=tuple(node for key, node in after_nodes.items() if key not in before_nodes),
        removed_nodes=tuple(node for key, node in before_nodes.items() if key not in after_nodes),
        added_edges=tuple(edge for key, edge in after_edges.items() if key not in before_edges),
        removed_edges=tuple(edge for key, edge in before_edges.items() if key not in after_edges),
    )


def _by_key(items: Iterable[T]) -> dict[Hashable, T]:
    # first occurrence wins, insertion order kept
    keyed: dict[Hashable, T] = {}
    for item in items:
        keyed.setdefault(item.key, item)
    return keyed


def is_diff_empty(diff: GraphDiff) -> bool:
    """True when the diff has no added or removed nodes or edges."""
    return diff.is_empty
