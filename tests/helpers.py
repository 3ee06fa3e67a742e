"""Shared test helpers"""

from codegraph_depgraph.models import EdgeKind, Fragment


def find_edge(fragment: Fragment, source: str, target: str, kind: EdgeKind | None = None):
    for edge in fragment.edges:
        if edge.source == source and edge.target == target and (kind is None or edge.kind == kind):
            return edge
    return None


def names(fragment: Fragment) -> list[str]:
    return sorted(node.name for node in fragment.nodes)
