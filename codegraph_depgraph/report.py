"""
Markdown Reports

Human-readable summaries of a graph and of a diff, suitable for terminals,
pull request comments and commit hooks.
"""

from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar

from codegraph_depgraph.models import DependencyGraph, GraphDiff

T = TypeVar("T")


@dataclass
class TypeStats:
    name: str
    kind: str
    file: str
    outgoing: int = 0
    incoming: int = 0

    @property
    def total(self) -> int:
        return self.outgoing + self.incoming


def compute_type_stats(graph: DependencyGraph) -> dict[str, TypeStats]:
    """Per type name, how many edges leave it and point at it."""
    stats: dict[str, TypeStats] = {}
    for node in graph.nodes:
        stats.setdefault(node.name, TypeStats(node.name, node.kind.value, node.file))
    for edge in graph.edges:
        if edge.source in stats:
            stats[edge.source].outgoing += 1
        if edge.target in stats:
            stats[edge.target].incoming += 1
    return stats


def _top(items: Iterable[T], key: Callable[[T], int], n: int) -> list[T]:
    return sorted(items, key=key, reverse=True)[:n]


def _plural(word: str, count: int) -> str:
    if count <= 1:
        return word
    if word.endswith("s"):
        return word + "es"
    return word + "s"


def _s(count: int) -> str:
    return "s" if count > 1 else ""


def _delta(n: int) -> str:
    return f"+{n}" if n > 0 else str(n)


def _directory(file: str) -> str:
    parts = file.split("/")
    return "/".join(parts[:-1]) if len(parts) > 1 else "."


def format_scan_summary(graph: DependencyGraph) -> str:
    """
    Render a markdown overview of a graph.

    Sections: totals, type and edge breakdown, most connected types,
    most depended-on types, distribution by directory, standalone count.
    """
    lines: list[str] = []
    stats = compute_type_stats(graph)
    all_stats = list(stats.values())

    files = {node.file for node in graph.nodes}
    lines.append("## Dependency Graph Summary")
    lines.append("")
    lines.append(f"**{len(graph.nodes)}** types across **{len(files)}** files, **{len(graph.edges)}** dependencies")
    lines.append("")

    node_kinds = Counter(node.kind.value for node in graph.nodes)
    kind_parts = [f"{count} {_plural(kind, count)}" for kind, count in node_kinds.most_common()]
    lines.append("**Types:** " + ", ".join(kind_parts))

    edge_kinds = Counter(edge.kind.value for edge in graph.edges)
    edge_parts = [f"{count} {kind}" for kind, count in edge_kinds.most_common()]
    lines.append("**Edges:** " + ", ".join(edge_parts))
    lines.append("")

    hubs = [s for s in _top(all_stats, lambda s: s.total, 10) if s.total > 0]
    if hubs:
        lines.append("### Most connected types")
        lines.append("")
        for hub in hubs:
            lines.append(
                f"- **{hub.name}** ({hub.kind}): {hub.total} connections "
                f"({hub.outgoing} out, {hub.incoming} in) in `{hub.file}`"
            )
        lines.append("")

    targets = [s for s in _top(all_stats, lambda s: s.incoming, 5) if s.incoming > 1]
    if targets:
        lines.append("### Most depended-on types")
        lines.append("")
        for target in targets:
            dependents = list(dict.fromkeys(edge.source for edge in graph.edges if edge.target == target.name))
            lines.append(
                f"- **{target.name}**: used by {len(dependents)} type{_s(len(dependents))}: {', '.join(dependents)}"
            )
        lines.append("")

    directories = Counter(_directory(node.file) for node in graph.nodes)
    if len(directories) > 1:
        lines.append("### Type distribution")
        lines.append("")
        for directory, count in _top(directories.items(), lambda i: i[1], 8):
            lines.append(f"- `{directory}/`: {count} type{_s(count)}")
        lines.append("")

    connected = {edge.source for edge in graph.edges} | {edge.target for edge in graph.edges}
    standalone = sum(1 for node in graph.nodes if node.name not in connected)
    if standalone > 0:
        lines.append(f"*{standalone} type{_s(standalone)} with no dependencies (standalone).*")
        lines.append("")

    return "\n".join(lines).rstrip()


def format_diff_summary(diff: GraphDiff, before: DependencyGraph, after: DependencyGraph) -> str:
    """
    Render a markdown report of architectural changes.

    Args:
        diff: Result of diff_graphs(before, after)
        before: Baseline graph
        after: Current graph

    Returns:
        Markdown text ending with a one-line summary
    """
    lines: list[str] = []
    before_stats = compute_type_stats(before)
    after_stats = compute_type_stats(after)

    lines.append("## Architecture Changes")
    lines.append("")

    node_delta = len(after.nodes) - len(before.nodes)
    edge_delta = len(after.edges) - len(before.edges)
    lines.append(f"**Before:** {len(before.nodes)} types, {len(before.edges)} dependencies")
    lines.append(f"**After:** {len(after.nodes)} types, {len(after.edges)} dependencies")
    lines.append(f"**Delta:** {_delta(node_delta)} types, {_delta(edge_delta)} dependencies")
    lines.append("")

    if diff.added_nodes:
        lines.append("### New types")
        lines.append("")
        for node in diff.added_nodes:
            stat = after_stats.get(node.name)
            connections = stat.total if stat else 0
            suffix = "" if connections == 1 else "s"
            lines.append(f"+ **{node.name}** ({node.kind.value}) in `{node.file}`: {connections} connection{suffix}")
        lines.append("")

    if diff.removed_nodes:
        lines.append("### Removed types")
        lines.append("")
        for node in diff.removed_nodes:
            lines.append(f"- **{node.name}** ({node.kind.value}) was in `{node.file}`")
        lines.append("")

    if diff.added_edges:
        lines.append("### New dependencies")
        lines.append("")
        for edge in diff.added_edges:
            context = ""
            now = after_stats.get(edge.source)
            was = before_stats.get(edge.source)
            if now is not None and was is not None and was.outgoing > 0:
                context = f" ({edge.source} now has {now.outgoing} outgoing deps (was {was.outgoing}))"
            lines.append(f"+ {edge.source} → {edge.target} ({edge.kind.value}){context}")
        lines.append("")

    if diff.removed_edges:
        lines.append("### Removed dependencies")
        lines.append("")
        for edge in diff.removed_edges:
            lines.append(f"- {edge.source} → {edge.target} ({edge.kind.value})")
        lines.append("")

    changes: list[tuple[str, int, int]] = []
    names = dict.fromkeys([node.name for node in before.nodes] + [node.name for node in after.nodes])
    for name in names:
        before_total = before_stats[name].total if name in before_stats else 0
        after_total = after_stats[name].total if name in after_stats else 0
        if after_total != before_total:
            changes.append((name, before_total, after_total))

    big_changes = [c for c in _top(changes, lambda c: abs(c[2] - c[1]), 5) if abs(c[2] - c[1]) > 1]
    if big_changes:
        lines.append("### Coupling changes")
        lines.append("")
        for name, before_total, after_total in big_changes:
            lines.append(
                f"- **{name}**: {before_total} → {after_total} connections ({_delta(after_total - before_total)})"
            )
        lines.append("")

    lines.append("### Summary")
    parts: list[str] = []
    if diff.added_nodes:
        parts.append(f"{len(diff.added_nodes)} type{_s(len(diff.added_nodes))} added")
    if diff.removed_nodes:
        parts.append(f"{len(diff.removed_nodes)} type{_s(len(diff.removed_nodes))} removed")
    if diff.added_edges:
        parts.append(f"{len(diff.added_edges)} dep{_s(len(diff.added_edges))} added")
    if diff.removed_edges:
        parts.append(f"{len(diff.removed_edges)} dep{_s(len(diff.removed_edges))} removed")

    if parts:
        lines.append(", ".join(parts) + f". Net coupling: {_delta(edge_delta)}.")
    else:
        lines.append("No architectural changes detected.")

    return "\n".join(lines).rstrip()
