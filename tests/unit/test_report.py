"""
Markdown report tests
"""

from datetime import datetime, timezone

from codegraph_depgraph.diff import diff_graphs
from codegraph_depgraph.models import DependencyGraph, EdgeKind, GraphEdge, GraphNode, NodeKind
from codegraph_depgraph.report import compute_type_stats, format_diff_summary, format_scan_summary

WHEN = datetime(2026, 1, 1, tzinfo=timezone.utc)


def make_graph(nodes, edges=()) -> DependencyGraph:
    return DependencyGraph(
        nodes=tuple(GraphNode(name=n, kind=k, file=f, line=1) for n, k, f in nodes),
        edges=tuple(GraphEdge(source=s, target=t, kind=k) for s, t, k in edges),
        scanned_at=WHEN,
    )


class TestScanSummary:
    def test_counts(self):
        graph = make_graph(
            [("A", NodeKind.CLASS, "a.ts"), ("B", NodeKind.INTERFACE, "b.ts")],
            [("A", "B", EdgeKind.IMPLEMENTS)],
        )

        output = format_scan_summary(graph)

        assert "**2** types across **2** files, **1** dependencies" in output
        assert "**Types:** 1 class, 1 interface" in output
        assert "**Edges:** 1 implements" in output

    def test_pluralizes_kinds(self):
        graph = make_graph([("A", NodeKind.CLASS, "a.ts"), ("B", NodeKind.CLASS, "a.ts"), ("C", NodeKind.ENUM, "a.ts")])

        assert "**Types:** 2 classes, 1 enum" in format_scan_summary(graph)

    def test_most_connected(self):
        graph = make_graph(
            [("Hub", NodeKind.CLASS, "hub.ts"), ("A", NodeKind.CLASS, "a.ts"), ("B", NodeKind.CLASS, "b.ts")],
            [("A", "Hub", EdgeKind.FIELD_TYPE), ("B", "Hub", EdgeKind.FIELD_TYPE)],
        )

        output = format_scan_summary(graph)

        assert "### Most connected types" in output
        assert "**Hub** (class): 2 connections (0 out, 2 in)" in output
        assert "### Most depended-on types" in output
        assert "**Hub**: used by 2 types: A, B" in output

    def test_standalone_count(self):
        graph = make_graph(
            [("A", NodeKind.CLASS, "a.ts"), ("B", NodeKind.CLASS, "b.ts"), ("Lonely", NodeKind.CLASS, "c.ts")],
            [("A", "B", EdgeKind.EXTENDS)],
        )

        assert "1 type with no dependencies" in format_scan_summary(graph)

    def test_directory_distribution(self):
        graph = make_graph([("A", NodeKind.CLASS, "src/models/a.ts"), ("B", NodeKind.CLASS, "src/services/b.ts")])

        output = format_scan_summary(graph)

        assert "### Type distribution" in output
        assert "`src/models/`: 1 type" in output

    def test_empty_graph(self):
        output = format_scan_summary(make_graph([]))

        assert "**0** types" in output
        assert "Most connected" not in output

    def test_type_stats(self):
        graph = make_graph(
            [("A", NodeKind.CLASS, "a.ts"), ("B", NodeKind.CLASS, "b.ts")],
            [("A", "B", EdgeKind.EXTENDS), ("A", "B", EdgeKind.FIELD_TYPE)],
        )

        stats = compute_type_stats(graph)

        assert (stats["A"].outgoing, stats["A"].incoming) == (2, 0)
        assert stats["B"].total == 2


class TestDiffSummary:
    def test_before_after_delta(self):
        before = make_graph([("A", NodeKind.CLASS, "a.ts")])
        after = make_graph(
            [("A", NodeKind.CLASS, "a.ts"), ("B", NodeKind.CLASS, "b.ts")],
            [("A", "B", EdgeKind.EXTENDS)],
        )

        output = format_diff_summary(diff_graphs(before, after), before, after)

        assert "**Before:** 1 types, 0 dependencies" in output
        assert "**After:** 2 types, 1 dependencies" in output
        assert "**Delta:** +1 types, +1 dependencies" in output
        assert "+ **B** (class) in `b.ts`: 1 connection" in output
        assert "+ A → B (extends)" in output
        assert output.endswith("1 type added, 1 dep added. Net coupling: +1.")

    def test_coupling_context_for_existing_types(self):
        nodes = [("Svc", NodeKind.CLASS, "svc.ts"), ("Repo", NodeKind.CLASS, "r.ts"), ("Cache", NodeKind.CLASS, "c.ts")]
        before = make_graph(nodes, [("Svc", "Repo", EdgeKind.FIELD_TYPE)])
        after = make_graph(nodes, [("Svc", "Repo", EdgeKind.FIELD_TYPE), ("Svc", "Cache", EdgeKind.FIELD_TYPE)])

        output = format_diff_summary(diff_graphs(before, after), before, after)

        assert "Svc now has 2 outgoing deps (was 1)" in output

    def test_removed_items(self):
        before = make_graph(
            [("A", NodeKind.CLASS, "a.ts"), ("B", NodeKind.CLASS, "b.ts")],
            [("A", "B", EdgeKind.EXTENDS)],
        )
        after = make_graph([("A", NodeKind.CLASS, "a.ts")])

        output = format_diff_summary(diff_graphs(before, after), before, after)

        assert "- **B** (class) was in `b.ts`" in output
        assert "- A → B (extends)" in output
        assert "Net coupling: -1." in output

    def test_coupling_changes(self):
        nodes = [("Core", NodeKind.CLASS, "core.ts")] + [(n, NodeKind.CLASS, f"{n}.ts") for n in "XYZ"]
        before = make_graph(nodes)
        after = make_graph(nodes, [(n, "Core", EdgeKind.FIELD_TYPE) for n in "XYZ"])

        output = format_diff_summary(diff_graphs(before, after), before, after)

        assert "### Coupling changes" in output
        assert "**Core**: 0 → 3 connections (+3)" in output

    def test_no_changes(self):
        graph = make_graph([("A", NodeKind.CLASS, "a.ts")])

        output = format_diff_summary(diff_graphs(graph, graph), graph, graph)

        assert "No architectural changes detected." in output
