"""
Depgraph CLI

Commands:
- scan: dependency graph of a directory (markdown summary or JSON)
- diff: architecture changes against a git revision or a saved baseline
- hook: git hook mode, prints nothing when the graph did not change
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from codegraph_depgraph import __version__
from codegraph_depgraph.config import get_settings
from codegraph_depgraph.diff import diff_graphs
from codegraph_depgraph.exceptions import DepgraphError
from codegraph_depgraph.logging import setup_logging
from codegraph_depgraph.models import DependencyGraph, GraphDiff, deserialize_graph, serialize_diff, serialize_graph
from codegraph_depgraph.report import format_diff_summary, format_scan_summary
from codegraph_depgraph.scanner import ScanResult, scan_directory, scan_revision

app = typer.Typer(name="depgraph", help="Tree-sitter type dependency graph extractor", add_completion=False)
console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"depgraph {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at the configured level instead of warnings only"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Extract and compare structural type dependency graphs."""
    settings = get_settings()
    setup_logging(settings.log_level if verbose else "WARNING", settings.log_format)


def _split_languages(languages: str | None) -> list[str] | None:
    if not languages:
        return None
    return [part for part in (p.strip() for p in languages.split(",")) if part]


def _report_diagnostics(*results: ScanResult) -> None:
    for result in results:
        for diagnostic in result.diagnostics:
            err_console.print(f"[yellow]Warning:[/yellow] {escape(str(diagnostic))}", markup=True, highlight=False)


def _print(text: str) -> None:
    console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


def _compare(directory: Path, ref: str, baseline: Path | None = None) -> tuple[DependencyGraph, DependencyGraph, GraphDiff]:
    if baseline is not None:
        try:
            before = deserialize_graph(baseline.read_text(encoding="utf-8"))
        except OSError as e:
            raise DepgraphError(f"Cannot read baseline {baseline}", {"error": str(e)}) from e
        current = scan_directory(directory)
        _report_diagnostics(current)
    else:
        previous = scan_revision(directory, ref)
        current = scan_directory(directory)
        _report_diagnostics(previous, current)
        before = previous.graph

    return before, current.graph, diff_graphs(before, current.graph)


@app.command()
def scan(
    directory: Path = typer.Argument(..., help="Directory to scan"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON graph to file"),
    json_output: bool = typer.Option(False, "--json", help="Output raw JSON instead of markdown summary"),
    languages: Optional[str] = typer.Option(
        None, "--languages", "-l", help="Comma-separated language filter (ts, java, swift, go)"
    ),
):
    """
    Scan a directory and output its dependency graph.

    Examples:
        depgraph scan ./src
        depgraph scan ./src -l ts,go --json
        depgraph scan ./src -o graph.json
    """
    try:
        result = scan_directory(directory, languages=_split_languages(languages))
    except DepgraphError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        raise typer.Exit(1)

    _report_diagnostics(result)
    graph = result.graph

    if output is not None:
        try:
            output.write_text(serialize_graph(graph), encoding="utf-8")
        except OSError as e:
            err_console.print(
                f"[red]Error: Cannot write graph to {escape(str(output))}: {escape(str(e))}[/red]", highlight=False
            )
            raise typer.Exit(1)
        err_console.print(
            f"Wrote graph: {len(graph.nodes)} nodes, {len(graph.edges)} edges → {output}", highlight=False
        )
    elif json_output:
        typer.echo(serialize_graph(graph))
    else:
        _print(format_scan_summary(graph))


@app.command()
def diff(
    directory: Path = typer.Argument(..., help="Directory to scan"),
    ref: Optional[str] = typer.Option(None, "--ref", "-r", help="Git ref to compare against (default: HEAD~1)"),
    json_output: bool = typer.Option(False, "--json", help="Output raw JSON diff instead of markdown"),
    baseline: Optional[Path] = typer.Option(None, "--baseline", help="Saved graph JSON to compare against instead of git"),
):
    """
    Show dependency graph changes against a previous revision.

    Examples:
        depgraph diff .
        depgraph diff . -r main
        depgraph diff . --baseline graph.json --json
    """
    try:
        before, after, changes = _compare(directory, ref or get_settings().default_diff_ref, baseline)
    except DepgraphError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        raise typer.Exit(1)

    if json_output:
        typer.echo(serialize_diff(changes))
    elif changes.is_empty:
        _print("No architectural changes detected.")
    else:
        _print(format_diff_summary(changes, before, after))


@app.command()
def hook(
    directory: Path = typer.Argument(Path("."), help="Directory to scan"),
    ref: Optional[str] = typer.Option(None, "--ref", "-r", help="Git ref to compare against (default: HEAD)"),
    json_output: bool = typer.Option(False, "--json", help="Output raw JSON diff"),
):
    """
    Git hook mode: print a change summary, or nothing if the graph is unchanged.

    Example (.git/hooks/post-commit):
        depgraph hook . -r HEAD~1
    """
    try:
        before, after, changes = _compare(directory, ref or get_settings().hook_ref)
    except DepgraphError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        raise typer.Exit(1)

    if changes.is_empty:
        return

    if json_output:
        typer.echo(serialize_diff(changes))
    else:
        _print(format_diff_summary(changes, before, after))


if __name__ == "__main__":
    app()
