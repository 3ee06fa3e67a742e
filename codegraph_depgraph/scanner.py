"""
Scanner Facade

High-level entry points combining sources, dispatcher and assembler:

- scan_files: graph from in-memory source files
- scan_directory: graph of a working tree, stamped with HEAD when in git
- scan_revision: graph of a directory as of a git revision
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from codegraph_depgraph.assembler import assemble_graph
from codegraph_depgraph.config import Settings, get_settings
from codegraph_depgraph.dispatcher import (
    ExtractionDispatcher,
    FileDiagnostic,
    all_extensions,
    resolve_languages,
)
from codegraph_depgraph.logging import add_context, clear_context, get_logger
from codegraph_depgraph.models import DependencyGraph
from codegraph_depgraph.parsing.registry import get_grammar_cache
from codegraph_depgraph.sources import GitHistorySource, SourceFile, walk_directory

logger = get_logger(__name__)


@dataclass
class ScanResult:
    """A graph plus the recoverable problems met while building it."""

    graph: DependencyGraph
    diagnostics: list[FileDiagnostic] = field(default_factory=list)
    files_processed: int = 0
    files_skipped: int = 0


def scan_files(
    files: Sequence[SourceFile],
    languages: Iterable[str] | None = None,
    commit_sha: str | None = None,
    max_workers: int | None = None,
    scanned_at: datetime | None = None,
    settings: Settings | None = None,
) -> ScanResult:
    """
    Extract and assemble a graph from source files.

    Args:
        files: Files in scan order (paths relative to the scan root)
        languages: Optional language filter (ts, java, swift, go)
        commit_sha: Revision to stamp on the graph
        max_workers: Extraction threads (default from settings)
        scanned_at: Capture time (default: now)
        settings: Settings override

    Returns:
        ScanResult

    Raises:
        InvalidLanguageFilterError: If a language filter is unknown
    """
    settings = settings or get_settings()
    entries = resolve_languages(languages)

    dispatcher = ExtractionDispatcher(
        languages=entries,
        max_workers=max_workers or settings.max_workers,
        grammar_cache=get_grammar_cache(settings.force_portable),
    )
    extraction = dispatcher.run_all(files)

    graph = assemble_graph(extraction.nodes, extraction.edges, commit_sha=commit_sha, scanned_at=scanned_at)

    logger.info(
        "scan_complete",
        files=extraction.files_processed,
        skipped=extraction.files_skipped,
        nodes=len(graph.nodes),
        edges=len(graph.edges),
        diagnostics=len(extraction.diagnostics),
        commit=commit_sha,
    )

    return ScanResult(
        graph=graph,
        diagnostics=extraction.diagnostics,
        files_processed=extraction.files_processed,
        files_skipped=extraction.files_skipped,
    )


def scan_directory(
    path: str | Path,
    languages: Iterable[str] | None = None,
    max_workers: int | None = None,
    settings: Settings | None = None,
) -> ScanResult:
    """
    Scan a working tree.

    The graph is stamped with the HEAD commit when the directory lies in a
    git repository.

    Raises:
        SourceError: If path is not a directory
        InvalidLanguageFilterError: If a language filter is unknown
    """
    settings = settings or get_settings()
    entries = resolve_languages(languages)

    files = walk_directory(path, all_extensions(entries), settings.ignored_dirs)
    commit_sha = GitHistorySource(path).head_sha()

    return scan_files(
        files,
        languages=languages,
        commit_sha=commit_sha,
        max_workers=max_workers,
        settings=settings,
    )


def scan_revision(
    path: str | Path,
    ref: str,
    languages: Iterable[str] | None = None,
    max_workers: int | None = None,
    settings: Settings | None = None,
) -> ScanResult:
    """
    Scan a directory as it existed at a git revision.

    A missing repository or revision (e.g. HEAD~1 on the first commit)
    yields an empty graph with no commit sha.
    """
    settings = settings or get_settings()
    entries = resolve_languages(languages)

    add_context(ref=ref)
    try:
        source = GitHistorySource(path)
        commit_sha = source.resolve_commit(ref)
        if commit_sha is None:
            logger.info("revision_scan_empty", path=str(path))
            return ScanResult(graph=assemble_graph([], []))

        files = source.files_at(ref, all_extensions(entries), settings.ignored_dirs)
        return scan_files(
            files,
            languages=languages,
            commit_sha=commit_sha,
            max_workers=max_workers,
            settings=settings,
        )
    finally:
        clear_context("ref")
