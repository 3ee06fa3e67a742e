"""
Extraction Dispatcher

Routes each source file to its language extractor and collects the results.

Responsibilities:
- Static language table: extensions, extractor, grammars
- Language allow-list applied before extension matching
- Per-file error isolation (one bad file never aborts a scan)
- Grammar unavailability reported once per grammar
- Cooperative cancellation between files
- Optional thread pool; each worker owns its parsers, results are merged in
  input order so a parallel run equals a sequential one
"""

import threading
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from codegraph_depgraph.exceptions import ExtractionError, GrammarUnavailableError, InvalidLanguageFilterError
from codegraph_depgraph.extractors import (
    BaseExtractor,
    GoExtractor,
    JavaExtractor,
    SwiftExtractor,
    TypeScriptExtractor,
)
from codegraph_depgraph.logging import get_logger
from codegraph_depgraph.models import Fragment, GraphEdge, GraphNode
from codegraph_depgraph.parsing.registry import GrammarCache, ParserPool, get_grammar_cache
from codegraph_depgraph.parsing.syntax_node import SyntaxNode
from codegraph_depgraph.sources.filesystem import SourceFile

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class LanguageEntry:
    """One row of the language table."""

    language: str
    extensions: tuple[str, ...]
    extractor_cls: type[BaseExtractor]
    grammars: tuple[str, ...]
    aliases: tuple[str, ...] = ()

    def matches(self, file_path: str) -> bool:
        return any(file_path.endswith(ext) for ext in self.extensions)


LANGUAGE_TABLE: tuple[LanguageEntry, ...] = (
    LanguageEntry("typescript", (".ts", ".tsx"), TypeScriptExtractor, ("typescript", "tsx"), ("ts", "tsx")),
    LanguageEntry("java", (".java",), JavaExtractor, ("java",)),
    LanguageEntry("swift", (".swift",), SwiftExtractor, ("swift",)),
    LanguageEntry("go", (".go",), GoExtractor, ("go",), ("golang",)),
)


def supported_languages() -> list[str]:
    return [entry.language for entry in LANGUAGE_TABLE]


def all_extensions(languages: Iterable[LanguageEntry] | None = None) -> tuple[str, ...]:
    """Extensions of the given entries (default: every language)."""
    entries = LANGUAGE_TABLE if languages is None else languages
    return tuple(ext for entry in entries for ext in entry.extensions)


def resolve_languages(filters: Iterable[str] | None) -> tuple[LanguageEntry, ...] | None:
    """
    Map user language filters to table entries.

    Args:
        filters: Names or aliases (ts, typescript, java, swift, go); None means all

    Returns:
        Matching entries in table order, or None when no filter was given

    Raises:
        InvalidLanguageFilterError: If a filter names no supported language
    """
    if filters is None:
        return None

    wanted: set[str] = set()
    for raw in filters:
        name = raw.strip().lower()
        if not name:
            continue
        entry = next((e for e in LANGUAGE_TABLE if name == e.language or name in e.aliases), None)
        if entry is None:
            raise InvalidLanguageFilterError(raw, supported_languages())
        wanted.add(entry.language)

    if not wanted:
        return None
    return tuple(entry for entry in LANGUAGE_TABLE if entry.language in wanted)


def dispatch(file_path: str, languages: Sequence[LanguageEntry] | None = None) -> LanguageEntry | None:
    """
    Select the language entry for a file.

    The allow-list is applied first, then the first entry whose extension
    matches wins. Unsupported files return None.
    """
    entries = LANGUAGE_TABLE if languages is None else languages
    for entry in entries:
        if entry.matches(file_path):
            return entry
    return None


@dataclass(frozen=True, slots=True)
class FileDiagnostic:
    """A recoverable problem with one file (or one grammar)."""

    file_path: str
    language: str
    stage: str  # "grammar" | "parse" | "extract"
    message: str

    def __str__(self) -> str:
        return f"{self.file_path} [{self.language}/{self.stage}]: {self.message}"


@dataclass
class ExtractionResult:
    """Concatenated extraction output of one run, in file order."""

    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    diagnostics: list[FileDiagnostic] = field(default_factory=list)
    files_processed: int = 0
    files_skipped: int = 0
    cancelled: bool = False


@dataclass(frozen=True, slots=True)
class _FileOutcome:
    fragment: Fragment | None = None
    diagnostic: FileDiagnostic | None = None
    failed_grammar: str | None = None
    skipped: bool = False
    cancelled: bool = False


class ExtractionDispatcher:
    """
    Runs extractors over a batch of source files.

    Example:
        dispatcher = ExtractionDispatcher(languages=resolve_languages(["ts"]))
        result = dispatcher.run_all(files)
    """

    def __init__(
        self,
        languages: Sequence[LanguageEntry] | None = None,
        max_workers: int = 1,
        grammar_cache: GrammarCache | None = None,
        should_cancel: Callable[[], bool] | None = None,
    ):
        self.languages = languages
        self.max_workers = max(1, max_workers)
        self.grammar_cache = grammar_cache or get_grammar_cache()
        self.should_cancel = should_cancel
        self._extractors: dict[str, BaseExtractor] = {entry.language: entry.extractor_cls() for entry in LANGUAGE_TABLE}
        self._thread_local = threading.local()

    def run_all(self, files: Sequence[SourceFile]) -> ExtractionResult:
        """
        Extract every supported file.

        Args:
            files: Source files in scan order

        Returns:
            ExtractionResult with nodes and edges concatenated in file order
        """
        if self.max_workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="depgraph") as executor:
                outcomes = list(executor.map(self._process_file, files))
        else:
            outcomes = []
            for source in files:
                outcome = self._process_file(source)
                outcomes.append(outcome)
                if outcome.cancelled:
                    break

        return self._merge(outcomes)

    def _merge(self, outcomes: list[_FileOutcome]) -> ExtractionResult:
        result = ExtractionResult()
        reported_grammars: set[str] = set()

        for outcome in outcomes:
            if outcome.cancelled:
                result.cancelled = True
                continue
            if outcome.skipped:
                result.files_skipped += 1
                continue

            if outcome.failed_grammar is not None:
                result.files_skipped += 1
                if outcome.failed_grammar not in reported_grammars and outcome.diagnostic is not None:
                    reported_grammars.add(outcome.failed_grammar)
                    result.diagnostics.append(outcome.diagnostic)
                    logger.warning(
                        "grammar_unavailable",
                        grammar=outcome.failed_grammar,
                        language=outcome.diagnostic.language,
                        error=outcome.diagnostic.message,
                    )
                continue

            result.files_processed += 1
            if outcome.diagnostic is not None:
                result.diagnostics.append(outcome.diagnostic)
            if outcome.fragment is not None:
                result.nodes.extend(outcome.fragment.nodes)
                result.edges.extend(outcome.fragment.edges)

        if result.cancelled:
            logger.info("extraction_cancelled", processed=result.files_processed)
        return result

    def _parser_pool(self) -> ParserPool:
        pool = getattr(self._thread_local, "pool", None)
        if pool is None:
            pool = ParserPool(self.grammar_cache)
            self._thread_local.pool = pool
        return pool

    def _process_file(self, source: SourceFile) -> _FileOutcome:
        if self.should_cancel is not None and self.should_cancel():
            return _FileOutcome(cancelled=True)

        entry = dispatch(source.path, self.languages)
        if entry is None:
            return _FileOutcome(skipped=True)

        extractor = self._extractors[entry.language]
        grammar_name = extractor.grammar_for(source.path)

        try:
            parser = self._parser_pool().parser_for(entry.language, grammar_name)
        except GrammarUnavailableError as e:
            return _FileOutcome(
                diagnostic=FileDiagnostic(source.path, entry.language, "grammar", e.message),
                failed_grammar=grammar_name,
            )

        try:
            tree = parser.parse(source.content.encode("utf-8"))
        except Exception as e:
            return self._failure(source.path, entry.language, "parse", e)

        root = SyntaxNode(tree.root_node)
        if root.has_error:
            logger.debug("syntax_errors_recovered", file=source.path)

        try:
            fragment = extractor.extract(root, source.path)
        except Exception as e:
            return self._failure(source.path, entry.language, "extract", e)

        return _FileOutcome(fragment=fragment)

    def _failure(self, file_path: str, language: str, stage: str, error: Exception) -> _FileOutcome:
        wrapped = ExtractionError(file_path, str(error), {"stage": stage, "language": language})
        logger.warning("file_parse_failed", file=file_path, language=language, stage=stage, error=str(error))
        return _FileOutcome(diagnostic=FileDiagnostic(file_path, language, stage, wrapped.message))
