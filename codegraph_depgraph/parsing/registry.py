"""
Grammar Registry

Maps grammar names to their native and portable artifacts, caches loaded
grammars for the process lifetime and hands out re-bindable parsers.

Grammars (tree_sitter.Language) are immutable and shared across threads.
Parsers carry a mutable "current grammar", so each worker owns a ParserPool.
"""

import threading
from dataclasses import dataclass

from codegraph_depgraph.exceptions import GrammarUnavailableError
from codegraph_depgraph.logging import get_logger
from codegraph_depgraph.parsing.backend import Backend, LoadedGrammar, create_parser, load_grammar

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class GrammarSpec:
    """Where to find one grammar on each backend."""

    name: str
    portable_name: str
    native_module: str | None = None
    native_export: str = "language"


GRAMMARS: dict[str, GrammarSpec] = {
    "typescript": GrammarSpec("typescript", "typescript", "tree_sitter_typescript", "language_typescript"),
    "tsx": GrammarSpec("tsx", "tsx", "tree_sitter_typescript", "language_tsx"),
    "java": GrammarSpec("java", "java", "tree_sitter_java"),
    "go": GrammarSpec("go", "go", "tree_sitter_go"),
    "swift": GrammarSpec("swift", "swift", "tree_sitter_swift"),
}


class GrammarCache:
    """
    Process-wide cache of loaded grammars.

    Failures are cached too, so an unavailable grammar is attempted once.
    """

    def __init__(self, force_portable: bool = False):
        self.force_portable = force_portable
        self._grammars: dict[str, LoadedGrammar] = {}
        self._failures: dict[str, GrammarUnavailableError] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> LoadedGrammar:
        """
        Get a loaded grammar by name.

        Raises:
            GrammarUnavailableError: If the grammar is unknown or cannot be loaded
        """
        cached = self._grammars.get(name)
        if cached is not None:
            return cached

        with self._lock:
            if name in self._grammars:
                return self._grammars[name]
            if name in self._failures:
                raise self._failures[name]

            spec = GRAMMARS.get(name)
            if spec is None:
                error = GrammarUnavailableError(name, {"reason": "unknown grammar"})
                self._failures[name] = error
                raise error

            try:
                loaded = load_grammar(
                    spec.name,
                    spec.portable_name,
                    spec.native_module,
                    spec.native_export,
                    force_portable=self.force_portable,
                )
            except GrammarUnavailableError as e:
                self._failures[name] = e
                raise

            self._grammars[name] = loaded
            logger.info("grammar_ready", grammar=name, backend=loaded.backend.value)
            return loaded

    def backends(self) -> dict[str, Backend]:
        """Backend used by each grammar loaded so far."""
        return {name: loaded.backend for name, loaded in self._grammars.items()}

    def clear(self) -> None:
        with self._lock:
            self._grammars.clear()
            self._failures.clear()


class ParserPool:
    """
    Parsers owned by one worker, one per language.

    A language with several grammars (typescript/tsx) re-binds the same parser.
    Not thread-safe: create one pool per worker thread.
    """

    def __init__(self, grammars: GrammarCache):
        self._grammars = grammars
        self._parsers: dict[str, object] = {}
        self._bound: dict[str, str] = {}

    def parser_for(self, language: str, grammar_name: str):
        """
        Get a parser for ``language`` bound to ``grammar_name``.

        Raises:
            GrammarUnavailableError: If the grammar cannot be loaded
        """
        loaded = self._grammars.get(grammar_name)

        parser = self._parsers.get(language)
        if parser is None:
            parser = create_parser(force_portable=loaded.backend is Backend.PORTABLE)
            self._parsers[language] = parser

        if self._bound.get(language) != grammar_name:
            parser.language = loaded.grammar
            self._bound[language] = grammar_name

        return parser

    def __len__(self) -> int:
        return len(self._parsers)


# Global grammar cache
_cache: GrammarCache | None = None
_cache_lock = threading.Lock()


def get_grammar_cache(force_portable: bool = False) -> GrammarCache:
    """Get the global grammar cache (created on first use)."""
    global _cache
    with _cache_lock:
        if _cache is None or _cache.force_portable != force_portable:
            _cache = GrammarCache(force_portable=force_portable)
        return _cache
