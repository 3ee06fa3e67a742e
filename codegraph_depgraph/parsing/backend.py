"""
Parser Backend Resolver

Decides, per grammar, whether it loads through a native binding wheel
(tree_sitter_java, tree_sitter_go, ...) or through the portable bundle
(tree_sitter_language_pack) that ships every grammar precompiled.

Backends:
- native: the tree_sitter core binding is importable; grammars come from
  their own binding packages.
- portable: grammars come from tree_sitter_language_pack.

Fallback is per grammar: if the native runtime works but one grammar is only
available from the bundle, only that grammar uses the portable backend.

Process-wide state (detected backend, portable runtime) is computed at most
once, guarded by locks so concurrent first use does not double-initialize.
"""

import importlib
import threading
from dataclasses import dataclass
from enum import Enum
from types import ModuleType
from typing import Any, Callable, Generic, TypeVar

from codegraph_depgraph.exceptions import GrammarUnavailableError
from codegraph_depgraph.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Backend(str, Enum):
    """Grammar loading mechanism."""

    NATIVE = "native"
    PORTABLE = "portable"


@dataclass(frozen=True, slots=True)
class LoadedGrammar:
    """A compiled grammar and the backend that produced it."""

    language_id: str
    grammar: Any  # tree_sitter.Language
    backend: Backend


class OnceCell(Generic[T]):
    """
    Thread-safe compute-once cell.

    The factory runs at most once; later callers read the cached value.
    If the factory raises, the exception is cached and re-raised.
    """

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._lock = threading.Lock()
        self._done = False
        self._value: T | None = None
        self._error: BaseException | None = None

    def get(self) -> T:
        if not self._done:
            with self._lock:
                if not self._done:
                    try:
                        self._value = self._factory()
                    except Exception as e:
                        self._error = e
                    self._done = True
        if self._error is not None:
            raise self._error
        return self._value  # type: ignore[return-value]

    @property
    def is_set(self) -> bool:
        return self._done

    def reset(self) -> None:
        with self._lock:
            self._done = False
            self._value = None
            self._error = None


def _detect_backend() -> Backend:
    try:
        import tree_sitter

        if not (hasattr(tree_sitter, "Language") and hasattr(tree_sitter, "Parser")):
            raise ImportError("tree_sitter binding lacks Language/Parser")
    except Exception as e:
        logger.debug("native_backend_unavailable", error=str(e))
        return Backend.PORTABLE

    logger.debug("native_backend_detected")
    return Backend.NATIVE


def _init_portable_runtime() -> ModuleType:
    module = importlib.import_module("tree_sitter_language_pack")
    if not hasattr(module, "get_language"):
        raise ImportError("tree_sitter_language_pack has no get_language()")
    logger.debug("portable_runtime_initialized")
    return module


_backend_cell: OnceCell[Backend] = OnceCell(_detect_backend)
_portable_cell: OnceCell[ModuleType] = OnceCell(_init_portable_runtime)


def resolve_backend() -> Backend:
    """
    Detect (once per process) whether native grammar loading is usable.

    Never raises; an unusable native runtime selects the portable backend.
    """
    return _backend_cell.get()


def init_portable_runtime() -> ModuleType:
    """
    Initialize the portable grammar bundle (at most once per process).

    Raises:
        ImportError: If tree_sitter_language_pack cannot be imported
    """
    return _portable_cell.get()


def load_grammar(
    language_id: str,
    portable_name: str,
    native_module: str | None = None,
    native_export: str = "language",
    force_portable: bool = False,
) -> LoadedGrammar:
    """
    Load a compiled grammar, preferring the native binding.

    Args:
        language_id: Grammar identifier used in logs and errors (e.g. "tsx")
        portable_name: Grammar name inside tree_sitter_language_pack
        native_module: Native binding package (e.g. "tree_sitter_typescript")
        native_export: Function of the native package returning the grammar
        force_portable: Skip the native attempt

    Returns:
        LoadedGrammar with the grammar and the backend used

    Raises:
        GrammarUnavailableError: If neither backend can supply the grammar
    """
    if native_module and not force_portable and resolve_backend() is Backend.NATIVE:
        try:
            from tree_sitter import Language

            module = importlib.import_module(native_module)
            grammar = Language(getattr(module, native_export)())
            logger.debug("grammar_loaded", grammar=language_id, backend=Backend.NATIVE.value)
            return LoadedGrammar(language_id, grammar, Backend.NATIVE)
        except Exception as e:
            logger.debug(
                "grammar_fallback",
                grammar=language_id,
                native_module=native_module,
                error=str(e),
            )

    try:
        pack = init_portable_runtime()
        grammar = pack.get_language(portable_name)
    except Exception as e:
        raise GrammarUnavailableError(
            language_id,
            {"portable_name": portable_name, "native_module": native_module, "error": str(e)},
        ) from e

    logger.debug("grammar_loaded", grammar=language_id, backend=Backend.PORTABLE.value)
    return LoadedGrammar(language_id, grammar, Backend.PORTABLE)


def create_parser(force_portable: bool = False):
    """
    Create a parser bound to the selected backend.

    The parser is re-bound to other grammars through ``parser.language = grammar``
    instead of being recreated per file.

    Args:
        force_portable: Initialize the portable runtime even if native is usable

    Returns:
        tree_sitter.Parser instance with no grammar set
    """
    if force_portable or resolve_backend() is Backend.PORTABLE:
        init_portable_runtime()

    from tree_sitter import Parser

    return Parser()


def reset_backend_cache() -> None:
    """Forget the detected backend and portable runtime (tests only)."""
    _backend_cell.reset()
    _portable_cell.reset()
