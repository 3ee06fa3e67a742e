"""
Parsing Layer

Tree-sitter parsing infrastructure shared by all language extractors.

Components:
- backend: native vs. portable grammar loading with per-grammar fallback
- registry: grammar table, process-wide grammar cache, per-worker parser pool
- syntax_node: grammar-independent node wrapper
"""

from codegraph_depgraph.parsing.backend import (
    Backend,
    LoadedGrammar,
    create_parser,
    load_grammar,
    resolve_backend,
)
from codegraph_depgraph.parsing.registry import GRAMMARS, GrammarCache, GrammarSpec, ParserPool, get_grammar_cache
from codegraph_depgraph.parsing.syntax_node import SyntaxNode

__all__ = [
    "Backend",
    "LoadedGrammar",
    "create_parser",
    "load_grammar",
    "resolve_backend",
    "GRAMMARS",
    "GrammarCache",
    "GrammarSpec",
    "ParserPool",
    "get_grammar_cache",
    "SyntaxNode",
]
