"""
Extractor test fixtures: parse real snippets through the grammar registry.
"""

import pytest

from codegraph_depgraph.extractors import BaseExtractor
from codegraph_depgraph.models import Fragment
from codegraph_depgraph.parsing import ParserPool, SyntaxNode


@pytest.fixture
def parse(grammar_cache):
    """Parse source text with an extractor and return its Fragment"""
    pool = ParserPool(grammar_cache)

    def _parse(extractor: BaseExtractor, source: str, file_path: str) -> Fragment:
        parser = pool.parser_for(extractor.LANGUAGE, extractor.grammar_for(file_path))
        tree = parser.parse(source.encode("utf-8"))
        return extractor.extract(SyntaxNode(tree.root_node), file_path)

    return _parse


