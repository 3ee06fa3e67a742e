"""
Extractor Base

Common base class for all tree-sitter based type-graph extractors.

Contract:
    extract(root, file_path) -> Fragment

- One GraphNode per type declaration, located at the declaration node.
- One GraphEdge per structural reference, from the enclosing declaration
  to the simple (unqualified) name of the referenced type.
- Built-in primitive types never produce edges.
- Error-recovery trees are walked as far as they go; extractors never
  fail fast on syntax errors.
"""

from collections.abc import Iterable

from codegraph_depgraph.models import EdgeKind, Fragment, GraphEdge, GraphNode, NodeKind
from codegraph_depgraph.parsing.syntax_node import SyntaxNode


class FragmentBuilder:
    """Accumulates the nodes and edges of one file."""

    def __init__(self, file_path: str, builtin_types: frozenset[str]):
        self.file_path = file_path
        self.builtin_types = builtin_types
        self.nodes: list[GraphNode] = []
        self.edges: list[GraphEdge] = []

    def add_node(self, name: str, kind: NodeKind, declaration: SyntaxNode) -> None:
        self.nodes.append(GraphNode(name=name, kind=kind, file=self.file_path, line=declaration.start_line))

    def add_edges(self, owner: str, type_names: Iterable[str], kind: EdgeKind) -> None:
        for type_name in type_names:
            if not type_name or type_name in self.builtin_types:
                continue
            self.edges.append(GraphEdge(source=owner, target=type_name, kind=kind))

    def build(self) -> Fragment:
        return Fragment(nodes=tuple(self.nodes), edges=tuple(self.edges))


class BaseExtractor:
    """
    Base class for language extractors.

    Subclasses define LANGUAGE and BUILTIN_TYPES and implement
    ``_visit``, which handles declaration nodes and returns True when the
    subtree was fully handled. Every other node is descended into.

    Extractors hold no per-file state and can be shared across threads.
    """

    # Subclasses must define these
    LANGUAGE: str = ""
    BUILTIN_TYPES: frozenset[str] = frozenset()

    def __init__(self):
        if not self.LANGUAGE:
            raise ValueError(f"{self.__class__.__name__} must define LANGUAGE")

    def grammar_for(self, file_path: str) -> str:
        """Grammar used to parse the given file."""
        return self.LANGUAGE

    def extract(self, root: SyntaxNode, file_path: str) -> Fragment:
        """
        Walk a parsed syntax tree and collect its type graph fragment.

        Args:
            root: Root node of the parsed file
            file_path: Path relative to the scan root

        Returns:
            Fragment with the file's nodes and edges
        """
        builder = FragmentBuilder(file_path, self.BUILTIN_TYPES)
        self._walk(root, builder)
        return builder.build()

    def _walk(self, root: SyntaxNode, builder: FragmentBuilder) -> None:
        """Depth-first walk in source order (iterative: deep trees do not hit the recursion limit)."""
        stack = [root]
        while stack:
            node = stack.pop()
            if self._visit(node, builder):
                continue
            stack.extend(reversed(node.children))

    def _visit(self, node: SyntaxNode, builder: FragmentBuilder) -> bool:
        """
        Handle one node.

        Returns:
            True if the node was a declaration whose subtree is fully handled
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement _visit")

    def _name_of(self, node: SyntaxNode, field: str = "name") -> str | None:
        name_node = node.field(field)
        if name_node is None:
            return None
        name = name_node.text.strip()
        return name or None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(language={self.LANGUAGE!r})"
