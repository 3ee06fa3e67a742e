"""
Syntax Node wrapper for Tree-sitter

Minimal capability interface the extractors depend on:
child access by index and by field name, node-kind tag, source text and
1-based start line. Works with any object following the tree_sitter.Node
protocol, regardless of grammar or backend.
"""

from collections.abc import Iterator
from typing import Any


class SyntaxNode:
    """Read-only view over a tree-sitter node."""

    __slots__ = ("_node",)

    def __init__(self, node: Any):
        self._node = node

    @property
    def raw(self) -> Any:
        """Underlying tree-sitter node"""
        return self._node

    @property
    def type(self) -> str:
        return self._node.type

    @property
    def is_named(self) -> bool:
        return bool(self._node.is_named)

    @property
    def has_error(self) -> bool:
        return bool(self._node.has_error)

    @property
    def text(self) -> str:
        text = self._node.text
        if text is None:
            return ""
        if isinstance(text, bytes):
            return text.decode("utf-8", errors="replace")
        return text

    @property
    def start_line(self) -> int:
        """Start line (1-indexed; tree-sitter rows are 0-indexed)"""
        return self._node.start_point[0] + 1

    @property
    def child_count(self) -> int:
        return self._node.child_count

    @property
    def children(self) -> list["SyntaxNode"]:
        return [SyntaxNode(child) for child in self._node.children]

    @property
    def named_children(self) -> list["SyntaxNode"]:
        return [SyntaxNode(child) for child in self._node.children if child.is_named]

    def child(self, index: int) -> "SyntaxNode | None":
        """Child at a position, None when out of range"""
        if not 0 <= index < self._node.child_count:
            return None
        child = self._node.child(index)
        return SyntaxNode(child) if child is not None else None

    def field(self, name: str) -> "SyntaxNode | None":
        """Child stored under a grammar field name, if any"""
        child = self._node.child_by_field_name(name)
        return SyntaxNode(child) if child is not None else None

    def fields(self, name: str) -> list["SyntaxNode"]:
        """All children stored under a grammar field name"""
        return [SyntaxNode(child) for child in self._node.children_by_field_name(name)]

    def iter_children(self, *types: str) -> Iterator["SyntaxNode"]:
        """Children, optionally restricted to the given node types"""
        for child in self._node.children:
            if not types or child.type in types:
                yield SyntaxNode(child)

    def find_child(self, *types: str) -> "SyntaxNode | None":
        """First child of one of the given types"""
        for child in self._node.children:
            if child.type in types:
                return SyntaxNode(child)
        return None

    def has_token(self, token: str) -> bool:
        """Whether an anonymous child token (keyword) with this text exists"""
        for child in self._node.children:
            if not child.is_named and SyntaxNode(child).text == token:
                return True
        return False

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SyntaxNode):
            return self._node == other._node
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._node)

    def __repr__(self) -> str:
        return f"SyntaxNode(type={self.type!r}, line={self.start_line})"
