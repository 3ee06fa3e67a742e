"""
Dependency Graph Models

Immutable graph types shared by extractors, the assembler and the diff engine.

Architecture:
- Domain Layer (Pure model)
- Immutable (frozen=True)
- Type-safe (Pydantic)
- JSON serializable with the camelCase wire format

Identity:
- GraphNode: (name, kind). A class and an interface sharing a name are
  distinct nodes; two same-kind declarations collapse to the first scanned.
- GraphEdge: (from, to, kind).

Usage:
    graph = DependencyGraph(
        nodes=(GraphNode(name="Dog", kind=NodeKind.CLASS, file="a.ts", line=1),),
        edges=(),
        scanned_at=datetime.now(timezone.utc),
    )
    text = serialize_graph(graph)
    assert deserialize_graph(text) == graph
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from codegraph_depgraph.exceptions import GraphFormatError


class NodeKind(str, Enum):
    """Kinds of declared types."""

    CLASS = "class"
    INTERFACE = "interface"
    PROTOCOL = "protocol"
    ENUM = "enum"
    TYPE_ALIAS = "type_alias"


class EdgeKind(str, Enum):
    """Kinds of structural references between types."""

    EXTENDS = "extends"
    IMPLEMENTS = "implements"
    FIELD_TYPE = "field_type"
    METHOD_PARAM = "method_param"
    METHOD_RETURN = "method_return"
    IMPORT = "import"


NodeKey = tuple[str, NodeKind]
EdgeKey = tuple[str, str, EdgeKind]


class GraphNode(BaseModel):
    """A declared type (graph vertex)."""

    name: str = Field(..., min_length=1, description="Unqualified identifier as written")
    kind: NodeKind
    file: str = Field(..., description="Path relative to the scan root")
    line: int = Field(..., ge=1, description="1-based declaration line")

    model_config = {"frozen": True, "extra": "forbid"}

    @property
    def key(self) -> NodeKey:
        return (self.name, self.kind)


class GraphEdge(BaseModel):
    """A directed, kinded reference between two node names."""

    source: str = Field(..., alias="from", min_length=1)
    target: str = Field(..., alias="to", min_length=1)
    kind: EdgeKind

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    @property
    def key(self) -> EdgeKey:
        return (self.source, self.target, self.kind)

    def __str__(self) -> str:
        return f"{self.source} -> {self.target} ({self.kind.value})"


class Fragment(BaseModel):
    """Nodes and edges extracted from one file, before assembly."""

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()

    model_config = {"frozen": True}

    def is_empty(self) -> bool:
        return not self.nodes and not self.edges


class DependencyGraph(BaseModel):
    """
    Immutable snapshot of one scan.

    Fields:
    - nodes: deduplicated declarations in file-scan order
    - edges: valid, deduplicated edges in file-scan order
    - scanned_at: capture timestamp (serialized as ``scannedAt``)
    - commit_sha: source revision, if known (serialized as ``commitSha``)
    """

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()
    scanned_at: datetime = Field(..., alias="scannedAt")
    commit_sha: str | None = Field(None, alias="commitSha")

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    @property
    def node_names(self) -> set[str]:
        return {node.name for node in self.nodes}

    def find_node(self, name: str) -> GraphNode | None:
        """First node with the given name, regardless of kind."""
        for node in self.nodes:
            if node.name == name:
                return node
        return None


class GraphDiff(BaseModel):
    """Symmetric difference between two graphs (before -> after)."""

    added_nodes: tuple[GraphNode, ...] = Field((), alias="addedNodes")
    removed_nodes: tuple[GraphNode, ...] = Field((), alias="removedNodes")
    added_edges: tuple[GraphEdge, ...] = Field((), alias="addedEdges")
    removed_edges: tuple[GraphEdge, ...] = Field((), alias="removedEdges")

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    @property
    def is_empty(self) -> bool:
        return not (self.added_nodes or self.removed_nodes or self.added_edges or self.removed_edges)


def node_key(node: GraphNode) -> NodeKey:
    """Identity key of a node: (name, kind)."""
    return node.key


def edge_key(edge: GraphEdge) -> EdgeKey:
    """Identity key of an edge: (from, to, kind)."""
    return edge.key


# ============================================================
# Serialization
# ============================================================


def serialize_graph(graph: DependencyGraph) -> str:
    """Serialize a graph as an indented JSON document."""
    return graph.model_dump_json(by_alias=True, exclude_none=True, indent=2)


def deserialize_graph(text: str | bytes) -> DependencyGraph:
    """
    Parse a serialized graph document.

    Args:
        text: JSON produced by serialize_graph

    Returns:
        DependencyGraph equal to the one that was serialized

    Raises:
        GraphFormatError: If the document is not valid JSON or violates the schema
    """
    try:
        return DependencyGraph.model_validate_json(text)
    except PydanticValidationError as e:
        raise GraphFormatError(
            "Malformed dependency graph document",
            {"errors": e.error_count(), "first": _first_error(e)},
        ) from e


def serialize_diff(diff: GraphDiff) -> str:
    """Serialize a diff as an indented JSON document."""
    return diff.model_dump_json(by_alias=True, indent=2)


def deserialize_diff(text: str | bytes) -> GraphDiff:
    """
    Parse a serialized diff document.

    Raises:
        GraphFormatError: If the document is malformed
    """
    try:
        return GraphDiff.model_validate_json(text)
    except PydanticValidationError as e:
        raise GraphFormatError(
            "Malformed graph diff document",
            {"errors": e.error_count(), "first": _first_error(e)},
        ) from e


def _first_error(error: PydanticValidationError) -> str:
    errors = error.errors()
    if not errors:
        return str(error)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', '')}" if location else first.get("msg", "")
