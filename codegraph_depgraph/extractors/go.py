"""
Go Extractor

Extracts named struct and interface types declared at package level.

Edges:
- embedded struct fields (plain or pointer) and embedded interfaces -> extends
- named struct fields -> field_type
- interface method specs -> method_param / method_return
- method declarations attribute their parameter/result types to the receiver type

Defined types over other types (type ID string), aliases and function types
produce no node.
"""

from codegraph_depgraph.extractors.base import BaseExtractor, FragmentBuilder
from codegraph_depgraph.models import EdgeKind, NodeKind
from codegraph_depgraph.parsing.syntax_node import SyntaxNode

# Older grammar releases name these method_spec / constraint_elem
INTERFACE_METHODS = {"method_elem", "method_spec"}
INTERFACE_EMBEDS = {"type_elem", "constraint_elem", "interface_type_name"}


class GoExtractor(BaseExtractor):
    """Extractor for .go files."""

    LANGUAGE = "go"
    BUILTIN_TYPES = frozenset(
        {
            "string",
            "int",
            "int8",
            "int16",
            "int32",
            "int64",
            "uint",
            "uint8",
            "uint16",
            "uint32",
            "uint64",
            "float32",
            "float64",
            "complex64",
            "complex128",
            "bool",
            "byte",
            "rune",
            "error",
            "any",
            "uintptr",
            "comparable",
        }
    )

    def _visit(self, node: SyntaxNode, builder: FragmentBuilder) -> bool:
        node_type = node.type

        if node_type == "type_declaration":
            for spec in node.iter_children("type_spec"):
                self._extract_type_spec(spec, builder)
            return True

        elif node_type == "method_declaration":
            receiver = self._receiver_type(node)
            if receiver:
                self._extract_signature(node, receiver, builder)
            return True

        elif node_type == "function_declaration":
            # Types declared inside function bodies are local
            return True

        return False

    def _extract_type_spec(self, spec: SyntaxNode, builder: FragmentBuilder) -> None:
        name = self._name_of(spec)
        type_node = spec.field("type")
        if not name or type_node is None:
            return

        if type_node.type == "struct_type":
            builder.add_node(name, NodeKind.CLASS, spec)
            self._extract_struct(type_node, name, builder)
        elif type_node.type == "interface_type":
            builder.add_node(name, NodeKind.INTERFACE, spec)
            self._extract_interface(type_node, name, builder)

    def _extract_struct(self, struct: SyntaxNode, owner: str, builder: FragmentBuilder) -> None:
        fields = struct.find_child("field_declaration_list")
        if fields is None:
            return

        for field in fields.iter_children("field_declaration"):
            field_type = field.field("type")

            if field.field("name") is None:
                # Embedding: `Base` or `*Base`
                if field_type is not None:
                    builder.add_edges(owner, self._type_names(field_type)[:1], EdgeKind.EXTENDS)
                else:
                    embedded = field.find_child("type_identifier", "qualified_type")
                    if embedded is not None:
                        builder.add_edges(owner, self._type_names(embedded)[:1], EdgeKind.EXTENDS)
            elif field_type is not None:
                builder.add_edges(owner, self._type_names(field_type), EdgeKind.FIELD_TYPE)

    def _extract_interface(self, interface: SyntaxNode, owner: str, builder: FragmentBuilder) -> None:
        for member in interface.named_children:
            if member.type in INTERFACE_METHODS:
                self._extract_signature(member, owner, builder)
            elif member.type in INTERFACE_EMBEDS:
                builder.add_edges(owner, self._type_names(member), EdgeKind.EXTENDS)
            elif member.type in ("type_identifier", "qualified_type"):
                builder.add_edges(owner, self._type_names(member), EdgeKind.EXTENDS)

    def _extract_signature(self, node: SyntaxNode, owner: str, builder: FragmentBuilder) -> None:
        parameters = node.field("parameters")
        if parameters is not None:
            for param in parameters.named_children:
                if param.type not in ("parameter_declaration", "variadic_parameter_declaration"):
                    continue
                param_type = param.field("type")
                if param_type is not None:
                    builder.add_edges(owner, self._type_names(param_type), EdgeKind.METHOD_PARAM)

        result = node.field("result")
        if result is not None:
            builder.add_edges(owner, self._type_names(result), EdgeKind.METHOD_RETURN)

    def _receiver_type(self, method: SyntaxNode) -> str | None:
        """Base type name of a method receiver: (s *Service) -> Service."""
        receiver = method.field("receiver") or method.find_child("parameter_list")
        if receiver is None:
            return None

        for param in receiver.iter_children("parameter_declaration"):
            receiver_type = param.field("type")
            if receiver_type is None:
                continue
            names = self._type_names(receiver_type)
            return names[0] if names else None
        return None

    def _type_names(self, node: SyntaxNode) -> list[str]:
        """
        Names of the types referenced by a type expression.

        Pointers, slices, arrays, maps, channels and generic arguments are
        walked through; pkg.Type resolves to Type.
        """
        names: list[str] = []
        stack = [node]
        while stack:
            current = stack.pop()
            node_type = current.type

            if node_type == "type_identifier":
                names.append(current.text)
                continue
            if node_type == "qualified_type":
                simple = current.field("name")
                if simple is not None:
                    names.append(simple.text)
                continue
            if node_type in ("package_identifier", "field_identifier", "identifier"):
                continue

            stack.extend(reversed(current.children))
        return names
