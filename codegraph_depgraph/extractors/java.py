"""
Java Extractor

Extracts classes, records, interfaces, annotation types and enums.

Edges:
- superclass -> extends, super_interfaces -> implements
- interface extends_interfaces -> extends
- fields, interface constants and record components -> field_type
- method / constructor parameters -> method_param, method return -> method_return

Nested type declarations inside bodies are extracted as their own nodes.
"""

from codegraph_depgraph.extractors.base import BaseExtractor, FragmentBuilder
from codegraph_depgraph.models import EdgeKind, NodeKind
from codegraph_depgraph.parsing.syntax_node import SyntaxNode

DECLARATION_KINDS: dict[str, NodeKind] = {
    "class_declaration": NodeKind.CLASS,
    "record_declaration": NodeKind.CLASS,
    "interface_declaration": NodeKind.INTERFACE,
    "annotation_type_declaration": NodeKind.INTERFACE,
    "enum_declaration": NodeKind.ENUM,
}

FIELD_MEMBERS = {"field_declaration", "constant_declaration"}
METHOD_MEMBERS = {"method_declaration", "constructor_declaration", "compact_constructor_declaration"}


class JavaExtractor(BaseExtractor):
    """Extractor for .java files."""

    LANGUAGE = "java"
    BUILTIN_TYPES = frozenset(
        {
            "byte",
            "short",
            "int",
            "long",
            "char",
            "float",
            "double",
            "boolean",
            "void",
            "var",
            "String",
            "Object",
            "Byte",
            "Short",
            "Integer",
            "Long",
            "Character",
            "Float",
            "Double",
            "Boolean",
            "Void",
        }
    )

    def _visit(self, node: SyntaxNode, builder: FragmentBuilder) -> bool:
        kind = DECLARATION_KINDS.get(node.type)
        if kind is None:
            return False

        self._extract_declaration(node, kind, builder)
        return True

    def _extract_declaration(self, node: SyntaxNode, kind: NodeKind, builder: FragmentBuilder) -> None:
        name = self._name_of(node)
        if not name:
            return

        builder.add_node(name, kind, node)

        superclass = node.field("superclass")
        if superclass is not None:
            builder.add_edges(name, self._type_names(superclass), EdgeKind.EXTENDS)

        interfaces = node.field("interfaces")
        if interfaces is not None:
            builder.add_edges(name, self._type_names(interfaces), EdgeKind.IMPLEMENTS)

        extends_interfaces = node.find_child("extends_interfaces")
        if extends_interfaces is not None:
            builder.add_edges(name, self._type_names(extends_interfaces), EdgeKind.EXTENDS)

        if node.type == "record_declaration":
            components = node.field("parameters")
            if components is not None:
                builder.add_edges(name, self._parameter_types(components), EdgeKind.FIELD_TYPE)

        body = node.field("body")
        if body is not None:
            self._extract_body(body, name, builder)

    def _extract_body(self, body: SyntaxNode, owner: str, builder: FragmentBuilder) -> None:
        for member in body.named_children:
            member_type = member.type

            if member_type in FIELD_MEMBERS:
                field_type = member.field("type")
                if field_type is not None:
                    builder.add_edges(owner, self._type_names(field_type), EdgeKind.FIELD_TYPE)

            elif member_type in METHOD_MEMBERS:
                return_type = member.field("type")
                if return_type is not None:
                    builder.add_edges(owner, self._type_names(return_type), EdgeKind.METHOD_RETURN)

                parameters = member.field("parameters")
                if parameters is not None:
                    builder.add_edges(owner, self._parameter_types(parameters), EdgeKind.METHOD_PARAM)

            elif member_type in DECLARATION_KINDS:
                self._extract_declaration(member, DECLARATION_KINDS[member_type], builder)

            elif member_type == "enum_body_declarations":
                # Fields and methods after the enum constants
                self._extract_body(member, owner, builder)

    def _parameter_types(self, parameters: SyntaxNode) -> list[str]:
        names: list[str] = []
        for param in parameters.named_children:
            if param.type == "formal_parameter":
                param_type = param.field("type")
                if param_type is not None:
                    names.extend(self._type_names(param_type))
            elif param.type == "spread_parameter":
                # Type1... args has no field name for its type
                for child in param.named_children:
                    if child.type not in ("modifiers", "variable_declarator"):
                        names.extend(self._type_names(child))
                        break
        return names

    def _type_names(self, node: SyntaxNode) -> list[str]:
        """
        Simple names of the types referenced by a type expression.

        scoped_type_identifier (java.util.List, Outer.Inner) resolves to its
        last segment; generic arguments are walked recursively.
        """
        names: list[str] = []
        stack = [node]
        while stack:
            current = stack.pop()
            node_type = current.type

            if node_type == "type_identifier":
                names.append(current.text)
                continue
            if node_type == "scoped_type_identifier":
                segments = [child for child in current.named_children if child.type == "type_identifier"]
                if segments:
                    names.append(segments[-1].text)
                # Type arguments of outer segments (Outer<A>.Inner)
                for child in current.named_children:
                    if child.type in ("generic_type", "scoped_type_identifier"):
                        stack.extend(reversed(_type_arguments(child)))
                continue
            if node_type in ("annotation", "marker_annotation"):
                continue

            stack.extend(reversed(current.children))
        return names


def _type_arguments(node: SyntaxNode) -> list[SyntaxNode]:
    args = node.find_child("type_arguments")
    return [args] if args is not None else []
