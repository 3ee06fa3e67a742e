"""
TypeScript Extractor

Extracts classes, interfaces, enums and type aliases from TypeScript and TSX.

Edges:
- class_heritage extends/implements clauses, interface extends_type_clause
- field and property signature types -> field_type
- method parameter / return types -> method_param / method_return
- type alias values -> extends
"""

from codegraph_depgraph.extractors.base import BaseExtractor, FragmentBuilder
from codegraph_depgraph.models import EdgeKind, NodeKind
from codegraph_depgraph.parsing.syntax_node import SyntaxNode

CLASS_DECLARATIONS = {"class_declaration", "abstract_class_declaration"}

FIELD_MEMBERS = {"public_field_definition", "property_definition", "field_definition", "property_signature"}
METHOD_MEMBERS = {"method_definition", "method_signature", "abstract_method_signature"}
PARAMETER_TYPES = {"required_parameter", "optional_parameter"}

# Leaves of a type expression that never name a user type
OPAQUE_TYPE_NODES = {"predefined_type", "literal_type", "string", "number", "template_literal_type", "this_type"}


class TypeScriptExtractor(BaseExtractor):
    """Extractor for .ts and .tsx files."""

    LANGUAGE = "typescript"
    BUILTIN_TYPES = frozenset(
        {
            "string",
            "number",
            "boolean",
            "bigint",
            "symbol",
            "object",
            "any",
            "unknown",
            "never",
            "void",
            "undefined",
            "null",
            "String",
            "Number",
            "Boolean",
            "BigInt",
            "Symbol",
            "Object",
        }
    )

    def grammar_for(self, file_path: str) -> str:
        return "tsx" if file_path.endswith(".tsx") else "typescript"

    def _visit(self, node: SyntaxNode, builder: FragmentBuilder) -> bool:
        node_type = node.type

        if node_type in CLASS_DECLARATIONS:
            self._extract_class_like(node, builder, NodeKind.CLASS)
            return True

        elif node_type == "interface_declaration":
            self._extract_class_like(node, builder, NodeKind.INTERFACE)
            return True

        elif node_type == "type_alias_declaration":
            name = self._name_of(node)
            if name:
                builder.add_node(name, NodeKind.TYPE_ALIAS, node)
                value = node.field("value")
                if value is not None:
                    builder.add_edges(name, self._type_names(value), EdgeKind.EXTENDS)
            return True

        elif node_type == "enum_declaration":
            name = self._name_of(node)
            if name:
                builder.add_node(name, NodeKind.ENUM, node)
            return True

        return False

    def _extract_class_like(self, node: SyntaxNode, builder: FragmentBuilder, kind: NodeKind) -> None:
        name = self._name_of(node)
        if not name:
            return

        builder.add_node(name, kind, node)

        for child in node.children:
            if child.type == "class_heritage":
                for clause in child.children:
                    self._extract_heritage_clause(clause, name, builder)
            else:
                self._extract_heritage_clause(child, name, builder)

        body = node.field("body")
        if body is not None:
            self._extract_body_members(body, name, builder)

    def _extract_heritage_clause(self, clause: SyntaxNode, owner: str, builder: FragmentBuilder) -> None:
        if clause.type == "extends_clause":
            # Class extends takes an expression: `extends Base`, `extends ns.Base`
            builder.add_edges(owner, self._type_names(clause, accept_identifiers=True), EdgeKind.EXTENDS)
        elif clause.type == "extends_type_clause":
            builder.add_edges(owner, self._type_names(clause), EdgeKind.EXTENDS)
        elif clause.type == "implements_clause":
            builder.add_edges(owner, self._type_names(clause), EdgeKind.IMPLEMENTS)

    def _extract_body_members(self, body: SyntaxNode, owner: str, builder: FragmentBuilder) -> None:
        for member in body.named_children:
            if member.type in FIELD_MEMBERS:
                type_annotation = member.field("type")
                if type_annotation is not None:
                    builder.add_edges(owner, self._type_names(type_annotation), EdgeKind.FIELD_TYPE)

            elif member.type in METHOD_MEMBERS:
                parameters = member.field("parameters")
                if parameters is not None:
                    for param in parameters.named_children:
                        if param.type not in PARAMETER_TYPES:
                            continue
                        param_type = param.field("type")
                        if param_type is not None:
                            builder.add_edges(owner, self._type_names(param_type), EdgeKind.METHOD_PARAM)

                return_type = member.field("return_type")
                if return_type is not None:
                    builder.add_edges(owner, self._type_names(return_type), EdgeKind.METHOD_RETURN)

    def _type_names(self, node: SyntaxNode, accept_identifiers: bool = False) -> list[str]:
        """
        Simple names of the types referenced by a type expression.

        Qualified names (Outer.Inner) resolve to their last segment; generic
        arguments are walked and each yields its own name.
        """
        names: list[str] = []
        stack = [node]
        while stack:
            current = stack.pop()
            node_type = current.type

            if node_type == "type_identifier":
                names.append(current.text)
                continue
            if node_type == "identifier":
                if accept_identifiers:
                    names.append(current.text)
                continue
            if node_type == "nested_type_identifier":
                simple = current.field("name") or _last_named_child(current)
                if simple is not None:
                    names.append(simple.text)
                continue
            if node_type == "member_expression" and accept_identifiers:
                prop = current.field("property")
                if prop is not None:
                    names.append(prop.text)
                continue
            if node_type in OPAQUE_TYPE_NODES:
                continue

            stack.extend(reversed(current.children))
        return names


def _last_named_child(node: SyntaxNode) -> SyntaxNode | None:
    named = node.named_children
    return named[-1] if named else None
