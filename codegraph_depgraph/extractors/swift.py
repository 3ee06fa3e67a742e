"""
Swift Extractor

Extracts classes, structs, actors, enums and protocols.

The grammar folds class/struct/actor/enum/extension into class_declaration,
told apart by its declaration_kind field (or keyword token on older grammar
releases).

Edges:
- inheritance specifiers -> implements (classes, enums), extends (protocols)
- extensions -> implements edges from the extended type, no node
- property type annotations -> field_type
- function parameters / return types -> method_param / method_return
"""

from codegraph_depgraph.extractors.base import BaseExtractor, FragmentBuilder
from codegraph_depgraph.models import EdgeKind, NodeKind
from codegraph_depgraph.parsing.syntax_node import SyntaxNode

DECLARATION_KINDS: dict[str, NodeKind | None] = {
    "class": NodeKind.CLASS,
    "struct": NodeKind.CLASS,
    "actor": NodeKind.CLASS,
    "enum": NodeKind.ENUM,
    "extension": None,
}

INHERITANCE_NODES = {"inheritance_specifier", "type_inheritance_clause"}
PROPERTY_MEMBERS = {"property_declaration", "protocol_property_declaration", "variable_declaration"}
FUNCTION_MEMBERS = {"function_declaration", "protocol_function_declaration", "init_declaration"}
NESTED_DECLARATIONS = {"class_declaration", "protocol_declaration", "enum_declaration"}


class SwiftExtractor(BaseExtractor):
    """Extractor for .swift files."""

    LANGUAGE = "swift"
    BUILTIN_TYPES = frozenset(
        {
            "Int",
            "Int8",
            "Int16",
            "Int32",
            "Int64",
            "UInt",
            "UInt8",
            "UInt16",
            "UInt32",
            "UInt64",
            "Float",
            "Double",
            "Bool",
            "String",
            "Character",
            "Void",
            "Any",
            "AnyObject",
            "Never",
            "Self",
        }
    )

    def _visit(self, node: SyntaxNode, builder: FragmentBuilder) -> bool:
        if node.type in NESTED_DECLARATIONS or node.type == "extension_declaration":
            self._extract_declaration(node, builder)
            return True
        return False

    def _extract_declaration(self, node: SyntaxNode, builder: FragmentBuilder) -> None:
        node_type = node.type

        if node_type == "protocol_declaration":
            kind: NodeKind | None = NodeKind.PROTOCOL
        elif node_type == "enum_declaration":
            kind = NodeKind.ENUM
        elif node_type == "extension_declaration":
            kind = None
        else:
            kind = DECLARATION_KINDS.get(self._declaration_keyword(node), NodeKind.CLASS)

        name = self._declared_name(node)
        if not name:
            return

        if kind is not None:
            builder.add_node(name, kind, node)

        inheritance_kind = EdgeKind.EXTENDS if kind is NodeKind.PROTOCOL else EdgeKind.IMPLEMENTS
        for child in node.children:
            if child.type in INHERITANCE_NODES:
                builder.add_edges(name, self._type_names(child), inheritance_kind)

        body = node.field("body")
        if body is not None:
            self._extract_body(body, name, builder)

    def _extract_body(self, body: SyntaxNode, owner: str, builder: FragmentBuilder) -> None:
        for member in body.named_children:
            member_type = member.type

            if member_type in PROPERTY_MEMBERS:
                for annotation in self._type_annotations(member):
                    builder.add_edges(owner, self._type_names(annotation), EdgeKind.FIELD_TYPE)

            elif member_type in FUNCTION_MEMBERS:
                for param in self._parameters(member):
                    param_type = param.field("type")
                    if param_type is not None:
                        builder.add_edges(owner, self._type_names(param_type), EdgeKind.METHOD_PARAM)

                return_type = member.field("return_type")
                if return_type is not None:
                    builder.add_edges(owner, self._type_names(return_type), EdgeKind.METHOD_RETURN)

            elif member_type in NESTED_DECLARATIONS:
                self._extract_declaration(member, builder)

    def _declaration_keyword(self, node: SyntaxNode) -> str:
        keyword = node.field("declaration_kind")
        if keyword is not None:
            return keyword.text
        for candidate in DECLARATION_KINDS:
            if node.has_token(candidate):
                return candidate
        return "class"

    def _declared_name(self, node: SyntaxNode) -> str | None:
        name_node = node.field("name")
        if name_node is None:
            # Older grammar: extension_declaration stores the extended type unnamed
            name_node = node.find_child("user_type", "type_identifier")
        if name_node is None:
            return None
        if name_node.type == "user_type":
            names = self._type_names(name_node)
            return names[0] if names else None
        return name_node.text.strip() or None

    def _type_annotations(self, member: SyntaxNode) -> list[SyntaxNode]:
        """Type annotations of a property: `var a: A`, `let a: A, b: B`"""
        annotations: list[SyntaxNode] = []
        for child in member.children:
            if child.type == "type_annotation":
                annotations.append(child)
            elif child.type == "pattern_binding":
                annotations.extend(child.iter_children("type_annotation"))
        typed = member.field("type")
        if not annotations and typed is not None:
            annotations.append(typed)
        return annotations

    def _parameters(self, function: SyntaxNode) -> list[SyntaxNode]:
        params = list(function.iter_children("parameter"))
        if params:
            return params
        container = function.field("parameters") or function.find_child("function_value_parameters")
        if container is None:
            return []
        return [param for param in container.named_children if param.type == "parameter"]

    def _type_names(self, node: SyntaxNode) -> list[str]:
        """
        Names of the types referenced by a type expression.

        user_type (Outer.Inner<A>) resolves to its last type_identifier; generic
        arguments, optionals, arrays and dictionaries are walked through.
        """
        names: list[str] = []
        stack = [node]
        while stack:
            current = stack.pop()
            node_type = current.type

            if node_type == "user_type":
                segments = [child for child in current.children if child.type == "type_identifier"]
                if segments:
                    names.append(segments[-1].text)
                stack.extend(reversed(list(current.iter_children("type_arguments"))))
                continue
            if node_type == "type_identifier":
                names.append(current.text)
                continue

            stack.extend(reversed(current.children))
        return names
