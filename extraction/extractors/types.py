"""Interface, type alias and enum extraction."""

from typing import Optional, Tuple

from extraction.config import (
    ENUM_DECLARATION,
    INTERFACE_BODY_KINDS,
    INTERFACE_DECLARATION,
    MEMBER_NAME_KINDS,
    METHOD_SIGNATURE,
    OPTIONAL_MARKER,
    PROPERTY_SIGNATURE,
    READONLY_MARKER,
    TYPE_ALIAS_DECLARATION,
    TYPE_DECLARATION_KINDS,
    TYPE_NAME_KINDS,
)
from extraction.models import MethodInfo, TypeInfo, TypePropertyInfo
from extraction.node import SyntaxNode
from extraction.syntax import parameters_of, type_of
from extraction.traversal import DEPTH_FIRST, collect

_KIND_TAGS = {
    INTERFACE_DECLARATION: "interface",
    TYPE_ALIAS_DECLARATION: "type",
    ENUM_DECLARATION: "enum",
}


def parse_property_signature(node: SyntaxNode) -> Optional[TypePropertyInfo]:
    name_node = node.find_child(MEMBER_NAME_KINDS)
    if name_node is None:
        return None
    return TypePropertyInfo(
        name=name_node.text,
        type=type_of(node),
        is_optional=node.has_child(OPTIONAL_MARKER),
        is_readonly=node.has_child(READONLY_MARKER),
    )


def parse_method_signature(node: SyntaxNode) -> Optional[MethodInfo]:
    name_node = node.find_child(MEMBER_NAME_KINDS)
    if name_node is None:
        return None
    return MethodInfo(
        name=name_node.text,
        parameters=parameters_of(node),
        return_type=type_of(node),
    )


def parse_type_declaration(node: SyntaxNode) -> Optional[TypeInfo]:
    """Build a ``TypeInfo``; declarations without a name are skipped.

    Only interfaces are scanned for members. Aliases and enums carry their
    name alone.
    """
    name_node = node.find_child(TYPE_NAME_KINDS)
    if name_node is None:
        return None

    properties = []
    methods = []
    if node.kind == INTERFACE_DECLARATION:
        body = node.find_child(INTERFACE_BODY_KINDS)
        if body is not None:
            for member in body.children:
                if member.kind == PROPERTY_SIGNATURE:
                    prop = parse_property_signature(member)
                    if prop is not None:
                        properties.append(prop)
                elif member.kind == METHOD_SIGNATURE:
                    method = parse_method_signature(member)
                    if method is not None:
                        methods.append(method)

    return TypeInfo(
        name=name_node.text,
        kind=_KIND_TAGS[node.kind],
        properties=tuple(properties),
        methods=tuple(methods),
        start_position=node.start_position,
        end_position=node.end_position,
    )


def extract_types(root: SyntaxNode) -> Tuple[TypeInfo, ...]:
    """Extract type declarations, depth-first."""
    return collect(root, TYPE_DECLARATION_KINDS, parse_type_declaration, DEPTH_FIRST, "type")
