"""Class declaration extraction, including members."""

from typing import Optional, Tuple

from extraction.config import (
    ACCESSIBILITY_MODIFIER,
    ANONYMOUS_NAME,
    ASYNC_MODIFIER,
    CLASS_BODY,
    CLASS_EXPRESSION,
    CLASS_HERITAGE,
    CLASS_KINDS,
    EXTENDS_CLAUSE,
    GENERIC_TYPE,
    IDENTIFIER_KINDS,
    IMPLEMENTS_CLAUSE,
    MEMBER_NAME_KINDS,
    METHOD_DEFINITION,
    PROPERTY_DEFINITION_KINDS,
    STATIC_MODIFIER,
    TYPE_NAME_KINDS,
    VISIBILITY_KINDS,
)
from extraction.models import ClassInfo, MethodInfo, PropertyInfo
from extraction.node import SyntaxNode
from extraction.syntax import parameters_of, type_of
from extraction.traversal import DEPTH_FIRST, collect


def parse_method(node: SyntaxNode) -> Optional[MethodInfo]:
    name_node = node.find_child(MEMBER_NAME_KINDS)
    if name_node is None:
        return None
    return MethodInfo(
        name=name_node.text,
        parameters=parameters_of(node),
        return_type=type_of(node),
        is_static=node.has_child(STATIC_MODIFIER),
        is_async=node.has_child(ASYNC_MODIFIER),
    )


def _visibility(node: SyntaxNode) -> Optional[str]:
    for child in node.children:
        if child.kind in VISIBILITY_KINDS:
            return child.kind
        if child.kind == ACCESSIBILITY_MODIFIER:
            text = child.text.strip()
            if text in VISIBILITY_KINDS:
                return text
    return None


def parse_property(node: SyntaxNode) -> Optional[PropertyInfo]:
    name_node = node.find_child(MEMBER_NAME_KINDS)
    if name_node is None:
        return None
    return PropertyInfo(
        name=name_node.text,
        type=type_of(node),
        is_static=node.has_child(STATIC_MODIFIER),
        visibility=_visibility(node),
    )


def _superclass(heritage: SyntaxNode) -> Optional[str]:
    # JavaScript: class_heritage -> identifier
    # TypeScript: class_heritage -> extends_clause -> identifier
    identifier = heritage.find_child(IDENTIFIER_KINDS)
    if identifier is None:
        extends_clause = heritage.find_child(EXTENDS_CLAUSE)
        if extends_clause is not None:
            identifier = extends_clause.find_child(IDENTIFIER_KINDS)
    return identifier.text if identifier is not None else None


def _implemented(heritage: SyntaxNode) -> Tuple[str, ...]:
    names = []
    for clause in heritage.find_children(IMPLEMENTS_CLAUSE):
        for child in clause.children:
            if child.kind in TYPE_NAME_KINDS:
                names.append(child.text)
            elif child.kind == GENERIC_TYPE:
                base = child.find_child(TYPE_NAME_KINDS)
                if base is not None:
                    names.append(base.text)
    return tuple(names)


def parse_class(node: SyntaxNode) -> Optional[ClassInfo]:
    """Build a ``ClassInfo`` from a class declaration or expression.

    A bare ``class`` keyword token has no body and is not a class.
    """
    if node.kind == CLASS_EXPRESSION and not node.has_child(CLASS_BODY):
        return None

    name_node = node.find_child(TYPE_NAME_KINDS)
    name = name_node.text if name_node is not None else ANONYMOUS_NAME

    extends = None
    implements: Tuple[str, ...] = ()
    heritage = node.find_child(CLASS_HERITAGE)
    if heritage is not None:
        extends = _superclass(heritage)
        implements = _implemented(heritage)

    methods = []
    properties = []
    body = node.find_child(CLASS_BODY)
    if body is not None:
        for member in body.children:
            if member.kind == METHOD_DEFINITION:
                method = parse_method(member)
                if method is not None:
                    methods.append(method)
            elif member.kind in PROPERTY_DEFINITION_KINDS:
                prop = parse_property(member)
                if prop is not None:
                    properties.append(prop)

    return ClassInfo(
        name=name,
        extends=extends,
        implements=implements or None,
        methods=tuple(methods),
        properties=tuple(properties),
        start_position=node.start_position,
        end_position=node.end_position,
    )


def extract_classes(root: SyntaxNode) -> Tuple[ClassInfo, ...]:
    """Extract every class, depth-first."""
    return collect(root, CLASS_KINDS, parse_class, DEPTH_FIRST, "class")
