"""Variable declaration extraction."""

from typing import Optional, Tuple

from extraction.config import (
    ASSIGNMENT_TOKEN,
    CONST_KEYWORD,
    EXPRESSION_STATEMENT,
    IDENTIFIER_KINDS,
    VALUE_KINDS,
    VARIABLE_DECLARATION_KINDS,
    VARIABLE_DECLARATOR,
)
from extraction.models import VariableInfo
from extraction.node import SyntaxNode
from extraction.syntax import type_of
from extraction.traversal import DEPTH_FIRST, collect


def declarator_value(declarator: SyntaxNode) -> Optional[str]:
    """Pick the initializer text of a declarator.

    This is a first-match heuristic, not a semantic initializer lookup: the
    value is the first child whose kind is in ``VALUE_KINDS``. The search
    starts after the ``=`` token when the declarator has one. Initializers
    outside the allow-list (plain identifiers, member access, templates)
    produce no value.
    """
    children = declarator.children
    for index, child in enumerate(children):
        if child.kind == ASSIGNMENT_TOKEN:
            children = children[index + 1:]
            break

    for child in children:
        if child.kind not in VALUE_KINDS:
            continue
        if child.kind == EXPRESSION_STATEMENT:
            return child.children[0].text if child.children else None
        return child.text
    return None


def declarator_name(declarator: SyntaxNode) -> Optional[SyntaxNode]:
    """The bound identifier, or ``None`` for destructuring patterns."""
    if not declarator.children:
        return None
    first = declarator.children[0]
    return first if first.kind in IDENTIFIER_KINDS else None


def parse_declaration(node: SyntaxNode) -> Optional[Tuple[VariableInfo, ...]]:
    """Expand a declaration statement into one fact per named declarator."""
    is_const = node.has_child(CONST_KEYWORD)
    variables = []
    for declarator in node.find_children(VARIABLE_DECLARATOR):
        name_node = declarator_name(declarator)
        if name_node is None:
            continue
        variables.append(
            VariableInfo(
                name=name_node.text,
                type=type_of(declarator),
                value=declarator_value(declarator),
                is_const=is_const,
                start_position=declarator.start_position,
            )
        )
    return tuple(variables) or None


def extract_variables(root: SyntaxNode) -> Tuple[VariableInfo, ...]:
    """Extract variables from every declaration, depth-first."""
    groups = collect(
        root, VARIABLE_DECLARATION_KINDS, parse_declaration, DEPTH_FIRST, "variable"
    )
    return tuple(variable for group in groups for variable in group)
