"""Export statement extraction."""

from typing import Optional, Tuple

from extraction.config import (
    DEFAULT_MARKER,
    EXPORT_DECLARATION_KINDS,
    EXPORT_STATEMENT,
    IDENTIFIER_KINDS,
    TYPE_NAME_KINDS,
    VARIABLE_DECLARATION_KINDS,
    VARIABLE_DECLARATOR,
)
from extraction.models import ExportInfo
from extraction.extractors.variables import declarator_name
from extraction.node import SyntaxNode
from extraction.traversal import DEPTH_FIRST, collect


def parse_export(node: SyntaxNode) -> Optional[ExportInfo]:
    """Resolve the exported entity of an ``export_statement``.

    The first recognisable child decides the fact: a nested declaration gives
    its own name and kind, a bare identifier is a variable export. Re-export
    lists and anonymous defaults yield nothing.
    """
    is_default = node.has_child(DEFAULT_MARKER)

    for child in node.children:
        if child.kind in EXPORT_DECLARATION_KINDS:
            name_node = child.find_child(TYPE_NAME_KINDS)
            if name_node is not None:
                return ExportInfo(
                    name=name_node.text,
                    kind=EXPORT_DECLARATION_KINDS[child.kind],
                    is_default=is_default,
                    start_position=node.start_position,
                )
        elif child.kind in VARIABLE_DECLARATION_KINDS:
            declarator = child.find_child(VARIABLE_DECLARATOR)
            name_node = declarator_name(declarator) if declarator else None
            if name_node is not None:
                return ExportInfo(
                    name=name_node.text,
                    kind="variable",
                    is_default=is_default,
                    start_position=node.start_position,
                )
        elif child.kind in IDENTIFIER_KINDS:
            return ExportInfo(
                name=child.text,
                kind="variable",
                is_default=is_default,
                start_position=node.start_position,
            )

    return None


def extract_exports(root: SyntaxNode) -> Tuple[ExportInfo, ...]:
    """Extract every export statement, depth-first."""
    return collect(root, (EXPORT_STATEMENT,), parse_export, DEPTH_FIRST, "export")
