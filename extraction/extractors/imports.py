"""Import statement extraction."""

from typing import Optional, Tuple

from extraction.config import (
    IDENTIFIER_KINDS,
    IMPORT_CLAUSE,
    IMPORT_SPECIFIER,
    IMPORT_STATEMENT,
    NAMED_IMPORTS,
    NAMESPACE_IMPORT,
    STRING_KINDS,
    TYPE_ONLY_MARKER,
)
from extraction.models import ImportInfo
from extraction.node import SyntaxNode
from extraction.syntax import strip_quotes
from extraction.traversal import BREADTH_FIRST, collect


def _specifier_local_name(specifier: SyntaxNode) -> Optional[str]:
    # `b as c` binds `c`: the last identifier is the local name
    identifiers = specifier.find_children(IDENTIFIER_KINDS)
    if not identifiers:
        return None
    return identifiers[-1].text


def parse_import(node: SyntaxNode) -> Optional[ImportInfo]:
    source_node = node.find_child(STRING_KINDS)
    source = strip_quotes(source_node.text) if source_node is not None else ""
    is_type_only = node.find_descendant(TYPE_ONLY_MARKER) is not None

    clause = node.find_child(IMPORT_CLAUSE)
    if clause is None:
        return ImportInfo(
            source=source,
            imports=(),
            is_default=False,
            is_namespace=False,
            is_type_only=is_type_only,
            is_side_effect=True,
            start_position=node.start_position,
        )

    names = []
    is_default = False
    is_namespace = False
    for child in clause.children:
        if child.kind in IDENTIFIER_KINDS:
            names.append(child.text)
            is_default = True
        elif child.kind == NAMESPACE_IMPORT:
            identifier = child.find_child(IDENTIFIER_KINDS)
            if identifier is not None:
                names.append(identifier.text)
                is_namespace = True
        elif child.kind == NAMED_IMPORTS:
            for named in child.children:
                if named.kind in IDENTIFIER_KINDS:
                    names.append(named.text)
                elif named.kind == IMPORT_SPECIFIER:
                    local = _specifier_local_name(named)
                    if local is not None:
                        names.append(local)

    return ImportInfo(
        source=source,
        imports=tuple(names),
        is_default=is_default,
        is_namespace=is_namespace,
        is_type_only=is_type_only,
        is_side_effect=False,
        start_position=node.start_position,
    )


def extract_imports(root: SyntaxNode) -> Tuple[ImportInfo, ...]:
    """Extract every import statement, breadth-first."""
    return collect(root, (IMPORT_STATEMENT,), parse_import, BREADTH_FIRST, "import")
