"""Small node-reading helpers shared by several extractors."""

from typing import Optional, Tuple

from extraction.config import (
    FORMAL_PARAMETERS,
    IDENTIFIER_KINDS,
    PARAMETER_KINDS,
    PARAMETER_PATTERN_KINDS,
    QUOTE_CHARACTERS,
    TYPE_ANNOTATION,
)
from extraction.node import SyntaxNode


def extract_parameters(parameters_node: Optional[SyntaxNode]) -> Tuple[str, ...]:
    """Return parameter names from a ``formal_parameters`` node, in order.

    TypeScript wraps each parameter in ``required_parameter`` or
    ``optional_parameter``; the plain JavaScript grammar puts identifiers and
    rest/default patterns straight into the list. Destructured parameters have
    no single name and are skipped.
    """
    if parameters_node is None:
        return ()

    names = []
    for child in parameters_node.children:
        if child.kind in PARAMETER_KINDS:
            target = child
            pattern = child.find_child(PARAMETER_PATTERN_KINDS)
            if pattern is not None and not child.has_child(IDENTIFIER_KINDS):
                target = pattern
            identifier = target.find_child(IDENTIFIER_KINDS)
            if identifier is not None:
                names.append(identifier.text)
        elif child.kind in IDENTIFIER_KINDS:
            names.append(child.text)
        elif child.kind in PARAMETER_PATTERN_KINDS:
            identifier = child.find_child(IDENTIFIER_KINDS)
            if identifier is not None:
                names.append(identifier.text)
    return tuple(names)


def parameters_of(node: SyntaxNode) -> Tuple[str, ...]:
    return extract_parameters(node.find_child(FORMAL_PARAMETERS))


def annotation_text(annotation: Optional[SyntaxNode]) -> Optional[str]:
    """Text of a ``type_annotation`` with its leading ``:`` removed."""
    if annotation is None:
        return None
    text = annotation.text.strip()
    if text.startswith(":"):
        text = text[1:]
    text = text.strip()
    return text or None


def type_of(node: SyntaxNode) -> Optional[str]:
    return annotation_text(node.find_child(TYPE_ANNOTATION))


def strip_quotes(text: str) -> str:
    """Remove surrounding quote characters from a string literal."""
    return text.strip().strip(QUOTE_CHARACTERS)
