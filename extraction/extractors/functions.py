"""Function, arrow function and method extraction."""

from typing import Optional, Tuple

from extraction.config import (
    ANONYMOUS_NAME,
    ARROW_FUNCTION,
    ASYNC_MODIFIER,
    FUNCTION_KINDS,
    FUNCTION_NAME_KINDS,
    GENERATOR_MODIFIER,
    IDENTIFIER_KINDS,
)
from extraction.models import FunctionInfo
from extraction.node import SyntaxNode
from extraction.syntax import parameters_of, type_of
from extraction.traversal import BREADTH_FIRST, collect


def parse_function(node: SyntaxNode) -> Optional[FunctionInfo]:
    """Build a ``FunctionInfo`` from a function-like node.

    The name is the first identifier-kind child, except for arrow functions,
    which are always ``"anonymous"``. An arrow written without parentheses
    (``x => x``) carries its single parameter as a bare identifier child;
    that identifier is reported as the parameter, never as the name. The
    binding an arrow is assigned to is reported by the variable extractor.
    """
    parameters = parameters_of(node)

    if node.kind == ARROW_FUNCTION:
        name = ANONYMOUS_NAME
        bare_parameter = node.find_child(IDENTIFIER_KINDS)
        if bare_parameter is not None and not parameters:
            parameters = (bare_parameter.text,)
    else:
        name_node = node.find_child(FUNCTION_NAME_KINDS)
        name = name_node.text if name_node is not None else ANONYMOUS_NAME

    return FunctionInfo(
        name=name,
        kind=node.kind,
        parameters=parameters,
        return_type=type_of(node),
        is_async=node.has_child(ASYNC_MODIFIER),
        is_generator=node.has_child(GENERATOR_MODIFIER),
        start_position=node.start_position,
        end_position=node.end_position,
    )


def extract_functions(root: SyntaxNode) -> Tuple[FunctionInfo, ...]:
    """Extract every function-like node, breadth-first."""
    return collect(root, FUNCTION_KINDS, parse_function, BREADTH_FIRST, "function")
