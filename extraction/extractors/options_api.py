"""Options-object component definition extraction.

Locates the object passed as ``export default {...}`` (or
``export default defineComponent({...})``) and reports the member names
declared under ``data``, ``computed``, ``watch``, ``methods`` and the
lifecycle hooks.
"""

import logging
from typing import Dict, List, Optional

from extraction.config import (
    ARGUMENTS,
    ARROW_FUNCTION,
    CALL_EXPRESSION,
    DATA_FUNCTION_KINDS,
    EXPORT_STATEMENT,
    IGNORED_OPTIONS,
    KEY_LIST_OPTIONS,
    LIFECYCLE_HOOKS,
    METHOD_DEFINITION,
    OBJECT_KINDS,
    OPTION_ENTRY_KINDS,
    OPTION_KEY_KINDS,
    PARENTHESIZED_EXPRESSION,
    RETURN_STATEMENT,
    SHORTHAND_PROPERTY,
    STATEMENT_BLOCK,
)
from extraction.models import OptionsApiInfo
from extraction.node import SyntaxNode
from extraction.syntax import strip_quotes
from extraction.traversal import BREADTH_FIRST, iter_nodes

logger = logging.getLogger(__name__)


def _exported_options_object(node: SyntaxNode) -> Optional[SyntaxNode]:
    obj = node.find_child(OBJECT_KINDS)
    if obj is not None:
        return obj
    call = node.find_child(CALL_EXPRESSION)
    if call is None:
        return None
    arguments = call.find_child(ARGUMENTS)
    if arguments is None:
        return None
    return arguments.find_child(OBJECT_KINDS)


def find_options_object(root: SyntaxNode) -> Optional[SyntaxNode]:
    """Return the options object of the first qualifying export, breadth-first.

    Later exports are never considered once one qualifies.
    """
    for node in iter_nodes(root, BREADTH_FIRST):
        if node.kind != EXPORT_STATEMENT:
            continue
        try:
            obj = _exported_options_object(node)
        except Exception:
            logger.warning(
                "Failed to inspect export at %d:%d",
                node.start_position.row,
                node.start_position.column,
                exc_info=True,
            )
            continue
        if obj is not None:
            logger.debug("Found options object at row %d", obj.start_position.row)
            return obj
    return None


def entry_key(entry: SyntaxNode) -> Optional[str]:
    if entry.kind == SHORTHAND_PROPERTY:
        return entry.text
    key_node = entry.find_child(OPTION_KEY_KINDS)
    if key_node is None:
        return None
    return strip_quotes(key_node.text)


def object_keys(obj: Optional[SyntaxNode]) -> List[str]:
    """Top-level keys of an object literal, in source order."""
    if obj is None:
        return []
    keys = []
    for entry in obj.find_children(OPTION_ENTRY_KINDS):
        key = entry_key(entry)
        if key is not None:
            keys.append(key)
    return keys


def _returned_object(function: SyntaxNode) -> Optional[SyntaxNode]:
    body = function.find_child(STATEMENT_BLOCK)
    if body is not None:
        statement = body.find_child(RETURN_STATEMENT)
        if statement is None:
            return None
        return statement.find_child(OBJECT_KINDS)
    if function.kind == ARROW_FUNCTION:
        wrapped = function.find_child(PARENTHESIZED_EXPRESSION)
        if wrapped is not None:
            return wrapped.find_child(OBJECT_KINDS)
    return None


def data_keys(entry: SyntaxNode) -> List[str]:
    """Keys of the object literal returned by a ``data`` option.

    A computed or indirect return (``return state``) is not resolved and
    gives no keys.
    """
    if entry.kind == METHOD_DEFINITION:
        function = entry
    else:
        function = entry.find_child(DATA_FUNCTION_KINDS)
    if function is None:
        return []
    return object_keys(_returned_object(function))


def extract_options_api(root: SyntaxNode) -> OptionsApiInfo:
    """Extract options-object member names from a component script tree."""
    sections: Dict[str, List[str]] = {
        "data": [],
        "computed": [],
        "watch": [],
        "methods": [],
        "lifecycle": [],
    }

    obj = find_options_object(root)
    if obj is None:
        logger.debug("No options object found")
        return OptionsApiInfo()

    for entry in obj.find_children(OPTION_ENTRY_KINDS):
        try:
            key = entry_key(entry)
            if key is None:
                continue
            if key == "data":
                sections["data"].extend(data_keys(entry))
            elif key in KEY_LIST_OPTIONS:
                sections[key].extend(object_keys(entry.find_child(OBJECT_KINDS)))
            elif key in IGNORED_OPTIONS:
                continue
            elif key in LIFECYCLE_HOOKS:
                sections["lifecycle"].append(key)
        except Exception:
            logger.warning(
                "Failed to process option entry at %d:%d",
                entry.start_position.row,
                entry.start_position.column,
                exc_info=True,
            )

    return OptionsApiInfo(
        data_properties=tuple(sections["data"]),
        computed_properties=tuple(sections["computed"]),
        watch_properties=tuple(sections["watch"]),
        methods=tuple(sections["methods"]),
        lifecycle_hooks=tuple(sections["lifecycle"]),
    )
