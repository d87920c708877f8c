"""
Single-file component (Vue SFC) markup helpers.

Works on the generic node tree produced from the tree-sitter HTML grammar:
finds the top-level ``<template>`` block and reports every directive, binding,
event and component occurrence inside it, in document order.
"""

import logging
from typing import List, Optional, Tuple

from extraction.config import (
    BINDING_PREFIXES,
    DIRECTIVE_PREFIX,
    EVENT_PREFIXES,
    HTML_ATTRIBUTE,
    HTML_ATTRIBUTE_NAME,
    HTML_ATTRIBUTE_VALUE,
    HTML_ELEMENT,
    HTML_QUOTED_ATTRIBUTE_VALUE,
    HTML_START_TAG_KINDS,
    HTML_TAG_NAME,
    RESERVED_TEMPLATE_TAGS,
    SLOT_SHORTHAND_PREFIX,
    TEMPLATE_TAG,
)
from extraction.models import TemplateOccurrence
from extraction.node import Position, SyntaxNode
from extraction.traversal import DEPTH_FIRST, iter_nodes

logger = logging.getLogger(__name__)


def tag_name(element: SyntaxNode) -> Optional[str]:
    start_tag = element.find_child(HTML_START_TAG_KINDS)
    if start_tag is None:
        return None
    name_node = start_tag.find_child(HTML_TAG_NAME)
    return name_node.text if name_node is not None else None


def find_template_root(document: SyntaxNode) -> Optional[SyntaxNode]:
    """Return the first top-level ``<template>`` element, if any."""
    for child in document.find_children(HTML_ELEMENT):
        if tag_name(child) == TEMPLATE_TAG:
            return child
    return None


def is_component_tag(name: str) -> bool:
    """PascalCase or hyphenated tags are components, except template syntax."""
    if not name or name.lower() in RESERVED_TEMPLATE_TAGS:
        return False
    return name[0].isupper() or "-" in name


def attribute_value(attribute: SyntaxNode) -> Optional[str]:
    value = attribute.find_child(HTML_ATTRIBUTE_VALUE)
    if value is not None:
        return value.text
    quoted = attribute.find_child(HTML_QUOTED_ATTRIBUTE_VALUE)
    if quoted is not None:
        inner = quoted.find_child(HTML_ATTRIBUTE_VALUE)
        return inner.text if inner is not None else ""
    return None


def _split_modifiers(text: str) -> Tuple[str, Tuple[str, ...]]:
    # `[dynamic.arg]` keeps its dots
    if text.startswith("["):
        close = text.find("]")
        if close != -1:
            head, rest = text[: close + 1], text[close + 1:]
            parts = [part for part in rest.split(".") if part]
            return head, tuple(parts)
    parts = text.split(".")
    return parts[0], tuple(part for part in parts[1:] if part)


def classify_attribute(
    name: str,
    value: Optional[str],
    element: str,
    position: Position,
) -> Optional[TemplateOccurrence]:
    """Turn one attribute into a template occurrence.

    ``v-on:x``/``@x`` are events, ``v-bind:x``/``:x`` bindings, ``#x`` a slot
    directive and any other ``v-*`` a directive whose argument is kept as
    ``name:arg``. Plain attributes give ``None``.
    """
    for prefix in EVENT_PREFIXES:
        if name.startswith(prefix):
            event, modifiers = _split_modifiers(name[len(prefix):])
            return TemplateOccurrence(
                category="event",
                name=event,
                element=element,
                modifiers=modifiers,
                value=value,
                start_position=position,
            )

    for prefix in BINDING_PREFIXES:
        if name.startswith(prefix):
            binding, _ = _split_modifiers(name[len(prefix):])
            return TemplateOccurrence(
                category="binding",
                name=binding,
                element=element,
                value=value,
                start_position=position,
            )

    if name.startswith(SLOT_SHORTHAND_PREFIX):
        return TemplateOccurrence(
            category="directive",
            name=f"slot:{name[len(SLOT_SHORTHAND_PREFIX):]}",
            element=element,
            value=value,
            start_position=position,
        )

    if name.startswith(DIRECTIVE_PREFIX):
        body = name[len(DIRECTIVE_PREFIX):]
        directive, separator, argument = body.partition(":")
        if separator:
            argument, modifiers = _split_modifiers(argument)
            directive = f"{directive}:{argument}"
        else:
            directive, modifiers = _split_modifiers(directive)
        return TemplateOccurrence(
            category="directive",
            name=directive,
            element=element,
            modifiers=modifiers,
            value=value,
            start_position=position,
        )

    return None


def scan_template(template_root: Optional[SyntaxNode]) -> Tuple[TemplateOccurrence, ...]:
    """Report occurrences for every element nested in the template block."""
    if template_root is None:
        return ()

    occurrences: List[TemplateOccurrence] = []
    for node in iter_nodes(template_root, DEPTH_FIRST):
        if node.kind != HTML_ELEMENT or node is template_root:
            continue
        start_tag = node.find_child(HTML_START_TAG_KINDS)
        if start_tag is None:
            continue
        name_node = start_tag.find_child(HTML_TAG_NAME)
        if name_node is None:
            continue
        element = name_node.text

        if is_component_tag(element):
            occurrences.append(
                TemplateOccurrence(
                    category="component",
                    name=element,
                    element=element,
                    start_position=name_node.start_position,
                )
            )

        for attribute in start_tag.find_children(HTML_ATTRIBUTE):
            attr_name = attribute.find_child(HTML_ATTRIBUTE_NAME)
            if attr_name is None:
                continue
            occurrence = classify_attribute(
                attr_name.text,
                attribute_value(attribute),
                element,
                attribute.start_position,
            )
            if occurrence is not None:
                occurrences.append(occurrence)

    logger.debug("Scanned %d template occurrences", len(occurrences))
    return tuple(occurrences)
