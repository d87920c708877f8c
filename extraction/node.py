"""
Generic read-only syntax node model.

Every extractor consumes ``SyntaxNode`` trees rather than tree-sitter nodes
directly, so the pipeline can be driven by hand-built trees and stays
independent of a particular grammar binding.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple


@dataclass(frozen=True)
class Position:
    """Row/column pair exactly as reported by the grammar parser."""

    row: int
    column: int

    def to_dict(self) -> Dict[str, int]:
        return {"row": self.row, "column": self.column}


@dataclass(frozen=True)
class SyntaxNode:
    """An immutable syntax tree node.

    Attributes:
        kind: Grammar node type (open vocabulary, e.g. ``function_declaration``).
        text: Raw source slice covered by the node.
        children: Child nodes in source order, anonymous tokens included.
        start_position: Start row/column.
        end_position: End row/column.
    """

    kind: str
    text: str = ""
    children: Tuple["SyntaxNode", ...] = ()
    start_position: Position = field(default=Position(0, 0))
    end_position: Position = field(default=Position(0, 0))

    def find_child(self, kinds: Iterable[str] | str) -> Optional["SyntaxNode"]:
        """Return the first direct child whose kind is in ``kinds``."""
        wanted = _as_kinds(kinds)
        for child in self.children:
            if child.kind in wanted:
                return child
        return None

    def find_children(self, kinds: Iterable[str] | str) -> Tuple["SyntaxNode", ...]:
        """Return every direct child whose kind is in ``kinds``."""
        wanted = _as_kinds(kinds)
        return tuple(child for child in self.children if child.kind in wanted)

    def has_child(self, kinds: Iterable[str] | str) -> bool:
        return self.find_child(kinds) is not None

    def find_descendant(self, kinds: Iterable[str] | str) -> Optional["SyntaxNode"]:
        """Return the first strict descendant (pre-order) whose kind matches."""
        wanted = _as_kinds(kinds)
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            if node.kind in wanted:
                return node
            stack.extend(reversed(node.children))
        return None

    def iter_children(self) -> Iterator["SyntaxNode"]:
        return iter(self.children)


def _as_kinds(kinds: Iterable[str] | str) -> frozenset:
    if isinstance(kinds, str):
        return frozenset((kinds,))
    if isinstance(kinds, frozenset):
        return kinds
    return frozenset(kinds)


def _decode(raw: Optional[bytes]) -> str:
    if raw is None:
        return ""
    return raw.decode("utf-8", errors="replace")


def from_tree_sitter(root: Any) -> SyntaxNode:
    """Convert a tree-sitter node (and its subtree) into ``SyntaxNode``.

    The conversion is iterative so deeply nested sources do not hit the
    interpreter recursion limit.

    Args:
        root: A ``tree_sitter.Node``.

    Returns:
        The equivalent immutable ``SyntaxNode`` tree.
    """
    # Post-order build: a frame is (ts_node, converted_children)
    stack: list[tuple[Any, list[SyntaxNode]]] = [(root, [])]
    pending_children: list[Iterator[Any]] = [iter(root.children)]
    result: Optional[SyntaxNode] = None

    while stack:
        ts_node, converted = stack[-1]
        child = next(pending_children[-1], None)
        if child is not None:
            stack.append((child, []))
            pending_children.append(iter(child.children))
            continue

        stack.pop()
        pending_children.pop()
        node = SyntaxNode(
            kind=ts_node.type,
            text=_decode(ts_node.text),
            children=tuple(converted),
            start_position=Position(ts_node.start_point[0], ts_node.start_point[1]),
            end_position=Position(ts_node.end_point[0], ts_node.end_point[1]),
        )
        if stack:
            stack[-1][1].append(node)
        else:
            result = node

    assert result is not None
    return result
