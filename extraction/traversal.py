"""
Generic tree traversal shared by every extractor.

Each fact category walks the whole tree once, either breadth-first or
depth-first pre-order, and turns matching nodes into facts through a parse
function that returns ``None`` for shapes it does not recognise.
"""

import logging
from collections import deque
from typing import Callable, Iterable, Iterator, List, Optional, Tuple, TypeVar

from core.errors import ExtractionFailure
from extraction.node import SyntaxNode

logger = logging.getLogger(__name__)

BREADTH_FIRST = "breadth_first"
DEPTH_FIRST = "depth_first"

T = TypeVar("T")


def iter_nodes(root: SyntaxNode, order: str = DEPTH_FIRST) -> Iterator[SyntaxNode]:
    """Yield ``root`` and all its descendants.

    Args:
        root: Tree root.
        order: ``BREADTH_FIRST`` or ``DEPTH_FIRST`` (pre-order).

    Raises:
        ValueError: If ``order`` is not a known traversal order.
    """
    if order == BREADTH_FIRST:
        queue = deque([root])
        while queue:
            node = queue.popleft()
            yield node
            queue.extend(node.children)
    elif order == DEPTH_FIRST:
        stack = [root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))
    else:
        raise ValueError(f"Unknown traversal order: {order}")


def collect(
    root: SyntaxNode,
    kinds: Iterable[str],
    parse: Callable[[SyntaxNode], Optional[T]],
    order: str = DEPTH_FIRST,
    category: str = "fact",
) -> Tuple[T, ...]:
    """Run ``parse`` on every node whose kind is in ``kinds``.

    A ``None`` result is dropped. A parse step that raises is logged as an
    extraction failure and skipped; traversal of the rest of the tree goes on.

    Args:
        root: Tree root.
        kinds: Node kinds that trigger ``parse``.
        parse: Node -> fact, or ``None`` for unrecognised shapes.
        order: Traversal order for this category.
        category: Label used in log messages.

    Returns:
        Facts in traversal order.
    """
    wanted = frozenset(kinds)
    facts: List[T] = []
    for node in iter_nodes(root, order):
        if node.kind not in wanted:
            continue
        try:
            fact = parse(node)
        except Exception as exc:
            failure = ExtractionFailure(
                f"Could not extract {category} from {node.kind} at "
                f"{node.start_position.row}:{node.start_position.column}: {exc}"
            )
            logger.warning("%s", failure)
            continue
        if fact is not None:
            facts.append(fact)
    logger.debug("Collected %d %s facts", len(facts), category)
    return tuple(facts)
