"""
Unit tests for traversal.py

Tests traversal order and the skip-on-failure collection policy.
"""

import unittest

from extraction.node import SyntaxNode
from extraction.traversal import BREADTH_FIRST, DEPTH_FIRST, collect, iter_nodes


def _n(kind, *children, text=None):
    return SyntaxNode(kind=kind, text=text or kind, children=tuple(children))


def _tree():
    #        a
    #      /   \
    #     b     e
    #    / \
    #   c   d
    return _n("a", _n("b", _n("c"), _n("d")), _n("e"))


class TestIterNodes(unittest.TestCase):
    """Test the generic traversal orders."""

    def test_depth_first_is_preorder(self):
        """Depth-first traversal visits parents before children."""
        kinds = [node.kind for node in iter_nodes(_tree(), DEPTH_FIRST)]
        self.assertEqual(kinds, ["a", "b", "c", "d", "e"])

    def test_breadth_first_is_level_order(self):
        """Breadth-first traversal visits level by level."""
        kinds = [node.kind for node in iter_nodes(_tree(), BREADTH_FIRST)]
        self.assertEqual(kinds, ["a", "b", "e", "c", "d"])

    def test_unknown_order_rejected(self):
        """An unknown order raises."""
        with self.assertRaises(ValueError):
            list(iter_nodes(_tree(), "sideways"))

    def test_deep_tree(self):
        """Deep trees are traversed without recursion."""
        node = _n("leaf")
        for _ in range(5000):
            node = _n("wrap", node)
        self.assertEqual(sum(1 for _ in iter_nodes(node)), 5001)


class TestCollect(unittest.TestCase):
    """Test fact collection."""

    def test_none_results_are_dropped(self):
        """Nodes the parser declines are dropped."""
        facts = collect(
            _tree(),
            {"c", "d", "e"},
            lambda node: None if node.kind == "d" else node.kind,
        )
        self.assertEqual(facts, ("c", "e"))

    def test_failing_node_is_skipped(self):
        """A node whose parser fails is skipped and logged."""
        def parse(node):
            if node.kind == "c":
                raise KeyError("broken")
            return node.kind

        with self.assertLogs("extraction.traversal", level="WARNING") as captured:
            facts = collect(_tree(), {"c", "d", "e"}, parse, DEPTH_FIRST, "letter")

        self.assertEqual(facts, ("d", "e"))
        self.assertIn("Could not extract letter from c", captured.output[0])

    def test_order_is_respected(self):
        """collect follows the requested order."""
        facts = collect(_tree(), {"c", "e"}, lambda node: node.kind, BREADTH_FIRST)
        self.assertEqual(facts, ("e", "c"))

    def test_unmatched_kinds_yield_nothing(self):
        """No matching kinds gives no facts."""
        self.assertEqual(collect(_tree(), {"zzz"}, lambda node: node), ())


if __name__ == "__main__":
    unittest.main()
