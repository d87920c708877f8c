"""
Extraction engine.

Tree-sitter-based TypeScript, JavaScript and Vue component parser plus the
per-category fact extractors that run over its generic syntax tree.
"""

from extraction.aggregator import build_parse_result, extract_facts
from extraction.models import ParseResult
from extraction.node import Position, SyntaxNode, from_tree_sitter
from extraction.parser import (
    ParsedSource,
    count_error_nodes,
    create_parser,
    parse_bytes,
    parse_source,
    resolve_language,
)

__all__ = [
    # Data models
    "ParseResult",
    "ParsedSource",
    "Position",
    "SyntaxNode",
    # Low-level parsing
    "create_parser",
    "parse_bytes",
    "parse_source",
    "count_error_nodes",
    "resolve_language",
    "from_tree_sitter",
    # High-level orchestration
    "build_parse_result",
    "extract_facts",
]
