"""
Tree-sitter parser initialization and source parsing utilities.

TypeScript and JavaScript sources are parsed with the tree-sitter TypeScript
grammars (``.tsx``/``.jsx`` with the TSX variant). Vue single-file components
are parsed with the HTML grammar first; the ``<script>`` blocks are then
parsed as TypeScript in place, so every reported position is relative to the
original file.
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import List, Tuple

import tree_sitter_html as tshtml
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

from core.errors import ParseFailureError, UnsupportedKindError
from extraction.config import (
    COMPONENT_LANGUAGE,
    HTML_ATTRIBUTE,
    HTML_ATTRIBUTE_NAME,
    HTML_RAW_TEXT,
    HTML_SCRIPT_ELEMENT,
    HTML_START_TAG_KINDS,
    SUPPORTED_EXTENSIONS,
)
from extraction.models import TemplateOccurrence
from extraction.node import SyntaxNode, from_tree_sitter
from extraction.sfc import attribute_value, find_template_root, scan_template

logger = logging.getLogger(__name__)

# Module-level language constants
TYPESCRIPT_LANGUAGE = Language(tstypescript.language_typescript())
TSX_LANGUAGE = Language(tstypescript.language_tsx())
HTML_LANGUAGE = Language(tshtml.language())

_NON_NEWLINE = re.compile(rb"[^\n]")

_LANGUAGES = {
    "typescript": TYPESCRIPT_LANGUAGE,
    "tsx": TSX_LANGUAGE,
    "html": HTML_LANGUAGE,
}

_TSX_SCRIPT_LANGS = {"tsx", "jsx"}


@dataclass(frozen=True)
class ParsedSource:
    """Output of the grammar layer for one file.

    Attributes:
        root: Script syntax tree (for components, the script blocks only).
        language: ``typescript``, ``tsx`` or ``vue``.
        template_occurrences: Component template occurrences, empty for scripts.
        error_count: Number of ERROR/missing nodes the grammar recovered from.
    """

    root: SyntaxNode
    language: str
    template_occurrences: Tuple[TemplateOccurrence, ...] = ()
    error_count: int = 0


def extension_of(filename: str) -> str:
    return os.path.splitext(filename)[1].lstrip(".").lower()


def resolve_language(filename: str) -> str:
    """Map a file name onto its grammar/language tag.

    Raises:
        UnsupportedKindError: If the extension is not supported.
    """
    extension = extension_of(filename)
    language = SUPPORTED_EXTENSIONS.get(extension)
    if language is None:
        raise UnsupportedKindError(extension, tuple(SUPPORTED_EXTENSIONS))
    return language


def create_parser(language: str = "typescript") -> Parser:
    """Create a tree-sitter parser for ``typescript``, ``tsx`` or ``html``.

    Parsers are cheap and not shareable across threads, so each parse call
    creates its own.
    """
    try:
        grammar = _LANGUAGES[language]
    except KeyError:
        raise ValueError(f"No grammar registered for language: {language}") from None
    parser = Parser(grammar)
    logger.debug("Created tree-sitter %s parser", language)
    return parser


def parse_bytes(source: bytes, language: str = "typescript") -> Tree:
    """Parse raw UTF-8 bytes with the given grammar.

    Raises:
        TypeError: If source is not bytes.
        ParseFailureError: If the grammar cannot produce a tree.
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    parser = create_parser(language)
    try:
        tree = parser.parse(source)
    except Exception as exc:
        raise ParseFailureError(f"Failed to parse {language} source: {exc}") from exc
    if tree is None:
        raise ParseFailureError(f"Failed to parse {language} source")

    if tree.root_node.has_error:
        logger.warning("Parsed %s tree contains syntax errors", language)

    logger.debug("Parsed %d bytes of %s code", len(source), language)
    return tree


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and missing nodes in a parsed tree."""
    count = 0
    stack: List[Node] = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            count += 1
        if node.has_error:
            stack.extend(node.children)
    return count


def _script_blocks(document: Node) -> List[Tuple[int, int, bool]]:
    """Byte ranges of top-level ``<script>`` contents and whether they are TSX."""
    blocks = []
    for child in document.children:
        if child.type != HTML_SCRIPT_ELEMENT:
            continue
        is_tsx = False
        for part in child.children:
            if part.type not in HTML_START_TAG_KINDS:
                continue
            for attribute in part.children:
                if attribute.type != HTML_ATTRIBUTE:
                    continue
                name = next(
                    (c for c in attribute.children if c.type == HTML_ATTRIBUTE_NAME), None
                )
                if name is None or name.text.decode("utf-8", errors="replace") != "lang":
                    continue
                value = attribute_value(from_tree_sitter(attribute))
                is_tsx = (value or "").strip().lower() in _TSX_SCRIPT_LANGS
        raw = next((c for c in child.children if c.type == HTML_RAW_TEXT), None)
        if raw is not None:
            blocks.append((raw.start_byte, raw.end_byte, is_tsx))
    return blocks


def blank_outside(source: bytes, ranges: List[Tuple[int, int]]) -> bytes:
    """Replace every byte outside ``ranges`` with a space, keeping newlines.

    Row and column offsets of the kept regions are unchanged.
    """
    masked = bytearray(_NON_NEWLINE.sub(b" ", source))
    for start, end in ranges:
        masked[start:end] = source[start:end]
    return bytes(masked)


def _parse_component(source: bytes, filename: str) -> ParsedSource:
    html_tree = parse_bytes(source, "html")
    document = from_tree_sitter(html_tree.root_node)
    occurrences = scan_template(find_template_root(document))

    blocks = _script_blocks(html_tree.root_node)
    if not blocks:
        logger.debug("Component %s has no script block", filename)
    script_language = "tsx" if any(is_tsx for _, _, is_tsx in blocks) else "typescript"
    script_source = blank_outside(source, [(start, end) for start, end, _ in blocks])
    script_tree = parse_bytes(script_source, script_language)

    return ParsedSource(
        root=from_tree_sitter(script_tree.root_node),
        language=COMPONENT_LANGUAGE,
        template_occurrences=occurrences,
        error_count=count_error_nodes(script_tree),
    )


def parse_source(code: str, filename: str) -> ParsedSource:
    """Parse source text into a generic syntax tree.

    Args:
        code: Source text.
        filename: File name; only its extension is used.

    Returns:
        A ``ParsedSource`` with the syntax tree and language tag.

    Raises:
        UnsupportedKindError: If the extension is not supported.
        ParseFailureError: If the grammar fails.
    """
    language = resolve_language(filename)
    source = code.encode("utf-8")

    if language == COMPONENT_LANGUAGE:
        parsed = _parse_component(source, filename)
    else:
        tree = parse_bytes(source, language)
        parsed = ParsedSource(
            root=from_tree_sitter(tree.root_node),
            language=language,
            error_count=count_error_nodes(tree),
        )

    if parsed.error_count:
        logger.warning("%s contains %d syntax error nodes", filename, parsed.error_count)
    logger.debug("Parsed %s as %s", filename, parsed.language)
    return parsed
