"""
Result aggregation: runs the applicable extractors for one file and assembles
a single immutable ParseResult.
"""

import logging
from typing import Callable, Iterable, Optional

from core.structured_logging import phase_scope
from extraction.config import COMPONENT_LANGUAGE
from extraction.extractors import (
    extract_classes,
    extract_composition_api,
    extract_exports,
    extract_functions,
    extract_imports,
    extract_options_api,
    extract_template,
    extract_types,
    extract_variables,
)
from extraction.models import ParseResult, TemplateOccurrence
from extraction.node import SyntaxNode
from extraction.parser import ParsedSource, parse_source, resolve_language

logger = logging.getLogger(__name__)

ParseFn = Callable[[str, str], ParsedSource]


def extract_facts(
    root: SyntaxNode,
    language: str,
    template: Optional[Iterable[TemplateOccurrence]] = None,
) -> ParseResult:
    """Run every extractor that applies to ``language`` over an existing tree.

    Scripts get the six core categories. Components additionally get the
    template facts (from ``template`` occurrences), the options-object facts
    and the setup-code facts; all three are present, possibly empty, on every
    component result.
    """
    functions = extract_functions(root)
    classes = extract_classes(root)
    variables = extract_variables(root)
    imports = extract_imports(root)
    exports = extract_exports(root)
    types = extract_types(root)

    if language != COMPONENT_LANGUAGE:
        return ParseResult(
            language=language,
            functions=functions,
            classes=classes,
            variables=variables,
            imports=imports,
            exports=exports,
            types=types,
        )

    return ParseResult(
        language=language,
        functions=functions,
        classes=classes,
        variables=variables,
        imports=imports,
        exports=exports,
        types=types,
        template=extract_template(template or ()),
        options_api=extract_options_api(root),
        composition_api=extract_composition_api(root),
    )


def build_parse_result(
    code: str,
    filename: str,
    parse_fn: ParseFn = parse_source,
) -> ParseResult:
    """Parse ``code`` and extract every fact category for its file kind.

    Args:
        code: Source text.
        filename: File name used to pick the grammar.
        parse_fn: Grammar seam returning a ``ParsedSource``.

    Raises:
        UnsupportedKindError: For extensions outside the supported set,
            before any parsing happens.
        ParseFailureError: Propagated from the grammar.
    """
    resolve_language(filename)

    with phase_scope("parse"):
        parsed = parse_fn(code, filename)

    with phase_scope("extract"):
        result = extract_facts(parsed.root, parsed.language, parsed.template_occurrences)

    logger.info(
        "Extracted facts from %s (%s): %s",
        filename,
        result.language,
        ", ".join(f"{name}={count}" for name, count in result.counts().items()),
    )
    return result
