"""One extractor per fact category; each walks the tree independently."""

from extraction.extractors.classes import extract_classes
from extraction.extractors.composition_api import extract_composition_api
from extraction.extractors.exports import extract_exports
from extraction.extractors.functions import extract_functions
from extraction.extractors.imports import extract_imports
from extraction.extractors.options_api import extract_options_api
from extraction.extractors.template import extract_template
from extraction.extractors.types import extract_types
from extraction.extractors.variables import extract_variables

__all__ = [
    "extract_classes",
    "extract_composition_api",
    "extract_exports",
    "extract_functions",
    "extract_imports",
    "extract_options_api",
    "extract_template",
    "extract_types",
    "extract_variables",
]
