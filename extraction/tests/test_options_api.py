"""
Unit tests for options-object component extraction.
"""

import unittest

from extraction.extractors.options_api import (
    data_keys,
    extract_options_api,
    find_options_object,
    object_keys,
)
from extraction.models import OptionsApiInfo
from extraction.node import SyntaxNode


def _n(kind, *children, text=None):
    if text is None:
        text = " ".join(child.text for child in children) if children else kind
    return SyntaxNode(kind=kind, text=text, children=tuple(children))


def _key(name):
    return _n("property_identifier", text=name)


def _empty_params():
    return _n("formal_parameters", _n("("), _n(")"))


def _method(name, *body):
    return _n(
        "method_definition",
        _key(name),
        _empty_params(),
        _n("statement_block", _n("{"), *body, _n("}")),
    )


def _pair(name, value):
    return _n("pair", _key(name), _n(":"), value)


def _object(*entries):
    parts = [_n("{")]
    for entry in entries:
        parts.extend([entry, _n(",")])
    parts.append(_n("}"))
    return _n("object", *parts)


def _return(value):
    return _n("return_statement", _n("return"), value)


def _export_default(value):
    return _n("program", _n("export_statement", _n("export"), _n("default"), value))


class TestOptionsApiExtractor(unittest.TestCase):
    """Test the options-object extractor."""

    def test_data_methods_and_lifecycle(self):
        """Data keys, methods and lifecycle hooks are collected."""
        # { data(){ return { count: 0 } }, methods: { inc(){} }, mounted(){} }
        options = _object(
            _method("data", _return(_object(_pair("count", _n("number", text="0"))))),
            _pair("methods", _object(_method("inc"))),
            _method("mounted"),
        )
        info = extract_options_api(_export_default(options))

        self.assertEqual(info.data_properties, ("count",))
        self.assertEqual(info.methods, ("inc",))
        self.assertEqual(info.lifecycle_hooks, ("mounted",))
        self.assertEqual(info.computed_properties, ())
        self.assertEqual(info.watch_properties, ())

    def test_define_component_wrapper(self):
        """An object wrapped in defineComponent is read."""
        options = _object(_pair("computed", _object(_method("total"), _pair("label", _n("arrow_function", text="() => 1")))))
        call = _n(
            "call_expression",
            _n("identifier", text="defineComponent"),
            _n("arguments", _n("("), options, _n(")")),
        )
        info = extract_options_api(_export_default(call))
        self.assertEqual(info.computed_properties, ("total", "label"))

    def test_ignored_and_unknown_options(self):
        """Ignored and unknown option keys give no facts."""
        options = _object(
            _pair("props", _object(_pair("title", _n("identifier", text="String")))),
            _pair("components", _object(_n("shorthand_property_identifier", text="Child"))),
            _pair("name", _n("string", text="'Widget'")),
            _pair("watch", _object(_pair("'route.path'", _n("identifier", text="reload")))),
            _method("created"),
        )
        info = extract_options_api(_export_default(options))

        self.assertEqual(info.watch_properties, ("route.path",))
        self.assertEqual(info.lifecycle_hooks, ("created",))
        self.assertEqual(info.data_properties, ())
        self.assertEqual(info.methods, ())

    def test_data_as_arrow_returning_object(self):
        """An arrow ``data`` returning an object is read."""
        arrow = _n(
            "arrow_function",
            _empty_params(),
            _n("=>"),
            _n("parenthesized_expression", _n("("), _object(_pair("open", _n("false"))), _n(")")),
        )
        entry = _pair("data", arrow)
        self.assertEqual(data_keys(entry), ["open"])

    def test_indirect_data_return_gives_no_keys(self):
        """A ``data`` that returns a variable gives no keys."""
        entry = _method("data", _return(_n("identifier", text="state")))
        self.assertEqual(data_keys(entry), [])

    def test_no_options_object(self):
        """A module without an exported object gives no facts."""
        tree = _n("program", _n("expression_statement", text="run()"))
        self.assertIsNone(find_options_object(tree))
        self.assertEqual(extract_options_api(tree), OptionsApiInfo())
        self.assertTrue(extract_options_api(tree).is_empty())

    def test_first_qualifying_export_wins(self):
        """Only the first qualifying export is read."""
        named = _n(
            "export_statement",
            _n("export"),
            _n("lexical_declaration", _n("const"), _n("variable_declarator", text="x = 1")),
        )
        first = _n("export_statement", _n("export"), _n("default"), _object(_method("mounted")))
        second = _n("export_statement", _n("export"), _object(_method("created")))
        info = extract_options_api(_n("program", named, first, second))
        self.assertEqual(info.lifecycle_hooks, ("mounted",))

    def test_object_keys_handles_none(self):
        """A missing object gives no keys."""
        self.assertEqual(object_keys(None), [])


if __name__ == "__main__":
    unittest.main()
