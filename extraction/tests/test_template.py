"""
Unit tests for component template scanning and template fact aggregation.
"""

import unittest

from extraction.extractors.template import extract_template
from extraction.models import TemplateOccurrence
from extraction.node import Position, SyntaxNode
from extraction.sfc import (
    classify_attribute,
    find_template_root,
    is_component_tag,
    scan_template,
)

_ORIGIN = Position(0, 0)


def _n(kind, *children, text=None, row=0, column=0):
    if text is None:
        text = " ".join(child.text for child in children) if children else kind
    return SyntaxNode(
        kind=kind,
        text=text,
        children=tuple(children),
        start_position=Position(row, column),
    )


def _attr(name, value=None, row=0, column=0):
    parts = [_n("attribute_name", text=name)]
    if value is not None:
        parts.append(_n("="))
        parts.append(
            _n("quoted_attribute_value", _n('"'), _n("attribute_value", text=value), _n('"'))
        )
    return _n("attribute", *parts, row=row, column=column)


def _element(tag, attributes=(), children=(), row=0, column=0, self_closing=False):
    start_kind = "self_closing_tag" if self_closing else "start_tag"
    start = _n(
        start_kind,
        _n("<"),
        _n("tag_name", text=tag, row=row, column=column + 1),
        *attributes,
        _n(">"),
    )
    parts = [start, *children]
    if not self_closing:
        parts.append(_n("end_tag", text=f"</{tag}>"))
    return _n("element", *parts, row=row, column=column)


class TestClassifyAttribute(unittest.TestCase):
    """Test attribute name classification."""

    def test_event_shorthand_with_modifiers(self):
        """``@event.mod`` is an event with its modifiers."""
        occurrence = classify_attribute("@click.stop.prevent", "save", "button", _ORIGIN)
        self.assertEqual(occurrence.category, "event")
        self.assertEqual(occurrence.name, "click")
        self.assertEqual(occurrence.modifiers, ("stop", "prevent"))
        self.assertEqual(occurrence.value, "save")

    def test_event_long_form(self):
        """``v-on:event`` is an event."""
        occurrence = classify_attribute("v-on:submit", "send", "form", _ORIGIN)
        self.assertEqual((occurrence.category, occurrence.name), ("event", "submit"))

    def test_bindings(self):
        """``:prop`` and ``v-bind:prop`` are bindings."""
        short = classify_attribute(":title", "heading", "h1", _ORIGIN)
        long = classify_attribute("v-bind:href.prop", "url", "a", _ORIGIN)
        self.assertEqual((short.category, short.name, short.value), ("binding", "title", "heading"))
        self.assertEqual((long.category, long.name), ("binding", "href"))

    def test_directives(self):
        """Other ``v-`` attributes are directives."""
        plain = classify_attribute("v-if", "visible", "div", _ORIGIN)
        model = classify_attribute("v-model.trim", "query", "input", _ORIGIN)
        slot = classify_attribute("#header", None, "template", _ORIGIN)
        argument = classify_attribute("v-slot:item.lazy", "props", "template", _ORIGIN)

        self.assertEqual((plain.category, plain.name, plain.modifiers), ("directive", "if", ()))
        self.assertEqual((model.name, model.modifiers), ("model", ("trim",)))
        self.assertEqual((slot.category, slot.name), ("directive", "slot:header"))
        self.assertEqual((argument.name, argument.modifiers), ("slot:item", ("lazy",)))

    def test_dynamic_argument_keeps_brackets(self):
        """A dynamic argument keeps its brackets."""
        occurrence = classify_attribute("@[eventName].once", "go", "a", _ORIGIN)
        self.assertEqual(occurrence.name, "[eventName]")
        self.assertEqual(occurrence.modifiers, ("once",))

    def test_plain_attribute_is_ignored(self):
        """A plain attribute is not an occurrence."""
        self.assertIsNone(classify_attribute("class", "box", "div", _ORIGIN))

    def test_component_tags(self):
        """PascalCase and hyphenated tags are components."""
        self.assertTrue(is_component_tag("MyButton"))
        self.assertTrue(is_component_tag("router-view"))
        self.assertFalse(is_component_tag("div"))
        self.assertFalse(is_component_tag("template"))
        self.assertFalse(is_component_tag("component"))


class TestScanTemplate(unittest.TestCase):
    """Test scanning a hand-built markup tree."""

    def _document(self):
        button = _element(
            "MyButton",
            attributes=[_attr("@click", "inc", row=2, column=14)],
            row=2,
            column=4,
            self_closing=True,
        )
        div = _element(
            "div",
            attributes=[_attr("v-if", "open", row=1, column=7), _attr(":class", "cls", row=1, column=19)],
            children=[button, _element("MyButton", row=3, column=4, self_closing=True)],
            row=1,
            column=2,
        )
        template = _element("template", children=[div])
        script = _n("script_element", text="<script></script>", row=6)
        return _n("document", template, script)

    def test_finds_template_root(self):
        """The top-level template element is found."""
        root = find_template_root(self._document())
        self.assertIsNotNone(root)
        self.assertEqual(root.kind, "element")

    def test_missing_template(self):
        """A document without a template has no root."""
        self.assertIsNone(find_template_root(_n("document", _element("div"))))
        self.assertEqual(scan_template(None), ())

    def test_occurrences_in_document_order(self):
        """Occurrences are reported in document order."""
        occurrences = scan_template(find_template_root(self._document()))

        self.assertEqual(
            [(o.category, o.name, o.element) for o in occurrences],
            [
                ("directive", "if", "div"),
                ("binding", "class", "div"),
                ("component", "MyButton", "MyButton"),
                ("event", "click", "MyButton"),
                ("component", "MyButton", "MyButton"),
            ],
        )
        self.assertEqual(occurrences[0].start_position, Position(1, 7))
        self.assertEqual(occurrences[2].start_position, Position(2, 5))


class TestExtractTemplate(unittest.TestCase):
    """Test aggregation into template facts."""

    def test_groups_and_deduplicates_components(self):
        """Occurrences are grouped and component names deduplicated."""
        occurrences = [
            TemplateOccurrence(category="component", name="Card", element="Card"),
            TemplateOccurrence(category="directive", name="for", element="li", value="x in xs"),
            TemplateOccurrence(category="binding", name="key", element="li", value="x.id"),
            TemplateOccurrence(
                category="event", name="click", element="li", modifiers=("once",), value="pick(x)"
            ),
            TemplateOccurrence(category="component", name="Card", element="Card"),
            TemplateOccurrence(category="component", name="Badge", element="Badge"),
        ]
        info = extract_template(occurrences)

        self.assertEqual(info.components, ("Card", "Badge"))
        self.assertEqual(info.directives[0].name, "for")
        self.assertEqual(info.directives[0].value, "x in xs")
        self.assertEqual(info.bindings[0].expression, "x.id")
        self.assertEqual(info.events[0].handler, "pick(x)")
        self.assertEqual(info.events[0].modifiers, ("once",))

    def test_empty(self):
        """No occurrences give an empty template fact."""
        info = extract_template([])
        self.assertTrue(info.is_empty())


if __name__ == "__main__":
    unittest.main()
