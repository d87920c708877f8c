"""
Tests for result aggregation across extractors.
"""

import unittest
from unittest import mock

from core.errors import ParseFailureError, UnsupportedKindError
from extraction.aggregator import build_parse_result, extract_facts
from extraction.models import TemplateOccurrence
from extraction.node import SyntaxNode
from extraction.parser import ParsedSource

VUE_COMPONENT = """<template>
  <div :class="cls" @click.stop="onClick" v-if="show">
    <MyButton />
  </div>
</template>
<script>
export default {
  data() { return { count: 0 } },
  methods: { inc() {} },
  mounted() {}
}
</script>
"""


def _program():
    function = SyntaxNode(
        kind="function_declaration",
        text="function run() {}",
        children=(
            SyntaxNode("function", "function"),
            SyntaxNode("identifier", "run"),
            SyntaxNode("formal_parameters", "()"),
        ),
    )
    return SyntaxNode(kind="program", text=function.text, children=(function,))


class TestExtractFacts(unittest.TestCase):
    """Test the parser-independent aggregation step."""

    def test_script_result_has_no_component_facts(self):
        """Scripts carry the six core categories only."""
        result = extract_facts(_program(), "typescript")
        self.assertEqual(result.language, "typescript")
        self.assertEqual([fn.name for fn in result.functions], ["run"])
        self.assertIsNone(result.template)
        self.assertIsNone(result.options_api)
        self.assertIsNone(result.composition_api)

    def test_component_result_has_component_facts(self):
        """Components always carry template, options and setup facts."""
        occurrences = [TemplateOccurrence(category="component", name="Card", element="Card")]
        result = extract_facts(_program(), "vue", occurrences)
        self.assertEqual(result.template.components, ("Card",))
        self.assertTrue(result.options_api.is_empty())
        self.assertTrue(result.composition_api.is_empty())

    def test_counts(self):
        """counts() reports every core category."""
        counts = extract_facts(_program(), "tsx").counts()
        self.assertEqual(counts["functions"], 1)
        self.assertEqual(counts["classes"], 0)


class TestBuildParseResult(unittest.TestCase):
    """Test parse + extract orchestration."""

    def test_unsupported_kind_rejected_before_parsing(self):
        """Unknown extensions never reach the grammar."""
        parse_fn = mock.Mock()
        with self.assertRaises(UnsupportedKindError):
            build_parse_result("x = 1", "script.rb", parse_fn=parse_fn)
        parse_fn.assert_not_called()

    def test_parse_failure_propagates(self):
        """Grammar failures reach the caller unchanged."""
        parse_fn = mock.Mock(side_effect=ParseFailureError("boom"))
        with self.assertRaises(ParseFailureError):
            build_parse_result("let x", "a.ts", parse_fn=parse_fn)

    def test_uses_injected_parser(self):
        """The parse seam can be replaced."""
        parse_fn = mock.Mock(return_value=ParsedSource(root=_program(), language="typescript"))
        result = build_parse_result("ignored", "a.ts", parse_fn=parse_fn)
        parse_fn.assert_called_once_with("ignored", "a.ts")
        self.assertEqual(result.functions[0].name, "run")

    def test_deterministic(self):
        """Equal input gives equal results."""
        code = "export const a = 1; function f(x) { return () => x }"
        self.assertEqual(build_parse_result(code, "a.ts"), build_parse_result(code, "a.ts"))

    def test_component_end_to_end(self):
        """A real options-object component yields template and options facts."""
        result = build_parse_result(VUE_COMPONENT, "Counter.vue")

        self.assertEqual(result.language, "vue")
        self.assertEqual(result.options_api.data_properties, ("count",))
        self.assertEqual(result.options_api.methods, ("inc",))
        self.assertEqual(result.options_api.lifecycle_hooks, ("mounted",))
        self.assertEqual(result.template.components, ("MyButton",))
        self.assertEqual(result.template.events[0].modifiers, ("stop",))
        self.assertEqual(result.template.events[0].handler, "onClick")
        self.assertEqual(result.template.bindings[0].expression, "cls")
        self.assertTrue(result.composition_api.is_empty())

    def test_typescript_end_to_end(self):
        """A real TypeScript module yields imports, types, classes and exports."""
        code = (
            "import { a, b as c } from 'x';\n"
            "export interface Props { readonly id: string; label?: string }\n"
            "export class Foo extends Bar implements Baz {\n"
            "  private x: number;\n"
            "  static foo(): void {}\n"
            "}\n"
        )
        result = build_parse_result(code, "foo.ts")

        self.assertEqual(result.imports[0].imports, ("a", "c"))
        self.assertEqual(result.types[0].name, "Props")
        self.assertEqual(
            [(p.name, p.is_readonly, p.is_optional) for p in result.types[0].properties],
            [("id", True, False), ("label", False, True)],
        )
        cls = result.classes[0]
        self.assertEqual((cls.name, cls.extends, cls.implements), ("Foo", "Bar", ("Baz",)))
        self.assertEqual(cls.properties[0].visibility, "private")
        self.assertTrue(cls.methods[0].is_static)
        self.assertEqual(cls.methods[0].return_type, "void")
        self.assertEqual(
            [(e.name, e.kind) for e in result.exports],
            [("Props", "type"), ("Foo", "class")],
        )

    def test_anonymous_class_expressions(self):
        """Unnamed class expressions are reported as anonymous classes."""
        code = "const A = class { m() {} }\nexport default class { n() {} }\n"
        classes = build_parse_result(code, "a.ts").classes

        self.assertEqual([cls.name for cls in classes], ["anonymous", "anonymous"])
        self.assertEqual([cls.methods[0].name for cls in classes], ["m", "n"])
        self.assertEqual(classes[1].start_position.row, 1)

    def test_named_class_expression(self):
        """A class expression keeps its own name."""
        classes = build_parse_result("const A = class Impl extends Base {}\n", "a.ts").classes
        self.assertEqual([(cls.name, cls.extends) for cls in classes], [("Impl", "Base")])


if __name__ == "__main__":
    unittest.main()
