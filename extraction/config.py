"""
Configuration constants for TypeScript/JavaScript/Vue fact extraction.

Defines the tree-sitter node kind strings each extractor matches on. Kinds are
open strings; every extractor only reacts to the kinds listed here and skips
everything else.
"""

from typing import Dict, FrozenSet

# ---------------------------------------------------------------------------
# Supported files
# ---------------------------------------------------------------------------

# Extension (lowercase, no dot) -> grammar used for the script content
SUPPORTED_EXTENSIONS: Dict[str, str] = {
    "ts": "typescript",
    "js": "typescript",
    "tsx": "tsx",
    "jsx": "tsx",
    "vue": "vue",
}

COMPONENT_LANGUAGE: str = "vue"

# ---------------------------------------------------------------------------
# Shared shapes
# ---------------------------------------------------------------------------

IDENTIFIER_KINDS: FrozenSet[str] = frozenset({"identifier"})

TYPE_NAME_KINDS: FrozenSet[str] = frozenset({"identifier", "type_identifier"})

MEMBER_NAME_KINDS: FrozenSet[str] = frozenset({
    "property_identifier",
    "private_property_identifier",
})

FORMAL_PARAMETERS: str = "formal_parameters"

PARAMETER_KINDS: FrozenSet[str] = frozenset({
    "required_parameter",
    "optional_parameter",
})

# Pattern wrappers whose first identifier child is the parameter name
PARAMETER_PATTERN_KINDS: FrozenSet[str] = frozenset({
    "rest_pattern",
    "assignment_pattern",
})

TYPE_ANNOTATION: str = "type_annotation"

ASYNC_MODIFIER: str = "async"
GENERATOR_MODIFIER: str = "*"
STATIC_MODIFIER: str = "static"

# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------

FUNCTION_KINDS: FrozenSet[str] = frozenset({
    "function_declaration",
    "function_expression",
    "arrow_function",
    "method_definition",
    "generator_function_declaration",
    "generator_function",
})

FUNCTION_NAME_KINDS: FrozenSet[str] = frozenset({
    "identifier",
    "property_identifier",
    "private_property_identifier",
})

ARROW_FUNCTION: str = "arrow_function"

ANONYMOUS_NAME: str = "anonymous"

# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------

IMPORT_STATEMENT: str = "import_statement"
IMPORT_CLAUSE: str = "import_clause"
NAMESPACE_IMPORT: str = "namespace_import"
NAMED_IMPORTS: str = "named_imports"
IMPORT_SPECIFIER: str = "import_specifier"
TYPE_ONLY_MARKER: str = "type"
STRING_KINDS: FrozenSet[str] = frozenset({"string"})
QUOTE_CHARACTERS: str = "'\"`"

# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------

EXPORT_STATEMENT: str = "export_statement"
DEFAULT_MARKER: str = "default"

# Nested declaration kind -> export kind tag
EXPORT_DECLARATION_KINDS: Dict[str, str] = {
    "function_declaration": "function",
    "generator_function_declaration": "function",
    "class_declaration": "class",
    "abstract_class_declaration": "class",
    "interface_declaration": "type",
    "type_alias_declaration": "type",
    "enum_declaration": "type",
}

# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------

# Anonymous class expressions share the kind "class" with the keyword token;
# only a node carrying a class_body is a class.
CLASS_EXPRESSION: str = "class"

CLASS_KINDS: FrozenSet[str] = frozenset({
    "class_declaration",
    "abstract_class_declaration",
    "class_expression",
    CLASS_EXPRESSION,
})

CLASS_HERITAGE: str = "class_heritage"
EXTENDS_CLAUSE: str = "extends_clause"
IMPLEMENTS_CLAUSE: str = "implements_clause"
GENERIC_TYPE: str = "generic_type"
CLASS_BODY: str = "class_body"
METHOD_DEFINITION: str = "method_definition"

PROPERTY_DEFINITION_KINDS: FrozenSet[str] = frozenset({
    "property_definition",
    "public_field_definition",
    "field_definition",
})

VISIBILITY_KINDS: FrozenSet[str] = frozenset({"public", "private", "protected"})
ACCESSIBILITY_MODIFIER: str = "accessibility_modifier"

# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

INTERFACE_DECLARATION: str = "interface_declaration"
TYPE_ALIAS_DECLARATION: str = "type_alias_declaration"
ENUM_DECLARATION: str = "enum_declaration"

TYPE_DECLARATION_KINDS: FrozenSet[str] = frozenset({
    INTERFACE_DECLARATION,
    TYPE_ALIAS_DECLARATION,
    ENUM_DECLARATION,
})

INTERFACE_BODY_KINDS: FrozenSet[str] = frozenset({"interface_body", "object_type"})
PROPERTY_SIGNATURE: str = "property_signature"
METHOD_SIGNATURE: str = "method_signature"
OPTIONAL_MARKER: str = "?"
READONLY_MARKER: str = "readonly"

# ---------------------------------------------------------------------------
# Variables
# ---------------------------------------------------------------------------

VARIABLE_DECLARATION_KINDS: FrozenSet[str] = frozenset({
    "lexical_declaration",
    "variable_declaration",
})

VARIABLE_DECLARATOR: str = "variable_declarator"
CONST_KEYWORD: str = "const"
ASSIGNMENT_TOKEN: str = "="
EXPRESSION_STATEMENT: str = "expression_statement"

# Initializer-shaped kinds; the first match in child order is the value
VALUE_KINDS: FrozenSet[str] = frozenset({
    "expression_statement",
    "assignment_expression",
    "string",
    "number",
    "true",
    "false",
    "null",
    "undefined",
    "array",
    "object",
    "unary_expression",
    "binary_expression",
    "call_expression",
    "new_expression",
    "arrow_function",
    "function_expression",
})

# ---------------------------------------------------------------------------
# Options-object components
# ---------------------------------------------------------------------------

OBJECT_KINDS: FrozenSet[str] = frozenset({"object", "object_expression"})
CALL_EXPRESSION: str = "call_expression"
ARGUMENTS: str = "arguments"
PAIR: str = "pair"
SHORTHAND_PROPERTY: str = "shorthand_property_identifier"

OPTION_ENTRY_KINDS: FrozenSet[str] = frozenset({PAIR, METHOD_DEFINITION, SHORTHAND_PROPERTY})

OPTION_KEY_KINDS: FrozenSet[str] = frozenset({"property_identifier", "string"})

DATA_FUNCTION_KINDS: FrozenSet[str] = frozenset({
    "function_expression",
    "arrow_function",
    "method_definition",
})

STATEMENT_BLOCK: str = "statement_block"
RETURN_STATEMENT: str = "return_statement"
PARENTHESIZED_EXPRESSION: str = "parenthesized_expression"

KEY_LIST_OPTIONS: FrozenSet[str] = frozenset({"computed", "watch", "methods"})

IGNORED_OPTIONS: FrozenSet[str] = frozenset({
    "props",
    "components",
    "directives",
    "filters",
    "mixins",
    "extends",
    "provide",
    "inject",
})

LIFECYCLE_HOOKS: FrozenSet[str] = frozenset({
    "beforeCreate",
    "created",
    "beforeMount",
    "mounted",
    "beforeUpdate",
    "updated",
    "beforeUnmount",
    "unmounted",
    "beforeDestroy",
    "destroyed",
    "activated",
    "deactivated",
    "errorCaptured",
    "renderTracked",
    "renderTriggered",
})

# ---------------------------------------------------------------------------
# Composition API (<script setup> and the setup() option)
# ---------------------------------------------------------------------------

SETUP_OPTION: str = "setup"

DEFINE_PROPS: str = "defineProps"
WITH_DEFAULTS: str = "withDefaults"
DEFINE_EMITS: str = "defineEmits"
DEFINE_EXPOSE: str = "defineExpose"
COMPUTED_FUNCTION: str = "computed"
WATCH_FUNCTION: str = "watch"
PROVIDE_FUNCTION: str = "provide"
INJECT_FUNCTION: str = "inject"
SYMBOL_FUNCTION: str = "Symbol"

REF_FUNCTIONS: FrozenSet[str] = frozenset({"ref", "shallowRef", "toRef", "toRefs"})

REACTIVE_FUNCTIONS: FrozenSet[str] = frozenset({
    "reactive",
    "shallowReactive",
    "readonly",
    "shallowReadonly",
})

SHALLOW_FUNCTIONS: FrozenSet[str] = frozenset({
    "shallowRef",
    "shallowReactive",
    "shallowReadonly",
})

# provide() values built by these calls are reported as reactive
REACTIVE_SOURCE_FUNCTIONS: FrozenSet[str] = frozenset({"ref", "reactive"})

WATCH_EFFECT_FUNCTIONS: FrozenSet[str] = frozenset({
    "watchEffect",
    "watchPostEffect",
    "watchSyncEffect",
})

COMPOSITION_LIFECYCLE_HOOKS: FrozenSet[str] = frozenset({
    "onBeforeMount",
    "onMounted",
    "onBeforeUpdate",
    "onUpdated",
    "onBeforeUnmount",
    "onUnmounted",
    "onActivated",
    "onDeactivated",
    "onErrorCaptured",
    "onRenderTracked",
    "onRenderTriggered",
    "onServerPrefetch",
})

TYPE_ARGUMENTS: str = "type_arguments"
OBJECT_TYPE: str = "object_type"
CALL_SIGNATURE: str = "call_signature"
ARRAY_KINDS: FrozenSet[str] = frozenset({"array"})
MEMBER_EXPRESSION: str = "member_expression"
TRUE_KEYWORD: str = "true"

# Watch sources that name a dependency directly
WATCH_SOURCE_KINDS: FrozenSet[str] = frozenset({"identifier", MEMBER_EXPRESSION})

FUNCTION_VALUE_KINDS: FrozenSet[str] = frozenset({
    "arrow_function",
    "function_expression",
    "function",
})

# Wrappers around an initializer call: `inject(key) as Foo`, `inject(key)!`
TYPE_ASSERTION_KINDS: FrozenSet[str] = frozenset({
    "as_expression",
    "satisfies_expression",
    "non_null_expression",
})

# Tokens between call arguments and type arguments
ARGUMENT_PUNCTUATION: FrozenSet[str] = frozenset({"(", ")", ",", "<", ">", "comment"})

# ---------------------------------------------------------------------------
# Single-file component markup (tree-sitter-html kinds)
# ---------------------------------------------------------------------------

HTML_ELEMENT: str = "element"
HTML_START_TAG_KINDS: FrozenSet[str] = frozenset({"start_tag", "self_closing_tag"})
HTML_TAG_NAME: str = "tag_name"
HTML_ATTRIBUTE: str = "attribute"
HTML_ATTRIBUTE_NAME: str = "attribute_name"
HTML_ATTRIBUTE_VALUE: str = "attribute_value"
HTML_QUOTED_ATTRIBUTE_VALUE: str = "quoted_attribute_value"
HTML_SCRIPT_ELEMENT: str = "script_element"
HTML_RAW_TEXT: str = "raw_text"

TEMPLATE_TAG: str = "template"

# Tags that look like components but are template syntax
RESERVED_TEMPLATE_TAGS: FrozenSet[str] = frozenset({"template", "slot", "component"})

DIRECTIVE_PREFIX: str = "v-"
EVENT_PREFIXES: tuple = ("v-on:", "@")
BINDING_PREFIXES: tuple = ("v-bind:", ":")
SLOT_SHORTHAND_PREFIX: str = "#"
