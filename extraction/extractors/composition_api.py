"""Composition API extraction for components.

Scans the top-level statements of the component script (``<script setup>``)
and the body of a ``setup`` option on the exported options object. Each
statement is either a declaration whose declarators are initialised by a
call, or a bare call expression; the callee name decides the fact category:

* ``defineProps`` / ``withDefaults(defineProps(...), {...})`` -> props
* ``defineEmits`` -> emits
* ``defineExpose`` -> expose
* ``ref`` family / ``reactive`` family -> refs / reactives (named bindings)
* ``computed`` -> computed (named bindings)
* ``watch`` and ``watchEffect`` family -> watchers / watch effects
* ``provide`` / ``inject`` -> provides / injects
* ``onMounted`` family -> lifecycle hooks

Only bare identifier callees are matched; ``store.watch(...)`` is not a watch.
Nested functions are not searched.
"""

import logging
from dataclasses import replace
from typing import Iterator, List, Optional, Tuple

from core.errors import ExtractionFailure
from extraction.config import (
    ARGUMENT_PUNCTUATION,
    ARGUMENTS,
    ARRAY_KINDS,
    ASSIGNMENT_TOKEN,
    CALL_EXPRESSION,
    CALL_SIGNATURE,
    COMPOSITION_LIFECYCLE_HOOKS,
    COMPUTED_FUNCTION,
    DATA_FUNCTION_KINDS,
    DEFINE_EMITS,
    DEFINE_EXPOSE,
    DEFINE_PROPS,
    EXPRESSION_STATEMENT,
    FORMAL_PARAMETERS,
    FUNCTION_VALUE_KINDS,
    IDENTIFIER_KINDS,
    INJECT_FUNCTION,
    MEMBER_NAME_KINDS,
    METHOD_DEFINITION,
    OBJECT_KINDS,
    OBJECT_TYPE,
    OPTION_ENTRY_KINDS,
    OPTIONAL_MARKER,
    PAIR,
    PARAMETER_KINDS,
    PROPERTY_SIGNATURE,
    PROVIDE_FUNCTION,
    REACTIVE_FUNCTIONS,
    REACTIVE_SOURCE_FUNCTIONS,
    REF_FUNCTIONS,
    SETUP_OPTION,
    SHALLOW_FUNCTIONS,
    STATEMENT_BLOCK,
    STRING_KINDS,
    SYMBOL_FUNCTION,
    TRUE_KEYWORD,
    TYPE_ANNOTATION,
    TYPE_ARGUMENTS,
    TYPE_ASSERTION_KINDS,
    VARIABLE_DECLARATION_KINDS,
    VARIABLE_DECLARATOR,
    WATCH_EFFECT_FUNCTIONS,
    WATCH_FUNCTION,
    WATCH_SOURCE_KINDS,
    WITH_DEFAULTS,
)
from extraction.extractors.options_api import entry_key, find_options_object
from extraction.extractors.variables import declarator_name
from extraction.models import (
    CompositionApiInfo,
    ComputedInfo,
    EmitInfo,
    ExposeInfo,
    InjectInfo,
    LifecycleHookInfo,
    PropInfo,
    ProvideInfo,
    ReactiveStateInfo,
    WatchEffectInfo,
    WatchInfo,
)
from extraction.node import SyntaxNode
from extraction.syntax import annotation_text, strip_quotes, type_of

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Call shape helpers
# ---------------------------------------------------------------------------

def callee_name(call: SyntaxNode) -> Optional[str]:
    if not call.children or call.children[0].kind not in IDENTIFIER_KINDS:
        return None
    return call.children[0].text


def call_arguments(call: SyntaxNode) -> Tuple[SyntaxNode, ...]:
    arguments = call.find_child(ARGUMENTS)
    if arguments is None:
        return ()
    return tuple(c for c in arguments.children if c.kind not in ARGUMENT_PUNCTUATION)


def type_arguments(call: SyntaxNode) -> Tuple[SyntaxNode, ...]:
    arguments = call.find_child(TYPE_ARGUMENTS)
    if arguments is None:
        return ()
    return tuple(c for c in arguments.children if c.kind not in ARGUMENT_PUNCTUATION)


def _pair_value(entry: SyntaxNode) -> Optional[SyntaxNode]:
    if entry.kind != PAIR or len(entry.children) < 3:
        return None
    return entry.children[-1]


def _initializer_call(declarator: SyntaxNode) -> Optional[SyntaxNode]:
    """The call expression a declarator is initialised with, if any."""
    value = None
    children = declarator.children
    for index, child in enumerate(children):
        if child.kind == ASSIGNMENT_TOKEN and index + 1 < len(children):
            value = children[index + 1]
            break
    while value is not None and value.kind in TYPE_ASSERTION_KINDS and value.children:
        value = value.children[0]
    if value is None or value.kind != CALL_EXPRESSION:
        return None
    return value


def _setup_body(root: SyntaxNode) -> Optional[SyntaxNode]:
    obj = find_options_object(root)
    if obj is None:
        return None
    for entry in obj.find_children(OPTION_ENTRY_KINDS):
        if entry_key(entry) != SETUP_OPTION:
            continue
        if entry.kind == METHOD_DEFINITION:
            function = entry
        else:
            function = entry.find_child(DATA_FUNCTION_KINDS)
        if function is None:
            return None
        return function.find_child(STATEMENT_BLOCK)
    return None


def setup_statements(root: SyntaxNode) -> Tuple[SyntaxNode, ...]:
    """Top-level script statements followed by the ``setup`` option body."""
    statements = list(root.children)
    body = _setup_body(root)
    if body is not None:
        statements.extend(body.children)
    return tuple(statements)


def setup_calls(
    statement: SyntaxNode,
) -> Iterator[Tuple[Optional[SyntaxNode], Optional[SyntaxNode], SyntaxNode]]:
    """Yield ``(declarator, bound_name, call)`` for each call in ``statement``.

    ``declarator`` and ``bound_name`` are ``None`` for bare call statements;
    ``bound_name`` is also ``None`` for destructuring declarators.
    """
    if statement.kind in VARIABLE_DECLARATION_KINDS:
        for declarator in statement.find_children(VARIABLE_DECLARATOR):
            call = _initializer_call(declarator)
            if call is not None:
                yield declarator, declarator_name(declarator), call
    elif statement.kind == EXPRESSION_STATEMENT:
        call = statement.find_child(CALL_EXPRESSION)
        if call is not None:
            yield None, None, call


def _declared_type(declarator: Optional[SyntaxNode], call: SyntaxNode) -> Optional[str]:
    if declarator is not None:
        annotated = type_of(declarator)
        if annotated is not None:
            return annotated
    generics = type_arguments(call)
    return generics[0].text if generics else None


# ---------------------------------------------------------------------------
# Props / emits / expose
# ---------------------------------------------------------------------------

def _prop_from_signature(member: SyntaxNode) -> Optional[PropInfo]:
    name_node = member.find_child(MEMBER_NAME_KINDS)
    if name_node is None:
        return None
    return PropInfo(
        name=name_node.text,
        type=type_of(member),
        required=not member.has_child(OPTIONAL_MARKER),
        start_position=member.start_position,
    )


def _prop_from_entry(entry: SyntaxNode) -> Optional[PropInfo]:
    name = entry_key(entry)
    if name is None or entry.kind == METHOD_DEFINITION:
        return None
    value = _pair_value(entry)
    if value is None:
        return PropInfo(name=name, start_position=entry.start_position)
    if value.kind not in OBJECT_KINDS:
        return PropInfo(name=name, type=value.text, start_position=entry.start_position)

    prop_type = None
    required = False
    has_default = False
    for option in value.find_children(PAIR):
        key = entry_key(option)
        option_value = _pair_value(option)
        if key == "type" and option_value is not None:
            prop_type = option_value.text
        elif key == "required" and option_value is not None:
            required = option_value.kind == TRUE_KEYWORD
        elif key == "default":
            has_default = True
    return PropInfo(
        name=name,
        type=prop_type,
        required=required,
        has_default=has_default,
        start_position=entry.start_position,
    )


def _define_props(call: SyntaxNode) -> List[PropInfo]:
    for generic in type_arguments(call):
        if generic.kind == OBJECT_TYPE:
            props = (_prop_from_signature(m) for m in generic.find_children(PROPERTY_SIGNATURE))
            return [prop for prop in props if prop is not None]

    arguments = call_arguments(call)
    if not arguments:
        return []
    first = arguments[0]
    if first.kind in OBJECT_KINDS:
        props = (_prop_from_entry(e) for e in first.find_children(OPTION_ENTRY_KINDS))
        return [prop for prop in props if prop is not None]
    if first.kind in ARRAY_KINDS:
        return [
            PropInfo(name=strip_quotes(item.text), start_position=item.start_position)
            for item in first.find_children(STRING_KINDS)
        ]
    return []


def extract_props(call: SyntaxNode) -> List[PropInfo]:
    """Props of a ``defineProps`` or ``withDefaults`` call.

    Type-argument members win over runtime arguments. An interface reference
    (``defineProps<Props>()``) is not resolved and gives no props.
    """
    if callee_name(call) == DEFINE_PROPS:
        return _define_props(call)

    arguments = call_arguments(call)
    if not arguments or arguments[0].kind != CALL_EXPRESSION:
        return []
    if callee_name(arguments[0]) != DEFINE_PROPS:
        return []
    defaults = set()
    if len(arguments) > 1 and arguments[1].kind in OBJECT_KINDS:
        defaults = {
            key
            for key in (entry_key(e) for e in arguments[1].find_children(OPTION_ENTRY_KINDS))
            if key is not None
        }
    return [
        replace(prop, has_default=prop.has_default or prop.name in defaults)
        for prop in _define_props(arguments[0])
    ]


def _event_from_call_signature(member: SyntaxNode) -> Optional[str]:
    # (e: 'change', id: number): void
    parameters = member.find_child(FORMAL_PARAMETERS)
    if parameters is None:
        return None
    first = parameters.find_child(PARAMETER_KINDS)
    if first is None:
        return None
    event = annotation_text(first.find_child(TYPE_ANNOTATION))
    return strip_quotes(event) if event else None


def extract_emits(call: SyntaxNode) -> List[EmitInfo]:
    """Event names of a ``defineEmits`` call.

    Accepts call-signature and named-tuple type literals, an array of event
    names, or an object keyed by event name.
    """
    for generic in type_arguments(call):
        if generic.kind != OBJECT_TYPE:
            continue
        emits = []
        for member in generic.children:
            name = None
            if member.kind == CALL_SIGNATURE:
                name = _event_from_call_signature(member)
            elif member.kind == PROPERTY_SIGNATURE:
                name_node = member.find_child(MEMBER_NAME_KINDS)
                name = name_node.text if name_node is not None else None
            if name:
                emits.append(EmitInfo(name=name, start_position=member.start_position))
        return emits

    arguments = call_arguments(call)
    if not arguments:
        return []
    first = arguments[0]
    if first.kind in ARRAY_KINDS:
        return [
            EmitInfo(name=strip_quotes(item.text), start_position=item.start_position)
            for item in first.find_children(STRING_KINDS)
        ]
    if first.kind in OBJECT_KINDS:
        emits = []
        for entry in first.find_children(OPTION_ENTRY_KINDS):
            name = entry_key(entry)
            if name is not None:
                emits.append(EmitInfo(name=name, start_position=entry.start_position))
        return emits
    return []


def extract_expose(call: SyntaxNode) -> List[ExposeInfo]:
    """Members of the object passed to ``defineExpose``.

    Method shorthand and function values are methods; everything else,
    shorthand references included, is a property.
    """
    arguments = call_arguments(call)
    if not arguments or arguments[0].kind not in OBJECT_KINDS:
        return []
    exposed = []
    for entry in arguments[0].find_children(OPTION_ENTRY_KINDS):
        name = entry_key(entry)
        if name is None:
            continue
        value = _pair_value(entry)
        is_method = entry.kind == METHOD_DEFINITION or (
            value is not None and value.kind in FUNCTION_VALUE_KINDS
        )
        exposed.append(
            ExposeInfo(
                name=name,
                kind="method" if is_method else "property",
                start_position=entry.start_position,
            )
        )
    return exposed


# ---------------------------------------------------------------------------
# Reactive state, watchers, provide/inject
# ---------------------------------------------------------------------------

def parse_reactive_state(
    declarator: SyntaxNode, name: SyntaxNode, call: SyntaxNode
) -> ReactiveStateInfo:
    function = callee_name(call) or ""
    arguments = call_arguments(call)
    return ReactiveStateInfo(
        name=name.text,
        function=function,
        type=_declared_type(declarator, call),
        initial_value=arguments[0].text if arguments else None,
        is_shallow=function in SHALLOW_FUNCTIONS,
        start_position=declarator.start_position,
    )


def parse_computed(declarator: SyntaxNode, name: SyntaxNode, call: SyntaxNode) -> ComputedInfo:
    """A computed binding is writable when its options object has a ``set``."""
    arguments = call_arguments(call)
    has_setter = False
    if arguments and arguments[0].kind in OBJECT_KINDS:
        has_setter = any(
            entry_key(entry) == "set"
            for entry in arguments[0].find_children(OPTION_ENTRY_KINDS)
        )
    return ComputedInfo(
        name=name.text,
        type=_declared_type(declarator, call),
        is_readonly=not has_setter,
        start_position=declarator.start_position,
    )


def _watch_dependencies(source: SyntaxNode) -> Tuple[str, ...]:
    if source.kind in WATCH_SOURCE_KINDS:
        return (source.text,)
    if source.kind in ARRAY_KINDS:
        return tuple(item.text for item in source.children if item.kind in WATCH_SOURCE_KINDS)
    return ()


def parse_watch(name: Optional[SyntaxNode], call: SyntaxNode) -> Optional[WatchInfo]:
    arguments = call_arguments(call)
    if len(arguments) < 2:
        return None
    is_deep = False
    is_immediate = False
    if len(arguments) > 2 and arguments[2].kind in OBJECT_KINDS:
        for option in arguments[2].find_children(PAIR):
            value = _pair_value(option)
            enabled = value is not None and value.kind == TRUE_KEYWORD
            key = entry_key(option)
            if key == "deep":
                is_deep = enabled
            elif key == "immediate":
                is_immediate = enabled
    return WatchInfo(
        name=name.text if name is not None else WATCH_FUNCTION,
        dependencies=_watch_dependencies(arguments[0]),
        is_deep=is_deep,
        is_immediate=is_immediate,
        start_position=call.start_position,
    )


def injection_key(node: SyntaxNode) -> Tuple[Optional[str], bool]:
    """``(key, is_symbol_key)`` for a provide/inject key argument.

    String literals and identifiers give their text; ``Symbol('x')`` gives
    ``x``. Any other expression has no static key.
    """
    if node.kind in STRING_KINDS:
        return strip_quotes(node.text), False
    if node.kind in IDENTIFIER_KINDS:
        return node.text, False
    if node.kind == CALL_EXPRESSION and callee_name(node) == SYMBOL_FUNCTION:
        arguments = call_arguments(node)
        if arguments and arguments[0].kind in STRING_KINDS:
            return strip_quotes(arguments[0].text), True
    return None, False


def parse_provide(call: SyntaxNode) -> Optional[ProvideInfo]:
    arguments = call_arguments(call)
    if len(arguments) < 2:
        return None
    key, is_symbol = injection_key(arguments[0])
    if key is None:
        return None
    value = arguments[1]
    return ProvideInfo(
        key=key,
        is_symbol_key=is_symbol,
        is_reactive=value.kind == CALL_EXPRESSION
        and callee_name(value) in REACTIVE_SOURCE_FUNCTIONS,
        start_position=call.start_position,
    )


def parse_inject(name: Optional[SyntaxNode], call: SyntaxNode) -> Optional[InjectInfo]:
    arguments = call_arguments(call)
    if not arguments:
        return None
    key, is_symbol = injection_key(arguments[0])
    if key is None:
        return None
    return InjectInfo(
        key=key,
        alias=name.text if name is not None else None,
        default=arguments[1].text if len(arguments) > 1 else None,
        is_symbol_key=is_symbol,
        start_position=call.start_position,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

class _Collector:
    def __init__(self) -> None:
        self.props: List[PropInfo] = []
        self.emits: List[EmitInfo] = []
        self.refs: List[ReactiveStateInfo] = []
        self.reactives: List[ReactiveStateInfo] = []
        self.computed: List[ComputedInfo] = []
        self.watchers: List[WatchInfo] = []
        self.watch_effects: List[WatchEffectInfo] = []
        self.lifecycle_hooks: List[LifecycleHookInfo] = []
        self.provides: List[ProvideInfo] = []
        self.injects: List[InjectInfo] = []
        self.expose: List[ExposeInfo] = []

    def add(
        self,
        declarator: Optional[SyntaxNode],
        name: Optional[SyntaxNode],
        call: SyntaxNode,
    ) -> None:
        function = callee_name(call)
        if function is None:
            return

        if function in (DEFINE_PROPS, WITH_DEFAULTS):
            self.props.extend(extract_props(call))
        elif function == DEFINE_EMITS:
            self.emits.extend(extract_emits(call))
        elif function == DEFINE_EXPOSE:
            self.expose.extend(extract_expose(call))
        elif function in COMPOSITION_LIFECYCLE_HOOKS:
            self.lifecycle_hooks.append(
                LifecycleHookInfo(name=function, start_position=call.start_position)
            )
        elif function == WATCH_FUNCTION:
            watch = parse_watch(name, call)
            if watch is not None:
                self.watchers.append(watch)
        elif function in WATCH_EFFECT_FUNCTIONS:
            self.watch_effects.append(
                WatchEffectInfo(
                    name=name.text if name is not None else function,
                    function=function,
                    start_position=call.start_position,
                )
            )
        elif function == PROVIDE_FUNCTION:
            provide = parse_provide(call)
            if provide is not None:
                self.provides.append(provide)
        elif function == INJECT_FUNCTION:
            inject = parse_inject(name, call)
            if inject is not None:
                self.injects.append(inject)
        elif declarator is None or name is None:
            # The remaining categories describe named bindings
            return
        elif function in REF_FUNCTIONS:
            self.refs.append(parse_reactive_state(declarator, name, call))
        elif function in REACTIVE_FUNCTIONS:
            self.reactives.append(parse_reactive_state(declarator, name, call))
        elif function == COMPUTED_FUNCTION:
            self.computed.append(parse_computed(declarator, name, call))

    def build(self) -> CompositionApiInfo:
        return CompositionApiInfo(
            props=tuple(self.props),
            emits=tuple(self.emits),
            refs=tuple(self.refs),
            reactives=tuple(self.reactives),
            computed=tuple(self.computed),
            watchers=tuple(self.watchers),
            watch_effects=tuple(self.watch_effects),
            lifecycle_hooks=tuple(self.lifecycle_hooks),
            provides=tuple(self.provides),
            injects=tuple(self.injects),
            expose=tuple(self.expose),
        )


def extract_composition_api(root: SyntaxNode) -> CompositionApiInfo:
    """Extract setup-code facts from a component script tree.

    A statement that fails to parse is logged and skipped; the rest of the
    script is still scanned.
    """
    collector = _Collector()
    for statement in setup_statements(root):
        try:
            for declarator, name, call in setup_calls(statement):
                collector.add(declarator, name, call)
        except Exception as exc:
            failure = ExtractionFailure(
                f"Could not extract composition API facts from {statement.kind} at "
                f"{statement.start_position.row}:{statement.start_position.column}: {exc}"
            )
            logger.warning("%s", failure)

    info = collector.build()
    logger.debug("Collected %d composition API facts", info.total())
    return info
