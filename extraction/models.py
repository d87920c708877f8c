"""
Data models for extracted source facts.

All records are frozen and store sequences as tuples so a ``ParseResult`` can
be shared between concurrent callers without defensive copies.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Optional, Tuple

from extraction.node import Position


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


class _Record:
    """Mixin giving every fact record a JSON-ready ``to_dict``."""

    def to_dict(self) -> Dict[str, Any]:
        return _jsonable(asdict(self))


@dataclass(frozen=True)
class FunctionInfo(_Record):
    """A function declaration, expression, arrow function or method.

    Attributes:
        name: Declared name, or ``"anonymous"``.
        kind: Grammar node kind the fact was built from.
        parameters: Parameter names in declaration order.
        return_type: Annotated return type text, if any.
        is_async: Whether an ``async`` modifier is present.
        is_generator: Whether a ``*`` modifier is present.
        start_position: Start of the function node.
        end_position: End of the function node.
    """

    name: str
    kind: str
    parameters: Tuple[str, ...]
    return_type: Optional[str]
    is_async: bool
    is_generator: bool
    start_position: Position
    end_position: Position


@dataclass(frozen=True)
class MethodInfo(_Record):
    name: str
    parameters: Tuple[str, ...]
    return_type: Optional[str] = None
    is_static: bool = False
    is_async: bool = False


@dataclass(frozen=True)
class PropertyInfo(_Record):
    name: str
    type: Optional[str] = None
    is_static: bool = False
    visibility: Optional[str] = None


@dataclass(frozen=True)
class ClassInfo(_Record):
    """A class declaration with its members.

    ``implements`` is ``None`` when the class has no implements clause.
    """

    name: str
    extends: Optional[str]
    implements: Optional[Tuple[str, ...]]
    methods: Tuple[MethodInfo, ...]
    properties: Tuple[PropertyInfo, ...]
    start_position: Position
    end_position: Position


@dataclass(frozen=True)
class ImportInfo(_Record):
    """One import statement.

    ``is_side_effect`` is true exactly when the statement has no binding
    clause (``import "./polyfill"``).
    """

    source: str
    imports: Tuple[str, ...]
    is_default: bool
    is_namespace: bool
    is_type_only: bool
    is_side_effect: bool
    start_position: Position


@dataclass(frozen=True)
class ExportInfo(_Record):
    name: str
    kind: str
    is_default: bool
    start_position: Position


@dataclass(frozen=True)
class VariableInfo(_Record):
    name: str
    type: Optional[str]
    value: Optional[str]
    is_const: bool
    start_position: Position


@dataclass(frozen=True)
class TypePropertyInfo(_Record):
    name: str
    type: Optional[str] = None
    is_optional: bool = False
    is_readonly: bool = False


@dataclass(frozen=True)
class TypeInfo(_Record):
    """An interface, type alias or enum declaration."""

    name: str
    kind: str
    properties: Tuple[TypePropertyInfo, ...]
    methods: Tuple[MethodInfo, ...]
    start_position: Position
    end_position: Position


@dataclass(frozen=True)
class DirectiveInfo(_Record):
    name: str
    modifiers: Tuple[str, ...]
    value: Optional[str]
    element: str
    start_position: Position


@dataclass(frozen=True)
class BindingInfo(_Record):
    name: str
    expression: str
    element: str
    start_position: Position


@dataclass(frozen=True)
class EventInfo(_Record):
    name: str
    modifiers: Tuple[str, ...]
    handler: str
    element: str
    start_position: Position


@dataclass(frozen=True)
class TemplateOccurrence(_Record):
    """A single template-level occurrence reported by the component parser.

    Attributes:
        category: One of ``directive``, ``binding``, ``event``, ``component``.
        name: Directive/binding/event name, or the component tag name.
        element: Host element tag name.
        modifiers: Dot-separated modifiers, in source order.
        value: Attribute value text, if the attribute has one.
        start_position: Position of the attribute (or tag for components).
    """

    category: str
    name: str
    element: str
    modifiers: Tuple[str, ...] = ()
    value: Optional[str] = None
    start_position: Position = field(default=Position(0, 0))


@dataclass(frozen=True)
class TemplateInfo(_Record):
    directives: Tuple[DirectiveInfo, ...] = ()
    bindings: Tuple[BindingInfo, ...] = ()
    events: Tuple[EventInfo, ...] = ()
    components: Tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not (self.directives or self.bindings or self.events or self.components)


@dataclass(frozen=True)
class OptionsApiInfo(_Record):
    """Member names declared on an options-object component definition."""

    data_properties: Tuple[str, ...] = ()
    computed_properties: Tuple[str, ...] = ()
    watch_properties: Tuple[str, ...] = ()
    methods: Tuple[str, ...] = ()
    lifecycle_hooks: Tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not (
            self.data_properties
            or self.computed_properties
            or self.watch_properties
            or self.methods
            or self.lifecycle_hooks
        )


@dataclass(frozen=True)
class PropInfo(_Record):
    """A component prop declared through ``defineProps``.

    Attributes:
        name: Prop name.
        type: Type annotation or runtime type constructor text, if any.
        required: True for a non-optional type member or ``required: true``.
        has_default: True when a default is given in the prop options or in
            the ``withDefaults`` defaults object.
        start_position: Position of the declaring member.
    """

    name: str
    type: Optional[str] = None
    required: bool = False
    has_default: bool = False
    start_position: Position = field(default=Position(0, 0))


@dataclass(frozen=True)
class EmitInfo(_Record):
    name: str
    start_position: Position


@dataclass(frozen=True)
class ReactiveStateInfo(_Record):
    """A binding initialised by a ``ref`` or ``reactive`` family call."""

    name: str
    function: str
    type: Optional[str]
    initial_value: Optional[str]
    is_shallow: bool
    start_position: Position


@dataclass(frozen=True)
class ComputedInfo(_Record):
    name: str
    type: Optional[str]
    is_readonly: bool
    start_position: Position


@dataclass(frozen=True)
class WatchInfo(_Record):
    """A ``watch(source, callback, options?)`` call.

    ``name`` is the binding holding the stop handle, or ``"watch"``.
    Dependencies are only reported for identifier and member-access sources;
    getter functions are not analysed.
    """

    name: str
    dependencies: Tuple[str, ...]
    is_deep: bool
    is_immediate: bool
    start_position: Position


@dataclass(frozen=True)
class WatchEffectInfo(_Record):
    name: str
    function: str
    start_position: Position


@dataclass(frozen=True)
class LifecycleHookInfo(_Record):
    name: str
    start_position: Position


@dataclass(frozen=True)
class ProvideInfo(_Record):
    key: str
    is_symbol_key: bool
    is_reactive: bool
    start_position: Position


@dataclass(frozen=True)
class InjectInfo(_Record):
    key: str
    alias: Optional[str]
    default: Optional[str]
    is_symbol_key: bool
    start_position: Position


@dataclass(frozen=True)
class ExposeInfo(_Record):
    name: str
    kind: str
    start_position: Position


@dataclass(frozen=True)
class CompositionApiInfo(_Record):
    """Setup-code facts of a component, in source order per category."""

    props: Tuple[PropInfo, ...] = ()
    emits: Tuple[EmitInfo, ...] = ()
    refs: Tuple[ReactiveStateInfo, ...] = ()
    reactives: Tuple[ReactiveStateInfo, ...] = ()
    computed: Tuple[ComputedInfo, ...] = ()
    watchers: Tuple[WatchInfo, ...] = ()
    watch_effects: Tuple[WatchEffectInfo, ...] = ()
    lifecycle_hooks: Tuple[LifecycleHookInfo, ...] = ()
    provides: Tuple[ProvideInfo, ...] = ()
    injects: Tuple[InjectInfo, ...] = ()
    expose: Tuple[ExposeInfo, ...] = ()

    def total(self) -> int:
        return sum(len(getattr(self, f.name)) for f in fields(self))

    def is_empty(self) -> bool:
        return self.total() == 0


@dataclass(frozen=True)
class ParseResult(_Record):
    """Every fact extracted from one file, tagged with its language."""

    language: str
    functions: Tuple[FunctionInfo, ...] = ()
    classes: Tuple[ClassInfo, ...] = ()
    variables: Tuple[VariableInfo, ...] = ()
    imports: Tuple[ImportInfo, ...] = ()
    exports: Tuple[ExportInfo, ...] = ()
    types: Tuple[TypeInfo, ...] = ()
    template: Optional[TemplateInfo] = None
    options_api: Optional[OptionsApiInfo] = None
    composition_api: Optional[CompositionApiInfo] = None

    def counts(self) -> Dict[str, int]:
        """Per-category fact counts, used for logging and run reports."""
        return {
            "functions": len(self.functions),
            "classes": len(self.classes),
            "variables": len(self.variables),
            "imports": len(self.imports),
            "exports": len(self.exports),
            "types": len(self.types),
        }
