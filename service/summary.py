"""Plain-text summary of a ParseResult, one section per non-empty category."""

import logging
from typing import List, Sequence

from extraction.models import (
    ClassInfo,
    CompositionApiInfo,
    ExportInfo,
    FunctionInfo,
    ImportInfo,
    MethodInfo,
    OptionsApiInfo,
    ParseResult,
    TemplateInfo,
    TypeInfo,
    VariableInfo,
)
from extraction.node import Position

logger = logging.getLogger(__name__)

_MAX_VALUE_LENGTH = 50
_PLAIN_FUNCTION_KIND = "function_declaration"


def format_position(position: Position) -> str:
    return f"[L{position.row}:C{position.column}]"


def format_parameters(parameters: Sequence[str]) -> str:
    return ", ".join(parameters) if parameters else "none"


def format_value(value) -> str:
    if not value:
        return "undefined"
    if len(value) > _MAX_VALUE_LENGTH:
        return value[:_MAX_VALUE_LENGTH] + "..."
    return value


def _method_line(method: MethodInfo) -> str:
    prefix = ""
    if method.is_static:
        prefix += "static "
    if method.is_async:
        prefix += "async "
    return (
        f"  - {prefix}{method.name}({format_parameters(method.parameters)})"
        f" -> {method.return_type or 'void'}"
    )


def _functions_section(functions: Sequence[FunctionInfo]) -> List[str]:
    lines = []
    for fn in functions:
        marker = f" [{fn.kind}]" if fn.kind != _PLAIN_FUNCTION_KIND else ""
        prefix = "async " if fn.is_async else ""
        star = "*" if fn.is_generator else ""
        lines.append(
            f"- {prefix}{star}{fn.name}({format_parameters(fn.parameters)})"
            f" -> {fn.return_type or 'void'}{marker} {format_position(fn.start_position)}"
        )
    return lines


def _classes_section(classes: Sequence[ClassInfo]) -> List[str]:
    lines = []
    for cls in classes:
        extends = f" extends {cls.extends}" if cls.extends else ""
        implements = f" implements {', '.join(cls.implements)}" if cls.implements else ""
        lines.append(f"- {cls.name}{extends}{implements} {format_position(cls.start_position)}")
        if cls.properties:
            lines.append("  Properties:")
            for prop in cls.properties:
                visibility = f"{prop.visibility} " if prop.visibility else ""
                static = "static " if prop.is_static else ""
                type_text = f": {prop.type}" if prop.type else ""
                lines.append(f"  - {visibility}{static}{prop.name}{type_text}")
        if cls.methods:
            lines.append("  Methods:")
            lines.extend(_method_line(method) for method in cls.methods)
    return lines


def _variables_section(variables: Sequence[VariableInfo]) -> List[str]:
    lines = []
    for var in variables:
        keyword = "const" if var.is_const else "let"
        type_text = f": {var.type}" if var.type else ""
        lines.append(
            f"- {keyword} {var.name}{type_text} = {format_value(var.value)}"
            f" {format_position(var.start_position)}"
        )
    return lines


def format_import(imp: ImportInfo) -> str:
    if imp.is_side_effect:
        return f"import {imp.source}"
    type_only = "type " if imp.is_type_only else ""
    if imp.is_namespace and imp.imports:
        names = f"* as {imp.imports[-1]}"
    elif imp.is_default and imp.imports:
        names = ", ".join([f"default {imp.imports[0]}", *imp.imports[1:]])
    else:
        names = ", ".join(imp.imports)
    return f"{type_only}{names} from {imp.source}"


def _imports_section(imports: Sequence[ImportInfo]) -> List[str]:
    return [f"- {format_import(imp)} {format_position(imp.start_position)}" for imp in imports]


def _exports_section(exports: Sequence[ExportInfo]) -> List[str]:
    lines = []
    for exp in exports:
        default = "default " if exp.is_default else ""
        lines.append(f"- {default}{exp.name} ({exp.kind}) {format_position(exp.start_position)}")
    return lines


def _types_section(types: Sequence[TypeInfo]) -> List[str]:
    lines = []
    for info in types:
        lines.append(f"- {info.name} ({info.kind}) {format_position(info.start_position)}")
        if info.properties:
            lines.append("  Properties:")
            for prop in info.properties:
                readonly = "readonly " if prop.is_readonly else ""
                optional = "?" if prop.is_optional else ""
                lines.append(f"  - {readonly}{prop.name}{optional}: {prop.type or 'any'}")
        if info.methods:
            lines.append("  Methods:")
            lines.extend(_method_line(method) for method in info.methods)
    return lines


def _modifiers(modifiers: Sequence[str]) -> str:
    return "." + ".".join(modifiers) if modifiers else ""


def _template_section(template: TemplateInfo) -> List[str]:
    lines = []
    if template.directives:
        lines.append("Directives:")
        for directive in template.directives:
            value = f'="{directive.value}"' if directive.value else ""
            lines.append(
                f"- v-{directive.name}{_modifiers(directive.modifiers)}{value}"
                f" on <{directive.element}> {format_position(directive.start_position)}"
            )
    if template.bindings:
        lines.append("Bindings:")
        for binding in template.bindings:
            lines.append(
                f"- :{binding.name} = {binding.expression} on <{binding.element}>"
                f" {format_position(binding.start_position)}"
            )
    if template.events:
        lines.append("Events:")
        for event in template.events:
            lines.append(
                f"- @{event.name}{_modifiers(event.modifiers)} = {event.handler}"
                f" on <{event.element}> {format_position(event.start_position)}"
            )
    if template.components:
        lines.append("Components:")
        lines.extend(f"- <{name}>" for name in template.components)
    return lines


def _options_section(options: OptionsApiInfo) -> List[str]:
    groups = (
        ("Data Properties", options.data_properties),
        ("Computed Properties", options.computed_properties),
        ("Watch Properties", options.watch_properties),
        ("Methods", options.methods),
        ("Lifecycle Hooks", options.lifecycle_hooks),
    )
    lines = []
    for title, names in groups:
        if names:
            lines.append(f"{title}:")
            lines.extend(f"- {name}" for name in names)
    return lines


def _flags(*pairs) -> str:
    names = [name for name, enabled in pairs if enabled]
    return f" ({', '.join(names)})" if names else ""


def _composition_section(composition: CompositionApiInfo) -> List[str]:
    lines = []
    if composition.props:
        lines.append("Props:")
        for prop in composition.props:
            type_text = f": {prop.type}" if prop.type else ""
            flags = _flags(("required", prop.required), ("default", prop.has_default))
            lines.append(
                f"- {prop.name}{type_text}{flags} {format_position(prop.start_position)}"
            )
    if composition.emits:
        lines.append("Emits:")
        lines.extend(
            f"- {emit.name} {format_position(emit.start_position)}" for emit in composition.emits
        )
    for title, states in (("Refs", composition.refs), ("Reactives", composition.reactives)):
        if not states:
            continue
        lines.append(f"{title}:")
        for state in states:
            type_text = f": {state.type}" if state.type else ""
            initial = format_value(state.initial_value) if state.initial_value else ""
            lines.append(
                f"- {state.name}{type_text} = {state.function}({initial})"
                f" {format_position(state.start_position)}"
            )
    if composition.computed:
        lines.append("Computed:")
        for computed in composition.computed:
            type_text = f": {computed.type}" if computed.type else ""
            mode = "readonly" if computed.is_readonly else "writable"
            lines.append(
                f"- {computed.name}{type_text} ({mode})"
                f" {format_position(computed.start_position)}"
            )
    if composition.watchers:
        lines.append("Watch:")
        for watch in composition.watchers:
            flags = _flags(("deep", watch.is_deep), ("immediate", watch.is_immediate))
            lines.append(
                f"- {watch.name} on {format_parameters(watch.dependencies)}{flags}"
                f" {format_position(watch.start_position)}"
            )
    if composition.watch_effects:
        lines.append("Watch Effects:")
        for effect in composition.watch_effects:
            lines.append(
                f"- {effect.name} [{effect.function}] {format_position(effect.start_position)}"
            )
    if composition.lifecycle_hooks:
        lines.append("Lifecycle Hooks:")
        lines.extend(
            f"- {hook.name} {format_position(hook.start_position)}"
            for hook in composition.lifecycle_hooks
        )
    if composition.provides:
        lines.append("Provide:")
        for provide in composition.provides:
            flags = _flags(("symbol", provide.is_symbol_key), ("reactive", provide.is_reactive))
            lines.append(f"- {provide.key}{flags} {format_position(provide.start_position)}")
    if composition.injects:
        lines.append("Inject:")
        for inject in composition.injects:
            alias = f"{inject.alias} <- " if inject.alias else ""
            default = f" = {format_value(inject.default)}" if inject.default else ""
            flags = _flags(("symbol", inject.is_symbol_key))
            lines.append(
                f"- {alias}{inject.key}{default}{flags} {format_position(inject.start_position)}"
            )
    if composition.expose:
        lines.append("Expose:")
        lines.extend(
            f"- {item.name} ({item.kind}) {format_position(item.start_position)}"
            for item in composition.expose
        )
    return lines


def _template_count(template: TemplateInfo) -> int:
    return (
        len(template.directives)
        + len(template.bindings)
        + len(template.events)
        + len(template.components)
    )


def _options_count(options: OptionsApiInfo) -> int:
    return (
        len(options.data_properties)
        + len(options.computed_properties)
        + len(options.watch_properties)
        + len(options.methods)
        + len(options.lifecycle_hooks)
    )


def build_summary(result: ParseResult, filepath: str) -> str:
    """Render ``result`` as Markdown-style text.

    Empty categories are omitted. Positions are printed exactly as stored.
    """
    lines = [f"# Code Analysis: {filepath}", "", f"Language: {result.language}", ""]

    sections = [
        ("Functions", len(result.functions), _functions_section(result.functions)),
        ("Classes", len(result.classes), _classes_section(result.classes)),
        ("Variables", len(result.variables), _variables_section(result.variables)),
        ("Imports", len(result.imports), _imports_section(result.imports)),
        ("Exports", len(result.exports), _exports_section(result.exports)),
        ("Types", len(result.types), _types_section(result.types)),
    ]
    if result.template is not None:
        sections.append(
            ("Template", _template_count(result.template), _template_section(result.template))
        )
    if result.options_api is not None:
        sections.append(
            (
                "Options API",
                _options_count(result.options_api),
                _options_section(result.options_api),
            )
        )
    if result.composition_api is not None:
        sections.append(
            (
                "Composition API",
                result.composition_api.total(),
                _composition_section(result.composition_api),
            )
        )

    for title, count, body in sections:
        if not count:
            continue
        lines.append(f"## {title} ({count})")
        lines.append("")
        lines.extend(body)
        lines.append("")

    summary = "\n".join(lines)
    logger.debug("Built summary for %s (%d lines)", filepath, len(lines))
    return summary
