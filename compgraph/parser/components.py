"""Recognises components, props and hooks in one tree-sitter syntax tree."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Tuple

from ..config import DEFAULT_COMPONENT_BASES
from ..models import (
    Component,
    ComponentKind,
    Diagnostic,
    EventBinding,
    Position,
    PropSpec,
    SourceSpan,
    StateHook,
    component_id,
)
from .hooks import classify_hook, is_hook_name
from .source import SourceTree

_MARKUP_NODES = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_fragment"})
_MARKUP_TAGS = frozenset({"jsx_opening_element", "jsx_self_closing_element"})
_CLOSURE_NODES = frozenset({"arrow_function", "function_expression", "function"})
_VARIABLE_NODES = frozenset({"lexical_declaration", "variable_declaration"})
_CLASS_NODES = frozenset({"class_declaration", "abstract_class_declaration", "class"})
_FUNCTION_NODES = frozenset({"function_declaration", "function_expression", "function"})
_OBJECT_TYPES = frozenset({"object_type", "interface_body"})
_PARAMETER_NODES = frozenset({"required_parameter", "optional_parameter"})
_REFERENCE_NODES = frozenset({"identifier", "member_expression"})
_EVENT_ATTRIBUTE = re.compile(r"^on[A-Z]")

INLINE_HANDLER = "inline"


class ParseFailure(Exception):
    """Raised when a file's syntax tree cannot be walked."""

    def __init__(self, file_id: str, reason: str) -> None:
        super().__init__(f"{file_id}: {reason}")
        self.file_id = file_id
        self.reason = reason


@dataclass(frozen=True)
class ParsedFile:
    """Per-file output buffer of the parse phase."""

    file_id: str
    components: Tuple[Component, ...] = ()
    diagnostics: Tuple[Diagnostic, ...] = ()


class ComponentExtractor:
    """Extracts components from one file; safe to share between threads."""

    def __init__(self, component_bases: Iterable[str] = DEFAULT_COMPONENT_BASES) -> None:
        self._bases = frozenset(component_bases)

    def extract(self, source: SourceTree) -> ParsedFile:
        tree = source.tree
        root = getattr(tree, "root_node", None)
        if root is None:
            raise ParseFailure(source.file_id, "no syntax tree")
        if root.type != "program":
            raise ParseFailure(source.file_id, f"unexpected root node '{root.type}'")

        diagnostics: List[Diagnostic] = []
        if root.has_error:
            diagnostics.append(
                Diagnostic(
                    file_id=source.file_id,
                    code="syntax-error",
                    message="Syntax errors present; recognition may be incomplete",
                    severity="warning",
                )
            )
        walker = _FileWalker(source, self._bases)
        try:
            components = walker.components(root)
        except Exception as exc:  # any walker fault is confined to this file
            raise ParseFailure(source.file_id, f"walk failed: {exc}") from exc
        return ParsedFile(
            file_id=source.file_id,
            components=tuple(components),
            diagnostics=tuple(diagnostics),
        )


class _FileWalker:
    def __init__(self, source: SourceTree, bases: FrozenSet[str]) -> None:
        self._file_id = source.file_id
        self._source = source.source
        self._bases = bases
        self._types: Dict[str, object] = {}

    def components(self, root) -> List[Component]:  # type: ignore[no-untyped-def]
        statements = [_unwrap_export(node) for node in _named(root)]
        statements = [node for node in statements if node is not None]
        self._types = self._index_types(statements)

        found: List[Component] = []
        seen: Set[str] = set()
        for statement in statements:
            for component in self._recognise(statement):
                if component.name in seen:
                    continue
                seen.add(component.name)
                found.append(component)
        return found

    # Recognition

    def _recognise(self, node) -> Iterator[Component]:  # type: ignore[no-untyped-def]
        if node.type in _FUNCTION_NODES:
            name_node = node.child_by_field_name("name")
            body = node.child_by_field_name("body")
            if name_node is not None and body is not None and _contains_markup(body):
                yield self._function_component(self._text(name_node), ComponentKind.FUNCTION, node, node)
        elif node.type in _VARIABLE_NODES:
            for declarator in _named(node):
                if declarator.type != "variable_declarator":
                    continue
                name_node = declarator.child_by_field_name("name")
                value = _unwrap_parens(declarator.child_by_field_name("value"))
                if name_node is None or name_node.type != "identifier":
                    continue
                if value is None or value.type not in _CLOSURE_NODES:
                    continue
                body = value.child_by_field_name("body")
                if body is not None and _contains_markup(body):
                    yield self._function_component(
                        self._text(name_node), ComponentKind.CLOSURE, declarator, value
                    )
        elif node.type in _CLASS_NODES:
            name_node = node.child_by_field_name("name")
            if name_node is None:
                return
            base = self._component_base(node)
            if base is not None:
                yield self._class_component(self._text(name_node), node, base)

    def _component_base(self, class_node):  # type: ignore[no-untyped-def]
        """Return the extends clause (value, type arguments) naming a known base."""
        heritage = next((child for child in class_node.children if child.type == "class_heritage"), None)
        if heritage is None:
            return None
        for clause in _named(heritage):
            if clause.type == "implements_clause":
                continue
            if clause.type == "extends_clause":
                value = clause.child_by_field_name("value")
                if value is None:
                    value = next((c for c in _named(clause) if c.type != "type_arguments"), None)
                type_args = clause.child_by_field_name("type_arguments")
                if type_args is None:
                    type_args = next((c for c in _named(clause) if c.type == "type_arguments"), None)
            else:
                value, type_args = clause, None
            if value is None:
                continue
            if self._text(value).rsplit(".", 1)[-1] in self._bases:
                return value, type_args
        return None

    def _function_component(self, name: str, kind: ComponentKind, node, function) -> Component:  # type: ignore[no-untyped-def]
        return self._component(name, kind, node, self._function_props(function))

    def _class_component(self, name: str, node, base) -> Component:  # type: ignore[no-untyped-def]
        _, type_args = base
        props: Tuple[PropSpec, ...] = ()
        if type_args is not None:
            arguments = _named(type_args)
            if arguments:
                props = tuple(self._props_from_type(arguments[0], frozenset()))
        return self._component(name, ComponentKind.CLASS, node, props)

    def _component(self, name: str, kind: ComponentKind, node, props) -> Component:  # type: ignore[no-untyped-def]
        hooks, refs, events = self._scan_body(node)
        return Component(
            id=component_id(self._file_id, name),
            name=name,
            file_id=self._file_id,
            kind=kind,
            span=self._span(node),
            props=tuple(props),
            hooks=hooks,
            markup_refs=refs,
            event_bindings=events,
        )

    # Props

    def _function_props(self, function) -> Tuple[PropSpec, ...]:  # type: ignore[no-untyped-def]
        parameters = function.child_by_field_name("parameters")
        if parameters is None:
            return ()
        params = _named(parameters)
        if not params or params[0].type not in _PARAMETER_NODES:
            return ()
        first = params[0]
        annotation = first.child_by_field_name("type")
        if annotation is None:
            return ()
        props = self._props_from_type(_annotation_type(annotation), frozenset())
        pattern = first.child_by_field_name("pattern")
        defaults = self._destructured_defaults(pattern) if pattern is not None else {}
        return tuple(
            PropSpec(name=prop.name, type=prop.type, required=prop.required, default=defaults.get(prop.name))
            for prop in props
        )

    def _props_from_type(self, node, resolving: FrozenSet[str]) -> List[PropSpec]:  # type: ignore[no-untyped-def]
        if node is None:
            return []
        if node.type in _OBJECT_TYPES:
            return self._members(node)
        if node.type == "parenthesized_type":
            inner = _named(node)
            return self._props_from_type(inner[0], resolving) if inner else []
        if node.type == "intersection_type":
            merged: List[PropSpec] = []
            names: Set[str] = set()
            for part in _named(node):
                for prop in self._props_from_type(part, resolving):
                    if prop.name not in names:
                        names.add(prop.name)
                        merged.append(prop)
            return merged
        if node.type == "type_identifier":
            name = self._text(node)
            declared = self._types.get(name)
            if declared is None or name in resolving:
                return []
            return self._props_from_type(declared, resolving | {name})
        return []

    def _members(self, object_type) -> List[PropSpec]:  # type: ignore[no-untyped-def]
        props: List[PropSpec] = []
        for member in _named(object_type):
            if member.type != "property_signature":
                continue
            name_node = member.child_by_field_name("name")
            if name_node is None:
                continue
            annotation = member.child_by_field_name("type")
            type_node = _annotation_type(annotation) if annotation is not None else None
            props.append(
                PropSpec(
                    name=self._text(name_node).strip("'\""),
                    type=self._text(type_node) if type_node is not None else "any",
                    required=not any(child.type == "?" for child in member.children),
                )
            )
        return props

    def _destructured_defaults(self, pattern) -> Dict[str, str]:  # type: ignore[no-untyped-def]
        defaults: Dict[str, str] = {}
        if pattern.type != "object_pattern":
            return defaults
        for entry in _named(pattern):
            if entry.type == "object_assignment_pattern":
                left = entry.child_by_field_name("left")
                right = entry.child_by_field_name("right")
                if left is not None and right is not None:
                    defaults.setdefault(self._text(left), self._text(right))
            elif entry.type == "pair_pattern":
                key = entry.child_by_field_name("key")
                value = entry.child_by_field_name("value")
                if key is None or value is None or value.type != "assignment_pattern":
                    continue
                right = value.child_by_field_name("right")
                if right is not None:
                    defaults.setdefault(self._text(key).strip("'\""), self._text(right))
        return defaults

    def _index_types(self, statements) -> Dict[str, object]:  # type: ignore[no-untyped-def]
        index: Dict[str, object] = {}
        for node in statements:
            if node.type == "interface_declaration":
                body = node.child_by_field_name("body")
            elif node.type == "type_alias_declaration":
                body = node.child_by_field_name("value")
            else:
                continue
            name_node = node.child_by_field_name("name")
            if name_node is not None and body is not None:
                index.setdefault(self._text(name_node), body)
        return index

    # Body facts

    def _scan_body(self, node):  # type: ignore[no-untyped-def]
        hooks: List[StateHook] = []
        refs: List[str] = []
        events: List[EventBinding] = []
        for current in _walk(node):
            if current.type == "call_expression":
                callee = current.child_by_field_name("function")
                if callee is not None and callee.type == "identifier":
                    name = self._text(callee)
                    if is_hook_name(name):
                        hooks.append(self._hook(current, name))
            elif current.type in _MARKUP_TAGS:
                name_node = current.child_by_field_name("name")
                tag = self._text(name_node) if name_node is not None else ""
                if tag[:1].isupper() and tag not in refs:
                    refs.append(tag)
                for attribute in _named(current):
                    if attribute.type == "jsx_attribute":
                        binding = self._event_binding(attribute, tag)
                        if binding is not None:
                            events.append(binding)
        return tuple(hooks), tuple(refs), tuple(events)

    def _hook(self, call, name: str) -> StateHook:  # type: ignore[no-untyped-def]
        arguments_node = call.child_by_field_name("arguments")
        arguments = _named(arguments_node) if arguments_node is not None else []

        dependencies: Optional[Tuple[str, ...]] = None
        if len(arguments) > 1 and arguments[-1].type == "array":
            dependencies = tuple(self._text(element) for element in _named(arguments[-1]))

        argument = None
        if arguments and arguments[0].type in _REFERENCE_NODES:
            argument = self._text(arguments[0])

        return StateHook(
            name=name,
            kind=classify_hook(name),
            span=self._span(call),
            dependencies=dependencies,
            bindings=self._bindings(call),
            argument=argument,
        )

    def _bindings(self, call) -> Tuple[str, ...]:  # type: ignore[no-untyped-def]
        parent = call.parent
        if parent is None or parent.type != "variable_declarator":
            return ()
        value = parent.child_by_field_name("value")
        if value is None or value.start_byte != call.start_byte or value.end_byte != call.end_byte:
            return ()
        target = parent.child_by_field_name("name")
        if target is None:
            return ()
        if target.type == "identifier":
            return (self._text(target),)
        names: List[str] = []
        for element in _named(target):
            if element.type in {"identifier", "shorthand_property_identifier_pattern"}:
                names.append(self._text(element))
            elif element.type in {"assignment_pattern", "object_assignment_pattern"}:
                left = element.child_by_field_name("left")
                if left is not None:
                    names.append(self._text(left))
            elif element.type == "pair_pattern":
                value_node = element.child_by_field_name("value")
                if value_node is not None and value_node.type == "identifier":
                    names.append(self._text(value_node))
        return tuple(names)

    def _event_binding(self, attribute, element: str) -> Optional[EventBinding]:  # type: ignore[no-untyped-def]
        parts = _named(attribute)
        if len(parts) < 2:
            return None
        event = self._text(parts[0])
        if not _EVENT_ATTRIBUTE.match(event):
            return None
        value = parts[1]
        handler = INLINE_HANDLER
        if value.type == "jsx_expression":
            inner = _named(value)
            if inner:
                handler = self._handler_name(inner[0])
        return EventBinding(event=event, handler=handler, element=element, span=self._span(attribute))

    def _handler_name(self, expression) -> str:  # type: ignore[no-untyped-def]
        if expression.type in _REFERENCE_NODES:
            return self._text(expression)
        if expression.type in _CLOSURE_NODES:
            expression = expression.child_by_field_name("body")
            if expression is None:
                return INLINE_HANDLER
        if expression.type == "call_expression":
            callee = expression.child_by_field_name("function")
            if callee is not None and callee.type in _REFERENCE_NODES:
                return self._text(callee)
        return INLINE_HANDLER

    # Helpers

    def _text(self, node) -> str:  # type: ignore[no-untyped-def]
        return self._source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")

    def _span(self, node) -> SourceSpan:  # type: ignore[no-untyped-def]
        start_row, start_col = node.start_point[0], node.start_point[1]
        end_row, end_col = node.end_point[0], node.end_point[1]
        return SourceSpan(
            file_id=self._file_id,
            start=Position(line=start_row + 1, column=start_col + 1),
            end=Position(line=end_row + 1, column=end_col + 1),
        )


def _named(node) -> list:  # type: ignore[no-untyped-def]
    return [child for child in node.named_children if child.type != "comment"]


def _walk(node) -> Iterator[object]:  # type: ignore[no-untyped-def]
    """Yield ``node`` and its descendants in document order without recursion."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _contains_markup(node) -> bool:  # type: ignore[no-untyped-def]
    return any(current.type in _MARKUP_NODES for current in _walk(node))


def _unwrap_export(node):  # type: ignore[no-untyped-def]
    if node.type != "export_statement":
        return node
    declaration = node.child_by_field_name("declaration")
    if declaration is not None:
        return declaration
    return node.child_by_field_name("value")


def _unwrap_parens(node):  # type: ignore[no-untyped-def]
    while node is not None and node.type == "parenthesized_expression":
        inner = _named(node)
        node = inner[0] if inner else None
    return node


def _annotation_type(annotation):  # type: ignore[no-untyped-def]
    inner = _named(annotation)
    return inner[0] if inner else None


__all__ = ["ComponentExtractor", "INLINE_HANDLER", "ParseFailure", "ParsedFile"]
