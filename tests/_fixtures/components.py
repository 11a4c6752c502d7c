"""Builders for hand-made component records used by graph and rule tests."""

from __future__ import annotations

from typing import Iterable, Sequence

from compgraph.models import (
    Component,
    ComponentKind,
    EventBinding,
    HookKind,
    Position,
    PropSpec,
    SourceSpan,
    StateHook,
    component_id,
)
from compgraph.parser.hooks import classify_hook


def span(file_id: str = "src/App.tsx", line: int = 1) -> SourceSpan:
    return SourceSpan(file_id=file_id, start=Position(line, 1), end=Position(line, 20))


def prop(name: str, type_: str = "string", required: bool = True) -> PropSpec:
    return PropSpec(name=name, type=type_, required=required)


def hook(
    name: str,
    *,
    kind: HookKind | None = None,
    bindings: Sequence[str] = (),
    argument: str | None = None,
    line: int = 1,
    file_id: str = "src/App.tsx",
) -> StateHook:
    return StateHook(
        name=name,
        kind=kind or classify_hook(name),
        span=span(file_id, line),
        bindings=tuple(bindings),
        argument=argument,
    )


def make_component(
    name: str,
    file_id: str = "src/App.tsx",
    *,
    props: Iterable[PropSpec] = (),
    hooks: Iterable[StateHook] = (),
    refs: Iterable[str] = (),
    children: Iterable[str] = (),
    events: Iterable[tuple[str, str]] = (),
    kind: ComponentKind = ComponentKind.FUNCTION,
) -> Component:
    return Component(
        id=component_id(file_id, name),
        name=name,
        file_id=file_id,
        kind=kind,
        span=span(file_id),
        props=tuple(props),
        hooks=tuple(hooks),
        children=tuple(children),
        markup_refs=tuple(refs),
        event_bindings=tuple(
            EventBinding(event=event, handler=handler, element="button", span=span(file_id))
            for event, handler in events
        ),
    )


__all__ = ["hook", "make_component", "prop", "span"]
