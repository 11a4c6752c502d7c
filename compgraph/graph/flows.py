"""Flow derivation over a component set with resolved children."""

from __future__ import annotations

from typing import Dict, List, Sequence

from ..models import (
    Component,
    ContextFlow,
    EventFlow,
    HookKind,
    PropFlow,
    StateFlow,
    component_id,
)
from .matchers import Matchers

_STATE_KINDS = (HookKind.STATE, HookKind.REDUCER)


def derive_prop_flows(components: Sequence[Component]) -> List[PropFlow]:
    """One flow per declared prop of the child along every containment edge."""
    by_id = {component.id: component for component in components}
    flows: List[PropFlow] = []
    for parent in components:
        for child_id in parent.children:
            child = by_id.get(child_id)
            if child is None:
                continue
            for prop in child.props:
                flows.append(
                    PropFlow(
                        source=parent.id,
                        target=child.id,
                        prop_name=prop.name,
                        prop_type=prop.type,
                        required=prop.required,
                    )
                )
    return flows


def derive_state_flows(components: Sequence[Component], matchers: Matchers) -> List[StateFlow]:
    """Approximate readers and writers for every state and reducer hook."""
    by_id = {component.id: component for component in components}
    flows: List[StateFlow] = []
    for component in components:
        for hook in component.hooks:
            if hook.kind not in _STATE_KINDS:
                continue
            state_name = matchers.state.state_name(hook)

            readers = [component_id(component.id, "render")]
            for child_id in component.children:
                child = by_id.get(child_id)
                if child is None or child_id in readers:
                    continue
                if any(matchers.state.reads(prop.name, state_name) for prop in child.props):
                    readers.append(child_id)

            writers: List[str] = []
            setter = matchers.state.setter_name(hook)
            if setter:
                writers.append(component_id(component.id, setter))
            for handler in matchers.writers.handlers(component):
                writer = component_id(component.id, handler)
                if writer not in writers:
                    writers.append(writer)

            flows.append(
                StateFlow(
                    owner=component.id,
                    hook_name=hook.name,
                    hook_kind=hook.kind,
                    span=hook.span,
                    readers=tuple(readers),
                    writers=tuple(writers),
                )
            )
    return flows


def derive_context_flows(components: Sequence[Component], matchers: Matchers) -> List[ContextFlow]:
    """Group context consumers by context name and attach the matched provider."""
    consumers: Dict[str, List[str]] = {}
    for component in components:
        for hook in component.hooks:
            if hook.kind is not HookKind.CONTEXT:
                continue
            name = matchers.provider.context_name(hook)
            if not name:
                continue
            ids = consumers.setdefault(name, [])
            if component.id not in ids:
                ids.append(component.id)

    flows: List[ContextFlow] = []
    for name in sorted(consumers):
        provider = matchers.provider.match(name, components)
        if provider is None:
            continue
        flows.append(
            ContextFlow(
                context_name=name,
                provider_id=provider,
                consumer_ids=tuple(sorted(consumers[name])),
            )
        )
    return flows


def derive_event_flows(components: Sequence[Component]) -> List[EventFlow]:
    flows: List[EventFlow] = []
    for component in components:
        handlers: Dict[str, List[str]] = {}
        for binding in component.event_bindings:
            ids = handlers.setdefault(binding.event, [])
            handler_id = component_id(component.id, binding.handler)
            if handler_id not in ids:
                ids.append(handler_id)
        for event, ids in handlers.items():
            flows.append(EventFlow(source=component.id, event_type=event, handler_ids=tuple(ids)))
    return flows


__all__ = [
    "derive_context_flows",
    "derive_event_flows",
    "derive_prop_flows",
    "derive_state_flows",
]
