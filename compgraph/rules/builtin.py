"""Built-in structural rules over the component graph."""

from __future__ import annotations

from typing import Dict, List, Sequence

from ..graph.matchers import owns_context_hook
from ..models import Component, FlowSet, HookKind, Pattern, PatternKind
from .base import Rule
from .scoring import clamp_confidence, rounded_complexity

GOD_COMPONENT_THRESHOLD = 10
HOOK_OVERUSE_THRESHOLD = 8
PROP_DRILLING_THRESHOLD = 3

_RENDER_PROP_NAMES = ("render", "children")
_RENDER_PROP_TYPES = ("ReactNode", "ReactElement", "JSX.Element")


def detect_god_components(components: Sequence[Component], flows: FlowSet) -> List[Pattern]:
    patterns: List[Pattern] = []
    for component in components:
        complexity = rounded_complexity(component)
        if complexity <= GOD_COMPONENT_THRESHOLD:
            continue
        patterns.append(
            Pattern(
                id=f"god-component:{component.id}",
                name="God Component",
                kind=PatternKind.ANTI_PATTERN,
                confidence=clamp_confidence(min(complexity / 15, 1)),
                components=(component.id,),
                description=f"Component '{component.name}' has high complexity ({complexity})",
                suggestions=(
                    "Break this component into smaller, focused components",
                    "Extract custom hooks for complex logic",
                    "Consider using composition over inheritance",
                    "Move side effects to separate service functions",
                ),
                span=component.span,
            )
        )
    return patterns


def detect_prop_drilling(components: Sequence[Component], flows: FlowSet) -> List[Pattern]:
    """Flag prop names declared by many components.

    Participants are every component declaring the exact prop name, not a path
    traced through containment, so unrelated components sharing a name count.
    """
    participants: Dict[str, List[Component]] = {}
    for component in components:
        for prop in component.props:
            members = participants.setdefault(prop.name, [])
            if all(member.id != component.id for member in members):
                members.append(component)

    patterns: List[Pattern] = []
    for prop_name, members in participants.items():
        if len(members) <= PROP_DRILLING_THRESHOLD:
            continue
        ids = tuple(member.id for member in members)
        patterns.append(
            Pattern(
                id=f"prop-drilling:{prop_name}",
                name="Prop Drilling",
                kind=PatternKind.ANTI_PATTERN,
                confidence=clamp_confidence(min((len(ids) - 2) / 5, 1)),
                components=ids,
                description=f"Prop '{prop_name}' is declared by {len(ids)} components",
                suggestions=(
                    "Consider using React Context for shared state",
                    "Implement a state management library (Redux, Zustand)",
                    "Create a custom hook for shared logic",
                    "Restructure component hierarchy to reduce prop passing",
                ),
                span=members[0].span,
            )
        )
    return patterns


def detect_hook_overuse(components: Sequence[Component], flows: FlowSet) -> List[Pattern]:
    patterns: List[Pattern] = []
    for component in components:
        count = len(component.hooks)
        if count <= HOOK_OVERUSE_THRESHOLD:
            continue
        patterns.append(
            Pattern(
                id=f"hook-overuse:{component.id}",
                name="Hook Overuse",
                kind=PatternKind.ANTI_PATTERN,
                confidence=clamp_confidence(min(count / 15, 1)),
                components=(component.id,),
                description=f"Component '{component.name}' uses {count} hooks",
                suggestions=(
                    "Extract related hooks into custom hooks",
                    "Split component into smaller components",
                    "Consider if all hooks are necessary",
                    "Group related state using useReducer",
                ),
                span=component.span,
            )
        )
    return patterns


def detect_custom_hooks(components: Sequence[Component], flows: FlowSet) -> List[Pattern]:
    patterns: List[Pattern] = []
    for component in components:
        for hook in component.hooks_of(HookKind.CUSTOM):
            start = hook.span.start
            patterns.append(
                Pattern(
                    id=f"custom-hook:{component.id}:{hook.name}@{start.line}:{start.column}",
                    name="Custom Hook Pattern",
                    kind=PatternKind.PATTERN,
                    confidence=0.8,
                    components=(component.id,),
                    description=f"Custom hook '{hook.name}' provides reusable logic",
                    suggestions=(
                        "Document the custom hook with JSDoc",
                        "Add TypeScript types for better type safety",
                        "Consider extracting to a separate file for reusability",
                    ),
                    span=hook.span,
                )
            )
    return patterns


def detect_render_props(components: Sequence[Component], flows: FlowSet) -> List[Pattern]:
    patterns: List[Pattern] = []
    for component in components:
        render_props = [
            prop
            for prop in component.props
            if any(marker in prop.name for marker in _RENDER_PROP_NAMES)
            or any(marker in prop.type for marker in _RENDER_PROP_TYPES)
        ]
        if not render_props:
            continue
        names = ", ".join(prop.name for prop in render_props)
        patterns.append(
            Pattern(
                id=f"render-props:{component.id}",
                name="Render Props Pattern",
                kind=PatternKind.PATTERN,
                confidence=0.7,
                components=(component.id,),
                description=f"Component '{component.name}' accepts renderable props ({names})",
                suggestions=(
                    "Document the render prop interface",
                    "Consider using TypeScript generics for type safety",
                    "Provide examples of render prop usage",
                ),
                span=component.span,
            )
        )
    return patterns


def detect_context_providers(components: Sequence[Component], flows: FlowSet) -> List[Pattern]:
    """Flag components named with a literal, case-sensitive ``Provider`` or owning a context hook.

    The name check is fixed and does not follow ``matchers.provider_marker``,
    which only steers provider selection for context flows.
    """
    patterns: List[Pattern] = []
    for component in components:
        if "Provider" not in component.name and not owns_context_hook(component):
            continue
        patterns.append(
            Pattern(
                id=f"context-provider:{component.id}",
                name="Context Provider Pattern",
                kind=PatternKind.PATTERN,
                confidence=0.8,
                components=(component.id,),
                description=f"Component '{component.name}' takes part in the context provider pattern",
                suggestions=(
                    "Split context into smaller, focused contexts",
                    "Provide TypeScript types for context value",
                    "Add context consumer hook for easier usage",
                    "Document context usage examples",
                ),
                span=component.span,
            )
        )
    return patterns


BUILTIN_RULES = (
    Rule(
        name="god-component",
        kind=PatternKind.ANTI_PATTERN,
        description="Component with too many responsibilities",
        detect=detect_god_components,
    ),
    Rule(
        name="prop-drilling",
        kind=PatternKind.ANTI_PATTERN,
        description="Same prop declared across many components",
        detect=detect_prop_drilling,
    ),
    Rule(
        name="hook-overuse",
        kind=PatternKind.ANTI_PATTERN,
        description="Component using too many hooks",
        detect=detect_hook_overuse,
    ),
    Rule(
        name="custom-hook",
        kind=PatternKind.PATTERN,
        description="Reusable logic extracted into custom hooks",
        detect=detect_custom_hooks,
    ),
    Rule(
        name="render-props",
        kind=PatternKind.PATTERN,
        description="Component accepting render functions or node content",
        detect=detect_render_props,
    ),
    Rule(
        name="context-provider",
        kind=PatternKind.PATTERN,
        description="Context provided or consumed for shared state",
        detect=detect_context_providers,
    ),
)


__all__ = [
    "BUILTIN_RULES",
    "detect_context_providers",
    "detect_custom_hooks",
    "detect_god_components",
    "detect_hook_overuse",
    "detect_prop_drilling",
    "detect_render_props",
]
