"""Name-matching heuristics used by flow derivation.

Each matcher is a small strategy object so the heuristics can be tuned (or
replaced) without touching the assembly mechanics in ``assembler.py``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from ..config import DEFAULT_PROVIDER_MARKER, DEFAULT_WRITER_EVENTS, MatcherConfig
from ..models import Component, HookKind, StateHook
from ..parser.hooks import HOOK_PREFIX

_CONTEXT_SUFFIX = "Context"


def _strip_hook_prefix(name: str) -> str:
    rest = name[len(HOOK_PREFIX):]
    if name.startswith(HOOK_PREFIX) and (not rest or rest[0].isupper()):
        return rest
    return name


@dataclass(frozen=True)
class ProviderMatcher:
    """Pairs context hooks with components marked as providers."""

    marker: str = DEFAULT_PROVIDER_MARKER

    def is_provider(self, component: Component) -> bool:
        return self.marker.lower() in component.name.lower()

    def context_name(self, hook: StateHook) -> str:
        """Context name of a hook: its argument (or name) without reserved affixes."""
        subject = hook.argument or hook.name
        subject = subject.rsplit(".", 1)[-1]
        subject = _strip_hook_prefix(subject)
        if subject.endswith(_CONTEXT_SUFFIX):
            subject = subject[: -len(_CONTEXT_SUFFIX)]
        return subject

    def match(self, context_name: str, components: Iterable[Component]) -> Optional[str]:
        if not context_name:
            return None
        needle = context_name.lower()
        candidates = sorted(
            component.id
            for component in components
            if self.is_provider(component) and needle in component.name.lower()
        )
        return candidates[0] if candidates else None


@dataclass(frozen=True)
class StateNameMatcher:
    """Infers state names, setter names and prop readers of state hooks."""

    def state_name(self, hook: StateHook) -> str:
        if hook.bindings:
            return hook.bindings[0]
        return ""

    def setter_name(self, hook: StateHook) -> Optional[str]:
        if len(hook.bindings) > 1:
            return hook.bindings[1]
        state = self.state_name(hook)
        if not state:
            return None
        return f"set{state[0].upper()}{state[1:]}"

    def reads(self, prop_name: str, state_name: str) -> bool:
        return bool(state_name) and state_name.lower() in prop_name.lower()


@dataclass(frozen=True)
class WriterEventMatcher:
    """Selects event handlers that conventionally write state."""

    events: Sequence[str] = field(default_factory=lambda: tuple(DEFAULT_WRITER_EVENTS))

    def handlers(self, component: Component) -> List[str]:
        names: List[str] = []
        for binding in component.event_bindings:
            if binding.event in self.events and binding.handler not in names:
                names.append(binding.handler)
        return names


@dataclass(frozen=True)
class Matchers:
    provider: ProviderMatcher = field(default_factory=ProviderMatcher)
    state: StateNameMatcher = field(default_factory=StateNameMatcher)
    writers: WriterEventMatcher = field(default_factory=WriterEventMatcher)

    @classmethod
    def from_config(cls, config: MatcherConfig) -> "Matchers":
        return cls(
            provider=ProviderMatcher(marker=config.provider_marker),
            writers=WriterEventMatcher(events=tuple(config.writer_events)),
        )


def owns_context_hook(component: Component) -> bool:
    return any(
        hook.kind is HookKind.CONTEXT or _CONTEXT_SUFFIX in hook.name for hook in component.hooks
    )


__all__ = [
    "Matchers",
    "ProviderMatcher",
    "StateNameMatcher",
    "WriterEventMatcher",
    "owns_context_hook",
]
