"""Project-level summary statistics over the finished component graph."""

from __future__ import annotations

from typing import Dict, Sequence, Set, Tuple

from .config import DEFAULT_DEPTH_CAP
from .graph.assembler import containment_depth
from .graph.matchers import ProviderMatcher
from .models import Component, HookKind, Metrics
from .rules.scoring import component_complexity


def aggregate(
    components: Sequence[Component],
    depth_cap: int = DEFAULT_DEPTH_CAP,
    provider: ProviderMatcher | None = None,
) -> Metrics:
    """Reduce the component set to a `Metrics` record; empty input yields zeros."""
    provider = provider or ProviderMatcher()
    hook_usage: Dict[str, int] = {kind.value: 0 for kind in HookKind}
    context_usages: Set[Tuple[str, str]] = set()
    total_complexity = 0.0

    for component in components:
        total_complexity += component_complexity(component)
        for hook in component.hooks:
            hook_usage[hook.kind.value] += 1
            if hook.kind is HookKind.CONTEXT:
                context_usages.add((component.id, provider.context_name(hook) or hook.name))

    count = len(components)
    return Metrics(
        component_count=count,
        hook_usage=hook_usage,
        complexity=total_complexity / count if count else 0.0,
        prop_depth=containment_depth(components, depth_cap),
        context_usage=len(context_usages),
    )


__all__ = ["aggregate"]
