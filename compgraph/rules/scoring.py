"""Complexity and confidence arithmetic shared by rules and metrics."""

from __future__ import annotations

import math

from ..models import Component, HookKind


def clamp_confidence(value: float) -> float:
    if math.isnan(value):
        return 0.0
    return min(max(value, 0.0), 1.0)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (1.5 -> 2, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def component_complexity(component: Component) -> float:
    """Unrounded complexity: props, hooks (effects and custom hooks weigh more) and children."""
    effects = len(component.hooks_of(HookKind.EFFECT))
    custom = len(component.hooks_of(HookKind.CUSTOM))
    return (
        1
        + 0.5 * len(component.props)
        + len(component.hooks)
        + 2 * effects
        + 1.5 * custom
        + 0.3 * len(component.children)
    )


def rounded_complexity(component: Component) -> int:
    return round_half_up(component_complexity(component))


__all__ = ["clamp_confidence", "component_complexity", "round_half_up", "rounded_complexity"]
