"""Pattern rule registry and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Iterable, List, Sequence, Set

from .base import Detector, Rule, evaluate_rules
from .builtin import BUILTIN_RULES
from .scoring import clamp_confidence, component_complexity, rounded_complexity

_ENTRY_POINT_GROUP = "compgraph.rules"


def discover_rules(enabled: Sequence[str] | None = None) -> List[Rule]:
    """Return registered rules in registration order, honoring optional enabled names."""

    enabled_set: Set[str] | None = None
    if enabled:
        enabled_set = {name.lower() for name in enabled}

    rules: List[Rule] = []
    seen: Set[str] = set()

    def _add(rule: Rule) -> None:
        key = rule.name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        rules.append(rule)
        seen.add(key)

    for rule in BUILTIN_RULES:
        _add(rule)

    for entry in _iter_entry_points():
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - plugin import errors
            raise RuntimeError(f"Failed to load rule entry point '{entry.name}': {exc}") from exc
        _add(_coerce_rule(entry.name, loaded))

    if enabled_set:
        missing = enabled_set - seen
        if missing:
            raise ValueError(f"Unknown rules requested: {', '.join(sorted(missing))}")

    return rules


def _coerce_rule(name: str, obj: object) -> Rule:
    if isinstance(obj, Rule):
        return obj
    if callable(obj):
        produced = obj()
        if isinstance(produced, Rule):
            return produced
    raise TypeError(f"Rule entry point '{name}' must be a Rule or a factory returning one")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "BUILTIN_RULES",
    "Detector",
    "Rule",
    "clamp_confidence",
    "component_complexity",
    "discover_rules",
    "evaluate_rules",
    "rounded_complexity",
]
