"""Rule records and isolated rule evaluation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Iterable, List, Sequence, Tuple

from ..logging import get_logger
from ..models import Component, Diagnostic, FlowSet, Pattern, PatternKind
from .scoring import clamp_confidence

Detector = Callable[[Sequence[Component], FlowSet], Iterable[Pattern]]


@dataclass(frozen=True)
class Rule:
    """A named, pure detector over the finished graph."""

    name: str
    kind: PatternKind
    description: str
    detect: Detector


def evaluate_rules(
    rules: Sequence[Rule], components: Sequence[Component], flows: FlowSet
) -> Tuple[List[Pattern], List[Diagnostic]]:
    """Run every rule in isolation and rank the findings by confidence.

    A rule that raises contributes no patterns and a ``rule-failure``
    diagnostic; the remaining rules still run. Ties keep registration order.
    """
    logger = get_logger("rules")
    patterns: List[Pattern] = []
    diagnostics: List[Diagnostic] = []
    for rule in rules:
        try:
            found = list(rule.detect(components, flows))
        except Exception as exc:  # one rule never aborts the others
            logger.warning("Rule '%s' failed: %s", rule.name, exc)
            diagnostics.append(
                Diagnostic(file_id=None, code="rule-failure", message=f"{rule.name}: {exc}")
            )
            continue
        logger.debug("Rule '%s' produced %d patterns", rule.name, len(found))
        patterns.extend(replace(pattern, confidence=clamp_confidence(pattern.confidence)) for pattern in found)

    patterns.sort(key=lambda pattern: -pattern.confidence)
    return patterns, diagnostics


__all__ = ["Detector", "Rule", "evaluate_rules"]
