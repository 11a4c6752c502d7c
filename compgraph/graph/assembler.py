"""Assembles the component graph from the complete component set."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import DEFAULT_DEPTH_CAP
from ..logging import get_logger
from ..models import Component, FlowSet, component_id
from .flows import derive_context_flows, derive_event_flows, derive_prop_flows, derive_state_flows
from .matchers import Matchers


@dataclass(frozen=True)
class AssembledGraph:
    """Components with resolved children plus every derived flow."""

    components: Tuple[Component, ...] = ()
    flows: FlowSet = field(default_factory=FlowSet)

    def component(self, component_id: str) -> Optional[Component]:
        for component in self.components:
            if component.id == component_id:
                return component
        return None


def order_components(components: Iterable[Component]) -> List[Component]:
    """Order by file id, keeping document order within a file and the first record of an id."""
    seen: Dict[str, Component] = {}
    for component in components:
        seen.setdefault(component.id, component)
    return sorted(seen.values(), key=lambda component: component.file_id)


class GraphAssembler:
    """Resolves containment and derives flows; a pure function of its input."""

    def __init__(self, matchers: Matchers | None = None) -> None:
        self.matchers = matchers or Matchers()
        self.logger = get_logger("graph.assembler")

    def assemble(self, components: Sequence[Component]) -> AssembledGraph:
        resolved = self.resolve_children(order_components(components))
        flows = FlowSet(
            state=tuple(derive_state_flows(resolved, self.matchers)),
            props=tuple(derive_prop_flows(resolved)),
            context=tuple(derive_context_flows(resolved, self.matchers)),
            events=tuple(derive_event_flows(resolved)),
        )
        self.logger.debug(
            "Assembled %d components: %d prop, %d state, %d context, %d event flows",
            len(resolved),
            len(flows.props),
            len(flows.state),
            len(flows.context),
            len(flows.events),
        )
        return AssembledGraph(components=tuple(resolved), flows=flows)

    def resolve_children(self, components: Sequence[Component]) -> List[Component]:
        """Return new component records whose children are resolved markup references."""
        by_id = {component.id: component for component in components}
        by_name: Dict[str, List[str]] = {}
        for component in components:
            by_name.setdefault(component.name, []).append(component.id)

        resolved: List[Component] = []
        for component in components:
            children: List[str] = []
            for reference in component.markup_refs:
                target = self._resolve(component, reference, by_id, by_name)
                if target is None:
                    self.logger.debug("Unresolved reference <%s> in %s", reference, component.id)
                    continue
                if target not in children:
                    children.append(target)
            resolved.append(replace(component, children=tuple(children)))
        return resolved

    @staticmethod
    def _resolve(
        component: Component,
        reference: str,
        by_id: Dict[str, Component],
        by_name: Dict[str, List[str]],
    ) -> Optional[str]:
        local = component_id(component.file_id, reference)
        if local in by_id:
            return local
        candidates = by_name.get(reference)
        if not candidates:
            return None
        return min(candidates)


def containment_depth(components: Sequence[Component], cap: int = DEFAULT_DEPTH_CAP) -> int:
    """Longest containment chain (in edges), reporting ``cap`` for deeper or cyclic chains."""
    children = {component.id: component.children for component in components}
    memo: Dict[Tuple[str, int], int] = {}

    def longest(node: str, budget: int) -> int:
        if budget <= 0:
            return 0
        key = (node, budget)
        cached = memo.get(key)
        if cached is not None:
            return cached
        depth = 0
        for child in children.get(node, ()):
            if child in children:
                depth = max(depth, 1 + longest(child, budget - 1))
        memo[key] = depth
        return depth

    return max((longest(node, cap) for node in children), default=0)


__all__ = ["AssembledGraph", "GraphAssembler", "containment_depth", "order_components"]
