"""Core data models shared across compgraph components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


class ComponentKind(str, Enum):
    FUNCTION = "function"
    CLOSURE = "closure"
    CLASS = "class"


class HookKind(str, Enum):
    STATE = "state"
    REDUCER = "reducer"
    EFFECT = "effect"
    CONTEXT = "context"
    OTHER = "other"
    CUSTOM = "custom"


class PatternKind(str, Enum):
    PATTERN = "pattern"
    ANTI_PATTERN = "anti-pattern"


class FlowOrigin(str, Enum):
    """Whether a flow follows declared structure or a name heuristic."""

    STRUCTURAL = "structural"
    HEURISTIC = "heuristic"


@dataclass(frozen=True)
class Position:
    line: int
    column: int


@dataclass(frozen=True)
class SourceSpan:
    """Location of an extracted fact inside one source file (1-based)."""

    file_id: str
    start: Position
    end: Position


@dataclass(frozen=True)
class PropSpec:
    """A prop declared on a component's props type."""

    name: str
    type: str
    required: bool
    default: Optional[str] = None


@dataclass(frozen=True)
class StateHook:
    """A hook call recognised by naming convention.

    ``dependencies`` is ``None`` when the call has no dependency array and an
    empty tuple when the array is present but empty.
    """

    name: str
    kind: HookKind
    span: SourceSpan
    dependencies: Optional[Tuple[str, ...]] = None
    bindings: Tuple[str, ...] = ()
    argument: Optional[str] = None


@dataclass(frozen=True)
class EventBinding:
    """An ``on<Event>`` markup attribute and the handler it names."""

    event: str
    handler: str
    element: str
    span: SourceSpan


@dataclass(frozen=True)
class Component:
    """A UI-producing unit recognised in one file."""

    id: str
    name: str
    file_id: str
    kind: ComponentKind
    span: SourceSpan
    props: Tuple[PropSpec, ...] = ()
    hooks: Tuple[StateHook, ...] = ()
    children: Tuple[str, ...] = ()
    markup_refs: Tuple[str, ...] = ()
    event_bindings: Tuple[EventBinding, ...] = ()

    def hooks_of(self, kind: HookKind) -> Tuple[StateHook, ...]:
        return tuple(hook for hook in self.hooks if hook.kind is kind)


def component_id(file_id: str, name: str) -> str:
    return f"{file_id}#{name}"


@dataclass(frozen=True)
class PropFlow:
    source: str
    target: str
    prop_name: str
    prop_type: str
    required: bool
    origin: FlowOrigin = FlowOrigin.STRUCTURAL


@dataclass(frozen=True)
class StateFlow:
    owner: str
    hook_name: str
    hook_kind: HookKind
    span: SourceSpan
    readers: Tuple[str, ...] = ()
    writers: Tuple[str, ...] = ()
    origin: FlowOrigin = FlowOrigin.HEURISTIC


@dataclass(frozen=True)
class ContextFlow:
    context_name: str
    provider_id: Optional[str]
    consumer_ids: Tuple[str, ...] = ()
    origin: FlowOrigin = FlowOrigin.HEURISTIC


@dataclass(frozen=True)
class EventFlow:
    source: str
    event_type: str
    handler_ids: Tuple[str, ...] = ()
    origin: FlowOrigin = FlowOrigin.STRUCTURAL


@dataclass(frozen=True)
class FlowSet:
    """All derived flows of one analysis run."""

    state: Tuple[StateFlow, ...] = ()
    props: Tuple[PropFlow, ...] = ()
    context: Tuple[ContextFlow, ...] = ()
    events: Tuple[EventFlow, ...] = ()


@dataclass(frozen=True)
class Pattern:
    """A scored structural finding over the component graph."""

    id: str
    name: str
    kind: PatternKind
    confidence: float
    components: Tuple[str, ...]
    description: str
    suggestions: Tuple[str, ...] = ()
    span: Optional[SourceSpan] = None


@dataclass(frozen=True)
class Metrics:
    component_count: int = 0
    hook_usage: Dict[str, int] = field(default_factory=dict)
    complexity: float = 0.0
    prop_depth: int = 0
    context_usage: int = 0


@dataclass(frozen=True)
class Diagnostic:
    """Non-fatal problem recorded during a run."""

    file_id: Optional[str]
    code: str
    message: str
    severity: str = "error"


@dataclass(frozen=True)
class GraphResult:
    """The complete output of one analysis run."""

    components: Tuple[Component, ...] = ()
    state_flows: Tuple[StateFlow, ...] = ()
    prop_flows: Tuple[PropFlow, ...] = ()
    context_flows: Tuple[ContextFlow, ...] = ()
    event_flows: Tuple[EventFlow, ...] = ()
    patterns: Tuple[Pattern, ...] = ()
    metrics: Metrics = field(default_factory=Metrics)
    diagnostics: Tuple[Diagnostic, ...] = ()

    @property
    def flows(self) -> FlowSet:
        return FlowSet(
            state=self.state_flows,
            props=self.prop_flows,
            context=self.context_flows,
            events=self.event_flows,
        )
