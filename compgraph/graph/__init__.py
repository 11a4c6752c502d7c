from .assembler import AssembledGraph, GraphAssembler, containment_depth, order_components
from .matchers import Matchers, ProviderMatcher, StateNameMatcher, WriterEventMatcher

__all__ = [
    "AssembledGraph",
    "GraphAssembler",
    "Matchers",
    "ProviderMatcher",
    "StateNameMatcher",
    "WriterEventMatcher",
    "containment_depth",
    "order_components",
]
