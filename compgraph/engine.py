"""Pipeline orchestration for one component-graph analysis run."""

from __future__ import annotations

from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .config import EngineConfig, load_config
from .discovery import SourceScanner
from .graph.assembler import AssembledGraph, GraphAssembler
from .graph.matchers import Matchers
from .logging import get_logger
from .metrics import aggregate
from .models import Component, Diagnostic, GraphResult
from .parser.components import ComponentExtractor, ParsedFile, ParseFailure
from .parser.source import SourceLoader, SourceTree
from .rules import Rule, discover_rules, evaluate_rules


class DuplicateFileIdError(ValueError):
    """Raised when the same file id appears more than once in one run."""


class Engine:
    """Runs parse-merge, assembly, then rules and metrics as atomic phases.

    Each call to :meth:`run` is independent: nothing computed for one run is
    kept on the engine.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        rules: Optional[Iterable[Rule]] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.extractor = ComponentExtractor(self.config.parser.component_bases)
        self.matchers = Matchers.from_config(self.config.matchers)
        self.assembler = GraphAssembler(self.matchers)
        self.rules = list(rules) if rules is not None else discover_rules(self.config.rules.enabled)
        self.logger = get_logger("engine")

    def run(self, sources: Sequence[SourceTree]) -> GraphResult:
        """Analyse one project's parsed files and return the complete result."""
        _check_file_ids(sources)
        self.logger.info("Analysing %d files", len(sources))

        buffers = self._parse_phase(sources)
        components: List[Component] = []
        diagnostics: List[Diagnostic] = []
        for buffer in buffers:
            components.extend(buffer.components)
            diagnostics.extend(buffer.diagnostics)
        self.logger.debug("Parse phase recognised %d components", len(components))

        graph = self.assembler.assemble(components)

        patterns, rule_diagnostics, metrics = self._analysis_phase(graph)
        diagnostics.extend(rule_diagnostics)
        self.logger.info(
            "Found %d components and %d patterns (%d diagnostics)",
            len(graph.components),
            len(patterns),
            len(diagnostics),
        )

        return GraphResult(
            components=graph.components,
            state_flows=graph.flows.state,
            prop_flows=graph.flows.props,
            context_flows=graph.flows.context,
            event_flows=graph.flows.events,
            patterns=tuple(patterns),
            metrics=metrics,
            diagnostics=tuple(diagnostics),
        )

    def _parse_phase(self, sources: Sequence[SourceTree]) -> List[ParsedFile]:
        ordered = sorted(sources, key=lambda source: source.file_id)
        workers = min(self.config.parser.workers, len(ordered))
        if workers <= 1:
            return [self._parse_file(source) for source in ordered]
        # Every file fills its own buffer; map() returns them in input order.
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="compgraph-parse") as pool:
            return list(pool.map(self._parse_file, ordered))

    def _parse_file(self, source: SourceTree) -> ParsedFile:
        try:
            return self.extractor.extract(source)
        except ParseFailure as exc:
            self.logger.warning("Skipping %s: %s", source.file_id, exc.reason)
            return ParsedFile(
                file_id=source.file_id,
                diagnostics=(Diagnostic(file_id=source.file_id, code="parse-failure", message=exc.reason),),
            )

    def _analysis_phase(self, graph: AssembledGraph):  # type: ignore[no-untyped-def]
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="compgraph-analysis") as pool:
            rules_future = pool.submit(evaluate_rules, self.rules, graph.components, graph.flows)
            metrics_future = pool.submit(
                aggregate,
                graph.components,
                self.config.graph.depth_cap,
                self.matchers.provider,
            )
            patterns, diagnostics = rules_future.result()
            metrics = metrics_future.result()
        return patterns, diagnostics, metrics


def _check_file_ids(sources: Sequence[SourceTree]) -> None:
    counts = Counter(source.file_id for source in sources)
    duplicates = sorted(file_id for file_id, count in counts.items() if count > 1)
    if duplicates:
        raise DuplicateFileIdError(f"Duplicate file ids: {', '.join(duplicates)}")


def analyze(sources: Sequence[SourceTree], config: EngineConfig | None = None) -> GraphResult:
    """Run the engine once with ``config`` (defaults when omitted)."""
    return Engine(config).run(sources)


def analyze_directory(
    path: str | Path,
    *,
    config: EngineConfig | None = None,
    rules: Optional[Iterable[Rule]] = None,
) -> GraphResult:
    """Discover, load and analyse every component source file below ``path``."""
    root = Path(path).expanduser().resolve()
    config = config or load_config(root)
    paths = SourceScanner(exclude_paths=config.exclude_paths).scan(root)
    trees, load_diagnostics = SourceLoader().load(root, paths)
    result = Engine(config, rules).run(trees)
    if not load_diagnostics:
        return result
    return replace(result, diagnostics=tuple(load_diagnostics) + result.diagnostics)


__all__ = ["DuplicateFileIdError", "Engine", "analyze", "analyze_directory"]
