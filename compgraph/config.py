"""Configuration loading for compgraph (.compgraph.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".compgraph.yml"

DEFAULT_WORKERS = 4
DEFAULT_DEPTH_CAP = 25
MAX_DEPTH_CAP = 500
DEFAULT_COMPONENT_BASES = ("Component", "PureComponent")
DEFAULT_PROVIDER_MARKER = "provider"
DEFAULT_WRITER_EVENTS = ("onClick", "onChange", "onSubmit", "onInput")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ParserConfig:
    """Source-tree parser settings."""

    workers: int = DEFAULT_WORKERS
    component_bases: List[str] = field(default_factory=lambda: list(DEFAULT_COMPONENT_BASES))


@dataclass
class GraphConfig:
    """Graph assembly settings."""

    depth_cap: int = DEFAULT_DEPTH_CAP


@dataclass
class MatcherConfig:
    """Tuning knobs for the name-matching heuristics."""

    provider_marker: str = DEFAULT_PROVIDER_MARKER
    writer_events: List[str] = field(default_factory=lambda: list(DEFAULT_WRITER_EVENTS))


@dataclass
class RuleConfig:
    """Rule enablement; an empty list runs every registered rule."""

    enabled: List[str] = field(default_factory=list)


@dataclass
class EngineConfig:
    """Represents the settings defined in .compgraph.yml."""

    root: Optional[Path] = None
    parser: ParserConfig = field(default_factory=ParserConfig)
    graph: GraphConfig = field(default_factory=GraphConfig)
    matchers: MatcherConfig = field(default_factory=MatcherConfig)
    rules: RuleConfig = field(default_factory=RuleConfig)
    exclude_paths: List[str] = field(default_factory=list)


def load_config(config_path: Path) -> EngineConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return EngineConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    parser = ParserConfig()
    parser_data = _as_dict(data.get("parser"))
    if parser_data:
        workers = _as_int(parser_data.get("workers"))
        if workers is not None:
            if workers < 1:
                raise ConfigError("parser.workers must be at least 1")
            parser.workers = workers
        bases = _as_str_list(parser_data.get("component_bases"))
        if bases:
            parser.component_bases = bases

    graph = GraphConfig()
    graph_data = _as_dict(data.get("graph"))
    if graph_data:
        depth_cap = _as_int(graph_data.get("depth_cap"))
        if depth_cap is not None:
            if not 1 <= depth_cap <= MAX_DEPTH_CAP:
                raise ConfigError(f"graph.depth_cap must be between 1 and {MAX_DEPTH_CAP}")
            graph.depth_cap = depth_cap

    matchers = MatcherConfig()
    matcher_data = _as_dict(data.get("matchers"))
    if matcher_data:
        marker = _as_str(matcher_data.get("provider_marker"))
        if marker:
            matchers.provider_marker = marker
        events = _as_str_list(matcher_data.get("writer_events"))
        if events:
            matchers.writer_events = events

    rules = RuleConfig()
    rule_data = _as_dict(data.get("rules"))
    if rule_data:
        rules.enabled = _as_str_list(rule_data.get("enabled"))

    return EngineConfig(
        root=root,
        parser=parser,
        graph=graph,
        matchers=matchers,
        rules=rules,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "EngineConfig",
    "GraphConfig",
    "MatcherConfig",
    "ParserConfig",
    "RuleConfig",
    "load_config",
]
