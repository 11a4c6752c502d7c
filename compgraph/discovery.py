"""Source discovery for projects handed to the engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .config import ConfigError, load_config
from .logging import get_logger

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "dist",
    "build",
    "coverage",
    ".next",
    ".cache",
    "__pycache__",
}

SOURCE_SUFFIXES = (".tsx", ".ts", ".jsx", ".js", ".mjs", ".cjs")

_EXCLUDED_MARKERS = (".spec.", ".test.", ".stories.")


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .compgraph.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def _build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = _build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def is_source_file(name: str) -> bool:
    lower = name.lower()
    if not lower.endswith(SOURCE_SUFFIXES) or lower.endswith(".d.ts"):
        return False
    return not any(marker in lower for marker in _EXCLUDED_MARKERS)


class SourceScanner:
    """Walks a project directory and lists the component source files to analyse."""

    def __init__(self, exclude_paths: Sequence[str] | None = None) -> None:
        # None reads exclude_paths from the root .compgraph.yml.
        self._excludes = list(exclude_paths) if exclude_paths is not None else None
        self.logger = get_logger("discovery")

    def scan(self, root: str | Path) -> List[str]:
        """Return sorted project-relative POSIX paths; these double as file ids."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Project path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {root}")

        rules = self._load_ignore_rules(root_path)
        paths = sorted(self._iter_files(root_path, rules))
        self.logger.debug("Discovered %d source files under %s", len(paths), root_path)
        return paths

    def _load_ignore_rules(self, root: Path) -> List[IgnoreRule]:
        rules = _parse_gitignore(root / ".gitignore")
        if self._excludes is not None:
            patterns = self._excludes
        else:
            try:
                patterns = load_config(root).exclude_paths
            except ConfigError as exc:
                self.logger.warning("Ignoring exclude_paths from invalid config: %s", exc)
                patterns = []
        for pattern in patterns:
            rule = _build_ignore_rule(pattern)
            if rule is not None:
                rules.append(rule)
        return rules

    @staticmethod
    def _iter_files(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[str]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept = []
            for name in dirnames:
                if name in _EXCLUDED_DIRS:
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _should_ignore(rel_path, True, rules):
                    continue
                kept.append(name)
            dirnames[:] = kept

            for filename in filenames:
                if not is_source_file(filename):
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, rules):
                    continue
                yield rel_path


__all__ = ["IgnoreRule", "SOURCE_SUFFIXES", "SourceScanner", "is_source_file"]
