"""Tree-sitter powered source loading."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Parser, Tree

from ..logging import get_logger
from ..models import Diagnostic

_DIALECT_BY_SUFFIX = {
    ".tsx": "tsx",
    ".ts": "typescript",
    ".jsx": "javascript",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}

DIALECTS = ("tsx", "typescript", "javascript")


@dataclass(frozen=True)
class SourceTree:
    """One parsed file handed to the engine."""

    file_id: str
    tree: Optional[Tree]
    source: bytes


def dialect_for(path: str) -> str:
    """Pick the grammar for a file name; unknown suffixes parse as TSX."""
    suffix = Path(path).suffix.lower()
    return _DIALECT_BY_SUFFIX.get(suffix, "tsx")


def _language(dialect: str) -> Language:
    if dialect == "tsx":
        return Language(tree_sitter_typescript.language_tsx())
    if dialect == "typescript":
        return Language(tree_sitter_typescript.language_typescript())
    if dialect == "javascript":
        return Language(tree_sitter_javascript.language())
    raise ValueError(f"Unsupported dialect '{dialect}'")


class SourceLoader:
    """Parses source text into `SourceTree` records, caching one parser per dialect."""

    def __init__(self) -> None:
        self._parsers: Dict[str, Parser] = {}
        self.logger = get_logger("parser.source")

    def parse(self, file_id: str, text: str | bytes, dialect: str | None = None) -> SourceTree:
        source = text.encode("utf-8") if isinstance(text, str) else text
        parser = self._get_parser(dialect or dialect_for(file_id))
        return SourceTree(file_id=file_id, tree=parser.parse(source), source=source)

    def load(
        self, root: Path, paths: Iterable[str]
    ) -> Tuple[List[SourceTree], List[Diagnostic]]:
        """Read and parse files below ``root``; unreadable files become diagnostics."""
        trees: List[SourceTree] = []
        diagnostics: List[Diagnostic] = []
        for rel_path in paths:
            path = root / rel_path
            try:
                raw = path.read_bytes()
                raw.decode("utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                self.logger.warning("Skipping %s: %s", rel_path, exc)
                diagnostics.append(
                    Diagnostic(file_id=rel_path, code="parse-failure", message=f"Unreadable source: {exc}")
                )
                continue
            trees.append(self.parse(rel_path, raw))
        return trees, diagnostics

    def _get_parser(self, dialect: str) -> Parser:
        parser = self._parsers.get(dialect)
        if parser is not None:
            return parser
        parser = Parser(_language(dialect))
        self._parsers[dialect] = parser
        return parser


__all__ = ["DIALECTS", "SourceLoader", "SourceTree", "dialect_for"]
