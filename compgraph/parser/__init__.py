"""Source-tree parsing: tree-sitter loading and component recognition."""

from .components import ComponentExtractor, ParsedFile, ParseFailure
from .hooks import classify_hook, is_hook_name
from .source import SourceLoader, SourceTree, dialect_for

__all__ = [
    "ComponentExtractor",
    "ParseFailure",
    "ParsedFile",
    "SourceLoader",
    "SourceTree",
    "classify_hook",
    "dialect_for",
    "is_hook_name",
]
