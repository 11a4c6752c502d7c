from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from compgraph.parser import ComponentExtractor, ParsedFile, SourceLoader, SourceTree
from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture(scope="session")
def loader() -> SourceLoader:
    return SourceLoader()


@pytest.fixture
def source_tree(loader: SourceLoader) -> Callable[..., SourceTree]:
    """Parse dedented source text into a `SourceTree`."""

    def _parse(code: str, file_id: str = "src/App.tsx") -> SourceTree:
        return loader.parse(file_id, textwrap.dedent(code).lstrip("\n"))

    return _parse


@pytest.fixture
def extract(source_tree: Callable[..., SourceTree]) -> Callable[..., ParsedFile]:
    """Parse source text and run the component extractor on it."""

    def _extract(code: str, file_id: str = "src/App.tsx") -> ParsedFile:
        return ComponentExtractor().extract(source_tree(code, file_id))

    return _extract
