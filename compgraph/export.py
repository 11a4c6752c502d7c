"""JSON export of analysis results for downstream consumers."""

from __future__ import annotations

import json
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict

from .models import GraphResult

FORMAT_VERSION = 1


def result_to_dict(result: GraphResult) -> Dict[str, Any]:
    """Return a JSON-ready mapping of ``result``; enums become their values."""
    payload = _plain(asdict(result))
    payload["version"] = FORMAT_VERSION
    return payload


def dump_result(result: GraphResult, path: Path | None = None, *, indent: int | None = 2) -> str:
    """Serialise ``result`` deterministically and optionally write it to ``path``."""
    text = json.dumps(result_to_dict(result), indent=indent, sort_keys=True)
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
    return text


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(_plain(key)): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


__all__ = ["FORMAT_VERSION", "dump_result", "result_to_dict"]
