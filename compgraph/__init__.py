"""Component graph engine: components, flows and structural patterns of UI source trees."""

from .config import EngineConfig, load_config
from .engine import DuplicateFileIdError, Engine, analyze, analyze_directory
from .models import GraphResult

__version__ = "0.1.0"

__all__ = [
    "DuplicateFileIdError",
    "Engine",
    "EngineConfig",
    "GraphResult",
    "analyze",
    "analyze_directory",
    "load_config",
]
