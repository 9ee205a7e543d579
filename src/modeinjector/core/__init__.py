"""Core mode injector functionality: IR, color and value resolution, dependency ordering, two-phase batch sync."""

from . import ir
from .batch import apply_mode_to_collection, list_collection_summaries, run_batch
from .document_loader import TokenDocument, load_document, parse_document
from .errors import (
    CircularDependencyError,
    ColorParseError,
    ConfigError,
    DocumentError,
    ErrorContext,
    InjectorError,
    ModeLimitError,
    StoreError,
    StructuralError,
)
from .exporter import export_collections
from .graph import build_dependency_graph, plan_collections, topological_sort
from .manifest import InjectorConfig, load_config

__all__ = [
    "ir",
    # Batch
    "run_batch",
    "apply_mode_to_collection",
    "list_collection_summaries",
    # Documents
    "TokenDocument",
    "load_document",
    "parse_document",
    "export_collections",
    # Graph
    "build_dependency_graph",
    "plan_collections",
    "topological_sort",
    # Config
    "InjectorConfig",
    "load_config",
    # Errors
    "InjectorError",
    "DocumentError",
    "ConfigError",
    "StructuralError",
    "CircularDependencyError",
    "ModeLimitError",
    "StoreError",
    "ColorParseError",
    "ErrorContext",
]
