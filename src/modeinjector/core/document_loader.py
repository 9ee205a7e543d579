"""
Token document loading.

Reads a token document (JSON or YAML) and turns it into one of the two
batch shapes the orchestrator accepts:

- Collections document: a list of collection objects, or an object with
  a ``collections`` list
- Flat document: ``{variableName: rawValue}`` applied as one new mode of
  an existing collection

Collection object layout::

    name: Semantic
    description: Theme-aware aliases     # optional
    modes: [light, dark]
    variables:
      surface/bg:
        type: color                       # color | number | string | boolean | boxShadow
        description: Page background      # optional, not stored as a value
        light: "#FFFFFF"
        dark: "{Brand.Gray.90}"
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from . import ir
from .errors import DocumentError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = frozenset({".yaml", ".yml"})


@dataclass
class TokenDocument:
    """A parsed document: exactly one of ``collections`` or ``flat`` is used."""

    collections: list[ir.CollectionDefinition] = field(default_factory=list)
    flat: dict[str, ir.RawValue] | None = None

    @property
    def is_flat(self) -> bool:
        return self.flat is not None


# =============================================================================
# Parsing
# =============================================================================


def _is_scalar(value: Any) -> bool:
    return isinstance(value, str | int | float | bool)


def _parse_variable(collection: str, name: str, data: Any) -> ir.VariableDefinition:
    if not isinstance(data, dict):
        raise DocumentError(
            f"Variable '{name}' in collection '{collection}' must be an object "
            f"with a type and per-mode values, got {type(data).__name__}"
        )
    values = {
        str(key): value
        for key, value in data.items()
        if key not in ir.METADATA_KEYS and value is not None
    }
    return ir.VariableDefinition(
        kind=str(data.get("type", ir.VariableKind.STRING)),
        description=data.get("description"),
        unit=data.get("unit"),
        values=values,
    )


def _parse_collection(data: Any, position: int) -> ir.CollectionDefinition:
    if not isinstance(data, dict):
        raise DocumentError(f"Collection #{position + 1} must be an object")
    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise DocumentError(f"Collection #{position + 1} has no name")

    variables_data = data.get("variables") or {}
    if not isinstance(variables_data, dict):
        raise DocumentError(f"Collection '{name}': 'variables' must be an object")

    try:
        variables = {
            str(var_name): _parse_variable(name, str(var_name), var_data)
            for var_name, var_data in variables_data.items()
        }
        return ir.CollectionDefinition(
            name=name,
            description=data.get("description"),
            modes=[str(mode) for mode in data.get("modes") or []],
            variables=variables,
        )
    except ValidationError as e:
        raise DocumentError(f"Invalid collection '{name}': {e}") from e


def parse_document(data: Any) -> TokenDocument:
    """
    Classify and parse already-decoded document data.

    Raises:
        DocumentError: If the data matches neither batch shape
    """
    if isinstance(data, dict) and isinstance(data.get("collections"), list):
        data = data["collections"]

    if isinstance(data, list):
        collections = [_parse_collection(item, i) for i, item in enumerate(data)]
        names = [collection.name for collection in collections]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise DocumentError(f"Duplicate collection names: {', '.join(duplicates)}")
        return TokenDocument(collections=collections)

    if isinstance(data, dict):
        non_scalar = [key for key, value in data.items() if not _is_scalar(value)]
        if non_scalar:
            raise DocumentError(
                "Flat token maps may only hold strings, numbers, and booleans; "
                f"offending keys: {', '.join(map(str, non_scalar[:5]))}"
            )
        return TokenDocument(flat={str(key): value for key, value in data.items()})

    raise DocumentError(
        "Token document must be a list of collections or a flat {name: value} map, "
        f"got {type(data).__name__}"
    )


def parse_document_text(text: str, *, yaml_syntax: bool = False) -> TokenDocument:
    """Decode JSON (default) or YAML text and parse it."""
    try:
        data = yaml.safe_load(text) if yaml_syntax else json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentError(f"Invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}") from e
    except yaml.YAMLError as e:
        raise DocumentError(f"Invalid YAML: {e}") from e
    return parse_document(data)


def load_document(path: Path) -> TokenDocument:
    """
    Load a token document from disk. ``.yaml``/``.yml`` files are read as
    YAML, everything else as JSON.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentError(f"Cannot read token document {path}: {e}") from e

    document = parse_document_text(text, yaml_syntax=path.suffix.lower() in YAML_SUFFIXES)
    if document.is_flat:
        logger.info("Loaded flat token map with %d entries from %s", len(document.flat or {}), path)
    else:
        logger.info("Loaded %d collections from %s", len(document.collections), path)
    return document
