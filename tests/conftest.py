"""Shared pytest fixtures for mode injector tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from modeinjector.core import ir
from modeinjector.store import InMemoryVariableStore


def make_collection(
    name: str,
    modes: list[str],
    variables: dict[str, dict[str, Any]] | None = None,
) -> ir.CollectionDefinition:
    """Build a CollectionDefinition from a compact ``{var: {type, mode: value}}`` dict."""
    parsed: dict[str, ir.VariableDefinition] = {}
    for var_name, data in (variables or {}).items():
        parsed[var_name] = ir.VariableDefinition(
            kind=data.get("type", "string"),
            values={key: value for key, value in data.items() if key not in ir.METADATA_KEYS},
        )
    return ir.CollectionDefinition(name=name, modes=modes, variables=parsed)


@pytest.fixture
def store() -> InMemoryVariableStore:
    """Return an empty in-memory variable store."""
    return InMemoryVariableStore()


@pytest.fixture
def brand() -> ir.CollectionDefinition:
    """Primitive collection with literal values only."""
    return make_collection(
        "Brand",
        ["light", "dark"],
        {
            "Primary": {"type": "color", "light": "#FF0000", "dark": "#CC0000"},
            "Gray.90": {"type": "color", "light": "#1A1A1A", "dark": "#1A1A1A"},
            "Radius": {"type": "number", "light": "8px", "dark": 8},
        },
    )


@pytest.fixture
def semantic() -> ir.CollectionDefinition:
    """Collection aliasing into Brand."""
    return make_collection(
        "Semantic",
        ["light", "dark"],
        {
            "surface/bg": {"type": "color", "light": "#FFFFFF", "dark": "{Brand.Gray.90}"},
            "accent": {"type": "color", "light": "{Brand.Primary}", "dark": "{Brand.Primary}"},
        },
    )


@pytest.fixture
def collections_doc(tmp_path: Path) -> Path:
    """Write a two-collection token document with the dependent listed first."""
    document = [
        {
            "name": "Semantic",
            "modes": ["light", "dark"],
            "variables": {
                "accent": {"type": "color", "light": "{Brand.Primary}", "dark": "{Brand.Primary}"}
            },
        },
        {
            "name": "Brand",
            "modes": ["light", "dark"],
            "variables": {
                "Primary": {"type": "color", "light": "#FF0000", "dark": "#CC0000"},
            },
        },
    ]
    path = tmp_path / "tokens.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture
def collection_factory():
    """Return the ``make_collection`` helper."""
    return make_collection
