"""
Token definition IR types.

A batch is a list of CollectionDefinitions. Each collection declares an
ordered list of modes (the first is the default mode) and a set of
variables whose raw values may differ per mode.

Example document (JSON)::

    [
      {
        "name": "Semantic",
        "modes": ["light", "dark"],
        "variables": {
          "surface/bg": {"type": "color", "light": "#FFFFFF", "dark": "{Brand.Gray.90}"}
        }
      }
    ]
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .values import DataType, RawValue

# Keys of a variable entry that describe the variable rather than a mode value
METADATA_KEYS: frozenset[str] = frozenset({"type", "description", "unit"})


class VariableKind(StrEnum):
    """Declared token kinds understood by the resolver."""

    COLOR = "color"
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    BOX_SHADOW = "boxShadow"


KIND_DATA_TYPES: dict[str, DataType] = {
    VariableKind.COLOR: DataType.COLOR,
    VariableKind.NUMBER: DataType.FLOAT,
    VariableKind.STRING: DataType.STRING,
    VariableKind.BOOLEAN: DataType.BOOLEAN,
    VariableKind.BOX_SHADOW: DataType.STRING,
}


def data_type_for_kind(kind: str) -> DataType:
    """Map a declared kind to the store type. Unrecognized kinds become STRING."""
    return KIND_DATA_TYPES.get(kind, DataType.STRING)


class VariableDefinition(BaseModel):
    """
    One token inside a collection.

    Attributes:
        kind: Declared kind (see VariableKind); unknown kinds are kept as-is
        description: Optional human description, never stored as a value
        unit: Optional unit hint, never stored as a value
        values: Raw value per mode name; modes may be missing
    """

    model_config = ConfigDict(frozen=True)

    kind: str = VariableKind.STRING
    description: str | None = None
    unit: str | None = None
    values: dict[str, RawValue] = Field(default_factory=dict)

    @property
    def data_type(self) -> DataType:
        return data_type_for_kind(self.kind)

    def value_for_mode(self, mode_name: str) -> RawValue | None:
        """Raw value for a mode, skipping metadata keys."""
        if mode_name in METADATA_KEYS:
            return None
        return self.values.get(mode_name)


class CollectionDefinition(BaseModel):
    """
    A named collection of variables sharing an ordered list of modes.

    The collection name is both the graph node key and the namespace
    other collections use in ``{Name.variable}`` references.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str | None = None
    modes: list[str] = Field(min_length=1)
    variables: dict[str, VariableDefinition] = Field(default_factory=dict)

    @field_validator("modes")
    @classmethod
    def _unique_modes(cls, modes: list[str]) -> list[str]:
        seen: set[str] = set()
        for mode in modes:
            if not mode:
                raise ValueError("mode names must be non-empty")
            if mode in seen:
                raise ValueError(f"duplicate mode '{mode}'")
            seen.add(mode)
        return modes

    @property
    def default_mode(self) -> str:
        return self.modes[0]
