"""
Resolved value IR types.

A raw token value is resolved into one of three shapes before it reaches
the store:

- ``Literal``: a canonical primitive plus its store-native data type
- ``AliasRef``: a ``{Collection.Variable}`` reference not yet linked
- ``LinkedAlias``: a pointer to a concrete store variable
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

RawValue = str | int | float | bool | dict[str, Any] | list[Any]


class DataType(StrEnum):
    """Store-native variable types."""

    COLOR = "COLOR"
    FLOAT = "FLOAT"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"


class RGBA(BaseModel):
    """Canonical color: four channels in the unit interval."""

    model_config = ConfigDict(frozen=True)

    r: float = Field(ge=0.0, le=1.0)
    g: float = Field(ge=0.0, le=1.0)
    b: float = Field(ge=0.0, le=1.0)
    a: float = Field(default=1.0, ge=0.0, le=1.0)

    def to_hex(self) -> str:
        """Render as #RRGGBB, or #RRGGBBAA when not fully opaque."""
        channels = [self.r, self.g, self.b]
        if self.a < 1.0:
            channels.append(self.a)
        return "#" + "".join(f"{round(c * 255):02X}" for c in channels)


LiteralPrimitive = RGBA | bool | float | str


class Literal(BaseModel):
    """A concrete value ready to be stored in a mode slot."""

    model_config = ConfigDict(frozen=True)

    value: LiteralPrimitive
    data_type: DataType


class AliasRef(BaseModel):
    """Reference to ``collection.name`` awaiting the linking pass."""

    model_config = ConfigDict(frozen=True)

    collection: str
    name: str

    @property
    def reference(self) -> str:
        return f"{{{self.collection}.{self.name}}}"


class LinkedAlias(BaseModel):
    """Alias resolved to a store variable id."""

    model_config = ConfigDict(frozen=True)

    variable_id: str
    data_type: DataType


ResolvedValue = Literal | AliasRef | LinkedAlias
