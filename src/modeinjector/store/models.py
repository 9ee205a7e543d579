"""
Variable store entities.

These mirror what a host design tool exposes: collections with ordered
modes, and typed variables holding one value per mode id. Ids are
assigned by the store, never by the injector.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..core.ir import RGBA, DataType

MAX_MODES_PER_COLLECTION = 4


@dataclass
class StoreMode:
    mode_id: str
    name: str


@dataclass
class StoreCollection:
    """A collection as held by the store."""

    id: str
    name: str
    modes: list[StoreMode] = field(default_factory=list)
    variable_ids: list[str] = field(default_factory=list)

    def mode_by_name(self, name: str) -> StoreMode | None:
        for mode in self.modes:
            if mode.name == name:
                return mode
        return None

    @property
    def default_mode(self) -> StoreMode:
        return self.modes[0]


@dataclass(frozen=True)
class VariableAliasValue:
    """A mode value that points at another variable."""

    id: str


StoreValue = RGBA | bool | float | str | VariableAliasValue


@dataclass
class StoreVariable:
    """A typed variable with a value slot per mode id."""

    id: str
    name: str
    collection_id: str
    resolved_type: DataType
    values_by_mode: dict[str, StoreValue] = field(default_factory=dict)
