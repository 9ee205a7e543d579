"""
In-memory variable store.

A conforming VariableStore used by tests, dry runs, and as the base of
the JSON file store. Enforces the same rules a host design tool does:
new collections start with one default mode, no collection may hold more
than four modes, and values must match the variable's resolved type.
"""

from __future__ import annotations

import itertools
import logging

from ..core.errors import ModeLimitError, StoreError
from ..core.ir import RGBA, DataType
from .models import (
    MAX_MODES_PER_COLLECTION,
    StoreCollection,
    StoreMode,
    StoreValue,
    StoreVariable,
    VariableAliasValue,
)

logger = logging.getLogger(__name__)

DEFAULT_MODE_NAME = "Mode 1"


def value_matches_type(value: StoreValue, data_type: DataType) -> bool:
    """Check a literal store value against a resolved type."""
    if data_type == DataType.COLOR:
        return isinstance(value, RGBA)
    if data_type == DataType.BOOLEAN:
        return isinstance(value, bool)
    if data_type == DataType.FLOAT:
        return isinstance(value, int | float) and not isinstance(value, bool)
    if data_type == DataType.STRING:
        return isinstance(value, str)
    return False


class InMemoryVariableStore:
    """Variable store held entirely in process memory."""

    def __init__(self) -> None:
        self._collections: dict[str, StoreCollection] = {}
        self._variables: dict[str, StoreVariable] = {}
        self._collection_ids = itertools.count(1)
        self._variable_ids = itertools.count(1)

    # -------------------------------------------------------------------------
    # Collections and modes
    # -------------------------------------------------------------------------

    async def list_collections(self) -> list[StoreCollection]:
        return list(self._collections.values())

    async def get_collection_by_name(self, name: str) -> StoreCollection | None:
        for collection in self._collections.values():
            if collection.name == name:
                return collection
        return None

    async def get_collection_by_id(self, collection_id: str) -> StoreCollection | None:
        return self._collections.get(collection_id)

    async def create_collection(self, name: str) -> StoreCollection:
        number = self._next_id(self._collection_ids, self._collections, "VariableCollectionId:")
        collection = StoreCollection(
            id=f"VariableCollectionId:{number}",
            name=name,
            modes=[StoreMode(mode_id=f"{number}:0", name=DEFAULT_MODE_NAME)],
        )
        self._collections[collection.id] = collection
        logger.debug("Created collection %s (%s)", name, collection.id)
        return collection

    async def rename_mode(self, collection_id: str, mode_id: str, new_name: str) -> None:
        collection = self._require_collection(collection_id)
        for mode in collection.modes:
            if mode.mode_id == mode_id:
                mode.name = new_name
                return
        raise StoreError(f"Mode '{mode_id}' not found in collection '{collection.name}'")

    async def add_mode(self, collection_id: str, name: str) -> str:
        collection = self._require_collection(collection_id)
        if len(collection.modes) >= MAX_MODES_PER_COLLECTION:
            raise ModeLimitError(collection.name, name, MAX_MODES_PER_COLLECTION)
        prefix = collection.id.rsplit(":", 1)[-1]
        taken = {mode.mode_id for mode in collection.modes}
        index = len(collection.modes)
        while f"{prefix}:{index}" in taken:
            index += 1
        mode_id = f"{prefix}:{index}"
        collection.modes.append(StoreMode(mode_id=mode_id, name=name))
        return mode_id

    # -------------------------------------------------------------------------
    # Variables
    # -------------------------------------------------------------------------

    async def create_variable(
        self, name: str, collection_id: str, data_type: DataType
    ) -> StoreVariable:
        collection = self._require_collection(collection_id)
        if await self.get_variable_by_name(collection_id, name) is not None:
            raise StoreError(f"Variable '{name}' already exists in '{collection.name}'")
        number = self._next_id(self._variable_ids, self._variables, "VariableID:")
        variable = StoreVariable(
            id=f"VariableID:{number}",
            name=name,
            collection_id=collection_id,
            resolved_type=DataType(data_type),
        )
        self._variables[variable.id] = variable
        collection.variable_ids.append(variable.id)
        return variable

    async def get_variable_by_name(self, collection_id: str, name: str) -> StoreVariable | None:
        collection = self._collections.get(collection_id)
        if collection is None:
            return None
        for variable_id in collection.variable_ids:
            variable = self._variables[variable_id]
            if variable.name == name:
                return variable
        return None

    async def get_variable_by_id(self, variable_id: str) -> StoreVariable | None:
        return self._variables.get(variable_id)

    async def list_all_variables(self) -> list[StoreVariable]:
        return list(self._variables.values())

    async def set_value_for_mode(self, variable_id: str, mode_id: str, value: StoreValue) -> None:
        variable = self._variables.get(variable_id)
        if variable is None:
            raise StoreError(f"Variable '{variable_id}' not found")
        collection = self._require_collection(variable.collection_id)
        if not any(mode.mode_id == mode_id for mode in collection.modes):
            raise StoreError(f"Mode '{mode_id}' not found in collection '{collection.name}'")

        if isinstance(value, VariableAliasValue):
            target = self._variables.get(value.id)
            if target is None:
                raise StoreError(f"Alias target '{value.id}' not found")
            if target.id == variable.id:
                raise StoreError(f"Variable '{variable.name}' cannot alias itself")
            if target.resolved_type != variable.resolved_type:
                raise StoreError(
                    f"Cannot alias {variable.resolved_type} variable '{variable.name}' "
                    f"to {target.resolved_type} variable '{target.name}'"
                )
        elif not value_matches_type(value, variable.resolved_type):
            raise StoreError(
                f"Value {value!r} does not match {variable.resolved_type} "
                f"variable '{variable.name}'"
            )
        variable.values_by_mode[mode_id] = value

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_collection(self, collection_id: str) -> StoreCollection:
        collection = self._collections.get(collection_id)
        if collection is None:
            raise StoreError(f"Collection '{collection_id}' not found")
        return collection

    @staticmethod
    def _next_id(counter: itertools.count, existing: dict[str, object], prefix: str) -> int:
        while True:
            number = next(counter)
            if f"{prefix}{number}" not in existing:
                return number

    def _restore(
        self, collections: list[StoreCollection], variables: list[StoreVariable]
    ) -> None:
        """Replace the store contents with previously saved entities."""
        self._collections = {collection.id: collection for collection in collections}
        self._variables = {variable.id: variable for variable in variables}
        self._collection_ids = itertools.count(1)
        self._variable_ids = itertools.count(1)
