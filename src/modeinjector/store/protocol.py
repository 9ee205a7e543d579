"""
Protocol defining the variable store capabilities the injector depends on.

Every call is awaited: the host store may suspend on any lookup, create,
or assignment. The injector assumes no other writer mutates the store
while a batch runs.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..core.ir import DataType
from .models import StoreCollection, StoreValue, StoreVariable


@runtime_checkable
class VariableStore(Protocol):
    """Collection, mode, and variable primitives of a host variable store."""

    async def list_collections(self) -> list[StoreCollection]: ...

    async def get_collection_by_name(self, name: str) -> StoreCollection | None: ...

    async def get_collection_by_id(self, collection_id: str) -> StoreCollection | None: ...

    async def create_collection(self, name: str) -> StoreCollection:
        """Create a collection holding exactly one default mode."""
        ...

    async def rename_mode(self, collection_id: str, mode_id: str, new_name: str) -> None: ...

    async def add_mode(self, collection_id: str, name: str) -> str:
        """Add a mode and return its id. Fails when the collection is at the mode cap."""
        ...

    async def create_variable(
        self, name: str, collection_id: str, data_type: DataType
    ) -> StoreVariable: ...

    async def get_variable_by_name(self, collection_id: str, name: str) -> StoreVariable | None: ...

    async def get_variable_by_id(self, variable_id: str) -> StoreVariable | None: ...

    async def list_all_variables(self) -> list[StoreVariable]: ...

    async def set_value_for_mode(
        self, variable_id: str, mode_id: str, value: StoreValue
    ) -> None: ...
