"""
Rebuildable lookup table over the variable store.

The index is built once at batch start and rebuilt after phase 1 so the
linking pass sees every collection and variable the batch created. It is
passed explicitly to whoever needs it; there is no module-level cache.

Two addressing conventions are served, deliberately kept apart:

- Collections mode: exact collection name, then exact variable name
  within that collection (``find_variable``).
- Legacy flat-map mode: one flat list of every variable in every
  collection, matched by exact name or by the name with ``.`` replaced by
  ``/`` (``find_by_legacy_name``). Token tools write ``Gray.90`` where
  the store names the variable ``Gray/90``.
"""

from __future__ import annotations

import logging

from ..store.models import StoreCollection, StoreVariable
from ..store.protocol import VariableStore

logger = logging.getLogger(__name__)


class VariableIndex:
    """Name-keyed view of the store's collections and variables."""

    def __init__(
        self,
        collections: list[StoreCollection] | None = None,
        variables: list[StoreVariable] | None = None,
    ) -> None:
        self._collections: dict[str, StoreCollection] = {}
        self._variables: list[StoreVariable] = []
        self._by_collection: dict[str, dict[str, StoreVariable]] = {}
        self._load(collections or [], variables or [])

    @classmethod
    async def build(cls, store: VariableStore) -> VariableIndex:
        index = cls()
        await index.refresh(store)
        return index

    async def refresh(self, store: VariableStore) -> None:
        """Re-read every collection and variable from the store."""
        collections = await store.list_collections()
        variables = await store.list_all_variables()
        self._load(collections, variables)
        logger.debug(
            "Variable index refreshed: %d collections, %d variables",
            len(collections),
            len(variables),
        )

    def _load(self, collections: list[StoreCollection], variables: list[StoreVariable]) -> None:
        self._collections = {}
        for collection in collections:
            # First collection wins when names collide
            self._collections.setdefault(collection.name, collection)
        self._variables = list(variables)
        self._by_collection = {}
        for variable in variables:
            names = self._by_collection.setdefault(variable.collection_id, {})
            names.setdefault(variable.name, variable)

    def __len__(self) -> int:
        return len(self._variables)

    @property
    def variables(self) -> list[StoreVariable]:
        return list(self._variables)

    def collection_by_name(self, name: str) -> StoreCollection | None:
        return self._collections.get(name)

    def find_variable(self, collection_name: str, variable_name: str) -> StoreVariable | None:
        """Exact-name lookup used by the collections-mode linker."""
        collection = self._collections.get(collection_name)
        if collection is None:
            return None
        return self._by_collection.get(collection.id, {}).get(variable_name)

    def find_by_legacy_name(self, reference: str) -> StoreVariable | None:
        """Flat lookup used by legacy aliases: exact name, or dots read as slashes."""
        slashed = reference.replace(".", "/")
        for variable in self._variables:
            if variable.name == reference or variable.name == slashed:
                return variable
        return None
