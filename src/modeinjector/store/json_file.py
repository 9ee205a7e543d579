"""
JSON snapshot persistence for the in-memory variable store.

The snapshot uses the key names host design tools export, so a snapshot
taken from a real file can be loaded directly::

    {
      "collections": [
        {"id": "VariableCollectionId:1", "name": "Brand",
         "modes": [{"modeId": "1:0", "name": "light"}],
         "variableIds": ["VariableID:1"]}
      ],
      "variables": [
        {"id": "VariableID:1", "name": "Primary",
         "variableCollectionId": "VariableCollectionId:1",
         "resolvedType": "COLOR",
         "valuesByMode": {"1:0": {"r": 1, "g": 0, "b": 0, "a": 1}}}
      ]
    }

Default location: {project_root}/variables.json
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..core.errors import StoreError
from ..core.ir import RGBA, DataType
from .memory import InMemoryVariableStore
from .models import StoreCollection, StoreMode, StoreValue, StoreVariable, VariableAliasValue

logger = logging.getLogger(__name__)

STORE_FILE = "variables.json"
ALIAS_TYPE = "VARIABLE_ALIAS"


# =============================================================================
# Value encoding
# =============================================================================


def encode_value(value: StoreValue) -> Any:
    """Convert a store value to its JSON form."""
    if isinstance(value, VariableAliasValue):
        return {"type": ALIAS_TYPE, "id": value.id}
    if isinstance(value, RGBA):
        return value.model_dump()
    return value


def decode_value(raw: Any, data_type: DataType) -> StoreValue:
    """Convert a JSON value back to a store value of ``data_type``."""
    if isinstance(raw, dict) and raw.get("type") == ALIAS_TYPE:
        return VariableAliasValue(id=str(raw["id"]))
    if data_type == DataType.COLOR:
        return RGBA(**raw)
    if data_type == DataType.FLOAT:
        return float(raw)
    if data_type == DataType.BOOLEAN:
        if not isinstance(raw, bool):
            raise StoreError(f"Expected a JSON boolean for BOOLEAN value, got {raw!r}")
        return raw
    return str(raw)


# =============================================================================
# Store
# =============================================================================


class JsonFileVariableStore(InMemoryVariableStore):
    """In-memory store backed by a JSON snapshot on disk."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path

    @classmethod
    def load(cls, path: Path) -> JsonFileVariableStore:
        """Load a snapshot. A missing file yields an empty store."""
        store = cls(path)
        if not path.exists():
            logger.info("No store snapshot at %s, starting empty", path)
            return store

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            collections = [
                StoreCollection(
                    id=item["id"],
                    name=item["name"],
                    modes=[
                        StoreMode(mode_id=mode["modeId"], name=mode["name"])
                        for mode in item.get("modes", [])
                    ],
                    variable_ids=list(item.get("variableIds", [])),
                )
                for item in data.get("collections", [])
            ]
            variables = []
            for item in data.get("variables", []):
                data_type = DataType(item["resolvedType"])
                variables.append(
                    StoreVariable(
                        id=item["id"],
                        name=item["name"],
                        collection_id=item["variableCollectionId"],
                        resolved_type=data_type,
                        values_by_mode={
                            mode_id: decode_value(raw, data_type)
                            for mode_id, raw in item.get("valuesByMode", {}).items()
                        },
                    )
                )
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Failed to load store snapshot {path}: {e}") from e
        except ValidationError as e:
            raise StoreError(f"Invalid color in store snapshot {path}: {e}") from e

        store._restore(collections, variables)
        logger.debug(
            "Loaded %d collections and %d variables from %s",
            len(collections),
            len(variables),
            path,
        )
        return store

    def to_dict(self) -> dict[str, Any]:
        """Serialize the whole store to the snapshot shape."""
        return {
            "collections": [
                {
                    "id": collection.id,
                    "name": collection.name,
                    "modes": [
                        {"modeId": mode.mode_id, "name": mode.name} for mode in collection.modes
                    ],
                    "variableIds": list(collection.variable_ids),
                }
                for collection in self._collections.values()
            ],
            "variables": [
                {
                    "id": variable.id,
                    "name": variable.name,
                    "variableCollectionId": variable.collection_id,
                    "resolvedType": str(variable.resolved_type),
                    "valuesByMode": {
                        mode_id: encode_value(value)
                        for mode_id, value in variable.values_by_mode.items()
                    },
                }
                for variable in self._variables.values()
            ],
        }

    def save(self) -> Path:
        """Write the snapshot atomically and return its path."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(self.to_dict(), indent=2)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".variables-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StoreError(f"Failed to save store snapshot {self.path}: {e}") from e
        logger.info("Saved store snapshot to %s", self.path)
        return self.path
