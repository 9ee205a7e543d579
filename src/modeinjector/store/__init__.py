"""
Variable store interface and implementations.

- protocol.py: VariableStore protocol (the host capability set)
- memory.py: InMemoryVariableStore
- json_file.py: JsonFileVariableStore (in-memory store persisted as JSON)
"""

from .json_file import STORE_FILE, JsonFileVariableStore
from .memory import DEFAULT_MODE_NAME, InMemoryVariableStore
from .models import (
    MAX_MODES_PER_COLLECTION,
    StoreCollection,
    StoreMode,
    StoreValue,
    StoreVariable,
    VariableAliasValue,
)
from .protocol import VariableStore

__all__ = [
    "DEFAULT_MODE_NAME",
    "MAX_MODES_PER_COLLECTION",
    "STORE_FILE",
    "InMemoryVariableStore",
    "JsonFileVariableStore",
    "StoreCollection",
    "StoreMode",
    "StoreValue",
    "StoreVariable",
    "VariableAliasValue",
    "VariableStore",
]
