"""
Mode injector Intermediate Representation (IR) types.

All types are re-exported from this package.
"""

from .report import (
    DEFAULT_ERROR_LIMIT,
    ProcessingResult,
    SyncReport,
)
from .tokens import (
    KIND_DATA_TYPES,
    METADATA_KEYS,
    CollectionDefinition,
    VariableDefinition,
    VariableKind,
    data_type_for_kind,
)
from .values import (
    RGBA,
    AliasRef,
    DataType,
    LinkedAlias,
    Literal,
    RawValue,
    ResolvedValue,
)

__all__ = [
    # Values
    "RGBA",
    "AliasRef",
    "DataType",
    "LinkedAlias",
    "Literal",
    "RawValue",
    "ResolvedValue",
    # Definitions
    "KIND_DATA_TYPES",
    "METADATA_KEYS",
    "CollectionDefinition",
    "VariableDefinition",
    "VariableKind",
    "data_type_for_kind",
    # Reports
    "DEFAULT_ERROR_LIMIT",
    "ProcessingResult",
    "SyncReport",
]
