"""
Collections document export.

Renders the current store back into the collections document shape the
loader reads, so an exported file can be edited and re-applied. Colors
are written as hex and alias pointers as ``{Collection.Variable}``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..store.models import StoreValue, StoreVariable, VariableAliasValue
from ..store.protocol import VariableStore
from . import ir

DATA_TYPE_KINDS: dict[str, str] = {
    ir.DataType.COLOR: ir.VariableKind.COLOR,
    ir.DataType.FLOAT: ir.VariableKind.NUMBER,
    ir.DataType.STRING: ir.VariableKind.STRING,
    ir.DataType.BOOLEAN: ir.VariableKind.BOOLEAN,
}


def _export_value(
    value: StoreValue,
    variables: dict[str, StoreVariable],
    collection_names: dict[str, str],
) -> Any:
    if isinstance(value, VariableAliasValue):
        target = variables.get(value.id)
        if target is None:
            return None
        return f"{{{collection_names.get(target.collection_id, '?')}.{target.name}}}"
    if isinstance(value, ir.RGBA):
        return value.to_hex()
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


async def export_collections(store: VariableStore) -> list[dict[str, Any]]:
    """
    Export every collection in the store.

    Returns:
        List of collection objects suitable for ``parse_document``
    """
    collections = await store.list_collections()
    variables = {variable.id: variable for variable in await store.list_all_variables()}
    collection_names = {collection.id: collection.name for collection in collections}

    exported: list[dict[str, Any]] = []
    for collection in collections:
        variables_out: dict[str, Any] = {}
        for variable_id in collection.variable_ids:
            variable = variables.get(variable_id)
            if variable is None:
                continue
            entry: dict[str, Any] = {"type": DATA_TYPE_KINDS[variable.resolved_type]}
            for mode in collection.modes:
                if mode.mode_id not in variable.values_by_mode:
                    continue
                value = _export_value(
                    variable.values_by_mode[mode.mode_id], variables, collection_names
                )
                if value is not None:
                    entry[mode.name] = value
            variables_out[variable.name] = entry

        exported.append(
            {
                "name": collection.name,
                "modes": [mode.name for mode in collection.modes],
                "variables": variables_out,
            }
        )
    return exported


async def export_document_file(store: VariableStore, output_path: Path) -> Path:
    """Export the store and write it as JSON.

    Args:
        store: Store to export.
        output_path: Path to write the document.

    Returns:
        Path to the written file.
    """
    document = await export_collections(store)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(document, indent=2),
        encoding="utf-8",
    )

    return output_path
