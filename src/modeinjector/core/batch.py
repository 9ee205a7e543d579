"""
Batch orchestration.

Collections mode runs, in order:

1. Dependency graph build and topological sort
2. Phase 1: materialize every collection in sorted order
3. Variable index refresh
4. Phase 2: link aliases for every collection in input order

Phase 2 starts only after phase 1 has finished for the whole batch, so
an alias may point at any collection in the batch regardless of where
it landed in the sort.

The legacy flat-map mode adds one new mode to an existing collection
and fills it from a ``{variableName: rawValue}`` map.

Both entry points return a SyncReport and never raise: structural
errors abort the batch and are reported, per-item errors are recorded
and skipped.
"""

from __future__ import annotations

import logging
from typing import Any

from ..store.models import MAX_MODES_PER_COLLECTION, StoreMode
from ..store.protocol import VariableStore
from . import ir
from .errors import (
    CollectionNotFoundError,
    ColorParseError,
    ErrorContext,
    ModeLimitError,
    StoreError,
    StructuralError,
)
from .graph import build_dependency_graph, topological_sort
from .linker import link_aliases
from .materializer import assign_value, materialize_collection
from .values import is_alias, resolve_legacy
from .variable_index import VariableIndex

logger = logging.getLogger(__name__)


# =============================================================================
# Collections mode
# =============================================================================


async def run_batch(
    store: VariableStore,
    collections: list[ir.CollectionDefinition],
    *,
    strict_hex: bool = False,
) -> ir.SyncReport:
    """
    Materialize a batch of collection definitions and link their aliases.

    Args:
        store: Target variable store
        collections: Collection definitions in input order
        strict_hex: Treat malformed hex colors as per-item errors

    Returns:
        SyncReport with counters and the recorded errors
    """
    result = ir.ProcessingResult()

    try:
        graph = build_dependency_graph(collections)
        ordered = topological_sort(collections, graph)
    except StructuralError as e:
        logger.error("Batch rejected: %s", e.message)
        result.abort(e.message)
        return result.to_report()

    result.order = [definition.name for definition in ordered]
    logger.info("Processing %d collections: %s", len(ordered), " -> ".join(result.order))

    try:
        for definition in ordered:
            await materialize_collection(store, definition, result, strict_hex=strict_hex)

        index = await VariableIndex.build(store)
        await link_aliases(store, collections, index, result)
    except (StructuralError, StoreError) as e:
        logger.error("Batch aborted: %s", e.message)
        result.abort(e.message)

    report = result.to_report()
    logger.info(
        "Batch finished: %d/%d collections created/updated, %d/%d variables created/updated, "
        "%d errors",
        report.collections_created,
        report.collections_updated,
        report.variables_created,
        report.variables_updated,
        len(report.errors),
    )
    return report


# =============================================================================
# Legacy flat-map mode
# =============================================================================


async def apply_mode_to_collection(
    store: VariableStore,
    collection_id: str,
    mode_name: str,
    data: dict[str, ir.RawValue],
    *,
    strict_hex: bool = False,
) -> ir.SyncReport:
    """
    Add ``mode_name`` to an existing collection and fill it from a flat map.

    Variables are matched by exact name inside the collection; missing
    ones are created with the type inferred from their value. Aliases are
    looked up across all collections by name, with dots also tried as
    slashes.

    Args:
        store: Target variable store
        collection_id: Id of the collection receiving the new mode
        mode_name: Name of the mode to add
        data: Variable name to raw value
        strict_hex: Treat malformed hex colors as per-item errors

    Returns:
        SyncReport; ``mode_name`` is set on it
    """
    result = ir.ProcessingResult(mode_name=mode_name)

    try:
        collection = await store.get_collection_by_id(collection_id)
        if collection is None:
            raise CollectionNotFoundError(f"Collection not found: {collection_id}")
        if len(collection.modes) >= MAX_MODES_PER_COLLECTION:
            raise ModeLimitError(collection.name, mode_name, MAX_MODES_PER_COLLECTION)

        index = await VariableIndex.build(store)
        mode = StoreMode(mode_id=await store.add_mode(collection.id, mode_name), name=mode_name)
        result.order = [collection.name]

        for variable_name, raw in data.items():
            context = ErrorContext(collection=collection.name, variable=variable_name, mode=mode_name)
            try:
                resolved = resolve_legacy(raw, index, strict_hex=strict_hex)
            except ColorParseError as e:
                result.record_error(f"{context.format()}: {e.message}")
                resolved = None
            else:
                if resolved is None and is_alias(raw):
                    result.record_error(
                        f"{context.format()}: alias target not found for {str(raw).strip()}"
                    )

            variable = await store.get_variable_by_name(collection.id, variable_name)
            if variable is not None:
                result.variables_updated += 1
            elif resolved is not None:
                logger.info("Creating new variable: %s as %s", variable_name, resolved.data_type)
                variable = await store.create_variable(
                    variable_name, collection.id, resolved.data_type
                )
                result.variables_created += 1
            else:
                logger.warning("Could not infer type for: %s", variable_name)

            if variable is not None and resolved is not None:
                if await assign_value(store, variable, mode, resolved, result, context):
                    if isinstance(resolved, ir.LinkedAlias):
                        result.aliases_linked += 1
                    else:
                        result.values_set += 1
    except (StructuralError, StoreError) as e:
        logger.error("Mode update aborted: %s", e.message)
        result.abort(e.message)

    return result.to_report()


async def list_collection_summaries(store: VariableStore) -> list[dict[str, Any]]:
    """Id, name, and modes of every collection, for pickers and listings."""
    return [
        {
            "id": collection.id,
            "name": collection.name,
            "modes": [{"modeId": mode.mode_id, "name": mode.name} for mode in collection.modes],
        }
        for collection in await store.list_collections()
    ]
