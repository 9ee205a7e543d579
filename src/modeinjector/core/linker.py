"""
Alias linking (phase 2).

Runs once every collection in the batch has been materialized and the
variable index has been refreshed. Each ``{Collection.Variable}`` value
is turned into an alias pointer to the target variable. Unresolved
references are recorded and skipped; this pass never aborts the batch.
"""

from __future__ import annotations

import logging

from ..store.protocol import VariableStore
from . import ir
from .errors import ErrorContext
from .materializer import assign_value
from .values import is_alias, split_alias
from .variable_index import VariableIndex

logger = logging.getLogger(__name__)


def _unresolved(result: ir.ProcessingResult, context: ErrorContext, raw: str, reason: str) -> None:
    message = f"{context.format()}: unresolved reference {raw.strip()} ({reason})"
    logger.warning(message)
    result.record_error(message)


async def link_collection(
    store: VariableStore,
    definition: ir.CollectionDefinition,
    index: VariableIndex,
    result: ir.ProcessingResult,
) -> None:
    """Link every alias value declared by one collection."""
    collection = index.collection_by_name(definition.name)
    if collection is None:
        result.record_error(f"{definition.name}: collection missing from store, aliases skipped")
        return

    for name, variable_def in definition.variables.items():
        variable = index.find_variable(definition.name, name)
        if variable is None:
            result.record_error(f"{definition.name}/{name}: variable missing, aliases skipped")
            continue

        for mode in collection.modes:
            raw = variable_def.value_for_mode(mode.name)
            if raw is None or not is_alias(raw):
                continue
            text = str(raw)
            context = ErrorContext(collection=definition.name, variable=name, mode=mode.name)
            ref = split_alias(text)
            if ref is None:
                _unresolved(result, context, text, "expected {Collection.Variable}")
                continue
            if index.collection_by_name(ref.collection) is None:
                _unresolved(result, context, text, f"collection '{ref.collection}' not found")
                continue
            target = index.find_variable(ref.collection, ref.name)
            if target is None:
                _unresolved(
                    result,
                    context,
                    text,
                    f"variable '{ref.name}' not found in '{ref.collection}'",
                )
                continue

            linked = ir.LinkedAlias(variable_id=target.id, data_type=target.resolved_type)
            if await assign_value(store, variable, mode, linked, result, context):
                result.aliases_linked += 1


async def link_aliases(
    store: VariableStore,
    collections: list[ir.CollectionDefinition],
    index: VariableIndex,
    result: ir.ProcessingResult,
) -> None:
    """
    Link aliases for every collection, in the order given.

    Args:
        store: Target variable store
        collections: Collection definitions (input order)
        index: Variable index refreshed after phase 1
        result: Accumulator for counters and per-item errors
    """
    for definition in collections:
        await link_collection(store, definition, index, result)
    logger.info("Linked %d aliases", result.aliases_linked)
