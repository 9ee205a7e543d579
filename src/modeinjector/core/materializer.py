"""
Collection and variable materialization (phase 1).

Upserts one collection definition into the variable store: the
collection itself, its modes, its variables, and every literal value.
Alias values are left for the linking pass, which runs only after every
collection in the batch has been materialized.
"""

from __future__ import annotations

import logging

from ..store.models import (
    MAX_MODES_PER_COLLECTION,
    StoreCollection,
    StoreMode,
    StoreValue,
    StoreVariable,
    VariableAliasValue,
)
from ..store.protocol import VariableStore
from . import ir
from .errors import ColorParseError, ErrorContext, ModeLimitError, StoreError
from .values import is_alias, resolve_first_pass

logger = logging.getLogger(__name__)


async def assign_value(
    store: VariableStore,
    variable: StoreVariable,
    mode: StoreMode,
    resolved: ir.Literal | ir.LinkedAlias,
    result: ir.ProcessingResult,
    context: ErrorContext,
) -> bool:
    """
    Write a resolved value into one mode slot.

    A value whose data type differs from the variable's resolved type is
    not applied. Mismatches and store rejections are recorded on
    ``result`` and never raised.

    Returns:
        True when the store accepted the value
    """
    if variable.resolved_type != resolved.data_type:
        message = (
            f"{context.format()}: type mismatch, variable is {variable.resolved_type} "
            f"but value is {resolved.data_type}"
        )
        logger.warning(message)
        result.record_error(message)
        return False

    value: StoreValue
    if isinstance(resolved, ir.LinkedAlias):
        value = VariableAliasValue(id=resolved.variable_id)
    else:
        value = resolved.value

    try:
        await store.set_value_for_mode(variable.id, mode.mode_id, value)
    except StoreError as e:
        message = f"{context.format()}: failed to set value: {e.message}"
        logger.warning(message)
        result.record_error(message)
        return False

    logger.debug("Set %s = %r", context.format(), value)
    return True


async def _ensure_collection(
    store: VariableStore, definition: ir.CollectionDefinition, result: ir.ProcessingResult
) -> tuple[StoreCollection, bool]:
    collection = await store.get_collection_by_name(definition.name)
    if collection is None:
        collection = await store.create_collection(definition.name)
        result.collections_created += 1
        logger.info("Created collection '%s'", definition.name)
        return collection, True
    result.collections_updated += 1
    logger.info("Updating collection '%s'", definition.name)
    return collection, False


async def _ensure_modes(
    store: VariableStore,
    collection: StoreCollection,
    definition: ir.CollectionDefinition,
    created: bool,
) -> StoreCollection:
    """Rename the default mode of a new collection, then add missing modes."""
    mode_names = [mode.name for mode in collection.modes]

    if created and collection.modes:
        default = collection.default_mode
        if default.name != definition.default_mode:
            await store.rename_mode(collection.id, default.mode_id, definition.default_mode)
        mode_names[0] = definition.default_mode

    for mode_name in definition.modes:
        if mode_name in mode_names:
            continue
        if len(mode_names) >= MAX_MODES_PER_COLLECTION:
            raise ModeLimitError(definition.name, mode_name, MAX_MODES_PER_COLLECTION)
        await store.add_mode(collection.id, mode_name)
        mode_names.append(mode_name)
        logger.info("Added mode '%s' to '%s'", mode_name, definition.name)

    refreshed = await store.get_collection_by_id(collection.id)
    if refreshed is None:
        raise StoreError(f"Collection '{definition.name}' disappeared during processing")
    return refreshed


async def _ensure_variable(
    store: VariableStore,
    collection: StoreCollection,
    name: str,
    definition: ir.VariableDefinition,
    result: ir.ProcessingResult,
) -> StoreVariable:
    variable = await store.get_variable_by_name(collection.id, name)
    if variable is None:
        variable = await store.create_variable(name, collection.id, definition.data_type)
        result.variables_created += 1
        logger.debug("Created variable '%s' as %s", name, definition.data_type)
    else:
        result.variables_updated += 1
    return variable


async def materialize_collection(
    store: VariableStore,
    definition: ir.CollectionDefinition,
    result: ir.ProcessingResult,
    *,
    strict_hex: bool = False,
) -> StoreCollection:
    """
    Create or update a collection and assign all of its literal values.

    Every mode present on the stored collection is considered, not just
    the declared ones, so values for modes created by earlier runs are
    refreshed too.

    Args:
        store: Target variable store
        definition: Collection to materialize
        result: Accumulator for counters and per-item errors
        strict_hex: Record malformed hex as an error instead of storing black

    Returns:
        The stored collection

    Raises:
        ModeLimitError: If the declared modes do not fit in the collection
    """
    collection, created = await _ensure_collection(store, definition, result)
    collection = await _ensure_modes(store, collection, definition, created)

    for name, variable_def in definition.variables.items():
        variable = await _ensure_variable(store, collection, name, variable_def, result)

        for mode in collection.modes:
            raw = variable_def.value_for_mode(mode.name)
            if raw is None or is_alias(raw):
                continue

            context = ErrorContext(collection=definition.name, variable=name, mode=mode.name)
            try:
                literal = resolve_first_pass(raw, variable_def.kind, strict_hex=strict_hex)
            except ColorParseError as e:
                result.record_error(f"{context.format()}: {e.message}")
                continue

            if literal is None:
                result.record_error(
                    f"{context.format()}: cannot read {raw!r} as {variable_def.kind}"
                )
                continue

            if await assign_value(store, variable, mode, literal, result, context):
                result.values_set += 1

    return collection
