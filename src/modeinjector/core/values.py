"""
Raw token value resolution.

Turns a raw value from a token document into something the store can
hold. Two entry points exist because of the two-phase pipeline:

- ``resolve_first_pass``: collections mode, phase 1. The declared kind
  drives conversion; alias strings are deferred to the linking pass.
- ``resolve_legacy``: flat-map mode. No declared kind, so the type is
  inferred from the value's own shape and aliases are looked up in the
  variable index immediately.

Shape inference is a closed classifier with fixed precedence:
alias > color > number > boolean > string.
"""

from __future__ import annotations

import json
import logging
import math
import re
from enum import StrEnum

from .color import hex_to_rgba, parse_color
from .ir import AliasRef, DataType, LinkedAlias, Literal, RawValue, VariableKind
from .variable_index import VariableIndex

logger = logging.getLogger(__name__)

_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class RawValueKind(StrEnum):
    """Shape of a raw value, in precedence order."""

    ALIAS = "alias"
    COLOR = "color"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"


# =============================================================================
# Alias grammar
# =============================================================================


def is_alias(raw: RawValue) -> bool:
    """True for brace-delimited strings such as ``{Brand.Primary}``."""
    if not isinstance(raw, str):
        return False
    text = raw.strip()
    return text.startswith("{") and text.endswith("}")


def alias_reference(raw: str) -> str:
    """Text between the braces of an alias string."""
    return raw.strip()[1:-1].strip()


def split_alias(raw: str) -> AliasRef | None:
    """
    Split ``{Collection.Variable.Name}`` at the first dot.

    Variable names may themselves contain dots; only the first dot
    separates the collection. Returns None when there is no dot or
    either side is empty.
    """
    collection, sep, name = alias_reference(raw).partition(".")
    if not sep or not collection or not name:
        return None
    return AliasRef(collection=collection, name=name)


# =============================================================================
# Classification and coercion
# =============================================================================


def classify_raw_value(raw: RawValue) -> RawValueKind:
    """Classify a raw value by shape."""
    if is_alias(raw):
        return RawValueKind.ALIAS
    if isinstance(raw, str) and raw.strip().startswith("#"):
        return RawValueKind.COLOR
    # bool is an int subclass; it must not count as a number
    if isinstance(raw, int | float) and not isinstance(raw, bool):
        return RawValueKind.NUMBER
    if isinstance(raw, bool):
        return RawValueKind.BOOLEAN
    return RawValueKind.STRING


def coerce_number(raw: RawValue) -> float | None:
    """Numeric parse with leading-number semantics (``"16px"`` -> 16.0)."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int | float):
        number = float(raw)
    elif isinstance(raw, str):
        match = _LEADING_NUMBER_RE.match(raw.strip())
        if not match:
            return None
        number = float(match.group(0))
    else:
        return None
    return number if math.isfinite(number) else None


def stringify(raw: RawValue) -> str:
    """String form of a raw value, matching how token tools print them."""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    if isinstance(raw, dict | list):
        return json.dumps(raw, separators=(",", ":"))
    return str(raw)


# =============================================================================
# Resolution
# =============================================================================


def resolve_first_pass(raw: RawValue, kind: str, *, strict_hex: bool = False) -> Literal | None:
    """
    Resolve a raw value against its declared kind (phase 1).

    Args:
        raw: Raw value from the document
        kind: Declared variable kind
        strict_hex: Raise ColorParseError for malformed hex instead of using black

    Returns:
        Literal, or None for alias strings (deferred) and unparsable values
    """
    if is_alias(raw):
        return None

    if kind == VariableKind.COLOR:
        color = parse_color(raw, strict_hex=strict_hex) if isinstance(raw, str) else None
        if color is None:
            logger.warning("Value %r is not a color", raw)
            return None
        return Literal(value=color, data_type=DataType.COLOR)

    if kind == VariableKind.NUMBER:
        number = coerce_number(raw)
        if number is None:
            logger.warning("Value %r is not a number", raw)
            return None
        return Literal(value=number, data_type=DataType.FLOAT)

    if kind == VariableKind.BOOLEAN:
        if not isinstance(raw, bool):
            logger.warning("Value %r is not a boolean", raw)
            return None
        return Literal(value=raw, data_type=DataType.BOOLEAN)

    # string, boxShadow, and unrecognized kinds
    return Literal(value=stringify(raw), data_type=DataType.STRING)


def resolve_legacy(
    raw: RawValue, index: VariableIndex, *, strict_hex: bool = False
) -> Literal | LinkedAlias | None:
    """
    Resolve a raw value by its own shape (flat-map mode).

    Alias targets are looked up in the flat variable index by exact name
    or with dots read as slashes. An unknown target yields None.
    """
    shape = classify_raw_value(raw)

    if shape == RawValueKind.ALIAS:
        reference = alias_reference(str(raw))
        target = index.find_by_legacy_name(reference)
        if target is None:
            logger.warning("Alias target not found: %s", reference)
            return None
        return LinkedAlias(variable_id=target.id, data_type=target.resolved_type)

    if shape == RawValueKind.COLOR:
        return Literal(value=hex_to_rgba(str(raw), strict=strict_hex), data_type=DataType.COLOR)

    if shape == RawValueKind.NUMBER:
        return Literal(value=float(raw), data_type=DataType.FLOAT)  # type: ignore[arg-type]

    if shape == RawValueKind.BOOLEAN:
        return Literal(value=raw, data_type=DataType.BOOLEAN)  # type: ignore[arg-type]

    return Literal(value=stringify(raw), data_type=DataType.STRING)
