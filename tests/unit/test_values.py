"""Tests for raw value classification, coercion, and resolution."""

from __future__ import annotations

import pytest

from modeinjector.core import ir
from modeinjector.core.errors import ColorParseError
from modeinjector.core.values import (
    RawValueKind,
    classify_raw_value,
    coerce_number,
    is_alias,
    resolve_first_pass,
    resolve_legacy,
    split_alias,
    stringify,
)
from modeinjector.core.variable_index import VariableIndex
from modeinjector.store.models import StoreVariable


class TestClassifier:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("{Brand.Primary}", RawValueKind.ALIAS),
            ("  {Brand.Primary}  ", RawValueKind.ALIAS),
            ("#FF0000", RawValueKind.COLOR),
            (16, RawValueKind.NUMBER),
            (1.5, RawValueKind.NUMBER),
            (True, RawValueKind.BOOLEAN),
            (False, RawValueKind.BOOLEAN),
            ("Inter", RawValueKind.STRING),
            ("16px", RawValueKind.STRING),
            ({"x": 1}, RawValueKind.STRING),
        ],
    )
    def test_precedence(self, raw, expected):
        assert classify_raw_value(raw) == expected

    def test_bool_is_not_a_number(self):
        assert classify_raw_value(True) != RawValueKind.NUMBER
        assert coerce_number(True) is None


class TestAliasGrammar:
    def test_is_alias(self):
        assert is_alias("{A.b}")
        assert not is_alias("{A.b")
        assert not is_alias("A.b}")
        assert not is_alias(12)

    def test_split_at_first_dot(self):
        ref = split_alias("{Brand.Gray.90}")
        assert ref == ir.AliasRef(collection="Brand", name="Gray.90")
        assert ref.reference == "{Brand.Gray.90}"

    @pytest.mark.parametrize("raw", ["{Primary}", "{.Primary}", "{Brand.}"])
    def test_split_rejects_incomplete_references(self, raw: str):
        assert split_alias(raw) is None


class TestCoercion:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(16, 16.0), (1.5, 1.5), ("16px", 16.0), ("-0.5rem", -0.5), (".25", 0.25), ("1e2", 100.0)],
    )
    def test_leading_number(self, raw, expected):
        assert coerce_number(raw) == expected

    @pytest.mark.parametrize("raw", ["px16", "", "auto", [1]])
    def test_not_a_number(self, raw):
        assert coerce_number(raw) is None

    def test_infinity_rejected(self):
        assert coerce_number(float("inf")) is None

    def test_stringify(self):
        assert stringify(True) == "true"
        assert stringify(False) == "false"
        assert stringify(4.0) == "4"
        assert stringify(4.5) == "4.5"
        assert stringify({"x": 1, "y": 2}) == '{"x":1,"y":2}'
        assert stringify("Inter") == "Inter"


class TestFirstPass:
    def test_hex_color(self):
        literal = resolve_first_pass("#FF0000", "color")
        assert literal == ir.Literal(value=ir.RGBA(r=1.0, g=0.0, b=0.0, a=1.0), data_type="COLOR")

    def test_alias_is_deferred(self):
        assert resolve_first_pass("{Brand.Primary}", "color") is None

    def test_color_kind_with_unparsable_value(self):
        assert resolve_first_pass("blue", "color") is None
        assert resolve_first_pass(12, "color") is None

    def test_malformed_hex_strict(self):
        with pytest.raises(ColorParseError):
            resolve_first_pass("#12", "color", strict_hex=True)

    def test_number_kind(self):
        literal = resolve_first_pass("24px", "number")
        assert literal is not None
        assert literal.value == 24.0
        assert literal.data_type == ir.DataType.FLOAT

    def test_boolean_kind_requires_bool(self):
        literal = resolve_first_pass(True, "boolean")
        assert literal is not None and literal.value is True
        assert resolve_first_pass("true", "boolean") is None

    @pytest.mark.parametrize("kind", ["string", "boxShadow", "fontFamily"])
    def test_string_like_kinds(self, kind: str):
        literal = resolve_first_pass(4, kind)
        assert literal == ir.Literal(value="4", data_type=ir.DataType.STRING)


class TestLegacy:
    @pytest.fixture
    def index(self) -> VariableIndex:
        return VariableIndex(
            variables=[
                StoreVariable(
                    id="VariableID:1",
                    name="Gray/90",
                    collection_id="VariableCollectionId:1",
                    resolved_type=ir.DataType.COLOR,
                ),
            ]
        )

    def test_alias_with_dots_matches_slashed_name(self, index: VariableIndex):
        resolved = resolve_legacy("{Gray.90}", index)
        assert resolved == ir.LinkedAlias(variable_id="VariableID:1", data_type=ir.DataType.COLOR)

    def test_alias_exact_name(self, index: VariableIndex):
        resolved = resolve_legacy("{Gray/90}", index)
        assert isinstance(resolved, ir.LinkedAlias)

    def test_unknown_alias(self, index: VariableIndex):
        assert resolve_legacy("{Nope}", index) is None

    def test_inferred_types(self, index: VariableIndex):
        assert resolve_legacy("#000000", index).data_type == ir.DataType.COLOR
        assert resolve_legacy(8, index) == ir.Literal(value=8.0, data_type=ir.DataType.FLOAT)
        assert resolve_legacy(False, index) == ir.Literal(
            value=False, data_type=ir.DataType.BOOLEAN
        )
        assert resolve_legacy("Inter", index) == ir.Literal(
            value="Inter", data_type=ir.DataType.STRING
        )

    def test_malformed_hex_falls_back_to_black(self, index: VariableIndex):
        resolved = resolve_legacy("#XYZ", index)
        assert resolved.value == ir.RGBA(r=0.0, g=0.0, b=0.0, a=1.0)
