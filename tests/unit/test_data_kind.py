"""
Tests for the type-compatibility checker and value conversions.
"""
import itertools

import pytest

from strategy_builder.features.connections.application import validate_connection
from strategy_builder.shared.domain.value_objects import (
    DataKind,
    ErrorCode,
    conversion_expression,
    is_compatible,
)
from strategy_builder.shared.domain.value_objects.data_kind import COMPATIBILITY_TABLE

from conftest import connect, make_block


class TestIsCompatible:
    """Priority rules: ANY, identity, then the fixed table."""

    @pytest.mark.parametrize("kind", list(DataKind))
    def test_any_accepts_everything(self, kind):
        """ANY on either side is always compatible."""
        assert is_compatible(DataKind.ANY, kind)
        assert is_compatible(kind, DataKind.ANY)

    @pytest.mark.parametrize("kind", list(DataKind))
    def test_identical_kinds(self, kind):
        """A kind always connects to itself."""
        assert is_compatible(kind, kind)

    @pytest.mark.parametrize("source,target", [
        (DataKind.CANDLE, DataKind.NUMBER),
        (DataKind.INDICATOR, DataKind.NUMBER),
        (DataKind.SIGNAL, DataKind.BOOLEAN),
        (DataKind.NUMBER, DataKind.STRING),
        (DataKind.BOOLEAN, DataKind.STRING),
        (DataKind.ARRAY, DataKind.NUMBER),
        (DataKind.NUMBER, DataKind.ARRAY),
        (DataKind.STRING, DataKind.ARRAY),
    ])
    def test_table_entries(self, source, target):
        """Pairs from the conversion table are accepted."""
        assert is_compatible(source, target)

    @pytest.mark.parametrize("source,target", [
        (DataKind.NUMBER, DataKind.CANDLE),
        (DataKind.BOOLEAN, DataKind.SIGNAL),
        (DataKind.STRING, DataKind.NUMBER),
        (DataKind.ORDER, DataKind.NUMBER),
        (DataKind.NUMBER, DataKind.BOOLEAN),
    ])
    def test_rejected_pairs(self, source, target):
        """Pairs outside the table are incompatible, including reversed table entries."""
        assert not is_compatible(source, target)


class TestCompatibilityRoundTrip:
    """The connection validator agrees with is_compatible for every kind pair."""

    def test_every_pair(self):
        """TYPE_MISMATCH appears exactly for the pairs is_compatible rejects."""
        for source_kind, target_kind in itertools.product(DataKind, repeat=2):
            a = make_block("a", outputs=(("out", source_kind),))
            b = make_block("b", inputs=(("in", target_kind, True),))
            findings = validate_connection(connect("c", a, b), [a, b], [])
            mismatch = any(f.code == ErrorCode.TYPE_MISMATCH for f in findings)
            assert mismatch == (not is_compatible(source_kind, target_kind)), (source_kind, target_kind)


class TestConversionExpression:
    """Code-generation conversions for accepted pairs."""

    def test_identity_and_any_pass_through(self):
        """Identical kinds and ANY leave the expression untouched."""
        assert conversion_expression("x", DataKind.NUMBER, DataKind.NUMBER) == "x"
        assert conversion_expression("x", DataKind.ANY, DataKind.BOOLEAN) == "x"

    def test_candle_to_number_reads_close(self):
        assert conversion_expression("c", DataKind.CANDLE, DataKind.NUMBER) == 'c["close"]'

    def test_signal_to_boolean(self):
        assert conversion_expression("s", DataKind.SIGNAL, DataKind.BOOLEAN) == "bool(s)"

    def test_array_to_scalar_takes_last(self):
        """Arrays feed scalars through their last element."""
        assert eval(conversion_expression("x", DataKind.ARRAY, DataKind.NUMBER), {"x": [1, 2, 3]}) == 3
        assert eval(conversion_expression("x", DataKind.ARRAY, DataKind.NUMBER), {"x": []}) is None
        assert eval(conversion_expression("x", DataKind.ARRAY, DataKind.STRING), {"x": [4]}) == "4"

    def test_scalar_to_array_wraps(self):
        assert eval(conversion_expression("x", DataKind.NUMBER, DataKind.ARRAY), {"x": 5}) == [5]

    def test_every_table_pair_has_a_conversion(self):
        """No accepted pair is missing a conversion."""
        for source_kind, target_kind in COMPATIBILITY_TABLE:
            assert conversion_expression("v", source_kind, target_kind)

    def test_incompatible_pair_raises(self):
        with pytest.raises(ValueError):
            conversion_expression("x", DataKind.ORDER, DataKind.NUMBER)


class TestDataKindFromString:

    def test_case_insensitive(self):
        assert DataKind.from_string("Number") == DataKind.NUMBER

    def test_unknown_raises(self):
        with pytest.raises(ValueError):
            DataKind.from_string("tensor")
