"""
Unit tests for currency arithmetic.

Verifies:
- Inputs coerce to Decimal without float artifacts
- Rounding is half up at two places
- Totals are rounded once, after summing
"""

from decimal import Decimal

import pytest

from ledger_kernel.domain.money import ZERO, round2, sum2, to_decimal


class TestToDecimal:
    """Tests for to_decimal."""

    def test_none_is_zero(self):
        assert to_decimal(None) == ZERO

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_string_with_whitespace(self):
        assert to_decimal(" 12.50 ") == Decimal("12.50")

    def test_int(self):
        assert to_decimal(7) == Decimal("7")

    def test_decimal_passthrough(self):
        value = Decimal("3.14159")
        assert to_decimal(value) is value

    def test_bool_rejected(self):
        with pytest.raises(ValueError):
            to_decimal(True)

    def test_garbage_rejected(self):
        with pytest.raises(ValueError):
            to_decimal("ten dollars")

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_rejected(self, value):
        with pytest.raises(ValueError):
            to_decimal(value)


class TestRound2:
    """Tests for round2."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("0.005", "0.01"),
            ("0.004", "0.00"),
            ("2.675", "2.68"),
            ("-0.005", "-0.01"),
            ("10", "10.00"),
        ],
    )
    def test_half_up(self, value, expected):
        assert round2(value) == Decimal(expected)

    def test_float_artifact_removed(self):
        assert round2(0.1 + 0.2) == Decimal("0.30")


class TestSum2:
    """Tests for sum2."""

    def test_rounds_after_summing(self):
        # 0.004 + 0.004 = 0.008 -> 0.01, not 0.00 + 0.00
        assert sum2(["0.004", "0.004"]) == Decimal("0.01")

    def test_empty_is_zero(self):
        assert sum2([]) == Decimal("0.00")
