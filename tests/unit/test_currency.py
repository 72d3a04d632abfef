"""
Unit tests for currency rounding.
"""

import math

import pytest

from shipquote.core.currency import is_finite_number, round_currency


class TestRoundCurrency:
    """Half-up rounding to cents."""

    def test_half_cent_rounds_up(self):
        assert round_currency(123.455) == 123.46

    def test_below_half_cent_rounds_down(self):
        assert round_currency(123.454) == 123.45

    def test_binary_representation_does_not_leak(self):
        # 2.675 is stored as 2.67499999... in binary
        assert round_currency(2.675) == 2.68

    def test_negative_half_rounds_away_from_zero(self):
        assert round_currency(-1.005) == -1.01

    def test_whole_numbers_unchanged(self):
        assert round_currency(1540.5) == 1540.5
        assert round_currency(0) == 0.0

    def test_float_drift_is_removed(self):
        assert round_currency(0.1 + 0.2) == 0.3

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, value):
        with pytest.raises(ValueError):
            round_currency(value)


class TestIsFiniteNumber:

    def test_accepts_ints_and_floats(self):
        assert is_finite_number(3) is True
        assert is_finite_number(3.5) is True

    def test_rejects_nan_and_infinity(self):
        assert is_finite_number(math.nan) is False
        assert is_finite_number(math.inf) is False

    def test_rejects_bools_and_strings(self):
        assert is_finite_number(True) is False
        assert is_finite_number("10") is False
        assert is_finite_number(None) is False
