"""
tests/test_arithmetic.py
========================
Safe division, growth guard, two-point averages and output rounding.
"""
import math

import pytest

from credit_platform.arithmetic import (
    average,
    finite,
    growth_safe_divide,
    round_amount,
    round_days,
    safe_divide,
)


class TestSafeDivide:
    def test_plain_quotient(self):
        assert safe_divide(10, 4) == pytest.approx(2.5)

    def test_zero_denominator(self):
        assert safe_divide(5, 0) == 0

    def test_nan_denominator(self):
        assert safe_divide(5, float("nan")) == 0

    def test_infinite_denominator(self):
        assert safe_divide(5, float("inf")) == 0

    def test_none_denominator(self):
        assert safe_divide(5, None) == 0

    def test_overflowing_quotient(self):
        assert safe_divide(1e308, 1e-308) == 0

    def test_negative_values(self):
        assert safe_divide(-9, 3) == pytest.approx(-3.0)


class TestGrowthSafeDivide:
    def test_uses_absolute_previous(self):
        assert growth_safe_divide(50, 100) == pytest.approx(0.5)
        assert growth_safe_divide(50, -100) == pytest.approx(0.5)

    def test_zero_previous_divides_by_one(self):
        assert growth_safe_divide(150, 0) == pytest.approx(150.0)

    def test_missing_previous_divides_by_one(self):
        assert growth_safe_divide(150, None) == pytest.approx(150.0)

    def test_nan_previous_divides_by_one(self):
        assert growth_safe_divide(7, float("nan")) == pytest.approx(7.0)


class TestAverage:
    def test_two_point(self):
        assert average(10, 20) == pytest.approx(15.0)

    def test_zero_previous_degrades_to_current(self):
        assert average(10, 0) == 10

    def test_missing_previous_degrades_to_current(self):
        assert average(10, None) == 10


class TestFinite:
    def test_none(self):
        assert finite(None) == 0.0

    def test_nan_and_inf(self):
        assert finite(float("nan")) == 0.0
        assert finite(float("inf")) == 0.0
        assert finite(float("-inf")) == 0.0

    def test_negative_zero_normalized(self):
        assert math.copysign(1.0, finite(-0.0)) == 1.0

    def test_passthrough(self):
        assert finite(-12.5) == -12.5


class TestRounding:
    def test_amount_two_decimals(self):
        assert round_amount(2.345) == pytest.approx(2.35)
        assert round_amount(1.005) == pytest.approx(1.01)

    def test_amount_half_away_from_zero(self):
        assert round_amount(-1.005) == pytest.approx(-1.01)

    def test_amount_non_finite(self):
        assert round_amount(float("nan")) == 0.0

    def test_days_nearest_integer(self):
        assert round_days(12.4) == 12
        assert round_days(12.5) == 13
        assert round_days(-12.5) == -13

    def test_days_small_negative_is_plain_zero(self):
        assert math.copysign(1.0, round_days(-0.2)) == 1.0
