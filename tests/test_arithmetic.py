"""Tests for null-safe arithmetic and rounding helpers."""

import math

import pytest

from funnel_diagnostic.core.arithmetic import (
    ceil_clean,
    is_number,
    round_half_up,
    safe_divide,
    safe_percent,
)


@pytest.mark.parametrize(
    "numerator, denominator",
    [
        (1, 0),
        (1, -5),
        (None, 2),
        (2, None),
        (math.nan, 2),
        (2, math.nan),
        (math.inf, 2),
        (2, math.inf),
    ],
)
def test_safe_divide_undefined_is_none(numerator, denominator):
    assert safe_divide(numerator, denominator) is None


def test_safe_divide_regular():
    assert safe_divide(10, 4) == 2.5
    assert safe_divide(0, 4) == 0


def test_safe_percent():
    assert safe_percent(1, 4) == 25.0
    assert safe_percent(1, 0) is None


def test_is_number_excludes_bools_and_non_finite():
    assert is_number(3)
    assert is_number(2.5)
    assert not is_number(True)
    assert not is_number("3")
    assert not is_number(math.inf)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.75) == 4
    assert round_half_up(24.75) == 25
    assert round_half_up(0.49) == 0
    assert round_half_up(62.5) == 63


def test_ceil_clean_ignores_float_noise():
    assert ceil_clean(10.000000000000002) == 10
    assert ceil_clean(66.67) == 67
    assert ceil_clean(100.0) == 100
