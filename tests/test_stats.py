from __future__ import annotations

import math
from decimal import ROUND_DOWN

import pytest

from perfreport.errors import InvalidPercentileError
from perfreport.stats import duration_at, round_decimals


def test_duration_at_uses_truncating_index():
    values = [100, 200, 300, 400, 500]
    assert duration_at(values, 0.5) == 300
    assert duration_at(values, 0.9) == 500
    assert duration_at(values, 0.0) == 100
    assert duration_at(values, 0.19) == 100


def test_duration_at_clamps_full_percentage():
    assert duration_at([1, 2, 3], 1.0) == 3


def test_duration_at_empty_is_zero():
    assert duration_at([], 0.5) == 0


@pytest.mark.parametrize("percentage", [-0.01, 1.01, 1.5, math.nan])
def test_duration_at_rejects_out_of_range(percentage):
    with pytest.raises(InvalidPercentileError):
        duration_at([1, 2, 3], percentage)


def test_invalid_percentile_is_a_value_error():
    with pytest.raises(ValueError):
        duration_at([], 2)


def test_round_decimals_half_up_on_decimal_representation():
    assert round_decimals(2.675) == 2.68
    assert round_decimals(1.005) == 1.01
    assert round_decimals(0.125) == 0.13
    assert round_decimals(3.14159) == 3.14


def test_round_decimals_with_other_mode():
    assert round_decimals(2.679, rounding=ROUND_DOWN) == 2.67
    assert round_decimals(2.5, places=0) == 3.0


def test_nan_percentage_rejected_on_empty_input():
    with pytest.raises(InvalidPercentileError):
        duration_at([], math.nan)
