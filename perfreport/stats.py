"""Order statistics and rounding helpers shared by the aggregates."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from perfreport.errors import InvalidPercentileError


def check_percentage(percentage: float) -> None:
    if not 0 <= percentage <= 1:
        raise InvalidPercentileError(percentage)


def duration_at(sorted_durations: Sequence[int], percentage: float) -> int:
    """Nearest-rank lookup on an ascending sequence, no interpolation.

    The index is ``floor(n * percentage)``; an index of ``n`` is clamped to
    the last element. Empty input yields 0.
    """
    check_percentage(percentage)
    n = len(sorted_durations)
    if n == 0:
        return 0
    index = min(int(n * percentage), n - 1)
    return sorted_durations[index]


def round_decimals(value: float, places: int = 2, rounding: str = ROUND_HALF_UP) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=rounding))
