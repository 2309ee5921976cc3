"""
Statistical helpers for route statistics.
"""
import math
from typing import Iterable, Optional


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero.

    Python's round() uses banker's rounding (round(2.5) == 2); averages
    shown to gym staff round 2.5 up to 3.
    """
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def rounded_mean(values: Iterable[Optional[float]]) -> Optional[int]:
    """
    Mean of the non-null values, rounded half up.

    Returns:
        None when there is no value to average
    """
    present = [value for value in values if value is not None]
    if not present:
        return None
    return round_half_up(sum(present) / len(present))
