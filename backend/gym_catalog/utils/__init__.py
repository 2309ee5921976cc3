"""
Gym catalog utility functions.

- Date arithmetic for route ages and daily series
- Rounding helpers for averages
"""

from .time_utils import (
    days_between,
    date_range,
    iso_day,
)

from .stats_utils import (
    round_half_up,
    rounded_mean,
)

__all__ = [
    # Time/Date
    "days_between",
    "date_range",
    "iso_day",
    # Statistical
    "round_half_up",
    "rounded_mean",
]
