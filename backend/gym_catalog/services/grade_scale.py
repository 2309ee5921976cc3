"""
Numeric grade scale.

Grade values encode French-style grades, six raw values per whole grade:
1 = 1a, 2 = 1a+, 3 = 1b, ... 31 = 6a, 32 = 6a+, ... 54 = 9c+.
Odd values are the plain grades, even values their "+" variant.
"""
from typing import Optional

# Highest raw value on the scale (9c+)
MAX_GRADE_VALUE = 54

VALUES_PER_GRADE = 6

SUB_GRADES = ("a", "a+", "b", "b+", "c", "c+")

# Colour of each whole grade number, 1 through 9
GRADE_COLORS = {
    1: "#ffffff",
    2: "#e6e6e6",
    3: "#f7e400",
    4: "#ff9900",
    5: "#00a0e4",
    6: "#2fb344",
    7: "#e02020",
    8: "#8c2fb3",
    9: "#1a1a1a",
}

DEFAULT_COLOR = "#9e9e9e"


def grade_number(value: int) -> int:
    """Whole grade number (1-9) of a raw grade value."""
    return (value - 1) // VALUES_PER_GRADE + 1


def grade_value_label(value: Optional[int]) -> Optional[str]:
    """
    Human label of a raw grade value.

    Example:
        >>> grade_value_label(37)
        '7a'
        >>> grade_value_label(32)
        '6a+'
    """
    if not value or value < 1 or value > MAX_GRADE_VALUE:
        return None
    return f"{grade_number(value)}{SUB_GRADES[(value - 1) % VALUES_PER_GRADE]}"


def grade_value_color(value: Optional[int]) -> str:
    """Colour used to draw a grade value in charts."""
    if not value or value < 1:
        return DEFAULT_COLOR
    return GRADE_COLORS.get(grade_number(value), DEFAULT_COLOR)
