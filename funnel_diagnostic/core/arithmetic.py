"""
Null-safe arithmetic shared by every calculator.

Invalid operations resolve to None. Nothing here raises, and no result
is ever NaN or infinite.
"""

import math
from typing import Optional


def is_number(value) -> bool:
    """True for finite ints/floats (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def safe_divide(numerator, denominator) -> Optional[float]:
    """
    Divide, returning None when the result would be undefined.

    None, NaN or infinite operands and non-positive denominators all
    yield None.
    """
    if not is_number(numerator) or not is_number(denominator):
        return None
    if denominator <= 0:
        return None
    return numerator / denominator


def safe_percent(numerator, denominator) -> Optional[float]:
    """Percentage form of safe_divide."""
    ratio = safe_divide(numerator, denominator)
    return ratio * 100 if ratio is not None else None


_FLOAT_NOISE = 1e-9


def round_half_up(value: float) -> int:
    """Nearest integer, halves rounded up (3.75 -> 4, 2.5 -> 3)."""
    return int(math.floor(value + 0.5 + _FLOAT_NOISE))


def ceil_clean(value: float) -> int:
    """Ceiling that ignores float noise (10.000000000000002 -> 10)."""
    return int(math.ceil(round(value, 9)))
