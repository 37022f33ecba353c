"""
Range-checked integer helpers.

Python integers never overflow, so the fixed-width ranges of the stored
quantities are enforced here explicitly.
"""

from ..errors import ArithmeticOverflow

U32_MAX = 2**32 - 1
I128_MIN = -(2**127)
I128_MAX = 2**127 - 1


def _check(value: int, low: int, high: int, operation: str) -> int:
    if value < low or value > high:
        raise ArithmeticOverflow(f"{operation} overflow: {value} outside [{low}, {high}]")
    return value


def checked_mul(a: int, b: int, low: int = I128_MIN, high: int = I128_MAX) -> int:
    """Multiply, raising ArithmeticOverflow if the product leaves [low, high]."""
    return _check(a * b, low, high, "multiplication")


def checked_add(a: int, b: int, low: int = 0, high: int = U32_MAX) -> int:
    """Add, raising ArithmeticOverflow if the sum leaves [low, high]."""
    return _check(a + b, low, high, "addition")


def saturating_sub(a: int, b: int, floor: int = 0) -> int:
    """Subtract, clamping the result at floor."""
    return max(a - b, floor)
