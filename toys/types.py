"""Value helpers for Toys.

Every runtime value is a 32-bit signed integer. This module holds the
bounds, the two's complement wrapping used by arithmetic, truncating
division, truthiness and the decimal rendering used by `println`.
"""

from __future__ import annotations

from .errors import DivisionByZeroError

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


def wrap_int32(value: int) -> int:
    """Wrap an arbitrary Python int into the int32 range (two's complement)."""
    return (value - INT32_MIN) % (2 ** 32) + INT32_MIN


def check_int32(value: int) -> int:
    """Return `value` unchanged, or raise ValueError if it is not an int32."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected an integer, got {type(value).__name__}")
    if value < INT32_MIN or value > INT32_MAX:
        raise ValueError(f"integer {value} out of 32-bit range")
    return value


def truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero, e.g. -7 / 2 == -3."""
    if b == 0:
        raise DivisionByZeroError(f"division of {a} by zero")
    quotient = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        quotient = -quotient
    return wrap_int32(quotient)


def is_truthy(value: int) -> bool:
    return value != 0


def to_string(value: int) -> str:
    return str(value)
