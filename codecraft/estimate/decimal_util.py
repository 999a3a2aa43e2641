"""
Decimal helpers shared by the estimation engine.

All time and cost arithmetic goes through ``decimal.Decimal`` so that summing many
small values (quarter minutes, cents) reproduces the exact total.

PROMPT> python -m codecraft.estimate.decimal_util
"""
from decimal import Decimal, InvalidOperation, getcontext
from typing import Any

# Adjust the precision if estimates require more than 28 significant digits.
getcontext().prec = 28
ZERO = Decimal("0")
NAN = Decimal("NaN")

def to_decimal(value: Any) -> Decimal:
    """
    Convert a user supplied number into a Decimal.

    Floats are converted via their shortest repr, so ``0.1`` becomes ``Decimal("0.1")``
    and not the binary approximation. Anything that isn't a number becomes NaN,
    so that the caller can decide how to treat it.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        return NAN
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(repr(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            return NAN
    return NAN

def is_degenerate(value: Decimal) -> bool:
    """NaN, infinite and negative values can't be used as a duration or an amount."""
    return value.is_nan() or value.is_infinite() or value < ZERO

def non_negative_or_zero(value: Any) -> Decimal:
    d = to_decimal(value)
    if is_degenerate(d):
        return ZERO
    return d

def decimal_to_plain_string(value: Decimal) -> str:
    """
    Shortest plain-decimal string.

    No exponent (1E+1 -> "10") and no trailing zeros (1.50 -> "1.5").
    """
    if value.is_nan():
        return "NaN"
    if value == ZERO:
        return "0"
    return format(value.normalize(), "f")

if __name__ == "__main__":
    for item in [0.1, "2.50", 3, None, "abc", -1, Decimal("1E+1")]:
        d = to_decimal(item)
        print(f"{item!r} -> {d!r} degenerate={is_degenerate(d)} plain={decimal_to_plain_string(d)}")
