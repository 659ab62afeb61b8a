"""
Number coercion and rounding for estimate amounts.

Draft rows come straight from form inputs, so any numeric field may hold
text, None, NaN or infinity. Everything is coerced to a finite float before
arithmetic and amounts are rounded to whole currency units.
"""

import math
from decimal import Decimal, ROUND_HALF_UP


def _float_or_none(value):
    try:
        if isinstance(value, (int, float)):
            return float(value)
        return float(str(value).strip().replace(",", ""))
    except (ValueError, TypeError, OverflowError):
        return None


def to_number(value, default: float = 0.0) -> float:
    """Coerce a field to a finite float. Anything unusable becomes ``default``."""
    if value is None or isinstance(value, bool):
        return default
    number = _float_or_none(value)
    if number is None or not math.isfinite(number):
        return default
    return number


def is_number(value) -> bool:
    """True when ``value`` is usable as a number without falling back to the default."""
    if value is None or isinstance(value, bool):
        return False
    number = _float_or_none(value)
    return number is not None and math.isfinite(number)


def round_amount(value: float) -> int:
    """
    Round to the nearest whole unit, halves away from zero.

    1000.5 -> 1001, -2.5 -> -3. The float is taken at its exact binary value,
    so 2.675 style artifacts round the way the float actually lies.
    """
    number = to_number(value)
    return int(Decimal(number).to_integral_value(rounding=ROUND_HALF_UP))
