"""Float formatting shared by the optimizer and the OBJ exporter.

Numbers are written with at most six fractional digits, the same way
``DecimalFormat("#.######")`` does it: round half to even on the exact binary
value, no trailing zeros, no exponent, and a ``-0`` for negative values that
round to zero.
"""

import math
from decimal import Context, Decimal, ROUND_HALF_EVEN
from typing import Iterable

_QUANTUM = Decimal("0.000001")
# wide enough for the integer part of any finite double
_CONTEXT = Context(prec=400)


def format_float(value: float) -> str:
    """Format a float with up to six decimals.

    Args:
        value: Number to format

    Returns:
        Shortest decimal text, e.g. ``1.5``, ``0.333333``, ``-0``
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "-Infinity" if value < 0 else "Infinity"

    text = format(Decimal(value).quantize(_QUANTUM, rounding=ROUND_HALF_EVEN, context=_CONTEXT), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_vector(values: Iterable[float]) -> str:
    """Format components and join them with single spaces."""
    return " ".join(format_float(v) for v in values)
