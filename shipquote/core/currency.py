"""Currency helpers: half-up rounding to cents and finiteness checks."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

CENT = Decimal("0.01")


def round_currency(value: float) -> float:
    """Round a currency amount to 2 decimals, half away from zero.

    The float is converted through its shortest repr so that ``123.455``
    rounds to ``123.46`` rather than following its binary expansion.
    """
    if not is_finite_number(value):
        raise ValueError(f"Cannot round non-finite currency value: {value!r}")
    return float(Decimal(repr(float(value))).quantize(CENT, rounding=ROUND_HALF_UP))


def is_finite_number(value: Any) -> bool:
    """True for real ints/floats that are neither NaN nor infinite."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
