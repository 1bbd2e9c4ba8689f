# core/decimals.py

"""
Decimal helpers shared by the money and weight code paths.

Every stored amount is rounded half-up to two places at the point it is
computed, never deferred to output.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value) -> Decimal:
    """
    Coerce any numeric-ish value to a finite Decimal.
    None, blanks, NaN, Infinity and unparsable input become 0.
    """
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, bool):
        return Decimal(int(value))
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")
    if not d.is_finite():
        return Decimal("0")
    return d


def money(value) -> Decimal:
    return to_decimal(value).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


# Weights are kept at the same precision as money.
kg = money
