"""
Rounding policy for premiums and policy values.

Three distinct rules apply and must not be interchanged:

- Currency (premiums, dividends): round half-up to cents.
- Cash values, PUA amounts, total paid-up: round half-up to whole dollars.
- Purchased paid-up additions: truncation toward zero.

Python's built-in ``round`` uses banker's rounding, so half-up rounding
is done with ``decimal.ROUND_HALF_UP`` on the float's shortest repr.
"""

import math
from decimal import ROUND_HALF_UP, Decimal

from life_pricing.config.tolerances import CURRENCY_PLACES, WHOLE_DOLLAR_PLACES


def round_half_up(value: float, places: int = CURRENCY_PLACES) -> float:
    """
    Round half away from zero at the given number of decimal places.

    Parameters
    ----------
    value : float
        Value to round
    places : int
        Decimal places to keep

    Returns
    -------
    float
        Rounded value

    Examples
    --------
    >>> round_half_up(2.675)
    2.68
    >>> round_half_up(2.5, places=0)
    3.0
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def round_currency(value: float) -> float:
    """Round to cents, half-up."""
    return round_half_up(value, CURRENCY_PLACES)


def round_dollars(value: float) -> float:
    """Round to whole dollars, half-up."""
    return round_half_up(value, WHOLE_DOLLAR_PLACES)


def truncate_dollars(value: float) -> float:
    """Drop the fractional part (toward zero)."""
    return float(math.trunc(value))
