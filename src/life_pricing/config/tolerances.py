"""
Centralized precision constants for premium and illustration values.

Premiums are money: comparisons are made to the cent and rounding
follows a single, explicit policy (see life_pricing/rounding.py).
"""

from typing import Final

# =============================================================================
# Currency Precision
# =============================================================================

#: Decimal places for premiums, dividends and any value shown as currency
CURRENCY_PLACES: Final[int] = 2

#: Decimal places for cash values, PUA amounts and paid-up amounts
WHOLE_DOLLAR_PLACES: Final[int] = 0

#: Two premiums closer than this are the same premium (one cent)
PREMIUM_TOLERANCE: Final[float] = 0.01


# =============================================================================
# Test Tolerances
# =============================================================================

#: Float comparison for values derived from the same inputs by different
#: summation orders
FLOAT_TOLERANCE: Final[float] = 1e-9
