"""
Policy valuation helpers: prepaid premiums.
"""

from life_pricing.valuation.prepay import (
    PREPAY_FACTORS,
    PrepaidPolicy,
    calculate_prepaid_policy,
    prepay_factor,
    total_prepaid_needed,
)

__all__ = [
    "PREPAY_FACTORS",
    "PrepaidPolicy",
    "calculate_prepaid_policy",
    "prepay_factor",
    "total_prepaid_needed",
]
