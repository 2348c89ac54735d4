"""
Premium pricing for life-insurance products.

Provides:
- Control-code resolution (product, gender, risk, rider -> rate codes)
- PremiumCalculator: modal and annual premium for one component
- TableRatingAdjuster: table-rating and flat-extra loadings
- Rider clamps and offered amounts
- QuoteCalculator: base policy plus riders
"""

# control_codes first: gateway.tables depends on it
from life_pricing.products.control_codes import (
    ConfigurationError,
    resolve_control_code,
    resolve_plan_code,
    resolve_policy_control_code,
    rider_control_code,
)
from life_pricing.products.premium import (
    ComponentPremium,
    PremiumCalculator,
    RateNotFoundError,
)
from life_pricing.products.quote import (
    PremiumResult,
    QuoteCalculator,
    format_premium_result,
)
from life_pricing.products.riders import (
    accidental_death_bounds,
    clamp_accidental_death,
    clamp_dependent_child,
    clamp_guaranteed_insurability,
    clamp_riders,
    dependent_child_options,
    guaranteed_insurability_options,
)
from life_pricing.products.table_rating import TableRatingAdjuster

__all__ = [
    # Control codes
    "ConfigurationError",
    "resolve_control_code",
    "resolve_plan_code",
    "resolve_policy_control_code",
    "rider_control_code",
    # Premium
    "ComponentPremium",
    "PremiumCalculator",
    "RateNotFoundError",
    "TableRatingAdjuster",
    # Quote
    "PremiumResult",
    "QuoteCalculator",
    "format_premium_result",
    # Riders
    "accidental_death_bounds",
    "clamp_accidental_death",
    "clamp_dependent_child",
    "clamp_guaranteed_insurability",
    "clamp_riders",
    "dependent_child_options",
    "guaranteed_insurability_options",
]
