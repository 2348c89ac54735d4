"""
life-pricing: Premium quoting, policy-value illustration and reverse
lookup for life-insurance products.

Quick Start
-----------
>>> import asyncio
>>> from life_pricing import (
...     PolicyInfo, ProductType, Gender, SmokingStatus,
...     QuoteCalculator, SyntheticRateProvider, TableRateGateway,
... )
>>> gateway = TableRateGateway(SyntheticRateProvider(seed=42).generate_tables())
>>> policy = PolicyInfo(
...     product_type=ProductType.PWL,
...     face_amount=25_000,
...     age=30,
...     gender=Gender.MALE,
...     smoking_status=SmokingStatus.NON_SMOKER,
... )
>>> result = asyncio.run(QuoteCalculator(gateway).calculate(policy))

See Also
--------
- examples/01_quote_and_illustrate.py for an end-to-end walkthrough
- DESIGN.md for calculation rules

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Products - Primary API
# =============================================================================
from life_pricing.products.control_codes import ConfigurationError
from life_pricing.products.premium import PremiumCalculator, RateNotFoundError
from life_pricing.products.quote import (
    PremiumResult,
    QuoteCalculator,
    format_premium_result,
)
from life_pricing.products.table_rating import TableRatingAdjuster

# Policy dataclasses from schemas
from life_pricing.data.schemas import (
    Gender,
    PaymentMethod,
    PaymentMode,
    PolicyInfo,
    ProductType,
    RiderKind,
    RiderSelection,
    SmokingStatus,
)

# =============================================================================
# Rate Gateway
# =============================================================================
from life_pricing.gateway.base import RateGateway
from life_pricing.gateway.caching import CachingRateGateway
from life_pricing.gateway.tables import TableRateGateway

# =============================================================================
# Loaders
# =============================================================================
from life_pricing.data.loader import (
    DataLoadError,
    RateTables,
    SyntheticRateProvider,
    load_rate_tables,
)

# =============================================================================
# Illustration
# =============================================================================
from life_pricing.illustration.engine import (
    IllustrationEngine,
    IllustrationYearRow,
    MilestoneRow,
    rows_to_frame,
)

# =============================================================================
# Reverse Lookup
# =============================================================================
from life_pricing.solver.reverse_lookup import (
    ReverseLookupResult,
    ReverseLookupSolver,
    format_reverse_lookup_result,
)

# =============================================================================
# Underwriting and Valuation
# =============================================================================
from life_pricing.underwriting.examinations import required_examinations
from life_pricing.valuation.prepay import calculate_prepaid_policy

# =============================================================================
# Configuration
# =============================================================================
from life_pricing.config.settings import SETTINGS

__all__ = [
    # Version
    "__version__",
    # Products
    "ConfigurationError",
    "PremiumCalculator",
    "RateNotFoundError",
    "PremiumResult",
    "QuoteCalculator",
    "TableRatingAdjuster",
    "format_premium_result",
    # Schemas
    "Gender",
    "PaymentMethod",
    "PaymentMode",
    "PolicyInfo",
    "ProductType",
    "RiderKind",
    "RiderSelection",
    "SmokingStatus",
    # Gateway
    "RateGateway",
    "CachingRateGateway",
    "TableRateGateway",
    # Loaders
    "DataLoadError",
    "RateTables",
    "SyntheticRateProvider",
    "load_rate_tables",
    # Illustration
    "IllustrationEngine",
    "IllustrationYearRow",
    "MilestoneRow",
    "rows_to_frame",
    # Reverse lookup
    "ReverseLookupResult",
    "ReverseLookupSolver",
    "format_reverse_lookup_result",
    # Underwriting and valuation
    "required_examinations",
    "calculate_prepaid_policy",
    # Config
    "SETTINGS",
]
