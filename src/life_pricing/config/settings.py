"""
Frozen configuration settings for life-insurance quoting.

All configuration is immutable (frozen dataclasses) so that every quote,
illustration and reverse lookup is reproducible from its inputs alone.
Business constants that the rate tables depend on (face unit, rider
limits, maturity age) live here rather than inside the calculators.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from life_pricing.config.tolerances import PREMIUM_TOLERANCE

# =============================================================================
# Data Configuration
# =============================================================================

def _resolve_rate_tables_dir() -> Path:
    """
    Resolve rate-table directory with environment variable override.

    Priority:
    1. LIFE_PRICING_RATE_TABLES environment variable (if set)
    2. Default: rate_tables/ in project root

    Returns
    -------
    Path
        Resolved directory holding the rate-table CSV files
    """
    env_path = os.environ.get("LIFE_PRICING_RATE_TABLES")
    if env_path:
        return Path(env_path)
    return Path(__file__).parent.parent.parent.parent / "rate_tables"


@dataclass(frozen=True)
class DataConfig:
    """
    Immutable rate-table configuration.

    Attributes
    ----------
    rate_tables_dir : Path
        Directory with the rate-table CSV files. Override with the
        LIFE_PRICING_RATE_TABLES environment variable.
    """

    rate_tables_dir: Path = None  # type: ignore[assignment]  # Set in __post_init__

    def __post_init__(self) -> None:
        """Initialize rate_tables_dir using resolver function."""
        if self.rate_tables_dir is None:
            object.__setattr__(self, "rate_tables_dir", _resolve_rate_tables_dir())

    # File names, one per rate-store table
    plan_rate_file: str = "PlanRate.csv"
    versions_file: str = "Versions.csv"
    service_fee_file: str = "ServiceFee.csv"
    illustration_file: str = "IllustrationTable.csv"
    risk_rating_file: str = "RatedTable.csv"


# =============================================================================
# Premium Configuration
# =============================================================================

@dataclass(frozen=True)
class PremiumConfig:
    """
    Immutable premium calculation configuration.

    Attributes
    ----------
    default_unit : float
        Face-amount unit used when a rate record leaves Unit blank
    loading_unit : float
        Fixed unit for table-rating and flat-extra loadings
    legacy_term_band_limit : float
        Largest face amount priced on the first legacy-term band
    default_term_duration : int
        Policy year used for term rates when none is given
    risk_rating_code : str
        Rate-store code for substandard table factors
    child_waiver_age_limit : int
        Oldest issue age receiving the young dependent-child waiver loading
    """

    default_unit: float = 1000.0
    loading_unit: float = 1000.0
    legacy_term_band_limit: float = 250_000.0
    default_term_duration: int = 1
    risk_rating_code: str = "7000"

    # Dependent child priced together with waiver of premium
    child_waiver_age_limit: int = 30
    child_waiver_loading_young: float = 0.25
    child_waiver_loading_old: float = 0.35

    max_table_rating: int = 16


# =============================================================================
# Rider Configuration
# =============================================================================

@dataclass(frozen=True)
class RiderConfig:
    """
    Immutable rider amount limits.

    Amounts are clamped against the policy face amount; see
    products/riders.py for the rules that consume these limits.
    """

    accidental_death_min: float = 10_000.0
    accidental_death_max: float = 300_000.0

    dependent_child_min: float = 1_000.0
    dependent_child_max: float = 10_000.0
    dependent_child_step: float = 1_000.0
    dependent_child_halving_limit: float = 10_000.0  # Requested amount halved at/below
    dependent_child_round_multiple: int = 3

    guaranteed_insurability_min: float = 5_000.0
    guaranteed_insurability_max: float = 25_000.0
    guaranteed_insurability_step: float = 5_000.0
    guaranteed_insurability_round_multiple: int = 2


# =============================================================================
# Illustration Configuration
# =============================================================================

@dataclass(frozen=True)
class IllustrationConfig:
    """
    Immutable illustration schedule configuration.

    Attributes
    ----------
    maturity_age : int
        Attained age at which whole-life values end
    milestone_durations : tuple[int, ...]
        Fixed summary durations (policy years)
    milestone_age : int
        Attained age reported as its own summary row when still ahead
    individual_years : int
        Yearly table reports every year up to this duration
    stride : int
        Yearly table step after individual_years
    """

    maturity_age: int = 121
    milestone_durations: tuple[int, ...] = (5, 10, 20)
    milestone_age: int = 70
    individual_years: int = 20
    stride: int = 5


@dataclass(frozen=True)
class AnnuityConfig:
    """Immutable deposit-annuity accumulation assumptions."""

    credited_rate: float = 0.03
    initial_surrender_pct: int = 90  # Percentage points before year 1
    max_surrender_pct: int = 100


# =============================================================================
# Reverse Lookup Configuration
# =============================================================================

@dataclass(frozen=True)
class ReverseLookupConfig:
    """
    Immutable reverse-lookup search configuration.

    Attributes
    ----------
    start_face_amount : float
        First bracketing face amount
    first_step : float
        Increment applied once before doubling starts
    tolerance : float
        Premium difference treated as a match
    max_iterations : int
        Bisection evaluations before the last midpoint is returned
    max_bracket_steps : int
        Doublings before the target is declared unreachable
    """

    start_face_amount: float = 1_000.0
    first_step: float = 9_000.0
    tolerance: float = PREMIUM_TOLERANCE
    max_iterations: int = 50
    max_bracket_steps: int = 40


@dataclass(frozen=True)
class PrepayConfig:
    """Immutable prepaid-policy assumptions."""

    growth_rate: float = 0.03
    max_years: int = 20


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from life_pricing.config.settings import SETTINGS
    >>> SETTINGS.premium.legacy_term_band_limit
    250000.0
    """

    data: DataConfig = DataConfig()
    premium: PremiumConfig = PremiumConfig()
    riders: RiderConfig = RiderConfig()
    illustration: IllustrationConfig = IllustrationConfig()
    annuity: AnnuityConfig = AnnuityConfig()
    reverse_lookup: ReverseLookupConfig = ReverseLookupConfig()
    prepay: PrepayConfig = PrepayConfig()


# Singleton instance - import this
SETTINGS = Settings()
