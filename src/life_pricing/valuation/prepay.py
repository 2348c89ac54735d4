"""
Prepaid policy.

A lump sum deposited today pays the next N annual premiums:

    total_prepaid_needed = annual_premium × PREPAY_FACTORS[N]

The factors discount future premiums at 3%. The yearly breakdown is the
deposit balance remaining after each premium: year 1 pays the premium
straight away; each later year credits 3% growth first, then pays.
"""

from dataclasses import dataclass
from typing import Optional

from life_pricing.config.settings import SETTINGS, PrepayConfig

#: Present value of N annual premiums of 1, payable in advance, N = 0..20
PREPAY_FACTORS: tuple[float, ...] = (
    0.0,
    1.0000,
    1.9709,
    2.9135,
    3.8286,
    4.7171,
    5.5797,
    6.4172,
    7.2303,
    8.0197,
    8.7861,
    9.5302,
    10.2526,
    10.954,
    11.635,
    12.2961,
    12.9379,
    13.5611,
    14.1661,
    14.7535,
    15.3238,
)


@dataclass(frozen=True)
class PrepaidPolicy:
    """
    Lump sum prepaying a policy's premiums.

    Attributes
    ----------
    annual_premium : float
        Premium paid from the deposit each year
    years : int
        Years prepaid
    total_prepaid_needed : float
        Deposit required today
    yearly_breakdown : tuple[float, ...]
        Balance left after each year's premium
    """

    annual_premium: float
    years: int
    total_prepaid_needed: float
    yearly_breakdown: tuple[float, ...]


def prepay_factor(years: int, config: PrepayConfig = SETTINGS.prepay) -> float:
    """
    Prepay factor for a number of years.

    Raises
    ------
    ValueError
        If years is outside 0..max_years
    """
    if not 0 <= years <= config.max_years:
        raise ValueError(
            f"CRITICAL: prepay years must be in [0, {config.max_years}], got {years}"
        )
    return PREPAY_FACTORS[years]


def total_prepaid_needed(
    annual_premium: float, years: int, config: PrepayConfig = SETTINGS.prepay
) -> float:
    """Deposit needed today to pay ``years`` annual premiums."""
    return annual_premium * prepay_factor(years, config)


def prepaid_balances(
    total: float,
    annual_premium: float,
    years: int,
    config: PrepayConfig = SETTINGS.prepay,
) -> tuple[float, ...]:
    """
    Deposit balance after each year's premium.

    Examples
    --------
    >>> prepaid_balances(200.0, 100.0, 2)
    (100.0, 3.0)
    """
    balance = total
    balances: list[float] = []
    for year in range(1, years + 1):
        if year > 1:
            balance *= 1 + config.growth_rate
        balance -= annual_premium
        balances.append(balance)
    return tuple(balances)


def calculate_prepaid_policy(
    annual_premium: float,
    years: int,
    config: Optional[PrepayConfig] = None,
) -> PrepaidPolicy:
    """
    Deposit and yearly balances for prepaying a policy.

    Parameters
    ----------
    annual_premium : float
        Annual premium (from the quote)
    years : int
        Years to prepay, 0 to 20
    config : PrepayConfig, optional
        Growth and horizon assumptions. Default: SETTINGS.prepay

    Returns
    -------
    PrepaidPolicy
        Deposit needed and the balance after each year

    Raises
    ------
    ValueError
        If annual_premium is negative or years is out of range
    """
    config = config or SETTINGS.prepay
    if annual_premium < 0:
        raise ValueError(
            f"CRITICAL: annual_premium must be >= 0, got {annual_premium}"
        )
    total = total_prepaid_needed(annual_premium, years, config)
    return PrepaidPolicy(
        annual_premium=annual_premium,
        years=years,
        total_prepaid_needed=total,
        yearly_breakdown=prepaid_balances(total, annual_premium, years, config),
    )
