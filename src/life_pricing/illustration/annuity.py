"""
Deposit-annuity accumulation.

Level yearly deposits (12 × the monthly premium) accumulate at the
guaranteed credited rate. The surrender percentage starts at 90 and
rises one point per policy year to 100, so year 1 surrenders at 91%.

Recurrence, with P the yearly deposit and r the credited rate:

    carried_1 = P × r
    balance_y = P + carried_y × (1 + r)
    carried_{y+1} = balance_y × (1 + r)

    cash_surrender_value_y = round(balance_y × surrender_pct_y / 100)
"""

from dataclasses import dataclass

from life_pricing.config.settings import SETTINGS, AnnuityConfig
from life_pricing.rounding import round_dollars


@dataclass(frozen=True)
class AnnuityYearRow:
    """
    One policy year of a deposit-annuity illustration.

    Attributes
    ----------
    year : int
        Policy year
    age : int
        Attained age at the end of the year
    yearly_premium : float
        Deposit made this year
    total_deposit : float
        Deposits made to date
    balance : float
        Accumulated balance, whole dollars
    cash_surrender_value : float
        Balance times the surrender percentage, whole dollars
    surrender_pct : int
        Surrender percentage in points
    """

    year: int
    age: int
    yearly_premium: float
    total_deposit: float
    balance: float
    cash_surrender_value: float
    surrender_pct: int


def accumulate_deposits(
    issue_age: int,
    monthly_premium: float,
    years: int,
    config: AnnuityConfig = SETTINGS.annuity,
) -> list[AnnuityYearRow]:
    """
    Accumulate level deposits year by year.

    Parameters
    ----------
    issue_age : int
        Age at issue
    monthly_premium : float
        Monthly deposit
    years : int
        Policy years to project
    config : AnnuityConfig
        Credited rate and surrender schedule

    Returns
    -------
    list[AnnuityYearRow]
        One row per year, 1 to ``years``

    Examples
    --------
    >>> rows = accumulate_deposits(40, 100.0, 3)
    >>> [row.surrender_pct for row in rows]
    [91, 92, 93]
    """
    if monthly_premium < 0:
        raise ValueError(
            f"CRITICAL: monthly_premium must be >= 0, got {monthly_premium}"
        )

    rate = config.credited_rate
    yearly_premium = monthly_premium * 12

    rows: list[AnnuityYearRow] = []
    total_deposit = 0.0
    carried = 0.0
    surrender_pct = config.initial_surrender_pct

    for year in range(1, years + 1):
        total_deposit += yearly_premium
        if surrender_pct < config.max_surrender_pct:
            surrender_pct += 1
        if year == 1:
            carried = yearly_premium * rate

        balance = yearly_premium + carried + carried * rate

        rows.append(AnnuityYearRow(
            year=year,
            age=issue_age + year,
            yearly_premium=yearly_premium,
            total_deposit=total_deposit,
            balance=round_dollars(balance),
            cash_surrender_value=round_dollars(balance * surrender_pct / 100),
            surrender_pct=surrender_pct,
        ))

        carried = balance * rate + balance

    return rows
