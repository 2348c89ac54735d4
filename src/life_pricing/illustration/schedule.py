"""
Illustration schedules: which durations are reported.

Milestone summary:
- policy years 5, 10 and 20
- the years until attained age 70, when still ahead
- the years until maturity (age 121), unless already listed

Yearly table:
- every policy year up to 20
- then every 5th year while attained age stays within 121
- plus the exact maturity duration when the stride skips it

Durations that would pass maturity are never reported.
"""

from life_pricing.config.settings import SETTINGS, IllustrationConfig
from life_pricing.data.schemas import MONTHLY_EQUIVALENT_MULTIPLIERS, PaymentMode

#: Months covered by one payment for each primary mode
MONTHS_PER_PAYMENT: dict[PaymentMode, int] = {
    PaymentMode.MONTHLY: 1,
    PaymentMode.QUARTERLY: 3,
    PaymentMode.SEMI_ANNUAL: 6,
    PaymentMode.ANNUAL: 12,
}

MATURITY_LABEL = "maturity"


def final_duration(issue_age: int, config: IllustrationConfig = SETTINGS.illustration) -> int:
    """
    Policy year at which the insured reaches maturity age.

    Examples
    --------
    >>> final_duration(30)
    91
    """
    return config.maturity_age - issue_age


def milestone_durations(
    issue_age: int,
    config: IllustrationConfig = SETTINGS.illustration,
) -> list[tuple[str, int]]:
    """
    Labelled milestone durations for an issue age.

    Parameters
    ----------
    issue_age : int
        Insured's age at issue
    config : IllustrationConfig
        Schedule constants

    Returns
    -------
    list[tuple[str, int]]
        (label, policy years) in report order. Labels are ``year_<n>``,
        ``age_<milestone age>`` and ``maturity``.

    Examples
    --------
    >>> milestone_durations(30)
    [('year_5', 5), ('year_10', 10), ('year_20', 20), ('age_70', 40), ('maturity', 91)]
    >>> [label for label, _ in milestone_durations(80)]
    ['year_5', 'year_10', 'year_20', 'maturity']
    """
    entries = [(f"year_{years}", years) for years in config.milestone_durations]

    years_to_age = config.milestone_age - issue_age
    if years_to_age > 0:
        entries.append((f"age_{config.milestone_age}", years_to_age))

    final = final_duration(issue_age, config)
    if final > 0 and final not in [years for _, years in entries]:
        entries.append((MATURITY_LABEL, final))

    return [
        (label, years)
        for label, years in entries
        if issue_age + years <= config.maturity_age
    ]


def yearly_durations(
    issue_age: int,
    config: IllustrationConfig = SETTINGS.illustration,
) -> list[int]:
    """
    Policy years reported in the yearly table, ascending.

    Examples
    --------
    >>> yearly_durations(30)[-4:]
    [80, 85, 90, 91]
    """
    final = final_duration(issue_age, config)
    years = [year for year in range(1, config.individual_years + 1) if year <= final]

    year = config.individual_years + config.stride
    while issue_age + year <= config.maturity_age:
        years.append(year)
        year += config.stride

    if final > config.individual_years and final not in years:
        years.append(final)
    return years


def monthly_premium(modal_premium: float, payment_mode: PaymentMode) -> float:
    """
    Monthly premium implied by a modal premium.

    Primary modes divide by the months one payment covers;
    monthly-equivalent schedules divide by their multiplier.

    Examples
    --------
    >>> monthly_premium(300.0, PaymentMode.QUARTERLY)
    100.0
    """
    multiplier = MONTHLY_EQUIVALENT_MULTIPLIERS.get(payment_mode)
    if multiplier is not None:
        return modal_premium / multiplier
    return modal_premium / MONTHS_PER_PAYMENT[payment_mode]
