"""
Illustration Engine.

Builds the two illustration views for a quoted policy:

- milestones: summary rows at the schedule's milestone durations
- yearly table: one row per reported policy year

and dispatches each product family to its projection:

| Family     | Values                                                    |
|------------|-----------------------------------------------------------|
| WHOLE_LIFE | dividends, PUA, cash values, paid-up, death benefit       |
| TERM       | premiums and flat face death benefit only                 |
| PREMIER    | guaranteed cash value and reduced paid-up                 |
| ANNUITY    | deposits and cash-surrender value                         |

A row whose rates cannot be resolved (unmapped plan code, missing
cash-value row) degrades on its own: it keeps the premium and face
death benefit, its value fields become None and the rest of the
illustration completes.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Optional, Sequence, Union

import pandas as pd

from life_pricing.config.settings import SETTINGS, IllustrationConfig
from life_pricing.data.schemas import PolicyInfo, ProductFamily
from life_pricing.gateway.base import RateGateway
from life_pricing.illustration.annuity import AnnuityYearRow, accumulate_deposits
from life_pricing.illustration.participating import (
    ParticipatingProjector,
    PUAProjection,
)
from life_pricing.illustration.premier import PremierProjector
from life_pricing.illustration.schedule import (
    final_duration,
    milestone_durations,
    monthly_premium,
    yearly_durations,
)
from life_pricing.products.control_codes import ConfigurationError
from life_pricing.products.premium import RateNotFoundError
from life_pricing.rounding import round_currency, round_dollars

logger = logging.getLogger(__name__)


# =============================================================================
# Row Types
# =============================================================================


@dataclass(frozen=True)
class IllustrationYearRow:
    """
    One row of the yearly illustration table.

    Value columns a product does not have (e.g. cash values on term) are
    None. ``degraded`` marks a row whose values could not be computed.
    """

    age: int
    end_of_year: int
    contract_premium: float
    guaranteed_death_benefit: float
    guaranteed_cash_value: Optional[float] = None
    annual_dividend: Optional[float] = None
    accumulated_paid_up_additions: Optional[float] = None
    current_cash_value: Optional[float] = None
    current_death_benefit: Optional[float] = None
    total_paid_up: Optional[float] = None
    degraded: bool = False


@dataclass(frozen=True)
class MilestoneRow:
    """
    One milestone of the summary illustration.

    Attributes
    ----------
    label : str
        ``year_<n>``, ``age_70`` or ``maturity``
    duration : int
        Policy years from issue
    age : int
        Attained age at the milestone
    total_premiums : float
        Premiums (or annuity deposits) paid to the milestone, whole dollars
    guaranteed_death_benefit : float, optional
        Face amount (None for annuities)
    guaranteed_cash_value, midpoint_cash_value, current_cash_value : float, optional
        Cash-surrender value columns
    midpoint_paid_up, total_paid_up : float, optional
        Paid-up insurance columns (participating products)
    reduced_paid_up : float, optional
        Reduced paid-up amount (premier choice)
    midpoint_death_benefit, current_death_benefit : float, optional
        Death benefit including PUA (participating products)
    degraded : bool
        True when the values could not be computed
    """

    label: str
    duration: int
    age: int
    total_premiums: float
    guaranteed_death_benefit: Optional[float] = None
    guaranteed_cash_value: Optional[float] = None
    midpoint_cash_value: Optional[float] = None
    current_cash_value: Optional[float] = None
    midpoint_paid_up: Optional[float] = None
    total_paid_up: Optional[float] = None
    reduced_paid_up: Optional[float] = None
    midpoint_death_benefit: Optional[float] = None
    current_death_benefit: Optional[float] = None
    degraded: bool = False


def rows_to_frame(
    rows: Sequence[Union[IllustrationYearRow, MilestoneRow, AnnuityYearRow]],
) -> pd.DataFrame:
    """
    Convert illustration rows to a DataFrame, one column per field.

    Parameters
    ----------
    rows : Sequence
        Rows of a single type

    Returns
    -------
    pd.DataFrame
        Empty frame for no rows
    """
    return pd.DataFrame([asdict(row) for row in rows])


# =============================================================================
# Engine
# =============================================================================


class IllustrationEngine:
    """
    Milestone and yearly illustrations for any product family.

    Parameters
    ----------
    gateway : RateGateway
        Illustration-factor access
    config : IllustrationConfig, optional
        Schedule constants. Default: SETTINGS.illustration

    Examples
    --------
    >>> engine = IllustrationEngine(CachingRateGateway(gateway))  # doctest: +SKIP
    >>> rows = await engine.milestones(policy, quote.total_premium)  # doctest: +SKIP
    >>> [row.label for row in rows]  # doctest: +SKIP
    ['year_5', 'year_10', 'year_20', 'age_70', 'maturity']
    """

    def __init__(self, gateway: RateGateway, config: Optional[IllustrationConfig] = None):
        self._gateway = gateway
        self._config = config or SETTINGS.illustration

    # -------------------------------------------------------------------------
    # Milestones
    # -------------------------------------------------------------------------

    async def milestones(self, policy: PolicyInfo, modal_premium: float) -> list[MilestoneRow]:
        """
        Summary illustration at each milestone duration.

        Parameters
        ----------
        policy : PolicyInfo
            Base-policy snapshot
        modal_premium : float
            Total premium per payment (from the quote)

        Returns
        -------
        list[MilestoneRow]
            One row per milestone in schedule order
        """
        monthly = monthly_premium(modal_premium, policy.payment_mode)
        rows: list[MilestoneRow] = []

        for label, duration in milestone_durations(policy.age, self._config):
            total_premiums = round_dollars(duration * 12 * monthly)
            try:
                row = await self._milestone(policy, label, duration, total_premiums, monthly)
            except (ConfigurationError, RateNotFoundError) as e:
                logger.warning(
                    f"Illustration milestone {label} ({duration} years) degraded: {e}"
                )
                row = MilestoneRow(
                    label=label,
                    duration=duration,
                    age=policy.age + duration,
                    total_premiums=total_premiums,
                    guaranteed_death_benefit=policy.face_amount,
                    degraded=True,
                )
            rows.append(row)

        logger.info(
            f"Milestone illustration {policy.product_type.value} age={policy.age}: "
            f"{len(rows)} rows, {sum(row.degraded for row in rows)} degraded"
        )
        return rows

    async def _milestone(
        self,
        policy: PolicyInfo,
        label: str,
        duration: int,
        total_premiums: float,
        monthly: float,
    ) -> MilestoneRow:
        common = dict(
            label=label,
            duration=duration,
            age=policy.age + duration,
            total_premiums=total_premiums,
        )
        family = policy.product_type.family

        if family is ProductFamily.ANNUITY:
            last = accumulate_deposits(policy.age, monthly, duration)[-1]
            return MilestoneRow(
                **common,
                guaranteed_cash_value=last.cash_surrender_value,
                midpoint_cash_value=last.cash_surrender_value,
                current_cash_value=last.cash_surrender_value,
            )

        if family is ProductFamily.TERM:
            return MilestoneRow(**common, guaranteed_death_benefit=policy.face_amount)

        if family is ProductFamily.PREMIER:
            premier = await PremierProjector(self._gateway, policy).project(duration)
            return MilestoneRow(
                **common,
                guaranteed_death_benefit=premier.death_benefit,
                guaranteed_cash_value=premier.guaranteed_cash_value,
                reduced_paid_up=premier.reduced_paid_up,
            )

        values = await ParticipatingProjector(self._gateway, policy, self._config).project(duration)
        return MilestoneRow(
            **common,
            guaranteed_death_benefit=values.guaranteed_death_benefit,
            guaranteed_cash_value=values.guaranteed_cash_value,
            midpoint_cash_value=values.midpoint_cash_value,
            current_cash_value=values.current_cash_value,
            midpoint_paid_up=values.midpoint_paid_up,
            total_paid_up=values.total_paid_up,
            midpoint_death_benefit=values.midpoint_death_benefit,
            current_death_benefit=values.current_death_benefit,
        )

    # -------------------------------------------------------------------------
    # Yearly table
    # -------------------------------------------------------------------------

    def reported_years(self, policy: PolicyInfo) -> list[int]:
        """Policy years in the yearly table (term stops at its level period)."""
        years = yearly_durations(policy.age, self._config)
        term_years = policy.product_type.term_years
        if term_years is not None:
            years = [year for year in years if year <= term_years]
        return years

    async def yearly_table(
        self, policy: PolicyInfo, annual_premium: float
    ) -> list[IllustrationYearRow]:
        """
        Year-by-year illustration.

        Parameters
        ----------
        policy : PolicyInfo
            Base-policy snapshot (any family except annuity)
        annual_premium : float
            Contract premium reported on every row

        Returns
        -------
        list[IllustrationYearRow]
            One row per reported policy year

        Raises
        ------
        ValueError
            For annuity products (use ``annuity_table``)
        """
        family = policy.product_type.family
        if family is ProductFamily.ANNUITY:
            raise ValueError(
                "CRITICAL: annuity products have no yearly table; use annuity_table"
            )

        years = self.reported_years(policy)
        if family is ProductFamily.WHOLE_LIFE:
            rows = await self._participating_rows(policy, annual_premium, years)
        elif family is ProductFamily.PREMIER:
            rows = await self._premier_rows(policy, annual_premium, years)
        else:
            rows = [
                IllustrationYearRow(
                    age=policy.age + year,
                    end_of_year=year,
                    contract_premium=annual_premium,
                    guaranteed_death_benefit=policy.face_amount,
                )
                for year in years
            ]

        logger.info(
            f"Yearly illustration {policy.product_type.value} age={policy.age}: "
            f"{len(rows)} rows"
        )
        return rows

    def _degraded_row(
        self, policy: PolicyInfo, year: int, annual_premium: float, error: Exception
    ) -> IllustrationYearRow:
        logger.warning(f"Illustration year {year} degraded: {error}")
        return IllustrationYearRow(
            age=policy.age + year,
            end_of_year=year,
            contract_premium=annual_premium,
            guaranteed_death_benefit=policy.face_amount,
            degraded=True,
        )

    async def _participating_rows(
        self, policy: PolicyInfo, annual_premium: float, years: Sequence[int]
    ) -> list[IllustrationYearRow]:
        projector = ParticipatingProjector(self._gateway, policy, self._config)
        projection = PUAProjection()
        face = policy.face_amount
        final = final_duration(policy.age, self._config)

        rows: list[IllustrationYearRow] = []
        last_year = 0
        for year in years:
            try:
                # Years between reported rows still buy PUA
                for skipped in range(last_year + 1, year):
                    await projector.step(projection, skipped)
                step = await projector.step(projection, year, at_final_duration=year == final)
                last_year = year
                guaranteed = face / 1000 * await projector.cash_rate(year)
            except (ConfigurationError, RateNotFoundError) as e:
                rows.append(self._degraded_row(policy, year, annual_premium, e))
                continue

            accumulated = step.accumulated_pua
            premium_rate = step.pua_premium_rate
            current = guaranteed
            total_paid_up = 0.0
            if premium_rate > 0:
                current += accumulated * premium_rate / 1000
                total_paid_up = round_dollars(current / premium_rate * 1000)

            rows.append(IllustrationYearRow(
                age=step.age,
                end_of_year=year,
                contract_premium=annual_premium,
                guaranteed_death_benefit=round_dollars(face),
                guaranteed_cash_value=round_dollars(guaranteed),
                annual_dividend=round_currency(step.annual_dividend),
                accumulated_paid_up_additions=round_dollars(accumulated),
                current_cash_value=round_dollars(current),
                current_death_benefit=round_dollars(face + accumulated),
                total_paid_up=total_paid_up,
            ))
        return rows

    async def _premier_rows(
        self, policy: PolicyInfo, annual_premium: float, years: Sequence[int]
    ) -> list[IllustrationYearRow]:
        projector = PremierProjector(self._gateway, policy)
        rows: list[IllustrationYearRow] = []
        for year in years:
            try:
                values = await projector.project(year)
            except (ConfigurationError, RateNotFoundError) as e:
                rows.append(self._degraded_row(policy, year, annual_premium, e))
                continue
            rows.append(IllustrationYearRow(
                age=policy.age + year,
                end_of_year=year,
                contract_premium=annual_premium,
                guaranteed_death_benefit=values.death_benefit,
                guaranteed_cash_value=values.guaranteed_cash_value,
                total_paid_up=values.reduced_paid_up,
            ))
        return rows

    # -------------------------------------------------------------------------
    # Annuity table
    # -------------------------------------------------------------------------

    async def annuity_table(
        self,
        policy: PolicyInfo,
        modal_premium: float,
        years: Optional[int] = None,
    ) -> list[AnnuityYearRow]:
        """
        Year-by-year deposit accumulation for an annuity.

        Parameters
        ----------
        policy : PolicyInfo
            Annuity snapshot
        modal_premium : float
            Deposit per payment
        years : int, optional
            Years to project. Default: to maturity age
        """
        if policy.product_type.family is not ProductFamily.ANNUITY:
            raise ValueError(
                f"CRITICAL: annuity_table requires an annuity product, "
                f"got {policy.product_type.value}"
            )
        if years is None:
            years = final_duration(policy.age, self._config)
        monthly = monthly_premium(modal_premium, policy.payment_mode)
        return accumulate_deposits(policy.age, monthly, years)
