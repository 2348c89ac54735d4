"""
Participating whole-life projection.

Each policy year the dividend buys paid-up additions (PUA):

    base_dividend  = face / 1000 × dividend_rate(year)
    pua_dividend   = round_half_up(accumulated_pua / 1000 × pua_dividend_rate(age), 2)
    purchased_pua  = trunc((base_dividend + pua_dividend) / pua_premium_rate(age) × 1000)
    accumulated_pua += purchased_pua

where ``age`` is the attained age at the end of the year. Accumulated
PUA never decreases.

Final-duration boundary: when the projection runs to maturity the rate
tables stop one age short, so the PUA rates come from the previous
attained age (see FINAL_DURATION_RATE_OFFSETS).

Values at a duration:

    guaranteed_cash_value = face / 1000 × cash_rate(duration)
    current_cash_value    = accumulated_pua × pua_premium_rate / 1000 + guaranteed
    total_paid_up         = round(current / pua_premium_rate × 1000)
    death_benefit         = round(face + accumulated_pua)

Midpoint values average the guaranteed and current columns.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from life_pricing.config.settings import SETTINGS, IllustrationConfig
from life_pricing.data.schemas import IllustrationKind, PolicyInfo
from life_pricing.gateway.base import RateGateway
from life_pricing.products.control_codes import (
    pua_dividend_plan_code,
    resolve_plan_code,
)
from life_pricing.products.premium import RateNotFoundError
from life_pricing.rounding import round_currency, round_dollars, truncate_dollars

logger = logging.getLogger(__name__)

#: At the final duration, keyed by "PUA dividend row present at attained
#: age": attained-age offsets for (PUA dividend rate, PUA premium rate)
FINAL_DURATION_RATE_OFFSETS: dict[bool, tuple[int, int]] = {
    True: (0, -1),
    False: (-1, -1),
}

#: Attained-age offset of the PUA premium rate valuing accumulated PUA,
#: keyed by "PUA dividend row present at attained age"
VALUATION_PREMIUM_OFFSETS: dict[bool, int] = {
    True: 0,
    False: -1,
}


# =============================================================================
# Dividend Arithmetic
# =============================================================================


def base_dividend(face_amount: float, dividend_rate: float) -> float:
    """Dividend on the base face amount."""
    return face_amount / 1000 * dividend_rate


def paid_up_addition_dividend(prev_accumulated_pua: float, pua_dividend_rate: float) -> float:
    """
    Dividend earned by the PUA already in force, rounded to cents.

    Examples
    --------
    >>> paid_up_addition_dividend(0.0, 5.0)
    0.0
    >>> paid_up_addition_dividend(2_000.0, 3.25)
    6.5
    """
    if prev_accumulated_pua == 0:
        return 0.0
    return round_currency(prev_accumulated_pua / 1000 * pua_dividend_rate)


def purchased_paid_up_additions(
    face_amount: float,
    dividend_rate: float,
    prev_accumulated_pua: float,
    pua_dividend_rate: float,
    pua_premium_rate: float,
) -> float:
    """
    Paid-up additions bought with one year's total dividend (truncated).

    Returns 0 when the PUA premium rate is not positive.
    """
    if pua_premium_rate <= 0:
        return 0.0
    total_dividend = base_dividend(face_amount, dividend_rate) + paid_up_addition_dividend(
        prev_accumulated_pua, pua_dividend_rate
    )
    return truncate_dollars(total_dividend / pua_premium_rate * 1000)


# =============================================================================
# Projection State
# =============================================================================


class PUAProjection:
    """
    Accumulated paid-up additions carried through one projection.

    Starts at 0 and only grows; a fresh instance is used for every
    projection.
    """

    def __init__(self) -> None:
        self._accumulated = 0.0
        self._history: list[float] = []

    @property
    def accumulated(self) -> float:
        return self._accumulated

    @property
    def history(self) -> tuple[float, ...]:
        """Accumulated PUA after each projected year."""
        return tuple(self._history)

    def add(self, purchased: float) -> float:
        """
        Add one year's purchase.

        Raises
        ------
        ValueError
            If ``purchased`` is negative
        """
        if purchased < 0:
            raise ValueError(
                f"CRITICAL: purchased PUA must be >= 0, got {purchased}"
            )
        self._accumulated += purchased
        self._history.append(self._accumulated)
        return self._accumulated


@dataclass(frozen=True)
class ParticipatingStep:
    """
    One projected policy year.

    Attributes
    ----------
    year : int
        Policy year
    age : int
        Attained age at the end of the year
    base_dividend : float
        Dividend on the face amount
    pua_dividend : float
        Dividend on PUA in force at the start of the year
    purchased_pua : float
        PUA bought this year
    accumulated_pua : float
        PUA in force at the end of the year
    pua_premium_rate : float
        PUA premium rate used this year (0 when absent)
    """

    year: int
    age: int
    base_dividend: float
    pua_dividend: float
    purchased_pua: float
    accumulated_pua: float
    pua_premium_rate: float

    @property
    def annual_dividend(self) -> float:
        """Total dividend, rounded to cents."""
        return round_currency(self.base_dividend + self.pua_dividend)


@dataclass(frozen=True)
class ParticipatingValues:
    """
    Guaranteed, midpoint and current values at one duration.

    Cash values are rounded to whole dollars except ``midpoint_cash_value``,
    which is truncated.
    """

    duration: int
    accumulated_pua: float
    guaranteed_cash_value: float
    midpoint_cash_value: float
    current_cash_value: float
    total_paid_up: float
    midpoint_paid_up: float
    guaranteed_death_benefit: float
    midpoint_death_benefit: float
    current_death_benefit: float


# =============================================================================
# Projector
# =============================================================================


class ParticipatingProjector:
    """
    Project dividends, PUA and cash values for a participating policy.

    Every rate is fetched from the gateway as the year loop needs it;
    wrap the gateway in a CachingRateGateway to avoid repeat lookups.

    Parameters
    ----------
    gateway : RateGateway
        Illustration-factor access
    policy : PolicyInfo
        Base-policy snapshot
    config : IllustrationConfig, optional
        Schedule constants. Default: SETTINGS.illustration
    """

    def __init__(
        self,
        gateway: RateGateway,
        policy: PolicyInfo,
        config: Optional[IllustrationConfig] = None,
    ):
        self._gateway = gateway
        self._policy = policy
        self._config = config or SETTINGS.illustration

    @property
    def final_duration(self) -> int:
        return self._config.maturity_age - self._policy.age

    @property
    def plan_code(self) -> str:
        """Illustration plan code (raises ConfigurationError if unmapped)."""
        policy = self._policy
        return resolve_plan_code(policy.product_type, policy.gender, policy.smoking_status)

    # -------------------------------------------------------------------------
    # Rate lookups
    # -------------------------------------------------------------------------

    async def dividend_rate(self, year: int) -> float:
        policy = self._policy
        rate = await self._gateway.get_illustration_factor(
            self.plan_code,
            IllustrationKind.DIVIDEND,
            policy.gender,
            policy.age,
            year,
            policy.smoking_status,
        )
        return rate or 0.0

    async def pua_premium_rate(self, age: int) -> Optional[float]:
        policy = self._policy
        return await self._gateway.get_illustration_factor(
            self.plan_code,
            IllustrationKind.PUA_PREMIUM,
            policy.gender,
            age,
            None,
            policy.smoking_status,
        )

    async def pua_dividend_rate(self, age: int) -> Optional[float]:
        policy = self._policy
        return await self._gateway.get_illustration_factor(
            pua_dividend_plan_code(self.plan_code, policy.gender),
            IllustrationKind.PUA_DIVIDEND,
            policy.gender,
            age,
            None,
            None,
        )

    async def cash_rate(self, duration: int) -> float:
        """
        Guaranteed cash-value rate per $1000 at a duration.

        Raises
        ------
        RateNotFoundError
            If the rate store has no cash-value row
        """
        policy = self._policy
        rate = await self._gateway.get_illustration_factor(
            self.plan_code,
            IllustrationKind.CASH,
            policy.gender,
            policy.age,
            duration,
            policy.smoking_status,
        )
        if rate is None:
            raise RateNotFoundError(
                f"No cash-value rate for plan {self.plan_code}, issue age {policy.age}, "
                f"duration {duration}"
            )
        return rate

    async def pua_rates(self, age: int, at_final_duration: bool) -> tuple[float, float]:
        """
        PUA dividend and premium rates for a year ending at ``age``.

        Absent rows count as 0.
        """
        if not at_final_duration:
            dividend = await self.pua_dividend_rate(age)
            premium = await self.pua_premium_rate(age)
            return dividend or 0.0, premium or 0.0

        dividend_at_age = await self.pua_dividend_rate(age)
        dividend_offset, premium_offset = FINAL_DURATION_RATE_OFFSETS[dividend_at_age is not None]
        if dividend_offset == 0:
            dividend = dividend_at_age
        else:
            dividend = await self.pua_dividend_rate(age + dividend_offset)
        premium = await self.pua_premium_rate(age + premium_offset)
        return dividend or 0.0, premium or 0.0

    # -------------------------------------------------------------------------
    # Projection
    # -------------------------------------------------------------------------

    async def step(
        self,
        projection: PUAProjection,
        year: int,
        at_final_duration: bool = False,
    ) -> ParticipatingStep:
        """Project one policy year, adding its purchase to ``projection``."""
        age = self._policy.age + year
        dividend_rate = await self.dividend_rate(year)
        pua_dividend_rate, pua_premium_rate = await self.pua_rates(age, at_final_duration)

        prev_accumulated = projection.accumulated
        purchased = purchased_paid_up_additions(
            self._policy.face_amount,
            dividend_rate,
            prev_accumulated,
            pua_dividend_rate,
            pua_premium_rate,
        )
        projection.add(purchased)

        return ParticipatingStep(
            year=year,
            age=age,
            base_dividend=base_dividend(self._policy.face_amount, dividend_rate),
            pua_dividend=paid_up_addition_dividend(prev_accumulated, pua_dividend_rate),
            purchased_pua=purchased,
            accumulated_pua=projection.accumulated,
            pua_premium_rate=pua_premium_rate,
        )

    async def valuation_premium_rate(self, duration: int) -> float:
        """PUA premium rate valuing accumulated PUA at a duration."""
        age = self._policy.age + duration
        present = await self.pua_dividend_rate(age) is not None
        rate = await self.pua_premium_rate(age + VALUATION_PREMIUM_OFFSETS[present])
        return rate or 0.0

    async def project(self, duration: int) -> ParticipatingValues:
        """
        Project from issue to ``duration`` and value the policy there.

        Parameters
        ----------
        duration : int
            Policy years to project (1 to the final duration)

        Returns
        -------
        ParticipatingValues
            Cash value, paid-up and death benefit columns

        Raises
        ------
        ConfigurationError
            If the product has no illustration plan code
        RateNotFoundError
            If the cash-value row for ``duration`` is missing
        """
        if duration < 1:
            raise ValueError(f"CRITICAL: duration must be >= 1, got {duration}")

        face = self._policy.face_amount
        at_final = duration == self.final_duration

        projection = PUAProjection()
        for year in range(1, duration + 1):
            await self.step(projection, year, at_final)
        accumulated = projection.accumulated

        guaranteed = face / 1000 * await self.cash_rate(duration)
        premium_rate = await self.valuation_premium_rate(duration)
        current = accumulated * premium_rate / 1000 + guaranteed

        total_paid_up = round_dollars(current / premium_rate * 1000) if premium_rate > 0 else 0.0
        current_death_benefit = round_dollars(face + accumulated)

        logger.debug(
            f"Participating projection {self.plan_code} duration={duration}: "
            f"pua={accumulated:,.0f} current_cv={current:,.2f}"
        )

        return ParticipatingValues(
            duration=duration,
            accumulated_pua=accumulated,
            guaranteed_cash_value=round_dollars(guaranteed),
            midpoint_cash_value=truncate_dollars((guaranteed + current) / 2),
            current_cash_value=round_dollars(current),
            total_paid_up=total_paid_up,
            midpoint_paid_up=round_dollars(total_paid_up / 2),
            guaranteed_death_benefit=face,
            midpoint_death_benefit=round_dollars((current_death_benefit + face) / 2),
            current_death_benefit=current_death_benefit,
        )
