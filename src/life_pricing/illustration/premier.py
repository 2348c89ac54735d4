"""
Premier choice (reduced paid-up) values.

Premier choice has guaranteed values only:

    guaranteed_cash_value = face / 1000 × cash_rate(duration)
    reduced_paid_up       = round(guaranteed_cash_value / nsp_rate × 1000)

with the net single premium (NSP) rate taken at attained age. A missing
or zero NSP rate gives no reduced paid-up amount.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from life_pricing.data.schemas import IllustrationKind, PolicyInfo
from life_pricing.gateway.base import RateGateway
from life_pricing.products.control_codes import resolve_plan_code
from life_pricing.products.premium import RateNotFoundError
from life_pricing.rounding import round_dollars

logger = logging.getLogger(__name__)


def reduced_paid_up(guaranteed_cash_value: float, nsp_rate: Optional[float]) -> float:
    """
    Paid-up face amount the cash value buys.

    Examples
    --------
    >>> reduced_paid_up(5_000.0, 500.0)
    10000.0
    >>> reduced_paid_up(5_000.0, 0.0)
    0.0
    """
    if nsp_rate is None or nsp_rate <= 0:
        return 0.0
    return round_dollars(guaranteed_cash_value / nsp_rate * 1000)


@dataclass(frozen=True)
class PremierValues:
    """Guaranteed premier-choice values at one duration."""

    duration: int
    guaranteed_cash_value: float
    reduced_paid_up: float
    death_benefit: float


class PremierProjector:
    """
    Guaranteed cash value and reduced paid-up for premier choice.

    Parameters
    ----------
    gateway : RateGateway
        Illustration-factor access
    policy : PolicyInfo
        Base-policy snapshot
    """

    def __init__(self, gateway: RateGateway, policy: PolicyInfo):
        self._gateway = gateway
        self._policy = policy

    async def project(self, duration: int) -> PremierValues:
        """
        Value the policy at a duration.

        Raises
        ------
        ConfigurationError
            If the product has no plan code
        RateNotFoundError
            If the cash-value row is missing
        """
        policy = self._policy
        plan_code = resolve_plan_code(policy.product_type, policy.gender, policy.smoking_status)

        cash_rate = await self._gateway.get_illustration_factor(
            plan_code,
            IllustrationKind.CASH,
            policy.gender,
            policy.age,
            duration,
            policy.smoking_status,
        )
        if cash_rate is None:
            raise RateNotFoundError(
                f"No cash-value rate for plan {plan_code}, issue age {policy.age}, "
                f"duration {duration}"
            )
        guaranteed = policy.face_amount / 1000 * cash_rate

        nsp_rate = await self._gateway.get_illustration_factor(
            plan_code,
            IllustrationKind.NSP,
            policy.gender,
            policy.age + duration,
            None,
            policy.smoking_status,
        )
        logger.debug(f"Premier {plan_code} duration={duration}: cash={cash_rate} nsp={nsp_rate}")

        return PremierValues(
            duration=duration,
            guaranteed_cash_value=round_dollars(guaranteed),
            reduced_paid_up=reduced_paid_up(guaranteed, nsp_rate),
            death_benefit=policy.face_amount,
        )
