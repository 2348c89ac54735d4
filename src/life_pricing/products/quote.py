"""
Quote assembly: base policy plus riders.

Each enabled rider is priced by an independent PremiumCalculator call
with an overridden rider kind and face amount, and the components are
summed:

    total_premium = premium_basic_rate + Σ enabled rider premiums

Substandard loadings apply to the base policy only. Annuity products
are quoted as a planned deposit: the premium is the deposit itself and
no rate is looked up.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from life_pricing.config.settings import SETTINGS, PremiumConfig
from life_pricing.data.schemas import (
    PolicyInfo,
    ProductFamily,
    RiderKind,
    RiderSelection,
)
from life_pricing.gateway.base import RateGateway
from life_pricing.products.premium import ComponentPremium, PremiumCalculator
from life_pricing.products.table_rating import TableRatingAdjuster

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PremiumResult:
    """
    Premium for a full quote.

    Attributes
    ----------
    premium_basic_rate : float
        Base-policy modal premium, including substandard loadings
    premium_waiver_of_premium : float, optional
        Waiver-of-premium modal premium, None when not selected
    premium_accidental_death : float, optional
        Accidental-death (ADB or ADD) modal premium
    premium_dependent_child : float, optional
        Dependent-child modal premium
    premium_guaranteed_insurability : float, optional
        Guaranteed-insurability modal premium
    total_premium : float
        Sum of the base and every enabled rider
    total_annual_premium : float
        Sum of each component's annual premium
    """

    premium_basic_rate: float
    premium_waiver_of_premium: Optional[float] = None
    premium_accidental_death: Optional[float] = None
    premium_dependent_child: Optional[float] = None
    premium_guaranteed_insurability: Optional[float] = None
    total_premium: float = 0.0
    total_annual_premium: float = 0.0

    @property
    def rider_premiums(self) -> dict[str, float]:
        """Modal premium of each enabled rider, keyed by rider name."""
        premiums = {
            "waiver_of_premium": self.premium_waiver_of_premium,
            "accidental_death": self.premium_accidental_death,
            "dependent_child": self.premium_dependent_child,
            "guaranteed_insurability": self.premium_guaranteed_insurability,
        }
        return {name: value for name, value in premiums.items() if value is not None}


class QuoteCalculator:
    """
    Price a policy and its riders.

    Parameters
    ----------
    gateway : RateGateway
        Rate store access
    config : PremiumConfig, optional
        Premium constants. Default: SETTINGS.premium

    Examples
    --------
    >>> quotes = QuoteCalculator(gateway)  # doctest: +SKIP
    >>> result = await quotes.calculate(  # doctest: +SKIP
    ...     policy, RiderSelection(waiver_of_premium=True)
    ... )
    >>> result.total_premium == result.premium_basic_rate + sum(  # doctest: +SKIP
    ...     result.rider_premiums.values()
    ... )
    True
    """

    def __init__(self, gateway: RateGateway, config: Optional[PremiumConfig] = None):
        self._config = config or SETTINGS.premium
        self._premiums = PremiumCalculator(gateway, self._config)
        self._adjuster = TableRatingAdjuster(gateway, self._config)

    async def base_premium(
        self,
        policy: PolicyInfo,
        duration: Optional[int] = None,
    ) -> ComponentPremium:
        """Base-policy premium with table-rating and flat-extra loadings."""
        base_policy = policy.with_changes(
            rider_kind=RiderKind.NONE, dependent_child_waiver=False
        )
        base = await self._premiums.calculate(base_policy, duration)
        return await self._adjuster.adjust(base_policy, base, duration)

    async def _rider_premium(
        self,
        policy: PolicyInfo,
        rider_kind: RiderKind,
        face_amount: float,
        dependent_child_waiver: bool = False,
    ) -> ComponentPremium:
        component = policy.with_changes(
            rider_kind=rider_kind,
            face_amount=face_amount,
            dependent_child_waiver=dependent_child_waiver,
        )
        return await self._premiums.calculate(component)

    async def calculate(
        self,
        policy: PolicyInfo,
        riders: Optional[RiderSelection] = None,
    ) -> PremiumResult:
        """
        Price the base policy and every enabled rider.

        Parameters
        ----------
        policy : PolicyInfo
            Base-policy snapshot
        riders : RiderSelection, optional
            Riders to add. Default: none

        Returns
        -------
        PremiumResult
            Per-component modal premiums and totals

        Raises
        ------
        ConfigurationError
            If the product has no control code
        RateNotFoundError
            If any component has no rate record
        """
        riders = riders or RiderSelection()

        if policy.product_type.family is ProductFamily.ANNUITY:
            logger.info(f"Annuity deposit quote: {policy.face_amount:,.2f}")
            return PremiumResult(
                premium_basic_rate=policy.face_amount,
                total_premium=policy.face_amount,
                total_annual_premium=policy.face_amount,
            )

        base = await self.base_premium(policy)
        total_annual = base.annual_premium

        premium_wop = None
        if riders.waiver_of_premium:
            wop = await self._rider_premium(
                policy, RiderKind.WAIVER_OF_PREMIUM, policy.face_amount
            )
            premium_wop = wop.modal_premium
            total_annual += wop.annual_premium

        premium_ad = None
        if riders.has_accidental_death:
            accidental_death = await self._rider_premium(
                policy, riders.accidental_death_kind, riders.accidental_death_amount
            )
            premium_ad = accidental_death.modal_premium
            total_annual += accidental_death.annual_premium

        premium_dc = None
        if riders.has_dependent_child:
            dependent_child = await self._rider_premium(
                policy,
                RiderKind.DEPENDENT_CHILD,
                riders.dependent_child_amount,
                dependent_child_waiver=riders.waiver_of_premium,
            )
            premium_dc = dependent_child.modal_premium
            total_annual += dependent_child.annual_premium

        premium_gi = None
        if riders.has_guaranteed_insurability:
            guaranteed_insurability = await self._rider_premium(
                policy,
                RiderKind.GUARANTEED_INSURABILITY,
                riders.guaranteed_insurability_amount,
            )
            premium_gi = guaranteed_insurability.modal_premium
            total_annual += guaranteed_insurability.annual_premium

        total = (
            base.modal_premium
            + (premium_wop or 0.0)
            + (premium_ad or 0.0)
            + (premium_dc or 0.0)
            + (premium_gi or 0.0)
        )

        logger.info(
            f"Quote {policy.product_type.value} face={policy.face_amount:,.0f} "
            f"age={policy.age}: total={total:.2f} annual={total_annual:.2f}"
        )

        return PremiumResult(
            premium_basic_rate=base.modal_premium,
            premium_waiver_of_premium=premium_wop,
            premium_accidental_death=premium_ad,
            premium_dependent_child=premium_dc,
            premium_guaranteed_insurability=premium_gi,
            total_premium=total,
            total_annual_premium=total_annual,
        )


def format_premium_result(result: PremiumResult) -> str:
    """
    Format a premium result as a plain-text summary.

    Parameters
    ----------
    result : PremiumResult
        Quote to format

    Returns
    -------
    str
        One line per component followed by the totals
    """
    lines = [
        "Premium Summary",
        "=" * 40,
        f"Base policy:                {result.premium_basic_rate:>12.2f}",
    ]
    for name, premium in result.rider_premiums.items():
        label = name.replace("_", " ").capitalize() + ":"
        lines.append(f"{label:<28}{premium:>12.2f}")
    lines.append("-" * 40)
    lines.append(f"Total premium:              {result.total_premium:>12.2f}")
    lines.append(f"Total annual premium:       {result.total_annual_premium:>12.2f}")
    return "\n".join(lines)
