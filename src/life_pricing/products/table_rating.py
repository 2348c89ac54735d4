"""
Table-Rating & Flat-Extra Adjuster.

Adds substandard loadings on top of a base-policy premium:

    extra_table = (face_amount / 1000) × table_factor × ModeFactor
    extra_flat  = face_amount × flat_extra_per_thousand × ModeFactor / 1000

The two loadings are independent and additive. The $1000 unit is fixed
and does not follow the product's rate Unit. ModeFactor is re-derived
with one extra rate lookup whenever either loading applies.
"""

import logging
from dataclasses import replace
from typing import Optional

from life_pricing.config.settings import SETTINGS, PremiumConfig
from life_pricing.data.schemas import PolicyInfo
from life_pricing.gateway.base import RateGateway
from life_pricing.products.control_codes import resolve_control_code
from life_pricing.products.premium import ComponentPremium, fetch_rate_record
from life_pricing.rounding import round_currency

logger = logging.getLogger(__name__)


class TableRatingAdjuster:
    """
    Apply table-rating and flat-extra loadings to a base premium.

    Parameters
    ----------
    gateway : RateGateway
        Rate store access (mode factors and risk-rating factors)
    config : PremiumConfig, optional
        Premium constants. Default: SETTINGS.premium
    """

    def __init__(self, gateway: RateGateway, config: Optional[PremiumConfig] = None):
        self._gateway = gateway
        self._config = config or SETTINGS.premium

    async def table_factor(self, policy: PolicyInfo) -> float:
        """Risk-rating factor per $1000 for the policy's table (0 when standard)."""
        if policy.table_rating <= 0:
            return 0.0
        return await self._gateway.get_risk_rating_factor(
            self._config.risk_rating_code,
            policy.age,
            policy.gender.risk_rating_gender,
            policy.table_rating,
        )

    async def adjust(
        self,
        policy: PolicyInfo,
        base: ComponentPremium,
        duration: Optional[int] = None,
    ) -> ComponentPremium:
        """
        Add substandard loadings to a base-policy premium.

        Parameters
        ----------
        policy : PolicyInfo
            Base-policy snapshot carrying table_rating and flat extra
        base : ComponentPremium
            Unloaded base premium
        duration : int, optional
            Policy year for term rates

        Returns
        -------
        ComponentPremium
            ``base`` itself when no loading applies, otherwise a copy with
            both loadings added to the modal and annual premiums

        Raises
        ------
        RateNotFoundError
            If the mode-factor lookup finds no record
        """
        if not policy.is_substandard:
            return base

        control_code = resolve_control_code(
            policy.product_type,
            policy.gender,
            policy.smoking_status,
            policy.face_amount,
        )
        record = await fetch_rate_record(
            self._gateway, policy, control_code, duration, self._config
        )

        thousands = policy.face_amount / self._config.loading_unit
        factor = await self.table_factor(policy)

        table_extra = thousands * factor * record.mode_factor
        table_extra_annual = thousands * factor * record.annual_factor

        flat_extra = 0.0
        flat_extra_annual = 0.0
        if policy.flat_extra_per_thousand > 0:
            flat_extra = (
                policy.face_amount * policy.flat_extra_per_thousand * record.mode_factor
                / self._config.loading_unit
            )
            flat_extra_annual = (
                policy.face_amount * policy.flat_extra_per_thousand * record.annual_factor
                / self._config.loading_unit
            )

        logger.debug(
            f"Table {policy.table_rating} (factor {factor}) and flat extra "
            f"{policy.flat_extra_per_thousand}/1000: +{table_extra:.4f} +{flat_extra:.4f}"
        )

        return replace(
            base,
            modal_premium=base.modal_premium + table_extra + flat_extra,
            annual_premium=round_currency(
                base.annual_premium + table_extra_annual + flat_extra_annual
            ),
            table_extra=table_extra,
            flat_extra=flat_extra,
        )
