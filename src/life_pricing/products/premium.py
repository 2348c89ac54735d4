"""
Premium Calculator.

Prices one policy component (the base policy or a single rider):

    modal = (face_amount / Unit) × BasicRate × ModeFactor + ServiceFee

rounded half-up to cents. Monthly-equivalent schedules (every four
weeks, semi-monthly, bi-weekly, weekly) are rated with the Monthly
record and the rounded Monthly premium is then scaled by a fixed
multiplier. Term products are rated per policy year.

Riders are priced by independent calls with an overridden rider kind
and face amount; summing them is the quote layer's job.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from life_pricing.config.settings import SETTINGS, PremiumConfig
from life_pricing.data.schemas import (
    MONTHLY_EQUIVALENT_MULTIPLIERS,
    PolicyInfo,
    RateRecord,
    RiderKind,
)
from life_pricing.gateway.base import RateGateway
from life_pricing.products.control_codes import (
    STANDALONE_RIDER_CODES,
    resolve_policy_control_code,
)
from life_pricing.rounding import round_currency

logger = logging.getLogger(__name__)


class RateNotFoundError(Exception):
    """Raised when the rate store has no record for a priced component."""

    pass


#: Components that carry the policy service fee
SERVICE_FEE_RIDER_KINDS = frozenset({RiderKind.NONE, RiderKind.DEPENDENT_CHILD})


@dataclass(frozen=True)
class ComponentPremium:
    """
    Premium for one policy component.

    Attributes
    ----------
    modal_premium : float
        Amount due per payment under the policy's payment mode
    annual_premium : float
        Annual-mode premium, rounded to cents
    basic_rate : float
        Rate per Unit actually applied (after any waiver loading)
    mode_factor : float
        Mode factor from the rate record
    service_fee : float
        Service fee included in the modal premium (0 when not charged)
    control_code : str
        Control code of the rate record used
    rider_kind : RiderKind
        Component priced
    table_extra : float
        Table-rating loading included in modal_premium
    flat_extra : float
        Flat-extra loading included in modal_premium
    """

    modal_premium: float
    annual_premium: float
    basic_rate: float
    mode_factor: float
    service_fee: float
    control_code: str
    rider_kind: RiderKind = RiderKind.NONE
    table_extra: float = 0.0
    flat_extra: float = 0.0


def charges_service_fee(policy: PolicyInfo) -> bool:
    """True when the component's premium includes the service fee."""
    return policy.rider_kind in SERVICE_FEE_RIDER_KINDS and not policy.dependent_child_waiver


async def fetch_rate_record(
    gateway: RateGateway,
    policy: PolicyInfo,
    control_code: str,
    duration: Optional[int] = None,
    config: PremiumConfig = SETTINGS.premium,
) -> RateRecord:
    """
    Fetch the rate record pricing a policy component.

    Monthly-equivalent schedules fetch the Monthly record. Term products
    fetch the policy-year record, except for standalone rider codes.

    Raises
    ------
    RateNotFoundError
        If the gateway has no record
    """
    rate_mode = policy.payment_mode.rate_mode
    if policy.product_type.is_term and control_code not in STANDALONE_RIDER_CODES:
        record = await gateway.get_term_rate(
            control_code,
            policy.age,
            policy.gender,
            policy.smoking_status,
            rate_mode,
            policy.payment_method,
            duration if duration is not None else config.default_term_duration,
        )
    else:
        record = await gateway.get_rate(
            control_code,
            policy.age,
            policy.gender,
            policy.smoking_status,
            rate_mode,
            policy.payment_method,
        )

    if record is None:
        raise RateNotFoundError(
            f"No rate found for control code {control_code}, age {policy.age}, "
            f"gender {policy.gender.value}, smoking status {policy.smoking_status.value}"
        )
    return record


class PremiumCalculator:
    """
    Modal and annual premium for one policy component.

    Parameters
    ----------
    gateway : RateGateway
        Rate store access
    config : PremiumConfig, optional
        Premium constants. Default: SETTINGS.premium

    Examples
    --------
    >>> calculator = PremiumCalculator(gateway)  # doctest: +SKIP
    >>> result = await calculator.calculate(policy)  # doctest: +SKIP
    >>> result.modal_premium  # doctest: +SKIP
    9.25
    """

    def __init__(self, gateway: RateGateway, config: Optional[PremiumConfig] = None):
        self._gateway = gateway
        self._config = config or SETTINGS.premium

    def child_waiver_loading(self, policy: PolicyInfo) -> float:
        """Basic-rate loading for a dependent child priced with waiver."""
        if not policy.dependent_child_waiver:
            return 0.0
        if policy.age <= self._config.child_waiver_age_limit:
            return self._config.child_waiver_loading_young
        return self._config.child_waiver_loading_old

    async def calculate(
        self,
        policy: PolicyInfo,
        duration: Optional[int] = None,
    ) -> ComponentPremium:
        """
        Price one policy component.

        Parameters
        ----------
        policy : PolicyInfo
            Component snapshot; rider_kind selects the rider priced
        duration : int, optional
            Policy year for term rates. Default: config.default_term_duration

        Returns
        -------
        ComponentPremium
            Modal and annual premium with the rate inputs used

        Raises
        ------
        ConfigurationError
            If the product has no control code
        RateNotFoundError
            If the rate store has no record (e.g. age out of range)
        """
        control_code = resolve_policy_control_code(
            policy.product_type,
            policy.gender,
            policy.smoking_status,
            policy.face_amount,
            policy.rider_kind,
        )
        record = await fetch_rate_record(
            self._gateway, policy, control_code, duration, self._config
        )

        basic_rate = record.basic_rate + self.child_waiver_loading(policy)
        units = policy.face_amount / record.unit
        premium = units * basic_rate * record.mode_factor
        annual = units * basic_rate * record.annual_factor

        service_fee = 0.0
        if charges_service_fee(policy):
            service_fee = record.service_fee
            premium += record.service_fee
            annual += record.annual_service_fee

        modal_premium = round_currency(premium)
        multiplier = MONTHLY_EQUIVALENT_MULTIPLIERS.get(policy.payment_mode)
        if multiplier is not None:
            modal_premium *= multiplier

        logger.debug(
            f"{control_code} face={policy.face_amount:,.0f} age={policy.age} "
            f"{policy.payment_mode.value}: modal={modal_premium:.4f}"
        )

        return ComponentPremium(
            modal_premium=modal_premium,
            annual_premium=round_currency(annual),
            basic_rate=basic_rate,
            mode_factor=record.mode_factor,
            service_fee=service_fee,
            control_code=record.control_code,
            rider_kind=policy.rider_kind,
        )
