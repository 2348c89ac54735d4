"""
Reverse-Lookup Solver.

Finds the face amount whose total premium matches a target premium.
Premium grows with face amount, so a two-phase search suffices:

1. **Bracketing**: price face 1000, then 10000, then keep doubling until
   the premium exceeds the target. The last face at or below the target
   and the first face above it bracket the answer.
2. **Bisection**: evaluate the whole-dollar midpoint, move the bound on
   the side of the target, and stop once the premium is within one cent
   or the iteration cap is reached.

Every evaluation re-derives the rider amounts from the candidate face
amount before pricing. Non-convergence is reported on the result, not
raised.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from life_pricing.config.settings import SETTINGS, ReverseLookupConfig, RiderConfig
from life_pricing.data.schemas import PolicyInfo, RiderSelection
from life_pricing.products.quote import QuoteCalculator
from life_pricing.products.riders import clamp_riders
from life_pricing.rounding import round_half_up

logger = logging.getLogger(__name__)


# =============================================================================
# Result Dataclasses
# =============================================================================


@dataclass(frozen=True)
class FaceAmountEvaluation:
    """Total premium at one candidate face amount, with the riders priced."""

    face_amount: float
    riders: RiderSelection
    premium: float


@dataclass(frozen=True)
class ReverseLookupResult:
    """
    Face amount and rider amounts matching a target premium.

    Attributes
    ----------
    face_amount : float
        Whole-dollar face amount found
    accidental_death_amount : float
        Accidental-death amount in force at face_amount
    dependent_child_amount : float
        Dependent-child amount in force at face_amount
    guaranteed_insurability_amount : float
        Guaranteed-insurability amount in force at face_amount
    premium : float
        Total premium at face_amount
    target_premium : float
        Premium searched for
    iterations : int
        Bisection evaluations used
    converged : bool
        Whether the premium is within tolerance of the target
    """

    face_amount: float
    accidental_death_amount: float
    dependent_child_amount: float
    guaranteed_insurability_amount: float
    premium: float
    target_premium: float
    iterations: int
    converged: bool

    @property
    def premium_difference(self) -> float:
        """Premium found minus the target."""
        return self.premium - self.target_premium


# =============================================================================
# Solver
# =============================================================================


class ReverseLookupSolver:
    """
    Invert face amount -> total premium by bracketing and bisection.

    Parameters
    ----------
    quotes : QuoteCalculator
        Prices each candidate face amount
    config : ReverseLookupConfig, optional
        Search constants. Default: SETTINGS.reverse_lookup
    rider_config : RiderConfig, optional
        Rider limits for the clamps. Default: SETTINGS.riders

    Examples
    --------
    >>> solver = ReverseLookupSolver(QuoteCalculator(gateway))  # doctest: +SKIP
    >>> result = await solver.find_face_amount(policy, riders, 45.00)  # doctest: +SKIP
    >>> abs(result.premium - 45.00) < 0.01 or not result.converged  # doctest: +SKIP
    True
    """

    def __init__(
        self,
        quotes: QuoteCalculator,
        config: Optional[ReverseLookupConfig] = None,
        rider_config: Optional[RiderConfig] = None,
    ):
        self._quotes = quotes
        self._config = config or SETTINGS.reverse_lookup
        self._rider_config = rider_config or SETTINGS.riders

    async def evaluate(
        self,
        policy: PolicyInfo,
        riders: RiderSelection,
        face_amount: float,
    ) -> FaceAmountEvaluation:
        """Price the policy at a candidate face amount with re-clamped riders."""
        candidate_riders = clamp_riders(riders, face_amount, self._rider_config)
        result = await self._quotes.calculate(
            policy.with_changes(face_amount=face_amount), candidate_riders
        )
        return FaceAmountEvaluation(
            face_amount=face_amount,
            riders=candidate_riders,
            premium=result.total_premium,
        )

    async def find_face_amount(
        self,
        policy: PolicyInfo,
        riders: Optional[RiderSelection],
        target_premium: float,
    ) -> ReverseLookupResult:
        """
        Find the face amount whose total premium matches the target.

        Parameters
        ----------
        policy : PolicyInfo
            Policy snapshot; its face amount is ignored
        riders : RiderSelection, optional
            Requested riders; amounts are re-clamped at every candidate
        target_premium : float
            Total modal premium to match

        Returns
        -------
        ReverseLookupResult
            Face amount, riders in force and convergence details

        Raises
        ------
        ValueError
            If target_premium is not positive or cannot be bracketed
        RateNotFoundError
            If a candidate cannot be priced
        """
        if target_premium <= 0:
            raise ValueError(
                f"CRITICAL: target_premium must be > 0, got {target_premium}"
            )
        riders = riders or RiderSelection()

        low, high = await self._bracket(policy, riders, target_premium)
        logger.debug(f"Reverse lookup bracket for {target_premium:.2f}: [{low:,.0f}, {high:,.0f}]")

        return await self._bisect(policy, riders, target_premium, low, high)

    async def _bracket(
        self,
        policy: PolicyInfo,
        riders: RiderSelection,
        target_premium: float,
    ) -> tuple[float, float]:
        """Return (last face at or below target, first face above it)."""
        config = self._config
        current = config.start_face_amount
        low = current
        doublings = 0

        while True:
            evaluation = await self.evaluate(policy, riders, current)
            if evaluation.premium - target_premium > 0:
                return low, current

            low = current
            if current == config.start_face_amount:
                current += config.first_step
            else:
                doublings += 1
                if doublings > config.max_bracket_steps:
                    raise ValueError(
                        f"CRITICAL: target_premium {target_premium} not reached after "
                        f"{config.max_bracket_steps} doublings (face {current:,.0f})"
                    )
                current *= 2

    async def _bisect(
        self,
        policy: PolicyInfo,
        riders: RiderSelection,
        target_premium: float,
        low: float,
        high: float,
    ) -> ReverseLookupResult:
        config = self._config
        iterations = 0
        converged = False

        while True:
            mid = round_half_up((low + high) / 2, 0)
            evaluation = await self.evaluate(policy, riders, mid)
            iterations += 1

            delta = evaluation.premium - target_premium
            if delta >= config.tolerance:
                high = mid
            elif delta <= -config.tolerance:
                low = mid
            else:
                converged = True
                break

            if iterations >= config.max_iterations:
                break

        if converged:
            logger.info(
                f"Reverse lookup {target_premium:.2f}: face {mid:,.0f} "
                f"in {iterations} iterations"
            )
        else:
            logger.warning(
                f"Reverse lookup {target_premium:.2f} did not converge after "
                f"{iterations} iterations; returning face {mid:,.0f} "
                f"(premium {evaluation.premium:.2f})"
            )

        return ReverseLookupResult(
            face_amount=mid,
            accidental_death_amount=evaluation.riders.accidental_death_amount,
            dependent_child_amount=evaluation.riders.dependent_child_amount,
            guaranteed_insurability_amount=evaluation.riders.guaranteed_insurability_amount,
            premium=evaluation.premium,
            target_premium=target_premium,
            iterations=iterations,
            converged=converged,
        )


def format_reverse_lookup_result(result: ReverseLookupResult) -> str:
    """
    Format a reverse-lookup result as a single summary line.

    Parameters
    ----------
    result : ReverseLookupResult
        Result to format

    Returns
    -------
    str
        Formatted string
    """
    status = "converged" if result.converged else "NOT converged"
    return (
        f"| target {result.target_premium:>10.2f} | "
        f"face {result.face_amount:>12,.0f} | "
        f"premium {result.premium:>10.2f} | "
        f"AD {result.accidental_death_amount:>9,.0f} | "
        f"DC {result.dependent_child_amount:>7,.0f} | "
        f"GI {result.guaranteed_insurability_amount:>7,.0f} | "
        f"{result.iterations:>3} iterations, {status} |"
    )
