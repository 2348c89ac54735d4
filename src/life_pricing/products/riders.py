"""
Rider amount rules.

Rider amounts are functions of the base face amount. Each rider has a
clamp, mapping a requested amount to the amount in force for a face
amount, and (for stepped riders) the list of amounts offered:

- Accidental death: any amount in [10000, min(300000, face_amount)]
- Dependent child: 1000..10000 in steps of 1000; the requested amount
  is halved for face amounts up to 10000 and rounded down to a multiple
  of 3 × step
- Guaranteed insurability: 5000..25000 in steps of 5000, rounded down
  to a multiple of 2 × step

A clamp that leaves nothing in range returns 0, which disables the
rider. The reverse-lookup solver re-applies every clamp at each
candidate face amount.
"""

import math
from typing import Optional

from life_pricing.config.settings import SETTINGS, RiderConfig
from life_pricing.data.schemas import RiderSelection


# =============================================================================
# Accidental Death
# =============================================================================


def accidental_death_bounds(
    face_amount: float,
    config: RiderConfig = SETTINGS.riders,
) -> Optional[tuple[float, float]]:
    """
    Selectable accidental-death range for a face amount.

    Returns
    -------
    tuple[float, float] or None
        (minimum, maximum) inclusive, None when no amount is available

    Examples
    --------
    >>> accidental_death_bounds(50_000)
    (10000.0, 50000)
    >>> accidental_death_bounds(5_000) is None
    True
    """
    upper = min(config.accidental_death_max, face_amount)
    if upper < config.accidental_death_min:
        return None
    return config.accidental_death_min, upper


def clamp_accidental_death(
    face_amount: float,
    requested: float,
    config: RiderConfig = SETTINGS.riders,
) -> float:
    """
    Accidental-death amount in force for a face amount.

    The requested amount is clamped into [10000, min(300000, face_amount)].
    A non-positive request, or a face amount below the minimum, yields 0.
    """
    if requested <= 0:
        return 0.0
    bounds = accidental_death_bounds(face_amount, config)
    if bounds is None:
        return 0.0
    lower, upper = bounds
    return max(lower, min(requested, upper))


# =============================================================================
# Stepped Riders
# =============================================================================


def _round_down(amount: float, step: float, multiple: int) -> float:
    """Whole steps in ``amount / (multiple × step)``, as an amount."""
    return math.floor(amount / (multiple * step)) * step


def dependent_child_options(
    face_amount: float,
    config: RiderConfig = SETTINGS.riders,
) -> tuple[float, ...]:
    """
    Dependent-child amounts offered for a face amount.

    Examples
    --------
    >>> dependent_child_options(1_000)
    ()
    >>> dependent_child_options(3_000)
    (1000.0, 2000.0, 3000.0)
    """
    if face_amount <= config.dependent_child_min:
        return ()
    upper = min(config.dependent_child_max, face_amount)
    count = int(math.floor((upper - config.dependent_child_min) / config.dependent_child_step)) + 1
    return tuple(
        config.dependent_child_min + i * config.dependent_child_step for i in range(count)
    )


def clamp_dependent_child(
    face_amount: float,
    requested: float,
    config: RiderConfig = SETTINGS.riders,
) -> float:
    """
    Dependent-child amount in force for a face amount.

    Parameters
    ----------
    face_amount : float
        Candidate base face amount
    requested : float
        Amount asked for on the quote
    config : RiderConfig
        Rider limits

    Returns
    -------
    float
        Amount in [1000, 10000] on the step grid, or 0 when the face
        amount does not support the rider
    """
    if requested <= 0 or face_amount <= config.dependent_child_min:
        return 0.0

    value = requested
    if face_amount <= config.dependent_child_halving_limit:
        value *= 0.5

    amount = _round_down(
        min(value, face_amount),
        config.dependent_child_step,
        config.dependent_child_round_multiple,
    )
    if amount < config.dependent_child_min:
        return 0.0
    return float(min(amount, config.dependent_child_max))


def guaranteed_insurability_options(
    face_amount: float,
    config: RiderConfig = SETTINGS.riders,
) -> tuple[float, ...]:
    """
    Guaranteed-insurability amounts offered for a face amount.

    Examples
    --------
    >>> guaranteed_insurability_options(30_000)
    (5000.0, 10000.0, 15000.0, 20000.0, 25000.0)
    >>> guaranteed_insurability_options(5_000)
    ()
    """
    if face_amount <= config.guaranteed_insurability_min:
        return ()
    step = config.guaranteed_insurability_step
    upper = min(config.guaranteed_insurability_max, math.floor(face_amount / step) * step)
    count = int((upper - config.guaranteed_insurability_min) // step) + 1
    return tuple(config.guaranteed_insurability_min + i * step for i in range(count))


def clamp_guaranteed_insurability(
    face_amount: float,
    requested: float,
    config: RiderConfig = SETTINGS.riders,
) -> float:
    """
    Guaranteed-insurability amount in force for a face amount.

    The smaller of the request and the face amount is rounded down to a
    multiple of 2 × step, then held within [5000, 25000]; below the
    minimum the rider is dropped (0).
    """
    if requested <= 0 or face_amount <= config.guaranteed_insurability_min:
        return 0.0

    amount = _round_down(
        min(requested, face_amount),
        config.guaranteed_insurability_step,
        config.guaranteed_insurability_round_multiple,
    )
    if amount < config.guaranteed_insurability_min:
        return 0.0
    return float(min(amount, config.guaranteed_insurability_max))


# =============================================================================
# Selection
# =============================================================================


def clamp_riders(
    riders: RiderSelection,
    face_amount: float,
    config: RiderConfig = SETTINGS.riders,
) -> RiderSelection:
    """
    Re-derive every rider amount from a candidate face amount.

    Waiver of premium and the accidental-death kind carry over unchanged.

    Parameters
    ----------
    riders : RiderSelection
        Requested riders
    face_amount : float
        Candidate base face amount
    config : RiderConfig
        Rider limits

    Returns
    -------
    RiderSelection
        Riders in force at ``face_amount``
    """
    return RiderSelection(
        waiver_of_premium=riders.waiver_of_premium,
        accidental_death_kind=riders.accidental_death_kind,
        accidental_death_amount=clamp_accidental_death(
            face_amount, riders.accidental_death_amount, config
        ),
        dependent_child_amount=clamp_dependent_child(
            face_amount, riders.dependent_child_amount, config
        ),
        guaranteed_insurability_amount=clamp_guaranteed_insurability(
            face_amount, riders.guaranteed_insurability_amount, config
        ),
    )
