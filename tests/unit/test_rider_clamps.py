"""
Tests for rider amount rules.

Tests cover:
- Accidental-death range and clamp
- Dependent-child halving and rounding down to multiples of 3 × 1000
- Guaranteed-insurability rounding down to multiples of 2 × 5000
- Offered amount lists
- Re-clamping a whole rider selection
"""

import pytest

from life_pricing.config.settings import RiderConfig
from life_pricing.data.schemas import RiderKind, RiderSelection
from life_pricing.products.riders import (
    accidental_death_bounds,
    clamp_accidental_death,
    clamp_dependent_child,
    clamp_guaranteed_insurability,
    clamp_riders,
    dependent_child_options,
    guaranteed_insurability_options,
)


# =============================================================================
# Accidental Death
# =============================================================================

class TestAccidentalDeath:
    """Accidental death: [10000, min(300000, face)]."""

    @pytest.mark.parametrize(
        "face, requested, expected",
        [
            (50_000, 25_000, 25_000),
            (50_000, 100_000, 50_000),
            (50_000, 5_000, 10_000),
            (1_000_000, 500_000, 300_000),
            (10_000, 10_000, 10_000),
        ],
    )
    def test_clamp(self, face, requested, expected) -> None:
        assert clamp_accidental_death(face, requested) == expected

    def test_face_below_minimum_disables(self) -> None:
        assert accidental_death_bounds(9_999) is None
        assert clamp_accidental_death(9_999, 10_000) == 0.0

    def test_no_request_disables(self) -> None:
        assert clamp_accidental_death(50_000, 0) == 0.0

    def test_custom_limits(self) -> None:
        config = RiderConfig(accidental_death_min=5_000, accidental_death_max=20_000)
        assert clamp_accidental_death(50_000, 40_000, config) == 20_000


# =============================================================================
# Dependent Child
# =============================================================================

class TestDependentChild:
    """Dependent child: halved up to face 10000, floor(v / 3000) × 1000."""

    @pytest.mark.parametrize(
        "face, requested, expected",
        [
            (20_000, 10_000, 3_000),
            (20_000, 9_000, 3_000),
            (20_000, 5_000, 1_000),
            (100_000, 60_000, 10_000),
            (100_000, 30_000, 10_000),
        ],
    )
    def test_clamp(self, face, requested, expected) -> None:
        assert clamp_dependent_child(face, requested) == expected

    def test_small_face_halves_request(self) -> None:
        """10000 requested on a 10000 face: halved to 5000, then 1000."""
        assert clamp_dependent_child(10_000, 10_000) == 1_000

    def test_request_capped_by_face(self) -> None:
        """min(v, face) before rounding: 8000 face caps a 20000 request."""
        # 20000 halved is 10000, capped at 8000, floor(8000 / 3000) = 2
        assert clamp_dependent_child(8_000, 20_000) == 2_000

    def test_below_minimum_disables(self) -> None:
        assert clamp_dependent_child(20_000, 2_000) == 0.0

    def test_face_at_minimum_disables(self) -> None:
        assert clamp_dependent_child(1_000, 5_000) == 0.0

    def test_options(self) -> None:
        assert dependent_child_options(4_500) == (1_000.0, 2_000.0, 3_000.0, 4_000.0)
        assert len(dependent_child_options(50_000)) == 10


# =============================================================================
# Guaranteed Insurability
# =============================================================================

class TestGuaranteedInsurability:
    """Guaranteed insurability: floor(v / 10000) × 5000 within [5000, 25000]."""

    @pytest.mark.parametrize(
        "face, requested, expected",
        [
            (30_000, 25_000, 10_000),
            (30_000, 10_000, 5_000),
            (1_000_000, 100_000, 25_000),
            (12_000, 25_000, 5_000),
        ],
    )
    def test_clamp(self, face, requested, expected) -> None:
        assert clamp_guaranteed_insurability(face, requested) == expected

    def test_below_minimum_disables(self) -> None:
        assert clamp_guaranteed_insurability(30_000, 5_000) == 0.0

    def test_face_at_minimum_disables(self) -> None:
        assert clamp_guaranteed_insurability(5_000, 25_000) == 0.0

    def test_options_capped_by_face(self) -> None:
        assert guaranteed_insurability_options(17_500) == (5_000.0, 10_000.0, 15_000.0)


# =============================================================================
# Selection
# =============================================================================

class TestClampRiders:
    """Tests for clamp_riders."""

    def test_reclamps_every_amount(self) -> None:
        riders = RiderSelection(
            waiver_of_premium=True,
            accidental_death_kind=RiderKind.ACCIDENTAL_DEATH_ADD,
            accidental_death_amount=300_000,
            dependent_child_amount=10_000,
            guaranteed_insurability_amount=25_000,
        )
        clamped = clamp_riders(riders, 50_000)
        assert clamped.waiver_of_premium
        assert clamped.accidental_death_kind is RiderKind.ACCIDENTAL_DEATH_ADD
        assert clamped.accidental_death_amount == 50_000
        assert clamped.dependent_child_amount == 3_000
        assert clamped.guaranteed_insurability_amount == 10_000

    def test_small_face_drops_riders(self) -> None:
        riders = RiderSelection(
            accidental_death_kind=RiderKind.ACCIDENTAL_DEATH_ADB,
            accidental_death_amount=50_000,
            dependent_child_amount=10_000,
            guaranteed_insurability_amount=25_000,
        )
        clamped = clamp_riders(riders, 1_000)
        assert not clamped.has_accidental_death
        assert not clamped.has_dependent_child
        assert not clamped.has_guaranteed_insurability
