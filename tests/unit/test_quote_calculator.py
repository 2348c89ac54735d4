"""
Tests for quote assembly (base policy plus riders).
"""

import pytest

from life_pricing.data.schemas import RiderKind, RiderSelection
from life_pricing.products.premium import RateNotFoundError
from life_pricing.products.quote import (
    PremiumResult,
    QuoteCalculator,
    format_premium_result,
)


@pytest.fixture
def all_riders() -> RiderSelection:
    """Every rider on a $10,000 policy."""
    return RiderSelection(
        waiver_of_premium=True,
        accidental_death_kind=RiderKind.ACCIDENTAL_DEATH_ADB,
        accidental_death_amount=10_000,
        dependent_child_amount=5_000,
        guaranteed_insurability_amount=10_000,
    )


class TestQuoteCalculator:
    """Tests for QuoteCalculator.calculate."""

    async def test_base_only(self, gateway, pwl_policy) -> None:
        result = await QuoteCalculator(gateway).calculate(pwl_policy)
        assert result.premium_basic_rate == pytest.approx(13.25)
        assert result.total_premium == pytest.approx(13.25)
        assert result.total_annual_premium == pytest.approx(141.00)
        assert result.rider_premiums == {}

    async def test_disabled_riders_are_none(self, gateway, pwl_policy) -> None:
        result = await QuoteCalculator(gateway).calculate(pwl_policy, RiderSelection())
        assert result.premium_waiver_of_premium is None
        assert result.premium_accidental_death is None
        assert result.premium_dependent_child is None
        assert result.premium_guaranteed_insurability is None

    async def test_all_riders(self, gateway, pwl_policy, all_riders) -> None:
        """Dependent child is priced with the waiver loading when WOP is on."""
        result = await QuoteCalculator(gateway).calculate(pwl_policy, all_riders)
        assert result.premium_waiver_of_premium == pytest.approx(0.72)
        assert result.premium_accidental_death == pytest.approx(0.90)
        assert result.premium_dependent_child == pytest.approx(2.36)
        assert result.premium_guaranteed_insurability == pytest.approx(0.90)
        assert result.total_premium == pytest.approx(13.25 + 0.72 + 0.90 + 2.36 + 0.90)

    async def test_total_is_sum_of_components(self, gateway, pwl_policy, all_riders) -> None:
        result = await QuoteCalculator(gateway).calculate(pwl_policy, all_riders)
        expected = result.premium_basic_rate + sum(result.rider_premiums.values())
        assert result.total_premium == pytest.approx(expected, abs=1e-9)

    async def test_annual_total_sums_components(self, gateway, pwl_policy, all_riders) -> None:
        result = await QuoteCalculator(gateway).calculate(pwl_policy, all_riders)
        # base 141 + WOP 8 + ADB 10 + DC 5 × 5.25 + GI 10
        assert result.total_annual_premium == pytest.approx(141 + 8 + 10 + 26.25 + 10)

    async def test_dependent_child_without_waiver(self, gateway, pwl_policy) -> None:
        riders = RiderSelection(dependent_child_amount=5_000)
        result = await QuoteCalculator(gateway).calculate(pwl_policy, riders)
        assert result.premium_dependent_child == pytest.approx(4.25)

    async def test_accidental_death_kind_selects_rate(self, gateway, pwl_policy) -> None:
        riders = RiderSelection(
            accidental_death_kind=RiderKind.ACCIDENTAL_DEATH_ADD,
            accidental_death_amount=10_000,
        )
        result = await QuoteCalculator(gateway).calculate(pwl_policy, riders)
        assert result.premium_accidental_death == pytest.approx(1.08)

    async def test_substandard_loading_on_base_only(self, gateway, pwl_policy) -> None:
        policy = pwl_policy.with_changes(table_rating=2, flat_extra_per_thousand=5.0)
        riders = RiderSelection(waiver_of_premium=True)
        result = await QuoteCalculator(gateway).calculate(policy, riders)
        assert result.premium_basic_rate == pytest.approx(20.00)
        assert result.premium_waiver_of_premium == pytest.approx(0.72)

    async def test_missing_rider_rate_raises(self, gateway, premier_policy) -> None:
        """No 56100_WP rows in the store."""
        with pytest.raises(RateNotFoundError):
            await QuoteCalculator(gateway).calculate(
                premier_policy, RiderSelection(waiver_of_premium=True)
            )

    async def test_annuity_quotes_the_deposit(self, gateway, annuity_policy) -> None:
        result = await QuoteCalculator(gateway).calculate(annuity_policy)
        assert result.premium_basic_rate == 100
        assert result.total_premium == 100
        assert result.total_annual_premium == 100


class TestBasePremium:
    """Tests for QuoteCalculator.base_premium."""

    async def test_ignores_rider_kind(self, gateway, pwl_policy) -> None:
        policy = pwl_policy.with_changes(rider_kind=RiderKind.WAIVER_OF_PREMIUM)
        component = await QuoteCalculator(gateway).base_premium(policy)
        assert component.rider_kind is RiderKind.NONE
        assert component.modal_premium == pytest.approx(13.25)

    async def test_term_duration(self, gateway, term_policy) -> None:
        component = await QuoteCalculator(gateway).base_premium(term_policy, duration=2)
        assert component.modal_premium == pytest.approx(16.40)


class TestFormatPremiumResult:
    """Tests for format_premium_result."""

    def test_lists_enabled_riders(self) -> None:
        result = PremiumResult(
            premium_basic_rate=13.25,
            premium_waiver_of_premium=0.72,
            total_premium=13.97,
            total_annual_premium=149.0,
        )
        text = format_premium_result(result)
        assert "Premium Summary" in text
        assert "Waiver of premium:" in text
        assert "Dependent child" not in text
        assert "13.97" in text
