"""
Tests for the in-memory and caching rate gateways.
"""

import dataclasses

import pytest

from life_pricing.data.schemas import (
    Gender,
    IllustrationKind,
    PaymentMethod,
    PaymentMode,
    PolicyInfo,
    ProductType,
    SmokingStatus,
)
from life_pricing.gateway.base import RateGateway
from life_pricing.gateway.caching import CacheStats, CachingRateGateway
from life_pricing.gateway.tables import TableRateGateway, term_control_code
from life_pricing.products.premium import PremiumCalculator, RateNotFoundError

MALE = Gender.MALE
NON_SMOKER = SmokingStatus.NON_SMOKER
MONTHLY = PaymentMode.MONTHLY
REGULAR = PaymentMethod.REGULAR


# =============================================================================
# TableRateGateway
# =============================================================================

class TestGetRate:
    """Tests for TableRateGateway.get_rate."""

    async def test_record_fields(self, gateway) -> None:
        record = await gateway.get_rate("54015", 30, MALE, NON_SMOKER, MONTHLY, REGULAR)
        assert record.plan_code == "54015"
        assert record.basic_rate == 12.50
        assert record.unit == 1000.0
        assert record.mode_factor == 0.09
        assert record.annual_factor == 1.0
        assert record.service_fee == 2.0
        assert record.annual_service_fee == 16.0
        assert record.age == 30

    async def test_age_must_match(self, gateway) -> None:
        record = await gateway.get_rate("54015", 31, MALE, NON_SMOKER, MONTHLY, REGULAR)
        assert record.basic_rate == 14.00

    async def test_missing_row_is_none(self, gateway) -> None:
        assert await gateway.get_rate("54015", 30, MALE, SmokingStatus.SMOKER, MONTHLY, REGULAR) is None

    async def test_dependent_child_matches_anything(self, gateway) -> None:
        record = await gateway.get_rate(
            "dep_child", 77, Gender.FEMALE, SmokingStatus.SMOKER, MONTHLY, REGULAR
        )
        assert record.basic_rate == 5.00
        assert record.age is None

    async def test_guaranteed_insurability_matches_age_only(self, gateway) -> None:
        record = await gateway.get_rate(
            "9000", 30, Gender.FEMALE, SmokingStatus.SMOKER, MONTHLY, REGULAR
        )
        assert record.basic_rate == 1.00
        assert await gateway.get_rate("9000", 31, MALE, NON_SMOKER, MONTHLY, REGULAR) is None

    async def test_mode_selects_factor_and_fee(self, gateway) -> None:
        record = await gateway.get_rate(
            "54015", 30, MALE, NON_SMOKER, PaymentMode.QUARTERLY, PaymentMethod.EFT
        )
        assert record.mode_factor == 0.26
        assert record.service_fee == 3.0
        assert record.annual_service_fee == 12.0

    async def test_monthly_equivalent_mode_has_no_column(self, gateway) -> None:
        """Callers rate monthly-equivalent schedules with the Monthly record."""
        record = await gateway.get_rate(
            "54015", 30, MALE, NON_SMOKER, PaymentMode.WEEKLY, REGULAR
        )
        assert record is None

    async def test_missing_service_fee_row_is_none(self, sample_tables) -> None:
        """A plan with a mode factor but no fee row has no rate record."""
        fees = sample_tables.service_fees
        tables = dataclasses.replace(
            sample_tables,
            service_fees=fees[fees["PlanCode"] != "54015"].reset_index(drop=True),
        )
        gateway = TableRateGateway(tables)
        assert await gateway.get_rate("54015", 30, MALE, NON_SMOKER, MONTHLY, REGULAR) is None

        with pytest.raises(RateNotFoundError):
            await PremiumCalculator(gateway).calculate(
                PolicyInfo(
                    product_type=ProductType.PWL,
                    face_amount=10_000,
                    age=30,
                    gender=MALE,
                    smoking_status=NON_SMOKER,
                )
            )


class TestGetTermRate:
    """Tests for term rates by policy year."""

    def test_term_control_code(self) -> None:
        assert term_control_code("24585", 2) == "24585_DUR_2"
        assert term_control_code("9000", 2) == "9000"

    async def test_duration_rows(self, gateway) -> None:
        first = await gateway.get_term_rate("24585", 30, MALE, NON_SMOKER, MONTHLY, REGULAR, 1)
        second = await gateway.get_term_rate("24585", 30, MALE, NON_SMOKER, MONTHLY, REGULAR, 2)
        assert (first.basic_rate, second.basic_rate) == (1.50, 1.60)
        assert first.plan_code == "24585"


class TestRiskRatingFactor:
    """Tests for get_risk_rating_factor."""

    async def test_any_age_unisex_row(self, gateway) -> None:
        assert await gateway.get_risk_rating_factor("7000", 45, MALE, 3) == pytest.approx(3.75)

    async def test_missing_is_zero(self, gateway) -> None:
        assert await gateway.get_risk_rating_factor("7000", 45, MALE, 17) == 0.0
        assert await gateway.get_risk_rating_factor("8000", 45, MALE, 1) == 0.0


class TestIllustrationFactors:
    """Tests for illustration-factor queries."""

    async def test_duration_factor(self, gateway) -> None:
        factor = await gateway.get_illustration_factor(
            "54015", IllustrationKind.CASH, MALE, 30, 5, NON_SMOKER
        )
        assert factor == 50.0

    async def test_attained_age_factor(self, gateway) -> None:
        """No duration selects the age-keyed (duration 0) row."""
        factor = await gateway.get_illustration_factor(
            "54015", IllustrationKind.PUA_PREMIUM, MALE, 60, None, NON_SMOKER
        )
        assert factor == 400.0

    async def test_blank_risk(self, gateway) -> None:
        factor = await gateway.get_illustration_factor(
            "54018", IllustrationKind.PUA_DIVIDEND, MALE, 60, None, None
        )
        assert factor == 20.0
        # A risk value does not match a blank column
        assert await gateway.get_illustration_factor(
            "54018", IllustrationKind.PUA_DIVIDEND, MALE, 60, None, NON_SMOKER
        ) is None

    async def test_missing_is_none(self, gateway) -> None:
        assert await gateway.get_illustration_factor(
            "54015", IllustrationKind.CASH, MALE, 30, 92, NON_SMOKER
        ) is None

    async def test_all_factors(self, gateway) -> None:
        factors = await gateway.get_all_illustration_factors(
            "54015", IllustrationKind.DIVIDEND, MALE, 30, NON_SMOKER
        )
        assert sorted(factors) == list(range(1, 92))
        assert set(factors.values()) == {2.0}


# =============================================================================
# CachingRateGateway
# =============================================================================

class TestCachingRateGateway:
    """Tests for CachingRateGateway."""

    async def test_same_answers(self, gateway) -> None:
        cached = CachingRateGateway(gateway)
        direct = await gateway.get_rate("54015", 30, MALE, NON_SMOKER, MONTHLY, REGULAR)
        assert await cached.get_rate("54015", 30, MALE, NON_SMOKER, MONTHLY, REGULAR) == direct

    async def test_hits_and_misses(self, gateway) -> None:
        cached = CachingRateGateway(gateway)
        for _ in range(3):
            await cached.get_illustration_factor(
                "54015", IllustrationKind.CASH, MALE, 30, 5, NON_SMOKER
            )
        assert cached.stats.misses == 1
        assert cached.stats.hits == 2
        assert cached.stats.hit_rate == pytest.approx(2 / 3)

    async def test_absent_rows_are_cached(self, gateway) -> None:
        cached = CachingRateGateway(gateway)
        await cached.get_rate("nope", 30, MALE, NON_SMOKER, MONTHLY, REGULAR)
        assert await cached.get_rate("nope", 30, MALE, NON_SMOKER, MONTHLY, REGULAR) is None
        assert cached.stats.hits == 1

    async def test_all_factors_copy(self, gateway) -> None:
        cached = CachingRateGateway(gateway)
        first = await cached.get_all_illustration_factors(
            "54015", IllustrationKind.CASH, MALE, 30, NON_SMOKER
        )
        first.clear()
        second = await cached.get_all_illustration_factors(
            "54015", IllustrationKind.CASH, MALE, 30, NON_SMOKER
        )
        assert len(second) == 91

    async def test_clear(self, gateway) -> None:
        cached = CachingRateGateway(gateway)
        await cached.get_risk_rating_factor("7000", 30, MALE, 1)
        cached.clear()
        assert cached.stats.total == 0
        await cached.get_risk_rating_factor("7000", 30, MALE, 1)
        assert cached.stats.misses == 1

    def test_empty_stats(self) -> None:
        assert CacheStats().hit_rate == 0.0

    def test_is_a_gateway(self, sample_tables) -> None:
        assert isinstance(CachingRateGateway(TableRateGateway(sample_tables)), RateGateway)
