"""
Integration tests for the quote → illustrate → reverse-lookup workflow.

Runs the full pipeline on synthetic rate tables:
1. Quote a policy with riders
2. Illustrate it through a caching gateway
3. Solve the face amount back from the quoted premium

Tests cover:
- Participating whole life, premier, term and annuity products
- Caching gateway reuse across illustrations
- Reverse lookup recovering the quoted face amount
"""

import pytest

from life_pricing import (
    CachingRateGateway,
    Gender,
    IllustrationEngine,
    PolicyInfo,
    ProductType,
    QuoteCalculator,
    RiderKind,
    RiderSelection,
    SmokingStatus,
    SyntheticRateProvider,
    TableRateGateway,
    rows_to_frame,
)
from life_pricing.data.schemas import PaymentMode
from life_pricing.solver.reverse_lookup import ReverseLookupSolver


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(scope="module")
def synthetic_gateway() -> TableRateGateway:
    """Synthetic tables for every product, illustrated at issue ages 30 and 45."""
    tables = SyntheticRateProvider(seed=2024).generate_tables(
        issue_ages=(30, 45),
        term_durations=range(1, 21),
    )
    return TableRateGateway(tables)


def _policy(product: ProductType, face_amount: float, age: int = 30, **overrides) -> PolicyInfo:
    fields = dict(
        product_type=product,
        face_amount=face_amount,
        age=age,
        gender=Gender.MALE,
        smoking_status=SmokingStatus.NON_SMOKER,
    )
    fields.update(overrides)
    return PolicyInfo(**fields)


# =============================================================================
# Whole Life
# =============================================================================

class TestWholeLifeWorkflow:
    """Quote, illustrate and solve a participating whole-life policy."""

    async def test_quote_with_riders(self, synthetic_gateway) -> None:
        policy = _policy(ProductType.PWL, 100_000)
        riders = RiderSelection(
            waiver_of_premium=True,
            accidental_death_kind=RiderKind.ACCIDENTAL_DEATH_ADB,
            accidental_death_amount=100_000,
            dependent_child_amount=10_000,
            guaranteed_insurability_amount=25_000,
        )
        result = await QuoteCalculator(synthetic_gateway).calculate(policy, riders)

        assert set(result.rider_premiums) == {
            "waiver_of_premium",
            "accidental_death",
            "dependent_child",
            "guaranteed_insurability",
        }
        assert result.total_premium == pytest.approx(
            result.premium_basic_rate + sum(result.rider_premiums.values())
        )
        assert result.total_annual_premium > result.total_premium

    @pytest.mark.slow
    async def test_illustration_through_cache(self, synthetic_gateway) -> None:
        policy = _policy(ProductType.PWL, 100_000)
        quote = await QuoteCalculator(synthetic_gateway).calculate(policy)

        cached = CachingRateGateway(synthetic_gateway)
        engine = IllustrationEngine(cached)
        milestones = await engine.milestones(policy, quote.total_premium)
        yearly = await engine.yearly_table(policy, quote.total_annual_premium)

        assert [row.label for row in milestones] == [
            "year_5", "year_10", "year_20", "age_70", "maturity",
        ]
        assert not any(row.degraded for row in milestones)
        assert not any(row.degraded for row in yearly)
        assert cached.stats.hits > 0

        # Milestone and yearly values agree where the schedules overlap;
        # the maturity milestone applies the boundary offsets every year
        by_year = {row.end_of_year: row for row in yearly}
        for milestone in milestones[:-1]:
            row = by_year[milestone.duration]
            assert row.guaranteed_cash_value == milestone.guaranteed_cash_value
            assert row.current_death_benefit == milestone.current_death_benefit

    @pytest.mark.slow
    async def test_yearly_values_grow(self, synthetic_gateway) -> None:
        policy = _policy(ProductType.PWL, 50_000)
        rows = await IllustrationEngine(synthetic_gateway).yearly_table(policy, 600.0)

        pua = [row.accumulated_paid_up_additions for row in rows]
        assert pua == sorted(pua)
        assert rows[-1].age == 121
        assert rows[-1].current_death_benefit >= policy.face_amount

        frame = rows_to_frame(rows)
        assert len(frame) == len(rows)

    async def test_reverse_lookup_recovers_face(self, synthetic_gateway) -> None:
        quotes = QuoteCalculator(synthetic_gateway)
        policy = _policy(ProductType.PWL, 50_000)
        quote = await quotes.calculate(policy)

        result = await ReverseLookupSolver(quotes).find_face_amount(
            policy.with_changes(face_amount=1_000), None, quote.total_premium
        )
        assert result.converged
        assert result.face_amount == pytest.approx(50_000, abs=20)


# =============================================================================
# Other Families
# =============================================================================

class TestPremierWorkflow:
    """Premier guaranteed values from the NSP table."""

    async def test_milestones(self, synthetic_gateway) -> None:
        policy = _policy(ProductType.PC_LEVEL, 25_000, age=45, gender=Gender.FEMALE)
        quote = await QuoteCalculator(synthetic_gateway).calculate(policy)
        rows = await IllustrationEngine(synthetic_gateway).milestones(policy, quote.total_premium)

        assert [row.label for row in rows] == [
            "year_5", "year_10", "year_20", "age_70", "maturity",
        ]
        assert not any(row.degraded for row in rows)
        assert all(row.guaranteed_death_benefit == 25_000 for row in rows)


class TestTermWorkflow:
    """Term products: premiums by policy year, no cash values."""

    async def test_quote_and_yearly_table(self, synthetic_gateway) -> None:
        policy = _policy(ProductType.ST10, 250_000, age=45, gender=Gender.FEMALE)
        quote = await QuoteCalculator(synthetic_gateway).calculate(policy)
        rows = await IllustrationEngine(synthetic_gateway).yearly_table(
            policy, quote.total_annual_premium
        )

        assert [row.end_of_year for row in rows] == list(range(1, 11))
        assert all(row.guaranteed_cash_value is None for row in rows)
        assert all(row.total_paid_up is None for row in rows)

    async def test_reverse_lookup(self, synthetic_gateway) -> None:
        quotes = QuoteCalculator(synthetic_gateway)
        policy = _policy(ProductType.ST20, 200_000, age=35)
        quote = await quotes.calculate(policy)

        result = await ReverseLookupSolver(quotes).find_face_amount(
            policy, None, quote.total_premium
        )
        assert result.converged
        repriced = await quotes.calculate(policy.with_changes(face_amount=result.face_amount))
        assert repriced.total_premium == pytest.approx(result.premium)

    async def test_legacy_upper_band_is_cheaper(self, synthetic_gateway) -> None:
        """Above the band limit the per-thousand rate drops."""
        quotes = QuoteCalculator(synthetic_gateway)
        lower = await quotes.calculate(_policy(ProductType.LT10, 250_000, age=40))
        upper = await quotes.calculate(_policy(ProductType.LT10, 300_000, age=40))
        fee = 2.0
        assert (upper.total_premium - fee) / 300 < (lower.total_premium - fee) / 250


class TestAnnuityWorkflow:
    """Annuity quotes equal the deposit and accumulate to maturity."""

    async def test_deposit_accumulation(self, synthetic_gateway) -> None:
        policy = _policy(
            ProductType.ANNUITY, 200, age=40, payment_mode=PaymentMode.QUARTERLY
        )
        quote = await QuoteCalculator(synthetic_gateway).calculate(policy)
        assert quote.total_premium == 200

        engine = IllustrationEngine(synthetic_gateway)
        rows = await engine.annuity_table(policy, quote.total_premium, years=10)
        assert len(rows) == 10
        values = [row.cash_surrender_value for row in rows]
        assert values == sorted(values)

        milestones = await engine.milestones(policy, quote.total_premium)
        assert milestones[0].current_cash_value == rows[4].cash_surrender_value
