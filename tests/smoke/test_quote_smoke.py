"""
Smoke tests for quick CI validation.

These tests verify basic functionality without full coverage.
Run these first to catch obvious breakages before full test suite.

Usage:
    pytest tests/smoke/ -v
"""

import pytest


# =============================================================================
# Import Smoke Tests
# =============================================================================

class TestImportSmoke:
    """Verify core modules import successfully."""

    def test_import_core_packages(self):
        """Core packages should import without error."""
        import life_pricing
        import life_pricing.data
        import life_pricing.gateway
        import life_pricing.products

        assert life_pricing.__version__ == "0.1.0"

    def test_import_illustration_modules(self):
        """Illustration and solver modules should import."""
        from life_pricing.illustration import IllustrationEngine
        from life_pricing.solver import ReverseLookupSolver

        assert IllustrationEngine is not None
        assert ReverseLookupSolver is not None

    def test_import_supplements(self):
        """Examination and prepay modules should import."""
        from life_pricing.underwriting import required_examinations
        from life_pricing.valuation import calculate_prepaid_policy

        assert required_examinations is not None
        assert calculate_prepaid_policy is not None


# =============================================================================
# Quick Pricing Smoke Tests
# =============================================================================

class TestPricingSmoke:
    """Quick pricing functionality tests."""

    @pytest.fixture(scope="class")
    def quotes(self):
        from life_pricing import QuoteCalculator, SyntheticRateProvider, TableRateGateway
        from life_pricing.data.schemas import ProductType

        tables = SyntheticRateProvider(seed=42).generate_tables(products=[ProductType.PWL])
        return QuoteCalculator(TableRateGateway(tables))

    async def test_pwl_quotes(self, quotes):
        """Whole life should quote a positive premium."""
        from life_pricing import Gender, PolicyInfo, ProductType, SmokingStatus

        policy = PolicyInfo(
            product_type=ProductType.PWL,
            face_amount=25_000,
            age=35,
            gender=Gender.FEMALE,
            smoking_status=SmokingStatus.NON_SMOKER,
        )
        result = await quotes.calculate(policy)

        assert result.total_premium > 0
        assert result.total_annual_premium > result.total_premium

    def test_prepay_factor(self):
        """Prepay table lookup should work."""
        from life_pricing.valuation.prepay import prepay_factor

        assert prepay_factor(10) == pytest.approx(8.7861)
