"""
Centralized pytest fixtures for life-pricing test suite.

This module provides shared fixtures used across all test categories:
- unit/
- integration/
- properties/
- smoke/

Fixture Categories:
1. Rate Tables - Small hand-built rate store with round numbers
2. Gateways - TableRateGateway over the hand-built tables
3. Policies - Standard policy snapshots per product family

Hand-built rates (issue age 30, Monthly mode factor 0.09, Annual 1.0):

| Control code   | BasicRate | Notes                               |
|----------------|-----------|-------------------------------------|
| 54015          | 12.50     | PWL, M, non-smoker                  |
| 54015_WP       | 0.80      | waiver of premium                   |
| 54015_ADB/ADD  | 1.00/1.20 | accidental death                    |
| dep_child      | 5.00      | any age/gender/smoker               |
| 9000           | 1.00      | guaranteed insurability, any gender |
| 24585_DUR_1/2  | 1.50/1.60 | ST10, M, non-smoker                 |
| 42585/42685    | 2.00/1.80 | LT10 first/upper band, duration 1   |
| 56100          | 15.00     | PC_LEVEL, M, non-smoker             |

Service fee (Regular): Monthly 2.00, Annual 16.00. Risk-rating table t
has factor 1.25 × t at any age.
"""

from dataclasses import dataclass, replace

import numpy as np
import pandas as pd
import pytest

from life_pricing.data.loader import RateTables
from life_pricing.data.schemas import (
    Gender,
    PolicyInfo,
    ProductType,
    SmokingStatus,
)
from life_pricing.gateway.tables import TableRateGateway

# =============================================================================
# TOLERANCE TIERS
# =============================================================================


@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tolerance framework for different test types.

    Premiums are compared to the cent; derived floats to summation noise.
    """

    # Values computed by the same formula along different paths
    exact: float = 1e-9

    # Premiums and dividends
    currency: float = 0.01


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# RATE TABLE CONSTANTS
# =============================================================================

ISSUE_AGE = 30
MATURITY_AGE = 121

MODE_FACTORS = {"Monthly": 0.09, "Quarterly": 0.26, "SemiAnnual": 0.52, "Annual": 1.0}
REGULAR_FEES = {"Monthly": 2.0, "Quarterly": 5.0, "SemiAnnual": 9.0, "Annual": 16.0}
EFT_FEES = {"Monthly": 1.0, "Quarterly": 3.0, "SemiAnnual": 6.0, "Annual": 12.0}

PWL_BASIC_RATE = 12.50
PWL_DIVIDEND_RATE = 2.0
PWL_PUA_PREMIUM_RATE = 400.0
PWL_PUA_DIVIDEND_RATE = 20.0
PREMIER_NSP_RATE = 500.0


def _plan_row(plan_code, control_code, basic_rate, age=ISSUE_AGE, gender="M", smoker="N") -> dict:
    return {
        "PlanCode": plan_code,
        "ControlCode": control_code,
        "Age": age,
        "Gender": gender,
        "Smoker": smoker,
        "BasicRate": basic_rate,
        "Unit": "1000",
    }


def _factor_row(kind, plan_code, issue_age, duration, factor, sex="M", risk="N") -> dict:
    return {
        "Kind": kind,
        "PlanCode": plan_code,
        "Sex": sex,
        "IssueAge": issue_age,
        "Duration": duration,
        "Risk": risk,
        "Factor": factor,
    }


def build_sample_tables() -> RateTables:
    """Build the hand-built rate store described in the module docstring."""
    plan_rows = [
        _plan_row("54015", "54015", PWL_BASIC_RATE),
        _plan_row("54015", "54015", 14.00, age=31),
        _plan_row("54016", "54016", 11.00, gender="F"),
        _plan_row("54015_WP", "54015_WP", 0.80),
        _plan_row("54015_ADB", "54015_ADB", 1.00),
        _plan_row("54015_ADD", "54015_ADD", 1.20),
        _plan_row("DEPCHILD", "dep_child", 5.00, age=np.nan, gender=None, smoker=None),
        _plan_row("9000", "9000", 1.00, gender=None, smoker=None),
        _plan_row("24585", "24585_DUR_1", 1.50),
        _plan_row("24585", "24585_DUR_2", 1.60),
        _plan_row("24585_WP", "24585_WP_DUR_1", 0.30),
        _plan_row("42585", "42585_DUR_1", 2.00),
        _plan_row("42685", "42685_DUR_1", 1.80),
        _plan_row("56100", "56100", 15.00),
    ]
    plan_rates = pd.DataFrame(plan_rows)

    plan_codes = sorted(set(plan_rates["PlanCode"]))
    versions = pd.DataFrame([
        {"PlanCode": code, "Method": None, **MODE_FACTORS} for code in plan_codes
    ])
    service_fees = pd.DataFrame(
        [{"PlanCode": code, "Method": "R", **REGULAR_FEES} for code in plan_codes]
        + [{"PlanCode": code, "Method": "E", **EFT_FEES} for code in plan_codes]
    )

    final = MATURITY_AGE - ISSUE_AGE
    factor_rows = []
    for duration in range(1, final + 1):
        factor_rows.append(_factor_row("cash", "54015", ISSUE_AGE, duration, 10.0 * duration))
        factor_rows.append(_factor_row("div", "54015", ISSUE_AGE, duration, PWL_DIVIDEND_RATE))
        factor_rows.append(_factor_row("cash", "56100", ISSUE_AGE, duration, 8.0 * duration))
    # Attained-age tables stop at 120
    for age in range(ISSUE_AGE, MATURITY_AGE):
        factor_rows.append(_factor_row("pua_prem", "54015", age, 0, PWL_PUA_PREMIUM_RATE))
        factor_rows.append(_factor_row("nsp", "56100", age, 0, PREMIER_NSP_RATE))
        if age > ISSUE_AGE:
            factor_rows.append(_factor_row("pua_div", "54018", age, 0, PWL_PUA_DIVIDEND_RATE, risk=None))
    illustration = pd.DataFrame(factor_rows)

    tables = np.arange(1, 17)
    risk_ratings = pd.DataFrame({
        "Code": "7000",
        "Age": 999,
        "Gender": "U",
        "TableNumber": tables,
        "Factor": 1.25 * tables,
    })

    return RateTables(
        plan_rates=plan_rates,
        versions=versions,
        service_fees=service_fees,
        illustration=illustration,
        risk_ratings=risk_ratings,
    )


def without_factor_rows(tables: RateTables, kind: str, duration: int) -> RateTables:
    """Copy of ``tables`` with one illustration kind removed at a duration."""
    illustration = tables.illustration
    keep = ~((illustration["Kind"] == kind) & (illustration["Duration"] == duration))
    return replace(tables, illustration=illustration[keep].reset_index(drop=True))


# =============================================================================
# RATE TABLE AND GATEWAY FIXTURES
# =============================================================================


@pytest.fixture(scope="session")
def sample_tables() -> RateTables:
    """Hand-built rate store (read-only, shared across the session)."""
    return build_sample_tables()


@pytest.fixture
def gateway(sample_tables: RateTables) -> TableRateGateway:
    """In-memory gateway over the hand-built rate store."""
    return TableRateGateway(sample_tables)


@pytest.fixture
def gateway_without(sample_tables: RateTables):
    """Factory: gateway whose tables lack one illustration kind at a duration."""

    def _build(kind: str, duration: int) -> TableRateGateway:
        return TableRateGateway(without_factor_rows(sample_tables, kind, duration))

    return _build


# =============================================================================
# POLICY FIXTURES
# =============================================================================


@pytest.fixture
def pwl_policy() -> PolicyInfo:
    """PWL, male, 30, non-smoker, $10,000, Monthly/Regular."""
    return PolicyInfo(
        product_type=ProductType.PWL,
        face_amount=10_000,
        age=ISSUE_AGE,
        gender=Gender.MALE,
        smoking_status=SmokingStatus.NON_SMOKER,
    )


@pytest.fixture
def term_policy() -> PolicyInfo:
    """Select term 10, male, 30, non-smoker, $100,000."""
    return PolicyInfo(
        product_type=ProductType.ST10,
        face_amount=100_000,
        age=ISSUE_AGE,
        gender=Gender.MALE,
        smoking_status=SmokingStatus.NON_SMOKER,
    )


@pytest.fixture
def premier_policy() -> PolicyInfo:
    """Premier choice level, male, 30, non-smoker, $10,000."""
    return PolicyInfo(
        product_type=ProductType.PC_LEVEL,
        face_amount=10_000,
        age=ISSUE_AGE,
        gender=Gender.MALE,
        smoking_status=SmokingStatus.NON_SMOKER,
    )


@pytest.fixture
def annuity_policy() -> PolicyInfo:
    """Deposit annuity, $100 monthly deposit."""
    return PolicyInfo(
        product_type=ProductType.ANNUITY,
        face_amount=100,
        age=40,
        gender=Gender.FEMALE,
        smoking_status=SmokingStatus.NON_SMOKER,
    )
