"""
In-memory rate gateway backed by pandas DataFrames.

Answers every gateway query from a RateTables snapshot using the rate
store's matching rules:

- rate rows match ControlCode, exact Age, Gender and Smoker
- ``dep_child`` ignores age, gender and smoker; ``9000`` ignores gender
  and smoker
- term rates live under ``{control_code}_DUR_{duration}`` (``9000`` has
  no duration rows)
- mode-factor and service-fee rows match the payment method or a blank
  method; a plan missing either row has no rate record
- risk-rating rows match the age or the any-age marker 999, and the
  gender or the unisex marker U
- illustration rows treat a missing sex/risk as "column is blank" and a
  missing duration as duration 0
"""

import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from life_pricing.data.loader import RateTables, load_rate_tables
from life_pricing.data.schemas import (
    Gender,
    IllustrationKind,
    PaymentMethod,
    PaymentMode,
    RateRecord,
    SmokingStatus,
)
from life_pricing.gateway.base import RateGateway
from life_pricing.products.control_codes import (
    DEPENDENT_CHILD_CODE,
    GUARANTEED_INSURABILITY_CODE,
)

logger = logging.getLogger(__name__)

#: Age value matching any age in risk-rating rows
ANY_AGE = 999


def term_control_code(control_code: str, duration: int) -> str:
    """
    Control code of a term product's policy-year rate rows.

    Examples
    --------
    >>> term_control_code("24585", 3)
    '24585_DUR_3'
    >>> term_control_code("9000", 3)
    '9000'
    """
    if control_code == GUARANTEED_INSURABILITY_CODE:
        return control_code
    return f"{control_code}_DUR_{duration}"


def _matches_or_blank(column: pd.Series, value: Optional[str]) -> pd.Series:
    """Equality match, or blank match when value is None."""
    if value is None:
        return column.isna()
    return column == value


class TableRateGateway(RateGateway):
    """
    Rate gateway over in-memory rate tables.

    Parameters
    ----------
    tables : RateTables
        Rate-store snapshot

    Examples
    --------
    >>> from life_pricing.data.loader import SyntheticRateProvider
    >>> gateway = TableRateGateway(SyntheticRateProvider().generate_tables())
    """

    def __init__(self, tables: RateTables):
        self._tables = tables

    @classmethod
    def from_directory(cls, directory: Optional[Path] = None) -> "TableRateGateway":
        """Build a gateway from CSV rate tables (see load_rate_tables)."""
        return cls(load_rate_tables(directory))

    @property
    def tables(self) -> RateTables:
        return self._tables

    # -------------------------------------------------------------------------
    # Premium rates
    # -------------------------------------------------------------------------

    async def get_rate(
        self,
        control_code: str,
        age: int,
        gender: Gender,
        smoking_status: SmokingStatus,
        payment_mode: PaymentMode,
        payment_method: PaymentMethod,
    ) -> RateRecord | None:
        rates = self._tables.plan_rates
        mask = rates["ControlCode"] == control_code
        if control_code != DEPENDENT_CHILD_CODE:
            mask &= rates["Age"] == age
            if control_code != GUARANTEED_INSURABILITY_CODE:
                mask &= (rates["Gender"] == gender.value) & (rates["Smoker"] == smoking_status.value)

        matches = rates[mask]
        if matches.empty:
            logger.debug(
                f"No rate row for {control_code} age={age} "
                f"{gender.value}/{smoking_status.value}"
            )
            return None
        plan_row = matches.iloc[0]
        plan_code = str(plan_row["PlanCode"])

        mode_column = payment_mode.value
        version = self._method_row(self._tables.versions, plan_code, payment_method)
        fees = self._method_row(self._tables.service_fees, plan_code, payment_method)
        if version is None or mode_column not in version.index:
            logger.debug(f"No {mode_column} mode factor for plan {plan_code}")
            return None
        if fees is None or mode_column not in fees.index:
            logger.debug(f"No {mode_column} service fee row for plan {plan_code}")
            return None

        return RateRecord.from_row({
            "PlanCode": plan_code,
            "ControlCode": plan_row["ControlCode"],
            "BasicRate": plan_row["BasicRate"],
            "Unit": plan_row["Unit"],
            "ModeFactor": version[mode_column],
            "AnnualFactor": version[PaymentMode.ANNUAL.value],
            "ServiceFee": fees[mode_column],
            "AnnualServiceFee": fees[PaymentMode.ANNUAL.value],
            "Age": plan_row["Age"],
        })

    async def get_term_rate(
        self,
        control_code: str,
        age: int,
        gender: Gender,
        smoking_status: SmokingStatus,
        payment_mode: PaymentMode,
        payment_method: PaymentMethod,
        duration: int,
    ) -> RateRecord | None:
        return await self.get_rate(
            term_control_code(control_code, duration),
            age,
            gender,
            smoking_status,
            payment_mode,
            payment_method,
        )

    @staticmethod
    def _method_row(
        frame: pd.DataFrame, plan_code: str, payment_method: PaymentMethod
    ) -> pd.Series | None:
        """First row for a plan whose Method matches or is blank."""
        mask = (frame["PlanCode"] == plan_code) & (
            (frame["Method"] == payment_method.value) | frame["Method"].isna()
        )
        matches = frame[mask]
        if matches.empty:
            return None
        return matches.iloc[0]

    # -------------------------------------------------------------------------
    # Substandard ratings
    # -------------------------------------------------------------------------

    async def get_risk_rating_factor(
        self,
        code: str,
        age: int,
        gender: Gender,
        table_number: int,
    ) -> float:
        ratings = self._tables.risk_ratings
        mask = (
            (ratings["Code"] == code)
            & ((ratings["Age"] == age) | (ratings["Age"] == ANY_AGE))
            & ratings["Gender"].isin([gender.value, Gender.UNISEX.value])
            & (ratings["TableNumber"] == table_number)
        )
        matches = ratings[mask]
        if matches.empty:
            return 0.0
        return float(matches.iloc[0]["Factor"])

    # -------------------------------------------------------------------------
    # Illustration factors
    # -------------------------------------------------------------------------

    def _illustration_mask(
        self,
        plan_code: str,
        kind: IllustrationKind,
        sex: Gender | None,
        issue_age: int,
        risk: SmokingStatus | None,
    ) -> pd.Series:
        table = self._tables.illustration
        return (
            (table["Kind"] == kind.value)
            & (table["PlanCode"] == plan_code)
            & _matches_or_blank(table["Sex"], sex.value if sex is not None else None)
            & (table["IssueAge"] == issue_age)
            & _matches_or_blank(table["Risk"], risk.value if risk is not None else None)
        )

    async def get_illustration_factor(
        self,
        plan_code: str,
        kind: IllustrationKind,
        sex: Gender | None,
        issue_age: int,
        duration: int | None,
        risk: SmokingStatus | None,
    ) -> float | None:
        table = self._tables.illustration
        mask = self._illustration_mask(plan_code, kind, sex, issue_age, risk)
        mask &= table["Duration"] == (duration if duration is not None else 0)
        matches = table[mask]
        if matches.empty:
            return None
        return float(matches.iloc[0]["Factor"])

    async def get_all_illustration_factors(
        self,
        plan_code: str,
        kind: IllustrationKind,
        sex: Gender | None,
        issue_age: int,
        risk: SmokingStatus | None,
    ) -> dict[int, float]:
        table = self._tables.illustration
        matches = table[self._illustration_mask(plan_code, kind, sex, issue_age, risk)]
        matches = matches.sort_values("Duration")
        return {
            int(duration): float(factor)
            for duration, factor in zip(matches["Duration"], matches["Factor"])
        }
