"""
Rate-table loader and SyntheticRateProvider.

Loads the five rate-store tables (plan rates, mode factors, service fees,
illustration factors, risk ratings) from CSV into pandas DataFrames for
the in-memory gateway. NEVER fails silently: missing files and missing
columns are explicit errors.

SyntheticRateProvider builds internally consistent tables for tests,
examples and offline demos. It is not a source of production rates.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from life_pricing.config.settings import SETTINGS
from life_pricing.data.schemas import (
    Gender,
    IllustrationKind,
    ProductFamily,
    ProductType,
    SmokingStatus,
)


class DataLoadError(Exception):
    """Raised when rate tables cannot be loaded or are malformed."""

    pass


# =============================================================================
# Table Schemas
# =============================================================================

MODE_COLUMNS = ("Monthly", "Quarterly", "SemiAnnual", "Annual")

REQUIRED_COLUMNS: dict[str, tuple[str, ...]] = {
    "plan_rates": ("PlanCode", "ControlCode", "Age", "Gender", "Smoker", "BasicRate", "Unit"),
    "versions": ("PlanCode", "Method") + MODE_COLUMNS,
    "service_fees": ("PlanCode", "Method") + MODE_COLUMNS,
    "illustration": ("Kind", "PlanCode", "Sex", "IssueAge", "Duration", "Risk", "Factor"),
    "risk_ratings": ("Code", "Age", "Gender", "TableNumber", "Factor"),
}

# Columns read as text so plan codes keep leading zeros and "N" stays a string
TEXT_COLUMNS = ("PlanCode", "ControlCode", "Gender", "Smoker", "Method", "Kind", "Sex", "Risk", "Code")


@dataclass(frozen=True, eq=False)
class RateTables:
    """
    The rate store as five DataFrames.

    Attributes
    ----------
    plan_rates : pd.DataFrame
        PlanCode, ControlCode, Age, Gender, Smoker, BasicRate, Unit
    versions : pd.DataFrame
        Mode factors per PlanCode and Method, one column per mode
    service_fees : pd.DataFrame
        Service fees per PlanCode and Method, one column per mode
    illustration : pd.DataFrame
        Kind, PlanCode, Sex, IssueAge, Duration, Risk, Factor
    risk_ratings : pd.DataFrame
        Code, Age, Gender, TableNumber, Factor
    """

    plan_rates: pd.DataFrame
    versions: pd.DataFrame
    service_fees: pd.DataFrame
    illustration: pd.DataFrame
    risk_ratings: pd.DataFrame

    def __post_init__(self) -> None:
        """Validate that every table carries its required columns."""
        for name, required in REQUIRED_COLUMNS.items():
            frame = getattr(self, name)
            missing = [col for col in required if col not in frame.columns]
            if missing:
                raise DataLoadError(
                    f"CRITICAL: {name} table missing required columns {missing}. "
                    f"Got: {list(frame.columns)}"
                )

    @property
    def row_counts(self) -> dict[str, int]:
        """Rows per table."""
        return {name: len(getattr(self, name)) for name in REQUIRED_COLUMNS}


def load_rate_tables(directory: Optional[Path] = None) -> RateTables:
    """
    Load the rate-store tables from a directory of CSV files.

    Parameters
    ----------
    directory : Path, optional
        Directory with the CSV files. Defaults to
        SETTINGS.data.rate_tables_dir (LIFE_PRICING_RATE_TABLES).

    Returns
    -------
    RateTables
        Validated tables

    Raises
    ------
    FileNotFoundError
        If the directory or a table file does not exist
    DataLoadError
        If a file cannot be parsed, is empty or lacks required columns
    """
    data_config = SETTINGS.data
    base = Path(directory) if directory is not None else data_config.rate_tables_dir

    if not base.exists():
        raise FileNotFoundError(
            f"CRITICAL: Rate-table directory not found at {base}.\n"
            f"Set LIFE_PRICING_RATE_TABLES or pass directory explicitly."
        )

    files = {
        "plan_rates": data_config.plan_rate_file,
        "versions": data_config.versions_file,
        "service_fees": data_config.service_fee_file,
        "illustration": data_config.illustration_file,
        "risk_ratings": data_config.risk_rating_file,
    }

    frames: dict[str, pd.DataFrame] = {}
    for name, file_name in files.items():
        frames[name] = _read_table(base / file_name)

    return RateTables(**frames)


def _read_table(file_path: Path) -> pd.DataFrame:
    """Read one CSV table with text columns preserved."""
    if not file_path.exists():
        raise FileNotFoundError(f"CRITICAL: Rate table not found: {file_path}")

    try:
        header = pd.read_csv(file_path, nrows=0).columns
        dtype = {col: str for col in TEXT_COLUMNS if col in header}
        df = pd.read_csv(file_path, dtype=dtype, keep_default_na=False, na_values=[""])
    except (OSError, ValueError, pd.errors.ParserError) as e:
        raise DataLoadError(
            f"CRITICAL: Failed to load rate table from {file_path}. Error: {e}"
        ) from e

    if df.empty:
        raise DataLoadError(f"CRITICAL: Rate table is empty: {file_path}")

    return df


def save_rate_tables(tables: RateTables, directory: Path) -> None:
    """Write tables as CSV files readable by ``load_rate_tables``."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    data_config = SETTINGS.data
    tables.plan_rates.to_csv(directory / data_config.plan_rate_file, index=False)
    tables.versions.to_csv(directory / data_config.versions_file, index=False)
    tables.service_fees.to_csv(directory / data_config.service_fee_file, index=False)
    tables.illustration.to_csv(directory / data_config.illustration_file, index=False)
    tables.risk_ratings.to_csv(directory / data_config.risk_rating_file, index=False)


# =============================================================================
# SyntheticRateProvider - Generates consistent rate tables for testing
# =============================================================================


class SyntheticRateProvider:
    """
    Generate synthetic rate-store tables for testing and demos.

    Rates follow smooth age curves (Gompertz-like growth) with a small
    seeded jitter, so premiums rise with age, smokers pay more than
    non-smokers and cash values reach face amount at maturity.

    ⚠️ SYNTHETIC DATA - NOT FOR PRODUCTION USE

    Usage
    -----
    >>> provider = SyntheticRateProvider(seed=42)
    >>> tables = provider.generate_tables(issue_ages=(35,))
    >>> tables.row_counts["risk_ratings"]
    16
    """

    # Mode factors relative to the annual rate
    MODE_FACTORS = {"Monthly": 0.0875, "Quarterly": 0.2625, "SemiAnnual": 0.515, "Annual": 1.0}

    # Policy fee per payment, by collection method
    SERVICE_FEES = {
        "R": {"Monthly": 2.0, "Quarterly": 5.0, "SemiAnnual": 9.0, "Annual": 16.0},
        "E": {"Monthly": 1.0, "Quarterly": 3.0, "SemiAnnual": 6.0, "Annual": 12.0},
    }

    GENDER_LOADS = {"M": 1.0, "F": 0.86}
    SMOKER_LOADS = {"N": 1.0, "S": 1.6}

    # Annual rate per $1000 at age 20 and yearly growth, by family
    BASE_CURVES = {
        ProductFamily.WHOLE_LIFE: (6.5, 0.052),
        ProductFamily.PREMIER: (9.0, 0.055),
        ProductFamily.TERM: (0.9, 0.075),
    }

    # Rider rates per $1000: (level, growth per year of age)
    RIDER_CURVES = {"_WP": (0.35, 0.012), "_ADB": (0.85, 0.0), "_ADD": (1.05, 0.0)}
    DEPENDENT_CHILD_RATE = 5.5
    GUARANTEED_INSURABILITY_CURVE = (0.8, 0.025)

    TABLE_FACTOR_PER_TABLE = 1.25

    def __init__(self, seed: int = 42):
        """
        Initialize SyntheticRateProvider with random seed for reproducibility.

        Parameters
        ----------
        seed : int
            Random seed for the rate jitter
        """
        self.rng = np.random.default_rng(seed)
        self._synthetic_marker = True

    def generate_tables(
        self,
        ages: Iterable[int] = range(18, 81),
        issue_ages: Iterable[int] = (30,),
        products: Optional[Iterable[ProductType]] = None,
        term_durations: Iterable[int] = (1,),
    ) -> RateTables:
        """
        Generate a complete set of rate tables.

        Parameters
        ----------
        ages : Iterable[int]
            Issue ages priced in the plan-rate table
        issue_ages : Iterable[int]
            Issue ages with illustration factors
        products : Iterable[ProductType], optional
            Products to include. Default: every life product.
        term_durations : Iterable[int]
            Policy years priced for term products

        Returns
        -------
        RateTables
            Tables ready for TableRateGateway
        """
        # Local import: control codes depend on schemas, not on the loader
        from life_pricing.products.control_codes import (
            DEPENDENT_CHILD_CODE,
            GUARANTEED_INSURABILITY_CODE,
            legacy_term_upper_band_code,
            pua_dividend_plan_code,
            resolve_plan_code,
        )

        if products is None:
            products = [p for p in ProductType if p.family is not ProductFamily.ANNUITY]
        ages_arr = np.asarray(list(ages), dtype=int)
        issue_ages = list(issue_ages)
        durations = list(term_durations)

        plan_rows: list[dict] = []
        plan_codes: dict[str, bool] = {}  # plan code -> charges service fee

        for product in products:
            for gender in (Gender.MALE, Gender.FEMALE):
                for smoker in SmokingStatus:
                    plan_code = resolve_plan_code(product, gender, smoker)
                    codes = [plan_code]
                    if product.is_legacy_term:
                        codes.append(legacy_term_upper_band_code(product, gender, smoker))
                    for band, code in enumerate(codes):
                        load = self.GENDER_LOADS[gender.value] * self.SMOKER_LOADS[smoker.value]
                        level, growth = self.BASE_CURVES[product.family]
                        # Upper legacy band is cheaper per thousand
                        level *= 0.9 if band else 1.0
                        plan_codes[code] = True
                        for suffix, (r_level, r_growth) in (("", (level, growth)), *self.RIDER_CURVES.items()):
                            rider_load = load if not suffix else 1.0
                            rates = self._curve(ages_arr, r_level, r_growth) * rider_load
                            rider_plan = f"{code}{suffix}"
                            plan_codes.setdefault(rider_plan, not suffix)
                            control_codes = (
                                [f"{rider_plan}_DUR_{d}" for d in durations]
                                if product.is_term
                                else [rider_plan]
                            )
                            for d_idx, control_code in enumerate(control_codes):
                                step_up = 1.0 + 0.04 * (durations[d_idx] - 1) if product.is_term else 1.0
                                for age, rate in zip(ages_arr, rates):
                                    plan_rows.append({
                                        "PlanCode": rider_plan,
                                        "ControlCode": control_code,
                                        "Age": int(age),
                                        "Gender": gender.value,
                                        "Smoker": smoker.value,
                                        "BasicRate": round(float(rate) * step_up, 2),
                                        "Unit": "1000",
                                    })

        # Standalone riders: dependent child ignores age/gender/smoker,
        # guaranteed insurability is keyed by age only
        plan_rows.append({
            "PlanCode": "DEPCHILD", "ControlCode": DEPENDENT_CHILD_CODE, "Age": np.nan,
            "Gender": None, "Smoker": None, "BasicRate": self.DEPENDENT_CHILD_RATE, "Unit": "1000",
        })
        plan_codes["DEPCHILD"] = True
        gi_rates = self._curve(ages_arr, *self.GUARANTEED_INSURABILITY_CURVE)
        for age, rate in zip(ages_arr, gi_rates):
            plan_rows.append({
                "PlanCode": GUARANTEED_INSURABILITY_CODE, "ControlCode": GUARANTEED_INSURABILITY_CODE,
                "Age": int(age), "Gender": None, "Smoker": None,
                "BasicRate": round(float(rate), 2), "Unit": "1000",
            })
        plan_codes[GUARANTEED_INSURABILITY_CODE] = False

        versions = pd.DataFrame([
            {"PlanCode": code, "Method": None, **self.MODE_FACTORS} for code in plan_codes
        ])
        service_fees = pd.DataFrame([
            {
                "PlanCode": code,
                "Method": method,
                **(fees if charges else {mode: 0.0 for mode in fees}),
            }
            for code, charges in plan_codes.items()
            for method, fees in self.SERVICE_FEES.items()
        ])

        illustration_rows = self._illustration_rows(
            products, issue_ages, resolve_plan_code, pua_dividend_plan_code
        )

        risk_ratings = pd.DataFrame({
            "Code": SETTINGS.premium.risk_rating_code,
            "Age": 999,
            "Gender": Gender.UNISEX.value,
            "TableNumber": np.arange(1, SETTINGS.premium.max_table_rating + 1),
            "Factor": self.TABLE_FACTOR_PER_TABLE * np.arange(1, SETTINGS.premium.max_table_rating + 1),
        })

        return RateTables(
            plan_rates=pd.DataFrame(plan_rows),
            versions=versions,
            service_fees=service_fees,
            illustration=pd.DataFrame(illustration_rows),
            risk_ratings=risk_ratings,
        )

    def _curve(self, ages: np.ndarray, level: float, growth: float) -> np.ndarray:
        """Annual rate per $1000 by age with 1% seeded jitter."""
        jitter = 1.0 + self.rng.uniform(-0.01, 0.01, size=len(ages))
        return level * np.exp(growth * (ages - 20)) * jitter

    def _illustration_rows(self, products, issue_ages, resolve_plan_code, pua_dividend_plan_code) -> list[dict]:
        """Dividend, cash, PUA and NSP factors for permanent products."""
        maturity = SETTINGS.illustration.maturity_age
        attained = np.arange(0, maturity)  # PUA/NSP rows stop at maturity - 1
        # Single-premium cost of $1000 paid-up insurance by attained age
        nsp = np.clip(120.0 + 880.0 * (attained / (maturity - 1)) ** 1.6, 0.0, 1000.0)
        pua_dividend = np.clip(1.5 + 0.09 * attained, 0.0, 12.0)

        rows: list[dict] = []
        seen_pua_div: set[tuple[str, str]] = set()
        for product in products:
            if product.family not in (ProductFamily.WHOLE_LIFE, ProductFamily.PREMIER):
                continue
            for gender in (Gender.MALE, Gender.FEMALE):
                for smoker in SmokingStatus:
                    plan_code = resolve_plan_code(product, gender, smoker)
                    load = self.SMOKER_LOADS[smoker.value]
                    for issue_age in issue_ages:
                        final = maturity - issue_age
                        durations = np.arange(1, final + 1)
                        cash = np.round(1000.0 * (durations / final) ** 1.35, 2)
                        dividends = np.round(np.minimum(0.6 + 0.11 * durations, 9.0) / load, 2)
                        for duration, cash_factor, div_factor in zip(durations, cash, dividends):
                            rows.append(self._factor_row(IllustrationKind.CASH, plan_code, gender, issue_age, duration, smoker, cash_factor))
                            if product.family is ProductFamily.WHOLE_LIFE:
                                rows.append(self._factor_row(IllustrationKind.DIVIDEND, plan_code, gender, issue_age, duration, smoker, div_factor))

                    attained_kind = (
                        IllustrationKind.PUA_PREMIUM
                        if product.family is ProductFamily.WHOLE_LIFE
                        else IllustrationKind.NSP
                    )
                    for age, factor in zip(attained, nsp):
                        rows.append(self._factor_row(attained_kind, plan_code, gender, int(age), 0, smoker, round(float(factor) * load, 2)))

                    if product.family is ProductFamily.WHOLE_LIFE:
                        div_plan = pua_dividend_plan_code(plan_code, gender)
                        if (div_plan, gender.value) in seen_pua_div:
                            continue
                        seen_pua_div.add((div_plan, gender.value))
                        for age, factor in zip(attained[1:], pua_dividend[1:]):
                            rows.append(self._factor_row(IllustrationKind.PUA_DIVIDEND, div_plan, gender, int(age), 0, None, round(float(factor), 2)))
        return rows

    @staticmethod
    def _factor_row(kind, plan_code, gender, issue_age, duration, smoker, factor) -> dict:
        return {
            "Kind": kind.value,
            "PlanCode": plan_code,
            "Sex": gender.value,
            "IssueAge": int(issue_age),
            "Duration": int(duration),
            "Risk": smoker.value if smoker is not None else None,
            "Factor": float(factor),
        }
