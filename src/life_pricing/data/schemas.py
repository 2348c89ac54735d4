"""
Policy and rate-record schemas for life-insurance quoting.

Immutable dataclasses and enumerations shared by the premium calculator,
illustration engine and reverse-lookup solver. Enumeration values are the
exact strings exchanged with the rate store.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping

from life_pricing.config.settings import SETTINGS

# =============================================================================
# Enumerations
# =============================================================================


class Gender(Enum):
    """Insured gender as stored in the rate tables."""

    MALE = "M"
    FEMALE = "F"
    UNISEX = "U"

    @property
    def risk_rating_gender(self) -> "Gender":
        """Gender sent to risk-rating queries (U is rated as M)."""
        if self is Gender.UNISEX:
            return Gender.MALE
        return self


class SmokingStatus(Enum):
    """Risk class sent to the rate store."""

    NON_SMOKER = "N"
    SMOKER = "S"


class PaymentMode(Enum):
    """
    Premium payment schedule.

    Monthly, Quarterly, SemiAnnual and Annual are rated directly. The
    remaining four are monthly-equivalent schedules: rated with the
    Monthly record, then scaled.
    """

    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    SEMI_ANNUAL = "SemiAnnual"
    ANNUAL = "Annual"
    EVERY_FOUR_WEEKS = "EveryFourWeeks"
    SEMI_MONTHLY = "SemiMonthly"
    BI_WEEKLY = "BiWeekly"
    WEEKLY = "Weekly"

    @property
    def is_monthly_equivalent(self) -> bool:
        """True for the four schedules derived from the Monthly premium."""
        return self in MONTHLY_EQUIVALENT_MULTIPLIERS

    @property
    def rate_mode(self) -> "PaymentMode":
        """Mode whose rate record prices this schedule."""
        if self.is_monthly_equivalent:
            return PaymentMode.MONTHLY
        return self


#: Multiplier applied to the rounded Monthly premium for each
#: monthly-equivalent schedule
MONTHLY_EQUIVALENT_MULTIPLIERS: dict[PaymentMode, float] = {
    PaymentMode.EVERY_FOUR_WEEKS: 12 / 13,
    PaymentMode.SEMI_MONTHLY: 1 / 2,
    PaymentMode.BI_WEEKLY: 12 / 26,
    PaymentMode.WEEKLY: 12 / 52,
}


class PaymentMethod(Enum):
    """How premiums are collected."""

    REGULAR = "R"
    EFT = "E"


class ProductFamily(Enum):
    """Product grouping that selects pricing and illustration rules."""

    WHOLE_LIFE = "whole_life"
    TERM = "term"
    PREMIER = "premier"
    ANNUITY = "annuity"


class ProductType(Enum):
    """Quotable products."""

    PWL = "PWL"
    LT10 = "LT10"
    LT20 = "LT20"
    LT30 = "LT30"
    ST10 = "ST10"
    ST15 = "ST15"
    ST20 = "ST20"
    ST30 = "ST30"
    WSP_PART = "WSP_PART"
    WSP_TERM = "WSP_TERM"
    PC_LEVEL = "PC_LEVEL"
    PC_GRADED = "PC_GRADED"
    ANNUITY = "ANNUITY"

    @property
    def family(self) -> ProductFamily:
        """Pricing/illustration family of this product."""
        return _PRODUCT_FAMILIES[self]

    @property
    def is_term(self) -> bool:
        """True when rates step by policy duration."""
        return self.family is ProductFamily.TERM

    @property
    def is_legacy_term(self) -> bool:
        """True for products priced on face-amount bands."""
        return self in (ProductType.LT10, ProductType.LT20, ProductType.LT30)

    @property
    def term_years(self) -> int | None:
        """Level term period, None for permanent products."""
        return _TERM_YEARS.get(self)


_PRODUCT_FAMILIES: dict[ProductType, ProductFamily] = {
    ProductType.PWL: ProductFamily.WHOLE_LIFE,
    ProductType.WSP_PART: ProductFamily.WHOLE_LIFE,
    ProductType.LT10: ProductFamily.TERM,
    ProductType.LT20: ProductFamily.TERM,
    ProductType.LT30: ProductFamily.TERM,
    ProductType.ST10: ProductFamily.TERM,
    ProductType.ST15: ProductFamily.TERM,
    ProductType.ST20: ProductFamily.TERM,
    ProductType.ST30: ProductFamily.TERM,
    ProductType.WSP_TERM: ProductFamily.TERM,
    ProductType.PC_LEVEL: ProductFamily.PREMIER,
    ProductType.PC_GRADED: ProductFamily.PREMIER,
    ProductType.ANNUITY: ProductFamily.ANNUITY,
}

_TERM_YEARS: dict[ProductType, int] = {
    ProductType.LT10: 10,
    ProductType.LT20: 20,
    ProductType.LT30: 30,
    ProductType.ST10: 10,
    ProductType.ST15: 15,
    ProductType.ST20: 20,
    ProductType.ST30: 30,
    ProductType.WSP_TERM: 20,
}


class RiderKind(Enum):
    """Independently priced policy component."""

    NONE = "none"
    WAIVER_OF_PREMIUM = "waiver_of_premium"
    ACCIDENTAL_DEATH_ADB = "accidental_death_adb"
    ACCIDENTAL_DEATH_ADD = "accidental_death_add"
    DEPENDENT_CHILD = "dependent_child"
    GUARANTEED_INSURABILITY = "guaranteed_insurability"


ACCIDENTAL_DEATH_KINDS = (RiderKind.ACCIDENTAL_DEATH_ADB, RiderKind.ACCIDENTAL_DEATH_ADD)


class IllustrationKind(Enum):
    """Illustration factor tables in the rate store."""

    DIVIDEND = "div"
    CASH = "cash"
    PUA_PREMIUM = "pua_prem"
    PUA_DIVIDEND = "pua_div"
    NSP = "nsp"


# =============================================================================
# Policy Snapshot
# =============================================================================


@dataclass(frozen=True)
class PolicyInfo:
    """
    Immutable policy snapshot passed into every calculation.

    A new snapshot is built for every input change; use ``with_changes``
    to derive one from another.

    Attributes
    ----------
    product_type : ProductType
        Product being quoted
    face_amount : float
        Death benefit (for annuities: the planned deposit)
    age : int
        Issue age
    gender : Gender
        Insured gender
    smoking_status : SmokingStatus
        Risk class
    payment_mode : PaymentMode
        Premium schedule
    payment_method : PaymentMethod
        Premium collection method
    table_rating : int
        Substandard table, 0 (standard) to 16
    rider_kind : RiderKind
        Component this snapshot prices (NONE for the base policy)
    flat_extra_per_thousand : float
        Flat extra premium per $1000 of face amount
    dependent_child_waiver : bool
        Dependent-child component priced together with waiver of premium

    Examples
    --------
    >>> policy = PolicyInfo(
    ...     product_type=ProductType.PWL,
    ...     face_amount=10_000,
    ...     age=30,
    ...     gender=Gender.MALE,
    ...     smoking_status=SmokingStatus.NON_SMOKER,
    ... )
    >>> policy.with_changes(face_amount=20_000).face_amount
    20000
    """

    product_type: ProductType
    face_amount: float
    age: int
    gender: Gender
    smoking_status: SmokingStatus
    payment_mode: PaymentMode = PaymentMode.MONTHLY
    payment_method: PaymentMethod = PaymentMethod.REGULAR
    table_rating: int = 0
    rider_kind: RiderKind = RiderKind.NONE
    flat_extra_per_thousand: float = 0.0
    dependent_child_waiver: bool = False

    def __post_init__(self) -> None:
        """Validate policy fields."""
        if self.face_amount <= 0:
            raise ValueError(
                f"CRITICAL: face_amount must be > 0, got {self.face_amount}"
            )
        if self.age < 0:
            raise ValueError(f"CRITICAL: age must be >= 0, got {self.age}")
        max_table = SETTINGS.premium.max_table_rating
        if not 0 <= self.table_rating <= max_table:
            raise ValueError(
                f"CRITICAL: table_rating must be in [0, {max_table}], "
                f"got {self.table_rating}"
            )
        if self.flat_extra_per_thousand < 0:
            raise ValueError(
                f"CRITICAL: flat_extra_per_thousand must be >= 0, "
                f"got {self.flat_extra_per_thousand}"
            )
        if self.dependent_child_waiver and self.rider_kind is not RiderKind.DEPENDENT_CHILD:
            raise ValueError(
                "CRITICAL: dependent_child_waiver requires rider_kind=DEPENDENT_CHILD, "
                f"got {self.rider_kind.name}"
            )

    def with_changes(self, **changes: Any) -> "PolicyInfo":
        """Return a new snapshot with the given fields replaced."""
        return replace(self, **changes)

    @property
    def is_substandard(self) -> bool:
        """True when a table rating or flat extra applies."""
        return self.table_rating > 0 or self.flat_extra_per_thousand > 0


# =============================================================================
# Rider Selection
# =============================================================================


@dataclass(frozen=True)
class RiderSelection:
    """
    Riders requested on a quote.

    A rider is enabled by a positive amount (or, for waiver of premium,
    the flag). Disabled riders are simply skipped when pricing.

    Attributes
    ----------
    waiver_of_premium : bool
        Waiver of premium on the base policy
    accidental_death_kind : RiderKind, optional
        ACCIDENTAL_DEATH_ADB or ACCIDENTAL_DEATH_ADD
    accidental_death_amount : float
        Accidental death benefit
    dependent_child_amount : float
        Dependent child benefit
    guaranteed_insurability_amount : float
        Guaranteed insurability option amount
    """

    waiver_of_premium: bool = False
    accidental_death_kind: RiderKind | None = None
    accidental_death_amount: float = 0.0
    dependent_child_amount: float = 0.0
    guaranteed_insurability_amount: float = 0.0

    def __post_init__(self) -> None:
        """Validate rider fields."""
        if (
            self.accidental_death_kind is not None
            and self.accidental_death_kind not in ACCIDENTAL_DEATH_KINDS
        ):
            raise ValueError(
                f"CRITICAL: accidental_death_kind must be ADB or ADD, "
                f"got {self.accidental_death_kind.name}"
            )
        for name in (
            "accidental_death_amount",
            "dependent_child_amount",
            "guaranteed_insurability_amount",
        ):
            if getattr(self, name) < 0:
                raise ValueError(
                    f"CRITICAL: {name} must be >= 0, got {getattr(self, name)}"
                )

    @property
    def has_accidental_death(self) -> bool:
        return self.accidental_death_kind is not None and self.accidental_death_amount > 0

    @property
    def has_dependent_child(self) -> bool:
        return self.dependent_child_amount > 0

    @property
    def has_guaranteed_insurability(self) -> bool:
        return self.guaranteed_insurability_amount > 0


# =============================================================================
# Rate Record
# =============================================================================


def _parse_unit(value: Any) -> float:
    """Parse the Unit column, defaulting blanks to the standard unit."""
    if value is None:
        return SETTINGS.premium.default_unit
    try:
        unit = float(value)
    except (TypeError, ValueError):
        return SETTINGS.premium.default_unit
    if unit != unit or unit <= 0:  # NaN or non-positive
        return SETTINGS.premium.default_unit
    return unit


def _float_or_zero(value: Any) -> float:
    if value is None:
        return 0.0
    number = float(value)
    return 0.0 if number != number else number


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number:
        return None
    return int(number)


@dataclass(frozen=True)
class RateRecord:
    """
    One rate-store record: the basic rate and mode factors for a
    control code at an age.

    Attribute names are snake_case; ``from_row``/``to_dict`` translate
    the rate store's field names (PlanCode, ControlCode, BasicRate, Unit,
    ModeFactor, AnnualFactor, ServiceFee, AnnualServiceFee, Age).
    """

    plan_code: str
    control_code: str
    basic_rate: float
    unit: float
    mode_factor: float
    annual_factor: float
    service_fee: float = 0.0
    annual_service_fee: float = 0.0
    age: int | None = None

    def __post_init__(self) -> None:
        """Validate rate fields."""
        if self.unit <= 0:
            raise ValueError(f"CRITICAL: unit must be > 0, got {self.unit}")
        if self.basic_rate < 0:
            raise ValueError(
                f"CRITICAL: basic_rate must be >= 0, got {self.basic_rate}"
            )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "RateRecord":
        """
        Build a record from a rate-store row.

        Parameters
        ----------
        row : Mapping[str, Any]
            Row keyed by rate-store field names

        Returns
        -------
        RateRecord
            Parsed record; a blank Unit becomes the default face unit
        """
        return cls(
            plan_code=str(row["PlanCode"]),
            control_code=str(row["ControlCode"]),
            basic_rate=float(row["BasicRate"]),
            unit=_parse_unit(row.get("Unit")),
            mode_factor=float(row["ModeFactor"]),
            annual_factor=float(row["AnnualFactor"]),
            service_fee=_float_or_zero(row.get("ServiceFee")),
            annual_service_fee=_float_or_zero(row.get("AnnualServiceFee")),
            age=_optional_int(row.get("Age")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the record keyed by rate-store field names."""
        return {
            "PlanCode": self.plan_code,
            "ControlCode": self.control_code,
            "BasicRate": self.basic_rate,
            "Unit": self.unit,
            "ModeFactor": self.mode_factor,
            "AnnualFactor": self.annual_factor,
            "ServiceFee": self.service_fee,
            "AnnualServiceFee": self.annual_service_fee,
            "Age": self.age,
        }
