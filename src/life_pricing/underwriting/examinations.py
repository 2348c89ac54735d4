"""
Qualification examinations.

Underwriting requirements triggered by issue age, face amount and
gender. Participating whole life has its own rules; select term and
legacy term share the select-term rules. Other products (premier
choice, worksite, annuities) require no examinations.

A requirement applies when any of its conditions fits:

- age within [min_age, max_age] (inclusive)
- face amount within [min_amount, max_amount)
- gender listed, or the condition covers both genders (U is rated as M)
"""

from dataclasses import dataclass
from enum import Enum

from life_pricing.data.schemas import Gender, ProductType

#: Upper bound for open-ended face-amount ranges
MAX_FACE_AMOUNT = 9_999_999
#: Upper bound for open-ended age ranges
MAX_AGE = 150


class ExaminationGender(Enum):
    """Gender filter on an examination condition."""

    MALE = "M"
    FEMALE = "F"
    BOTH = "B"


@dataclass(frozen=True)
class QualifyingCondition:
    """Age, face-amount and gender ranges triggering an examination."""

    min_age: int
    max_age: int
    min_amount: float
    max_amount: float
    genders: tuple[ExaminationGender, ...] = (ExaminationGender.BOTH,)

    def __post_init__(self) -> None:
        """Validate ranges."""
        if self.min_age > self.max_age:
            raise ValueError(
                f"CRITICAL: min_age ({self.min_age}) > max_age ({self.max_age})"
            )
        if self.min_amount >= self.max_amount:
            raise ValueError(
                f"CRITICAL: min_amount ({self.min_amount}) >= max_amount ({self.max_amount})"
            )

    def fits(self, age: int, face_amount: float, gender: Gender) -> bool:
        """True when the policy falls inside every range."""
        fits_age = self.min_age <= age <= self.max_age
        fits_amount = self.min_amount <= face_amount < self.max_amount
        # U is the M alias
        rated = gender.risk_rating_gender
        exam_gender = ExaminationGender.MALE if rated is Gender.MALE else ExaminationGender.FEMALE
        fits_gender = exam_gender in self.genders or ExaminationGender.BOTH in self.genders
        return fits_age and fits_amount and fits_gender


@dataclass(frozen=True)
class Requirement:
    """An examination the applicant must complete."""

    code: str
    text: str


@dataclass(frozen=True)
class QualifyingExam:
    """An examination and the conditions that trigger it."""

    code: str
    text: str
    conditions: tuple[QualifyingCondition, ...]

    def applies(self, age: int, face_amount: float, gender: Gender) -> bool:
        return any(condition.fits(age, face_amount, gender) for condition in self.conditions)

    @property
    def requirement(self) -> Requirement:
        return Requirement(code=self.code, text=self.text)


# =============================================================================
# Rules
# =============================================================================

BASIC_TEXT = "para-med exam, blood profile and urine specimen required"
MVR_TEXT = "a motor vehicle report (MVR) is required"
MVR_INSPECTION_TEXT = "inspection and motor vehicle report (MVR) is required"

_MVR = QualifyingExam(
    code="MVR",
    text=MVR_TEXT,
    conditions=(
        QualifyingCondition(16, 30, 0, 250_000, (ExaminationGender.MALE,)),
        QualifyingCondition(0, MAX_AGE, 250_000, 500_001),
    ),
)

_MVR_INSPECTION = QualifyingExam(
    code="MVR_INSPECTION",
    text=MVR_INSPECTION_TEXT,
    conditions=(QualifyingCondition(0, MAX_AGE, 500_001, MAX_FACE_AMOUNT),),
)

PWL_EXAMS: tuple[QualifyingExam, ...] = (
    QualifyingExam(
        code="BASIC",
        text=BASIC_TEXT,
        conditions=(
            QualifyingCondition(0, 3, 200_001, MAX_FACE_AMOUNT),
            QualifyingCondition(4, 65, 250_001, MAX_FACE_AMOUNT),
            QualifyingCondition(66, MAX_AGE, 50_001, MAX_FACE_AMOUNT),
        ),
    ),
    _MVR,
    _MVR_INSPECTION,
)

SELECT_TERM_EXAMS: tuple[QualifyingExam, ...] = (
    QualifyingExam(
        code="BASIC",
        text=BASIC_TEXT,
        conditions=(QualifyingCondition(18, MAX_AGE, 250_001, MAX_FACE_AMOUNT),),
    ),
    _MVR,
    _MVR_INSPECTION,
)

#: Products with examination rules
EXAMINATION_RULES: dict[ProductType, tuple[QualifyingExam, ...]] = {
    ProductType.PWL: PWL_EXAMS,
    ProductType.LT10: SELECT_TERM_EXAMS,
    ProductType.LT20: SELECT_TERM_EXAMS,
    ProductType.LT30: SELECT_TERM_EXAMS,
    ProductType.ST10: SELECT_TERM_EXAMS,
    ProductType.ST15: SELECT_TERM_EXAMS,
    ProductType.ST20: SELECT_TERM_EXAMS,
    ProductType.ST30: SELECT_TERM_EXAMS,
}


def required_examinations(
    product_type: ProductType,
    age: int,
    face_amount: float,
    gender: Gender,
) -> list[Requirement]:
    """
    Examinations required for an application.

    Parameters
    ----------
    product_type : ProductType
        Product applied for
    age : int
        Issue age
    face_amount : float
        Face amount applied for
    gender : Gender
        Applicant gender

    Returns
    -------
    list[Requirement]
        Requirements in rule order; empty for products without rules

    Examples
    --------
    >>> [r.code for r in required_examinations(ProductType.PWL, 40, 600_000, Gender.FEMALE)]
    ['BASIC', 'MVR_INSPECTION']
    """
    exams = EXAMINATION_RULES.get(product_type, ())
    return [exam.requirement for exam in exams if exam.applies(age, face_amount, gender)]
