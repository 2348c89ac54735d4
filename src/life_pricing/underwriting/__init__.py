"""
Underwriting requirements: qualification examinations by product.
"""

from life_pricing.underwriting.examinations import (
    ExaminationGender,
    QualifyingCondition,
    QualifyingExam,
    Requirement,
    required_examinations,
)

__all__ = [
    "ExaminationGender",
    "QualifyingCondition",
    "QualifyingExam",
    "Requirement",
    "required_examinations",
]
