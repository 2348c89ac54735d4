"""
Illustration Engine: milestone and yearly projections per product family.

Provides:
- IllustrationEngine: milestone summary, yearly table, annuity table
- ParticipatingProjector: dividend/PUA recurrence for whole life
- PremierProjector: reduced paid-up values
- accumulate_deposits: deposit-annuity accumulation
- Schedules: milestone_durations, yearly_durations, monthly_premium
"""

from life_pricing.illustration.annuity import AnnuityYearRow, accumulate_deposits
from life_pricing.illustration.engine import (
    IllustrationEngine,
    IllustrationYearRow,
    MilestoneRow,
    rows_to_frame,
)
from life_pricing.illustration.participating import (
    FINAL_DURATION_RATE_OFFSETS,
    ParticipatingProjector,
    ParticipatingValues,
    PUAProjection,
)
from life_pricing.illustration.premier import PremierProjector, reduced_paid_up
from life_pricing.illustration.schedule import (
    milestone_durations,
    monthly_premium,
    yearly_durations,
)

__all__ = [
    "IllustrationEngine",
    "IllustrationYearRow",
    "MilestoneRow",
    "rows_to_frame",
    "ParticipatingProjector",
    "ParticipatingValues",
    "PUAProjection",
    "FINAL_DURATION_RATE_OFFSETS",
    "PremierProjector",
    "reduced_paid_up",
    "AnnuityYearRow",
    "accumulate_deposits",
    "milestone_durations",
    "monthly_premium",
    "yearly_durations",
]
