"""
Reverse-Lookup Solver: face amount from a target premium.
"""

from life_pricing.solver.reverse_lookup import (
    FaceAmountEvaluation,
    ReverseLookupResult,
    ReverseLookupSolver,
    format_reverse_lookup_result,
)

__all__ = [
    "FaceAmountEvaluation",
    "ReverseLookupResult",
    "ReverseLookupSolver",
    "format_reverse_lookup_result",
]
