#!/usr/bin/env python3
"""
Quote, Illustrate and Reverse-Lookup Demo.

This example walks one whole-life policy through the full workflow:

    "What does $50,000 of whole life cost at age 35, what will it be
    worth, and how much coverage does $60 a month buy?"

Key Concepts:
- Quote: modal premium of the base policy plus each rider
- Illustration: guaranteed and current values at milestone durations
- Reverse lookup: face amount whose total premium matches a budget

Usage:
    python examples/01_quote_and_illustrate.py
    python examples/01_quote_and_illustrate.py --rates rate_tables
    python examples/01_quote_and_illustrate.py --budget 80

See Also:
    - DESIGN.md (calculation rules)
    - scripts/generate_synthetic_rate_tables.py
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

# Add src to path if running as script
sys.path.insert(0, "src")

from life_pricing import (
    CachingRateGateway,
    Gender,
    IllustrationEngine,
    PolicyInfo,
    ProductType,
    QuoteCalculator,
    ReverseLookupSolver,
    RiderKind,
    RiderSelection,
    SmokingStatus,
    SyntheticRateProvider,
    TableRateGateway,
    calculate_prepaid_policy,
    format_premium_result,
    format_reverse_lookup_result,
    load_rate_tables,
    required_examinations,
    rows_to_frame,
)


def build_gateway(rates_dir: Optional[Path]) -> CachingRateGateway:
    """Load rate tables from CSV, or generate synthetic ones."""
    if rates_dir is None:
        print("Using synthetic rate tables (NOT FOR PRODUCTION USE)")
        tables = SyntheticRateProvider(seed=42).generate_tables(issue_ages=(35,))
    else:
        tables = load_rate_tables(rates_dir)
    return CachingRateGateway(TableRateGateway(tables))


async def run_demo(gateway: CachingRateGateway, budget: float) -> None:
    """Quote, illustrate and solve one policy."""
    policy = PolicyInfo(
        product_type=ProductType.PWL,
        face_amount=50_000,
        age=35,
        gender=Gender.FEMALE,
        smoking_status=SmokingStatus.NON_SMOKER,
    )
    riders = RiderSelection(
        waiver_of_premium=True,
        accidental_death_kind=RiderKind.ACCIDENTAL_DEATH_ADB,
        accidental_death_amount=50_000,
    )

    quotes = QuoteCalculator(gateway)
    quote = await quotes.calculate(policy, riders)

    print("\n" + "=" * 60)
    print("QUOTE")
    print("=" * 60)
    print(format_premium_result(quote))

    engine = IllustrationEngine(gateway)
    milestones = await engine.milestones(policy, quote.total_premium)

    print("\n" + "=" * 60)
    print("MILESTONE ILLUSTRATION")
    print("=" * 60)
    frame = rows_to_frame(milestones)
    print(frame[["label", "age", "total_premiums", "guaranteed_cash_value",
                 "current_cash_value", "current_death_benefit"]].to_string(index=False))

    result = await ReverseLookupSolver(quotes).find_face_amount(policy, riders, budget)

    print("\n" + "=" * 60)
    print(f"REVERSE LOOKUP (budget ${budget:,.2f})")
    print("=" * 60)
    print(format_reverse_lookup_result(result))

    print("\nExaminations required:")
    requirements = required_examinations(
        policy.product_type, policy.age, result.face_amount, policy.gender
    )
    for requirement in requirements:
        print(f"  - {requirement.code}: {requirement.text}")
    if not requirements:
        print("  - none")

    prepaid = calculate_prepaid_policy(quote.total_annual_premium, 10)
    print(f"\nPrepay 10 years of ${quote.total_annual_premium:,.2f}: "
          f"${prepaid.total_prepaid_needed:,.2f} today")

    stats = gateway.stats
    print(f"\nRate cache: {stats.hits} hits / {stats.total} lookups ({stats.hit_rate:.0%})")


def main() -> None:
    """Run the quote and illustration demo."""
    parser = argparse.ArgumentParser(description="Quote / Illustrate / Reverse-Lookup Demo")
    parser.add_argument(
        "--rates", type=Path, default=None, help="Rate-table CSV directory (default: synthetic)"
    )
    parser.add_argument(
        "--budget", type=float, default=60.0, help="Target modal premium (default: 60.00)"
    )
    args = parser.parse_args()

    gateway = build_gateway(args.rates)
    asyncio.run(run_demo(gateway, args.budget))

    print("\n" + "=" * 60)
    print("DEMO COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    main()
