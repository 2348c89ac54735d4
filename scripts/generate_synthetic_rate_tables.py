#!/usr/bin/env python3
"""
Generate synthetic rate-store CSV tables.

Creates a complete rate store (plan rates, mode factors, service fees,
illustration factors and risk ratings) so the quote and illustration
workflow runs without licensed rate data.

Output: rate_tables/*.csv (or --output)

Usage:
    python scripts/generate_synthetic_rate_tables.py
    python scripts/generate_synthetic_rate_tables.py --issue-ages 25 35 45 --term-years 20

⚠️ SYNTHETIC DATA - NOT FOR PRODUCTION USE
"""

import argparse
import sys
from pathlib import Path

# Add src to path if running as script
sys.path.insert(0, "src")

from life_pricing.data.loader import SyntheticRateProvider, save_rate_tables


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate synthetic rate tables")
    parser.add_argument(
        "--output", type=Path, default=Path("rate_tables"), help="Output directory"
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument(
        "--issue-ages",
        type=int,
        nargs="+",
        default=[30],
        help="Issue ages with illustration factors (default: 30)",
    )
    parser.add_argument(
        "--term-years",
        type=int,
        default=1,
        help="Policy years priced for term products (default: 1)",
    )
    args = parser.parse_args()

    print(f"Generating synthetic rate tables (seed={args.seed})")
    tables = SyntheticRateProvider(seed=args.seed).generate_tables(
        issue_ages=args.issue_ages,
        term_durations=range(1, args.term_years + 1),
    )
    for name, count in tables.row_counts.items():
        print(f"  {name:<14} {count:>8,} rows")

    save_rate_tables(tables, args.output)
    print(f"Wrote tables to {args.output}")
    print("Done!")


if __name__ == "__main__":
    main()
