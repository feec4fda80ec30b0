#!/usr/bin/env python3
"""
LIFO Tax Demo.

This example shows how withdrawals from a non-qualified annuity are taxed
and compares after-tax income with a taxable brokerage account.

Key Concepts:
- Annuity withdrawals are taxed gain-first (LIFO): income is ordinary
  income until the gain in the contract is used up.
- After the gain, withdrawals return the cost basis tax-free.
- Once basis is gone (or the insurer is paying after depletion) every
  dollar is taxable.

Usage:
    python examples/02_lifo_tax.py          # Full demo
    python examples/02_lifo_tax.py --ci     # CI mode (no interactive)
"""

import argparse
import sys

# Add src to path if running as script
sys.path.insert(0, "src")

from annuity_income import Assumptions, IncomeModel, PolicyFacts, build_income_model


def print_lifo_table(model: IncomeModel, max_rows: int | None = None) -> None:
    """Print the year-by-year LIFO allocation."""
    lifo = model.lifo
    print("\n" + "=" * 80)
    print(f"LIFO ALLOCATION (activation at {model.selected_scenario.activate_at_age})")
    print("=" * 80)
    print(f"\n  Account value at activation: ${lifo.av_at_activation:,.0f}")
    print(f"  Gain in contract:            ${lifo.total_gain:,.0f}")

    print("\n  {:>4} {:>5} {:>10} {:>10} {:>10} {:>9} {:>14}".format(
        "Age", "Phase", "Gross", "Taxable", "Tax-Free", "Tax", "LIFO"
    ))
    print("  " + "-" * 70)

    rows = lifo.year_by_year if max_rows is None else lifo.year_by_year[:max_rows]
    for row in rows:
        print("  {:>4} {:>5} {:>10,.0f} {:>10,.0f} {:>10,.0f} {:>9,.0f} {:>14}".format(
            row.age,
            row.phase,
            row.gross_income,
            row.taxable_portion,
            row.tax_free_portion,
            row.tax_owed,
            row.lifo_phase.value,
        ))

    print(f"\n  Total tax:             ${lifo.total_tax:,.0f}")
    print(f"  Total after-tax income: ${lifo.total_after_tax:,.0f}")


def print_comparison(model: IncomeModel) -> None:
    """Print cumulative after-tax income: annuity vs. taxable account."""
    print("\n" + "=" * 60)
    print("ANNUITY VS. TAXABLE ACCOUNT (cumulative after tax)")
    print("=" * 60)
    print("\n  {:>4} {:>16} {:>16}".format("Age", "Taxable Acct", "Annuity"))
    print("  " + "-" * 40)

    for row in model.comparison[::5]:
        print("  {:>4} {:>16,.0f} {:>16,.0f}".format(
            row.age, row.taxable_cumulative_after_tax, row.annuity_cumulative_after_tax
        ))

    last = model.comparison[-1]
    diff = last.annuity_cumulative_after_tax - last.taxable_cumulative_after_tax
    print(f"\n  Annuity advantage at age {last.age}: ${diff:,.0f}")


def main() -> None:
    """Run LIFO tax demo."""
    parser = argparse.ArgumentParser(description="LIFO Tax Demo")
    parser.add_argument("--ci", action="store_true", help="CI mode (first 5 years only)")
    parser.add_argument("--cost-basis", type=float, default=100_000.0, help="Cost basis (default: 100000)")
    parser.add_argument("--tax-rate", type=float, default=0.24, help="Marginal tax rate (default: 0.24)")
    args = parser.parse_args()

    facts = PolicyFacts(cost_basis=args.cost_basis)
    assumptions = Assumptions(tax_rate=args.tax_rate)
    model = build_income_model(assumptions=assumptions, facts=facts)

    if model.selected_scenario is None:
        print("No activation scenario to tax.")
        return

    print_lifo_table(model, max_rows=5 if args.ci else None)
    print_comparison(model)

    print("\n" + "=" * 60)
    print("DEMO COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    main()
