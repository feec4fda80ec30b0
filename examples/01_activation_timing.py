#!/usr/bin/env python3
"""
Activation Timing Demo.

This example shows how the activation age of a guaranteed lifetime
withdrawal rider changes lifetime income.

Key Concepts:
- Before activation the benefit base grows by simple credits (7% of premium
  per year for Polaris Income Max) and ratchets up to the account value.
- After activation the owner withdraws MAWP rate x benefit base each year.
  Once the account is exhausted the insurer keeps paying at the PIP rate.
- Waiting means fewer payment years but a larger benefit base and a higher
  age-band rate. The optimum is the age with the greatest lifetime total.

Usage:
    python examples/01_activation_timing.py                  # Fallback rider
    python examples/01_activation_timing.py --payload FILE   # Beacon payload
    python examples/01_activation_timing.py --ci             # CI mode (no interactive)
"""

import argparse
import sys
from pathlib import Path

# Add src to path if running as script
sys.path.insert(0, "src")

from annuity_income import Assumptions, IncomeModel, PolicyFacts, build_income_model


def load_payload_text(path: str | None) -> str | None:
    """Read payload text, None when no path is given."""
    if path is None:
        return None
    return Path(path).read_text(encoding="utf-8")


def print_parameters(model: IncomeModel) -> None:
    """Print the rider parameters the projection ran with."""
    params = model.parameters
    print("\n" + "=" * 70)
    print(f"RIDER: {params.rider_name} ({params.selected_option or 'fallback'})")
    print("=" * 70)
    print(f"  Product:            {params.product_name}")
    print(f"  Source:             {'Beacon payload' if model.from_api else 'fallback parameters'}")
    print(f"  Credit:             {params.credit_rate:.2%} for {params.max_credit_years} years")
    print(f"  Step-up guarantee:  {params.step_up_guarantee:.0%} of premium")
    print(f"  Annual fee:         {params.fee_rate:.2%} of benefit base")


def print_scenarios(model: IncomeModel) -> None:
    """Print one row per activation age."""
    projection = model.projection
    print("\n  {:>4} {:>12} {:>12} {:>7} {:>10} {:>9} {:>12}".format(
        "Age", "Benefit Base", "Acct Value", "MAWP", "Income", "Depletes", "Lifetime"
    ))
    print("  " + "-" * 72)

    for s in projection.scenarios:
        marker = " <- optimal" if s.activate_at_age == projection.optimal_age else ""
        depletes = str(s.depletes_at_age) if s.depletes else "never"
        print("  {:>4} {:>12,.0f} {:>12,.0f} {:>6.2%} {:>10,.0f} {:>9} {:>12,.0f}{}".format(
            s.activate_at_age,
            s.benefit_base_at_activation,
            s.av_at_activation,
            s.mawp_rate,
            s.mawp_income,
            depletes,
            s.grand_total,
            marker,
        ))


def print_summary(model: IncomeModel) -> None:
    """Print the recommendation."""
    projection = model.projection
    print("\n" + "=" * 70)
    print("RECOMMENDATION")
    print("=" * 70)

    if projection.is_degenerate:
        print("\n  Owner is past the last activation age; nothing to project.")
        return

    optimal = projection.optimal_scenario
    immediate = projection.immediate_scenario
    print(f"\n  Activate at age {optimal.activate_at_age}: ${optimal.grand_total:,.0f} lifetime income")
    if immediate is not None:
        print(f"  Activate now (age {immediate.activate_at_age}): ${immediate.grand_total:,.0f}")
    print(f"  Advantage of waiting: ${model.waiting_advantage:,.0f}")
    print(f"\n  Validation: {model.validation.overall_status.value.upper()}")


def main() -> None:
    """Run activation timing demo."""
    parser = argparse.ArgumentParser(description="Activation Timing Demo")
    parser.add_argument("--ci", action="store_true", help="CI mode (fallback rider, no payload)")
    parser.add_argument("--payload", type=str, default=None, help="Beacon payload JSON file")
    parser.add_argument("--age", type=int, default=63, help="Owner age (default: 63)")
    parser.add_argument("--growth", type=float, default=0.052, help="Annual growth (default: 0.052)")
    parser.add_argument("--life-expectancy", type=int, default=85, help="Life expectancy (default: 85)")
    args = parser.parse_args()

    payload = None if args.ci else load_payload_text(args.payload)
    facts = PolicyFacts(current_age=args.age)
    assumptions = Assumptions(growth_rate=args.growth, life_expectancy=args.life_expectancy)

    model = build_income_model(payload, assumptions=assumptions, facts=facts)

    print_parameters(model)
    print_scenarios(model)
    print_summary(model)

    print("\n" + "=" * 70)
    print("DEMO COMPLETE")
    print("=" * 70)


if __name__ == "__main__":
    main()
