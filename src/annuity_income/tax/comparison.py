"""
Annuity vs. taxable account comparison.

Puts the cost basis in a hypothetical taxable brokerage account instead of
the annuity and withdraws the same MAWP income from it. Growth in the
taxable account is partially taxed every year (half of growth, a rough
blend of dividends and realized gains), and withdrawals are taxed on their
gain fraction.

    Deferral:  B(t+1) = B(t)×(1+g) − B(t)×g×tax_rate×0.5
    Payout:    wd = min(income, B)
               taxable = wd × max(0, (B − basis) / max(1, B))
               B' = max(0, (B − wd)×(1+g))
"""

from dataclasses import asdict, dataclass

import pandas as pd

from annuity_income.glwb.scenarios import Scenario

from .lifo import LIFOTaxResult

#: Share of taxable-account growth taxed in the year it is earned
ANNUAL_GROWTH_TAX_SHARE = 0.5


@dataclass(frozen=True)
class ComparisonRow:
    """
    Cumulative after-tax income at one age.

    Attributes
    ----------
    age : int
        Owner age
    taxable_cumulative_after_tax : float
        Taxable account withdrawals net of tax
    annuity_cumulative_after_tax : float
        Annuity income net of LIFO tax (0 past the LIFO table)
    """

    age: int
    taxable_cumulative_after_tax: float
    annuity_cumulative_after_tax: float


def compare_with_taxable_account(
    scenario: Scenario | None,
    lifo: LIFOTaxResult,
    cost_basis: float,
    growth_rate: float,
    tax_rate: float,
    deferral_years: int,
) -> tuple[ComparisonRow, ...]:
    """
    Cumulative after-tax income: annuity vs. taxable account.

    Parameters
    ----------
    scenario : Scenario or None
        Selected scenario; None gives no rows
    lifo : LIFOTaxResult
        LIFO allocation of the same scenario
    cost_basis : float
        Amount invested in the taxable account
    growth_rate : float
        Annual growth (decimal)
    tax_rate : float
        Marginal tax rate (decimal)
    deferral_years : int
        Years between investment and activation

    Returns
    -------
    tuple[ComparisonRow, ...]
        One row per income year
    """
    if scenario is None:
        return ()

    balance = cost_basis
    for _ in range(max(0, deferral_years)):
        balance = balance * (1 + growth_rate) - balance * growth_rate * tax_rate * ANNUAL_GROWTH_TAX_SHARE

    rows = []
    cumulative = 0.0
    for year in range(scenario.horizon_years):
        withdrawal = min(scenario.mawp_income, max(0.0, balance))
        gain_ratio = max(0.0, (balance - cost_basis) / max(1.0, balance))
        cumulative += withdrawal - withdrawal * gain_ratio * tax_rate
        balance = max(0.0, (balance - withdrawal) * (1 + growth_rate))

        annuity = lifo.year_by_year[year].cum_after_tax if year < len(lifo.year_by_year) else 0.0
        rows.append(
            ComparisonRow(
                age=scenario.activate_at_age + year,
                taxable_cumulative_after_tax=cumulative,
                annuity_cumulative_after_tax=annuity,
            )
        )
    return tuple(rows)


def comparison_frame(rows: tuple[ComparisonRow, ...]) -> pd.DataFrame:
    """Comparison rows as a DataFrame."""
    return pd.DataFrame([asdict(row) for row in rows])
