"""
LIFO tax allocation of guaranteed income.

Withdrawals from a non-qualified annuity are taxed last-in, first-out: the
contract's gain comes out first (fully taxable), then the cost basis
(tax-free return of investment). Once both pools are exhausted every dollar
is taxable, including insurer-paid PIP income.

Pools
-----
    gain pool  = max(0, AV_at_activation - cost_basis)
    basis pool = cost_basis

Each year:
    taxable  = min(gross, gain) + excess beyond the basis pool
    tax-free = min(gross - min(gross, gain), basis)
    tax      = taxable × tax_rate

Neither pool goes below zero and neither ever grows.
"""

from dataclasses import asdict, dataclass, replace
from enum import Enum

import numpy as np
import pandas as pd

from annuity_income.glwb.income import MAWP_PHASE, PIP_PHASE
from annuity_income.glwb.scenarios import Scenario


class LIFOPhase(Enum):
    """Which pool the next dollar of income comes from."""
    GAIN = "GAIN"
    BASIS = "BASIS"
    FULLY_TAXABLE = "FULLY_TAXABLE"


@dataclass(frozen=True)
class TaxLotState:
    """
    Remaining LIFO pools and account value during the income walk.

    Attributes
    ----------
    remaining_gain : float
        Untaxed gain still in the contract
    remaining_basis : float
        Cost basis not yet returned
    basis_exhausted : bool
        Basis pool has reached zero
    depleted : bool
        Account value has been exhausted
    account_value : float
        Account value at start of year
    """

    remaining_gain: float
    remaining_basis: float
    basis_exhausted: bool
    depleted: bool
    account_value: float

    @property
    def lifo_phase(self) -> LIFOPhase:
        if self.remaining_gain > 0:
            return LIFOPhase.GAIN
        if self.remaining_basis > 0:
            return LIFOPhase.BASIS
        return LIFOPhase.FULLY_TAXABLE


@dataclass(frozen=True)
class TaxRow:
    """
    One year of LIFO-taxed income.

    Attributes
    ----------
    age : int
        Owner age
    phase : str
        Income phase, "MAWP" or "PIP"
    gross_income : float
        Income before tax
    taxable_portion : float
        Part of gross taxed as ordinary income
    tax_free_portion : float
        Return of basis
    tax_owed : float
        taxable_portion × tax_rate
    after_tax_income : float
        gross_income - tax_owed
    effective_rate : float
        tax_owed / gross_income (0 when gross is 0)
    cum_gross, cum_taxable, cum_tax_free, cum_tax, cum_after_tax : float
        Running totals from activation
    lifo_phase : LIFOPhase
        Pool state after this year's allocation
    remaining_gain : float
        Gain pool after this year
    remaining_basis : float
        Basis pool after this year
    """

    age: int
    phase: str
    gross_income: float
    taxable_portion: float
    tax_free_portion: float
    tax_owed: float
    after_tax_income: float
    effective_rate: float
    cum_gross: float
    cum_taxable: float
    cum_tax_free: float
    cum_tax: float
    cum_after_tax: float
    lifo_phase: LIFOPhase
    remaining_gain: float
    remaining_basis: float


@dataclass(frozen=True)
class LIFOTaxResult:
    """
    LIFO allocation over the income horizon.

    Attributes
    ----------
    year_by_year : tuple[TaxRow, ...]
        One row per income year
    total_gain : float
        AV at activation minus cost basis (may be negative)
    av_at_activation : float
        Account value when income starts
    cost_basis : float
        Basis pool at activation (never negative)
    """

    year_by_year: tuple[TaxRow, ...]
    total_gain: float
    av_at_activation: float
    cost_basis: float = 0.0

    @property
    def total_tax(self) -> float:
        return self.year_by_year[-1].cum_tax if self.year_by_year else 0.0

    @property
    def total_after_tax(self) -> float:
        return self.year_by_year[-1].cum_after_tax if self.year_by_year else 0.0

    def to_frame(self) -> pd.DataFrame:
        """Rows as a DataFrame, lifo_phase as its string value."""
        records = []
        for row in self.year_by_year:
            record = asdict(row)
            record["lifo_phase"] = row.lifo_phase.value
            records.append(record)
        return pd.DataFrame(records)


def _allocate(gross: float, state: TaxLotState) -> tuple[float, float, TaxLotState]:
    """Split one year's gross income into (taxable, tax_free) and draw down pools."""
    gain = state.remaining_gain
    basis = state.remaining_basis

    if gain > 0:
        from_gain = min(gross, gain)
        tax_free = min(gross - from_gain, basis)
        taxable = gross - tax_free
        gain -= from_gain
        basis -= tax_free
    elif basis > 0:
        tax_free = min(gross, basis)
        taxable = gross - tax_free
        basis -= tax_free
    else:
        tax_free = 0.0
        taxable = gross

    new_state = replace(
        state,
        remaining_gain=max(0.0, gain),
        remaining_basis=max(0.0, basis),
        basis_exhausted=state.basis_exhausted or basis <= 0,
    )
    return taxable, tax_free, new_state


def allocate_lifo_tax(
    scenario: Scenario | None,
    cost_basis: float,
    tax_rate: float,
    growth_rate: float,
    fee_rate: float,
    life_expectancy: int | None = None,
) -> LIFOTaxResult:
    """
    Allocate a scenario's income between taxable gain and tax-free basis.

    The account value is re-walked from activation with the same recurrence
    as the scenario, so gross income per year matches the scenario's
    MAWP/PIP split and sums to its grand total.

    Parameters
    ----------
    scenario : Scenario or None
        Selected scenario; None gives an empty result
    cost_basis : float
        After-tax investment in the contract
    tax_rate : float
        Marginal ordinary income rate (decimal)
    growth_rate : float
        Annual account growth (decimal)
    fee_rate : float
        Annual rider fee on the benefit base (decimal)
    life_expectancy : int, optional
        Horizon end age (default: scenario's)

    Returns
    -------
    LIFOTaxResult
        Year-by-year allocation with cumulative totals

    Examples
    --------
    >>> lifo = allocate_lifo_tax(scenario, 100_000, 0.24, 0.052, 0.0145)
    >>> lifo.year_by_year[0].lifo_phase
    <LIFOPhase.GAIN: 'GAIN'>
    """
    if scenario is None:
        return LIFOTaxResult(
            year_by_year=(), total_gain=0.0, av_at_activation=0.0, cost_basis=max(0.0, cost_basis)
        )

    if life_expectancy is None:
        life_expectancy = scenario.life_expectancy

    av_at_activation = scenario.av_at_activation
    total_gain = av_at_activation - cost_basis
    horizon = max(0, life_expectancy - scenario.activate_at_age)
    drain = scenario.mawp_income + scenario.benefit_base_at_activation * fee_rate

    state = TaxLotState(
        remaining_gain=max(0.0, total_gain),
        remaining_basis=max(0.0, cost_basis),
        basis_exhausted=cost_basis <= 0,
        depleted=horizon > 0 and av_at_activation <= 0,
        account_value=av_at_activation,
    )

    ages, phases, gross, taxable, tax_free, lots = [], [], [], [], [], []
    for year in range(horizon):
        if state.depleted:
            income = scenario.pip_income
            phases.append(PIP_PHASE)
        else:
            income = scenario.mawp_income
            phases.append(MAWP_PHASE)
            av = state.account_value * (1 + growth_rate) - drain
            state = replace(state, account_value=max(0.0, av), depleted=av <= 0)

        year_taxable, year_tax_free, state = _allocate(income, state)
        ages.append(scenario.activate_at_age + year)
        gross.append(income)
        taxable.append(year_taxable)
        tax_free.append(year_tax_free)
        lots.append(state)

    gross_arr = np.asarray(gross, dtype=float)
    taxable_arr = np.asarray(taxable, dtype=float)
    tax_free_arr = np.asarray(tax_free, dtype=float)
    tax_arr = taxable_arr * tax_rate
    after_tax_arr = gross_arr - tax_arr

    cum_gross = np.cumsum(gross_arr)
    cum_taxable = np.cumsum(taxable_arr)
    cum_tax_free = np.cumsum(tax_free_arr)
    cum_tax = np.cumsum(tax_arr)
    cum_after_tax = np.cumsum(after_tax_arr)

    rows = tuple(
        TaxRow(
            age=ages[i],
            phase=phases[i],
            gross_income=float(gross_arr[i]),
            taxable_portion=float(taxable_arr[i]),
            tax_free_portion=float(tax_free_arr[i]),
            tax_owed=float(tax_arr[i]),
            after_tax_income=float(after_tax_arr[i]),
            effective_rate=float(tax_arr[i] / gross_arr[i]) if gross_arr[i] > 0 else 0.0,
            cum_gross=float(cum_gross[i]),
            cum_taxable=float(cum_taxable[i]),
            cum_tax_free=float(cum_tax_free[i]),
            cum_tax=float(cum_tax[i]),
            cum_after_tax=float(cum_after_tax[i]),
            lifo_phase=lots[i].lifo_phase,
            remaining_gain=lots[i].remaining_gain,
            remaining_basis=lots[i].remaining_basis,
        )
        for i in range(len(ages))
    )

    return LIFOTaxResult(
        year_by_year=rows,
        total_gain=total_gain,
        av_at_activation=av_at_activation,
        cost_basis=max(0.0, cost_basis),
    )
