"""
Year-by-year income views for a chosen activation age.

- build_income_schedule: post-activation AV path with MAWP/PIP phases
- build_yearly_breakdown: whole-dollar table from valuation to life
  expectancy covering accumulation, income and PIP years

Phases follow the scenario: the first ``mawp_years`` years pay MAWP income
(the year the account is exhausted included), the rest pay PIP income.
"""

from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd

from annuity_income.data.schemas import Assumptions

from .scenarios import ProjectionResult, Scenario

MAWP_PHASE = "MAWP"
PIP_PHASE = "PIP"


@dataclass(frozen=True)
class IncomeRow:
    """
    One post-activation year.

    Attributes
    ----------
    age : int
        Owner age
    account_value : float
        End-of-year account value (0 once exhausted)
    phase : str
        "MAWP" or "PIP"
    income : float
        Income paid this year
    cumulative_income : float
        Income paid from activation through this year
    """

    age: int
    account_value: float
    phase: str
    income: float
    cumulative_income: float


@dataclass(frozen=True)
class BreakdownRow:
    """
    One year of the yearly breakdown, in whole dollars.

    Attributes
    ----------
    age : int
        Owner age
    growth : int
        Growth credited on the opening account value
    fees : int
        Rider fee charged on the benefit base
    income : int
        Income paid
    gross_av : int
        Opening account value plus growth
    net_av : int
        Closing account value
    phase : str
        "accumulation", "income" or "pip"
    """

    age: int
    growth: int
    fees: int
    income: int
    gross_av: int
    net_av: int
    phase: str


def build_income_schedule(
    scenario: Scenario | None,
    assumptions: Assumptions,
    fee_rate: float,
) -> tuple[IncomeRow, ...]:
    """
    Post-activation schedule from activation to life expectancy.

    Parameters
    ----------
    scenario : Scenario or None
        Selected scenario; None gives an empty schedule
    assumptions : Assumptions
        Growth rate
    fee_rate : float
        Annual rider fee on the benefit base

    Returns
    -------
    tuple[IncomeRow, ...]
        One row per horizon year; incomes sum to scenario.grand_total
    """
    if scenario is None:
        return ()

    bb = scenario.benefit_base_at_activation
    av = scenario.av_at_activation
    incomes = [
        scenario.mawp_income if year < scenario.mawp_years else scenario.pip_income
        for year in range(scenario.horizon_years)
    ]
    cumulative = np.cumsum(incomes) if incomes else np.array([])

    rows = []
    for year, income in enumerate(incomes):
        if year < scenario.mawp_years:
            av = max(0.0, av * (1 + assumptions.growth_rate) - bb * fee_rate - income)
            phase = MAWP_PHASE
        else:
            av = 0.0
            phase = PIP_PHASE
        rows.append(
            IncomeRow(
                age=scenario.activate_at_age + year,
                account_value=av,
                phase=phase,
                income=income,
                cumulative_income=float(cumulative[year]),
            )
        )
    return tuple(rows)


def build_yearly_breakdown(
    result: ProjectionResult,
    scenario: Scenario | None,
    assumptions: Assumptions,
    fee_rate: float,
) -> tuple[BreakdownRow, ...]:
    """
    Yearly breakdown from valuation through life expectancy.

    Accumulation years run from the current age up to (not including) the
    activation age. Past the pre-activation table the accumulation path
    continues without credits, matching the projector.

    Parameters
    ----------
    result : ProjectionResult
        Projection the scenario came from
    scenario : Scenario or None
        Selected scenario; None gives an empty breakdown
    assumptions : Assumptions
        Growth rate
    fee_rate : float
        Annual rider fee on the benefit base

    Returns
    -------
    tuple[BreakdownRow, ...]
        Rows in age order
    """
    if scenario is None:
        return ()

    growth_rate = assumptions.growth_rate
    rows: list[BreakdownRow] = []

    # Accumulation
    av, bb = result.current_av, result.current_bb
    table = {row.age: row for row in result.pre_activation_rows}
    for age in range(result.facts.current_age, scenario.activate_at_age):
        growth = av * growth_rate
        fees = bb * fee_rate
        if age in table:
            next_av, next_bb = table[age].av_eoy, table[age].bb_eoy
        else:
            next_av = max(0.0, av + growth - fees)
            next_bb = max(bb, next_av)
        rows.append(
            BreakdownRow(
                age=age,
                growth=round(growth),
                fees=round(fees),
                income=0,
                gross_av=round(av + growth),
                net_av=round(next_av),
                phase="accumulation",
            )
        )
        av, bb = next_av, next_bb

    # Income and PIP
    av = scenario.av_at_activation
    bb = scenario.benefit_base_at_activation
    for year in range(scenario.horizon_years):
        age = scenario.activate_at_age + year
        if year >= scenario.mawp_years:
            rows.append(
                BreakdownRow(
                    age=age,
                    growth=0,
                    fees=0,
                    income=round(scenario.pip_income),
                    gross_av=0,
                    net_av=0,
                    phase="pip",
                )
            )
            continue

        growth = av * growth_rate
        fees = bb * fee_rate
        eoy = av + growth - fees - scenario.mawp_income
        rows.append(
            BreakdownRow(
                age=age,
                growth=round(growth),
                fees=round(fees),
                income=round(scenario.mawp_income),
                gross_av=round(av + growth),
                net_av=max(0, round(eoy)),
                phase="income",
            )
        )
        av = max(0.0, eoy)

    return tuple(rows)


def income_schedule_frame(rows: tuple[IncomeRow, ...]) -> pd.DataFrame:
    """Income schedule as a DataFrame."""
    return pd.DataFrame([asdict(row) for row in rows])


def breakdown_frame(rows: tuple[BreakdownRow, ...]) -> pd.DataFrame:
    """Yearly breakdown as a DataFrame."""
    return pd.DataFrame([asdict(row) for row in rows])
