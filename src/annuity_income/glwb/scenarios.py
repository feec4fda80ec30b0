"""
Income scenario for one activation age.

Once income is activated the rider pays the MAWP income every year while
the account value stays positive. When the account is exhausted the insurer
continues paying at the protected income payment (PIP) rate for life.

Theory
------
    income = BB × MAWP_rate(age)
    AV(t+1) = AV(t) × (1 + g) − income − BB × fee
    Depletion: first year with AV <= 0 (that year's MAWP is still paid)
    Total = MAWP years × MAWP income + PIP years × PIP income

Income, fee and benefit base are fixed at activation. The projection
horizon is activation age to life expectancy.
"""

import logging
from dataclasses import asdict, dataclass

import pandas as pd

from annuity_income.config.settings import SETTINGS, ProjectionConfig
from annuity_income.data.schemas import Assumptions, PolicyFacts, ResolvedParameters
from annuity_income.riders.rate_table import lookup_rate

from .accumulation import AccumulationProjector, AccumulationRow, AccumulationState
from .optimizer import find_optimal_age, scenario_for_age

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scenario:
    """
    Lifetime income from activating at one age.

    Attributes
    ----------
    activate_at_age : int
        Age income starts
    benefit_base_at_activation : float
        Benefit base income is computed from
    av_at_activation : float
        Account value when income starts
    mawp_rate : float
        Withdrawal rate for the activation age band
    mawp_income : float
        Annual income while the account is positive
    annual_fee : float
        Rider fee charged on the benefit base each year
    depletes_at_age : int or None
        Age at which the account is exhausted, None if it lasts the horizon
    mawp_years : int
        Years paid at the MAWP rate
    mawp_total : float
        mawp_years × mawp_income
    pip_rate : float
        Post-depletion rate (MAWP rate when the rider has no PIP table)
    pip_income : float
        Annual income after depletion
    pip_years : int
        Years paid by the insurer after depletion
    pip_total : float
        pip_years × pip_income
    grand_total : float
        mawp_total + pip_total
    life_expectancy : int
        Age the horizon ends
    """

    activate_at_age: int
    benefit_base_at_activation: float
    av_at_activation: float
    mawp_rate: float
    mawp_income: float
    annual_fee: float
    depletes_at_age: int | None
    mawp_years: int
    mawp_total: float
    pip_rate: float
    pip_income: float
    pip_years: int
    pip_total: float
    grand_total: float
    life_expectancy: int

    @property
    def horizon_years(self) -> int:
        return max(0, self.life_expectancy - self.activate_at_age)

    @property
    def depletes(self) -> bool:
        return self.depletes_at_age is not None


def compute_scenario(
    activate_at_age: int,
    state: AccumulationState,
    params: ResolvedParameters,
    assumptions: Assumptions,
) -> Scenario:
    """
    Compute lifetime income for activating at an age.

    Parameters
    ----------
    activate_at_age : int
        Age income starts
    state : AccumulationState
        AV and BB at that age
    params : ResolvedParameters
        Rider parameters
    assumptions : Assumptions
        Growth and life expectancy

    Returns
    -------
    Scenario
        Scenario with MAWP/PIP decomposition
    """
    bb = state.bb
    av = state.av
    life_expectancy = assumptions.life_expectancy
    horizon = max(0, life_expectancy - activate_at_age)

    mawp_rate = lookup_rate(activate_at_age, params.mawp_table)
    # No PIP table: the guarantee continues at the MAWP rate after depletion
    pip_rate = lookup_rate(activate_at_age, params.pip_table) if params.pip_table else mawp_rate

    mawp_income = bb * mawp_rate
    pip_income = bb * pip_rate
    annual_fee = bb * params.fee_rate
    drain = mawp_income + annual_fee

    depletes_at_age: int | None = None
    mawp_years = horizon
    if horizon > 0 and av <= 0:
        depletes_at_age = activate_at_age
        mawp_years = 0
    else:
        for year in range(horizon):
            av = av * (1 + assumptions.growth_rate) - drain
            if av <= 0:
                depletes_at_age = activate_at_age + year + 1
                mawp_years = year + 1
                break

    pip_years = max(0, life_expectancy - depletes_at_age) if depletes_at_age is not None else 0
    mawp_total = mawp_years * mawp_income
    pip_total = pip_years * pip_income

    return Scenario(
        activate_at_age=activate_at_age,
        benefit_base_at_activation=bb,
        av_at_activation=state.av,
        mawp_rate=mawp_rate,
        mawp_income=mawp_income,
        annual_fee=annual_fee,
        depletes_at_age=depletes_at_age,
        mawp_years=mawp_years,
        mawp_total=mawp_total,
        pip_rate=pip_rate,
        pip_income=pip_income,
        pip_years=pip_years,
        pip_total=pip_total,
        grand_total=mawp_total + pip_total,
        life_expectancy=life_expectancy,
    )


# =============================================================================
# Projection over Activation Ages
# =============================================================================

@dataclass(frozen=True)
class ProjectionResult:
    """
    Scenarios for every candidate activation age.

    Attributes
    ----------
    scenarios : tuple[Scenario, ...]
        One scenario per age, ascending; empty when no age is eligible
    optimal_age : int or None
        Age maximizing grand total, None when scenarios is empty
    pre_activation_rows : tuple[AccumulationRow, ...]
        AV/BB path from valuation through the credit window
    current_av : float
        Account value at valuation
    current_bb : float
        Benefit base at valuation
    facts : PolicyFacts
        Policy facts the projection was run for
    """

    scenarios: tuple[Scenario, ...]
    optimal_age: int | None
    pre_activation_rows: tuple[AccumulationRow, ...]
    current_av: float
    current_bb: float
    facts: PolicyFacts

    @property
    def is_degenerate(self) -> bool:
        return not self.scenarios

    @property
    def optimal_scenario(self) -> Scenario | None:
        return scenario_for_age(self.scenarios, self.optimal_age)

    @property
    def immediate_scenario(self) -> Scenario | None:
        """Scenario activating at the owner's current age."""
        return scenario_for_age(self.scenarios, self.facts.current_age)

    def scenarios_frame(self) -> pd.DataFrame:
        """Scenarios as a DataFrame, one row per activation age."""
        return pd.DataFrame([asdict(s) for s in self.scenarios])

    def pre_activation_frame(self) -> pd.DataFrame:
        """Pre-activation rows as a DataFrame."""
        return pd.DataFrame([asdict(r) for r in self.pre_activation_rows])


def run_projection(
    params: ResolvedParameters,
    assumptions: Assumptions,
    facts: PolicyFacts,
    config: ProjectionConfig = SETTINGS.projection,
) -> ProjectionResult:
    """
    Project income for each activation age from now to the maximum age.

    Parameters
    ----------
    params : ResolvedParameters
        Rider parameters
    assumptions : Assumptions
        Growth, life expectancy and tax rate
    facts : PolicyFacts
        Contract facts at valuation
    config : ProjectionConfig
        Supplies max_activation_age

    Returns
    -------
    ProjectionResult
        Degenerate (no scenarios, no optimum) when the owner is already
        past max_activation_age

    Examples
    --------
    >>> result = run_projection(FALLBACK_PARAMETERS, Assumptions(), PolicyFacts())
    >>> result.optimal_age > 63
    True
    """
    projector = AccumulationProjector(params, assumptions, facts)
    start = projector.current_state()
    rows = projector.project(start)

    ages = range(facts.current_age, config.max_activation_age + 1)
    if not ages:
        logger.info(
            f"Owner age {facts.current_age} is past max activation age "
            f"{config.max_activation_age}; no scenarios to project"
        )

    scenarios = tuple(
        compute_scenario(age, projector.state_at_age(age, rows, start), params, assumptions)
        for age in ages
    )
    optimal_age = find_optimal_age(scenarios)
    if optimal_age is not None:
        logger.info(f"Optimal activation age {optimal_age} of {len(scenarios)} candidates")

    return ProjectionResult(
        scenarios=scenarios,
        optimal_age=optimal_age,
        pre_activation_rows=rows,
        current_av=start.av,
        current_bb=start.bb,
        facts=facts,
    )
