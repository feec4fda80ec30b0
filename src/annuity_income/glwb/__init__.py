"""
GLWB (Guaranteed Lifetime Withdrawal Benefit) income projection.

Deterministic projection of a guaranteed-income rider:
- Benefit-base credits, step-up floor and ratchet
- Pre-activation accumulation of AV and BB
- Lifetime income per activation age (MAWP then PIP)
- Activation-age optimization
"""

from .accumulation import (
    AccumulationProjector,
    AccumulationRow,
    AccumulationState,
    current_state,
    project_accumulation,
)
from .credits import (
    CompoundCredit,
    CreditMechanic,
    RatchetMechanic,
    SimpleCredit,
    credit_floor,
    credit_mechanic,
)
from .income import (
    BreakdownRow,
    IncomeRow,
    breakdown_frame,
    build_income_schedule,
    build_yearly_breakdown,
    income_schedule_frame,
)
from .optimizer import (
    find_optimal_age,
    scenario_for_age,
    select_scenario,
    waiting_advantage,
)
from .scenarios import (
    ProjectionResult,
    Scenario,
    compute_scenario,
    run_projection,
)

__all__ = [
    # Credit Mechanics
    "CreditMechanic",
    "SimpleCredit",
    "CompoundCredit",
    "RatchetMechanic",
    "credit_mechanic",
    "credit_floor",
    # Accumulation
    "AccumulationProjector",
    "AccumulationState",
    "AccumulationRow",
    "current_state",
    "project_accumulation",
    # Scenarios
    "Scenario",
    "ProjectionResult",
    "compute_scenario",
    "run_projection",
    # Optimizer
    "find_optimal_age",
    "scenario_for_age",
    "select_scenario",
    "waiting_advantage",
    # Income Views
    "IncomeRow",
    "BreakdownRow",
    "build_income_schedule",
    "build_yearly_breakdown",
    "income_schedule_frame",
    "breakdown_frame",
]
