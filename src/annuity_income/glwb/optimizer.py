"""
Activation-age selection.

The optimal activation age maximizes lifetime income (grand total) over the
candidate ages. Ties go to the earliest age.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .scenarios import ProjectionResult, Scenario


def find_optimal_age(scenarios: Sequence["Scenario"]) -> int | None:
    """
    Activation age with the greatest grand total.

    Parameters
    ----------
    scenarios : Sequence[Scenario]
        Scenarios in ascending age order

    Returns
    -------
    int or None
        Earliest age achieving the maximum, None for no scenarios
    """
    if not scenarios:
        return None

    totals = np.array([s.grand_total for s in scenarios], dtype=float)
    # argmax returns the first occurrence of the maximum
    return scenarios[int(np.argmax(totals))].activate_at_age


def scenario_for_age(scenarios: Sequence["Scenario"], age: int | None) -> "Scenario | None":
    """Scenario activating at age, None if the age was not projected."""
    if age is None:
        return None
    return next((s for s in scenarios if s.activate_at_age == age), None)


def select_scenario(
    result: "ProjectionResult",
    activation_age: int | None = None,
) -> "Scenario | None":
    """
    Scenario to display: the user's activation age if projected, else the optimum.

    Parameters
    ----------
    result : ProjectionResult
        Projection over candidate ages
    activation_age : int, optional
        User override

    Returns
    -------
    Scenario or None
        None only when the projection is degenerate
    """
    chosen = scenario_for_age(result.scenarios, activation_age)
    if chosen is not None:
        return chosen
    return scenario_for_age(result.scenarios, result.optimal_age)


def waiting_advantage(result: "ProjectionResult") -> float:
    """
    Extra lifetime income from waiting until the optimal age.

    Returns
    -------
    float
        optimal.grand_total - immediate.grand_total (0.0 if either is missing)
    """
    optimal = result.optimal_scenario
    immediate = result.immediate_scenario
    if optimal is None or immediate is None:
        return 0.0
    return optimal.grand_total - immediate.grand_total
