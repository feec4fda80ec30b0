"""
Tests for activation-age selection - glwb/optimizer.py.
"""

from dataclasses import replace

import pytest

from annuity_income.data.schemas import PolicyFacts
from annuity_income.glwb.optimizer import (
    find_optimal_age,
    scenario_for_age,
    select_scenario,
    waiting_advantage,
)
from annuity_income.glwb.scenarios import run_projection


@pytest.fixture
def base_scenario(fallback_projection):
    return fallback_projection.scenarios[0]


def _with_total(scenario, age: int, total: float):
    return replace(scenario, activate_at_age=age, grand_total=total)


class TestFindOptimalAge:
    """Tests for find_optimal_age."""

    def test_empty(self) -> None:
        assert find_optimal_age(()) is None

    def test_single(self, base_scenario) -> None:
        assert find_optimal_age((base_scenario,)) == base_scenario.activate_at_age

    def test_arg_max(self, base_scenario) -> None:
        scenarios = (
            _with_total(base_scenario, 63, 100.0),
            _with_total(base_scenario, 64, 300.0),
            _with_total(base_scenario, 65, 200.0),
        )
        assert find_optimal_age(scenarios) == 64

    def test_tie_goes_to_earliest_age(self, base_scenario) -> None:
        scenarios = (
            _with_total(base_scenario, 63, 100.0),
            _with_total(base_scenario, 64, 300.0),
            _with_total(base_scenario, 65, 300.0),
        )
        assert find_optimal_age(scenarios) == 64

    def test_all_zero_picks_first(self, base_scenario) -> None:
        scenarios = tuple(_with_total(base_scenario, age, 0.0) for age in (70, 71, 72))
        assert find_optimal_age(scenarios) == 70


class TestScenarioForAge:
    """Tests for scenario_for_age."""

    def test_found(self, fallback_projection) -> None:
        assert scenario_for_age(fallback_projection.scenarios, 70).activate_at_age == 70

    def test_missing(self, fallback_projection) -> None:
        assert scenario_for_age(fallback_projection.scenarios, 90) is None

    def test_none_age(self, fallback_projection) -> None:
        assert scenario_for_age(fallback_projection.scenarios, None) is None


class TestSelectScenario:
    """Tests for select_scenario."""

    def test_default_is_optimal(self, fallback_projection) -> None:
        chosen = select_scenario(fallback_projection)
        assert chosen.activate_at_age == fallback_projection.optimal_age

    def test_override(self, fallback_projection) -> None:
        assert select_scenario(fallback_projection, 66).activate_at_age == 66

    def test_override_outside_range_uses_optimal(self, fallback_projection) -> None:
        chosen = select_scenario(fallback_projection, 90)
        assert chosen.activate_at_age == fallback_projection.optimal_age

    def test_degenerate(self, fallback_params, default_assumptions) -> None:
        result = run_projection(fallback_params, default_assumptions, PolicyFacts(180_000, 100_000, 3, 80))
        assert select_scenario(result, 80) is None


class TestWaitingAdvantage:
    """Tests for waiting_advantage."""

    def test_positive_for_reference_policy(self, fallback_projection) -> None:
        advantage = waiting_advantage(fallback_projection)

        expected = (
            fallback_projection.optimal_scenario.grand_total
            - fallback_projection.immediate_scenario.grand_total
        )
        assert advantage == pytest.approx(expected)
        assert advantage > 0

    def test_degenerate_is_zero(self, fallback_params, default_assumptions) -> None:
        result = run_projection(fallback_params, default_assumptions, PolicyFacts(180_000, 100_000, 3, 80))
        assert waiting_advantage(result) == 0.0
