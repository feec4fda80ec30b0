"""
Integration tests for Validation Gates (HALT/PASS framework).

Runs the gates on real projections and on deliberately broken ones.
"""

from dataclasses import replace

import pytest

from annuity_income.data.schemas import PolicyFacts
from annuity_income.glwb.scenarios import run_projection
from annuity_income.tax.lifo import allocate_lifo_tax
from annuity_income.validation.gates import (
    BenefitBaseMonotonicityGate,
    GateResult,
    GateStatus,
    LIFOConservationGate,
    OptimalSelectionGate,
    ScenarioTotalsGate,
    ValidationEngine,
    ValidationReport,
    ensure_valid,
    validate_projection,
)

# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def fallback_lifo(fallback_projection, default_assumptions):
    return allocate_lifo_tax(
        fallback_projection.optimal_scenario,
        cost_basis=100_000,
        tax_rate=0.24,
        growth_rate=default_assumptions.growth_rate,
        fee_rate=0.0145,
    )


@pytest.fixture
def degenerate_projection(fallback_params, default_assumptions):
    facts = PolicyFacts(initial_premium=180_000, cost_basis=100_000, contract_year=3, current_age=80)
    return run_projection(fallback_params, default_assumptions, facts)


# =============================================================================
# Test GateResult and ValidationReport
# =============================================================================

class TestGateResult:
    """Tests for GateResult dataclass."""

    def test_pass_and_warn_count_as_passed(self) -> None:
        assert GateResult(GateStatus.PASS, "g", "ok").passed
        assert GateResult(GateStatus.WARN, "g", "meh").passed
        assert not GateResult(GateStatus.HALT, "g", "bad").passed


class TestValidationReport:
    """Tests for ValidationReport."""

    def test_worst_status_wins(self) -> None:
        report = ValidationReport(
            results=(
                GateResult(GateStatus.PASS, "a", "ok"),
                GateResult(GateStatus.WARN, "b", "meh"),
                GateResult(GateStatus.HALT, "c", "bad"),
            )
        )

        assert report.overall_status == GateStatus.HALT
        assert not report.passed
        assert [g.gate_name for g in report.halted_gates] == ["c"]
        assert [g.gate_name for g in report.warned_gates] == ["b"]

    def test_to_dict(self) -> None:
        report = ValidationReport(results=(GateResult(GateStatus.WARN, "b", "meh", value=1),))
        data = report.to_dict()

        assert data["overall_status"] == "warn"
        assert data["passed"] is True
        assert data["n_warned"] == 1
        assert data["results"][0] == {
            "gate": "b",
            "status": "warn",
            "message": "meh",
            "value": 1,
            "threshold": None,
        }


# =============================================================================
# Gates on Real Projections
# =============================================================================

class TestGatesPass:
    """A correct projection passes every gate."""

    def test_validate_projection(self, fallback_projection, fallback_lifo) -> None:
        report = validate_projection(fallback_projection, lifo=fallback_lifo)

        assert report.overall_status == GateStatus.PASS
        assert len(report.results) == 4

    def test_without_lifo(self, fallback_projection) -> None:
        result = LIFOConservationGate().check(fallback_projection)

        assert result.status == GateStatus.PASS
        assert "skipping" in result.message

    def test_ensure_valid_returns_projection(self, fallback_projection, fallback_lifo) -> None:
        assert ensure_valid(fallback_projection, lifo=fallback_lifo) is fallback_projection

    def test_degenerate_warns(self, degenerate_projection) -> None:
        report = validate_projection(degenerate_projection)

        assert report.overall_status == GateStatus.WARN
        assert report.warned_gates[0].gate_name == "optimal_selection"


class TestGatesHalt:
    """Broken projections HALT with diagnostics."""

    def test_grand_total_mismatch(self, fallback_projection) -> None:
        bad = replace(fallback_projection.scenarios[0], grand_total=1.0)
        broken = replace(fallback_projection, scenarios=(bad,) + fallback_projection.scenarios[1:])

        result = ScenarioTotalsGate().check(broken)

        assert result.status == GateStatus.HALT
        assert "age 63" in result.message

    def test_pip_without_depletion(self, fallback_projection) -> None:
        bad = replace(fallback_projection.scenarios[0], depletes_at_age=None, pip_years=2)
        broken = replace(fallback_projection, scenarios=(bad,))

        result = ScenarioTotalsGate().check(broken)

        assert result.status == GateStatus.HALT
        assert "PIP years without depletion" in result.message

    def test_benefit_base_decrease(self, fallback_projection) -> None:
        rows = fallback_projection.pre_activation_rows
        bad_row = replace(rows[2], bb_eoy=rows[1].bb_eoy - 1_000)
        broken = replace(fallback_projection, pre_activation_rows=rows[:2] + (bad_row,) + rows[3:])

        result = BenefitBaseMonotonicityGate().check(broken)

        assert result.status == GateStatus.HALT
        assert "pre-activation" in result.message

    def test_lifo_not_conserved(self, fallback_projection, fallback_lifo) -> None:
        first = replace(fallback_lifo.year_by_year[0], tax_free_portion=-5.0)
        broken = replace(fallback_lifo, year_by_year=(first,) + fallback_lifo.year_by_year[1:])

        result = LIFOConservationGate().check(fallback_projection, lifo=broken)

        assert result.status == GateStatus.HALT

    def test_first_year_basis_above_cost_basis(self, fallback_projection, fallback_lifo) -> None:
        first = replace(fallback_lifo.year_by_year[0], remaining_basis=fallback_lifo.cost_basis + 1_000)
        broken = replace(fallback_lifo, year_by_year=(first,) + fallback_lifo.year_by_year[1:])

        result = LIFOConservationGate().check(fallback_projection, lifo=broken)

        assert result.status == GateStatus.HALT
        assert "increased" in result.message

    def test_wrong_optimal_age(self, fallback_projection) -> None:
        broken = replace(fallback_projection, optimal_age=fallback_projection.facts.current_age)

        result = OptimalSelectionGate().check(broken)

        assert result.status == GateStatus.HALT
        assert result.threshold == pytest.approx(fallback_projection.optimal_scenario.grand_total)

    def test_engine_logs_and_raises(self, fallback_projection, caplog) -> None:
        broken = replace(fallback_projection, optimal_age=fallback_projection.facts.current_age)

        with caplog.at_level("WARNING", logger="annuity_income.validation.gates"):
            with pytest.raises(ValueError, match="CRITICAL: Validation failed"):
                ValidationEngine().validate_and_raise(broken)

        assert "optimal_selection HALT" in caplog.text


class TestCustomGates:
    """Engines run only the gates they are given."""

    def test_single_gate(self, fallback_projection) -> None:
        report = ValidationEngine(gates=[OptimalSelectionGate()]).validate(fallback_projection)

        assert [r.gate_name for r in report.results] == ["optimal_selection"]
