"""
Validation Gates - HALT/PASS framework for income projections.

Checks a projection (and optionally its LIFO allocation) for internal
consistency before it is displayed. Gates can HALT (reject with
diagnostics), WARN (usable but notable) or PASS.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from annuity_income.config.tolerances import MONEY_TOLERANCE, POOL_FLOOR_TOLERANCE
from annuity_income.glwb.scenarios import ProjectionResult
from annuity_income.tax.lifo import LIFOTaxResult

logger = logging.getLogger(__name__)


class GateStatus(Enum):
    """Status of a validation gate."""
    PASS = "pass"
    HALT = "halt"
    WARN = "warn"


@dataclass(frozen=True)
class GateResult:
    """
    Result of a validation gate check.

    Attributes
    ----------
    status : GateStatus
        PASS, HALT, or WARN
    gate_name : str
        Name of the gate that was checked
    message : str
        Explanation of the result
    value : Any, optional
        The value that was checked
    threshold : Any, optional
        The threshold that was applied
    """

    status: GateStatus
    gate_name: str
    message: str
    value: Any | None = None
    threshold: Any | None = None

    @property
    def passed(self) -> bool:
        """Check if gate passed (PASS or WARN)."""
        return self.status != GateStatus.HALT


@dataclass(frozen=True)
class ValidationReport:
    """
    Complete validation report from all gates.

    Attributes
    ----------
    results : tuple[GateResult, ...]
        Results from all gates
    overall_status : GateStatus
        Worst status across all gates
    """

    results: tuple[GateResult, ...]

    @property
    def overall_status(self) -> GateStatus:
        """Get worst status across all gates."""
        if any(r.status == GateStatus.HALT for r in self.results):
            return GateStatus.HALT
        elif any(r.status == GateStatus.WARN for r in self.results):
            return GateStatus.WARN
        return GateStatus.PASS

    @property
    def passed(self) -> bool:
        """Check if all gates passed (no HALTs)."""
        return self.overall_status != GateStatus.HALT

    @property
    def halted_gates(self) -> list[GateResult]:
        return [r for r in self.results if r.status == GateStatus.HALT]

    @property
    def warned_gates(self) -> list[GateResult]:
        return [r for r in self.results if r.status == GateStatus.WARN]

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        return {
            "overall_status": self.overall_status.value,
            "passed": self.passed,
            "n_halted": len(self.halted_gates),
            "n_warned": len(self.warned_gates),
            "results": [
                {
                    "gate": r.gate_name,
                    "status": r.status.value,
                    "message": r.message,
                    "value": r.value,
                    "threshold": r.threshold,
                }
                for r in self.results
            ],
        }


# =============================================================================
# Gate Implementations
# =============================================================================

class ValidationGate:
    """
    Base class for validation gates.

    Subclasses implement check() to validate a projection.
    """

    name: str = "base_gate"

    def check(self, result: ProjectionResult, **context: Any) -> GateResult:
        """
        Check the projection.

        Parameters
        ----------
        result : ProjectionResult
            Projection to validate
        **context : Any
            Additional context (``lifo``: LIFOTaxResult)

        Returns
        -------
        GateResult
            Validation result
        """
        raise NotImplementedError


class ScenarioTotalsGate(ValidationGate):
    """
    Check each scenario decomposes into its MAWP and PIP parts.

    - grand_total = mawp_total + pip_total
    - PIP years only after depletion
    - MAWP and PIP years together cover the horizon
    """

    name = "scenario_totals"

    def __init__(self, tolerance: float = MONEY_TOLERANCE):
        self.tolerance = tolerance

    def check(self, result: ProjectionResult, **context: Any) -> GateResult:
        issues = []
        for s in result.scenarios:
            residual = s.grand_total - (s.mawp_total + s.pip_total)
            if abs(residual) > self.tolerance:
                issues.append(f"age {s.activate_at_age}: grand total off by {residual:.6f}")
            if s.pip_years > 0 and s.depletes_at_age is None:
                issues.append(f"age {s.activate_at_age}: {s.pip_years} PIP years without depletion")
            if s.depletes_at_age is not None and s.mawp_years + s.pip_years != s.horizon_years:
                issues.append(
                    f"age {s.activate_at_age}: {s.mawp_years} MAWP + {s.pip_years} PIP years "
                    f"!= horizon {s.horizon_years}"
                )

        if issues:
            return GateResult(
                status=GateStatus.HALT,
                gate_name=self.name,
                message=f"Scenario decomposition failed: {'; '.join(issues)}",
                value=issues,
            )

        return GateResult(
            status=GateStatus.PASS,
            gate_name=self.name,
            message=f"{len(result.scenarios)} scenarios decompose into MAWP + PIP",
        )


class BenefitBaseMonotonicityGate(ValidationGate):
    """
    Check the benefit base never decreases before activation.

    Covers the pre-activation table (starting from the current BB) and the
    BB at activation across candidate ages.
    """

    name = "benefit_base_monotonicity"

    def check(self, result: ProjectionResult, **context: Any) -> GateResult:
        path = [result.current_bb] + [row.bb_eoy for row in result.pre_activation_rows]
        activation_bbs = [s.benefit_base_at_activation for s in result.scenarios]

        for label, values in (("pre-activation", path), ("activation", activation_bbs)):
            for prev, curr in zip(values, values[1:]):
                if curr < prev - MONEY_TOLERANCE:
                    return GateResult(
                        status=GateStatus.HALT,
                        gate_name=self.name,
                        message=f"Benefit base decreased in {label} path: "
                                f"{prev:.2f} -> {curr:.2f}",
                        value=curr,
                        threshold=prev,
                    )

        return GateResult(
            status=GateStatus.PASS,
            gate_name=self.name,
            message="Benefit base is non-decreasing",
        )


class LIFOConservationGate(ValidationGate):
    """
    Check the LIFO allocation conserves income and draws pools down.

    - taxable + tax-free = gross each year
    - remaining gain and basis never increase and never go negative
    """

    name = "lifo_conservation"

    def __init__(self, tolerance: float = MONEY_TOLERANCE):
        self.tolerance = tolerance

    def check(self, result: ProjectionResult, **context: Any) -> GateResult:
        lifo: LIFOTaxResult | None = context.get("lifo")
        if lifo is None or not lifo.year_by_year:
            return GateResult(
                status=GateStatus.PASS,
                gate_name=self.name,
                message="No LIFO allocation, skipping",
            )

        prev_gain = max(0.0, lifo.total_gain)
        prev_basis = lifo.cost_basis
        for row in lifo.year_by_year:
            residual = row.taxable_portion + row.tax_free_portion - row.gross_income
            if abs(residual) > self.tolerance:
                return GateResult(
                    status=GateStatus.HALT,
                    gate_name=self.name,
                    message=f"Age {row.age}: taxable + tax-free differs from gross by {residual:.6f}",
                    value=residual,
                    threshold=self.tolerance,
                )
            if min(row.remaining_gain, row.remaining_basis) < -POOL_FLOOR_TOLERANCE:
                return GateResult(
                    status=GateStatus.HALT,
                    gate_name=self.name,
                    message=f"Age {row.age}: LIFO pool went negative",
                    value=min(row.remaining_gain, row.remaining_basis),
                    threshold=0.0,
                )
            if row.remaining_gain > prev_gain + POOL_FLOOR_TOLERANCE or row.remaining_basis > prev_basis + POOL_FLOOR_TOLERANCE:
                return GateResult(
                    status=GateStatus.HALT,
                    gate_name=self.name,
                    message=f"Age {row.age}: LIFO pool increased",
                )
            prev_gain, prev_basis = row.remaining_gain, row.remaining_basis

        return GateResult(
            status=GateStatus.PASS,
            gate_name=self.name,
            message=f"LIFO allocation conserves income over {len(lifo.year_by_year)} years",
        )


class OptimalSelectionGate(ValidationGate):
    """
    Check the optimal age is the arg-max of grand total.

    A degenerate projection (no candidate ages) WARNs.
    """

    name = "optimal_selection"

    def check(self, result: ProjectionResult, **context: Any) -> GateResult:
        if result.is_degenerate:
            return GateResult(
                status=GateStatus.WARN,
                gate_name=self.name,
                message=f"No activation ages to project at age {result.facts.current_age}",
            )

        best = max(s.grand_total for s in result.scenarios)
        optimal = result.optimal_scenario
        if optimal is None or optimal.grand_total < best - MONEY_TOLERANCE:
            return GateResult(
                status=GateStatus.HALT,
                gate_name=self.name,
                message=f"Optimal age {result.optimal_age} does not maximize lifetime income",
                value=None if optimal is None else optimal.grand_total,
                threshold=best,
            )

        return GateResult(
            status=GateStatus.PASS,
            gate_name=self.name,
            message=f"Optimal age {result.optimal_age} maximizes lifetime income (${best:,.0f})",
            value=result.optimal_age,
        )


# =============================================================================
# Validation Engine
# =============================================================================

class ValidationEngine:
    """
    Engine for running validation gates on income projections.

    Parameters
    ----------
    gates : list[ValidationGate], optional
        Custom gates to use. If None, uses default gates.

    Examples
    --------
    >>> engine = ValidationEngine()
    >>> report = engine.validate(projection, lifo=lifo)
    >>> if not report.passed:
    ...     for gate in report.halted_gates:
    ...         print(f"HALT: {gate.message}")
    """

    def __init__(
        self,
        gates: list[ValidationGate] | None = None,
    ):
        if gates is None:
            gates = self._default_gates()
        self.gates = gates

    def _default_gates(self) -> list[ValidationGate]:
        """Create default set of validation gates."""
        return [
            ScenarioTotalsGate(),
            BenefitBaseMonotonicityGate(),
            LIFOConservationGate(),
            OptimalSelectionGate(),
        ]

    def validate(
        self,
        result: ProjectionResult,
        lifo: LIFOTaxResult | None = None,
        **context: Any,
    ) -> ValidationReport:
        """
        Run all validation gates on a projection.

        Parameters
        ----------
        result : ProjectionResult
            Projection to validate
        lifo : LIFOTaxResult, optional
            LIFO allocation of the selected scenario
        **context : Any
            Additional context for custom gates

        Returns
        -------
        ValidationReport
            Complete validation report
        """
        results = []
        for gate in self.gates:
            gate_result = gate.check(result, lifo=lifo, **context)
            if gate_result.status == GateStatus.HALT:
                logger.warning(f"Gate {gate_result.gate_name} HALT: {gate_result.message}")
            results.append(gate_result)

        return ValidationReport(results=tuple(results))

    def validate_and_raise(
        self,
        result: ProjectionResult,
        lifo: LIFOTaxResult | None = None,
        **context: Any,
    ) -> ProjectionResult:
        """
        Validate and raise exception on HALT.

        Returns
        -------
        ProjectionResult
            The same result if validation passes

        Raises
        ------
        ValueError
            If any gate HALTs
        """
        report = self.validate(result, lifo=lifo, **context)

        if not report.passed:
            halt_messages = [g.message for g in report.halted_gates]
            raise ValueError(
                "CRITICAL: Validation failed. HALTs:\n" +
                "\n".join(f"  - {m}" for m in halt_messages)
            )

        return result


# =============================================================================
# Convenience Functions
# =============================================================================

def validate_projection(
    result: ProjectionResult,
    lifo: LIFOTaxResult | None = None,
    **context: Any,
) -> ValidationReport:
    """
    Quick validation of a projection.

    Examples
    --------
    >>> report = validate_projection(projection, lifo=lifo)
    >>> report.overall_status
    <GateStatus.PASS: 'pass'>
    """
    engine = ValidationEngine()
    return engine.validate(result, lifo=lifo, **context)


def ensure_valid(
    result: ProjectionResult,
    lifo: LIFOTaxResult | None = None,
    **context: Any,
) -> ProjectionResult:
    """
    Validate and raise if invalid.

    Raises
    ------
    ValueError
        If validation fails
    """
    engine = ValidationEngine()
    return engine.validate_and_raise(result, lifo=lifo, **context)
