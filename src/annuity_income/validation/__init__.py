"""
Validation framework for income projections.

Provides HALT/WARN/PASS gates:
- ScenarioTotalsGate: grand total = MAWP + PIP
- BenefitBaseMonotonicityGate: BB never decreases
- LIFOConservationGate: taxable + tax-free = gross, pools only shrink
- OptimalSelectionGate: optimal age is the arg-max
"""

from annuity_income.validation.gates import (
    BenefitBaseMonotonicityGate,
    GateResult,
    # Enums and Results
    GateStatus,
    LIFOConservationGate,
    OptimalSelectionGate,
    # Specific Gates
    ScenarioTotalsGate,
    # Engine
    ValidationEngine,
    # Base Gate
    ValidationGate,
    ValidationReport,
    ensure_valid,
    # Convenience Functions
    validate_projection,
)

__all__ = [
    # Enums and Results
    "GateStatus",
    "GateResult",
    "ValidationReport",
    # Base Gate
    "ValidationGate",
    # Specific Gates
    "ScenarioTotalsGate",
    "BenefitBaseMonotonicityGate",
    "LIFOConservationGate",
    "OptimalSelectionGate",
    # Engine
    "ValidationEngine",
    # Convenience Functions
    "validate_projection",
    "ensure_valid",
]
