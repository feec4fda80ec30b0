"""
annuity-income: Guaranteed lifetime income projection for variable annuities.

Reads rider schedules out of Beacon payloads, projects benefit base and
account value, finds the activation age that maximizes lifetime income and
allocates that income between taxable gain and tax-free basis.

Quick Start
-----------
>>> from annuity_income import build_income_model, Assumptions
>>> model = build_income_model(payload, assumptions=Assumptions(growth_rate=0.05))
>>> model.selected_scenario.activate_at_age

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Pipeline - Primary API
# =============================================================================
from annuity_income.engine import IncomeModel, build_income_model

# =============================================================================
# Inputs
# =============================================================================
from annuity_income.data.schemas import (
    Assumptions,
    PolicyFacts,
    RateBand,
    ResolvedParameters,
    RiderCatalog,
    RiderDefinition,
)
from annuity_income.data.loader import PayloadLoadError, PayloadParseError, load_payload
from annuity_income.data.policy import policy_facts_from_record

# =============================================================================
# Riders
# =============================================================================
from annuity_income.riders import (
    FALLBACK_PARAMETERS,
    extract_catalog,
    lookup_rate,
    resolve_parameters,
)

# =============================================================================
# Projection
# =============================================================================
from annuity_income.glwb import (
    ProjectionResult,
    Scenario,
    compute_scenario,
    find_optimal_age,
    run_projection,
)

# =============================================================================
# Tax
# =============================================================================
from annuity_income.tax import LIFOTaxResult, allocate_lifo_tax, compare_with_taxable_account

# =============================================================================
# Validation
# =============================================================================
from annuity_income.validation import ValidationEngine, validate_projection

__all__ = [
    "__version__",
    # Pipeline
    "build_income_model",
    "IncomeModel",
    # Inputs
    "Assumptions",
    "PolicyFacts",
    "RateBand",
    "ResolvedParameters",
    "RiderCatalog",
    "RiderDefinition",
    "PayloadLoadError",
    "PayloadParseError",
    "load_payload",
    "policy_facts_from_record",
    # Riders
    "FALLBACK_PARAMETERS",
    "extract_catalog",
    "lookup_rate",
    "resolve_parameters",
    # Projection
    "ProjectionResult",
    "Scenario",
    "compute_scenario",
    "find_optimal_age",
    "run_projection",
    # Tax
    "LIFOTaxResult",
    "allocate_lifo_tax",
    "compare_with_taxable_account",
    # Validation
    "ValidationEngine",
    "validate_projection",
]
