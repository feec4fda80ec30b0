"""
Centralized pytest fixtures for annuity-income test suite.

Fixture Categories:
1. Payloads - Beacon payload fixture file and hand-built rider payloads
2. Catalog and Parameters - Extracted catalog, fallback parameters
3. Projection Inputs - Default assumptions and policy facts
4. Projections - Fallback projection used across test categories
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest

from annuity_income.data.loader import load_payload
from annuity_income.data.schemas import Assumptions, PolicyFacts, ResolvedParameters, RiderCatalog
from annuity_income.glwb.scenarios import ProjectionResult, run_projection
from annuity_income.riders.extractor import extract_catalog
from annuity_income.riders.resolver import FALLBACK_PARAMETERS

# =============================================================================
# FIXTURE PATHS
# =============================================================================

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_CUSIP = "001399864"
SAMPLE_POLICY_DATE = "11/01/2022"
SAMPLE_PAYLOAD_PATH = FIXTURES_DIR / "beacon-001399864-2022-11-01.json"


# =============================================================================
# TOLERANCE TIERS
# =============================================================================

@dataclass(frozen=True)
class ToleranceTiers:
    """Tolerances for test comparisons."""

    # Exact identities computed from the same floats
    identity: float = 1e-9

    # Dollar totals over a few dozen years
    money: float = 1e-6


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# PAYLOADS
# =============================================================================

def _make_rider(
    name: str = "Test Income Rider",
    cases: list[dict[str, Any]] | None = None,
    terminated: bool = False,
    **fields: Any,
) -> dict[str, Any]:
    """Build one raw rider entry."""
    rider = {"name": name, "isTerminated": terminated, "newVaGmwbCases": cases or []}
    rider.update(fields)
    return rider


def _make_payload(*riders: dict[str, Any], product_name: str = "Test Annuity") -> dict[str, Any]:
    """Build a raw payload from rider entries."""
    return {
        "basicInfo": {"vaProduct": {"productName": product_name}},
        "tabs": {"gmwb": {"data": list(riders)}},
    }


def _withdrawal_case(
    min_age: int,
    max_age: int,
    single: float,
    notes: str | None = None,
    joint: float | None = None,
) -> dict[str, Any]:
    """Build an "A" case; rates in whole percent."""
    case: dict[str, Any] = {
        "isCaseAOrC": "A",
        "num1": single,
        "ageBand1": min_age,
        "ageBand2": max_age,
    }
    if joint is not None:
        case["num2"] = joint
    if notes is not None:
        case["notes"] = notes
    return case


@pytest.fixture
def make_rider():
    """Factory for raw rider entries."""
    return _make_rider


@pytest.fixture
def make_payload():
    """Factory for raw payloads built from rider entries."""
    return _make_payload


@pytest.fixture
def withdrawal_case():
    """Factory for withdrawal ("A") cases."""
    return _withdrawal_case


@pytest.fixture(scope="session")
def sample_payload_text() -> str:
    """Raw text of the cached sample payload (wrapped in beaconData)."""
    return SAMPLE_PAYLOAD_PATH.read_text(encoding="utf-8")


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """Sample payload with the beaconData wrapper removed."""
    return load_payload(SAMPLE_CUSIP, SAMPLE_POLICY_DATE, data_dir=FIXTURES_DIR)


@pytest.fixture
def sample_report_text(sample_payload_text: str) -> str:
    """Unwrapped sample payload as JSON text."""
    return json.dumps(json.loads(sample_payload_text)["beaconData"])


# =============================================================================
# CATALOG AND PARAMETERS
# =============================================================================

@pytest.fixture
def sample_catalog(sample_payload: dict[str, Any]) -> RiderCatalog:
    """Catalog extracted from the sample payload."""
    catalog = extract_catalog(sample_payload)
    assert catalog is not None
    return catalog


@pytest.fixture
def fallback_params() -> ResolvedParameters:
    """Fallback parameters (Polaris Income Max)."""
    return FALLBACK_PARAMETERS


# =============================================================================
# PROJECTION INPUTS
# =============================================================================

@pytest.fixture
def default_assumptions() -> Assumptions:
    """5.2% growth, life expectancy 85, 24% tax."""
    return Assumptions(growth_rate=0.052, life_expectancy=85, tax_rate=0.24)


@pytest.fixture
def default_facts() -> PolicyFacts:
    """$180k premium, $100k basis, contract year 3, age 63, no actual AV."""
    return PolicyFacts(
        initial_premium=180_000.0,
        cost_basis=100_000.0,
        contract_year=3,
        current_age=63,
    )


# =============================================================================
# PROJECTIONS
# =============================================================================

@pytest.fixture
def fallback_projection(
    fallback_params: ResolvedParameters,
    default_assumptions: Assumptions,
    default_facts: PolicyFacts,
) -> ProjectionResult:
    """Projection of the fallback rider for the default policy."""
    return run_projection(fallback_params, default_assumptions, default_facts)
