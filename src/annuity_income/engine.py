"""
Income model pipeline.

One call turns a Beacon payload plus user assumptions into everything the
benefits dashboard shows:

    payload -> catalog -> (rider, option) -> parameters -> projection
            -> selected scenario -> income schedule, breakdown, LIFO tax,
               taxable-account comparison -> validation report

Every call recomputes from its inputs; nothing is cached between calls.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from annuity_income.data.loader import PayloadParseError, parse_payload
from annuity_income.data.schemas import (
    Assumptions,
    PolicyFacts,
    ResolvedParameters,
    RiderCatalog,
)
from annuity_income.glwb.income import (
    BreakdownRow,
    IncomeRow,
    build_income_schedule,
    build_yearly_breakdown,
)
from annuity_income.glwb.optimizer import select_scenario, waiting_advantage
from annuity_income.glwb.scenarios import ProjectionResult, Scenario, run_projection
from annuity_income.riders.extractor import extract_catalog
from annuity_income.riders.resolver import default_selection, resolve_parameters
from annuity_income.tax.comparison import ComparisonRow, compare_with_taxable_account
from annuity_income.tax.lifo import LIFOTaxResult, allocate_lifo_tax
from annuity_income.validation.gates import ValidationReport, validate_projection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomeModel:
    """
    Complete income model for one policy and selection.

    Attributes
    ----------
    catalog : RiderCatalog or None
        Riders read from the payload (None in fallback mode)
    parameters : ResolvedParameters
        Parameters the projection ran with
    projection : ProjectionResult
        Scenarios for every candidate activation age
    selected_scenario : Scenario or None
        User-chosen activation age if projected, else the optimum
    income_schedule : tuple[IncomeRow, ...]
        Post-activation AV path for the selected scenario
    breakdown : tuple[BreakdownRow, ...]
        Whole-dollar yearly table through life expectancy
    lifo : LIFOTaxResult
        LIFO tax allocation of the selected scenario
    comparison : tuple[ComparisonRow, ...]
        Annuity vs. taxable account after-tax income
    validation : ValidationReport
        Gate results for the projection and LIFO allocation
    """

    catalog: RiderCatalog | None
    parameters: ResolvedParameters
    projection: ProjectionResult
    selected_scenario: Scenario | None
    income_schedule: tuple[IncomeRow, ...]
    breakdown: tuple[BreakdownRow, ...]
    lifo: LIFOTaxResult
    comparison: tuple[ComparisonRow, ...]
    validation: ValidationReport

    @property
    def from_api(self) -> bool:
        return self.parameters.from_api

    @property
    def waiting_advantage(self) -> float:
        """Extra lifetime income from activating at the optimal age instead of now."""
        return waiting_advantage(self.projection)


def _coerce_payload(payload: str | bytes | Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    if payload is None or isinstance(payload, Mapping):
        return payload
    try:
        return parse_payload(payload)
    except PayloadParseError as e:
        logger.warning(f"Unparseable payload, using fallback parameters: {e}")
        return None


def build_income_model(
    payload: str | bytes | Mapping[str, Any] | None = None,
    rider_name: str | None = None,
    option_name: str | None = None,
    assumptions: Assumptions | None = None,
    facts: PolicyFacts | None = None,
    activation_age: int | None = None,
    catalog: RiderCatalog | None = None,
) -> IncomeModel:
    """
    Build the income model for a payload and user selection.

    Parameters
    ----------
    payload : str, bytes, Mapping or None
        Raw Beacon payload (JSON text or parsed). Missing or unparseable
        payloads run on fallback parameters.
    rider_name : str, optional
        Rider to model (default: preferred rider of the catalog)
    option_name : str, optional
        Income option (default: the rider's first option)
    assumptions : Assumptions, optional
        Growth, life expectancy, tax rate (default: Assumptions())
    facts : PolicyFacts, optional
        Contract facts (default: PolicyFacts())
    activation_age : int, optional
        Override of the optimal activation age
    catalog : RiderCatalog, optional
        Pre-extracted catalog; skips payload extraction

    Returns
    -------
    IncomeModel
        Projection, selected scenario and derived views

    Examples
    --------
    >>> model = build_income_model()
    >>> model.from_api
    False
    >>> model.selected_scenario.activate_at_age > 63
    True
    """
    assumptions = assumptions if assumptions is not None else Assumptions()
    facts = facts if facts is not None else PolicyFacts()

    if catalog is None:
        catalog = extract_catalog(_coerce_payload(payload))

    if rider_name is None and option_name is None:
        selection = default_selection(catalog)
        if selection is not None:
            rider_name, option_name = selection

    parameters = resolve_parameters(catalog, rider_name, option_name)
    logger.debug(
        f"Projecting {parameters.rider_name} ({parameters.selected_option}), "
        f"from_api={parameters.from_api}"
    )

    projection = run_projection(parameters, assumptions, facts)
    scenario = select_scenario(projection, activation_age)

    income_schedule = build_income_schedule(scenario, assumptions, parameters.fee_rate)
    breakdown = build_yearly_breakdown(projection, scenario, assumptions, parameters.fee_rate)
    lifo = allocate_lifo_tax(
        scenario,
        cost_basis=facts.cost_basis,
        tax_rate=assumptions.tax_rate,
        growth_rate=assumptions.growth_rate,
        fee_rate=parameters.fee_rate,
        life_expectancy=assumptions.life_expectancy,
    )

    deferral_years = 0
    if scenario is not None:
        deferral_years = scenario.activate_at_age - facts.current_age + facts.contract_year
    comparison = compare_with_taxable_account(
        scenario,
        lifo,
        cost_basis=facts.cost_basis,
        growth_rate=assumptions.growth_rate,
        tax_rate=assumptions.tax_rate,
        deferral_years=deferral_years,
    )

    validation = validate_projection(projection, lifo=lifo)

    return IncomeModel(
        catalog=catalog,
        parameters=parameters,
        projection=projection,
        selected_scenario=scenario,
        income_schedule=income_schedule,
        breakdown=breakdown,
        lifo=lifo,
        comparison=comparison,
        validation=validation,
    )
