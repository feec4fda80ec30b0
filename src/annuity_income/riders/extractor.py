"""
Rider catalog extraction from Beacon payloads.

The payload is third-party JSON with inconsistent shapes across carriers.
Relevant subset::

    {
      "basicInfo": {"vaProduct": {"productName": "..."}},
      "tabs": {"gmwb": {"data": [
        {
          "name": "...", "isTerminated": false,
          "rollupPercentage": 7, "maxRollupYears": 12, "stepUpPerct": 200,
          "newVaGmwbCases": [
            {"isCaseAOrC": "C", "num1": 0.3625, "singleJointChrgType": 1},
            {"isCaseAOrC": "R", "num1": 7, "maxRollupYears": 12},
            {"isCaseAOrC": "A", "num1": 6.1, "num2": 5.6,
             "ageBand1": 60, "ageBand2": 64, "notes": "Income Option 1 MAWP"}
          ]
        }
      ]}}
    }

Rates are whole percent. Fee cases ("C") store either an annual rate or a
quarterly one; anything below 1% is quarterly and is annualized x4.

A payload that cannot be read, or that has no open riders, yields None.
Callers treat None as "use fallback parameters", never as an error.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from annuity_income.config.settings import SETTINGS, ExtractionConfig
from annuity_income.data.schemas import (
    OptionTables,
    RateBand,
    RateTable,
    RiderCatalog,
    RiderDefinition,
)
from annuity_income.riders.classifier import (
    CaseClassification,
    NoteKeywordClassifier,
    WithdrawalCaseClassifier,
    WithdrawalKind,
)
from annuity_income.riders.rate_table import build_rate_table
from annuity_income.riders.resolver import FALLBACK_MAWP_TABLE, FALLBACK_PARAMETERS

logger = logging.getLogger(__name__)

_PARSE_ERRORS = (AttributeError, KeyError, TypeError, ValueError)
_BAND_FIELDS = ("num1", "ageBand1", "ageBand2")


# =============================================================================
# Unit Conversion
# =============================================================================

def annual_fee_rate(raw: float, config: ExtractionConfig = SETTINGS.extraction) -> float:
    """
    Convert a fee case value (whole percent) to an annual decimal rate.

    Examples
    --------
    >>> round(annual_fee_rate(0.3375), 6)  # quarterly
    0.0135
    >>> round(annual_fee_rate(1.35), 6)    # already annual
    0.0135
    """
    if raw < config.quarterly_fee_threshold:
        return raw * 4 / 100
    return raw / 100


def _band_from_case(case: Mapping[str, Any]) -> RateBand:
    single = float(case["num1"]) / 100
    joint = float(case.get("num2") or case["num1"]) / 100
    return RateBand(
        min_age=int(case["ageBand1"]),
        max_age=int(case["ageBand2"]),
        single=single,
        joint=joint,
    )


def _table_from_cases(cases: Sequence[Mapping[str, Any]]) -> RateTable:
    usable = [case for case in cases if all(case.get(k) is not None for k in _BAND_FIELDS)]
    if len(usable) < len(cases):
        logger.debug(f"Skipped {len(cases) - len(usable)} withdrawal cases without a rate or age band")
    return build_rate_table(_band_from_case(case) for case in usable)


# =============================================================================
# Rider Attributes
# =============================================================================

def _cases_of_type(cases: Sequence[Mapping[str, Any]], case_type: str) -> list[Mapping[str, Any]]:
    return [case for case in cases if case.get("isCaseAOrC") == case_type]


def _fee_rate(cases: Sequence[Mapping[str, Any]], config: ExtractionConfig) -> float:
    fee_cases = _cases_of_type(cases, "C")
    if not fee_cases:
        return FALLBACK_PARAMETERS.fee_rate
    single_fee = next((c for c in fee_cases if c.get("singleJointChrgType") == 1), fee_cases[0])
    return max(0.0, annual_fee_rate(float(single_fee.get("num1") or 0), config))


def _credit_terms(
    rider: Mapping[str, Any], cases: Sequence[Mapping[str, Any]]
) -> tuple[float, int]:
    rollup_cases = _cases_of_type(cases, "R")
    rollup_case = rollup_cases[0] if rollup_cases else None

    if rider.get("rollupPercentage") is not None:
        credit_rate = float(rider["rollupPercentage"]) / 100
    elif rollup_case is not None and rollup_case.get("num1") is not None:
        credit_rate = float(rollup_case["num1"]) / 100
    else:
        credit_rate = FALLBACK_PARAMETERS.credit_rate

    max_years = rider.get("maxRollupYears")
    if max_years is None and rollup_case is not None:
        max_years = rollup_case.get("maxRollupYears")
    if max_years is not None:
        max_credit_years = int(max_years)
    else:
        max_credit_years = FALLBACK_PARAMETERS.max_credit_years

    return max(0.0, credit_rate), max(0, max_credit_years)


def _step_up(rider: Mapping[str, Any]) -> float:
    if rider.get("stepUpPerct") is not None:
        return float(rider["stepUpPerct"]) / 100
    return FALLBACK_PARAMETERS.step_up_guarantee


# =============================================================================
# Option Tables
# =============================================================================

def _option_sort_key(option: str) -> tuple[int, str]:
    number = option.rsplit(" ", 1)[-1]
    return (int(number), option) if number.isdigit() else (0, option)


def _build_option_tables(
    cases: Sequence[Mapping[str, Any]],
    classifier: WithdrawalCaseClassifier,
    config: ExtractionConfig,
) -> tuple[tuple[str, ...], dict[str, OptionTables]]:
    classified: list[tuple[Mapping[str, Any], CaseClassification]] = []
    for case in cases:
        classification = classifier.classify(case)
        if classification is not None:
            classified.append((case, classification))

    named = sorted(
        {c.option for _, c in classified if c.option is not None},
        key=_option_sort_key,
    )

    if named:
        groups = {
            option: [(case, c) for case, c in classified if c.option == option]
            for option in named
        }
    else:
        # No option markers: pool every withdrawal case under one option
        groups = {config.default_option: classified}

    tables: dict[str, OptionTables] = {}
    for option, members in groups.items():
        primary = [case for case, c in members if c.kind is WithdrawalKind.PRIMARY]
        secondary = [case for case, c in members if c.kind is WithdrawalKind.SECONDARY]
        unmarked = [case for case, c in members if c.kind is None]

        mawp_table = _table_from_cases(primary) or _table_from_cases(unmarked) or FALLBACK_MAWP_TABLE
        pip_table = _table_from_cases(secondary) or None
        tables[option] = OptionTables(mawp_table=mawp_table, pip_table=pip_table)

    return tuple(groups), tables


# =============================================================================
# Catalog
# =============================================================================

def _build_rider(
    rider: Mapping[str, Any],
    classifier: WithdrawalCaseClassifier,
    config: ExtractionConfig,
) -> RiderDefinition:
    cases = rider.get("newVaGmwbCases") or []
    credit_rate, max_credit_years = _credit_terms(rider, cases)
    income_options, option_tables = _build_option_tables(cases, classifier, config)
    name = rider.get("name") or "Unknown Rider"

    return RiderDefinition(
        id=str(rider.get("id") or name),
        name=name,
        credit_rate=credit_rate,
        max_credit_years=max_credit_years,
        step_up_guarantee=_step_up(rider),
        fee_rate=_fee_rate(cases, config),
        income_options=income_options,
        option_tables=option_tables,
    )


def extract_catalog(
    raw: Mapping[str, Any] | None,
    classifier: WithdrawalCaseClassifier | None = None,
    config: ExtractionConfig = SETTINGS.extraction,
) -> RiderCatalog | None:
    """
    Extract the rider catalog from a raw Beacon payload.

    Parameters
    ----------
    raw : Mapping or None
        Parsed payload
    classifier : WithdrawalCaseClassifier, optional
        Strategy assigning withdrawal cases to options and tables
        (default: NoteKeywordClassifier)
    config : ExtractionConfig
        Extraction settings

    Returns
    -------
    RiderCatalog or None
        None when the payload is unusable or every rider is terminated

    Examples
    --------
    >>> catalog = extract_catalog(payload)
    >>> catalog.riders[0].fee_rate
    0.0145
    """
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        logger.warning(f"Payload is {type(raw).__name__}, not a mapping; using fallback parameters")
        return None

    if classifier is None:
        classifier = NoteKeywordClassifier(config)

    try:
        all_riders = ((raw.get("tabs") or {}).get("gmwb") or {}).get("data") or []
        product_name = (
            ((raw.get("basicInfo") or {}).get("vaProduct") or {}).get("productName")
            or FALLBACK_PARAMETERS.product_name
        )
        open_riders = [r for r in all_riders if not r.get(config.terminated_flag)]
        if not open_riders:
            logger.info("Payload has no open riders; using fallback parameters")
            return None

        riders = tuple(_build_rider(r, classifier, config) for r in open_riders)
    except _PARSE_ERRORS as e:
        logger.warning(f"Rider extraction failed, using fallback parameters: {e!r}")
        return None

    return RiderCatalog(product_name=product_name, riders=riders)
