"""
Policy record parsing.

Turns a display-oriented policy record (currency strings, MM/DD/YYYY dates)
into PolicyFacts. Only values that parse to something positive override the
defaults, so a partially filled record still yields a usable projection.
"""

import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from annuity_income.config.settings import SETTINGS, PolicyDefaults
from annuity_income.data.schemas import PolicyFacts

_DAYS_PER_YEAR = 365.25
_MISSING_VALUES = ("", "--")


def parse_currency(value: Any) -> float | None:
    """
    Parse a display currency string.

    Parameters
    ----------
    value : Any
        String such as "$211,664"

    Returns
    -------
    float or None
        Parsed dollars, or None for non-strings and unparseable text

    Examples
    --------
    >>> parse_currency("$211,664")
    211664.0
    >>> parse_currency("--") is None
    True
    """
    if not value or not isinstance(value, str):
        return None
    try:
        return float(re.sub(r"[$,]", "", value))
    except ValueError:
        return None


def _parse_date(value: str) -> date | None:
    parts = value.split("/")
    try:
        if len(parts) == 3:
            return date(int(parts[2]), int(parts[0]), int(parts[1]))
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def _parse_age(value: Any) -> int | None:
    """Whole years from a numeric or numeric-text age, None otherwise."""
    if value is None or value in _MISSING_VALUES:
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def contract_year_between(issue_effective: str | None, valuation_date: str | None) -> int | None:
    """
    Completed contract years between issue and valuation.

    Parameters
    ----------
    issue_effective : str
        Issue date, MM/DD/YYYY or ISO
    valuation_date : str
        Valuation date, MM/DD/YYYY or ISO

    Returns
    -------
    int or None
        Rounded years (never negative), None when either date is missing

    Examples
    --------
    >>> contract_year_between("11/1/2019", "11/1/2022")
    3
    """
    if not issue_effective or not valuation_date:
        return None
    if issue_effective in _MISSING_VALUES or valuation_date in _MISSING_VALUES:
        return None

    issue = _parse_date(issue_effective)
    valuation = _parse_date(valuation_date)
    if issue is None or valuation is None:
        return None

    years = (valuation - issue).days / _DAYS_PER_YEAR
    return max(0, round(years))


def policy_facts_from_record(
    record: Mapping[str, Any] | None,
    defaults: PolicyDefaults = SETTINGS.policy,
) -> PolicyFacts:
    """
    Build PolicyFacts from a policy record.

    Parameters
    ----------
    record : Mapping, optional
        Policy record with keys such as ``totalPremium``, ``costBasis``,
        ``value``, ``clientAge``, ``issueEffective`` and ``valuationDate``
    defaults : PolicyDefaults
        Values used for missing or non-positive fields

    Returns
    -------
    PolicyFacts
        Facts ready for projection
    """
    if not record:
        return PolicyFacts(
            initial_premium=defaults.initial_premium,
            cost_basis=defaults.cost_basis,
            contract_year=defaults.contract_year,
            current_age=defaults.current_age,
        )

    premium = parse_currency(record.get("totalPremium"))
    cost_basis = parse_currency(record.get("costBasis"))
    current_av = parse_currency(record.get("value"))
    contract_year = contract_year_between(
        record.get("issueEffective"), record.get("valuationDate")
    )
    age = _parse_age(record.get("clientAge"))

    return PolicyFacts(
        initial_premium=premium if premium is not None and premium > 0 else defaults.initial_premium,
        cost_basis=cost_basis if cost_basis is not None and cost_basis > 0 else defaults.cost_basis,
        contract_year=contract_year if contract_year is not None else defaults.contract_year,
        current_age=age if age is not None and age > 0 else defaults.current_age,
        current_av=current_av if current_av is not None and current_av > 0 else None,
    )
