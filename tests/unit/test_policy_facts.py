"""
Tests for policy record parsing and projection inputs - data/policy.py,
data/schemas.py.
"""

import pytest

from annuity_income.config.settings import SETTINGS, PolicyDefaults
from annuity_income.data.policy import (
    contract_year_between,
    parse_currency,
    policy_facts_from_record,
)
from annuity_income.data.schemas import Assumptions, PolicyFacts


@pytest.fixture
def sample_record() -> dict:
    """Policy record as shown on the dashboard."""
    return {
        "cusip": "001399864",
        "value": "$211,664",
        "totalPremium": "$180,000",
        "costBasis": "$100,000",
        "clientAge": 63,
        "issueEffective": "11/1/2019",
        "valuationDate": "11/1/2022",
    }


class TestParseCurrency:
    """Tests for parse_currency."""

    def test_dollars(self) -> None:
        assert parse_currency("$211,664") == 211_664.0

    def test_cents(self) -> None:
        assert parse_currency("$1,234.56") == pytest.approx(1234.56)

    @pytest.mark.parametrize("value", ["--", "", "n/a", None, 211_664, 1.5])
    def test_unparseable(self, value) -> None:
        assert parse_currency(value) is None


class TestContractYearBetween:
    """Tests for contract_year_between."""

    def test_us_dates(self) -> None:
        assert contract_year_between("11/1/2019", "11/1/2022") == 3

    def test_iso_dates(self) -> None:
        assert contract_year_between("2019-11-01", "2022-11-01") == 3

    def test_rounds_to_nearest_year(self) -> None:
        assert contract_year_between("01/01/2020", "08/01/2022") == 3
        assert contract_year_between("01/01/2020", "05/01/2022") == 2

    def test_valuation_before_issue_floored(self) -> None:
        assert contract_year_between("11/1/2022", "11/1/2019") == 0

    @pytest.mark.parametrize(
        "issue,valuation",
        [("--", "11/1/2022"), ("11/1/2019", "--"), (None, "11/1/2022"), ("", ""), ("garbage", "11/1/2022")],
    )
    def test_missing(self, issue, valuation) -> None:
        assert contract_year_between(issue, valuation) is None


class TestPolicyFactsFromRecord:
    """Tests for policy_facts_from_record."""

    def test_sample_record(self, sample_record) -> None:
        facts = policy_facts_from_record(sample_record)

        assert facts.initial_premium == 180_000.0
        assert facts.cost_basis == 100_000.0
        assert facts.contract_year == 3
        assert facts.current_age == 63
        assert facts.current_av == 211_664.0
        assert facts.has_actual_av

    def test_missing_record_uses_defaults(self) -> None:
        facts = policy_facts_from_record(None)

        assert facts.initial_premium == SETTINGS.policy.initial_premium
        assert facts.current_av is None
        assert not facts.has_actual_av

    def test_non_positive_values_use_defaults(self, sample_record) -> None:
        sample_record.update({"totalPremium": "$0", "costBasis": "--", "value": "$0"})
        facts = policy_facts_from_record(sample_record)

        assert facts.initial_premium == SETTINGS.policy.initial_premium
        assert facts.cost_basis == SETTINGS.policy.cost_basis
        assert facts.current_av is None

    def test_custom_defaults(self) -> None:
        defaults = PolicyDefaults(initial_premium=250_000, cost_basis=50_000, contract_year=1, current_age=55)
        facts = policy_facts_from_record({"clientAge": 60}, defaults=defaults)

        assert facts.initial_premium == 250_000
        assert facts.contract_year == 1
        assert facts.current_age == 60

    @pytest.mark.parametrize("age", ["--", "", "63 yrs", None, 0])
    def test_unusable_age_uses_default(self, sample_record, age) -> None:
        defaults = PolicyDefaults(current_age=55)
        sample_record["clientAge"] = age
        facts = policy_facts_from_record(sample_record, defaults=defaults)

        assert facts.current_age == 55
        assert facts.initial_premium == 180_000.0

    @pytest.mark.parametrize("age", ["70", "70.0", 70.0, 70])
    def test_numeric_age_text(self, age) -> None:
        assert policy_facts_from_record({"clientAge": age}).current_age == 70


class TestValidation:
    """Frozen input dataclasses reject impossible values."""

    def test_assumption_defaults(self) -> None:
        assumptions = Assumptions()

        assert assumptions.growth_rate == 0.052
        assert assumptions.life_expectancy == 85
        assert assumptions.tax_rate == 0.24

    @pytest.mark.parametrize(
        "kwargs",
        [{"growth_rate": -1.0}, {"tax_rate": 1.5}, {"tax_rate": -0.1}, {"life_expectancy": -1}],
    )
    def test_invalid_assumptions(self, kwargs) -> None:
        with pytest.raises(ValueError, match="CRITICAL"):
            Assumptions(**kwargs)

    @pytest.mark.parametrize(
        "kwargs",
        [{"initial_premium": 0}, {"cost_basis": -1}, {"contract_year": -1}],
    )
    def test_invalid_facts(self, kwargs) -> None:
        with pytest.raises(ValueError, match="CRITICAL"):
            PolicyFacts(**kwargs)

    def test_frozen(self) -> None:
        facts = PolicyFacts()
        with pytest.raises(AttributeError):
            facts.current_age = 70  # type: ignore[misc]
