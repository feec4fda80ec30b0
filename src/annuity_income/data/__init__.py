"""
Data layer: schemas, policy record parsing and payload loading.
"""

from annuity_income.data.loader import (
    PayloadLoadError,
    PayloadParseError,
    load_payload,
    normalize_policy_date,
    parse_payload,
    payload_path,
)
from annuity_income.data.policy import (
    contract_year_between,
    parse_currency,
    policy_facts_from_record,
)
from annuity_income.data.schemas import (
    Assumptions,
    OptionTables,
    PolicyFacts,
    RateBand,
    RateTable,
    ResolvedParameters,
    RiderCatalog,
    RiderDefinition,
)

__all__ = [
    # Schemas
    "RateBand",
    "RateTable",
    "OptionTables",
    "RiderDefinition",
    "RiderCatalog",
    "ResolvedParameters",
    "Assumptions",
    "PolicyFacts",
    # Policy records
    "parse_currency",
    "contract_year_between",
    "policy_facts_from_record",
    # Payloads
    "PayloadLoadError",
    "PayloadParseError",
    "normalize_policy_date",
    "payload_path",
    "parse_payload",
    "load_payload",
]
