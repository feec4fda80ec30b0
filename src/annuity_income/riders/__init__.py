"""
Rider catalog: payload extraction, case classification, rate tables and
parameter resolution.

Flow: raw payload -> extract_catalog -> resolve_parameters -> simulator.
"""

from .classifier import (
    CaseClassification,
    NoteKeywordClassifier,
    WithdrawalCaseClassifier,
    WithdrawalKind,
)
from .extractor import annual_fee_rate, extract_catalog
from .rate_table import band_label, build_rate_table, lookup_band, lookup_rate
from .resolver import (
    FALLBACK_MAWP_TABLE,
    FALLBACK_PARAMETERS,
    FALLBACK_PIP_TABLE,
    default_selection,
    resolve_parameters,
)

__all__ = [
    # Rate tables
    "build_rate_table",
    "lookup_band",
    "lookup_rate",
    "band_label",
    # Classification
    "WithdrawalKind",
    "CaseClassification",
    "WithdrawalCaseClassifier",
    "NoteKeywordClassifier",
    # Extraction
    "annual_fee_rate",
    "extract_catalog",
    # Resolution
    "FALLBACK_MAWP_TABLE",
    "FALLBACK_PIP_TABLE",
    "FALLBACK_PARAMETERS",
    "resolve_parameters",
    "default_selection",
]
