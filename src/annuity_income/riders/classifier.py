"""
Withdrawal case classification.

Beacon payloads list withdrawal-rate cases without a structured income
option or table type; both live in free-text notes such as
"Income Option 2 - MAWP" or "Option 1 Insurer Pays". Classification sits
behind a small protocol so a source with structured fields can replace the
note heuristic without touching the extractor.

Kinds
-----
PRIMARY    MAWP/MAWA rates, paid while the account value is positive
SECONDARY  Insurer-continues-paying (PIP) rates, paid after depletion
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from annuity_income.config.settings import SETTINGS, ExtractionConfig


class WithdrawalKind(Enum):
    """Which rate table a withdrawal case belongs to."""
    PRIMARY = "mawp"
    SECONDARY = "pip"


@dataclass(frozen=True)
class CaseClassification:
    """
    Classification of one withdrawal case.

    Attributes
    ----------
    option : str or None
        Income option name ("Option 2"), None if the case names none
    kind : WithdrawalKind or None
        Table membership, None if the case is unmarked
    """

    option: str | None
    kind: WithdrawalKind | None


class WithdrawalCaseClassifier(Protocol):
    """Protocol for classifying rider cases."""

    def classify(self, case: Mapping[str, Any]) -> CaseClassification | None:
        """
        Classify a rider case.

        Parameters
        ----------
        case : Mapping
            One entry of a rider's case list

        Returns
        -------
        CaseClassification or None
            None when the case is not a withdrawal-rate case
        """
        ...


class NoteKeywordClassifier:
    """
    Classify withdrawal cases by keywords in their notes.

    A case is a withdrawal case when ``isCaseAOrC == "A"``. Secondary
    keywords are checked first because insurer-pays notes often also
    mention the MAWP they replace.

    Examples
    --------
    >>> classifier = NoteKeywordClassifier()
    >>> classifier.classify({"isCaseAOrC": "A", "notes": "Income Option 2 MAWP"})
    CaseClassification(option='Option 2', kind=<WithdrawalKind.PRIMARY: 'mawp'>)
    """

    def __init__(self, config: ExtractionConfig = SETTINGS.extraction):
        self.config = config
        self._option_re = re.compile(config.option_pattern, re.IGNORECASE)

    def classify(self, case: Mapping[str, Any]) -> CaseClassification | None:
        if case.get("isCaseAOrC") != "A":
            return None

        notes = case.get("notes")
        if not isinstance(notes, str) or not notes:
            return CaseClassification(option=None, kind=None)

        return CaseClassification(option=self.option_of(notes), kind=self.kind_of(notes))

    def option_of(self, notes: str) -> str | None:
        match = self._option_re.search(notes)
        if match is None:
            return None
        return f"Option {int(match.group(1))}"

    def kind_of(self, notes: str) -> WithdrawalKind | None:
        if any(keyword in notes for keyword in self.config.secondary_keywords):
            return WithdrawalKind.SECONDARY
        if any(keyword in notes for keyword in self.config.primary_keywords):
            return WithdrawalKind.PRIMARY
        return None
