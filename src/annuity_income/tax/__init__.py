"""
Tax treatment of guaranteed income.

- LIFO allocation of income between gain and cost basis
- Comparison against a taxable brokerage account
"""

from .comparison import (
    ComparisonRow,
    compare_with_taxable_account,
    comparison_frame,
)
from .lifo import (
    LIFOPhase,
    LIFOTaxResult,
    TaxLotState,
    TaxRow,
    allocate_lifo_tax,
)

__all__ = [
    # LIFO
    "LIFOPhase",
    "TaxLotState",
    "TaxRow",
    "LIFOTaxResult",
    "allocate_lifo_tax",
    # Comparison
    "ComparisonRow",
    "compare_with_taxable_account",
    "comparison_frame",
]
