"""
Centralized tolerances for income projection checks.

All money is plain float dollars, so equality checks on totals and pool
balances use these tolerances instead of exact comparison.

Tolerance Tiers:
    Tier 1 (Rates): Lookups return stored values; only representation error
    Tier 2 (Money): Sums of a few dozen yearly float amounts
    Tier 3 (Display): Whole-dollar rounding in tabular output
"""

from typing import Final

# =============================================================================
# Tier 1: Rate Tolerances
# =============================================================================

#: Rate lookups and unit conversions (e.g. 0.3375 x 4 / 100)
RATE_TOLERANCE: Final[float] = 1e-12


# =============================================================================
# Tier 2: Money Tolerances
# =============================================================================

#: Decomposition identities: grand = mawp + pip, taxable + tax-free = gross
MONEY_TOLERANCE: Final[float] = 1e-6

#: Pool balances may dip below zero by float residue only
POOL_FLOOR_TOLERANCE: Final[float] = 1e-9


# =============================================================================
# Tier 3: Display Tolerances
# =============================================================================

#: Breakdown rows are rounded to whole dollars
DISPLAY_TOLERANCE: Final[float] = 1.0


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    "rate": RATE_TOLERANCE,
    "money": MONEY_TOLERANCE,
    "pool_floor": POOL_FLOOR_TOLERANCE,
    "display": DISPLAY_TOLERANCE,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Parameters
    ----------
    name : str
        Tolerance name (see TOLERANCE_REGISTRY keys)

    Returns
    -------
    float
        Tolerance value

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
