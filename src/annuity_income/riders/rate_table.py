"""
Age-banded withdrawal rate tables.

A rate table is a tuple of RateBand sorted by min_age. Lookup is total:
an age covered by a band gets that band's rate, any other age gets the
last band's rate. Ages past the oldest band are the common case, and the
last band is the oldest band.
"""

from collections.abc import Iterable

from annuity_income.data.schemas import RateBand, RateTable


def build_rate_table(bands: Iterable[RateBand]) -> RateTable:
    """Sort bands ascending by min_age."""
    return tuple(sorted(bands, key=lambda band: band.min_age))


def lookup_band(age: int, table: RateTable) -> RateBand | None:
    """
    Find the band containing an age.

    Parameters
    ----------
    age : int
        Owner age
    table : RateTable
        Bands sorted by min_age

    Returns
    -------
    RateBand or None
        First band with min_age <= age <= max_age
    """
    for band in table:
        if band.min_age <= age <= band.max_age:
            return band
    return None


def lookup_rate(
    age: int,
    table: RateTable,
    joint: bool = False,
    default: float | None = None,
) -> float:
    """
    Withdrawal rate for an age.

    Parameters
    ----------
    age : int
        Owner age
    table : RateTable
        Bands sorted by min_age
    joint : bool
        Use the joint-life rate instead of single-life
    default : float, optional
        Rate for an empty table (0.0 if not given)

    Returns
    -------
    float
        Matching band's rate, else the last band's rate

    Examples
    --------
    >>> table = (RateBand(60, 64, 0.061, 0.061), RateBand(65, 99, 0.09, 0.09))
    >>> lookup_rate(63, table)
    0.061
    >>> lookup_rate(101, table)
    0.09
    """
    band = lookup_band(age, table)
    if band is None:
        if not table:
            return 0.0 if default is None else default
        band = table[-1]
    return band.joint if joint else band.single


def band_label(age: int, table: RateTable, fallback: str = "75+") -> str:
    """Display label such as "60–64" for the band containing age."""
    band = lookup_band(age, table)
    if band is None:
        return fallback
    return f"{band.min_age}–{band.max_age}"
