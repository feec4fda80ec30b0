"""
Tests for age-banded rate tables - riders/rate_table.py.

Lookup is total: uncovered ages get the last band's rate, an empty
table gets 0.0 (or the supplied default).
"""

import pytest

from annuity_income.data.schemas import RateBand
from annuity_income.riders.rate_table import (
    band_label,
    build_rate_table,
    lookup_band,
    lookup_rate,
)


@pytest.fixture
def table() -> tuple[RateBand, ...]:
    return build_rate_table([
        RateBand(min_age=65, max_age=69, single=0.09, joint=0.085),
        RateBand(min_age=45, max_age=59, single=0.0505, joint=0.045),
        RateBand(min_age=60, max_age=64, single=0.061, joint=0.056),
        RateBand(min_age=70, max_age=99, single=0.0925, joint=0.0875),
    ])


class TestBuildRateTable:
    """Tests for build_rate_table."""

    def test_sorted_by_min_age(self, table) -> None:
        assert [band.min_age for band in table] == [45, 60, 65, 70]

    def test_empty(self) -> None:
        assert build_rate_table([]) == ()


class TestLookupRate:
    """Tests for lookup_rate."""

    def test_age_inside_band(self, table) -> None:
        assert lookup_rate(63, table) == 0.061

    @pytest.mark.parametrize("age,expected", [(60, 0.061), (64, 0.061), (65, 0.09), (69, 0.09)])
    def test_band_edges_inclusive(self, table, age: int, expected: float) -> None:
        assert lookup_rate(age, table) == expected

    def test_joint_rate(self, table) -> None:
        assert lookup_rate(63, table, joint=True) == 0.056

    def test_age_past_last_band_uses_last_band(self, table) -> None:
        assert lookup_rate(105, table) == 0.0925

    def test_age_below_first_band_uses_last_band(self, table) -> None:
        """Uncovered ages fall back to the last band, not the nearest."""
        assert lookup_rate(30, table) == 0.0925

    def test_empty_table_zero(self) -> None:
        assert lookup_rate(65, ()) == 0.0

    def test_empty_table_default(self) -> None:
        assert lookup_rate(65, (), default=0.05) == 0.05

    def test_gap_between_bands_uses_last_band(self) -> None:
        gapped = (
            RateBand(min_age=50, max_age=59, single=0.04, joint=0.04),
            RateBand(min_age=70, max_age=79, single=0.06, joint=0.06),
        )
        assert lookup_rate(65, gapped) == 0.06


class TestLookupBand:
    """Tests for lookup_band and band_label."""

    def test_band_found(self, table) -> None:
        band = lookup_band(66, table)
        assert band is not None
        assert (band.min_age, band.max_age) == (65, 69)

    def test_band_missing(self, table) -> None:
        assert lookup_band(30, table) is None

    def test_label(self, table) -> None:
        assert band_label(62, table) == "60–64"

    def test_label_fallback(self, table) -> None:
        assert band_label(30, table) == "75+"
        assert band_label(30, table, fallback="n/a") == "n/a"
