"""
Tests for Tolerance Framework and settings - config/tolerances.py,
config/settings.py.
"""

import pytest

from annuity_income.config.settings import (
    SETTINGS,
    ExtractionConfig,
    ProjectionConfig,
    Settings,
)
from annuity_income.config.tolerances import (
    DISPLAY_TOLERANCE,
    MONEY_TOLERANCE,
    POOL_FLOOR_TOLERANCE,
    RATE_TOLERANCE,
    TOLERANCE_REGISTRY,
    get_tolerance,
)


class TestTolerances:
    """Tests for tolerance values and ordering."""

    def test_all_positive(self) -> None:
        for name, value in TOLERANCE_REGISTRY.items():
            assert value > 0, f"{name} must be positive"

    def test_tier_ordering(self) -> None:
        """Rate checks are tightest, display rounding loosest."""
        assert RATE_TOLERANCE < MONEY_TOLERANCE < DISPLAY_TOLERANCE

    def test_pool_floor_tighter_than_money(self) -> None:
        assert POOL_FLOOR_TOLERANCE <= MONEY_TOLERANCE

    def test_display_is_one_dollar(self) -> None:
        assert DISPLAY_TOLERANCE == 1.0


class TestToleranceRegistry:
    """Tests for TOLERANCE_REGISTRY and get_tolerance."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("rate", RATE_TOLERANCE),
            ("money", MONEY_TOLERANCE),
            ("pool_floor", POOL_FLOOR_TOLERANCE),
            ("display", DISPLAY_TOLERANCE),
        ],
    )
    def test_lookup(self, name: str, expected: float) -> None:
        assert get_tolerance(name) == expected

    def test_unknown_name_lists_available(self) -> None:
        with pytest.raises(KeyError, match="Available: display, money, pool_floor, rate"):
            get_tolerance("greeks")


class TestSettings:
    """Tests for the SETTINGS singleton."""

    def test_projection_defaults(self) -> None:
        assert SETTINGS.projection.max_activation_age == 78
        assert SETTINGS.projection.default_growth_rate == 0.052
        assert SETTINGS.projection.default_life_expectancy == 85
        assert SETTINGS.projection.default_tax_rate == 0.24

    def test_extraction_defaults(self) -> None:
        extraction = SETTINGS.extraction

        assert extraction.terminated_flag == "isTerminated"
        assert extraction.quarterly_fee_threshold == 1.0
        assert "MAWP" in extraction.primary_keywords
        assert "Insurer Pays" in extraction.secondary_keywords

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            SETTINGS.projection.max_activation_age = 90  # type: ignore[misc]

    def test_override_by_construction(self) -> None:
        custom = Settings(projection=ProjectionConfig(max_activation_age=80))

        assert custom.projection.max_activation_age == 80
        assert custom.extraction == ExtractionConfig()

    def test_payload_dir_resolved(self) -> None:
        assert SETTINGS.data.payload_dir is not None
        assert SETTINGS.data.payload_prefix == "beacon"
