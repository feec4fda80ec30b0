"""Configuration: frozen settings and numeric tolerances."""

from annuity_income.config.settings import SETTINGS, Settings

__all__ = ["SETTINGS", "Settings"]
