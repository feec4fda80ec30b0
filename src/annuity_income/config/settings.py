"""
Frozen configuration settings for income projection.

All configuration is immutable (frozen dataclasses) so a projection is a pure
function of its inputs. Product facts about a specific contract do NOT live
here; they travel in PolicyFacts. PolicyDefaults only seeds a PolicyFacts
when a policy record is missing a field.
"""

import os
from dataclasses import dataclass
from pathlib import Path

# =============================================================================
# Data Configuration
# =============================================================================

def _resolve_payload_dir() -> Path:
    """
    Resolve the directory holding cached Beacon payload files.

    Priority:
    1. BEACON_DATA_DIR environment variable (if set)
    2. Default: data/ in project root

    Returns
    -------
    Path
        Resolved payload directory
    """
    env_path = os.environ.get("BEACON_DATA_DIR")
    if env_path:
        return Path(env_path)
    return Path(__file__).parent.parent.parent.parent / "data"


@dataclass(frozen=True)
class DataConfig:
    """
    Immutable data configuration.

    Attributes
    ----------
    payload_dir : Path
        Directory of ``beacon-{cusip}-{date}.json`` files.
        Override with BEACON_DATA_DIR environment variable.
    payload_prefix : str
        File name prefix for cached payloads
    """

    payload_dir: Path = None  # type: ignore[assignment]  # Set in __post_init__
    payload_prefix: str = "beacon"

    def __post_init__(self) -> None:
        """Initialize payload_dir using resolver function."""
        if self.payload_dir is None:
            object.__setattr__(self, "payload_dir", _resolve_payload_dir())


# =============================================================================
# Projection Configuration
# =============================================================================

@dataclass(frozen=True)
class ProjectionConfig:
    """
    Immutable projection configuration.

    Attributes
    ----------
    max_activation_age : int
        Inclusive upper bound of the activation-age search
    default_growth_rate : float
        Assumed annual account growth (decimal)
    default_life_expectancy : int
        Age at which income projections stop
    default_tax_rate : float
        Marginal ordinary income tax rate (decimal)
    """

    max_activation_age: int = 78
    default_growth_rate: float = 0.052
    default_life_expectancy: int = 85
    default_tax_rate: float = 0.24


# =============================================================================
# Extraction Configuration
# =============================================================================

@dataclass(frozen=True)
class ExtractionConfig:
    """
    Immutable configuration for reading rider schedules out of a payload.

    Attributes
    ----------
    terminated_flag : str
        Rider key marking a closed rider
    quarterly_fee_threshold : float
        Fee values (whole percent) below this are quarterly and get x4
    primary_keywords : tuple[str, ...]
        Note substrings marking MAWP/MAWA withdrawal cases
    secondary_keywords : tuple[str, ...]
        Note substrings marking insurer-continues-paying cases
    option_pattern : str
        Regex capturing the income option number from a note
    default_option : str
        Option name used when no case names an option
    preferred_rider : str
        Lowercase substring of the rider selected by default
    """

    terminated_flag: str = "isTerminated"
    quarterly_fee_threshold: float = 1.0
    primary_keywords: tuple[str, ...] = ("MAWA", "MAWP")
    secondary_keywords: tuple[str, ...] = ("PIP", "Insurer Pays")
    option_pattern: str = r"(?:Income\s+)?Option\s+(\d+)"
    default_option: str = "Default"
    preferred_rider: str = "income max"


# =============================================================================
# Policy Defaults
# =============================================================================

@dataclass(frozen=True)
class PolicyDefaults:
    """
    Values used when a policy record omits a fact.

    Attributes
    ----------
    initial_premium : float
        Premium paid at issue ($)
    cost_basis : float
        After-tax investment in the contract ($)
    contract_year : int
        Completed contract years at valuation
    current_age : int
        Owner age at valuation
    """

    initial_premium: float = 180_000.0
    cost_basis: float = 100_000.0
    contract_year: int = 3
    current_age: int = 63


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from annuity_income.config.settings import SETTINGS
    >>> SETTINGS.projection.max_activation_age
    78
    """

    data: DataConfig = DataConfig()
    projection: ProjectionConfig = ProjectionConfig()
    extraction: ExtractionConfig = ExtractionConfig()
    policy: PolicyDefaults = PolicyDefaults()


# Singleton instance - import this
SETTINGS = Settings()
