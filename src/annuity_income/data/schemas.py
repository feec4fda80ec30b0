"""
Dataclass schemas for riders, resolved parameters and projection inputs.

Immutable dataclasses shared by the extractor, resolver and simulator.
Every structure is rebuilt from current inputs; none is shared or mutated.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from annuity_income.config.settings import SETTINGS

# =============================================================================
# Rate Tables
# =============================================================================

@dataclass(frozen=True)
class RateBand:
    """
    One age band of a withdrawal-rate schedule.

    Attributes
    ----------
    min_age : int
        First age in the band (inclusive)
    max_age : int
        Last age in the band (inclusive)
    single : float
        Single-life rate (decimal, e.g., 0.061 = 6.10%)
    joint : float
        Joint-life rate (decimal)
    """

    min_age: int
    max_age: int
    single: float
    joint: float


RateTable = tuple[RateBand, ...]


@dataclass(frozen=True)
class OptionTables:
    """
    Rate tables for one income option of a rider.

    Attributes
    ----------
    mawp_table : RateTable
        Withdrawal rates while the account value is positive
    pip_table : RateTable or None
        Rates once the insurer continues paying after depletion.
        None means the rider keeps paying at the MAWP rate.
    """

    mawp_table: RateTable
    pip_table: RateTable | None = None


# =============================================================================
# Rider Catalog
# =============================================================================

@dataclass(frozen=True)
class RiderDefinition:
    """
    A guaranteed-income rider as read from a Beacon payload.

    Attributes
    ----------
    id : str
        Rider identifier (falls back to name)
    name : str
        Display name
    credit_rate : float
        Annual benefit-base credit (decimal)
    max_credit_years : int
        Contract years during which credits apply
    step_up_guarantee : float
        Benefit-base floor as a multiple of premium once credits end
    fee_rate : float
        Annual rider fee charged on the benefit base (decimal)
    income_options : tuple[str, ...]
        Option names in display order ("Option 1", ... or "Default")
    option_tables : Mapping[str, OptionTables]
        Rate tables keyed by option name
    """

    id: str
    name: str
    credit_rate: float
    max_credit_years: int
    step_up_guarantee: float
    fee_rate: float
    income_options: tuple[str, ...]
    option_tables: Mapping[str, OptionTables] = field(default_factory=dict)


@dataclass(frozen=True)
class RiderCatalog:
    """All usable riders from one payload."""

    product_name: str
    riders: tuple[RiderDefinition, ...]

    def rider_names(self) -> list[str]:
        return [rider.name for rider in self.riders]


# =============================================================================
# Resolved Parameters
# =============================================================================

@dataclass(frozen=True)
class ResolvedParameters:
    """
    Flat rider parameters consumed by the simulator.

    Attributes
    ----------
    product_name : str
        Annuity product name
    rider_name : str
        Selected rider
    credit_rate : float
        Annual benefit-base credit (decimal)
    fee_rate : float
        Annual rider fee on the benefit base (decimal)
    max_credit_years : int
        Credit window in contract years
    step_up_guarantee : float
        Benefit-base floor multiple applied after the credit window
    mawp_table : RateTable
        Primary withdrawal rate schedule
    pip_table : RateTable or None
        Post-depletion schedule, None to reuse the MAWP rate
    selected_option : str or None
        Income option the tables came from
    from_api : bool
        False when built from fallback values
    credit_type : str
        "simple" or "compound" benefit-base credits
    """

    product_name: str
    rider_name: str
    credit_rate: float
    fee_rate: float
    max_credit_years: int
    step_up_guarantee: float
    mawp_table: RateTable
    pip_table: RateTable | None
    selected_option: str | None = None
    from_api: bool = False
    credit_type: str = "simple"


# =============================================================================
# Projection Inputs
# =============================================================================

@dataclass(frozen=True)
class Assumptions:
    """
    User-controlled projection assumptions.

    Attributes
    ----------
    growth_rate : float
        Annual account growth (decimal)
    life_expectancy : int
        Age at which projected income stops
    tax_rate : float
        Marginal ordinary income tax rate (decimal)

    Examples
    --------
    >>> Assumptions(growth_rate=0.052, life_expectancy=85, tax_rate=0.24)
    """

    growth_rate: float = SETTINGS.projection.default_growth_rate
    life_expectancy: int = SETTINGS.projection.default_life_expectancy
    tax_rate: float = SETTINGS.projection.default_tax_rate

    def __post_init__(self) -> None:
        """Validate assumption ranges."""
        if self.growth_rate <= -1.0:
            raise ValueError(
                f"CRITICAL: growth_rate must be > -100%, got {self.growth_rate}"
            )
        if not 0.0 <= self.tax_rate <= 1.0:
            raise ValueError(
                f"CRITICAL: tax_rate must be in [0, 1], got {self.tax_rate}"
            )
        if self.life_expectancy < 0:
            raise ValueError(
                f"CRITICAL: life_expectancy must be >= 0, got {self.life_expectancy}"
            )


@dataclass(frozen=True)
class PolicyFacts:
    """
    Facts about one contract at valuation.

    Attributes
    ----------
    initial_premium : float
        Premium paid at issue; seeds the benefit base
    cost_basis : float
        After-tax investment in the contract
    contract_year : int
        Completed contract years at valuation
    current_age : int
        Owner age at valuation
    current_av : float, optional
        Actual account value. When positive it replaces the simulated value.
    """

    initial_premium: float = SETTINGS.policy.initial_premium
    cost_basis: float = SETTINGS.policy.cost_basis
    contract_year: int = SETTINGS.policy.contract_year
    current_age: int = SETTINGS.policy.current_age
    current_av: float | None = None

    def __post_init__(self) -> None:
        """Validate policy facts."""
        if self.initial_premium <= 0:
            raise ValueError(
                f"CRITICAL: initial_premium must be positive, got {self.initial_premium}"
            )
        if self.cost_basis < 0:
            raise ValueError(
                f"CRITICAL: cost_basis must be >= 0, got {self.cost_basis}"
            )
        if self.contract_year < 0:
            raise ValueError(
                f"CRITICAL: contract_year must be >= 0, got {self.contract_year}"
            )

    @property
    def has_actual_av(self) -> bool:
        return self.current_av is not None and self.current_av > 0
