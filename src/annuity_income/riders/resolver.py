"""
Rider parameter resolution.

Turns a catalog plus a (rider, income option) selection into the flat
ResolvedParameters the simulator consumes. Resolution is total: a missing
catalog gives the fallback parameters, an unknown rider or option gives
the first available one, and a missing rate table is filled from the
fallback MAWP table. The dashboard always has some parameter set to draw.
"""

import logging

from annuity_income.config.settings import SETTINGS, ExtractionConfig
from annuity_income.data.schemas import (
    OptionTables,
    RateBand,
    ResolvedParameters,
    RiderCatalog,
    RiderDefinition,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Fallback Parameters
# =============================================================================

#: Polaris Income Max MAWP schedule
FALLBACK_MAWP_TABLE: tuple[RateBand, ...] = (
    RateBand(min_age=45, max_age=59, single=0.0505, joint=0.0505),
    RateBand(min_age=60, max_age=64, single=0.0610, joint=0.0610),
    RateBand(min_age=65, max_age=69, single=0.0900, joint=0.0900),
    RateBand(min_age=70, max_age=74, single=0.0925, joint=0.0925),
    RateBand(min_age=75, max_age=99, single=0.0935, joint=0.0935),
)

#: Polaris Income Max protected income payment schedule
FALLBACK_PIP_TABLE: tuple[RateBand, ...] = (
    RateBand(min_age=45, max_age=64, single=0.0325, joint=0.0325),
    RateBand(min_age=65, max_age=99, single=0.0350, joint=0.0350),
)

FALLBACK_PARAMETERS = ResolvedParameters(
    product_name="Polaris Platinum III",
    rider_name="Polaris Income Max",
    credit_rate=0.07,
    fee_rate=0.0145,
    max_credit_years=12,
    step_up_guarantee=2.0,
    mawp_table=FALLBACK_MAWP_TABLE,
    pip_table=FALLBACK_PIP_TABLE,
    selected_option=None,
    from_api=False,
)


# =============================================================================
# Resolution
# =============================================================================

def _find_rider(catalog: RiderCatalog, rider_name: str | None) -> RiderDefinition:
    for rider in catalog.riders:
        if rider.name == rider_name:
            return rider
    if rider_name is not None:
        logger.info(f"Rider '{rider_name}' not in catalog, using '{catalog.riders[0].name}'")
    return catalog.riders[0]


def resolve_parameters(
    catalog: RiderCatalog | None,
    rider_name: str | None = None,
    option_name: str | None = None,
) -> ResolvedParameters:
    """
    Resolve simulator parameters for a rider/option selection.

    Parameters
    ----------
    catalog : RiderCatalog or None
        Extracted catalog; None selects the fallback parameters
    rider_name : str, optional
        Rider to use (first rider if not found)
    option_name : str, optional
        Income option to use (rider's first option if not found)

    Returns
    -------
    ResolvedParameters
        Flat parameter record; ``from_api`` is False only for the fallback

    Examples
    --------
    >>> resolve_parameters(None, "anything", "anything") == FALLBACK_PARAMETERS
    True
    """
    if catalog is None or not catalog.riders:
        return FALLBACK_PARAMETERS

    rider = _find_rider(catalog, rider_name)
    options = tuple(rider.income_options or ())

    if option_name in options:
        option = option_name
    else:
        option = options[0] if options else None
        if option_name is not None:
            logger.info(f"Option '{option_name}' not offered by '{rider.name}', using '{option}'")

    tables = (rider.option_tables or {}).get(option) if option is not None else None
    if tables is None:
        tables = OptionTables(mawp_table=FALLBACK_MAWP_TABLE, pip_table=None)

    return ResolvedParameters(
        product_name=catalog.product_name,
        rider_name=rider.name,
        credit_rate=rider.credit_rate,
        fee_rate=rider.fee_rate,
        max_credit_years=rider.max_credit_years,
        step_up_guarantee=rider.step_up_guarantee,
        mawp_table=tables.mawp_table,
        pip_table=tables.pip_table,
        selected_option=option,
        from_api=True,
    )


def default_selection(
    catalog: RiderCatalog | None,
    config: ExtractionConfig = SETTINGS.extraction,
) -> tuple[str, str | None] | None:
    """
    Rider and option selected when the user has not chosen one.

    Prefers the first rider whose name contains ``config.preferred_rider``
    (case-insensitive), else the first rider, with that rider's first option.

    Returns
    -------
    tuple[str, str or None] or None
        (rider_name, option_name), None for an empty or missing catalog
    """
    if catalog is None or not catalog.riders:
        return None

    preferred = config.preferred_rider.lower()
    rider = next(
        (r for r in catalog.riders if preferred in r.name.lower()),
        catalog.riders[0],
    )
    option = rider.income_options[0] if rider.income_options else None
    return rider.name, option
