"""
Benefit-base credit and ratchet mechanics.

Implements the ways a benefit base (BB) grows before income starts:
- Simple credit: BB floor = premium × (1 + r×n)
- Compound credit: BB floor = premium × (1 + r)^n
- Step-up floor: once the credit window closes, BB >= premium × step_up
- Ratchet: BB(t) = max(BB(t-1), AV(t))

Credits are measured from the initial premium, not from the prior benefit
base, so a market step-up does not compound future credits.
"""

from typing import Protocol


class CreditMechanic(Protocol):
    """Protocol for benefit-base credit calculation."""

    def calculate(self, premium: float, years: float, rate: float) -> float:
        """
        Calculate credited value.

        Parameters
        ----------
        premium : float
            Initial premium the credits are measured from
        years : float
            Contract years of credits applied
        rate : float
            Annual credit rate (e.g., 0.07 for 7%)

        Returns
        -------
        float
            Credited benefit-base floor
        """
        ...


def _check_credit_inputs(premium: float, years: float, rate: float) -> None:
    if min(premium, years, rate) < 0:
        raise ValueError(
            f"CRITICAL: credit inputs must be non-negative "
            f"(premium={premium}, years={years}, rate={rate})"
        )


class SimpleCredit:
    """
    Flat credit of ``rate`` x premium for every credited year.

    >>> SimpleCredit().calculate(180_000, 3, 0.07)
    217800.0
    """

    def calculate(self, premium: float, years: float, rate: float) -> float:
        _check_credit_inputs(premium, years, rate)
        return premium * (1 + rate * years)


class CompoundCredit:
    """Credits that earn credits: premium grows by (1 + rate) each year."""

    def calculate(self, premium: float, years: float, rate: float) -> float:
        _check_credit_inputs(premium, years, rate)
        return premium * (1 + rate) ** years


class RatchetMechanic:
    """
    Anniversary step-up: the benefit base locks in a higher account value.

    The benefit base only moves up; a market loss leaves it unchanged.
    """

    def apply_ratchet(self, benefit_base: float, account_value: float) -> float:
        return max(benefit_base, account_value)


def credit_mechanic(credit_type: str) -> CreditMechanic:
    """Credit mechanic for "simple" or "compound"."""
    if credit_type == "simple":
        return SimpleCredit()
    if credit_type == "compound":
        return CompoundCredit()
    raise ValueError(f"Unknown credit type: {credit_type}")


def credit_floor(
    premium: float,
    elapsed_years: int,
    rate: float,
    max_credit_years: int,
    step_up: float,
    credit_type: str = "simple",
) -> float:
    """
    Guaranteed benefit-base floor after a number of contract years.

    Inside the credit window the floor is the credited premium. Past the
    window (elapsed > max_credit_years) credits stop at the window's value
    and the step-up guarantee also applies.

    Parameters
    ----------
    premium : float
        Initial premium
    elapsed_years : int
        Completed contract years
    rate : float
        Annual credit rate
    max_credit_years : int
        Last contract year that earns a credit
    step_up : float
        Floor multiple of premium once the window has closed (e.g., 2.0)
    credit_type : str
        "simple" or "compound"

    Returns
    -------
    float
        Benefit-base floor

    Examples
    --------
    >>> credit_floor(180_000, 13, 0.07, 12, 2.0)  # past window: 200% floor
    360000.0
    """
    mechanic = credit_mechanic(credit_type)
    credited = mechanic.calculate(premium, min(elapsed_years, max_credit_years), rate)
    if elapsed_years > max_credit_years:
        return max(credited, premium * step_up)
    return credited
