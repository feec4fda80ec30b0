"""
Pre-activation accumulation of account value and benefit base.

Before income starts the account value (AV) earns the assumed growth and
pays the rider fee on the benefit base (BB). The benefit base is the
greater of:
- its previous value (ratchet: BB never decreases)
- the end-of-year account value
- the credited premium floor (see credits.credit_floor)

Theory
------
    AV(t+1) = max(0, AV(t) + AV(t)×g − BB(t)×fee)
    BB(t+1) = max(BB(t), AV(t+1), floor(t+1))

Past the table of credited years the same recurrence continues with
no floor term: BB only ratchets to AV.
"""

from dataclasses import dataclass

from annuity_income.data.schemas import Assumptions, PolicyFacts, ResolvedParameters

from .credits import RatchetMechanic, credit_floor


@dataclass(frozen=True)
class AccumulationState:
    """
    Contract state at the start of an owner age.

    Attributes
    ----------
    age : int
        Owner age
    contract_year : int
        Completed contract years
    av : float
        Account value
    bb : float
        Benefit base
    """

    age: int
    contract_year: int
    av: float
    bb: float


@dataclass(frozen=True)
class AccumulationRow:
    """
    One pre-activation year.

    Attributes
    ----------
    age : int
        Owner age during the year
    contract_year : int
        Completed contract years at the start of the year
    av_eoy : float
        Account value at end of year
    bb_eoy : float
        Benefit base at end of year
    """

    age: int
    contract_year: int
    av_eoy: float
    bb_eoy: float


class AccumulationProjector:
    """
    Projects AV and BB from issue through the credit window.

    Examples
    --------
    >>> projector = AccumulationProjector(FALLBACK_PARAMETERS, Assumptions(), PolicyFacts())
    >>> state = projector.current_state()
    >>> rows = projector.project()
    >>> projector.state_at_age(70, rows).bb
    """

    def __init__(
        self,
        params: ResolvedParameters,
        assumptions: Assumptions,
        facts: PolicyFacts,
    ):
        self.params = params
        self.assumptions = assumptions
        self.facts = facts
        self._ratchet = RatchetMechanic()

    def credit_floor(self, elapsed_years: int) -> float:
        """Credited BB floor after elapsed contract years."""
        return credit_floor(
            premium=self.facts.initial_premium,
            elapsed_years=elapsed_years,
            rate=self.params.credit_rate,
            max_credit_years=self.params.max_credit_years,
            step_up=self.params.step_up_guarantee,
            credit_type=self.params.credit_type,
        )

    def step(self, state: AccumulationState, credited: bool = True) -> AccumulationState:
        """
        Advance one contract year.

        Parameters
        ----------
        state : AccumulationState
            State at the start of the year
        credited : bool
            Apply the credited premium floor (False past the credit table)

        Returns
        -------
        AccumulationState
            State at the start of the next year
        """
        growth = self.assumptions.growth_rate
        av = max(0.0, state.av + state.av * growth - state.bb * self.params.fee_rate)
        bb = self._ratchet.apply_ratchet(state.bb, av)
        if credited:
            bb = max(bb, self.credit_floor(state.contract_year + 1))

        return AccumulationState(
            age=state.age + 1,
            contract_year=state.contract_year + 1,
            av=av,
            bb=bb,
        )

    def current_state(self) -> AccumulationState:
        """
        State at valuation.

        Simulates from the initial premium through the completed contract
        years. An actual account value, when positive, replaces the
        simulated one; the benefit base is then re-anchored to it.

        Returns
        -------
        AccumulationState
            State at the owner's current age
        """
        facts = self.facts
        state = AccumulationState(
            age=facts.current_age - facts.contract_year,
            contract_year=0,
            av=facts.initial_premium,
            bb=facts.initial_premium,
        )
        for _ in range(facts.contract_year):
            state = self.step(state)

        if facts.has_actual_av:
            actual = float(facts.current_av)  # type: ignore[arg-type]
            bb = max(actual, self.credit_floor(facts.contract_year))
            state = AccumulationState(
                age=state.age,
                contract_year=state.contract_year,
                av=actual,
                bb=bb,
            )
        return state

    def project(self, start: AccumulationState | None = None) -> tuple[AccumulationRow, ...]:
        """
        Year-by-year rows from valuation through the credit window.

        Rows cover contract years ``contract_year .. max_credit_years``;
        the table is empty once the window has passed.

        Parameters
        ----------
        start : AccumulationState, optional
            State at valuation (default: current_state())

        Returns
        -------
        tuple[AccumulationRow, ...]
            End-of-year AV and BB per year
        """
        state = start if start is not None else self.current_state()
        rows = []
        for _ in range(self.params.max_credit_years - self.facts.contract_year + 1):
            next_state = self.step(state)
            rows.append(
                AccumulationRow(
                    age=state.age,
                    contract_year=state.contract_year,
                    av_eoy=next_state.av,
                    bb_eoy=next_state.bb,
                )
            )
            state = next_state
        return tuple(rows)

    def state_at_age(
        self,
        age: int,
        rows: tuple[AccumulationRow, ...],
        start: AccumulationState | None = None,
    ) -> AccumulationState:
        """
        State at the start of an owner age.

        Ages inside the projected table read the previous row's end-of-year
        values. Later ages continue the recurrence without credits.

        Parameters
        ----------
        age : int
            Owner age (ages at or below valuation return the current state)
        rows : tuple[AccumulationRow, ...]
            Output of project()
        start : AccumulationState, optional
            State at valuation (default: current_state())

        Returns
        -------
        AccumulationState
            AV and BB at that age
        """
        current = start if start is not None else self.current_state()
        years = age - current.age
        if years <= 0:
            return current

        if years <= len(rows):
            row = rows[years - 1]
            return AccumulationState(
                age=age,
                contract_year=row.contract_year + 1,
                av=row.av_eoy,
                bb=row.bb_eoy,
            )

        if rows:
            last = rows[-1]
            state = AccumulationState(
                age=last.age + 1,
                contract_year=last.contract_year + 1,
                av=last.av_eoy,
                bb=last.bb_eoy,
            )
        else:
            state = current
        while state.age < age:
            state = self.step(state, credited=False)
        return state


def current_state(
    params: ResolvedParameters,
    assumptions: Assumptions,
    facts: PolicyFacts,
) -> AccumulationState:
    """State at valuation. See AccumulationProjector.current_state."""
    return AccumulationProjector(params, assumptions, facts).current_state()


def project_accumulation(
    params: ResolvedParameters,
    assumptions: Assumptions,
    facts: PolicyFacts,
) -> tuple[AccumulationRow, ...]:
    """Pre-activation rows from valuation through the credit window."""
    return AccumulationProjector(params, assumptions, facts).project()
