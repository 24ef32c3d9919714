"""Year-by-year drawdown engine."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Mapping

from .money import add_rate, clamp_non_neg, format_gbp, mul_rate
from .schema import TaxParameters
from .strategies import Strategy, policy_for
from .tax import state_pension_for_age
from .withdrawals import AccountState

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class YearSnapshot:
    age: int
    pension_start: int
    pension_end: int
    other_start: int
    other_end: int
    isa_start: int
    isa_end: int
    tax_paid: int
    extra_this_year: int
    growth: int = 0
    state_pension: int = 0
    shortfall: int = 0
    pension_gross: int = 0
    lump_sum: int = 0
    contribution: int = 0
    banked_surplus: int = 0

    @property
    def savings_start(self) -> int:
        return self.other_start + self.isa_start

    @property
    def savings_end(self) -> int:
        return self.other_end + self.isa_end

    def total_end(self) -> int:
        return self.pension_end + self.savings_end


def run_strategy(
    strategy: Strategy | str,
    *,
    pension: int,
    other_savings: int,
    isa_savings: int,
    required_net: int,
    adhoc: Mapping[int, int],
    params: TaxParameters,
) -> list[YearSnapshot]:
    """Simulate ``strategy`` from ``params.start_age`` to ``params.end_age`` inclusive.

    Returns one snapshot per age. Balances are in pence; each call works on
    its own copy of the starting balances.
    """
    policy = policy_for(strategy)
    state = AccountState(
        pension=clamp_non_neg(pension),
        other_savings=clamp_non_neg(other_savings),
        isa_savings=clamp_non_neg(isa_savings),
    )
    growth_factor = add_rate(params.pension_growth_rate)
    timeline: list[YearSnapshot] = []

    for age in range(params.start_age, params.end_age + 1):
        pension_start = state.pension
        other_start = state.other_savings
        isa_start = state.isa_savings

        # Step 1: Net need after state pension.
        extra = clamp_non_neg(adhoc.get(age, 0))
        state_pension = state_pension_for_age(age, params)
        need = clamp_non_neg(required_net + extra - state_pension)

        # Step 2: Strategy withdrawals.
        outcome = policy.apply(state, need, age, params)

        # Step 3: Pension growth; savings earn nothing.
        pension_before_growth = state.pension
        state.pension = clamp_non_neg(mul_rate(state.pension, growth_factor))

        timeline.append(
            YearSnapshot(
                age=age,
                pension_start=pension_start,
                pension_end=state.pension,
                other_start=other_start,
                other_end=state.other_savings,
                isa_start=isa_start,
                isa_end=state.isa_savings,
                tax_paid=clamp_non_neg(outcome.tax_paid),
                extra_this_year=extra,
                growth=state.pension - pension_before_growth,
                state_pension=state_pension,
                shortfall=outcome.shortfall,
                pension_gross=outcome.pension_gross,
                lump_sum=outcome.lump_sum,
                contribution=outcome.contribution,
                banked_surplus=outcome.banked_surplus,
            )
        )

    if timeline:
        last = timeline[-1]
        logger.debug(
            f"[{policy.strategy.label}] spend {format_gbp(required_net)}: "
            f"ages {params.start_age}-{params.end_age}, ending wealth {format_gbp(last.total_end())}"
        )
    return timeline


def snapshot_for_age(timeline: list[YearSnapshot], age: int) -> YearSnapshot:
    """Snapshot for ``age``, clamped to the first or last simulated year."""
    if not timeline:
        raise ValueError("timeline is empty")
    idx = max(0, min(len(timeline) - 1, age - timeline[0].age))
    return timeline[idx]
