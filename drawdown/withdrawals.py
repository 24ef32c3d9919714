"""Account balances and savings draw-down helpers."""

from __future__ import annotations

from dataclasses import dataclass

from .money import clamp_non_neg


@dataclass(slots=True)
class AccountState:
    """Balances owned by one strategy run for one spend amount (pence)."""

    pension: int
    other_savings: int = 0
    isa_savings: int = 0
    lump_sum_taken: bool = False

    @property
    def savings(self) -> int:
        return self.other_savings + self.isa_savings

    def clamp(self) -> None:
        self.pension = clamp_non_neg(self.pension)
        self.other_savings = clamp_non_neg(self.other_savings)
        self.isa_savings = clamp_non_neg(self.isa_savings)


@dataclass(slots=True)
class SavingsDraw:
    spent: int
    other: int
    isa: int
    need: int


def spend_from_pool(need: int, balance: int) -> tuple[int, int]:
    """Spend up to ``need`` from one pool. Returns (new_balance, remaining_need)."""
    if need <= 0 or balance <= 0:
        return balance, clamp_non_neg(need)
    amount = min(need, balance)
    return balance - amount, need - amount


def spend_from_savings(need: int, other: int, isa: int) -> SavingsDraw:
    """Meet ``need`` from other savings first, then the ISA."""
    other_after, need_after_other = spend_from_pool(need, other)
    isa_after, remaining = spend_from_pool(need_after_other, isa)
    spent = (other - other_after) + (isa - isa_after)
    return SavingsDraw(spent=spent, other=other_after, isa=isa_after, need=remaining)


def draw_savings(state: AccountState, need: int) -> int:
    """Apply :func:`spend_from_savings` to ``state``. Returns remaining need."""
    if need <= 0 or state.savings <= 0:
        return clamp_non_neg(need)
    draw = spend_from_savings(need, state.other_savings, state.isa_savings)
    state.other_savings = draw.other
    state.isa_savings = draw.isa
    return draw.need
