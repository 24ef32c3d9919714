"""Drawdown policies: the order pension and savings are drained each year."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging

from .money import clamp_non_neg, div_rate, format_gbp, mul_rate
from .schema import TaxParameters
from .tax import (
    PensionWithdrawal,
    allowance_fill_withdrawal,
    allowance_for_age,
    band_fill_withdrawal,
    income_tax_withdrawal,
    state_pension_for_age,
    ufpls_gross_for_net,
    ufpls_withdrawal,
)
from .tax_data import CONTRIBUTION_MAX_AGE, STATE_PENSION_AGE
from .withdrawals import AccountState, draw_savings, spend_from_savings

logger = logging.getLogger(__name__)


class Strategy(str, Enum):
    STRATEGY1 = "strategy1"
    STRATEGY2 = "strategy2"
    STRATEGY3 = "strategy3"
    STRATEGY3A = "strategy3a"
    STRATEGY4 = "strategy4"
    STRATEGY5 = "strategy5"

    @property
    def label(self) -> str:
        return "Strategy" + self.value.removeprefix("strategy").upper()

    @property
    def css_class(self) -> str:
        return "strategy-" + self.value.removeprefix("strategy")


@dataclass(slots=True)
class YearOutcome:
    tax_paid: int = 0
    shortfall: int = 0
    allowance_used: int = 0
    pension_gross: int = 0
    lump_sum: int = 0
    contribution: int = 0
    banked_surplus: int = 0


class WithdrawalPolicy:
    """One year's transition for a strategy.

    ``apply`` mutates ``state`` in place and reports what happened. ``need`` is
    the net amount still to find this year, after state pension.
    """

    strategy: Strategy

    def apply(self, state: AccountState, need: int, age: int, params: TaxParameters) -> YearOutcome:
        raise NotImplementedError

    def _debit(self, state: AccountState, outcome: YearOutcome, withdrawal: PensionWithdrawal) -> int:
        state.pension -= withdrawal.gross
        outcome.pension_gross += withdrawal.gross
        outcome.tax_paid += withdrawal.tax
        outcome.allowance_used += withdrawal.allowance_used
        return withdrawal.net

    def _take(self, state: AccountState, outcome: YearOutcome, withdrawal: PensionWithdrawal, need: int) -> int:
        return clamp_non_neg(need - self._debit(state, outcome, withdrawal))

    def _finish(self, state: AccountState, outcome: YearOutcome, need: int, age: int) -> YearOutcome:
        state.clamp()
        outcome.shortfall = clamp_non_neg(need)
        if outcome.shortfall:
            logger.debug(f"[{self.strategy.label}] age {age}: {format_gbp(outcome.shortfall)} of spending unmet")
        return outcome


class SavingsThenLumpSumPolicy(WithdrawalPolicy):
    strategy = Strategy.STRATEGY1

    def apply(self, state: AccountState, need: int, age: int, params: TaxParameters) -> YearOutcome:
        outcome = YearOutcome()
        need = draw_savings(state, need)

        if need > 0 and not state.lump_sum_taken and state.pension > 0:
            lump = mul_rate(state.pension, params.tax_free_portion)
            state.pension -= lump
            state.other_savings += lump
            state.lump_sum_taken = True
            outcome.lump_sum = lump
            logger.debug(f"[{self.strategy.label}] age {age}: tax-free lump sum {format_gbp(lump)} moved to savings")
            need = draw_savings(state, need)

        # Whole pot is crystallised after the lump sum.
        withdrawal = income_tax_withdrawal(
            need,
            allowance_left=allowance_for_age(age, params),
            pension=state.pension,
            basic_rate=params.basic_rate,
        )
        need = self._take(state, outcome, withdrawal, need)
        return self._finish(state, outcome, need, age)


class SavingsThenUfplsPolicy(WithdrawalPolicy):
    strategy = Strategy.STRATEGY2

    def apply(self, state: AccountState, need: int, age: int, params: TaxParameters) -> YearOutcome:
        outcome = YearOutcome()
        need = draw_savings(state, need)
        withdrawal = ufpls_withdrawal(
            need,
            allowance_left=allowance_for_age(age, params),
            pension=state.pension,
            tax_free_portion=params.tax_free_portion,
            basic_rate=params.basic_rate,
        )
        need = self._take(state, outcome, withdrawal, need)
        return self._finish(state, outcome, need, age)


class AllowanceFirstPolicy(WithdrawalPolicy):
    """Crystallise up to the tax-free amount every year, even when savings could cover it."""

    strategy = Strategy.STRATEGY3

    def apply(self, state: AccountState, need: int, age: int, params: TaxParameters) -> YearOutcome:
        outcome = YearOutcome()
        self._contribute(state, outcome, age, params)
        allowance = allowance_for_age(age, params)

        if need > 0:
            fill = allowance_fill_withdrawal(
                allowance_left=allowance,
                pension=state.pension,
                tax_free_portion=params.tax_free_portion,
                cap=need,
            )
            need = self._take(state, outcome, fill, need)

        need = draw_savings(state, need)

        withdrawal = ufpls_withdrawal(
            need,
            allowance_left=allowance - outcome.allowance_used,
            pension=state.pension,
            tax_free_portion=params.tax_free_portion,
            basic_rate=params.basic_rate,
        )
        need = self._take(state, outcome, withdrawal, need)

        # Pension exhausted part way through the year.
        need = draw_savings(state, need)
        return self._finish(state, outcome, need, age)

    def _contribute(self, state: AccountState, outcome: YearOutcome, age: int, params: TaxParameters) -> None:
        return None


class AllowanceFirstWithContributionPolicy(AllowanceFirstPolicy):
    """Strategy3 plus a no-income pension contribution from savings each year."""

    strategy = Strategy.STRATEGY3A

    def _contribute(self, state: AccountState, outcome: YearOutcome, age: int, params: TaxParameters) -> None:
        if age > CONTRIBUTION_MAX_AGE or state.savings <= 0:
            return
        relief_factor = 1.0 - params.basic_rate
        net_cap = mul_rate(params.no_income_contribution_limit_gross, relief_factor)
        net = min(state.savings, net_cap)
        if net <= 0:
            return
        gross = div_rate(net, relief_factor)
        draw = spend_from_savings(net, state.other_savings, state.isa_savings)
        state.other_savings = draw.other
        state.isa_savings = draw.isa
        state.pension += gross
        outcome.contribution = gross
        logger.debug(f"[{self.strategy.label}] age {age}: contributed {format_gbp(net)} net, {format_gbp(gross)} gross")


class BandFillPolicy(WithdrawalPolicy):
    """Fill the personal allowance, then the basic-rate band; bank any surplus."""

    strategy = Strategy.STRATEGY4

    def apply(self, state: AccountState, need: int, age: int, params: TaxParameters) -> YearOutcome:
        outcome = YearOutcome()
        allowance = allowance_for_age(age, params)

        fill = allowance_fill_withdrawal(
            allowance_left=allowance,
            pension=state.pension,
            tax_free_portion=params.tax_free_portion,
        )
        pooled = self._debit(state, outcome, fill)

        band = band_fill_withdrawal(
            allowance_left=allowance - outcome.allowance_used,
            pension=state.pension,
            state_pension=state_pension_for_age(age, params),
            params=params,
        )
        pooled += self._debit(state, outcome, band)

        spent = min(pooled, need)
        need -= spent
        surplus = pooled - spent
        if surplus > 0:
            state.other_savings += surplus
            outcome.banked_surplus = surplus
            logger.debug(f"[{self.strategy.label}] age {age}: banked surplus {format_gbp(surplus)} in other savings")

        need = draw_savings(state, need)
        return self._finish(state, outcome, need, age)


class PensionFirstUfplsPolicy(WithdrawalPolicy):
    strategy = Strategy.STRATEGY5

    def apply(self, state: AccountState, need: int, age: int, params: TaxParameters) -> YearOutcome:
        outcome = YearOutcome()
        withdrawal = ufpls_withdrawal(
            need,
            allowance_left=allowance_for_age(age, params),
            pension=state.pension,
            tax_free_portion=params.tax_free_portion,
            basic_rate=params.basic_rate,
        )
        need = self._take(state, outcome, withdrawal, need)
        need = draw_savings(state, need)
        return self._finish(state, outcome, need, age)


POLICIES: dict[Strategy, WithdrawalPolicy] = {
    policy.strategy: policy
    for policy in (
        SavingsThenLumpSumPolicy(),
        SavingsThenUfplsPolicy(),
        AllowanceFirstPolicy(),
        AllowanceFirstWithContributionPolicy(),
        BandFillPolicy(),
        PensionFirstUfplsPolicy(),
    )
}


def policy_for(strategy: Strategy | str) -> WithdrawalPolicy:
    return POLICIES[Strategy(strategy)]


def strategy_description(strategy: Strategy, params: TaxParameters) -> str:
    """Plain-English summary of a strategy, using the plan's own tax figures."""
    tax_free_pct = round(params.tax_free_portion * 100)
    taxed_pct = 100 - tax_free_pct
    split = f"{tax_free_pct}% tax-free / {taxed_pct}% taxable"

    if strategy is Strategy.STRATEGY1:
        return (
            "Use savings first. When savings alone cannot cover a year, crystallise the whole pension and move the "
            f"{tax_free_pct}% tax-free lump sum into savings, then keep spending from savings. After that, draw the "
            "remaining pension with income tax on every pound. For example, spending £30,000 a year with £10,000 "
            "savings and a £100,000 pension takes a £25,000 lump sum, leaving £5,000 savings and £75,000 pension "
            "(plus growth) after the first year, with no tax-free portion left."
        )
    if strategy is Strategy.STRATEGY2:
        return (
            f"Use savings first, then crystallise only what each year needs ({split}). For example, after spending "
            "£10,000 of savings against a £30,000 need, slightly more than £20,000 is crystallised to receive "
            "£20,000 net."
        )
    if strategy is Strategy.STRATEGY3:
        tax_free_draw = div_rate(params.personal_allowance, params.taxed_portion)
        return (
            f"Crystallise and withdraw up to {format_gbp(tax_free_draw)} every year without paying tax ({split}), "
            "even while savings could cover spending, and use savings for the rest. From age "
            f"{STATE_PENSION_AGE} the state pension of {format_gbp(params.state_pension_annual)} uses part of the "
            "personal allowance, so less is crystallised tax-free. Once savings run out, larger taxed withdrawals follow."
        )
    if strategy is Strategy.STRATEGY3A:
        limit = params.no_income_contribution_limit_gross
        net = mul_rate(limit, 1.0 - params.basic_rate)
        relief_pct = round(params.basic_rate * 100)
        return (
            f"Same as Strategy3, plus a yearly {format_gbp(limit)} gross pension contribution ({format_gbp(net)} net "
            f"with {relief_pct}% relief) paid from savings up to age {CONTRIBUTION_MAX_AGE}, even with no salary. "
            "Pension recycling rules may apply to this approach."
        )
    if strategy is Strategy.STRATEGY4:
        ceiling = params.personal_allowance + params.basic_rate_band_width
        return (
            "Fill the personal allowance (0% tax), then fill the basic-rate band "
            f"({round(params.basic_rate * 100)}% tax), banking any net surplus in savings. Income of "
            f"{format_gbp(params.personal_allowance)} + {format_gbp(params.basic_rate_band_width)} = "
            f"{format_gbp(ceiling)} is possible before higher-rate tax."
        )
    example_gross = ufpls_gross_for_net(
        3_000_000,
        allowance_left=params.personal_allowance,
        tax_free_portion=params.tax_free_portion,
        basic_rate=params.basic_rate,
    )
    return (
        f"Draw from the pension each year ({split}) and use savings only once no pension remains. For example, a "
        f"£30,000 need is met by withdrawing {format_gbp(example_gross)} gross."
    )
