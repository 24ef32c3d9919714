import pytest

from drawdown.strategies import Strategy, policy_for, strategy_description
from drawdown.withdrawals import AccountState
from tests.helpers import make_params


def test_strategy_labels_and_css_classes():
    assert Strategy.STRATEGY3A.label == "Strategy3A"
    assert Strategy.STRATEGY1.label == "Strategy1"
    assert Strategy.STRATEGY3A.css_class == "strategy-3a"
    assert policy_for("strategy4").strategy is Strategy.STRATEGY4


def test_unknown_strategy_is_rejected():
    with pytest.raises(ValueError):
        policy_for("strategy9")


def test_strategy1_takes_lump_sum_into_other_savings():
    state = AccountState(pension=10_000_000, other_savings=1_000_000)

    outcome = policy_for(Strategy.STRATEGY1).apply(state, 3_000_000, 60, make_params())

    assert outcome.lump_sum == 2_500_000
    assert outcome.tax_paid == 0
    assert outcome.shortfall == 0
    assert state.lump_sum_taken
    assert state.pension == 7_500_000
    assert state.other_savings == 500_000


def test_strategy1_taxes_every_pound_after_lump_sum():
    state = AccountState(pension=7_500_000, other_savings=500_000, lump_sum_taken=True)

    outcome = policy_for(Strategy.STRATEGY1).apply(state, 3_000_000, 61, make_params())

    assert outcome.lump_sum == 0
    assert outcome.pension_gross == 2_810_750
    assert outcome.tax_paid == 310_750
    assert state.pension == 4_689_250
    assert state.savings == 0


def test_strategy2_grosses_up_after_savings():
    state = AccountState(pension=10_000_000, other_savings=1_000_000)

    outcome = policy_for(Strategy.STRATEGY2).apply(state, 3_000_000, 60, make_params())

    assert outcome.pension_gross == 2_057_176
    assert outcome.tax_paid == 57_176
    assert state.other_savings == 0
    assert state.pension == 10_000_000 - 2_057_176


def test_strategy3_fills_allowance_before_savings():
    state = AccountState(pension=10_000_000, other_savings=5_000_000)

    outcome = policy_for(Strategy.STRATEGY3).apply(state, 3_000_000, 60, make_params())

    assert outcome.pension_gross == 1_676_000
    assert outcome.allowance_used == 1_257_000
    assert outcome.tax_paid == 0
    assert state.other_savings == 3_676_000


def test_strategy3_grosses_up_once_savings_are_gone():
    state = AccountState(pension=10_000_000)

    outcome = policy_for(Strategy.STRATEGY3).apply(state, 3_000_000, 60, make_params())

    assert outcome.pension_gross == 1_676_000 + 1_557_647
    assert outcome.tax_paid == 233_647
    assert outcome.shortfall == 0
    assert state.pension == 6_766_353


def test_strategy3_fill_is_capped_by_need():
    state = AccountState(pension=10_000_000, other_savings=5_000_000)

    outcome = policy_for(Strategy.STRATEGY3).apply(state, 500_000, 60, make_params())

    assert outcome.pension_gross == 500_000
    assert state.other_savings == 5_000_000


def test_strategy3a_contributes_from_savings_with_relief():
    state = AccountState(pension=0, other_savings=1_000_000)

    outcome = policy_for(Strategy.STRATEGY3A).apply(state, 0, 60, make_params())

    assert outcome.contribution == 360_000
    assert state.other_savings == 712_000
    assert state.pension == 360_000


def test_strategy3a_stops_contributing_after_75():
    state = AccountState(pension=0, other_savings=1_000_000)

    outcome = policy_for(Strategy.STRATEGY3A).apply(state, 0, 76, make_params())

    assert outcome.contribution == 0
    assert state.other_savings == 1_000_000


def test_strategy3a_contribution_limited_by_savings():
    state = AccountState(pension=0, isa_savings=80_000)

    outcome = policy_for(Strategy.STRATEGY3A).apply(state, 0, 60, make_params())

    assert outcome.contribution == 100_000
    assert state.isa_savings == 0


def test_strategy3_never_contributes():
    state = AccountState(pension=0, other_savings=1_000_000)

    outcome = policy_for(Strategy.STRATEGY3).apply(state, 0, 60, make_params())

    assert outcome.contribution == 0
    assert state.pension == 0


def test_strategy4_banks_surplus_in_other_savings_only():
    state = AccountState(pension=20_000_000, isa_savings=500_000)

    outcome = policy_for(Strategy.STRATEGY4).apply(state, 3_000_000, 60, make_params())

    assert outcome.pension_gross == 1_676_000 + 5_026_667
    assert outcome.tax_paid == 754_000
    assert outcome.banked_surplus == 2_948_667
    assert state.other_savings == 2_948_667
    assert state.isa_savings == 500_000
    assert state.pension == 13_297_333


def test_strategy4_uses_savings_when_pension_is_small():
    state = AccountState(pension=1_000_000, other_savings=5_000_000)

    outcome = policy_for(Strategy.STRATEGY4).apply(state, 3_000_000, 60, make_params())

    assert outcome.pension_gross == 1_000_000
    assert outcome.banked_surplus == 0
    assert state.pension == 0
    assert state.other_savings == 3_000_000


def test_strategy5_draws_pension_before_savings():
    state = AccountState(pension=10_000_000, other_savings=1_000_000)

    outcome = policy_for(Strategy.STRATEGY5).apply(state, 3_000_000, 60, make_params())

    assert outcome.pension_gross == 3_233_647
    assert outcome.tax_paid == 233_647
    assert state.other_savings == 1_000_000
    assert state.pension == 6_766_353


def test_strategy5_falls_back_to_savings_and_reports_shortfall():
    state = AccountState(pension=1_000_000, other_savings=1_000_000)

    outcome = policy_for(Strategy.STRATEGY5).apply(state, 3_000_000, 60, make_params())

    assert outcome.tax_paid == 0
    assert outcome.shortfall == 1_000_000
    assert state.pension == 0
    assert state.savings == 0


def test_descriptions_quote_plan_figures():
    params = make_params()

    assert "£16,760.00" in strategy_description(Strategy.STRATEGY3, params)
    assert "£32,336.47" in strategy_description(Strategy.STRATEGY5, params)
    assert "£50,270.00" in strategy_description(Strategy.STRATEGY4, params)
    assert "£3,600.00" in strategy_description(Strategy.STRATEGY3A, params)
