import pytest

from drawdown.schema import Plan, load_plan
from drawdown.simulation import comparison_matrix, resolve_strategies, run_simulation, shortfall_years
from drawdown.strategies import Strategy
from tests.helpers import SAMPLE_PLAN, clone_plan


def test_sample_plan_runs_every_strategy_for_every_amount():
    plan = load_plan(SAMPLE_PLAN)
    result = run_simulation(plan)

    assert result.strategies == list(Strategy)
    assert result.spending_amounts == [2_000_000, 3_000_000, 4_000_000]
    assert len(result.runs) == 18
    for run in result.runs:
        assert run.timeline[0].age == 60
        assert run.timeline[-1].age == 85


def test_runs_do_not_share_balances():
    plan = load_plan(SAMPLE_PLAN)
    result = run_simulation(plan)

    for run in result.runs:
        first = run.timeline[0]
        assert first.pension_start == plan.pension
        assert first.savings_start == plan.savings.total


def test_resolve_strategies_keeps_canonical_order():
    assert resolve_strategies(["strategy5", "strategy1"]) == [Strategy.STRATEGY1, Strategy.STRATEGY5]
    assert resolve_strategies(None) == list(Strategy)
    assert resolve_strategies([]) == list(Strategy)
    with pytest.raises(ValueError):
        resolve_strategies(["strategy9"])


def test_plan_report_strategies_used_when_none_given(sample_plan_dict):
    data = clone_plan(sample_plan_dict)
    data["report"]["strategies"] = ["strategy4"]
    result = run_simulation(Plan.from_dict(data))

    assert result.strategies == [Strategy.STRATEGY4]
    assert len(result.runs) == 3


def test_timeline_for_unknown_run_raises(sample_plan_dict):
    result = run_simulation(Plan.from_dict(sample_plan_dict), strategies=["strategy2"])

    with pytest.raises(KeyError):
        result.timeline_for(Strategy.STRATEGY5, 2_000_000)


def test_comparison_matrix_marks_best_per_column():
    plan = load_plan(SAMPLE_PLAN)
    result = run_simulation(plan)
    rows = comparison_matrix(result, 75)

    assert len(rows) == 6
    assert all(len(row) == 3 for row in rows)
    for col in range(3):
        column = [row[col] for row in rows]
        best_total = max(cell.total for cell in column)
        assert [cell.best for cell in column] == [cell.total == best_total for cell in column]
        assert any(cell.best for cell in column)
        assert all(cell.age == 75 for cell in column)


def test_comparison_matrix_marks_every_tied_strategy(sample_plan_dict):
    data = clone_plan(sample_plan_dict)
    data["pension"] = 0
    data["savings"] = {"other": 500000, "isa": 0}
    data["adhoc_withdrawals"] = []
    result = run_simulation(Plan.from_dict(data), strategies=["strategy1", "strategy2", "strategy5"])

    for row in comparison_matrix(result, 60):
        assert all(cell.best for cell in row)


def test_shortfall_years_lists_unmet_ages(sample_plan_dict):
    data = clone_plan(sample_plan_dict)
    data["pension"] = 0
    data["savings"] = 50000
    result = run_simulation(Plan.from_dict(data), strategies=["strategy2"])

    ages = shortfall_years(result.timeline_for(Strategy.STRATEGY2, 2_000_000))
    assert ages[0] == 62
    assert ages[-1] == 85
