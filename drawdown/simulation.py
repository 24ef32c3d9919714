"""Simulation orchestration across spend amounts and strategies."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable

from .engine import YearSnapshot, run_strategy, snapshot_for_age
from .schema import Plan
from .strategies import Strategy

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StrategyRun:
    strategy: Strategy
    required_net: int
    timeline: list[YearSnapshot]


@dataclass(slots=True)
class SimulationResult:
    strategies: list[Strategy]
    spending_amounts: list[int]
    runs: list[StrategyRun]

    def timeline_for(self, strategy: Strategy | str, required_net: int) -> list[YearSnapshot]:
        wanted = Strategy(strategy)
        for run in self.runs:
            if run.strategy is wanted and run.required_net == required_net:
                return run.timeline
        raise KeyError(f"no run for {wanted.value} at {required_net}")


@dataclass(slots=True)
class ComparisonCell:
    strategy: Strategy
    required_net: int
    age: int
    total: int
    savings: int
    pension: int
    tax_paid: int
    shortfall: int
    best: bool = False


def resolve_strategies(names: Iterable[str] | None) -> list[Strategy]:
    """Strategies in canonical order; all of them when ``names`` is empty."""
    wanted = {Strategy(name) for name in names or []}
    return [strategy for strategy in Strategy if not wanted or strategy in wanted]


def run_simulation(plan: Plan, strategies: Iterable[str] | None = None) -> SimulationResult:
    """Run every requested strategy for every spend amount in ``plan``."""
    selected = resolve_strategies(strategies if strategies is not None else plan.report.strategies)
    adhoc = plan.adhoc
    runs: list[StrategyRun] = []
    for required_net in plan.spending_amounts:
        for strategy in selected:
            timeline = run_strategy(
                strategy,
                pension=plan.pension,
                other_savings=plan.savings.other,
                isa_savings=plan.savings.isa,
                required_net=required_net,
                adhoc=adhoc,
                params=plan.tax,
            )
            runs.append(StrategyRun(strategy=strategy, required_net=required_net, timeline=timeline))
    logger.debug(f"Ran {len(runs)} simulations for ages {plan.start_age}-{plan.end_age}")
    return SimulationResult(strategies=selected, spending_amounts=list(plan.spending_amounts), runs=runs)


def comparison_matrix(result: SimulationResult, age: int) -> list[list[ComparisonCell]]:
    """Total wealth at ``age`` as rows of strategies by columns of spend amounts.

    The highest total in each column is marked ``best``; ties are all marked.
    """
    rows: list[list[ComparisonCell]] = []
    for strategy in result.strategies:
        row: list[ComparisonCell] = []
        for required_net in result.spending_amounts:
            point = snapshot_for_age(result.timeline_for(strategy, required_net), age)
            row.append(
                ComparisonCell(
                    strategy=strategy,
                    required_net=required_net,
                    age=point.age,
                    total=point.total_end(),
                    savings=point.savings_end,
                    pension=point.pension_end,
                    tax_paid=point.tax_paid,
                    shortfall=point.shortfall,
                )
            )
        rows.append(row)

    for col in range(len(result.spending_amounts)):
        column = [row[col] for row in rows]
        if not column:
            continue
        best_total = max(cell.total for cell in column)
        for cell in column:
            cell.best = cell.total == best_total
    return rows


def shortfall_years(timeline: list[YearSnapshot]) -> list[int]:
    return [point.age for point in timeline if point.shortfall > 0]
