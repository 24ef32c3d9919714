"""Chart payload generation for the self-contained report."""

from __future__ import annotations

from .money import format_gbp
from .simulation import SimulationResult


def _ages(result: SimulationResult) -> list[int]:
    if not result.runs:
        return []
    return [point.age for point in result.runs[0].timeline]


def build_chart_payload(result: SimulationResult) -> dict[str, object]:
    """Total wealth by age for each strategy, one series group per spend amount.

    Values are pounds so the page script can plot them directly.
    """
    series: list[dict[str, object]] = []
    for required_net in result.spending_amounts:
        totals: dict[str, list[float]] = {}
        shortfalls: dict[str, list[int]] = {}
        for strategy in result.strategies:
            timeline = result.timeline_for(strategy, required_net)
            totals[strategy.label] = [point.total_end() / 100 for point in timeline]
            shortfalls[strategy.label] = [point.age for point in timeline if point.shortfall > 0]
        series.append(
            {
                "label": f"{format_gbp(required_net)} per year",
                "totals": totals,
                "shortfallAges": shortfalls,
            }
        )
    return {
        "ages": _ages(result),
        "strategies": [strategy.label for strategy in result.strategies],
        "series": series,
    }
