"""CLI entry point for the drawdown strategy comparison."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from .money import format_gbp
from .report import default_report_name, render_report, write_report
from .schema import Plan, SchemaError, load_plan
from .simulation import SimulationResult, comparison_matrix, run_simulation
from .strategies import Strategy
from .validate import check_plan_sanity, validate_plan


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compare UK pension drawdown strategies")
    parser.add_argument("plan", help="Path to plan JSON file")
    parser.add_argument("-o", "--output", help="Output HTML path (default: timestamped pension-strategy-comparison file)")
    parser.add_argument("--full", action="store_true", help="Write the full year-by-year timeline report")
    parser.add_argument(
        "--strategy",
        action="append",
        choices=[strategy.value for strategy in Strategy],
        help="Only run this strategy (repeatable)",
    )
    parser.add_argument("--validate", action="store_true", help="Validate JSON only")
    parser.add_argument("--summary", action="store_true", help="Print text summary to stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log engine decisions at debug level")
    return parser


def _print_validation(errors: list[str], warnings: list[str]) -> None:
    for warning in warnings:
        print(f"WARNING: {warning}")
    for error in errors:
        print(f"ERROR: {error}", file=sys.stderr)


def _print_summary(plan: Plan, result: SimulationResult) -> None:
    print(f"Ages: {plan.start_age}-{plan.end_age}")
    print(f"Strategies: {', '.join(strategy.label for strategy in result.strategies)}")
    for age in sorted(set(plan.target_ages)):
        rows = comparison_matrix(result, age)
        for col, required_net in enumerate(result.spending_amounts):
            best = [row[col] for row in rows if row[col].best]
            if not best:
                continue
            labels = ", ".join(cell.strategy.label for cell in best)
            print(f"Age {age}, spending {format_gbp(required_net)}: best {labels} ({format_gbp(best[0].total)})")


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        plan = load_plan(args.plan)
    except (SchemaError, OSError, ValueError) as exc:
        print(f"Failed to load plan: {exc}", file=sys.stderr)
        return 2

    validation = validate_plan(plan)
    sanity = check_plan_sanity(plan)
    _print_validation(validation.errors, validation.warnings + sanity.warnings)
    if not validation.is_valid:
        return 1

    if args.validate:
        print("Plan is valid.")
        return 0

    result = run_simulation(plan, strategies=args.strategy)
    kind = "full" if args.full else plan.report.kind
    output = Path(args.output or default_report_name())
    write_report(output, render_report(plan, result, plan_path=args.plan, kind=kind))

    if args.summary:
        _print_summary(plan, result)
    print(f"Wrote report to {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
