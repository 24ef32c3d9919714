"""HTML report generation."""

from __future__ import annotations

from datetime import UTC, datetime
import hashlib
import html
import json
from pathlib import Path

from .charts import build_chart_payload
from .engine import YearSnapshot
from .money import format_gbp
from .schema import Plan
from .simulation import SimulationResult, comparison_matrix, shortfall_years
from .strategies import Strategy, strategy_description
from .templates import render_html_document
from .validate import check_plan_sanity, validate_plan

REPORT_PREFIX = "pension-strategy-comparison"

TIMELINE_COLUMNS = [
    "Age",
    "Pension Start",
    "Pension End",
    "Pension Withdrawn",
    "ISA Start",
    "ISA End",
    "Other Start",
    "Other End",
    "Tax Paid",
    "Extra This Year",
]


def default_report_name(now: datetime | None = None) -> str:
    stamp = (now or datetime.now(UTC)).strftime("%Y-%m-%dT%H-%M-%S")
    return f"{REPORT_PREFIX}-{stamp}.html"


def _money_cell(value: int, *, css: str = "currency", tooltip: str | None = None) -> str:
    title = f' title="{html.escape(tooltip, quote=True)}"' if tooltip else ""
    return f'<td class="{css}"{title}>{format_gbp(value)}</td>'


def _unique_ages(ages: list[int]) -> list[int]:
    seen: set[int] = set()
    ordered: list[int] = []
    for age in ages:
        if age not in seen:
            seen.add(age)
            ordered.append(age)
    return ordered


def _adhoc_text(plan: Plan) -> str:
    adhoc = plan.adhoc
    if not adhoc:
        return "None"
    return "; ".join(f"Age {age}: {format_gbp(adhoc[age])}" for age in sorted(adhoc))


def _summary_block(plan: Plan, heading: str) -> str:
    lines = [
        ("Initial Savings", format_gbp(plan.savings.total)),
        ("Other Savings", format_gbp(plan.savings.other)),
        ("Stocks &amp; Shares ISA", format_gbp(plan.savings.isa)),
        ("Initial Pension", format_gbp(plan.pension)),
        ("Annual Spending Amounts", ", ".join(format_gbp(amount) for amount in plan.spending_amounts)),
        ("Target Ages", ", ".join(str(age) for age in _unique_ages(plan.target_ages))),
        ("Years", f"{plan.start_age}-{plan.end_age}"),
        ("Ad hoc withdrawals", html.escape(_adhoc_text(plan))),
    ]
    body = "".join(f"<p><strong>{label}:</strong> {value}</p>" for label, value in lines)
    return f"<h3>{heading}</h3>{body}"


def _info_panel(plan: Plan, generated: str) -> str:
    tax = plan.tax
    descriptions = "".join(
        f"<li><strong>{strategy.label}:</strong> {html.escape(strategy_description(strategy, tax))}</li>"
        for strategy in Strategy
    )
    assumptions = [
        ("Pension growth rate above inflation", f"{tax.pension_growth_rate * 100:.2f}%"),
        ("Personal allowance", format_gbp(tax.personal_allowance)),
        ("State pension (annual)", format_gbp(tax.state_pension_annual)),
        ("Basic rate", f"{tax.basic_rate * 100:.0f}%"),
        ("Basic-rate band width", format_gbp(tax.basic_rate_band_width)),
        ("Tax-free pension portion", f"{tax.tax_free_portion * 100:.0f}%"),
        ("Savings interest", "None (and no inflation either)"),
    ]
    assumption_items = "".join(f"<li><strong>{label}:</strong> {value}</li>" for label, value in assumptions)
    return (
        '<details class="advanced" id="strategyInfoPanel"><summary>Additional Information</summary>'
        '<div class="strategy-info-content">'
        f"<h3>Strategy Descriptions:</h3><ul>{descriptions}</ul>"
        f"<h3>Assumptions</h3><ul>{assumption_items}</ul>"
        f"<p><em>Generated on: {html.escape(generated)}</em></p>"
        "</div></details>"
    )


def _comparison_tables(plan: Plan, result: SimulationResult) -> str:
    header = "".join(f"<th>{format_gbp(amount)}</th>" for amount in result.spending_amounts)
    sections: list[str] = []
    for age in _unique_ages(plan.target_ages):
        rows: list[str] = []
        for row in comparison_matrix(result, age):
            if not row:
                continue
            strategy = row[0].strategy
            description = html.escape(strategy_description(strategy, plan.tax), quote=True)
            cells: list[str] = []
            for cell in row:
                tooltip = (
                    f"Savings: {format_gbp(cell.savings)}, Pension: {format_gbp(cell.pension)}, "
                    f"Tax paid: {format_gbp(cell.tax_paid)}"
                )
                if cell.shortfall:
                    tooltip += f", Unmet spending: {format_gbp(cell.shortfall)}"
                css = "currency best" if cell.best else "currency"
                cells.append(_money_cell(cell.total, css=css, tooltip=tooltip))
            rows.append(
                f'<tr class="{strategy.css_class}">'
                f'<td class="strategy-column" title="{description}">{strategy.label}</td>'
                + "".join(cells)
                + "</tr>"
            )
        sections.append(
            f'<h2 class="age-title">Total wealth remaining at end of year when aged {age}</h2>'
            '<table class="comparison"><thead><tr>'
            '<th class="strategy-column"><span class="strategy-header-text">Strategy</span></th>'
            + header
            + "</tr></thead><tbody>"
            + "".join(rows)
            + "</tbody></table>"
        )
    return "".join(sections)


def _movements_note(point: YearSnapshot) -> str | None:
    parts = [
        (label, amount)
        for label, amount in (
            ("Tax-free lump sum", point.lump_sum),
            ("Pension contribution", point.contribution),
            ("Surplus banked", point.banked_surplus),
        )
        if amount
    ]
    if not parts:
        return None
    return "; ".join(f"{label}: {format_gbp(amount)}" for label, amount in parts)


def _timeline_table(timeline: list[YearSnapshot]) -> str:
    rows: list[str] = []
    for point in timeline:
        css = ' class="shortfall"' if point.shortfall else ""
        shortfall_note = f"Unmet spending: {format_gbp(point.shortfall)}" if point.shortfall else None
        rows.append(
            f"<tr{css}>"
            + f"<td>{point.age}</td>"
            + _money_cell(point.pension_start)
            + _money_cell(point.pension_end, tooltip=f"Growth: {format_gbp(point.growth)}")
            + _money_cell(point.pension_gross, tooltip=_movements_note(point))
            + _money_cell(point.isa_start)
            + _money_cell(point.isa_end)
            + _money_cell(point.other_start)
            + _money_cell(point.other_end)
            + _money_cell(point.tax_paid, tooltip=shortfall_note)
            + _money_cell(point.extra_this_year)
            + "</tr>"
        )
    header = "".join(f"<th>{name}</th>" for name in TIMELINE_COLUMNS)
    return f'<table class="full-timeline"><thead><tr>{header}</tr></thead><tbody>' + "".join(rows) + "</tbody></table>"


def _full_timelines(plan: Plan, result: SimulationResult) -> str:
    sections: list[str] = []
    for required_net in result.spending_amounts:
        sections.append(f"<h2>Spending: {format_gbp(required_net)} per year</h2>")
        for strategy in result.strategies:
            description = html.escape(strategy_description(strategy, plan.tax))
            sections.append(
                f'<h3 class="{strategy.css_class}">{strategy.label}</h3>'
                '<details class="strategy-desc"><summary>About this strategy</summary>'
                f'<div class="strategy-desc-content">{description}</div></details>'
                + _timeline_table(result.timeline_for(strategy, required_net))
            )
    return "".join(sections)


def _validation_panel(plan: Plan, result: SimulationResult) -> str:
    validation = validate_plan(plan)
    sanity = check_plan_sanity(plan)

    rows: list[str] = []
    for msg in validation.errors:
        rows.append(f"<tr><td>Error</td><td>{html.escape(msg)}</td></tr>")
    for msg in validation.warnings:
        rows.append(f"<tr><td>Validation warning</td><td>{html.escape(msg)}</td></tr>")
    for msg in sanity.warnings:
        rows.append(f"<tr><td>Sanity warning</td><td>{html.escape(msg)}</td></tr>")
    for run in result.runs:
        ages = shortfall_years(run.timeline)
        if ages:
            unmet = sum(point.shortfall for point in run.timeline)
            rows.append(
                "<tr><td>Shortfall</td><td>"
                + html.escape(
                    f"{run.strategy.label} at {format_gbp(run.required_net)} per year: spending not fully met "
                    f"from age {ages[0]} ({len(ages)} years, {format_gbp(unmet)} in total)"
                )
                + "</td></tr>"
            )
    if not rows:
        rows.append("<tr><td>OK</td><td>No validation/sanity issues detected.</td></tr>")

    return (
        "<table><thead><tr><th>Type</th><th>Detail</th></tr></thead><tbody>"
        + "".join(rows)
        + "</tbody></table>"
    )


def _report_payload(plan: Plan, result: SimulationResult, kind: str) -> dict[str, object]:
    return {
        "kind": kind,
        "startAge": plan.start_age,
        "endAge": plan.end_age,
        "spendingAmounts": result.spending_amounts,
        "strategies": [strategy.value for strategy in result.strategies],
        "charts": build_chart_payload(result),
    }


def render_report(plan: Plan, result: SimulationResult, plan_path: str, kind: str | None = None) -> str:
    """Render the comparison (default) or full timeline report as one HTML page."""
    kind = kind or plan.report.kind
    plan_hash = hashlib.sha256(Path(plan_path).read_bytes()).hexdigest()[:12]
    now = datetime.now(UTC)
    generated = now.strftime("%Y-%m-%d %H:%M:%S")
    title = f"Pension Strategy Comparison Report - {html.escape(plan.name)}"
    subtitle = (
        f"Report: {'Full Timeline' if kind == 'full' else 'Comparison'} | Ages: {plan.start_age}-{plan.end_age} | "
        f"Generated: {now.isoformat(timespec='seconds')} | Plan hash: {plan_hash}"
    )

    if kind == "full":
        summary = _summary_block(plan, "Full Timeline Report")
        body = _full_timelines(plan, result)
    else:
        summary = _summary_block(plan, "Initial Parameters")
        body = _comparison_tables(plan, result)

    return render_html_document(
        title=title,
        subtitle=subtitle,
        info_panel=_info_panel(plan, generated),
        summary_block=summary,
        report_body=body,
        validation_table=_validation_panel(plan, result),
        payload_json=json.dumps(_report_payload(plan, result, kind)),
    )


def write_report(path: str | Path, html_content: str) -> None:
    Path(path).write_text(html_content, encoding="utf-8")
