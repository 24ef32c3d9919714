from datetime import datetime
import json
import re

from drawdown.report import default_report_name, render_report, write_report
from drawdown.schema import load_plan
from drawdown.simulation import run_simulation
from tests.helpers import SAMPLE_PLAN, clone_plan, write_plan


def _payload(html_text: str) -> dict:
    match = re.search(r"const payload = (\{.*?\});", html_text, re.S)
    assert match is not None
    return json.loads(match.group(1))


def test_comparison_report_contains_tables_per_target_age():
    plan = load_plan(SAMPLE_PLAN)
    html_text = render_report(plan, run_simulation(plan), plan_path=str(SAMPLE_PLAN))

    assert "Pension Strategy Comparison Report - Alex Example" in html_text
    assert "Initial Parameters" in html_text
    for age in (60, 67, 75, 85):
        assert f"Total wealth remaining at end of year when aged {age}" in html_text
    assert 'class="currency best"' in html_text
    assert '<tr class="strategy-3a">' in html_text
    assert "Age 62: £5,000.00; Age 70: £10,000.00" in html_text
    assert "Plan hash:" in html_text


def test_report_tabs_and_info_panel():
    plan = load_plan(SAMPLE_PLAN)
    html_text = render_report(plan, run_simulation(plan), plan_path=str(SAMPLE_PLAN))

    for tab in ("tab-report", "tab-chart", "tab-validation"):
        assert f'id="{tab}"' in html_text
    assert 'id="strategyInfoPanel"' in html_text
    assert "Strategy Descriptions:" in html_text
    assert "Savings interest:</strong> None (and no inflation either)" in html_text


def test_report_is_self_contained():
    plan = load_plan(SAMPLE_PLAN)
    html_text = render_report(plan, run_simulation(plan), plan_path=str(SAMPLE_PLAN))

    assert "http://" not in html_text
    assert "https://" not in html_text
    assert "<script src" not in html_text


def test_chart_payload_embedded():
    plan = load_plan(SAMPLE_PLAN)
    payload = _payload(render_report(plan, run_simulation(plan), plan_path=str(SAMPLE_PLAN)))

    assert payload["kind"] == "comparison"
    assert payload["spendingAmounts"] == [2_000_000, 3_000_000, 4_000_000]
    charts = payload["charts"]
    assert charts["ages"][0] == 60
    assert charts["ages"][-1] == 85
    assert len(charts["series"]) == 3
    assert charts["series"][0]["label"] == "£20,000.00 per year"
    assert set(charts["series"][0]["totals"]) == set(charts["strategies"])
    assert all(len(values) == 26 for values in charts["series"][0]["totals"].values())


def test_full_timeline_report(tmp_path):
    plan = load_plan(SAMPLE_PLAN)
    html_text = render_report(plan, run_simulation(plan), plan_path=str(SAMPLE_PLAN), kind="full")

    assert "Full Timeline Report" in html_text
    assert "Spending: £20,000.00 per year" in html_text
    assert "About this strategy" in html_text
    assert "<th>Extra This Year</th>" in html_text
    assert _payload(html_text)["kind"] == "full"

    output = tmp_path / "full.html"
    write_report(output, html_text)
    assert output.read_text(encoding="utf-8") == html_text


def test_shortfall_rows_reported(tmp_path, sample_plan_dict):
    data = clone_plan(sample_plan_dict)
    data["pension"] = 0
    data["savings"] = 50000
    path = write_plan(tmp_path, data)
    plan = load_plan(path)
    html_text = render_report(plan, run_simulation(plan, ["strategy2"]), plan_path=str(path))

    assert "<td>Shortfall</td>" in html_text
    assert "Strategy2 at £20,000.00 per year: spending not fully met from age 62" in html_text
    assert "Unmet spending:" in html_text


def test_default_report_name_is_timestamped():
    name = default_report_name(datetime(2026, 1, 2, 3, 4, 5))

    assert name == "pension-strategy-comparison-2026-01-02T03-04-05.html"


def test_full_timeline_shows_pension_movements():
    plan = load_plan(SAMPLE_PLAN)
    html_text = render_report(plan, run_simulation(plan), plan_path=str(SAMPLE_PLAN), kind="full")

    assert "<th>Pension Withdrawn</th>" in html_text
    assert "Tax-free lump sum: £" in html_text
    assert "Pension contribution: £3,600.00" in html_text
    assert "Surplus banked: £" in html_text
