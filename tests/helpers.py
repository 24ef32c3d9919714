import copy
import json
from pathlib import Path

from drawdown.money import to_pence
from drawdown.schema import TaxParameters

SAMPLE_PLAN = Path(__file__).resolve().parent.parent / "sample_plan.json"


def write_plan(tmp_path: Path, data: dict, filename: str = "plan.json") -> Path:
    path = tmp_path / filename
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def clone_plan(data: dict) -> dict:
    return copy.deepcopy(data)


def make_params(**overrides) -> TaxParameters:
    values = {
        "personal_allowance": to_pence(12570),
        "state_pension_annual": to_pence(11973),
        "basic_rate": 0.20,
        "basic_rate_band_width": to_pence(37700),
        "tax_free_portion": 0.25,
        "pension_growth_rate": 0.04,
        "no_income_contribution_limit_gross": to_pence(3600),
        "start_age": 60,
        "end_age": 85,
    }
    values.update(overrides)
    return TaxParameters(**values)
