"""Plan schema dataclasses and JSON loading."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import math
from pathlib import Path
from typing import Any

from .money import to_pence
from .tax_data import (
    DEFAULT_BASIC_RATE,
    DEFAULT_BASIC_RATE_BAND_WIDTH,
    DEFAULT_NO_INCOME_CONTRIBUTION_LIMIT_GROSS,
    DEFAULT_PENSION_GROWTH_RATE,
    DEFAULT_PERSONAL_ALLOWANCE,
    DEFAULT_STATE_PENSION_ANNUAL,
    DEFAULT_TAX_FREE_PORTION,
    MAX_AGE,
    MIN_AGE,
)


class SchemaError(ValueError):
    """Raised when raw JSON cannot be parsed into schema objects."""


def _expect_dict(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise SchemaError(f"{path}: expected object")
    return value


def _expect_list(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise SchemaError(f"{path}: expected array")
    return value


def _require(data: dict[str, Any], key: str, path: str) -> Any:
    if key not in data:
        raise SchemaError(f"{path}.{key}: missing required field")
    return data[key]


def _optional(data: dict[str, Any], key: str, default: Any = None) -> Any:
    return data.get(key, default)


def _money(value: Any, path: str) -> int:
    """Pounds (number or text) to pence."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise SchemaError(f"{path}: expected amount")
    if isinstance(value, float) and not math.isfinite(value * 100):
        raise SchemaError(f"{path}: expected a finite amount")
    return to_pence(value)


def _number(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaError(f"{path}: expected number")
    if not math.isfinite(value):
        raise SchemaError(f"{path}: expected a finite number")
    return float(value)


def _integer(value: Any, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or int(value) != value:
        raise SchemaError(f"{path}: expected integer")
    return int(value)


def parse_adhoc(text: str | None) -> dict[int, int]:
    """Parse ad hoc withdrawals written as ``"62:5000; 70:10000"``.

    Pairs that do not parse, non-positive ages and negative amounts are
    skipped. A repeated age keeps the last amount.
    """
    adhoc: dict[int, int] = {}
    if not text or not text.strip():
        return adhoc
    for pair in (chunk.strip() for chunk in text.split(";")):
        if not pair or ":" not in pair:
            continue
        raw_age, raw_amount = (part.strip() for part in pair.split(":", 1))
        try:
            age = int(float(raw_age))
        except ValueError:
            continue
        amount = to_pence(raw_amount)
        if age > 0 and amount >= 0:
            adhoc[age] = amount
    return adhoc


@dataclass(frozen=True, slots=True)
class TaxParameters:
    """Simplified UK tax model for one simulation; money in pence."""

    personal_allowance: int
    state_pension_annual: int
    basic_rate: float
    basic_rate_band_width: int
    tax_free_portion: float = DEFAULT_TAX_FREE_PORTION
    pension_growth_rate: float = DEFAULT_PENSION_GROWTH_RATE
    no_income_contribution_limit_gross: int = to_pence(DEFAULT_NO_INCOME_CONTRIBUTION_LIMIT_GROSS)
    start_age: int = MIN_AGE
    end_age: int = MAX_AGE

    @property
    def taxed_portion(self) -> float:
        return 1.0 - self.tax_free_portion

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str, start_age: int, end_age: int) -> "TaxParameters":
        return cls(
            personal_allowance=_money(_optional(data, "personal_allowance", DEFAULT_PERSONAL_ALLOWANCE), f"{path}.personal_allowance"),
            state_pension_annual=_money(
                _optional(data, "state_pension_annual", DEFAULT_STATE_PENSION_ANNUAL), f"{path}.state_pension_annual"
            ),
            basic_rate=_number(_optional(data, "basic_rate", DEFAULT_BASIC_RATE), f"{path}.basic_rate"),
            basic_rate_band_width=_money(
                _optional(data, "basic_rate_band_width", DEFAULT_BASIC_RATE_BAND_WIDTH), f"{path}.basic_rate_band_width"
            ),
            tax_free_portion=_number(_optional(data, "tax_free_portion", DEFAULT_TAX_FREE_PORTION), f"{path}.tax_free_portion"),
            pension_growth_rate=_number(
                _optional(data, "pension_growth_rate", DEFAULT_PENSION_GROWTH_RATE), f"{path}.pension_growth_rate"
            ),
            no_income_contribution_limit_gross=_money(
                _optional(data, "no_income_contribution_limit_gross", DEFAULT_NO_INCOME_CONTRIBUTION_LIMIT_GROSS),
                f"{path}.no_income_contribution_limit_gross",
            ),
            start_age=start_age,
            end_age=end_age,
        )


@dataclass(slots=True)
class Savings:
    other: int
    isa: int

    @property
    def total(self) -> int:
        return self.other + self.isa

    @classmethod
    def from_value(cls, value: Any, path: str = "savings") -> "Savings":
        # A bare amount or {"total": ...} is a single undifferentiated pool.
        if not isinstance(value, dict):
            return cls(other=_money(value, path), isa=0)
        if "total" in value:
            if "other" in value or "isa" in value:
                raise SchemaError(f"{path}: use either total or other/isa, not both")
            return cls(other=_money(value["total"], f"{path}.total"), isa=0)
        return cls(
            other=_money(_optional(value, "other", 0), f"{path}.other"),
            isa=_money(_optional(value, "isa", 0), f"{path}.isa"),
        )


@dataclass(slots=True)
class AdhocWithdrawal:
    age: int
    amount: int

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str) -> "AdhocWithdrawal":
        return cls(
            age=_integer(_require(data, "age", path), f"{path}.age"),
            amount=_money(_require(data, "amount", path), f"{path}.amount"),
        )


def _adhoc_entries(value: Any, path: str = "adhoc_withdrawals") -> list[AdhocWithdrawal]:
    if value is None:
        return []
    if isinstance(value, str):
        return [AdhocWithdrawal(age=age, amount=amount) for age, amount in parse_adhoc(value).items()]
    return [
        AdhocWithdrawal.from_dict(_expect_dict(item, f"{path}[{idx}]"), f"{path}[{idx}]")
        for idx, item in enumerate(_expect_list(value, path))
    ]


@dataclass(slots=True)
class ReportSettings:
    kind: str = "comparison"
    strategies: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "report") -> "ReportSettings":
        strategies = [str(item) for item in _expect_list(_optional(data, "strategies", []), f"{path}.strategies")]
        return cls(kind=str(_optional(data, "kind", "comparison")), strategies=strategies)


@dataclass(slots=True)
class Plan:
    name: str
    savings: Savings
    pension: int
    spending_amounts: list[int]
    target_ages: list[int]
    adhoc_withdrawals: list[AdhocWithdrawal]
    tax: TaxParameters
    report: ReportSettings

    @property
    def start_age(self) -> int:
        return self.tax.start_age

    @property
    def end_age(self) -> int:
        return self.tax.end_age

    @property
    def adhoc(self) -> dict[int, int]:
        """Ad hoc withdrawals keyed by age."""
        return {item.age: item.amount for item in self.adhoc_withdrawals}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Plan":
        target_ages = [
            _integer(item, f"target_ages[{idx}]")
            for idx, item in enumerate(_expect_list(_require(data, "target_ages", "plan"), "target_ages"))
        ]
        start_age = min(target_ages, default=0)
        end_age = max(target_ages, default=0)
        return cls(
            name=str(_optional(data, "name", "Pension plan")),
            savings=Savings.from_value(_optional(data, "savings", 0)),
            pension=_money(_require(data, "pension", "plan"), "pension"),
            spending_amounts=[
                _money(item, f"spending_amounts[{idx}]")
                for idx, item in enumerate(_expect_list(_require(data, "spending_amounts", "plan"), "spending_amounts"))
            ],
            target_ages=target_ages,
            adhoc_withdrawals=_adhoc_entries(_optional(data, "adhoc_withdrawals")),
            tax=TaxParameters.from_dict(_expect_dict(_optional(data, "tax", {}), "tax"), "tax", start_age, end_age),
            report=ReportSettings.from_dict(_expect_dict(_optional(data, "report", {}), "report")),
        )


def load_plan(path: str | Path) -> Plan:
    """Load plan JSON into strongly-typed dataclasses."""
    source = Path(path)
    raw = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise SchemaError("plan: root must be a JSON object")
    return Plan.from_dict(raw)
