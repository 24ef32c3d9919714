"""Semantic validation and sanity checks for plans."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .money import format_gbp, to_pence
from .schema import Plan
from .strategies import Strategy
from .tax_data import (
    MAX_AGE,
    MIN_AGE,
    USUAL_NO_INCOME_CONTRIBUTION_LIMIT_GROSS,
    USUAL_TAX_FREE_PORTION,
)

REPORT_KINDS = {"comparison", "full"}
STRATEGY_NAMES = {strategy.value for strategy in Strategy}


@dataclass(slots=True)
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _check_enum(result: ValidationResult, path: str, value: str, allowed: Iterable[str]) -> None:
    allowed_set = set(allowed)
    if value not in allowed_set:
        expected = ", ".join(sorted(allowed_set))
        result.errors.append(f"{path}: '{value}' is not valid; expected one of [{expected}]")


def _check_non_negative(result: ValidationResult, path: str, pence: int) -> None:
    if pence < 0:
        result.errors.append(f"{path}: must be >= 0")


def _check_fraction(result: ValidationResult, path: str, value: float) -> None:
    if value < 0:
        result.errors.append(f"{path}: must be >= 0")
    elif value >= 1:
        result.errors.append(f"{path}: must be < 1")


def validate_plan(plan: Plan) -> ValidationResult:
    result = ValidationResult()

    if not plan.target_ages:
        result.errors.append("target_ages: at least one target age is required")
    for idx, age in enumerate(plan.target_ages):
        if age < MIN_AGE or age > MAX_AGE:
            result.errors.append(f"target_ages[{idx}]: age {age} must be between {MIN_AGE} and {MAX_AGE}")

    if not plan.spending_amounts:
        result.errors.append("spending_amounts: at least one annual spending amount is required")
    seen_amounts: set[int] = set()
    for idx, amount in enumerate(plan.spending_amounts):
        _check_non_negative(result, f"spending_amounts[{idx}]", amount)
        if amount in seen_amounts:
            result.warnings.append(f"spending_amounts[{idx}]: duplicate amount {format_gbp(amount)}")
        seen_amounts.add(amount)

    _check_non_negative(result, "pension", plan.pension)
    _check_non_negative(result, "savings.other", plan.savings.other)
    _check_non_negative(result, "savings.isa", plan.savings.isa)

    tax = plan.tax
    _check_non_negative(result, "tax.personal_allowance", tax.personal_allowance)
    _check_non_negative(result, "tax.state_pension_annual", tax.state_pension_annual)
    _check_non_negative(result, "tax.basic_rate_band_width", tax.basic_rate_band_width)
    _check_non_negative(result, "tax.no_income_contribution_limit_gross", tax.no_income_contribution_limit_gross)
    _check_fraction(result, "tax.basic_rate", tax.basic_rate)
    _check_fraction(result, "tax.tax_free_portion", tax.tax_free_portion)
    if tax.pension_growth_rate <= -1:
        result.errors.append("tax.pension_growth_rate: must be > -1")

    seen_ages: set[int] = set()
    for idx, item in enumerate(plan.adhoc_withdrawals):
        base = f"adhoc_withdrawals[{idx}]"
        if item.age <= 0:
            result.errors.append(f"{base}.age: must be > 0")
        elif item.age in seen_ages:
            result.errors.append(f"{base}.age: duplicate age {item.age}")
        elif plan.target_ages and not plan.start_age <= item.age <= plan.end_age:
            result.warnings.append(
                f"{base}.age: {item.age} is outside ages {plan.start_age}-{plan.end_age} and has no effect"
            )
        seen_ages.add(item.age)
        _check_non_negative(result, f"{base}.amount", item.amount)

    _check_enum(result, "report.kind", plan.report.kind, REPORT_KINDS)
    for idx, name in enumerate(plan.report.strategies):
        _check_enum(result, f"report.strategies[{idx}]", name, STRATEGY_NAMES)

    return result


def check_plan_sanity(plan: Plan) -> ValidationResult:
    """Warnings for plans that are valid but probably not what was meant."""
    result = ValidationResult()
    tax = plan.tax

    if plan.pension <= 0 and plan.savings.total <= 0:
        result.warnings.append("pension/savings: no funds to draw from; every year will be a shortfall")
    if tax.state_pension_annual > tax.personal_allowance:
        result.warnings.append(
            "tax.state_pension_annual: exceeds the personal allowance, so part of the state pension is taxed "
            "and the basic-rate band shrinks"
        )
    if tax.tax_free_portion > USUAL_TAX_FREE_PORTION:
        result.warnings.append(
            f"tax.tax_free_portion: {tax.tax_free_portion:.0%} is above the usual {USUAL_TAX_FREE_PORTION:.0%}"
        )
    usual_limit = to_pence(USUAL_NO_INCOME_CONTRIBUTION_LIMIT_GROSS)
    if tax.no_income_contribution_limit_gross > usual_limit:
        result.warnings.append(
            f"tax.no_income_contribution_limit_gross: {format_gbp(tax.no_income_contribution_limit_gross)} "
            f"is above the usual {format_gbp(usual_limit)} for people with no earnings"
        )
    if tax.pension_growth_rate > 0.10:
        result.warnings.append(
            f"tax.pension_growth_rate: {tax.pension_growth_rate:.1%} real growth per year is optimistic"
        )
    return result
