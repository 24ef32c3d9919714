"""UFPLS gross-up and income tax helpers for pension withdrawals.

Every multiply or divide by a rate is rounded to whole pence immediately.
Totals depend on that ordering, so keep it when changing formulas.
"""

from __future__ import annotations

from dataclasses import dataclass

from .money import clamp_non_neg, div_rate, mul_rate
from .schema import TaxParameters
from .tax_data import STATE_PENSION_AGE


@dataclass(slots=True)
class PensionWithdrawal:
    gross: int = 0
    taxable: int = 0
    allowance_used: int = 0
    tax: int = 0

    @property
    def net(self) -> int:
        return self.gross - self.tax


def state_pension_for_age(age: int, params: TaxParameters) -> int:
    return params.state_pension_annual if age >= STATE_PENSION_AGE else 0


def allowance_for_age(age: int, params: TaxParameters) -> int:
    """Personal allowance left for pension withdrawals once state pension is counted."""
    return clamp_non_neg(params.personal_allowance - state_pension_for_age(age, params))


def ufpls_net_factor(tax_free_portion: float, basic_rate: float) -> float:
    """Net pounds received per gross pound once the allowance is used up."""
    return tax_free_portion + (1.0 - tax_free_portion) * (1.0 - basic_rate)


def ufpls_tax_split(gross: int, *, allowance_left: int, tax_free_portion: float, basic_rate: float) -> PensionWithdrawal:
    """Tax on a UFPLS withdrawal of ``gross``.

    The taxable slice is shielded by ``allowance_left`` first; the rest pays
    ``basic_rate``.
    """
    taxable = mul_rate(gross, 1.0 - tax_free_portion)
    zero_tax = min(taxable, clamp_non_neg(allowance_left))
    taxed_above = clamp_non_neg(taxable - zero_tax)
    return PensionWithdrawal(
        gross=gross,
        taxable=taxable,
        allowance_used=zero_tax,
        tax=mul_rate(taxed_above, basic_rate),
    )


def ufpls_gross_for_net(net_needed: int, *, allowance_left: int, tax_free_portion: float, basic_rate: float) -> int:
    """Gross UFPLS withdrawal expected to yield ``net_needed`` after tax.

    While the taxable slice fits inside the allowance no tax arises and gross
    equals net. Beyond that, solves net = gross * (1 - T*r) + allowance * r.
    """
    if net_needed <= 0:
        return 0
    allowance_left = clamp_non_neg(allowance_left)
    taxed_portion = 1.0 - tax_free_portion
    if net_needed <= div_rate(allowance_left, taxed_portion):
        return net_needed
    adjusted_need = clamp_non_neg(net_needed - mul_rate(allowance_left, basic_rate))
    return div_rate(adjusted_need, ufpls_net_factor(tax_free_portion, basic_rate))


def ufpls_withdrawal(
    net_needed: int,
    *,
    allowance_left: int,
    pension: int,
    tax_free_portion: float,
    basic_rate: float,
) -> PensionWithdrawal:
    """Gross up ``net_needed`` and withdraw it from ``pension`` (capped at the pot)."""
    if net_needed <= 0 or pension <= 0:
        return PensionWithdrawal()
    gross = ufpls_gross_for_net(
        net_needed,
        allowance_left=allowance_left,
        tax_free_portion=tax_free_portion,
        basic_rate=basic_rate,
    )
    return ufpls_tax_split(
        min(gross, pension),
        allowance_left=allowance_left,
        tax_free_portion=tax_free_portion,
        basic_rate=basic_rate,
    )


def income_tax_withdrawal(net_needed: int, *, allowance_left: int, pension: int, basic_rate: float) -> PensionWithdrawal:
    """Withdrawal from an already crystallised pot: every pound is taxable."""
    if net_needed <= 0 or pension <= 0:
        return PensionWithdrawal()
    allowance_left = clamp_non_neg(allowance_left)
    if net_needed <= allowance_left:
        gross = net_needed
    else:
        gross = allowance_left + div_rate(net_needed - allowance_left, 1.0 - basic_rate)
    gross = min(gross, pension)
    zero_tax = min(gross, allowance_left)
    return PensionWithdrawal(
        gross=gross,
        taxable=gross,
        allowance_used=zero_tax,
        tax=mul_rate(gross - zero_tax, basic_rate),
    )


def allowance_fill_withdrawal(
    *,
    allowance_left: int,
    pension: int,
    tax_free_portion: float,
    cap: int | None = None,
) -> PensionWithdrawal:
    """Largest UFPLS withdrawal whose taxable slice stays inside the allowance."""
    if allowance_left <= 0 or pension <= 0:
        return PensionWithdrawal()
    taxed_portion = 1.0 - tax_free_portion
    gross = min(div_rate(allowance_left, taxed_portion), pension)
    if cap is not None:
        gross = min(gross, clamp_non_neg(cap))
    if gross <= 0:
        return PensionWithdrawal()
    taxable = mul_rate(gross, taxed_portion)
    return PensionWithdrawal(gross=gross, taxable=taxable, allowance_used=min(taxable, allowance_left), tax=0)


def band_fill_withdrawal(
    *,
    allowance_left: int,
    pension: int,
    state_pension: int,
    params: TaxParameters,
) -> PensionWithdrawal:
    """UFPLS withdrawal that fills what is left of the basic-rate band.

    Taxable state pension above the personal allowance occupies the band first.
    """
    if pension <= 0:
        return PensionWithdrawal()
    taxable_state_pension = clamp_non_neg(state_pension - params.personal_allowance)
    remaining_band = clamp_non_neg(params.basic_rate_band_width - taxable_state_pension)
    if remaining_band <= 0:
        return PensionWithdrawal()
    allowance_left = clamp_non_neg(allowance_left)
    gross = min(div_rate(remaining_band + allowance_left, params.taxed_portion), pension)
    if gross <= 0:
        return PensionWithdrawal()
    return ufpls_tax_split(
        gross,
        allowance_left=allowance_left,
        tax_free_portion=params.tax_free_portion,
        basic_rate=params.basic_rate,
    )
