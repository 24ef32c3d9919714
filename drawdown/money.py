"""Integer pence arithmetic and GBP formatting."""

from __future__ import annotations

import math
import re

_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")


def round_pence(value: float) -> int:
    """Round to the nearest whole pence, halves toward +infinity."""
    return int(math.floor(value + 0.5))


def to_pence(value: str | int | float | None) -> int:
    """Convert a pounds amount (number or text such as '£1,250.50') to pence.

    Text that does not parse yields 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return round_pence(float(value) * 100)
    cleaned = _NON_NUMERIC_RE.sub("", str(value))
    if not cleaned:
        return 0
    try:
        number = float(cleaned)
    except ValueError:
        return 0
    return round_pence(number * 100)


def format_gbp(pence: int) -> str:
    sign = "-" if pence < 0 else ""
    return f"{sign}£{abs(pence) / 100:,.2f}"


def clamp_non_neg(pence: int) -> int:
    return pence if pence > 0 else 0


def mul_rate(pence: int, rate: float) -> int:
    return round_pence(pence * rate)


def div_rate(pence: int, rate: float) -> int:
    return round_pence(pence / rate)


def add_rate(rate: float) -> float:
    return 1.0 + rate
