"""UK tax and pension reference values used as plan defaults."""

from __future__ import annotations

from typing import Final

# Money defaults are in pounds; the schema converts them to pence.
DEFAULT_PERSONAL_ALLOWANCE: Final[float] = 12_570.00
DEFAULT_STATE_PENSION_ANNUAL: Final[float] = 11_973.00
DEFAULT_BASIC_RATE: Final[float] = 0.20
DEFAULT_BASIC_RATE_BAND_WIDTH: Final[float] = 37_700.00
DEFAULT_TAX_FREE_PORTION: Final[float] = 0.25
DEFAULT_PENSION_GROWTH_RATE: Final[float] = 0.04
DEFAULT_NO_INCOME_CONTRIBUTION_LIMIT_GROSS: Final[float] = 3_600.00

STATE_PENSION_AGE: Final[int] = 67
CONTRIBUTION_MAX_AGE: Final[int] = 75

MIN_AGE: Final[int] = 55
MAX_AGE: Final[int] = 99

# Sanity thresholds (warnings only).
USUAL_TAX_FREE_PORTION: Final[float] = 0.25
USUAL_NO_INCOME_CONTRIBUTION_LIMIT_GROSS: Final[float] = 3_600.00
