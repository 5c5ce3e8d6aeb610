from __future__ import annotations

DEFAULT_MARKET_GROWTH: float = 1.065
DEFAULT_INFLATION_RATE: float = 0.018
DEFAULT_ADMIN_SAVINGS_PER_MONTH: float = 2000 / 12
DEFAULT_PROJECTION_YEARS: int = 5
DEFAULT_NUMBER_OF_ROOMMATES: int = 1

DEFAULT_TARGET_OWNER_ANNUAL_YIELD: float = 0.07
DEFAULT_MIN_EDGE: float = 0.01
DEFAULT_MAX_EDGE: float = 0.06
DEFAULT_EDGE_STEP: float = 0.0001
DEFAULT_MAX_DURATION_YEARS: float = 25

# Floor for per-year divisions when the renting period is zero
MIN_DURATION_YEARS: float = 0.0001
MONTHS_PER_YEAR: int = 12
