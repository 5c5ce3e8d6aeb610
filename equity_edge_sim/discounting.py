"""Present-value primitives for the Equity Edge Simulator.

Monthly cashflows are discounted with an annual rate applied to fractional
years, i.e. month ``m`` is discounted by ``(1 + rate) ** (m / 12)``.
"""

from __future__ import annotations

import numpy as np

from equity_edge_sim.constants import MONTHS_PER_YEAR


def monthly_discount_factors(months: int, annual_rate: float) -> np.ndarray:
    """Discount factors for months ``0 .. months - 1``.

    Args:
        months: Number of monthly payments
        annual_rate: Annual discount rate as a fraction

    Returns:
        Array of shape (months,); empty when months is 0
    """
    if months < 0:
        raise ValueError("Cannot discount a negative number of months")

    elapsed_years = np.arange(months, dtype=float) / MONTHS_PER_YEAR
    return 1.0 / np.power(1.0 + annual_rate, elapsed_years)


def pv_of_monthly_payments(payment: float, months: int, annual_rate: float) -> float:
    """Present value at t=0 of a constant payment made at the start of each month."""
    if months == 0:
        return 0.0
    return float(np.sum(payment * monthly_discount_factors(months, annual_rate)))


def projected_npv(
    first_year_cashflow: float, years: int, growth: float, annual_rate: float
) -> float:
    """Present value of a growing annual cashflow received at the end of each year.

    The cashflow in year ``y`` is ``first_year_cashflow * growth ** (y - 1)``,
    discounted by ``(1 + annual_rate) ** y``.

    Args:
        first_year_cashflow: Cashflow received at the end of the first year
        years: Number of projected years
        growth: Annual growth multiplier of the cashflow
        annual_rate: Annual discount rate as a fraction

    Returns:
        Sum of discounted cashflows; 0.0 when years is 0
    """
    if years < 0:
        raise ValueError("Cannot project a negative number of years")
    if years == 0:
        return 0.0

    y = np.arange(1, years + 1, dtype=float)
    cashflows = first_year_cashflow * np.power(growth, y - 1)
    return float(np.sum(cashflows / np.power(1.0 + annual_rate, y)))
