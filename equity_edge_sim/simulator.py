"""Simulation engine for the Equity Edge Simulator.

Simulates, for one fixed edge, how ownership of a property moves from the
owner to the tenant over the renting period and what each side earns.
"""

from __future__ import annotations

import math

from equity_edge_sim.constants import MIN_DURATION_YEARS, MONTHS_PER_YEAR
from equity_edge_sim.discounting import projected_npv, pv_of_monthly_payments
from equity_edge_sim.errors import InvalidParameterError
from equity_edge_sim.models import (
    OptimalEdgeResult,
    ResolvedParams,
    SimulationParams,
    SimulationResult,
)
from equity_edge_sim.params import resolve_params


def market_growth_factor(market_growth: float, years: float) -> float:
    """Asset value multiplier after ``years`` of annual growth.

    Raises:
        InvalidParameterError: If the multiplier exceeds float range
    """
    try:
        return market_growth**years
    except OverflowError:
        raise InvalidParameterError(
            f"Renting period of {years} years is too long to simulate "
            f"with market_growth {market_growth}"
        ) from None


def ownership_fraction(edge: float, params: ResolvedParams) -> float:
    """Share of the property accrued by the tenant at move-out, in [0, 1].

    The tenant accrues ownership each year from the part of their annual
    rent-to-price ratio that exceeds the edge.
    """
    accrual_rate = params.annual_rent_to_price - edge
    if accrual_rate <= 0:
        return 0.0
    return min(1.0, accrual_rate * params.duration_years)


def simulate_edge(
    edge: float, params: SimulationParams | ResolvedParams
) -> SimulationResult | None:
    """Run a single simulation for a fixed edge.

    Args:
        edge: Fraction of the annual rent-to-price ratio retained by the owner
        params: Simulation parameters, resolved or not

    Returns:
        Simulation result. The return type admits ``None`` so callers handle
        an infeasible simulation the same way as an infeasible search.

    Raises:
        MissingParameterError: If no renting period is given
        InvalidParameterError: If a parameter is outside its valid domain
    """
    p = resolve_params(params)
    duration_years = p.duration_years

    fraction = ownership_fraction(edge, p)

    growth_factor = market_growth_factor(p.market_growth, duration_years)
    market_value_at_move_out = p.purchase_price * growth_factor
    if not math.isfinite(market_value_at_move_out):
        raise InvalidParameterError(
            f"Market value after {duration_years} years exceeds float range"
        )
    student_equity_value = market_value_at_move_out * fraction

    total_rent_paid_pv = pv_of_monthly_payments(
        p.student_rent_per_month, p.duration_months, p.inflation_rate
    )
    total_rents_collected_pv = pv_of_monthly_payments(
        p.rent_per_month, p.duration_months, p.inflation_rate
    )

    # Tenant's share of the whole unit's rent, grown to move-out
    annual_rent_at_move_out = p.rent_per_month * MONTHS_PER_YEAR * growth_factor
    annual_cashflow_at_move_out = annual_rent_at_move_out * fraction
    future_npv = projected_npv(
        annual_cashflow_at_move_out, p.projection_years, p.market_growth, p.inflation_rate
    )

    owner_retained_value = market_value_at_move_out * (1 - fraction)
    owner_profit = owner_retained_value + total_rents_collected_pv - p.purchase_price
    owner_profit_per_year = owner_profit / max(MIN_DURATION_YEARS, duration_years)
    owner_yield = owner_profit_per_year / max(1.0, p.purchase_price)

    return SimulationResult(
        profit=student_equity_value - total_rent_paid_pv,
        duration_months=p.duration_months,
        student_ownership_percentage=fraction * 100,
        student_equity_value=student_equity_value,
        total_rent_paid_pv=total_rent_paid_pv,
        projected_annual_cashflow_at_move_out=annual_cashflow_at_move_out,
        projected_future_npv=future_npv,
        studentenwerk_profit=owner_profit,
        studentenwerk_profit_per_year=owner_profit_per_year,
        studentenwerk_yield=owner_yield,
    )


class EquityEdgeSimulator:
    """Simulator bound to one parameter set.

    Parameters are resolved and validated once on construction.
    """

    def __init__(self, params: SimulationParams | ResolvedParams):
        self.params = resolve_params(params)

    def simulate(self, edge: float) -> SimulationResult | None:
        return simulate_edge(edge, self.params)

    def find_optimal_edge(self) -> OptimalEdgeResult | None:
        from equity_edge_sim.optimizer import find_optimal_edge

        return find_optimal_edge(self.params)
