"""Tests for simulator module."""

import numpy as np
import pytest

from equity_edge_sim.errors import InvalidParameterError, MissingParameterError
from equity_edge_sim.models import SimulationParams
from equity_edge_sim.params import resolve_params
from equity_edge_sim.simulator import (
    EquityEdgeSimulator,
    market_growth_factor,
    ownership_fraction,
    simulate_edge,
)


def scenario_a(**overrides) -> SimulationParams:
    values = dict(
        purchase_price=300000.0,
        start_rent_per_month=1200.0,
        renting_period_months=36,
        number_of_roommates=1,
        target_owner_annual_yield=0.07,
    )
    values.update(overrides)
    return SimulationParams(**values)


def flat_params(**overrides) -> SimulationParams:
    """No growth and no discounting, so every figure is easy to check by hand."""
    values = dict(
        purchase_price=100000.0,
        start_rent_per_month=1000.0,
        renting_period_months=24,
        market_growth=1.0,
        inflation_rate=0.0,
    )
    values.update(overrides)
    return SimulationParams(**values)


def test_simulate_hand_computed():
    """Test every result field against a hand-computed case."""
    result = simulate_edge(0.02, flat_params())

    # Accrual 12% - 2% = 10% per year over 2 years
    assert result.duration_months == 24
    assert result.student_ownership_percentage == pytest.approx(20.0)
    assert result.student_equity_value == pytest.approx(20000.0)
    assert result.total_rent_paid_pv == pytest.approx(24000.0)
    assert result.profit == pytest.approx(-4000.0)
    assert result.studentenwerk_profit == pytest.approx(4000.0)
    assert result.studentenwerk_profit_per_year == pytest.approx(2000.0)
    assert result.studentenwerk_yield == pytest.approx(0.02)
    assert result.projected_annual_cashflow_at_move_out == pytest.approx(2400.0)
    assert result.projected_future_npv == pytest.approx(12000.0)


def test_simulate_roommates():
    """Test the tenant only pays and accrues on their share of the rent."""
    result = simulate_edge(0.02, flat_params(number_of_roommates=2))

    # Tenant ratio 6% - 2% = 4% per year over 2 years
    assert result.student_ownership_percentage == pytest.approx(8.0)
    assert result.total_rent_paid_pv == pytest.approx(12000.0)
    # Owner still collects the whole unit's rent
    assert result.studentenwerk_profit == pytest.approx(92000.0 + 24000.0 - 100000.0)


def test_simulate_with_growth_and_discounting():
    """Test market growth on fractional years and discounted rent."""
    result = simulate_edge(0.01, scenario_a())

    market_value = 300000.0 * 1.065**3
    fraction = (14400.0 / 300000.0 - 0.01) * 3
    rent_pv = sum(1200.0 / 1.018 ** (m / 12) for m in range(36))

    assert result.student_ownership_percentage == pytest.approx(fraction * 100)
    assert result.student_equity_value == pytest.approx(market_value * fraction)
    assert result.total_rent_paid_pv == pytest.approx(rent_pv)
    assert result.studentenwerk_profit == pytest.approx(
        market_value * (1 - fraction) + rent_pv - 300000.0
    )


def test_simulate_is_pure():
    """Test identical inputs give identical results."""
    params = scenario_a()
    assert simulate_edge(0.0234, params) == simulate_edge(0.0234, params)
    assert simulate_edge(0.0234, params) == simulate_edge(0.0234, resolve_params(params))


def test_ownership_within_bounds():
    """Test ownership percentage stays within [0, 100] for any edge."""
    params = scenario_a(renting_period_months=600, max_duration_years=100)
    for edge in np.linspace(-0.1, 0.2, 61):
        result = simulate_edge(float(edge), params)
        assert 0.0 <= result.student_ownership_percentage <= 100.0


def test_ownership_clamps_to_full():
    """Test ownership clamps at 100% for long periods."""
    result = simulate_edge(0.0, flat_params(renting_period_months=240))

    assert result.student_ownership_percentage == 100.0
    assert result.studentenwerk_profit == pytest.approx(240 * 1000.0 - 100000.0)


def test_edge_above_break_even():
    """Test no ownership accrues once the edge exceeds the rent-to-price ratio."""
    params = scenario_a()
    result = simulate_edge(0.05, params)

    assert result.student_ownership_percentage == 0.0
    assert result.student_equity_value == 0.0
    assert result.profit == -result.total_rent_paid_pv
    assert result.profit < 0
    assert result.projected_future_npv == 0.0


def test_edge_at_break_even():
    """Test accrual rate of exactly zero is not an error."""
    params = resolve_params(scenario_a())
    assert ownership_fraction(params.annual_rent_to_price, params) == 0.0


def test_zero_duration():
    """Test the zero-month boundary."""
    result = simulate_edge(0.02, scenario_a(renting_period_months=0))

    assert result.duration_months == 0
    assert result.total_rent_paid_pv == 0.0
    assert result.student_ownership_percentage == 0.0
    assert result.student_equity_value == 0.0
    assert result.profit == 0.0
    assert result.studentenwerk_profit == 0.0
    assert result.studentenwerk_yield == 0.0


def test_yield_monotonic_in_edge():
    """Test owner yield does not decrease as the edge grows."""
    params = resolve_params(scenario_a())
    yields = [
        simulate_edge(float(edge), params).studentenwerk_yield
        for edge in np.arange(0.0, 0.06, 0.001)
    ]
    assert np.all(np.diff(yields) >= -1e-12)


def test_simulate_missing_period():
    """Test that missing renting period raises."""
    with pytest.raises(MissingParameterError):
        simulate_edge(0.02, scenario_a(renting_period_months=None))


def test_simulate_invalid_price():
    """Test that a non-positive price raises."""
    with pytest.raises(InvalidParameterError):
        simulate_edge(0.02, scenario_a(purchase_price=0.0))


def test_simulator_facade():
    """Test EquityEdgeSimulator matches the module functions."""
    params = scenario_a()
    simulator = EquityEdgeSimulator(params)

    assert simulator.simulate(0.02) == simulate_edge(0.02, params)
    optimum = simulator.find_optimal_edge()
    assert optimum is not None
    assert 0.01 <= optimum.edge < 0.06


def test_simulator_facade_validates_on_construction():
    """Test parameters are validated once, up front."""
    with pytest.raises(InvalidParameterError, match="edge_step"):
        EquityEdgeSimulator(scenario_a(edge_step=0.0))


def test_market_growth_factor():
    """Test the growth multiplier on fractional years."""
    assert market_growth_factor(1.065, 0.0) == 1.0
    assert market_growth_factor(1.21, 0.5) == pytest.approx(1.1)


def test_growth_overflow_raises():
    """Test a renting period too long for float range is a parameter error."""
    with pytest.raises(InvalidParameterError, match="too long to simulate"):
        market_growth_factor(1.065, 250000.0)
    with pytest.raises(InvalidParameterError, match="too long to simulate"):
        simulate_edge(0.02, scenario_a(renting_period_months=3_000_000, max_duration_years=1e6))
