"""Parameter resolution for the Equity Edge Simulator.

Resolves legacy fallbacks (yearly rent, yearly renting period, yearly admin
savings) and validates the result once, so the simulation body only ever
sees a fully populated :class:`ResolvedParams`.
"""

from __future__ import annotations

import math
import numbers

from equity_edge_sim.constants import DEFAULT_ADMIN_SAVINGS_PER_MONTH, MONTHS_PER_YEAR
from equity_edge_sim.errors import InvalidParameterError, MissingParameterError
from equity_edge_sim.models import ResolvedParams, SimulationParams


def _require_finite(name: str, value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidParameterError(f"{name} must be a finite number, got {value}")
    return float(value)


def _resolve_rent_per_month(params: SimulationParams) -> float:
    if params.start_rent_per_month is not None:
        rent = _require_finite("start_rent_per_month", params.start_rent_per_month)
    elif params.start_rent_per_year:
        rent = _require_finite("start_rent_per_year", params.start_rent_per_year) / MONTHS_PER_YEAR
    else:
        rent = 0.0

    if rent < 0:
        raise InvalidParameterError(f"Rent must be non-negative, got {rent} per month")
    return rent


def _resolve_duration_months(params: SimulationParams) -> int:
    if params.renting_period_months is not None:
        months = _require_finite("renting_period_months", params.renting_period_months)
    elif params.renting_period_years is not None:
        years = _require_finite("renting_period_years", params.renting_period_years)
        months = years * MONTHS_PER_YEAR
    else:
        raise MissingParameterError(
            "renting_period_months (or legacy renting_period_years) must be provided"
        )
    return max(0, math.floor(months))


def _resolve_admin_savings(params: SimulationParams) -> float:
    if params.admin_savings_per_month is not None:
        return _require_finite("admin_savings_per_month", params.admin_savings_per_month)
    if params.admin_savings_per_year:
        return _require_finite("admin_savings_per_year", params.admin_savings_per_year) / MONTHS_PER_YEAR
    return DEFAULT_ADMIN_SAVINGS_PER_MONTH


def _resolve_student_rent(params: SimulationParams, rent_per_month: float, roommates: int) -> float:
    student_rent = params.student_rent_per_month
    if student_rent is not None:
        student_rent = _require_finite("student_rent_per_month", student_rent)
        if student_rent < 0:
            raise InvalidParameterError(
                f"student_rent_per_month must be non-negative, got {student_rent}"
            )
        if student_rent > 0:
            return student_rent
    return rent_per_month / roommates


def resolve_params(params: SimulationParams | ResolvedParams) -> ResolvedParams:
    """Resolve defaults and validate simulation parameters.

    Args:
        params: Caller-supplied parameters. Already resolved parameters are
            returned unchanged.

    Returns:
        Fully populated parameter record

    Raises:
        MissingParameterError: If no renting period is given
        InvalidParameterError: If a parameter is outside its valid domain
    """
    if isinstance(params, ResolvedParams):
        return params

    purchase_price = _require_finite("purchase_price", params.purchase_price)
    if purchase_price <= 0:
        raise InvalidParameterError(f"purchase_price must be positive, got {purchase_price}")

    rent_per_month = _resolve_rent_per_month(params)
    duration_months = _resolve_duration_months(params)

    roommates = math.floor(_require_finite("number_of_roommates", params.number_of_roommates))
    if roommates < 1:
        raise InvalidParameterError(
            f"number_of_roommates must be at least 1, got {params.number_of_roommates}"
        )
    student_rent = _resolve_student_rent(params, rent_per_month, roommates)

    market_growth = _require_finite("market_growth", params.market_growth)
    if market_growth <= 0:
        raise InvalidParameterError(f"market_growth must be positive, got {market_growth}")

    inflation_rate = _require_finite("inflation_rate", params.inflation_rate)
    if inflation_rate <= -1:
        raise InvalidParameterError(f"inflation_rate must be greater than -1, got {inflation_rate}")

    projection_years = math.floor(_require_finite("projection_years", params.projection_years))
    if projection_years < 0:
        raise InvalidParameterError(
            f"projection_years must be non-negative, got {params.projection_years}"
        )

    min_edge = _require_finite("min_edge", params.min_edge)
    max_edge = _require_finite("max_edge", params.max_edge)
    edge_step = _require_finite("edge_step", params.edge_step)
    if min_edge >= max_edge:
        raise InvalidParameterError(
            f"min_edge must be less than max_edge, got {min_edge} >= {max_edge}"
        )
    if edge_step <= 0:
        raise InvalidParameterError(f"edge_step must be positive, got {edge_step}")

    max_duration_years = _require_finite("max_duration_years", params.max_duration_years)
    if not max_duration_years > 0:
        raise InvalidParameterError(
            f"max_duration_years must be positive, got {params.max_duration_years}"
        )

    return ResolvedParams(
        purchase_price=purchase_price,
        rent_per_month=rent_per_month,
        duration_months=duration_months,
        number_of_roommates=roommates,
        student_rent_per_month=student_rent,
        market_growth=market_growth,
        inflation_rate=inflation_rate,
        admin_savings_per_month=_resolve_admin_savings(params),
        projection_years=projection_years,
        target_owner_annual_yield=_require_finite(
            "target_owner_annual_yield", params.target_owner_annual_yield
        ),
        min_edge=min_edge,
        max_edge=max_edge,
        edge_step=edge_step,
        max_duration_years=max_duration_years,
    )
