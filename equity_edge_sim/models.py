"""Data models for the Equity Edge Simulator.

Contains the caller-facing parameter record, its resolved internal form, and
the result records produced by the simulator and the optimizer.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping

from equity_edge_sim.constants import (
    DEFAULT_EDGE_STEP,
    DEFAULT_INFLATION_RATE,
    DEFAULT_MARKET_GROWTH,
    DEFAULT_MAX_DURATION_YEARS,
    DEFAULT_MAX_EDGE,
    DEFAULT_MIN_EDGE,
    DEFAULT_NUMBER_OF_ROOMMATES,
    DEFAULT_PROJECTION_YEARS,
    DEFAULT_TARGET_OWNER_ANNUAL_YIELD,
    MONTHS_PER_YEAR,
)
from equity_edge_sim.errors import InvalidParameterError, MissingParameterError


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass
class SimulationParams:
    """Caller-supplied configuration for a simulation or an edge search.

    Monetary values share one currency unit; rates are fractions. Optional
    fields use ``None`` for absence and are resolved by
    :func:`equity_edge_sim.params.resolve_params`.
    """

    purchase_price: float
    start_rent_per_month: float | None = None
    start_rent_per_year: float | None = None
    renting_period_months: float | None = None
    renting_period_years: float | None = None
    number_of_roommates: int = DEFAULT_NUMBER_OF_ROOMMATES
    student_rent_per_month: float | None = None
    market_growth: float = DEFAULT_MARKET_GROWTH
    inflation_rate: float = DEFAULT_INFLATION_RATE
    admin_savings_per_month: float | None = None
    admin_savings_per_year: float | None = None
    projection_years: int = DEFAULT_PROJECTION_YEARS
    target_owner_annual_yield: float = DEFAULT_TARGET_OWNER_ANNUAL_YIELD
    min_edge: float = DEFAULT_MIN_EDGE
    max_edge: float = DEFAULT_MAX_EDGE
    edge_step: float = DEFAULT_EDGE_STEP
    max_duration_years: float = DEFAULT_MAX_DURATION_YEARS

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SimulationParams:
        """Build params from a mapping with snake_case or camelCase keys.

        Keys whose value is ``None`` are treated as absent, so tuned fields
        fall back to their defaults.
        """
        names = {f.name: f.name for f in fields(cls)}
        names.update({_camel(f.name): f.name for f in fields(cls)})

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key not in names:
                raise InvalidParameterError(f"Unknown simulation parameter: {key}")
            if value is not None:
                kwargs[names[key]] = value

        if "purchase_price" not in kwargs:
            raise MissingParameterError("purchase_price must be provided")
        return cls(**kwargs)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ResolvedParams:
    """Fully populated, validated parameters used by the simulation body."""

    purchase_price: float
    rent_per_month: float
    duration_months: int
    number_of_roommates: int
    student_rent_per_month: float
    market_growth: float
    inflation_rate: float
    admin_savings_per_month: float
    projection_years: int
    target_owner_annual_yield: float
    min_edge: float
    max_edge: float
    edge_step: float
    max_duration_years: float

    @property
    def duration_years(self) -> float:
        return self.duration_months / MONTHS_PER_YEAR

    @property
    def annual_rent_to_price(self) -> float:
        """Tenant's annual rent over the purchase price.

        Edges at or above this value leave no room for ownership accrual.
        """
        return self.student_rent_per_month * MONTHS_PER_YEAR / self.purchase_price


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of one simulation at a fixed edge.

    ``profit`` is the tenant's equity value at move-out minus the present
    value of the rent they paid. The ``studentenwerk_*`` fields describe the
    owner.
    """

    profit: float
    duration_months: int
    student_ownership_percentage: float
    student_equity_value: float
    total_rent_paid_pv: float
    projected_annual_cashflow_at_move_out: float
    projected_future_npv: float
    studentenwerk_profit: float
    studentenwerk_profit_per_year: float
    studentenwerk_yield: float

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class OptimalEdgeResult(SimulationResult):
    """Simulation result at the edge chosen by the optimizer.

    Unlike :class:`SimulationResult`, ``profit`` here is the owner's profit
    for the chosen edge. The tenant's figure is kept as ``tenant_profit``.
    """

    edge: float
    tenant_profit: float

    @property
    def owner_profit_at_optimal_edge(self) -> float:
        return self.profit

    @classmethod
    def from_simulation(cls, edge: float, result: SimulationResult) -> OptimalEdgeResult:
        values = asdict(result)
        values["profit"] = result.studentenwerk_profit
        return cls(edge=edge, tenant_profit=result.profit, **values)


@dataclass
class Property:
    """A map-ready listing enriched with the optimizer's ownership figures."""

    id: str | int
    lat: float
    lng: float
    title: str
    price: float
    sqm: float | None = None
    rooms: float | None = None
    # Rounded to a whole percentage
    equity_percentage: int = 0
    student_ownership_percentage: float | None = None
    ideal_edge: float | None = None

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)
