"""Sweep and summary utilities for the Equity Edge Simulator.

Functions for tabulating simulation results across the whole edge range,
without the optimizer's duration and yield filtering.
"""

from __future__ import annotations

import numpy as np

from equity_edge_sim.models import ResolvedParams, SimulationParams
from equity_edge_sim.optimizer import edge_grid
from equity_edge_sim.params import resolve_params
from equity_edge_sim.simulator import simulate_edge

SWEEP_FIELDS: tuple[str, ...] = (
    "student_ownership_percentage",
    "profit",
    "studentenwerk_profit",
    "studentenwerk_profit_per_year",
    "studentenwerk_yield",
)


def break_even_edge(params: SimulationParams | ResolvedParams) -> float:
    """Edge at and above which the tenant accrues no ownership."""
    return resolve_params(params).annual_rent_to_price


def sweep_edges(params: SimulationParams | ResolvedParams) -> dict[str, np.ndarray]:
    """Simulate every edge of the configured grid.

    Args:
        params: Simulation parameters, resolved or not

    Returns:
        Dictionary of aligned arrays keyed by ``edge`` and the result fields
        in ``SWEEP_FIELDS``
    """
    p = resolve_params(params)
    edges = edge_grid(p.min_edge, p.max_edge, p.edge_step)

    columns: dict[str, list[float]] = {name: [] for name in SWEEP_FIELDS}
    kept_edges: list[float] = []
    for edge in edges:
        result = simulate_edge(float(edge), p)
        if result is None:
            continue
        kept_edges.append(float(edge))
        for name in SWEEP_FIELDS:
            columns[name].append(getattr(result, name))

    sweep = {"edge": np.array(kept_edges, dtype=float)}
    sweep.update({name: np.array(values, dtype=float) for name, values in columns.items()})
    return sweep


def quantiles(
    arr: np.ndarray, qs: tuple[float, ...] = (0.05, 0.5, 0.95)
) -> dict[float, float]:
    """Compute quantiles of an array; zeros for an empty array."""
    if len(arr) == 0:
        return {q: 0.0 for q in qs}

    computed_quantiles = np.quantile(arr, qs)
    return {q: float(v) for q, v in zip(qs, computed_quantiles)}


def yield_range(sweep: dict[str, np.ndarray]) -> tuple[float, float]:
    """Lowest and highest owner yield across a sweep."""
    yields = sweep["studentenwerk_yield"]
    if len(yields) == 0:
        return 0.0, 0.0
    return float(np.min(yields)), float(np.max(yields))


def share_meeting_target(sweep: dict[str, np.ndarray], target_yield: float) -> float:
    """Fraction of swept edges whose owner yield meets the target."""
    yields = sweep["studentenwerk_yield"]
    if len(yields) == 0:
        return 0.0
    return float(np.mean(yields >= target_yield))


def summary(
    sweep: dict[str, np.ndarray], target_yield: float
) -> dict[str, float | dict[float, float]]:
    """Generate summary statistics for an edge sweep.

    Args:
        sweep: Output of :func:`sweep_edges`
        target_yield: Owner's target annual yield

    Returns:
        Dictionary with summary statistics
    """
    ownership = sweep["student_ownership_percentage"]
    low, high = yield_range(sweep)

    return {
        "edges": int(len(sweep["edge"])),
        "owner_yield_min": low,
        "owner_yield_max": high,
        "owner_yield_quantiles": quantiles(sweep["studentenwerk_yield"]),
        "ownership_max": float(np.max(ownership)) if len(ownership) else 0.0,
        "ownership_quantiles": quantiles(ownership),
        "share_meeting_target": share_meeting_target(sweep, target_yield),
    }
