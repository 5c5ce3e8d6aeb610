"""Edge search for the Equity Edge Simulator.

Sweeps the edge over a fixed grid and picks one edge with a two-tier policy:

1. Among edges whose owner yield meets the target, maximize the tenant's
   ownership percentage (ties: higher tenant profit).
2. If no edge meets the target, maximize the owner's profit per year.

Ownership clamps to 0% and 100% create flat regions, so the whole grid is
evaluated rather than bisected.
"""

from __future__ import annotations

import logging

import numpy as np

from equity_edge_sim.constants import MONTHS_PER_YEAR
from equity_edge_sim.models import (
    OptimalEdgeResult,
    ResolvedParams,
    SimulationParams,
    SimulationResult,
)
from equity_edge_sim.params import resolve_params
from equity_edge_sim.simulator import simulate_edge

logger = logging.getLogger(__name__)

Candidate = tuple[float, SimulationResult]


def edge_grid(min_edge: float, max_edge: float, edge_step: float) -> np.ndarray:
    """Edges ``min_edge, min_edge + edge_step, ...`` strictly below ``max_edge``."""
    if edge_step <= 0:
        raise ValueError("edge_step must be positive")
    if min_edge >= max_edge:
        return np.empty(0)

    grid = np.arange(min_edge, max_edge, edge_step, dtype=float)
    return grid[grid < max_edge]


def evaluate_edges(params: SimulationParams | ResolvedParams) -> list[Candidate]:
    """Simulate every grid edge whose duration is within ``max_duration_years``."""
    p = resolve_params(params)
    candidates: list[Candidate] = []

    # Duration does not depend on the edge
    if p.duration_months / MONTHS_PER_YEAR >= p.max_duration_years:
        return candidates

    for edge in edge_grid(p.min_edge, p.max_edge, p.edge_step):
        edge = float(edge)
        result = simulate_edge(edge, p)
        if result is None:
            continue
        candidates.append((edge, result))

    return candidates


def select_target_candidate(
    candidates: list[Candidate], target_yield: float
) -> Candidate | None:
    """Pick the target-meeting edge that gives the tenant the most ownership."""
    chosen: Candidate | None = None
    for edge, result in candidates:
        if result.studentenwerk_yield < target_yield:
            continue
        if chosen is None:
            chosen = (edge, result)
            continue

        share = result.student_ownership_percentage
        chosen_share = chosen[1].student_ownership_percentage
        if share > chosen_share or (share == chosen_share and result.profit > chosen[1].profit):
            chosen = (edge, result)

    return chosen


def select_fallback(candidates: list[Candidate]) -> Candidate | None:
    """Pick the edge with the highest owner profit per year; first wins ties."""
    chosen: Candidate | None = None
    for edge, result in candidates:
        if chosen is None or result.studentenwerk_profit_per_year > chosen[1].studentenwerk_profit_per_year:
            chosen = (edge, result)
    return chosen


def find_optimal_edge(params: SimulationParams | ResolvedParams) -> OptimalEdgeResult | None:
    """Search the edge range for the best edge.

    Args:
        params: Simulation parameters, resolved or not

    Returns:
        Result at the chosen edge, whose ``profit`` is the owner's profit, or
        ``None`` if no edge in range is feasible

    Raises:
        MissingParameterError: If no renting period is given
        InvalidParameterError: If a parameter is outside its valid domain
    """
    p = resolve_params(params)
    candidates = evaluate_edges(p)

    chosen = select_target_candidate(candidates, p.target_owner_annual_yield)
    if chosen is None:
        chosen = select_fallback(candidates)

    if chosen is None:
        logger.debug(
            "No feasible edge in [%s, %s) for a %s month renting period",
            p.min_edge,
            p.max_edge,
            p.duration_months,
        )
        return None

    edge, result = chosen
    return OptimalEdgeResult.from_simulation(edge, result)
