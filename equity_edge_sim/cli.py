"""Command-line interface for the Equity Edge Simulator.

Runs the edge optimizer, a single-edge simulation, an edge sweep, or listing
enrichment from a JSON file.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from equity_edge_sim.errors import EquityEdgeError, InvalidParameterError
from equity_edge_sim.listings import enrich_listings, filter_by_size, normalize_listing
from equity_edge_sim.metrics import break_even_edge, summary, sweep_edges
from equity_edge_sim.models import SimulationParams
from equity_edge_sim.params import resolve_params
from equity_edge_sim.simulator import EquityEdgeSimulator

# CLI flag -> SimulationParams field
PARAM_FLAGS: dict[str, str] = {
    "purchase_price": "purchase_price",
    "rent": "start_rent_per_month",
    "rent_per_year": "start_rent_per_year",
    "months": "renting_period_months",
    "years": "renting_period_years",
    "roommates": "number_of_roommates",
    "student_rent": "student_rent_per_month",
    "market_growth": "market_growth",
    "inflation": "inflation_rate",
    "projection_years": "projection_years",
    "target_yield": "target_owner_annual_yield",
    "min_edge": "min_edge",
    "max_edge": "max_edge",
    "edge_step": "edge_step",
    "max_duration_years": "max_duration_years",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Equity Edge Simulator")

    parser.add_argument("--params", type=Path, default=None, help="JSON file of simulation parameters")
    parser.add_argument("--purchase-price", type=float, default=None, help="Purchase price")
    parser.add_argument("--rent", type=float, default=None, help="Monthly rent for the whole unit")
    parser.add_argument("--rent-per-year", type=float, default=None, help="Yearly rent (legacy)")
    parser.add_argument("--months", type=int, default=None, help="Renting period in months")
    parser.add_argument("--years", type=float, default=None, help="Renting period in years (legacy)")
    parser.add_argument("--roommates", type=int, default=None, help="Number of roommates sharing the rent")
    parser.add_argument("--student-rent", type=float, default=None, help="Tenant's own monthly rent")
    parser.add_argument("--market-growth", type=float, default=None, help="Annual growth multiplier")
    parser.add_argument("--inflation", type=float, default=None, help="Annual discount rate")
    parser.add_argument("--projection-years", type=int, default=None, help="Years projected after move-out")
    parser.add_argument("--target-yield", type=float, default=None, help="Owner's target annual yield")
    parser.add_argument("--min-edge", type=float, default=None, help="Lowest edge searched")
    parser.add_argument("--max-edge", type=float, default=None, help="Edge search upper bound (exclusive)")
    parser.add_argument("--edge-step", type=float, default=None, help="Edge search step")
    parser.add_argument(
        "--max-duration-years", type=float, default=None, help="Longest accepted renting period"
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--edge", type=float, default=None, help="Simulate a single edge")
    mode.add_argument("--sweep", action="store_true", help="Summarize the whole edge range")
    mode.add_argument("--listings", type=Path, default=None, help="JSON file of raw listings to enrich")

    parser.add_argument(
        "--target-sqm", type=float, default=None, help="Only enrich listings of about this size"
    )
    parser.add_argument("--tolerance", type=float, default=5, help="Size tolerance in square meters")
    parser.add_argument("--limit", type=int, default=20, help="Most listings kept by the size filter")

    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def load_params(args: argparse.Namespace) -> dict[str, Any]:
    """Merge the parameter file with flags; flags win."""
    values: dict[str, Any] = {}
    if args.params is not None:
        data = json.loads(args.params.read_text())
        if not isinstance(data, dict):
            raise InvalidParameterError(
                f"Parameter file must hold a JSON object, got {type(data).__name__}"
            )
        values.update(data)
    for flag, field_name in PARAM_FLAGS.items():
        value = getattr(args, flag)
        if value is not None:
            values[field_name] = value
    return values


def load_listings(path: Path) -> list[dict[str, Any]]:
    data = json.loads(path.read_text())
    if isinstance(data, dict):
        data = data.get("results", [])
    if not isinstance(data, list) or not all(isinstance(raw, dict) for raw in data):
        raise InvalidParameterError("Listings file must hold a list of JSON objects")
    return [normalize_listing(raw) for raw in data]


def print_result(title: str, result: dict[str, Any]) -> None:
    print(title)
    print("=" * 40)
    for key, value in result.items():
        if isinstance(value, float):
            print(f"{key}: {value:,.4f}")
        else:
            print(f"{key}: {value}")


def run(args: argparse.Namespace) -> dict[str, Any]:
    """Execute the selected mode and return its JSON-ready output."""
    if args.listings is not None:
        kwargs = {} if args.target_yield is None else {"target_yield": args.target_yield}
        listings = load_listings(args.listings)
        if args.target_sqm is not None:
            listings = filter_by_size(listings, args.target_sqm, args.tolerance, args.limit)
        properties = enrich_listings(listings, args.months, **kwargs)
        return {"results": [prop.as_dict() for prop in properties]}

    params = resolve_params(SimulationParams.from_dict(load_params(args)))
    simulator = EquityEdgeSimulator(params)

    if args.edge is not None:
        result = simulator.simulate(args.edge)
        return {"edge": args.edge, "result": None if result is None else result.as_dict()}

    if args.sweep:
        return {
            "break_even_edge": break_even_edge(params),
            "summary": summary(sweep_edges(params), params.target_owner_annual_yield),
        }

    optimum = simulator.find_optimal_edge()
    return {"result": None if optimum is None else optimum.as_dict()}


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        output = run(args)
    except EquityEdgeError as exc:
        parser.error(str(exc))
    except (OSError, json.JSONDecodeError) as exc:
        parser.error(f"Cannot read input: {exc}")

    if "summary" in output:
        print(f"Break-even edge: {output['break_even_edge']:.4f}")
        print_result("Edge Sweep Summary", {
            k: v for k, v in output["summary"].items() if not isinstance(v, dict)
        })
    elif "results" in output:
        print(f"Enriched listings: {len(output['results'])}")
    elif output["result"] is None:
        print("No feasible edge in range")
    else:
        print_result("Equity Edge Simulator Results", output["result"])

    # Output JSON to stdout
    print("\n" + "=" * 40)
    print("JSON Output:")
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
