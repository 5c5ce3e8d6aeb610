"""Listing enrichment for the Equity Edge Simulator.

Turns raw listings from the upstream real-estate feed into map-ready
:class:`Property` records carrying the optimizer's ownership figures. A
listing whose economics cannot be modelled is still returned, just without
derived fields.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping

from equity_edge_sim.constants import DEFAULT_TARGET_OWNER_ANNUAL_YIELD
from equity_edge_sim.errors import EquityEdgeError
from equity_edge_sim.models import Property, SimulationParams
from equity_edge_sim.optimizer import find_optimal_edge

logger = logging.getLogger(__name__)

LATITUDE_PATHS: tuple[tuple[str | int, ...], ...] = (
    ("latitude",),
    ("lat",),
    ("location", "lat"),
    ("geo", "lat"),
    ("geoLocation", "lat"),
    ("address", "lat"),
    ("address", "latitude"),
    ("coordinates", 1),
)
LONGITUDE_PATHS: tuple[tuple[str | int, ...], ...] = (
    ("longitude",),
    ("lng",),
    ("location", "lng"),
    ("geo", "lng"),
    ("geoLocation", "lon"),
    ("address", "lon"),
    ("address", "longitude"),
    ("coordinates", 0),
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _first_present(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _first_number(*values: Any) -> float | None:
    for value in values:
        if _is_number(value):
            return value
    return None


def _lookup(listing: Mapping[str, Any], path: tuple[str | int, ...]) -> Any:
    node: Any = listing
    for key in path:
        if isinstance(key, int):
            if not isinstance(node, (list, tuple)) or len(node) <= key:
                return None
            node = node[key]
        else:
            if not isinstance(node, Mapping):
                return None
            node = node.get(key)
        if node is None:
            return None
    return node


def _to_float(value: Any) -> float | None:
    if _is_number(value):
        return float(value)
    if isinstance(value, str) and value:
        try:
            return float(value.replace(",", "."))
        except ValueError:
            return None
    return None


def pick_coordinates(listing: Mapping[str, Any]) -> tuple[float, float] | None:
    """Find a (lat, lng) pair across the field names the feed uses.

    Returns:
        Coordinates, or None if the listing has no numeric pair
    """
    lat = _first_present(*(_lookup(listing, path) for path in LATITUDE_PATHS))
    lng = _first_present(*(_lookup(listing, path) for path in LONGITUDE_PATHS))

    lat_value = _to_float(lat)
    lng_value = _to_float(lng)
    if lat_value is None or lng_value is None:
        return None
    if not (math.isfinite(lat_value) and math.isfinite(lng_value)):
        return None
    return lat_value, lng_value


def normalize_listing(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Compact an upstream record to the fields the enrichment needs."""
    compact = {
        "id": raw.get("id"),
        "title": raw.get("title"),
        "rentPrice": _first_present(raw.get("rentPrice"), raw.get("rent"), raw.get("price")),
        "rooms": raw.get("rooms"),
        "squareMeter": _first_present(raw.get("squareMeter"), raw.get("size")),
        "zip": raw.get("zip"),
        "address": raw.get("address"),
        "buyingPrice": _first_present(raw.get("buyingPrice"), raw.get("priceBuying")),
        "pricePerSqm": _first_present(raw.get("pricePerSqm"), raw.get("pricePerMeter")),
    }
    coords = pick_coordinates(raw)
    if coords is not None:
        compact["lat"], compact["lng"] = coords
    return compact


def filter_by_size(
    listings: Iterable[Mapping[str, Any]],
    target_sqm: float = 100,
    tolerance: float = 5,
    limit: int = 20,
) -> list[Mapping[str, Any]]:
    """Keep listings within ``tolerance`` m² of ``target_sqm``, cheapest per m² first."""
    sized = [
        listing
        for listing in listings
        if _is_number(listing.get("squareMeter"))
        and abs(listing["squareMeter"] - target_sqm) <= tolerance
    ]

    def price_per_sqm(listing: Mapping[str, Any]) -> float:
        value = listing.get("pricePerSqm")
        return float(value) if _is_number(value) else math.inf

    return sorted(sized, key=price_per_sqm)[:limit]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def enrich_listing(
    listing: Mapping[str, Any],
    renting_months: int | None,
    target_yield: float = DEFAULT_TARGET_OWNER_ANNUAL_YIELD,
) -> Property | None:
    """Build a map-ready property, with ownership figures where computable.

    Args:
        listing: Raw or normalised listing
        renting_months: Tenant's planned renting period
        target_yield: Owner's target annual yield

    Returns:
        Property, or None if the listing has no coordinates
    """
    coords = pick_coordinates(listing)
    if coords is None:
        return None
    lat, lng = coords

    rent = _first_number(listing.get("rentPrice"), listing.get("rent"), listing.get("price")) or 0
    buying = _first_number(listing.get("buyingPrice"), listing.get("buying_price"))

    prop = Property(
        id=_first_present(listing.get("id"), listing.get("_id"), f"{lat}-{lng}"),
        lat=lat,
        lng=lng,
        title=_first_present(listing.get("title"), listing.get("address"), "Listing"),
        price=rent,
        sqm=_first_number(listing.get("squareMeter"), listing.get("size")),
        rooms=_first_number(listing.get("rooms")),
    )

    if not (buying and rent and _is_number(renting_months) and renting_months > 0):
        return prop

    try:
        optimum = find_optimal_edge(
            SimulationParams(
                purchase_price=buying,
                start_rent_per_month=rent,
                renting_period_months=renting_months,
                target_owner_annual_yield=target_yield,
            )
        )
    except EquityEdgeError as exc:
        logger.warning("Edge calculation failed for listing %s: %s", prop.id, exc)
        return prop

    if optimum is not None:
        prop.equity_percentage = _round_half_up(optimum.student_ownership_percentage)
        prop.student_ownership_percentage = optimum.student_ownership_percentage
        prop.ideal_edge = optimum.edge
    return prop


def enrich_listings(
    listings: Iterable[Mapping[str, Any]],
    renting_months: int | None,
    target_yield: float = DEFAULT_TARGET_OWNER_ANNUAL_YIELD,
) -> list[Property]:
    """Enrich every listing, dropping those without coordinates."""
    out: list[Property] = []
    skipped = 0
    for listing in listings:
        prop = enrich_listing(listing, renting_months, target_yield)
        if prop is None:
            skipped += 1
            continue
        out.append(prop)

    logger.info("Enriched %d listings, skipped %d without coordinates", len(out), skipped)
    return out
