"""
Quote Pricing Service -- prices every vehicle on a quote or order and
builds the documents that the quote/order layer persists.

Responsibilities on top of the pure engine:

- Normalise stored policy documents (legacy modifier sets included).
- Resolve mileage (routed miles, or a straight-line estimate from
  coordinates) and the route bucket.
- Carry a previously quoted commission across recalculation.
- Log dimension keys the modifier set does not know about.

Nothing here touches storage: the caller reads the modifier set, portal and
any previous quote document, then writes ``QuotePricing.to_document()``
back in a single update.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from shipquote.core.currency import is_finite_number
from shipquote.core.exceptions import InvalidInputError
from shipquote.models import (
    AnyModifierSet,
    ModifierSet,
    Portal,
    TotalPricingResult,
    TransportType,
    Vehicle,
    VehiclePricingResult,
    load_modifier_set,
    load_portal,
    load_vehicle,
)
from shipquote.services.geoService import estimate_miles, route_bucket_for_miles, state_code
from shipquote.services.modifierResolver import is_known_key
from shipquote.services.totalPricing import calculate_total_pricing
from shipquote.services.vehiclePricing import calculate_vehicle_pricing

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request / response DTOs
# ---------------------------------------------------------------------------

Coordinates = tuple[float, float]


def _location_text(value: Any) -> Optional[str]:
    # Stored locations are either a string or {"validated": "City, ST", ...}.
    if isinstance(value, Mapping):
        return value.get("validated") or value.get("state")
    return value


def _location_coordinates(value: Any) -> Optional[Coordinates]:
    if not isinstance(value, Mapping) or not isinstance(value.get("coordinates"), Mapping):
        return None
    coords = value["coordinates"]
    lat = coords.get("lat")
    lon = coords.get("long", coords.get("lng"))
    if lat is None or lon is None:
        return None
    return float(lat), float(lon)


def _transport_type(value: Any) -> TransportType:
    try:
        return TransportType(value or TransportType.OPEN)
    except ValueError as exc:
        raise InvalidInputError("transport type", f"unknown value {value!r}") from exc


@dataclass
class QuotePricingRequest:
    """Everything needed to price a quote or order."""
    vehicles: list[Vehicle]
    origin: Optional[str]
    destination: Optional[str]
    transport_type: TransportType = TransportType.OPEN
    miles: Optional[float] = None
    origin_coordinates: Optional[Coordinates] = None
    destination_coordinates: Optional[Coordinates] = None
    route_bucket: Optional[str] = None
    quote_id: Optional[str] = None

    @property
    def enclosed(self) -> bool:
        return self.transport_type == TransportType.ENCLOSED

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> QuotePricingRequest:
        """Build a request from a stored quote/order document."""
        origin = document.get("origin")
        destination = document.get("destination")
        quote_id = document.get("_id", document.get("refId"))
        return cls(
            vehicles=[load_vehicle(v) for v in document.get("vehicles") or []],
            origin=_location_text(origin),
            destination=_location_text(destination),
            transport_type=_transport_type(document.get("transportType")),
            miles=document.get("miles"),
            origin_coordinates=_location_coordinates(origin),
            destination_coordinates=_location_coordinates(destination),
            route_bucket=document.get("routeBucket"),
            quote_id=None if quote_id is None else str(quote_id),
        )


@dataclass
class PricedVehicle:
    vehicle: Vehicle
    pricing: VehiclePricingResult

    def to_document(self) -> dict[str, Any]:
        document = self.vehicle.model_dump(by_alias=True, exclude_none=True)
        document["pricing"] = self.pricing.to_document()
        return document


@dataclass
class QuotePricing:
    """Full pricing for a quote, ready to be written back verbatim."""
    miles: float
    route_bucket: str
    transport_type: TransportType
    vehicles: list[PricedVehicle] = field(default_factory=list)
    total_pricing: Optional[TotalPricingResult] = None

    def to_document(self) -> dict[str, Any]:
        return {
            "miles": self.miles,
            "routeBucket": self.route_bucket,
            "transportType": self.transport_type.value,
            "vehicles": [v.to_document() for v in self.vehicles],
            "totalPricing": self.total_pricing.to_document() if self.total_pricing else None,
        }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _resolve_miles(request: QuotePricingRequest) -> float:
    if request.miles is not None:
        if not is_finite_number(request.miles) or request.miles < 0:
            raise InvalidInputError(
                "miles", f"must be a non-negative number, got {request.miles!r}",
            )
        return float(request.miles)
    if request.origin_coordinates and request.destination_coordinates:
        miles = estimate_miles(request.origin_coordinates, request.destination_coordinates)
        logger.info(
            "Quote %s has no routed mileage; using straight-line estimate of %.0f miles",
            request.quote_id, miles,
        )
        return miles
    raise InvalidInputError("miles", "quote has neither mileage nor coordinates")


def carried_commissions(
    previous: Optional[Mapping[str, Any]],
    vehicle_count: int,
) -> list[Optional[float]]:
    """Per-vehicle commission amounts to keep from a previously priced quote.

    Uses each stored vehicle's commission when the vehicle count is
    unchanged; otherwise splits the stored total commission evenly.  Returns
    ``None`` entries when there is nothing to carry.
    """
    if not previous:
        return [None] * vehicle_count

    stored_vehicles = previous.get("vehicles") or []
    if len(stored_vehicles) == vehicle_count:
        amounts = [
            ((v.get("pricing") or {}).get("modifiers") or {}).get("commission")
            for v in stored_vehicles
        ]
        if all(amount is not None for amount in amounts):
            return [float(amount) for amount in amounts]

    total = ((previous.get("totalPricing") or {}).get("modifiers") or {}).get("commission")
    if total is None or vehicle_count == 0:
        return [None] * vehicle_count
    return [float(total) / vehicle_count] * vehicle_count


def _audit_unknown_keys(
    modifier_set: ModifierSet,
    request: QuotePricingRequest,
    bucket: str,
) -> None:
    if not is_known_key(modifier_set.routes, bucket):
        logger.warning("Quote %s: no route modifier for bucket %r", request.quote_id, bucket)
    for side, location in (("origin", request.origin), ("destination", request.destination)):
        code = state_code(location)
        if not is_known_key(modifier_set.states, code):
            logger.warning(
                "Quote %s: no state modifier for %s %r", request.quote_id, side, code or location,
            )
    for vehicle in request.vehicles:
        if not is_known_key(modifier_set.vehicles, vehicle.pricing_class):
            logger.warning(
                "Quote %s: no vehicle-class modifier for %r (%s)",
                request.quote_id, vehicle.pricing_class, vehicle.label,
            )


# ---------------------------------------------------------------------------
# Core service method
# ---------------------------------------------------------------------------

def price_quote(
    request: QuotePricingRequest,
    modifier_set: Union[AnyModifierSet, Mapping[str, Any], None],
    portal: Union[Portal, Mapping[str, Any], None],
    previous: Optional[Mapping[str, Any]] = None,
) -> QuotePricing:
    """Price every vehicle on a quote and aggregate the totals.

    Args:
        request: Vehicles, locations, mileage and transport type.
        modifier_set: Stored modifier set (either schema version).
        portal: Stored portal document.
        previous: The quote document as last persisted.  When given, its
            commission is carried over instead of recomputed.

    Raises:
        MissingPolicyError: If the modifier set or portal is missing.
        InvalidInputError: If the quote has no vehicles, no usable mileage,
            or a vehicle cannot be priced.
    """
    modifier_set = load_modifier_set(modifier_set)
    portal = load_portal(portal)

    if not request.vehicles:
        raise InvalidInputError("vehicles", "a quote needs at least one vehicle")

    miles = _resolve_miles(request)
    bucket = request.route_bucket or route_bucket_for_miles(miles)
    _audit_unknown_keys(modifier_set, request, bucket)

    commissions = carried_commissions(previous, len(request.vehicles))

    priced: list[PricedVehicle] = []
    for vehicle, commission in zip(request.vehicles, commissions):
        pricing = calculate_vehicle_pricing(
            vehicle,
            miles,
            request.origin,
            request.destination,
            oversize=vehicle.requires_oversize,
            enclosed=request.enclosed,
            modifier_set=modifier_set,
            portal=portal,
            commission_override=commission,
            route_bucket=bucket,
        )
        priced.append(PricedVehicle(vehicle=vehicle, pricing=pricing))

    total_pricing = calculate_total_pricing(priced, portal)

    logger.info(
        "Priced quote %s: %d vehicle(s), %.0f miles, bucket=%s, 3-day total %.2f",
        request.quote_id, len(priced), miles, bucket, total_pricing.totals.three,
    )

    return QuotePricing(
        miles=miles,
        route_bucket=bucket,
        transport_type=request.transport_type,
        vehicles=priced,
        total_pricing=total_pricing,
    )
