"""
Total Pricing Aggregator -- sums per-vehicle pricing into the quote or order
level ``totalPricing`` document.

``base`` stays free of oversize because every vehicle's ``base`` is.  Sums are
rounded half-up to cents.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Sequence, Union

from shipquote.core.currency import round_currency
from shipquote.core.exceptions import InvalidInputError
from shipquote.models import (
    Portal,
    PricingModifiers,
    ServiceLevelTotals,
    TotalPricingResult,
    VehiclePricingResult,
    load_portal,
)

logger = logging.getLogger(__name__)


def _pricing_of(item: Any, index: int) -> VehiclePricingResult:
    # Accepts bare results or priced vehicles exposing ``.pricing``.
    pricing = item if isinstance(item, VehiclePricingResult) else getattr(item, "pricing", None)
    if not isinstance(pricing, VehiclePricingResult):
        raise InvalidInputError("vehicles", f"item {index} has no vehicle pricing")
    return pricing


def calculate_total_pricing(
    vehicles: Sequence[Any],
    portal: Union[Portal, Mapping[str, Any], None],
) -> TotalPricingResult:
    """Aggregate already-priced vehicles.

    Args:
        vehicles: ``VehiclePricingResult`` objects, or priced vehicles with a
            ``pricing`` attribute.
        portal: Tenant configuration.  When white glove is disabled the
            aggregate white-glove total is 0.

    Raises:
        MissingPolicyError: If ``portal`` is missing.
        InvalidInputError: If ``vehicles`` is empty or an item is unpriced.
    """
    portal = load_portal(portal)
    if not vehicles:
        raise InvalidInputError("vehicles", "at least one priced vehicle is required")

    pricings = [_pricing_of(item, index) for index, item in enumerate(vehicles)]

    modifiers = PricingModifiers.combine(p.modifiers for p in pricings)
    totals = ServiceLevelTotals.combine(p.totals for p in pricings)
    if not portal.enable_white_glove:
        totals = replace(totals, white_glove=0.0)

    logger.debug("Aggregated pricing for %d vehicle(s)", len(pricings))

    return TotalPricingResult(
        base=round_currency(sum(p.base for p in pricings)),
        modifiers=modifiers.rounded(),
        totals=totals.rounded(),
        vehicle_count=len(pricings),
    )
