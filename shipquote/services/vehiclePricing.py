"""
Vehicle Pricing Calculator.

Applies the ordered modifier pipeline to one vehicle's base rate.  Starting
from ``S = base rate``:

1. Inoperable            (only when the vehicle is inoperable)
2. Route                 (by distance bucket)
3. Origin state, then destination state
4. Vehicle class         -> ``base`` is recorded here
5. Oversize              (added to ``S``, never to ``base``)
6. Global discount
7. Enclosed flat, then enclosed percent (enclosed transport only)
8. Company tariff        (portal markup on ``S``)
9. Commission            (portal-wide or global rate, or a carried-over amount)

Every modifier is applied as ``S += flat; S += S * percent`` and the amount
recorded for it is the change in ``S``.  Levels 1/3/5/7 cost
``S + company tariff + commission`` unless the modifier set gives the level
an explicit value, which is an all-inclusive replacement price.  White glove
is priced only from its explicit value.

Intermediate amounts keep full float precision; rounding to cents (half-up)
happens once, when the result is built.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from shipquote.core.currency import is_finite_number, round_currency
from shipquote.core.exceptions import InvalidInputError
from shipquote.models import (
    AnyModifierSet,
    Modifier,
    ModifierSet,
    Portal,
    PricingModifiers,
    ServiceLevelOption,
    ServiceLevelTotals,
    Vehicle,
    VehiclePricingResult,
    load_modifier_set,
    load_portal,
    load_vehicle,
)
from shipquote.services.geoService import route_bucket_for_miles, state_code
from shipquote.services.modifierResolver import (
    resolve_route,
    resolve_service_level,
    resolve_state,
    resolve_vehicle_class,
)

logger = logging.getLogger(__name__)


STANDARD_LEVELS: tuple[ServiceLevelOption, ...] = (
    ServiceLevelOption.ONE_DAY,
    ServiceLevelOption.THREE_DAY,
    ServiceLevelOption.FIVE_DAY,
    ServiceLevelOption.SEVEN_DAY,
)


# ---------------------------------------------------------------------------
# Pipeline steps
# ---------------------------------------------------------------------------

def apply_modifier(subtotal: float, modifier: Modifier) -> tuple[float, float]:
    """Apply ``modifier`` to ``subtotal``.

    Returns:
        ``(new_subtotal, amount_added)``.
    """
    updated = subtotal + modifier.flat
    updated += updated * modifier.percent
    return updated, updated - subtotal


def calculate_company_tariff(
    subtotal: float,
    portal: Portal,
    modifier_set: ModifierSet,
    enclosed: bool,
) -> float:
    """Portal markup on the running subtotal.

    ``tariff = S * tariff% + tariff flat``, reduced by the modifier set's
    company-tariff discount, then raised by the portal's enclosed extra and
    the modifier set's enclosed fee when the vehicle ships enclosed.
    """
    tariff = subtotal * portal.company_tariff.percent + portal.company_tariff.flat

    discount = modifier_set.company_tariff_discount
    tariff = tariff * (1 - discount.percent) - discount.flat

    if enclosed:
        extra = portal.company_tariff_enclosed_extra
        tariff = tariff * (1 + extra.percent) + extra.flat
        tariff, _ = apply_modifier(tariff, modifier_set.company_tariff_enclosed_fee)

    return tariff


def calculate_commission(
    subtotal: float,
    modifier_set: ModifierSet,
    commission_override: Optional[float] = None,
) -> float:
    """Commission on the running subtotal.

    A caller-supplied ``commission_override`` (an amount, not a rate) replaces
    the resolved value entirely.
    """
    if commission_override is not None:
        return float(commission_override)
    rate = modifier_set.effective_commission
    return subtotal * rate.percent + rate.flat


def _resolve_base_rate(vehicle: Vehicle, miles: Optional[float], portal: Portal) -> float:
    base_rate = vehicle.base_rate

    if base_rate is None and portal.enable_custom_rates:
        if miles is None:
            raise InvalidInputError(
                "miles", "required to look up the portal's custom rate sheet", vehicle.label,
            )
        base_rate = portal.custom_base_rate(miles)
        if base_rate is None:
            raise InvalidInputError(
                "base rate", f"no custom rate band covers {miles:g} miles", vehicle.label,
            )

    if base_rate is None:
        raise InvalidInputError("base rate", "is required", vehicle.label)
    if not is_finite_number(base_rate):
        raise InvalidInputError(
            "base rate", f"must be a finite number, got {base_rate!r}", vehicle.label,
        )
    if base_rate <= 0:
        raise InvalidInputError("base rate", "must be greater than zero", vehicle.label)
    return float(base_rate)


def _service_level_totals(
    modifier_set: ModifierSet,
    portal: Portal,
    standard_total: float,
) -> ServiceLevelTotals:
    totals: dict[ServiceLevelOption, float] = {}
    for level in STANDARD_LEVELS:
        explicit = resolve_service_level(modifier_set, level)
        totals[level] = explicit if explicit is not None else standard_total

    white_glove = 0.0
    if portal.enable_white_glove:
        white_glove = resolve_service_level(modifier_set, ServiceLevelOption.WHITE_GLOVE) or 0.0

    return ServiceLevelTotals(
        one=totals[ServiceLevelOption.ONE_DAY],
        three=totals[ServiceLevelOption.THREE_DAY],
        five=totals[ServiceLevelOption.FIVE_DAY],
        seven=totals[ServiceLevelOption.SEVEN_DAY],
        white_glove=white_glove,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def calculate_vehicle_pricing(
    vehicle: Union[Vehicle, Mapping[str, Any]],
    miles: Optional[float],
    origin: Optional[str],
    destination: Optional[str],
    oversize: bool,
    enclosed: bool,
    modifier_set: Union[AnyModifierSet, Mapping[str, Any], None],
    portal: Union[Portal, Mapping[str, Any], None],
    commission_override: Optional[float] = None,
    *,
    route_bucket: Optional[str] = None,
) -> VehiclePricingResult:
    """Price a single vehicle.

    Args:
        vehicle: The vehicle (make, model, pricing class, base rate).
        miles: Route mileage.  Used to derive the route bucket when
            ``route_bucket`` is not given, and for portal custom rate sheets.
        origin: Origin state code or ``"City, ST"`` location.
        destination: Destination state code or ``"City, ST"`` location.
        oversize: Whether the oversize fee applies.
        enclosed: Whether the vehicle ships in enclosed transport.
        modifier_set: Pricing policy; legacy documents are normalised.
        portal: Tenant configuration.
        commission_override: Commission amount carried over from an earlier
            quote.  Replaces the computed commission when given.
        route_bucket: Precomputed route bucket key.

    Returns:
        VehiclePricingResult with amounts rounded to cents.

    Raises:
        MissingPolicyError: If the modifier set or portal is missing.
        InvalidInputError: If the base rate, vehicle class, miles or
            commission override is missing or invalid, a policy or vehicle
            document is malformed or holds a non-finite number, or enclosed
            transport is requested on a portal that does not offer it.
    """
    modifier_set = load_modifier_set(modifier_set)
    portal = load_portal(portal)

    vehicle = load_vehicle(vehicle)
    label = vehicle.label

    if vehicle.pricing_class is None:
        raise InvalidInputError("vehicle class", "is required", label)
    if miles is not None and (not is_finite_number(miles) or miles < 0):
        raise InvalidInputError("miles", f"must be a non-negative number, got {miles!r}", label)
    if route_bucket is None and miles is None:
        raise InvalidInputError("miles", "required to derive the route bucket", label)
    if commission_override is not None and (
        not is_finite_number(commission_override) or commission_override < 0
    ):
        raise InvalidInputError(
            "commission override",
            f"must be a non-negative number, got {commission_override!r}",
            label,
        )
    if enclosed and not portal.enable_enclosed_transport:
        raise InvalidInputError(
            "transport type", "enclosed transport is not enabled for this portal", label,
        )

    base_rate = _resolve_base_rate(vehicle, miles, portal)
    bucket = route_bucket if route_bucket is not None else route_bucket_for_miles(miles)

    subtotal = base_rate

    inoperable = 0.0
    if vehicle.is_inoperable:
        subtotal, inoperable = apply_modifier(subtotal, modifier_set.inoperable)

    subtotal, route = apply_modifier(subtotal, resolve_route(modifier_set, bucket))
    subtotal, origin_state = apply_modifier(
        subtotal, resolve_state(modifier_set, state_code(origin)),
    )
    subtotal, dest_state = apply_modifier(
        subtotal, resolve_state(modifier_set, state_code(destination)),
    )
    subtotal, vehicle_class = apply_modifier(
        subtotal, resolve_vehicle_class(modifier_set, vehicle.pricing_class),
    )

    base = subtotal

    oversize_amount = 0.0
    if oversize:
        subtotal, oversize_amount = apply_modifier(subtotal, modifier_set.oversize)

    subtotal, discount = apply_modifier(subtotal, modifier_set.global_discount)

    enclosed_amount = 0.0
    if enclosed:
        subtotal, enclosed_flat = apply_modifier(subtotal, modifier_set.enclosed_flat)
        subtotal, enclosed_percent = apply_modifier(subtotal, modifier_set.enclosed_percent)
        enclosed_amount = enclosed_flat + enclosed_percent

    company_tariff = calculate_company_tariff(subtotal, portal, modifier_set, enclosed)
    commission = calculate_commission(subtotal, modifier_set, commission_override)
    standard_total = subtotal + company_tariff + commission

    logger.debug(
        "Priced %s: base=%.4f subtotal=%.4f tariff=%.4f commission=%.4f bucket=%s",
        label, base, subtotal, company_tariff, commission, bucket,
    )

    modifiers = PricingModifiers(
        inoperable=inoperable,
        route=route,
        origin_state=origin_state,
        dest_state=dest_state,
        vehicle_class=vehicle_class,
        oversize=oversize_amount,
        discount=discount,
        enclosed=enclosed_amount,
        company_tariff=company_tariff,
        commission=commission,
    )

    return VehiclePricingResult(
        base=round_currency(base),
        modifiers=modifiers.rounded(),
        totals=_service_level_totals(modifier_set, portal, standard_total).rounded(),
    )
