"""
ShipQuote pricing models
========================

Central import point for policy documents (modifier sets, portals), the
vehicle input model, and the pricing result structures.

Usage::

    from shipquote.models import ModifierSet, Portal, Vehicle
"""

# -- Policy documents --
from .modifierSet import (
    ZERO_MODIFIER,
    AnyModifierSet,
    LegacyModifierSet,
    Modifier,
    ModifierSet,
    ServiceLevelOption,
    ServiceLevelValue,
    load_modifier_set,
)
from .portal import CustomRate, Portal, load_portal

# -- Vehicles --
from .vehicle import OVERSIZE_CLASSES, TransportType, Vehicle, VehicleClass, load_vehicle

# -- Results --
from .pricing import (
    PricingModifiers,
    ServiceLevelTotals,
    TotalPricingResult,
    VehiclePricingResult,
)

__all__ = [
    "ZERO_MODIFIER",
    "AnyModifierSet",
    "CustomRate",
    "LegacyModifierSet",
    "Modifier",
    "ModifierSet",
    "OVERSIZE_CLASSES",
    "Portal",
    "PricingModifiers",
    "ServiceLevelOption",
    "ServiceLevelTotals",
    "ServiceLevelValue",
    "TotalPricingResult",
    "TransportType",
    "Vehicle",
    "VehicleClass",
    "VehiclePricingResult",
    "load_modifier_set",
    "load_portal",
    "load_vehicle",
]
