"""
Pricing result structures written back into quote and order documents.

Results are frozen dataclasses.  ``to_document()`` returns the camelCase
layout stored under ``vehicles[].pricing`` and ``totalPricing``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Iterable

from pydantic.alias_generators import to_camel

from shipquote.core.currency import round_currency
from shipquote.models.modifierSet import ServiceLevelOption


@dataclass(frozen=True)
class PricingModifiers:
    """Amount each modifier added to (or, when negative, removed from) a price."""
    inoperable: float = 0.0
    route: float = 0.0
    origin_state: float = 0.0
    dest_state: float = 0.0
    vehicle_class: float = 0.0
    oversize: float = 0.0
    discount: float = 0.0
    enclosed: float = 0.0
    company_tariff: float = 0.0
    commission: float = 0.0

    def rounded(self) -> PricingModifiers:
        return PricingModifiers(**{
            f.name: round_currency(getattr(self, f.name)) for f in fields(self)
        })

    @classmethod
    def combine(cls, items: Iterable[PricingModifiers]) -> PricingModifiers:
        items = list(items)
        return cls(**{
            f.name: sum(getattr(item, f.name) for item in items) for f in fields(cls)
        })

    def to_document(self) -> dict[str, float]:
        return {to_camel(f.name): getattr(self, f.name) for f in fields(self)}


_LEVEL_FIELDS: dict[ServiceLevelOption, str] = {
    ServiceLevelOption.ONE_DAY: "one",
    ServiceLevelOption.THREE_DAY: "three",
    ServiceLevelOption.FIVE_DAY: "five",
    ServiceLevelOption.SEVEN_DAY: "seven",
    ServiceLevelOption.WHITE_GLOVE: "white_glove",
}


@dataclass(frozen=True)
class ServiceLevelTotals:
    """Final price per service level."""
    one: float = 0.0
    three: float = 0.0
    five: float = 0.0
    seven: float = 0.0
    white_glove: float = 0.0

    def for_level(self, level: ServiceLevelOption) -> float:
        return getattr(self, _LEVEL_FIELDS[ServiceLevelOption(level)])

    def rounded(self) -> ServiceLevelTotals:
        return ServiceLevelTotals(**{
            f.name: round_currency(getattr(self, f.name)) for f in fields(self)
        })

    @classmethod
    def combine(cls, items: Iterable[ServiceLevelTotals]) -> ServiceLevelTotals:
        items = list(items)
        return cls(**{
            f.name: sum(getattr(item, f.name) for item in items) for f in fields(cls)
        })

    def to_document(self) -> dict[str, float]:
        return {to_camel(f.name): getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class VehiclePricingResult:
    """Pricing for one vehicle.

    ``base`` is the subtotal after the inoperable, route, state and
    vehicle-class modifiers.  It never includes ``modifiers.oversize``.
    """
    base: float
    modifiers: PricingModifiers = field(default_factory=PricingModifiers)
    totals: ServiceLevelTotals = field(default_factory=ServiceLevelTotals)

    def to_document(self) -> dict[str, Any]:
        return {
            "base": self.base,
            "modifiers": self.modifiers.to_document(),
            "totals": self.totals.to_document(),
        }


@dataclass(frozen=True)
class TotalPricingResult:
    """Quote- or order-level pricing summed over every vehicle."""
    base: float
    modifiers: PricingModifiers = field(default_factory=PricingModifiers)
    totals: ServiceLevelTotals = field(default_factory=ServiceLevelTotals)
    vehicle_count: int = 0

    def to_document(self) -> dict[str, Any]:
        return {
            "base": self.base,
            "modifiers": self.modifiers.to_document(),
            "totals": self.totals.to_document(),
            "vehicleCount": self.vehicle_count,
        }
