"""
Shared pytest fixtures for ShipQuote pricing unit tests.

Provides policy documents (modifier sets, portals) and vehicles built from
the same models the pricing engine receives in production, without any
storage layer.
"""

from typing import Any

import pytest

from shipquote.models import Modifier, ModifierSet, Portal, Vehicle


# ---------------------------------------------------------------------------
# Modifier sets
# ---------------------------------------------------------------------------


@pytest.fixture
def empty_modifier_set() -> ModifierSet:
    """A modifier set with every modifier at zero."""
    return ModifierSet()


@pytest.fixture
def scenario_modifier_set() -> ModifierSet:
    """NY +$100, SUV +$200, 10% company-tariff discount, 5% commission.

    No service-level values, so every day-level total is the computed price.
    """
    return ModifierSet(
        states={"NY": Modifier(flat=100)},
        vehicles={"sedan": Modifier(), "suv": Modifier(flat=200)},
        company_tariff_discount=Modifier(percent=0.1),
        commission=Modifier(percent=0.05),
    )


@pytest.fixture
def full_modifier_set_document() -> dict[str, Any]:
    """A stored (camelCase) modifier set exercising every modifier."""
    return {
        "_id": "modifier-set-1",
        "isGlobal": True,
        "inoperable": {"flat": 500, "percent": 0},
        "routes": {
            "short": {"flat": 0, "percent": 0},
            "medium": {"flat": 200, "percent": 0},
            "long": {"flat": 500, "percent": 0},
        },
        "states": {
            "CA": {"flat": 0, "percent": 0},
            "NY": {"flat": 100, "percent": 0},
            "TX": {"flat": 0, "percent": 0.05},
        },
        "oversize": {"flat": 1000, "percent": 0},
        "vehicles": {
            "sedan": {"flat": 0, "percent": 0},
            "suv": {"flat": 200, "percent": 0},
            "truck": {"flat": 500, "percent": 0},
        },
        "globalDiscount": {"flat": 0, "percent": -0.1},
        "irr": {"flat": 0, "percent": 0},
        "fuel": {"flat": 0, "percent": 0},
        "enclosedFlat": {"flat": 500, "percent": 0},
        "enclosedPercent": {"flat": 0, "percent": 0.1},
        "commission": {"flat": 0, "percent": 0.05},
        "serviceLevels": [
            {"serviceLevel": "1", "value": 1000},
            {"serviceLevel": "3", "value": 800},
            {"serviceLevel": "5", "value": 600},
            {"serviceLevel": "7", "value": 400},
            {"serviceLevel": "whiteGlove", "value": 2000},
        ],
        "companyTariffDiscount": {"flat": 0, "percent": 0.1},
        "companyTariffEnclosedFee": {"flat": 200, "percent": 0},
    }


# ---------------------------------------------------------------------------
# Portals
# ---------------------------------------------------------------------------


@pytest.fixture
def portal() -> Portal:
    """A portal with a 15% company tariff and a 5% enclosed extra."""
    return Portal(
        id="portal-1",
        name="Test Portal",
        company_tariff=Modifier(percent=0.15),
        company_tariff_enclosed_extra=Modifier(percent=0.05),
    )


@pytest.fixture
def plain_portal() -> Portal:
    """A portal with no tariff."""
    return Portal(id="portal-2", name="Plain Portal")


# ---------------------------------------------------------------------------
# Vehicles
# ---------------------------------------------------------------------------


@pytest.fixture
def sedan() -> Vehicle:
    return Vehicle(make="Honda", model="Accord", pricing_class="sedan", base_rate=1000)


@pytest.fixture
def suv() -> Vehicle:
    return Vehicle(make="Toyota", model="4Runner", pricing_class="suv", base_rate=1000)
