"""
Unit tests for the Total Pricing Aggregator.

Tests field-wise summation over priced vehicles, the oversize-free base,
white glove handling per portal, and input validation.
"""

import pytest

from shipquote.core.exceptions import InvalidInputError, MissingPolicyError
from shipquote.models import (
    Modifier,
    ModifierSet,
    Portal,
    PricingModifiers,
    ServiceLevelTotals,
    Vehicle,
    VehiclePricingResult,
)
from shipquote.services.quotePricingService import PricedVehicle
from shipquote.services.totalPricing import calculate_total_pricing
from shipquote.services.vehiclePricing import calculate_vehicle_pricing


def _priced(vehicle, modifier_set, portal, oversize=False):
    return calculate_vehicle_pricing(
        vehicle,
        miles=800,
        origin="NY",
        destination="TX",
        oversize=oversize,
        enclosed=False,
        modifier_set=modifier_set,
        portal=portal,
    )


@pytest.fixture
def fleet() -> list[Vehicle]:
    return [
        Vehicle(make="Honda", model="Accord", pricing_class="sedan", base_rate=950),
        Vehicle(make="Toyota", model="4Runner", pricing_class="suv", base_rate=1100),
        Vehicle(make="Ford", model="Transit", pricing_class="van", base_rate=1275.5),
        Vehicle(make="Ram", model="1500", pricing_class="pickup_4_doors", base_rate=1320),
        Vehicle(make="Mazda", model="MX-5", pricing_class="sedan", base_rate=875, is_inoperable=True),
    ]


# ---------------------------------------------------------------------------
# Summation
# ---------------------------------------------------------------------------


class TestSummation:

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5])
    def test_aggregate_equals_field_wise_sum(self, fleet, full_modifier_set_document, portal, count):
        pricings = [
            _priced(vehicle, full_modifier_set_document, portal, oversize=index % 2 == 1)
            for index, vehicle in enumerate(fleet[:count])
        ]
        total = calculate_total_pricing(pricings, portal)

        assert total.vehicle_count == count
        assert total.base == pytest.approx(sum(p.base for p in pricings))
        for name, value in total.modifiers.to_document().items():
            expected = sum(p.modifiers.to_document()[name] for p in pricings)
            assert value == pytest.approx(expected), name
        for name, value in total.totals.to_document().items():
            expected = sum(p.totals.to_document()[name] for p in pricings)
            assert value == pytest.approx(expected), name

    def test_single_vehicle_total_matches_vehicle(self, sedan, scenario_modifier_set, portal):
        pricing = _priced(sedan, scenario_modifier_set, portal)
        total = calculate_total_pricing([pricing], portal)

        assert total.base == pricing.base
        assert total.modifiers == pricing.modifiers
        assert total.totals == pricing.totals

    def test_base_excludes_oversize(self, sedan, suv, plain_portal):
        modifier_set = ModifierSet(oversize=Modifier(flat=500))
        pricings = [
            _priced(sedan, modifier_set, plain_portal),
            _priced(suv, modifier_set, plain_portal, oversize=True),
        ]
        total = calculate_total_pricing(pricings, plain_portal)

        assert total.base == 2000
        assert total.modifiers.oversize == 500
        assert total.totals.three == 2500

    def test_sums_are_rounded_to_cents(self, plain_portal):
        pricing = VehiclePricingResult(
            base=0.1,
            modifiers=PricingModifiers(commission=0.1),
            totals=ServiceLevelTotals(one=0.1, three=0.1, five=0.1, seven=0.1),
        )
        total = calculate_total_pricing([pricing] * 3, plain_portal)

        assert total.base == 0.3
        assert total.modifiers.commission == 0.3
        assert total.totals.three == 0.3

    def test_accepts_priced_vehicles(self, sedan, suv, scenario_modifier_set, portal):
        priced = [
            PricedVehicle(vehicle=v, pricing=_priced(v, scenario_modifier_set, portal))
            for v in (sedan, suv)
        ]
        total = calculate_total_pricing(priced, portal)
        assert total.base == priced[0].pricing.base + priced[1].pricing.base


# ---------------------------------------------------------------------------
# White glove
# ---------------------------------------------------------------------------


class TestWhiteGlove:

    def test_white_glove_summed(self, sedan, suv, full_modifier_set_document, portal):
        pricings = [_priced(v, full_modifier_set_document, portal) for v in (sedan, suv)]
        total = calculate_total_pricing(pricings, portal)
        assert total.totals.white_glove == 4000

    def test_white_glove_zero_when_portal_disables_it(self):
        pricing = VehiclePricingResult(
            base=1000,
            totals=ServiceLevelTotals(one=1200, three=1100, five=1000, seven=900, white_glove=2000),
        )
        total = calculate_total_pricing([pricing, pricing], Portal(enable_white_glove=False))

        assert total.totals.white_glove == 0
        assert total.totals.three == 2200

    def test_portal_document_accepted(self):
        pricing = VehiclePricingResult(base=1000, totals=ServiceLevelTotals(white_glove=2000))
        portal_document = {"_id": "p-9", "options": {"enableWhiteGlove": False}}
        assert calculate_total_pricing([pricing], portal_document).totals.white_glove == 0


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:

    def test_empty_list_rejected(self, portal):
        with pytest.raises(InvalidInputError) as exc_info:
            calculate_total_pricing([], portal)
        assert exc_info.value.field == "vehicles"

    def test_missing_portal(self, sedan, scenario_modifier_set, portal):
        pricing = _priced(sedan, scenario_modifier_set, portal)
        with pytest.raises(MissingPolicyError):
            calculate_total_pricing([pricing], None)

    def test_unpriced_item_rejected(self, sedan, portal):
        with pytest.raises(InvalidInputError):
            calculate_total_pricing([sedan], portal)


# ---------------------------------------------------------------------------
# Persistence layout
# ---------------------------------------------------------------------------


class TestToDocument:

    def test_document_keys(self, sedan, scenario_modifier_set, portal):
        document = calculate_total_pricing(
            [_priced(sedan, scenario_modifier_set, portal)], portal,
        ).to_document()

        assert set(document) == {"base", "modifiers", "totals", "vehicleCount"}
        assert set(document["totals"]) == {"one", "three", "five", "seven", "whiteGlove"}
        assert set(document["modifiers"]) == {
            "inoperable", "route", "originState", "destState", "vehicleClass",
            "oversize", "discount", "enclosed", "companyTariff", "commission",
        }
        assert document["vehicleCount"] == 1
