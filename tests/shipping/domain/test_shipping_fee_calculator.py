"""Tests for the per-vendor shipping fee calculator."""

from decimal import Decimal

import pytest
from protean.exceptions import ValidationError
from shipping.errors import CalculationError
from shipping.fees.calculator import (
    DEFAULT_UNIT_WEIGHT_KG,
    Cart,
    CartLine,
    Shipment,
    VendorZones,
    compute_shipping_fees,
    price_shipment,
)
from shipping.zone.zone import ShippingZone


def _make_zone(**overrides):
    defaults = {
        "vendor_id": "vendor-001",
        "name": "Accra Metro",
        "region": "Greater Accra",
        "vendor_region": "Greater Accra",
        "base_rate": 10.0,
        "is_default": False,
    }
    defaults.update(overrides)
    return ShippingZone.create(**defaults)


@pytest.fixture()
def accra_zones():
    return VendorZones(
        base_region="Greater Accra",
        zones=(
            _make_zone(is_default=True),
            _make_zone(
                name="Ashanti",
                region="Ashanti",
                base_rate=20.0,
                additional_rates=[{"type": "weight", "threshold": 5, "additional_fee": 8}],
            ),
        ),
    )


class TestCartLine:
    def test_weight_and_value_scale_with_quantity(self):
        line = CartLine(vendor_id="vendor-001", quantity=3, unit_price="19.99", unit_weight=1.5)
        assert line.weight == Decimal("4.5")
        assert line.value == Decimal("59.97")

    def test_missing_weight_uses_default(self):
        line = CartLine(vendor_id="vendor-001", quantity=2, unit_price=5)
        assert line.weight == DEFAULT_UNIT_WEIGHT_KG * 2

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            CartLine(vendor_id="vendor-001", quantity=0)

    def test_negative_price_is_rejected(self):
        with pytest.raises(ValidationError):
            CartLine(vendor_id="vendor-001", unit_price=-1)

    def test_line_needs_a_vendor(self):
        with pytest.raises(ValidationError):
            CartLine(vendor_id="")


class TestPriceShipment:
    def _shipment(self, destination, weight, price):
        return Shipment(
            vendor_region="Greater Accra",
            destination_region=destination,
            total_weight=Decimal(str(weight)),
            total_price=Decimal(str(price)),
        )

    def test_exact_zone_with_weight_tier(self, accra_zones):
        zone, fee = price_shipment(self._shipment("Ashanti", 6, 50), accra_zones.zones)
        assert zone.name == "Ashanti"
        assert fee == Decimal("28.00")

    def test_default_zone_for_unmatched_destination(self, accra_zones):
        zone, fee = price_shipment(self._shipment("Volta", 6, 50), accra_zones.zones)
        assert zone.name == "Accra Metro"
        assert fee == Decimal("10.00")

    def test_highest_weight_tier_only(self):
        zone = _make_zone(
            base_rate=0,
            additional_rates=[
                {"type": "weight", "threshold": 5, "additional_fee": 10},
                {"type": "weight", "threshold": 10, "additional_fee": 25},
            ],
        )
        _, fee = price_shipment(self._shipment("Greater Accra", 12, 0), [zone])
        assert fee == Decimal("25.00")

    def test_weight_and_price_tiers_both_apply(self):
        zone = _make_zone(
            additional_rates=[
                {"type": "weight", "threshold": 5, "additional_fee": 8},
                {"type": "price", "threshold": 100, "additional_fee": -3},
            ],
        )
        _, fee = price_shipment(self._shipment("Greater Accra", 5, 100), [zone])
        assert fee == Decimal("15.00")

    def test_fee_is_floored_at_zero(self):
        zone = _make_zone(
            base_rate=5,
            additional_rates=[{"type": "price", "threshold": 0, "additional_fee": -20}],
        )
        _, fee = price_shipment(self._shipment("Greater Accra", 1, 10), [zone])
        assert fee == Decimal("0.00")


class TestComputeShippingFees:
    def test_end_to_end_exact_zone(self, accra_zones):
        cart = Cart(
            destination_region="Ashanti",
            lines=(CartLine(vendor_id="vendor-001", quantity=1, unit_price=50, unit_weight=6),),
        )
        fees = compute_shipping_fees(cart, {"vendor-001": accra_zones})

        assert fees.total == Decimal("28.00")
        vendor_fee = fees.per_vendor["vendor-001"]
        assert vendor_fee.fee == Decimal("28.00")
        assert vendor_fee.zone_name == "Ashanti"
        assert vendor_fee.item_count == 1
        assert vendor_fee.total_weight == Decimal("6")

    def test_end_to_end_default_zone(self, accra_zones):
        cart = Cart(
            destination_region="Volta",
            lines=(CartLine(vendor_id="vendor-001", unit_price=50, unit_weight=6),),
        )
        fees = compute_shipping_fees(cart, {"vendor-001": accra_zones})
        assert fees.total == Decimal("10.00")

    def test_total_sums_vendor_fees(self, accra_zones):
        kumasi_zones = VendorZones(
            base_region="Ashanti",
            zones=(
                _make_zone(
                    vendor_id="vendor-002",
                    name="Local",
                    region="Ashanti",
                    vendor_region="Ashanti",
                    base_rate=4.5,
                ),
            ),
        )
        cart = Cart(
            destination_region="Ashanti",
            lines=(
                CartLine(vendor_id="vendor-001", quantity=2, unit_price=20, unit_weight=2),
                CartLine(vendor_id="vendor-002", quantity=1, unit_price=15),
                CartLine(vendor_id="vendor-001", quantity=1, unit_price=10, unit_weight=1),
            ),
        )

        fees = compute_shipping_fees(cart, {"vendor-001": accra_zones, "vendor-002": kumasi_zones})

        # vendor-001 ships 5 kg to Ashanti: 20 + 8; vendor-002: 4.50
        assert fees.per_vendor["vendor-001"].fee == Decimal("28.00")
        assert fees.per_vendor["vendor-001"].item_count == 2
        assert fees.per_vendor["vendor-001"].total_price == Decimal("50.00")
        assert fees.per_vendor["vendor-002"].fee == Decimal("4.50")
        assert fees.total == Decimal("32.50")
        assert list(fees.per_vendor) == ["vendor-001", "vendor-002"]

    def test_empty_cart_costs_nothing(self):
        fees = compute_shipping_fees(Cart(destination_region="Volta"), {})
        assert fees.total == Decimal("0.00")
        assert fees.per_vendor == {}

    def test_unserved_destination_fails_whole_cart(self, accra_zones):
        no_default = VendorZones(
            base_region="Ashanti",
            zones=(_make_zone(vendor_id="vendor-002", region="Ashanti", vendor_region="Ashanti"),),
        )
        cart = Cart(
            destination_region="Volta",
            lines=(
                CartLine(vendor_id="vendor-001", unit_price=10),
                CartLine(vendor_id="vendor-002", unit_price=10),
            ),
        )

        with pytest.raises(CalculationError) as exc:
            compute_shipping_fees(cart, {"vendor-001": accra_zones, "vendor-002": no_default})
        assert exc.value.vendor_id == "vendor-002"
        assert exc.value.destination_region == "Volta"

    def test_vendor_without_base_region_fails(self, accra_zones):
        cart = Cart(destination_region="Volta", lines=(CartLine(vendor_id="vendor-001"),))
        with pytest.raises(CalculationError) as exc:
            compute_shipping_fees(cart, {"vendor-001": VendorZones(base_region=None, zones=accra_zones.zones)})
        assert exc.value.reason == "vendor has no base region configured"

    def test_unknown_vendor_fails(self):
        cart = Cart(destination_region="Volta", lines=(CartLine(vendor_id="vendor-404"),))
        with pytest.raises(CalculationError):
            compute_shipping_fees(cart, {})

    def test_zones_under_old_base_region_do_not_match(self, accra_zones):
        moved = VendorZones(base_region="Ashanti", zones=accra_zones.zones)
        cart = Cart(destination_region="Volta", lines=(CartLine(vendor_id="vendor-001"),))
        with pytest.raises(CalculationError):
            compute_shipping_fees(cart, {"vendor-001": moved})

    def test_identical_inputs_give_identical_fees(self, accra_zones):
        cart = Cart(
            destination_region="Ashanti",
            lines=(CartLine(vendor_id="vendor-001", quantity=4, unit_price="12.50", unit_weight="1.25"),),
        )
        first = compute_shipping_fees(cart, {"vendor-001": accra_zones})
        second = compute_shipping_fees(cart, {"vendor-001": accra_zones})
        assert first == second


class TestCalculationErrorPayload:
    def test_to_dict_names_vendor_and_destination(self):
        error = CalculationError("vendor-001", "Volta", "no shipping zone serves this region")
        assert error.to_dict() == {
            "vendor_id": "vendor-001",
            "destination_region": "Volta",
            "reason": "no shipping zone serves this region",
        }
