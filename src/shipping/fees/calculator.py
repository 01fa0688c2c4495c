"""Shipping fee calculator — per-vendor fees for a multi-vendor cart.

Each vendor ships its own items from its own base region, so a cart is
priced vendor by vendor:

    fee = max(0, base_rate + weight tier fee + price tier fee)

and the cart's shipping total is the sum of the vendor fees. If any vendor
cannot ship to the destination the whole calculation fails; shipping is
never silently waived.

All arithmetic is done in ``Decimal``; fees are quantized to cents.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

import structlog
from protean.exceptions import ValidationError

from shipping.errors import CalculationError, NoZoneError
from shipping.money import ZERO, to_decimal, to_money
from shipping.zone.matching import match_zone
from shipping.zone.tiers import TierType, evaluate_tiers

logger = structlog.get_logger(__name__)

# Weight assumed per unit when the product has no recorded weight
DEFAULT_UNIT_WEIGHT_KG = Decimal("0.5")


@dataclass(frozen=True)
class CartLine:
    """One line item of the cart, owned by a single vendor."""

    vendor_id: str
    quantity: int = 1
    unit_price: Decimal | float = 0
    unit_weight: Decimal | float | None = None
    product_id: str | None = None

    def __post_init__(self):
        if not self.vendor_id:
            raise ValidationError({"vendor_id": ["Cart line has no vendor"]})
        if self.quantity is None or self.quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if to_decimal(self.unit_price) < 0:
            raise ValidationError({"unit_price": ["Unit price must not be negative"]})
        if self.unit_weight is not None and to_decimal(self.unit_weight) < 0:
            raise ValidationError({"unit_weight": ["Unit weight must not be negative"]})

    @property
    def weight(self) -> Decimal:
        unit_weight = DEFAULT_UNIT_WEIGHT_KG if self.unit_weight is None else to_decimal(self.unit_weight)
        return unit_weight * self.quantity

    @property
    def value(self) -> Decimal:
        return to_decimal(self.unit_price) * self.quantity


@dataclass(frozen=True)
class Cart:
    destination_region: str
    lines: Sequence[CartLine] = ()


@dataclass(frozen=True)
class Shipment:
    """The part of a cart one vendor ships to the destination."""

    vendor_region: str
    destination_region: str
    total_weight: Decimal
    total_price: Decimal


@dataclass(frozen=True)
class VendorZones:
    """A vendor's stored base region and its shipping zones."""

    base_region: str | None
    zones: Sequence = ()


@dataclass(frozen=True)
class VendorShippingFee:
    vendor_id: str
    fee: Decimal
    zone_name: str
    item_count: int
    total_weight: Decimal
    total_price: Decimal


@dataclass(frozen=True)
class ShippingFees:
    destination_region: str
    per_vendor: dict[str, VendorShippingFee] = field(default_factory=dict)
    total: Decimal = ZERO


def price_shipment(shipment: Shipment, zones):
    """Match the shipment's zone and price it.

    Returns:
        (zone, fee) with the fee floored at zero.

    Raises:
        NoZoneError
    """
    zone = match_zone(shipment.vendor_region, shipment.destination_region, zones)
    tiers = zone.rate_tiers

    weight_fee = evaluate_tiers(tiers, TierType.WEIGHT, shipment.total_weight)
    price_fee = evaluate_tiers(tiers, TierType.PRICE, shipment.total_price)
    fee = max(ZERO, to_money(zone.base_rate or 0) + weight_fee + price_fee)
    return zone, fee


def group_lines_by_vendor(lines):
    """Split cart lines by vendor, keeping the order vendors first appear in."""
    groups = {}
    for line in lines:
        groups.setdefault(str(line.vendor_id), []).append(line)
    return groups


def compute_shipping_fees(cart: Cart, zones_by_vendor: Mapping[str, VendorZones]) -> ShippingFees:
    """Price shipping for every vendor in the cart.

    Raises:
        CalculationError: a vendor has no base region, no zones, or no zone
            serving the destination. No partial result is returned.
    """
    per_vendor = {}

    for vendor_id, lines in group_lines_by_vendor(cart.lines).items():
        setup = zones_by_vendor.get(vendor_id)
        if setup is None or not setup.base_region:
            logger.warning(
                "Vendor has no base region",
                vendor_id=vendor_id,
                destination_region=cart.destination_region,
            )
            raise CalculationError(vendor_id, cart.destination_region, "vendor has no base region configured")

        shipment = Shipment(
            vendor_region=setup.base_region,
            destination_region=cart.destination_region,
            total_weight=sum((line.weight for line in lines), Decimal(0)),
            total_price=to_money(sum((line.value for line in lines), Decimal(0))),
        )

        try:
            zone, fee = price_shipment(shipment, setup.zones)
        except NoZoneError as exc:
            logger.warning(
                "No shipping zone serves destination",
                vendor_id=vendor_id,
                vendor_region=shipment.vendor_region,
                destination_region=shipment.destination_region,
            )
            raise CalculationError(vendor_id, cart.destination_region, "no shipping zone serves this region") from exc

        per_vendor[vendor_id] = VendorShippingFee(
            vendor_id=vendor_id,
            fee=fee,
            zone_name=zone.name,
            item_count=len(lines),
            total_weight=shipment.total_weight,
            total_price=shipment.total_price,
        )
        logger.debug(
            "Vendor shipping fee computed",
            vendor_id=vendor_id,
            zone=zone.name,
            total_weight=str(shipment.total_weight),
            total_price=str(shipment.total_price),
            fee=str(fee),
        )

    total = sum((vendor_fee.fee for vendor_fee in per_vendor.values()), ZERO)
    return ShippingFees(destination_region=cart.destination_region, per_vendor=per_vendor, total=total)
