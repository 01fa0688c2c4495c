"""Shipping quotes: load each vendor's configuration and price a cart."""

from shipping.fees.calculator import Cart, VendorZones, compute_shipping_fees, group_lines_by_vendor
from shipping.zone.lookup import active_zones_for_vendor, stored_base_region


def load_vendor_zones(vendor_ids):
    """Stored base region and active zones for each vendor."""
    return {
        str(vendor_id): VendorZones(
            base_region=stored_base_region(vendor_id),
            zones=tuple(active_zones_for_vendor(vendor_id)),
        )
        for vendor_id in vendor_ids
    }


def quote_shipping(destination_region, lines):
    """Price shipping of ``lines`` to ``destination_region`` from stored zones.

    Raises:
        CalculationError
    """
    cart = Cart(destination_region=destination_region, lines=tuple(lines))
    zones_by_vendor = load_vendor_zones(group_lines_by_vendor(cart.lines))
    return compute_shipping_fees(cart, zones_by_vendor)
