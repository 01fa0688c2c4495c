"""Repository lookups for shipping zones and vendor profiles."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from shipping.vendor.profile import VendorShippingProfile
from shipping.zone.zone import ShippingZone


def active_zones_for_vendor(vendor_id):
    """Active zones of a vendor in creation order.

    The order is stable so zone matching stays deterministic across calls.
    """
    repo = current_domain.repository_for(ShippingZone)
    zones = repo._dao.query.filter(vendor_id=str(vendor_id), is_active=True).all().items
    return sorted(zones, key=lambda zone: (zone.created_at, str(zone.id)))


def list_vendor_zones(vendor_id):
    """Active zones of a vendor sorted by name, as shown to the vendor admin."""
    return sorted(active_zones_for_vendor(vendor_id), key=lambda zone: zone.name.casefold())


def get_vendor_zone(zone_id, vendor_id):
    """Load an active zone owned by ``vendor_id``.

    Raises:
        ObjectNotFoundError: the zone does not exist, was deleted, or belongs
            to another vendor.
    """
    zone = current_domain.repository_for(ShippingZone).get(zone_id)
    if str(zone.vendor_id) != str(vendor_id) or not zone.is_active:
        raise ObjectNotFoundError({"zone_id": ["Shipping zone not found or you do not have permission to modify it"]})
    return zone


def find_vendor_profile(vendor_id):
    """The vendor's shipping profile, or None when it has no base region yet."""
    try:
        return current_domain.repository_for(VendorShippingProfile).get(vendor_id)
    except ObjectNotFoundError:
        return None


def stored_base_region(vendor_id):
    profile = find_vendor_profile(vendor_id)
    return profile.base_region if profile else None
