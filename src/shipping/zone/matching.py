"""Pick the zone that governs a vendor's shipment.

An exact destination match always wins over the vendor's default zone.
Regions compare trimmed and case-insensitively.
"""

from shipping.errors import NoZoneError


def normalize_region(region) -> str:
    return (region or "").strip().casefold()


def same_region(left, right) -> bool:
    return normalize_region(left) == normalize_region(right)


def match_zone(vendor_region, destination_region, zones):
    """Return the zone serving ``destination_region`` from ``vendor_region``.

    ``zones`` may hold zones of other vendor regions and deleted zones; both
    are ignored. When several zones match exactly, the first in input order
    is returned.

    Raises:
        NoZoneError: neither an exact zone nor a default zone exists.
    """
    candidates = [
        zone for zone in zones if zone.is_active is not False and same_region(zone.vendor_region, vendor_region)
    ]

    exact = next((zone for zone in candidates if same_region(zone.region, destination_region)), None)
    if exact is not None:
        return exact

    default = next((zone for zone in candidates if zone.is_default), None)
    if default is not None:
        return default

    raise NoZoneError(vendor_region, destination_region)
