"""Base-region reconciliation for shipping zones.

Zones store the vendor region they were configured under. When a vendor
moves base region those zones stop matching until they are migrated; this
module finds such zones and performs the migration.
"""

import structlog
from protean.utils.globals import current_domain

from shipping.zone.configuration import validate_zone_set
from shipping.zone.lookup import active_zones_for_vendor, find_vendor_profile
from shipping.zone.matching import same_region
from shipping.zone.zone import ShippingZone

logger = structlog.get_logger(__name__)


def find_drifted_zones(base_region, zones):
    """Zones whose vendor region differs from ``base_region``."""
    return [zone for zone in zones if zone.is_active is not False and not same_region(zone.vendor_region, base_region)]


def zones_needing_reconciliation(vendor_id):
    """Active zones of a vendor still configured under another base region.

    Empty when the vendor has not recorded a base region.
    """
    profile = find_vendor_profile(vendor_id)
    if profile is None:
        return []
    return find_drifted_zones(profile.base_region, active_zones_for_vendor(vendor_id))


def migrate_vendor_zones(vendor_id, base_region):
    """Rewrite ``vendor_region`` on every drifted zone of the vendor.

    The whole set is validated before any zone is saved, so a migration that
    would leave two default zones is rejected as a unit.

    Returns:
        Number of zones migrated.

    Raises:
        MultipleDefaultZonesError
    """
    zones = active_zones_for_vendor(vendor_id)
    drifted = find_drifted_zones(base_region, zones)
    for zone in drifted:
        zone.migrate_vendor_region(base_region)

    validate_zone_set(zones)

    repo = current_domain.repository_for(ShippingZone)
    for zone in drifted:
        repo.add(zone)

    if drifted:
        logger.info(
            "Migrated shipping zones to new base region",
            vendor_id=str(vendor_id),
            base_region=base_region,
            migrated_count=len(drifted),
        )
    return len(drifted)
