"""Domain events for the ShippingZone aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String, Text

from shipping.domain import shipping


@shipping.event(part_of="ShippingZone")
class ShippingZoneCreated:
    """A vendor configured a new shipping zone."""

    __version__ = 1

    zone_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    name = String(required=True, sanitize=False)
    region = String(required=True, sanitize=False)
    vendor_region = String(required=True, sanitize=False)
    base_rate = String(required=True)  # Decimal as string
    is_default = Boolean(required=True)
    additional_rates = Text()  # JSON-serialized tiers
    created_at = DateTime(required=True)


@shipping.event(part_of="ShippingZone")
class ShippingZoneUpdated:
    """A shipping zone's rates, regions or default flag changed."""

    __version__ = 1

    zone_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    name = String(required=True, sanitize=False)
    region = String(required=True, sanitize=False)
    vendor_region = String(required=True, sanitize=False)
    base_rate = String(required=True)
    is_default = Boolean(required=True)
    additional_rates = Text()
    updated_at = DateTime(required=True)


@shipping.event(part_of="ShippingZone")
class DefaultShippingZoneDemoted:
    """A zone lost its default flag because another zone became the default."""

    __version__ = 1

    zone_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    vendor_region = String(required=True, sanitize=False)
    replaced_by = Identifier()
    demoted_at = DateTime(required=True)


@shipping.event(part_of="ShippingZone")
class ShippingZoneVendorRegionMigrated:
    """A zone was moved to the vendor's new base region."""

    __version__ = 1

    zone_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    previous_vendor_region = String(required=True, sanitize=False)
    vendor_region = String(required=True, sanitize=False)
    migrated_at = DateTime(required=True)


@shipping.event(part_of="ShippingZone")
class ShippingZoneDeleted:
    """A shipping zone was removed from the vendor's configuration."""

    __version__ = 1

    zone_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    deleted_at = DateTime(required=True)
