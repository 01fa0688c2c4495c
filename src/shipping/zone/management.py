"""Shipping zone management commands and handler for vendor admins.

Making a zone the default demotes the vendor's previous default zone for
the same vendor region within the same unit of work; the demotion is
recorded with its own event. The resulting set of zones is checked once
more before anything is written.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from shipping.domain import shipping
from shipping.zone.configuration import validate_zone_set
from shipping.zone.lookup import active_zones_for_vendor, get_vendor_zone, stored_base_region
from shipping.zone.matching import same_region
from shipping.zone.zone import ShippingZone

logger = structlog.get_logger(__name__)


@shipping.command(part_of="ShippingZone")
class CreateShippingZone:
    """Configure a new shipping zone for a vendor."""

    vendor_id = Identifier(required=True)
    name = String(max_length=255, sanitize=False)
    region = String(max_length=100, sanitize=False)
    vendor_region = String(max_length=100, sanitize=False)  # Defaults to the vendor's stored base region
    base_rate = Float(default=0.0)
    is_default = Boolean(default=False)
    additional_rates = Text()  # JSON: list of {type, threshold, additional_fee}


@shipping.command(part_of="ShippingZone")
class UpdateShippingZone:
    """Change a zone. Omitted fields keep their current value."""

    zone_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    name = String(max_length=255, sanitize=False)
    region = String(max_length=100, sanitize=False)
    vendor_region = String(max_length=100, sanitize=False)
    base_rate = Float()
    is_default = Boolean()
    additional_rates = Text()


@shipping.command(part_of="ShippingZone")
class DeleteShippingZone:
    """Remove a zone that is not the vendor's default."""

    zone_id = Identifier(required=True)
    vendor_id = Identifier(required=True)


def _load_rates(additional_rates):
    if additional_rates is None:
        return None
    if not isinstance(additional_rates, str):
        return additional_rates
    try:
        return json.loads(additional_rates)
    except json.JSONDecodeError as exc:
        raise ValidationError({"additional_rates": ["Additional rates must be valid JSON"]}) from exc


def save_with_single_default(zone):
    """Persist ``zone``, demoting any other default in its vendor region."""
    repo = current_domain.repository_for(ShippingZone)
    siblings = [other for other in active_zones_for_vendor(zone.vendor_id) if str(other.id) != str(zone.id)]

    demoted = []
    if zone.is_default and zone.is_active:
        for other in siblings:
            if other.is_default and same_region(other.vendor_region, zone.vendor_region):
                other.demote_default(replaced_by=zone.id)
                demoted.append(other)

    validate_zone_set([*siblings, zone])

    for other in demoted:
        repo.add(other)
        logger.info(
            "Demoted previous default shipping zone",
            zone_id=str(other.id),
            vendor_id=str(other.vendor_id),
            replaced_by=str(zone.id),
        )
    repo.add(zone)


@shipping.command_handler(part_of=ShippingZone)
class ShippingZoneManagementHandler:
    @handle(CreateShippingZone)
    def create_zone(self, command):
        vendor_region = command.vendor_region or stored_base_region(command.vendor_id)

        zone = ShippingZone.create(
            vendor_id=command.vendor_id,
            name=command.name,
            region=command.region,
            vendor_region=vendor_region,
            base_rate=command.base_rate if command.base_rate is not None else 0.0,
            is_default=bool(command.is_default),
            additional_rates=_load_rates(command.additional_rates),
        )
        save_with_single_default(zone)

        logger.info(
            "Shipping zone created",
            zone_id=str(zone.id),
            vendor_id=str(zone.vendor_id),
            region=zone.region,
            is_default=zone.is_default,
        )
        return str(zone.id)

    @handle(UpdateShippingZone)
    def update_zone(self, command):
        zone = get_vendor_zone(command.zone_id, command.vendor_id)

        changes = {
            field: getattr(command, field)
            for field in ("name", "region", "vendor_region", "base_rate", "is_default")
            if getattr(command, field) is not None
        }
        if command.additional_rates is not None:
            changes["additional_rates"] = _load_rates(command.additional_rates)

        zone.update_details(**changes)
        save_with_single_default(zone)

        logger.info(
            "Shipping zone updated",
            zone_id=str(zone.id),
            vendor_id=str(zone.vendor_id),
            fields=sorted(changes),
        )

    @handle(DeleteShippingZone)
    def delete_zone(self, command):
        repo = current_domain.repository_for(ShippingZone)
        zone = get_vendor_zone(command.zone_id, command.vendor_id)
        zone.delete()
        repo.add(zone)

        logger.info("Shipping zone deleted", zone_id=str(zone.id), vendor_id=str(zone.vendor_id))
