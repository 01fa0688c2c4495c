"""ShippingZone aggregate (CQRS) — a vendor's rate rule for one destination region.

A zone prices shipments from the vendor's base region (``vendor_region``) to
one destination ``region``: a flat base rate plus weight and price tiers.
The vendor's default zone applies to destinations without a zone of their
own. Every write is validated through ``validate_zone`` first; the
single-default rule spans several aggregates and is enforced by the
management handler.
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, String, Text

from shipping.domain import shipping
from shipping.money import to_money
from shipping.zone.configuration import validate_zone
from shipping.zone.events import (
    DefaultShippingZoneDemoted,
    ShippingZoneCreated,
    ShippingZoneDeleted,
    ShippingZoneUpdated,
    ShippingZoneVendorRegionMigrated,
)
from shipping.zone.tiers import RateTier

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


def _dump_tiers(tiers):
    return json.dumps([tier.to_dict() for tier in tiers])


@shipping.aggregate
class ShippingZone:
    vendor_id = Identifier(required=True)
    name = String(required=True, max_length=255, sanitize=False)
    region = String(required=True, max_length=100, sanitize=False)
    vendor_region = String(required=True, max_length=100, sanitize=False)
    base_rate = Float(default=0.0, min_value=0.0)
    is_default = Boolean(default=False)
    additional_rates = Text()  # JSON array of {type, threshold, additional_fee}
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------
    @property
    def rate_tiers(self) -> tuple[RateTier, ...]:
        data = json.loads(self.additional_rates) if self.additional_rates else []
        return tuple(RateTier.from_dict(item) for item in data)

    @property
    def base_fee(self):
        return to_money(self.base_rate or 0)

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        vendor_id,
        name,
        region,
        vendor_region,
        base_rate=0.0,
        is_default=False,
        additional_rates=None,
    ):
        """Validate the payload and create a zone.

        Raises:
            ValidationError: the payload is malformed (see ``validate_zone``).
        """
        valid = validate_zone(
            name=name,
            region=region,
            vendor_region=vendor_region,
            base_rate=base_rate,
            is_default=is_default,
            additional_rates=additional_rates,
        )

        now = datetime.now(UTC)
        zone = cls(
            vendor_id=vendor_id,
            name=valid.name,
            region=valid.region,
            vendor_region=valid.vendor_region,
            base_rate=float(valid.base_rate),
            is_default=valid.is_default,
            additional_rates=_dump_tiers(valid.rate_tiers),
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        zone.raise_(
            ShippingZoneCreated(
                zone_id=str(zone.id),
                vendor_id=str(vendor_id),
                name=zone.name,
                region=zone.region,
                vendor_region=zone.vendor_region,
                base_rate=str(valid.base_rate),
                is_default=zone.is_default,
                additional_rates=zone.additional_rates,
                created_at=now,
            )
        )
        return zone

    # -------------------------------------------------------------------
    # Configuration changes
    # -------------------------------------------------------------------
    def _assert_active(self):
        if not self.is_active:
            raise ValidationError({"zone_id": ["Shipping zone has been deleted"]})

    def update_details(
        self,
        name=_UNSET,
        region=_UNSET,
        vendor_region=_UNSET,
        base_rate=_UNSET,
        is_default=_UNSET,
        additional_rates=_UNSET,
    ):
        """Apply a partial update; omitted fields keep their current value.

        The merged zone is validated as a whole before anything changes.
        """
        self._assert_active()

        valid = validate_zone(
            name=self.name if name is _UNSET else name,
            region=self.region if region is _UNSET else region,
            vendor_region=self.vendor_region if vendor_region is _UNSET else vendor_region,
            base_rate=self.base_rate if base_rate is _UNSET else base_rate,
            is_default=self.is_default if is_default is _UNSET else is_default,
            additional_rates=self.rate_tiers if additional_rates is _UNSET else additional_rates,
        )

        self.name = valid.name
        self.region = valid.region
        self.vendor_region = valid.vendor_region
        self.base_rate = float(valid.base_rate)
        self.is_default = valid.is_default
        self.additional_rates = _dump_tiers(valid.rate_tiers)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ShippingZoneUpdated(
                zone_id=str(self.id),
                vendor_id=str(self.vendor_id),
                name=self.name,
                region=self.region,
                vendor_region=self.vendor_region,
                base_rate=str(valid.base_rate),
                is_default=self.is_default,
                additional_rates=self.additional_rates,
                updated_at=self.updated_at,
            )
        )

    def demote_default(self, replaced_by=None):
        """Clear the default flag because another zone took over."""
        if not self.is_default:
            raise ValidationError({"is_default": ["Shipping zone is not the default zone"]})

        self.is_default = False
        self.updated_at = datetime.now(UTC)
        self.raise_(
            DefaultShippingZoneDemoted(
                zone_id=str(self.id),
                vendor_id=str(self.vendor_id),
                vendor_region=self.vendor_region,
                replaced_by=str(replaced_by) if replaced_by else None,
                demoted_at=self.updated_at,
            )
        )

    def migrate_vendor_region(self, vendor_region):
        """Rewrite the zone's vendor region after the vendor moved base region."""
        self._assert_active()

        new_region = (vendor_region or "").strip()
        if not new_region:
            raise ValidationError({"vendor_region": ["Vendor base region is required"]})

        previous = self.vendor_region
        self.vendor_region = new_region
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ShippingZoneVendorRegionMigrated(
                zone_id=str(self.id),
                vendor_id=str(self.vendor_id),
                previous_vendor_region=previous,
                vendor_region=new_region,
                migrated_at=self.updated_at,
            )
        )

    def delete(self):
        """Soft-delete the zone. The default zone cannot be deleted."""
        self._assert_active()

        if self.is_default:
            raise ValidationError(
                {"is_default": ["Cannot delete the default shipping zone. Make another zone default first."]}
            )

        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ShippingZoneDeleted(
                zone_id=str(self.id),
                vendor_id=str(self.vendor_id),
                deleted_at=self.updated_at,
            )
        )
