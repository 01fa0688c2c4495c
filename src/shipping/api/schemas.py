"""Pydantic request/response schemas for the Shipping API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. Tier contents are deliberately loose here; the
zone configuration validator owns the rules and reports them per field.
"""

import json
from datetime import date

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class RateTierSchema(BaseModel):
    type: str
    threshold: float | str
    additional_fee: float | str


def dump_tiers(tiers: list[RateTierSchema] | None) -> str | None:
    """Serialize tiers for the JSON ``additional_rates`` command field."""
    if tiers is None:
        return None
    return json.dumps([tier.model_dump() for tier in tiers])


# ---------------------------------------------------------------------------
# Zone Request Schemas
# ---------------------------------------------------------------------------
class CreateShippingZoneRequest(BaseModel):
    vendor_id: str
    name: str
    region: str
    vendor_region: str | None = None
    base_rate: float = 0.0
    is_default: bool = False
    additional_rates: list[RateTierSchema] = Field(default_factory=list)


class UpdateShippingZoneRequest(BaseModel):
    vendor_id: str
    name: str | None = None
    region: str | None = None
    vendor_region: str | None = None
    base_rate: float | None = None
    is_default: bool | None = None
    additional_rates: list[RateTierSchema] | None = None


# ---------------------------------------------------------------------------
# Vendor Request Schemas
# ---------------------------------------------------------------------------
class SetBaseRegionRequest(BaseModel):
    base_region: str
    migrate_zones: bool = True


# ---------------------------------------------------------------------------
# Quote Request Schemas
# ---------------------------------------------------------------------------
class CartLineSchema(BaseModel):
    vendor_id: str
    product_id: str | None = None
    quantity: int = Field(ge=1, default=1)
    unit_price: float = Field(ge=0.0)
    unit_weight: float | None = Field(default=None, ge=0.0)


class ShippingQuoteRequest(BaseModel):
    destination_region: str
    items: list[CartLineSchema] = Field(min_length=1)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class ZoneIdResponse(BaseModel):
    zone_id: str


class ShippingZoneResponse(BaseModel):
    zone_id: str
    vendor_id: str
    name: str
    region: str
    vendor_region: str
    base_rate: float
    is_default: bool
    additional_rates: list[RateTierSchema]

    @classmethod
    def from_zone(cls, zone):
        return cls(
            zone_id=str(zone.id),
            vendor_id=str(zone.vendor_id),
            name=zone.name,
            region=zone.region,
            vendor_region=zone.vendor_region,
            base_rate=float(zone.base_fee),
            is_default=bool(zone.is_default),
            additional_rates=[
                RateTierSchema(
                    type=tier.tier_type.value,
                    threshold=float(tier.threshold),
                    additional_fee=float(tier.additional_fee),
                )
                for tier in zone.rate_tiers
            ],
        )


class ShippingZoneListResponse(BaseModel):
    count: int
    zones: list[ShippingZoneResponse]


class BaseRegionResponse(BaseModel):
    vendor_id: str
    base_region: str
    migrated_zones: int


class ReconciliationResponse(BaseModel):
    vendor_id: str
    base_region: str | None
    zones: list[ShippingZoneResponse]


class VendorShippingFeeSchema(BaseModel):
    vendor_id: str
    fee: float
    zone_name: str
    item_count: int
    total_weight: float
    total_price: float


class DeliveryEstimateSchema(BaseModel):
    earliest: date
    latest: date
    display_text: str


class ShippingQuoteResponse(BaseModel):
    destination_region: str
    total_shipping_fee: float
    vendors: list[VendorShippingFeeSchema]
    estimated_delivery: DeliveryEstimateSchema
