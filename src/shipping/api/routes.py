"""FastAPI routes for the Shipping domain: zones, vendor base regions and quotes."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from shipping.api.schemas import (
    BaseRegionResponse,
    CreateShippingZoneRequest,
    DeliveryEstimateSchema,
    ReconciliationResponse,
    SetBaseRegionRequest,
    ShippingQuoteRequest,
    ShippingQuoteResponse,
    ShippingZoneListResponse,
    ShippingZoneResponse,
    StatusResponse,
    UpdateShippingZoneRequest,
    VendorShippingFeeSchema,
    ZoneIdResponse,
    dump_tiers,
)
from shipping.fees.calculator import CartLine
from shipping.fees.delivery import estimate_delivery
from shipping.fees.quoting import quote_shipping
from shipping.utils.logging import log_context
from shipping.vendor.base_region import SetVendorBaseRegion
from shipping.zone.lookup import get_vendor_zone, list_vendor_zones, stored_base_region
from shipping.zone.management import CreateShippingZone, DeleteShippingZone, UpdateShippingZone
from shipping.zone.reconciliation import zones_needing_reconciliation

# ---------------------------------------------------------------------------
# Shipping Zone Router
# ---------------------------------------------------------------------------
zone_router = APIRouter(prefix="/shipping-zones", tags=["shipping-zones"])


@zone_router.post("", status_code=201, response_model=ZoneIdResponse)
async def create_zone(body: CreateShippingZoneRequest) -> ZoneIdResponse:
    command = CreateShippingZone(
        vendor_id=body.vendor_id,
        name=body.name,
        region=body.region,
        vendor_region=body.vendor_region,
        base_rate=body.base_rate,
        is_default=body.is_default,
        additional_rates=dump_tiers(body.additional_rates),
    )
    result = current_domain.process(command, asynchronous=False)
    return ZoneIdResponse(zone_id=result)


@zone_router.get("", response_model=ShippingZoneListResponse)
async def list_zones(vendor_id: str) -> ShippingZoneListResponse:
    zones = [ShippingZoneResponse.from_zone(zone) for zone in list_vendor_zones(vendor_id)]
    return ShippingZoneListResponse(count=len(zones), zones=zones)


@zone_router.get("/{zone_id}", response_model=ShippingZoneResponse)
async def get_zone(zone_id: str, vendor_id: str) -> ShippingZoneResponse:
    return ShippingZoneResponse.from_zone(get_vendor_zone(zone_id, vendor_id))


@zone_router.put("/{zone_id}", response_model=StatusResponse)
async def update_zone(zone_id: str, body: UpdateShippingZoneRequest) -> StatusResponse:
    command = UpdateShippingZone(
        zone_id=zone_id,
        vendor_id=body.vendor_id,
        name=body.name,
        region=body.region,
        vendor_region=body.vendor_region,
        base_rate=body.base_rate,
        is_default=body.is_default,
        additional_rates=dump_tiers(body.additional_rates),
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@zone_router.delete("/{zone_id}", response_model=StatusResponse)
async def delete_zone(zone_id: str, vendor_id: str) -> StatusResponse:
    command = DeleteShippingZone(zone_id=zone_id, vendor_id=vendor_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Vendor Router
# ---------------------------------------------------------------------------
vendor_router = APIRouter(prefix="/vendors", tags=["vendors"])


@vendor_router.put("/{vendor_id}/base-region", response_model=BaseRegionResponse)
async def set_base_region(vendor_id: str, body: SetBaseRegionRequest) -> BaseRegionResponse:
    command = SetVendorBaseRegion(
        vendor_id=vendor_id,
        base_region=body.base_region,
        migrate_zones=body.migrate_zones,
    )
    migrated = current_domain.process(command, asynchronous=False)
    return BaseRegionResponse(
        vendor_id=vendor_id,
        base_region=stored_base_region(vendor_id),
        migrated_zones=migrated or 0,
    )


@vendor_router.get("/{vendor_id}/zones/reconciliation", response_model=ReconciliationResponse)
async def zone_reconciliation(vendor_id: str) -> ReconciliationResponse:
    zones = zones_needing_reconciliation(vendor_id)
    return ReconciliationResponse(
        vendor_id=vendor_id,
        base_region=stored_base_region(vendor_id),
        zones=[ShippingZoneResponse.from_zone(zone) for zone in zones],
    )


# ---------------------------------------------------------------------------
# Quote Router
# ---------------------------------------------------------------------------
quote_router = APIRouter(prefix="/shipping", tags=["shipping"])


@quote_router.post("/quote", response_model=ShippingQuoteResponse)
async def quote(body: ShippingQuoteRequest) -> ShippingQuoteResponse:
    with log_context(destination_region=body.destination_region):
        lines = [
            CartLine(
                vendor_id=item.vendor_id,
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=item.unit_price,
                unit_weight=item.unit_weight,
            )
            for item in body.items
        ]
        fees = quote_shipping(body.destination_region, lines)

    estimate = estimate_delivery()
    return ShippingQuoteResponse(
        destination_region=fees.destination_region,
        total_shipping_fee=float(fees.total),
        vendors=[
            VendorShippingFeeSchema(
                vendor_id=vendor_fee.vendor_id,
                fee=float(vendor_fee.fee),
                zone_name=vendor_fee.zone_name,
                item_count=vendor_fee.item_count,
                total_weight=float(vendor_fee.total_weight),
                total_price=float(vendor_fee.total_price),
            )
            for vendor_fee in fees.per_vendor.values()
        ],
        estimated_delivery=DeliveryEstimateSchema(
            earliest=estimate.earliest,
            latest=estimate.latest,
            display_text=estimate.display_text,
        ),
    )
