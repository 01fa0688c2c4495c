"""Shared BDD fixtures and step definitions for shipping fees."""

import json
from uuid import uuid4

import pytest
from protean import current_domain
from pytest_bdd import given, parsers
from shipping.vendor.base_region import SetVendorBaseRegion
from shipping.zone.management import CreateShippingZone


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def vendor_id():
    return f"vendor-bdd-{uuid4().hex[:8]}"


@pytest.fixture()
def outcome():
    """Container for the quote result or the error that prevented it."""
    return {"fees": None, "exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a vendor based in "{region}"'))
def vendor_based_in(vendor_id, region):
    current_domain.process(SetVendorBaseRegion(vendor_id=vendor_id, base_region=region), asynchronous=False)


@given(parsers.cfparse('a default zone "{name}" for "{region}" with base rate {base_rate:g}'))
def default_zone(vendor_id, name, region, base_rate):
    current_domain.process(
        CreateShippingZone(
            vendor_id=vendor_id,
            name=name,
            region=region,
            base_rate=base_rate,
            is_default=True,
        ),
        asynchronous=False,
    )


@given(
    parsers.cfparse(
        'a zone "{name}" for "{region}" with base rate {base_rate:g} '
        "and a weight tier from {threshold:g} kg adding {fee:g}"
    )
)
def zone_with_weight_tier(vendor_id, name, region, base_rate, threshold, fee):
    current_domain.process(
        CreateShippingZone(
            vendor_id=vendor_id,
            name=name,
            region=region,
            base_rate=base_rate,
            additional_rates=json.dumps([{"type": "weight", "threshold": threshold, "additional_fee": fee}]),
        ),
        asynchronous=False,
    )
