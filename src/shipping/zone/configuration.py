"""Validation and normalization of shipping zone payloads.

Everything an admin submits for a shipping zone goes through
``validate_zone`` before it reaches the aggregate. Errors are collected per
field and raised together as one ``ValidationError``; nothing is
auto-corrected.
"""

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal

from protean.exceptions import ValidationError

from shipping.errors import MultipleDefaultZonesError
from shipping.money import parse_number, to_money
from shipping.zone.matching import normalize_region
from shipping.zone.tiers import TIER_TYPE_ORDER, RateTier, TierType


@dataclass(frozen=True)
class ValidZone:
    """A zone payload that passed validation, with tiers in canonical order."""

    name: str
    region: str
    vendor_region: str
    base_rate: Decimal
    is_default: bool
    rate_tiers: tuple[RateTier, ...]


def _clean(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def _tier_field(tier, key):
    if isinstance(tier, RateTier):
        return {
            "type": tier.tier_type.value,
            "threshold": tier.threshold,
            "additional_fee": tier.additional_fee,
        }[key]
    return tier.get(key) if isinstance(tier, dict) else None


def _validate_tiers(additional_rates, errors):
    tiers = []
    seen = defaultdict(set)

    for position, raw in enumerate(additional_rates or [], start=1):
        label = f"Tier {position}"

        raw_type = _tier_field(raw, "type")
        try:
            tier_type = TierType(raw_type)
        except ValueError:
            errors["additional_rates"].append(f"{label}: type must be 'weight' or 'price'")
            continue

        threshold = parse_number(_tier_field(raw, "threshold"))
        fee = parse_number(_tier_field(raw, "additional_fee"))

        if threshold is None:
            errors["additional_rates"].append(f"{label}: threshold must be a number")
        elif threshold < 0:
            errors["additional_rates"].append(f"{label}: threshold must not be negative")
        if fee is None:
            errors["additional_rates"].append(f"{label}: additional fee must be a number")
        if threshold is None or threshold < 0 or fee is None:
            continue

        if threshold in seen[tier_type]:
            errors["additional_rates"].append(
                f"{label}: duplicate {tier_type.value} threshold {threshold}; thresholds must be strictly increasing"
            )
            continue
        seen[tier_type].add(threshold)

        tiers.append(RateTier(tier_type=tier_type, threshold=threshold, additional_fee=to_money(fee)))

    return tuple(sorted(tiers, key=lambda tier: (TIER_TYPE_ORDER[tier.tier_type], tier.threshold)))


def validate_zone(name, region, vendor_region, base_rate=0, is_default=False, additional_rates=None) -> ValidZone:
    """Validate a zone payload and return its normalized form.

    Args:
        additional_rates: iterable of ``RateTier`` or dicts with ``type``,
            ``threshold`` and ``additional_fee``.

    Raises:
        ValidationError: with messages keyed by ``name``, ``region``,
            ``vendor_region``, ``base_rate`` or ``additional_rates``.
    """
    errors = defaultdict(list)

    name, region, vendor_region = _clean(name), _clean(region), _clean(vendor_region)
    if not name:
        errors["name"].append("Zone name is required")
    if not region:
        errors["region"].append("Destination region is required")
    if not vendor_region:
        errors["vendor_region"].append("Vendor base region is required")

    rate = parse_number(0 if base_rate is None else base_rate)
    if rate is None:
        errors["base_rate"].append("Base rate must be a number")
    elif rate < 0:
        errors["base_rate"].append("Base rate must not be negative")

    if additional_rates is not None and not isinstance(additional_rates, list | tuple):
        errors["additional_rates"].append("Additional rates must be a list")
        additional_rates = None
    tiers = _validate_tiers(additional_rates, errors)

    if errors:
        raise ValidationError(dict(errors))

    return ValidZone(
        name=name,
        region=region,
        vendor_region=vendor_region,
        base_rate=to_money(rate),
        is_default=bool(is_default),
        rate_tiers=tiers,
    )


def validate_zone_set(zones):
    """Reject a set of zones holding two active defaults for one vendor region.

    Zones are grouped per owning vendor; two vendors based in the same region
    each keep their own default.

    Raises:
        MultipleDefaultZonesError
    """
    defaults = defaultdict(list)
    for zone in zones:
        if zone.is_default and zone.is_active is not False:
            defaults[(str(zone.vendor_id), normalize_region(zone.vendor_region))].append(zone)

    for zones_in_region in defaults.values():
        if len(zones_in_region) > 1:
            vendor_region = zones_in_region[0].vendor_region
            raise MultipleDefaultZonesError(
                {"is_default": [f"Only one default shipping zone is allowed for vendor region {vendor_region}"]}
            )
