"""Rate tiers — threshold-keyed surcharges on shipment weight or value.

A zone's tiers are not cumulative: for each tier type only the highest tier
whose threshold the shipment reaches applies. Weight and price tiers are
evaluated independently, so a heavy and valuable shipment picks up both.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from shipping.money import ZERO, to_decimal, to_money


class TierType(Enum):
    WEIGHT = "weight"
    PRICE = "price"


# Weight tiers are listed before price tiers in normalized configuration
TIER_TYPE_ORDER = {TierType.WEIGHT: 0, TierType.PRICE: 1}


@dataclass(frozen=True)
class RateTier:
    """A surcharge applied once the tier's metric reaches ``threshold``.

    ``additional_fee`` may be negative, in which case the tier is a discount.
    """

    tier_type: TierType
    threshold: Decimal
    additional_fee: Decimal

    @classmethod
    def from_dict(cls, data):
        return cls(
            tier_type=TierType(data["type"]),
            threshold=to_decimal(data["threshold"]),
            additional_fee=to_money(data["additional_fee"]),
        )

    def to_dict(self):
        # Stored as strings to keep exact decimal values in JSON
        return {
            "type": self.tier_type.value,
            "threshold": str(self.threshold),
            "additional_fee": str(self.additional_fee),
        }


def evaluate_tiers(tiers, tier_type: TierType, metric_value) -> Decimal:
    """Return the additional fee of the highest tier reached by ``metric_value``.

    Thresholds are inclusive. Returns zero when no tier of ``tier_type``
    qualifies.
    """
    metric = to_decimal(metric_value)
    selected = None
    for tier in tiers:
        if tier.tier_type != tier_type or tier.threshold > metric:
            continue
        if selected is None or tier.threshold > selected.threshold:
            selected = tier

    if selected is None:
        return ZERO
    return to_money(selected.additional_fee)
