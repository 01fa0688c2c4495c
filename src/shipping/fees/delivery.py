"""Delivery window estimate shown next to the shipping fee at checkout."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

MIN_BUSINESS_DAYS = 2
MAX_BUSINESS_DAYS = 5


@dataclass(frozen=True)
class DeliveryEstimate:
    earliest: date
    latest: date
    display_text: str


def add_business_days(start: date, days: int) -> date:
    """Move forward ``days`` weekdays from ``start``, skipping Saturdays and Sundays."""
    current = start
    remaining = days
    while remaining > 0:
        current += timedelta(days=1)
        if current.weekday() < 5:
            remaining -= 1
    return current


def estimate_delivery(shipped_on: date | None = None) -> DeliveryEstimate:
    shipped_on = shipped_on or datetime.now(UTC).date()
    return DeliveryEstimate(
        earliest=add_business_days(shipped_on, MIN_BUSINESS_DAYS),
        latest=add_business_days(shipped_on, MAX_BUSINESS_DAYS),
        display_text=f"{MIN_BUSINESS_DAYS}-{MAX_BUSINESS_DAYS} business days",
    )
