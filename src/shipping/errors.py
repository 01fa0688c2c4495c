"""Shipping error taxonomy.

Configuration problems are reported as protean ``ValidationError`` with
field-level messages so forms can render them next to the offending input.
Calculation failures carry the vendor and destination but never zone ids.
"""

from protean.exceptions import ValidationError


class MultipleDefaultZonesError(ValidationError):
    """A write would leave two default zones for the same vendor region."""


class NoZoneError(Exception):
    """No zone of the vendor serves the destination region."""

    def __init__(self, vendor_region, destination_region):
        self.vendor_region = vendor_region
        self.destination_region = destination_region
        super().__init__(f"No shipping zone from {vendor_region!r} serves {destination_region!r}")


class CalculationError(Exception):
    """Shipping could not be priced for one vendor of the cart."""

    def __init__(self, vendor_id, destination_region, reason):
        self.vendor_id = vendor_id
        self.destination_region = destination_region
        self.reason = reason
        super().__init__(f"Shipping unavailable for vendor {vendor_id} to {destination_region}: {reason}")

    def to_dict(self):
        return {
            "vendor_id": self.vendor_id,
            "destination_region": self.destination_region,
            "reason": self.reason,
        }
