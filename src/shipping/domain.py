"""Shipping bounded context — Shipping Zones and Shipping Fee Calculation.

Vendors configure shipping zones (base region → destination region rates
with weight and price tiers). At checkout the fee engine splits a cart by
vendor, matches each vendor's zone and prices the shipment.
"""

from protean.domain import Domain

from shipping.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
shipping = Domain(name="shipping")
