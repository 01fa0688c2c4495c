from shipping.api.errors import register_error_handlers
from shipping.api.routes import quote_router, vendor_router, zone_router

__all__ = ["zone_router", "vendor_router", "quote_router", "register_error_handlers"]
