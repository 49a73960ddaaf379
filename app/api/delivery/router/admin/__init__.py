from .router_delivery_zones import router as router_delivery_zones
from .router_zone_regions import router as router_zone_regions
from .router_pincode_directory import router as router_pincode_directory

__all__ = [
    "router_delivery_zones",
    "router_zone_regions",
    "router_pincode_directory",
]
