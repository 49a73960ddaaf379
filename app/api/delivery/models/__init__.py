from .model_delivery_zone import DeliveryZoneModel
from .model_zone_region import RegionType, ZoneRegionModel

__all__ = [
    "DeliveryZoneModel",
    "RegionType",
    "ZoneRegionModel",
]
