# app/api/delivery/router/router.py

from fastapi import APIRouter

from app.api.delivery.router.admin import (
    router_delivery_zones,
    router_pincode_directory,
    router_zone_regions,
)
from app.api.delivery.router.public import router_delivery_public

api_delivery = APIRouter(
    tags=["API - Delivery"]
)

# Public routers (storefront and checkout)
api_delivery.include_router(router_delivery_public)

# Admin routers (get_current_user)
api_delivery.include_router(router_delivery_zones)
api_delivery.include_router(router_zone_regions)
api_delivery.include_router(router_pincode_directory)
