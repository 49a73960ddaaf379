from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.delivery.dependencies import get_delivery_charge_service, get_pincode_resolver
from app.api.delivery.schemas.schema_delivery_zone import DeliveryZoneOut
from app.api.delivery.schemas.schema_resolution import (
    DeliveryQuoteOut,
    DeliveryQuoteRequest,
    PincodeAvailabilityOut,
)
from app.api.delivery.services.service_delivery_charge import DeliveryChargeService
from app.api.delivery.services.service_delivery_zone import DeliveryZoneService
from app.api.delivery.services.service_pincode_resolver import PincodeResolverService
from app.database.db_connection import get_db

router = APIRouter(
    prefix="/api/delivery/public",
    tags=["Public - Delivery"],
)


@router.get("/zones", response_model=List[DeliveryZoneOut])
def list_active_zones(db: Session = Depends(get_db)):
    return DeliveryZoneService(db).list(only_active=True)


@router.get("/check/{pincode}", response_model=PincodeAvailabilityOut)
async def check_pincode(
    pincode: str,
    resolver: PincodeResolverService = Depends(get_pincode_resolver),
):
    """
    Delivery availability for a pincode.

    Not serviceable pincodes answer 200 with ``available: false``; malformed
    pincodes answer 400 and directory outages 503.
    """
    return await resolver.check_availability(pincode)


@router.post("/quote", response_model=DeliveryQuoteOut)
async def quote_delivery(
    payload: DeliveryQuoteRequest,
    charge_service: DeliveryChargeService = Depends(get_delivery_charge_service),
):
    return await charge_service.quote(payload.pincode, payload.cart_total)
