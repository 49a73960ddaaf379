from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.api.delivery.models.model_zone_region import RegionType


class DeliveryResolution(BaseModel):
    """Zone charge and transit days resolved for a pincode (never persisted)."""

    pincode: str
    zone_id: int
    zone_number: int
    zone_name: str
    delivery_days_min: int
    delivery_days_max: int
    delivery_charge: Decimal
    matched_state: Optional[str] = None
    matched_city: Optional[str] = None
    matched_region_type: RegionType

    model_config = ConfigDict(from_attributes=True)


class PincodeAvailabilityOut(BaseModel):
    pincode: str
    available: bool
    delivery: Optional[DeliveryResolution] = None
    reason: Optional[str] = None
    message: Optional[str] = None


class DeliveryQuoteRequest(BaseModel):
    pincode: str = Field(..., examples=["632001"])
    cart_total: Decimal = Field(..., ge=0, examples=["1499.00"])


class DeliveryQuoteOut(BaseModel):
    pincode: str
    cart_total: Decimal
    delivery: DeliveryResolution
    delivery_charge: Decimal
    free_shipping_threshold: Decimal
    remaining_for_free_shipping: Decimal
    delivery_days_label: str
    order_total: Decimal
