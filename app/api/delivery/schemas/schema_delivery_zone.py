from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, condecimal, constr, model_validator


class DeliveryZoneBase(BaseModel):
    zone_number: int = Field(..., gt=0, examples=[1], description="User-facing zone ordering, unique.")
    zone_name: constr(strip_whitespace=True, min_length=1, max_length=120) = Field(..., examples=["Local"])
    delivery_days_min: int = Field(..., ge=0, examples=[2])
    delivery_days_max: int = Field(..., ge=0, examples=[3])
    delivery_charge: condecimal(ge=0, decimal_places=2) = Field(..., examples=["50.00"])
    description: Optional[str] = None
    is_active: bool = True

    @model_validator(mode="after")
    def _check_days_range(self):
        if self.delivery_days_min > self.delivery_days_max:
            raise ValueError("delivery_days_min must be less than or equal to delivery_days_max")
        return self


class DeliveryZoneCreate(DeliveryZoneBase):
    pass


class DeliveryZoneUpsert(DeliveryZoneBase):
    """Insert when ``id`` is empty, update in place otherwise."""

    id: Optional[int] = None


class DeliveryZoneUpdate(BaseModel):
    zone_number: Optional[int] = Field(None, gt=0)
    zone_name: Optional[constr(strip_whitespace=True, min_length=1, max_length=120)] = None
    delivery_days_min: Optional[int] = Field(None, ge=0)
    delivery_days_max: Optional[int] = Field(None, ge=0)
    delivery_charge: Optional[condecimal(ge=0, decimal_places=2)] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def _reject_nulls(self):
        # only description may be cleared
        nulls = sorted(
            name for name in self.model_fields_set
            if name != "description" and getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self


class DeliveryZoneStatusUpdate(BaseModel):
    is_active: bool


class DeliveryZoneOut(BaseModel):
    id: int
    zone_number: int
    zone_name: str
    delivery_days_min: int
    delivery_days_max: int
    delivery_charge: Decimal
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DeliveryZoneDeleteOut(BaseModel):
    message: str
    zone_id: int
    regions_removed: int = 0
