from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.api.delivery.models.model_zone_region import RegionType
from app.api.delivery.schemas.schema_delivery_zone import DeliveryZoneOut
from app.api.delivery.utils.region_keys import (
    clean_name,
    is_valid_pincode,
    split_legacy_state_name,
)


class ZoneRegionBase(BaseModel):
    region_type: Optional[RegionType] = Field(
        None,
        description="state, district or pincode. Inferred from the filled fields when omitted.",
    )
    state_name: Optional[str] = Field(None, max_length=100, examples=["Tamil Nadu"])
    district_name: Optional[str] = Field(None, max_length=100, examples=["Vellore"])
    pincode: Optional[str] = Field(None, examples=["632001"])
    office_name: Optional[str] = Field(None, max_length=150)

    @field_validator("pincode", mode="before")
    @classmethod
    def _pincode_as_str(cls, value):
        # exports and spreadsheets carry pincodes as numbers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def _normalize_region(self):
        self.state_name = clean_name(self.state_name)
        self.district_name = clean_name(self.district_name)
        self.pincode = self.pincode.strip() if self.pincode else None

        if self.region_type is None:
            if self.pincode:
                self.region_type = RegionType.PINCODE
            elif self.district_name:
                self.region_type = RegionType.DISTRICT
            else:
                self.region_type = RegionType.STATE

        # legacy rows stored districts as "State - District" in state_name
        if (
            self.region_type == RegionType.DISTRICT
            and not self.district_name
            and self.state_name
        ):
            self.state_name, self.district_name = split_legacy_state_name(self.state_name)

        if self.region_type == RegionType.PINCODE:
            if not is_valid_pincode(self.pincode):
                raise ValueError("pincode must be exactly 6 digits")
        else:
            if not self.state_name:
                raise ValueError("state_name is required for state and district regions")
            if self.region_type == RegionType.DISTRICT and not self.district_name:
                raise ValueError("district_name is required for district regions")
            if self.region_type == RegionType.STATE:
                self.district_name = None
            self.pincode = None
        return self


class ZoneRegionCreate(ZoneRegionBase):
    delivery_zone_id: int = Field(..., examples=[1])


class ZoneRegionImportRecord(ZoneRegionBase):
    delivery_zone_id: int


class ZoneRegionOut(BaseModel):
    id: int
    delivery_zone_id: int
    region_type: RegionType
    state_name: Optional[str] = None
    district_name: Optional[str] = None
    pincode: Optional[str] = None
    office_name: Optional[str] = None
    region_key: str
    display_name: str
    created_at: datetime
    updated_at: datetime
    delivery_zone: Optional[DeliveryZoneOut] = None

    model_config = ConfigDict(from_attributes=True)


class ZoneRegionPageOut(BaseModel):
    items: List[ZoneRegionOut]
    total: int
    page: int
    page_size: int


class ImportFailure(BaseModel):
    index: int
    region_key: Optional[str] = None
    error: str


class BulkImportResult(BaseModel):
    succeeded: int = 0
    created: int = 0
    updated: int = 0
    failed: List[ImportFailure] = Field(default_factory=list)
