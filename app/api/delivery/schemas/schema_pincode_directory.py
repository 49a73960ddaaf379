from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator


class PincodeLocality(BaseModel):
    """One post-office record from the pincode directory."""

    pincode: str
    office_name: Optional[str] = Field(None, validation_alias=AliasChoices("office_name", "officename"))
    district_name: Optional[str] = Field(None, validation_alias=AliasChoices("district_name", "districtname"))
    state_name: Optional[str] = Field(None, validation_alias=AliasChoices("state_name", "statename"))
    taluk: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("pincode", mode="before")
    @classmethod
    def _pincode_as_str(cls, value):
        # the directory serves pincodes as numbers in some datasets
        return str(value).strip() if value is not None else value


class PincodeDirectoryPage(BaseModel):
    records: List[PincodeLocality] = Field(default_factory=list)
    total: int = 0
    count: int = 0
    limit: int = 0
    offset: int = 0

    model_config = ConfigDict(extra="ignore")

    @field_validator("total", "count", "limit", "offset", mode="before")
    @classmethod
    def _int_or_zero(cls, value):
        if value in (None, ""):
            return 0
        return int(value)


class DirectoryImportRequest(BaseModel):
    delivery_zone_id: int
    state_name: str = Field(..., min_length=1)
    district_name: Optional[str] = None
    granularity: Literal["pincode", "region"] = Field(
        "pincode",
        description="pincode: one region per fetched pincode; region: assign the whole state/district.",
    )


class DirectoryPincodesOut(BaseModel):
    state_name: str
    district_name: Optional[str] = None
    total: int
    records: List[PincodeLocality]
