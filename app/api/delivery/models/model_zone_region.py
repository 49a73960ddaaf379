import enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from app.database.db_connection import Base, DELIVERY_SCHEMA
from app.utils.database_utils import now_trimmed


class RegionType(str, enum.Enum):
    STATE = "state"
    DISTRICT = "district"
    PINCODE = "pincode"


class ZoneRegionModel(Base):
    __tablename__ = "zone_regions"
    __table_args__ = {"schema": DELIVERY_SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=True)
    delivery_zone_id = Column(
        Integer,
        ForeignKey(f"{DELIVERY_SCHEMA}.delivery_zones.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    region_type = Column(
        Enum(RegionType, name="region_type_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    state_name = Column(String(100), nullable=True)
    district_name = Column(String(100), nullable=True)
    pincode = Column(String(6), nullable=True, index=True)
    office_name = Column(String(150), nullable=True)

    # normalized natural key: one zone per state, state+district or pincode
    region_key = Column(String(220), nullable=False, unique=True, index=True)

    created_at = Column(DateTime, default=now_trimmed, nullable=False)
    updated_at = Column(DateTime, default=now_trimmed, onupdate=now_trimmed, nullable=False)

    delivery_zone = relationship("DeliveryZoneModel", back_populates="regions")

    @property
    def display_name(self) -> str:
        if self.region_type == RegionType.PINCODE:
            place = self.district_name or self.state_name
            return f"{self.pincode} ({place})" if place else self.pincode
        if self.region_type == RegionType.DISTRICT and self.district_name:
            return f"{self.state_name} - {self.district_name}"
        return self.state_name or ""
