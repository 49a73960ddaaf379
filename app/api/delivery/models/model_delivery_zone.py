from sqlalchemy import Column, Integer, String, DateTime, Numeric, Boolean, Text, CheckConstraint
from sqlalchemy.orm import relationship
from app.database.db_connection import Base, DELIVERY_SCHEMA
from app.utils.database_utils import now_trimmed


class DeliveryZoneModel(Base):
    __tablename__ = "delivery_zones"
    __table_args__ = (
        CheckConstraint("zone_number > 0", name="ck_delivery_zones_zone_number_positive"),
        CheckConstraint("delivery_days_min <= delivery_days_max", name="ck_delivery_zones_days_range"),
        CheckConstraint("delivery_charge >= 0", name="ck_delivery_zones_charge_non_negative"),
        {"schema": DELIVERY_SCHEMA},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    zone_number = Column(Integer, nullable=False, unique=True, index=True)
    zone_name = Column(String(120), nullable=False)

    delivery_days_min = Column(Integer, nullable=False)
    delivery_days_max = Column(Integer, nullable=False)
    delivery_charge = Column(Numeric(10, 2), nullable=False, default=0)

    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=now_trimmed, nullable=False)
    updated_at = Column(DateTime, default=now_trimmed, onupdate=now_trimmed, nullable=False)

    regions = relationship("ZoneRegionModel", back_populates="delivery_zone", passive_deletes=True)
