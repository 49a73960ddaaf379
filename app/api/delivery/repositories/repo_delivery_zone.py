from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.api.delivery.models.model_delivery_zone import DeliveryZoneModel
from app.api.delivery.models.model_zone_region import ZoneRegionModel


class DeliveryZoneRepository:
    def __init__(self, db: Session):
        self.db = db

    def list(self, only_active: bool = False) -> List[DeliveryZoneModel]:
        query = self.db.query(DeliveryZoneModel)
        if only_active:
            query = query.filter(DeliveryZoneModel.is_active.is_(True))
        return query.order_by(DeliveryZoneModel.zone_number.asc()).all()

    def get(self, zone_id: int) -> Optional[DeliveryZoneModel]:
        return self.db.query(DeliveryZoneModel).filter_by(id=zone_id).first()

    def exists_zone_number(self, zone_number: int, ignore_id: Optional[int] = None) -> bool:
        query = self.db.query(DeliveryZoneModel).filter(DeliveryZoneModel.zone_number == zone_number)
        if ignore_id is not None:
            query = query.filter(DeliveryZoneModel.id != ignore_id)
        return self.db.query(query.exists()).scalar()

    def count_regions(self, zone_id: int) -> int:
        return (
            self.db.query(func.count(ZoneRegionModel.id))
            .filter(ZoneRegionModel.delivery_zone_id == zone_id)
            .scalar()
        )

    def create(self, zone: DeliveryZoneModel) -> DeliveryZoneModel:
        self.db.add(zone)
        self.db.commit()
        self.db.refresh(zone)
        return zone

    def update(self, zone: DeliveryZoneModel, data: dict) -> DeliveryZoneModel:
        for k, v in data.items():
            setattr(zone, k, v)
        self.db.commit()
        self.db.refresh(zone)
        return zone

    def delete(self, zone: DeliveryZoneModel, cascade_regions: bool = False) -> int:
        """Deletes the zone; with cascade_regions its regions go in the same transaction."""
        removed = 0
        if cascade_regions:
            removed = (
                self.db.query(ZoneRegionModel)
                .filter(ZoneRegionModel.delivery_zone_id == zone.id)
                .delete(synchronize_session=False)
            )
        self.db.delete(zone)
        self.db.commit()
        return removed
