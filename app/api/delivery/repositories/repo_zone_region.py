from typing import List, Optional, Sequence, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from app.api.delivery.models.model_zone_region import RegionType, ZoneRegionModel


class ZoneRegionRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, region_id: int) -> Optional[ZoneRegionModel]:
        return (
            self.db.query(ZoneRegionModel)
            .options(joinedload(ZoneRegionModel.delivery_zone))
            .filter_by(id=region_id)
            .first()
        )

    def get_by_key(self, region_key: str) -> Optional[ZoneRegionModel]:
        return self.db.query(ZoneRegionModel).filter_by(region_key=region_key).first()

    def list_by_keys(self, region_keys: Sequence[str]) -> List[ZoneRegionModel]:
        """Regions matching any of the keys, with their zone loaded, in id order."""
        if not region_keys:
            return []
        return (
            self.db.query(ZoneRegionModel)
            .options(joinedload(ZoneRegionModel.delivery_zone))
            .filter(ZoneRegionModel.region_key.in_(list(region_keys)))
            .order_by(ZoneRegionModel.id.asc())
            .all()
        )

    def list_paginated(
        self,
        *,
        zone_id: Optional[int] = None,
        region_type: Optional[RegionType] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> Tuple[List[ZoneRegionModel], int]:
        query = self.db.query(ZoneRegionModel)

        if zone_id is not None:
            query = query.filter(ZoneRegionModel.delivery_zone_id == zone_id)
        if region_type is not None:
            query = query.filter(ZoneRegionModel.region_type == region_type)
        if search:
            like = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    ZoneRegionModel.pincode.ilike(like),
                    ZoneRegionModel.state_name.ilike(like),
                    ZoneRegionModel.district_name.ilike(like),
                    ZoneRegionModel.office_name.ilike(like),
                )
            )

        total = query.count()
        items = (
            query.options(joinedload(ZoneRegionModel.delivery_zone))
            .order_by(
                ZoneRegionModel.state_name.asc(),
                ZoneRegionModel.district_name.asc(),
                ZoneRegionModel.pincode.asc(),
                ZoneRegionModel.id.asc(),
            )
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return items, total

    def count(self) -> int:
        return self.db.query(ZoneRegionModel).count()

    def create(self, region: ZoneRegionModel) -> ZoneRegionModel:
        self.db.add(region)
        self.db.commit()
        self.db.refresh(region)
        return region

    def update(self, region: ZoneRegionModel, data: dict) -> ZoneRegionModel:
        for k, v in data.items():
            setattr(region, k, v)
        self.db.commit()
        self.db.refresh(region)
        return region

    def delete(self, region: ZoneRegionModel):
        self.db.delete(region)
        self.db.commit()

    def rollback(self):
        self.db.rollback()
