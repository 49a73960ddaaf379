from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.delivery.exceptions import DuplicateZoneNumberError, ReferentialError
from app.api.delivery.models.model_delivery_zone import DeliveryZoneModel
from app.api.delivery.repositories.repo_delivery_zone import DeliveryZoneRepository
from app.api.delivery.schemas.schema_delivery_zone import (
    DeliveryZoneCreate,
    DeliveryZoneUpdate,
    DeliveryZoneUpsert,
)
from app.utils.logger import logger


def _is_zone_number_conflict(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "unique" in message and "zone_number" in message


class DeliveryZoneService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = DeliveryZoneRepository(db)

    def list(self, only_active: bool = False):
        return self.repo.list(only_active=only_active)

    def get(self, zone_id: int) -> DeliveryZoneModel:
        zone = self.repo.get(zone_id)
        if not zone:
            raise HTTPException(status.HTTP_404_NOT_FOUND, f"Delivery zone {zone_id} not found")
        return zone

    def _ensure_unique_number(self, zone_number: int, ignore_id: int | None = None):
        if self.repo.exists_zone_number(zone_number, ignore_id=ignore_id):
            raise DuplicateZoneNumberError(f"Zone number {zone_number} is already in use")

    def create(self, payload: DeliveryZoneCreate) -> DeliveryZoneModel:
        logger.info(f"[DeliveryZoneService] Creating zone {payload.zone_number} - {payload.zone_name}")
        self._ensure_unique_number(payload.zone_number)

        zone = DeliveryZoneModel(**payload.model_dump(exclude={"id"}))
        try:
            return self.repo.create(zone)
        except IntegrityError as e:
            self.db.rollback()
            if not _is_zone_number_conflict(e):
                raise
            # concurrent insert won the unique index
            logger.warning(f"[DeliveryZoneService] Integrity error creating zone: {e.orig}")
            raise DuplicateZoneNumberError(f"Zone number {payload.zone_number} is already in use")

    def upsert(self, payload: DeliveryZoneUpsert) -> DeliveryZoneModel:
        """Updates in place when payload.id is set, inserts otherwise."""
        if payload.id is None:
            return self.create(DeliveryZoneCreate(**payload.model_dump(exclude={"id"})))
        return self.update(payload.id, DeliveryZoneUpdate(**payload.model_dump(exclude={"id"})))

    def update(self, zone_id: int, payload: DeliveryZoneUpdate) -> DeliveryZoneModel:
        zone = self.get(zone_id)
        data = payload.model_dump(exclude_unset=True)

        days_min = data.get("delivery_days_min", zone.delivery_days_min)
        days_max = data.get("delivery_days_max", zone.delivery_days_max)
        if days_min > days_max:
            raise HTTPException(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                "delivery_days_min must be less than or equal to delivery_days_max",
            )

        if "zone_number" in data and data["zone_number"] != zone.zone_number:
            self._ensure_unique_number(data["zone_number"], ignore_id=zone.id)

        logger.info(f"[DeliveryZoneService] Updating zone id={zone_id}: {data}")
        try:
            return self.repo.update(zone, data)
        except IntegrityError as e:
            self.db.rollback()
            if not _is_zone_number_conflict(e):
                raise
            logger.warning(f"[DeliveryZoneService] Integrity error updating zone {zone_id}: {e.orig}")
            raise DuplicateZoneNumberError()

    def set_active(self, zone_id: int, is_active: bool) -> DeliveryZoneModel:
        zone = self.get(zone_id)
        logger.info(f"[DeliveryZoneService] Zone {zone.zone_number} is_active={is_active}")
        return self.repo.update(zone, {"is_active": is_active})

    def delete(self, zone_id: int, cascade: bool = False) -> int:
        """
        Deletes a zone.

        Zones that still own regions are kept and ReferentialError is raised,
        unless cascade=True, in which case the regions are deleted with it.

        Returns:
            Number of regions removed together with the zone
        """
        zone = self.get(zone_id)
        region_count = self.repo.count_regions(zone.id)

        if region_count and not cascade:
            raise ReferentialError(
                f"Zone {zone.zone_number} still has {region_count} region(s) assigned. "
                "Remove them first or delete with cascade."
            )

        removed = self.repo.delete(zone, cascade_regions=cascade)
        logger.info(f"[DeliveryZoneService] Zone id={zone_id} deleted ({removed} region(s) removed)")
        return removed
