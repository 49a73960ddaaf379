from typing import List

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from app.api.delivery.schemas.schema_delivery_zone import (
    DeliveryZoneCreate,
    DeliveryZoneDeleteOut,
    DeliveryZoneOut,
    DeliveryZoneStatusUpdate,
    DeliveryZoneUpdate,
    DeliveryZoneUpsert,
)
from app.api.delivery.services.service_delivery_zone import DeliveryZoneService
from app.core.admin_dependencies import get_current_user
from app.database.db_connection import get_db
from app.utils.logger import logger

router = APIRouter(
    prefix="/api/delivery/admin/zones",
    tags=["Admin - Delivery - Zones"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=List[DeliveryZoneOut])
def list_zones(
    only_active: bool = Query(False),
    db: Session = Depends(get_db),
):
    return DeliveryZoneService(db).list(only_active=only_active)


@router.get("/{zone_id}", response_model=DeliveryZoneOut)
def get_zone(
    zone_id: int = Path(...),
    db: Session = Depends(get_db),
):
    return DeliveryZoneService(db).get(zone_id)


@router.post("", response_model=DeliveryZoneOut, status_code=status.HTTP_201_CREATED)
def create_zone(
    payload: DeliveryZoneCreate,
    db: Session = Depends(get_db),
):
    logger.info(f"[DeliveryZones] Create - zone {payload.zone_number}")
    return DeliveryZoneService(db).create(payload)


@router.put("", response_model=DeliveryZoneOut)
def upsert_zone(
    payload: DeliveryZoneUpsert,
    db: Session = Depends(get_db),
):
    logger.info(f"[DeliveryZones] Upsert - id={payload.id} zone {payload.zone_number}")
    return DeliveryZoneService(db).upsert(payload)


@router.put("/{zone_id}", response_model=DeliveryZoneOut)
def update_zone(
    zone_id: int,
    payload: DeliveryZoneUpdate,
    db: Session = Depends(get_db),
):
    logger.info(f"[DeliveryZones] Update - id={zone_id}")
    return DeliveryZoneService(db).update(zone_id, payload)


@router.patch("/{zone_id}/status", response_model=DeliveryZoneOut)
def set_zone_status(
    zone_id: int,
    payload: DeliveryZoneStatusUpdate,
    db: Session = Depends(get_db),
):
    return DeliveryZoneService(db).set_active(zone_id, payload.is_active)


@router.delete("/{zone_id}", response_model=DeliveryZoneDeleteOut)
def delete_zone(
    zone_id: int,
    cascade: bool = Query(False, description="Also delete the regions assigned to this zone"),
    db: Session = Depends(get_db),
):
    logger.info(f"[DeliveryZones] Delete - id={zone_id} cascade={cascade}")
    removed = DeliveryZoneService(db).delete(zone_id, cascade=cascade)
    return DeliveryZoneDeleteOut(message="Zone deleted", zone_id=zone_id, regions_removed=removed)
