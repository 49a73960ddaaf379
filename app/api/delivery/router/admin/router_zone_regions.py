from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.delivery.models.model_zone_region import RegionType
from app.api.delivery.schemas.schema_zone_region import (
    BulkImportResult,
    ZoneRegionCreate,
    ZoneRegionOut,
    ZoneRegionPageOut,
)
from app.api.delivery.services.service_zone_region import ZoneRegionService
from app.core.admin_dependencies import get_current_user
from app.database.db_connection import get_db
from app.utils.logger import logger

router = APIRouter(
    prefix="/api/delivery/admin/regions",
    tags=["Admin - Delivery - Regions"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=ZoneRegionPageOut)
def list_regions(
    zone_id: Optional[int] = Query(None),
    region_type: Optional[RegionType] = Query(None),
    search: Optional[str] = Query(None, description="Matches pincode, state, district or office"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return ZoneRegionService(db).list(
        zone_id=zone_id,
        region_type=region_type,
        search=search,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=ZoneRegionOut, status_code=status.HTTP_201_CREATED)
def add_region(
    payload: ZoneRegionCreate,
    db: Session = Depends(get_db),
):
    logger.info(f"[ZoneRegions] Add - zone_id={payload.delivery_zone_id} {payload.region_type.value}")
    return ZoneRegionService(db).add(payload)


@router.post("/bulk", response_model=BulkImportResult)
def bulk_import_regions(
    records: List[Dict[str, Any]] = Body(..., description="Records keyed by pincode or by state/district"),
    db: Session = Depends(get_db),
):
    logger.info(f"[ZoneRegions] Bulk import - {len(records)} record(s)")
    return ZoneRegionService(db).bulk_import(records)


@router.delete("/{region_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_region(
    region_id: int,
    db: Session = Depends(get_db),
):
    logger.info(f"[ZoneRegions] Remove - id={region_id}")
    ZoneRegionService(db).remove(region_id)
