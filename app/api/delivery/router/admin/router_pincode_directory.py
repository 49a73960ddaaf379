from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.delivery.contracts.cache_contract import ICacheAdapter
from app.api.delivery.contracts.pincode_directory_contract import IPincodeDirectory
from app.api.delivery.dependencies import get_delivery_cache, get_pincode_directory
from app.api.delivery.schemas.schema_pincode_directory import (
    DirectoryImportRequest,
    DirectoryPincodesOut,
)
from app.api.delivery.schemas.schema_zone_region import BulkImportResult
from app.api.delivery.services.service_zone_region import ZoneRegionService
from app.core.admin_dependencies import get_current_user
from app.database.db_connection import get_db
from app.utils.logger import logger

router = APIRouter(
    prefix="/api/delivery/admin",
    tags=["Admin - Delivery - Pincode directory"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/directory/states", response_model=List[str])
async def list_states(
    directory: IPincodeDirectory = Depends(get_pincode_directory),
):
    return await directory.list_states()


@router.get("/directory/districts", response_model=List[str])
async def list_districts(
    state: str = Query(..., min_length=1),
    directory: IPincodeDirectory = Depends(get_pincode_directory),
):
    return await directory.list_districts(state)


@router.get("/directory/pincodes", response_model=DirectoryPincodesOut)
async def preview_pincodes(
    state: str = Query(..., min_length=1),
    district: Optional[str] = Query(None),
    directory: IPincodeDirectory = Depends(get_pincode_directory),
):
    logger.info(f"[PincodeDirectory] Preview - state={state} district={district}")
    records = await directory.fetch_pincodes(state, district)
    return DirectoryPincodesOut(
        state_name=state,
        district_name=district,
        total=len(records),
        records=records,
    )


@router.post("/directory/import", response_model=BulkImportResult)
async def import_from_directory(
    payload: DirectoryImportRequest = Body(...),
    directory: IPincodeDirectory = Depends(get_pincode_directory),
    db: Session = Depends(get_db),
):
    return await ZoneRegionService(db).import_from_directory(payload, directory)


@router.delete("/cache", status_code=status.HTTP_200_OK)
def clear_cache(
    cache_key: Optional[str] = Query(None, description="Key to clear, or empty to clear everything"),
    cache: ICacheAdapter = Depends(get_delivery_cache),
):
    cache.clear(cache_key)
    return {
        "message": f"Cache cleared: {'single key' if cache_key else 'everything'}",
        "cache_key": cache_key,
    }
