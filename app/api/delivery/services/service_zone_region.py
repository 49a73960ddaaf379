from typing import Iterable, List, Optional, Union

from fastapi import HTTPException, status
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.delivery.contracts.pincode_directory_contract import IPincodeDirectory
from app.api.delivery.exceptions import RegionConflictError
from app.api.delivery.models.model_zone_region import RegionType, ZoneRegionModel
from app.api.delivery.repositories.repo_delivery_zone import DeliveryZoneRepository
from app.api.delivery.repositories.repo_zone_region import ZoneRegionRepository
from app.api.delivery.schemas.schema_pincode_directory import DirectoryImportRequest
from app.api.delivery.schemas.schema_zone_region import (
    BulkImportResult,
    ImportFailure,
    ZoneRegionCreate,
    ZoneRegionImportRecord,
    ZoneRegionOut,
    ZoneRegionPageOut,
)
from app.api.delivery.utils.region_keys import build_region_key
from app.utils.logger import logger


def _region_fields(payload: ZoneRegionCreate | ZoneRegionImportRecord) -> dict:
    return {
        "delivery_zone_id": payload.delivery_zone_id,
        "region_type": payload.region_type,
        "state_name": payload.state_name,
        "district_name": payload.district_name,
        "pincode": payload.pincode,
        "office_name": payload.office_name,
        "region_key": build_region_key(
            payload.region_type,
            state_name=payload.state_name,
            district_name=payload.district_name,
            pincode=payload.pincode,
        ),
    }


class ZoneRegionService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ZoneRegionRepository(db)
        self.zone_repo = DeliveryZoneRepository(db)

    def _ensure_zone(self, zone_id: int):
        zone = self.zone_repo.get(zone_id)
        if not zone:
            raise HTTPException(status.HTTP_404_NOT_FOUND, f"Delivery zone {zone_id} not found")
        return zone

    def list(
        self,
        *,
        zone_id: Optional[int] = None,
        region_type: Optional[RegionType] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> ZoneRegionPageOut:
        items, total = self.repo.list_paginated(
            zone_id=zone_id,
            region_type=region_type,
            search=search,
            page=page,
            page_size=page_size,
        )
        return ZoneRegionPageOut(
            items=[ZoneRegionOut.model_validate(item) for item in items],
            total=total,
            page=page,
            page_size=page_size,
        )

    def get(self, region_id: int) -> ZoneRegionModel:
        region = self.repo.get(region_id)
        if not region:
            raise HTTPException(status.HTTP_404_NOT_FOUND, f"Zone region {region_id} not found")
        return region

    def add(self, payload: ZoneRegionCreate) -> ZoneRegionModel:
        zone = self._ensure_zone(payload.delivery_zone_id)
        fields = _region_fields(payload)

        existing = self.repo.get_by_key(fields["region_key"])
        if existing:
            if existing.delivery_zone_id == zone.id:
                logger.info(f"[ZoneRegionService] {fields['region_key']} already on zone {zone.zone_number}")
                return existing
            owner = self.zone_repo.get(existing.delivery_zone_id)
            owner_label = f"zone {owner.zone_number}" if owner else f"zone id {existing.delivery_zone_id}"
            raise RegionConflictError(f"{existing.display_name} is already assigned to {owner_label}")

        logger.info(f"[ZoneRegionService] Assigning {fields['region_key']} to zone {zone.zone_number}")
        try:
            return self.repo.create(ZoneRegionModel(**fields))
        except IntegrityError as e:
            self.repo.rollback()
            if "region_key" not in str(e.orig).lower():
                raise
            # concurrent add won the region_key unique index
            logger.warning(f"[ZoneRegionService] Integrity error assigning {fields['region_key']}: {e.orig}")
            raise RegionConflictError(f"{fields['region_key']} was assigned to another zone meanwhile")

    def remove(self, region_id: int):
        region = self.get(region_id)
        logger.info(f"[ZoneRegionService] Removing region {region.region_key} (id={region_id})")
        self.repo.delete(region)

    def bulk_import(
        self,
        records: Iterable[Union[dict, ZoneRegionImportRecord]],
    ) -> BulkImportResult:
        """
        Upserts regions keyed on their natural key, last write wins.

        Each record is committed on its own: a failing record is reported in
        ``failed`` and never rolls back the records already imported.
        Re-importing the same records creates no duplicates.
        """
        result = BulkImportResult()
        known_zones = {}

        for index, raw in enumerate(records):
            region_key = None
            try:
                record = (
                    raw if isinstance(raw, ZoneRegionImportRecord)
                    else ZoneRegionImportRecord.model_validate(raw)
                )
                fields = _region_fields(record)
                region_key = fields["region_key"]

                if record.delivery_zone_id not in known_zones:
                    known_zones[record.delivery_zone_id] = self.zone_repo.get(record.delivery_zone_id) is not None
                if not known_zones[record.delivery_zone_id]:
                    raise ValueError(f"delivery zone {record.delivery_zone_id} not found")

                existing = self.repo.get_by_key(region_key)
                if existing:
                    self.repo.update(existing, fields)
                    result.updated += 1
                else:
                    self.repo.create(ZoneRegionModel(**fields))
                    result.created += 1
                result.succeeded += 1
            except ValidationError as e:
                errors = "; ".join(err.get("msg", "invalid value") for err in e.errors())
                result.failed.append(ImportFailure(index=index, region_key=region_key, error=errors))
            except ValueError as e:
                result.failed.append(ImportFailure(index=index, region_key=region_key, error=str(e)))
            except SQLAlchemyError as e:
                self.repo.rollback()
                logger.error(f"[ZoneRegionService] Import of record {index} ({region_key}) failed: {e}")
                result.failed.append(
                    ImportFailure(index=index, region_key=region_key, error="database error")
                )

        logger.info(
            f"[ZoneRegionService] Bulk import: {result.succeeded} ok "
            f"({result.created} created, {result.updated} updated), {len(result.failed)} failed"
        )
        return result

    async def import_from_directory(
        self,
        payload: DirectoryImportRequest,
        directory: IPincodeDirectory,
    ) -> BulkImportResult:
        """
        Assigns a state or district to a zone using the pincode directory.

        granularity="pincode" stores one region per pincode fetched from the
        directory; granularity="region" stores the state/district itself.
        """
        self._ensure_zone(payload.delivery_zone_id)

        if payload.granularity == "region":
            record = {
                "delivery_zone_id": payload.delivery_zone_id,
                "region_type": RegionType.DISTRICT if payload.district_name else RegionType.STATE,
                "state_name": payload.state_name,
                "district_name": payload.district_name,
            }
            return self.bulk_import([record])

        localities = await directory.fetch_pincodes(payload.state_name, payload.district_name)
        records: List[dict] = [
            {
                "delivery_zone_id": payload.delivery_zone_id,
                "region_type": RegionType.PINCODE,
                "pincode": locality.pincode,
                "state_name": locality.state_name or payload.state_name,
                "district_name": locality.district_name or payload.district_name,
                "office_name": locality.office_name,
            }
            for locality in localities
        ]
        logger.info(
            f"[ZoneRegionService] Importing {len(records)} pincodes from directory "
            f"({payload.state_name} / {payload.district_name or '*'}) into zone id={payload.delivery_zone_id}"
        )
        return self.bulk_import(records)
