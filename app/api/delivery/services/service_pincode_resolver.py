from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.delivery.contracts.cache_contract import ICacheAdapter
from app.api.delivery.contracts.pincode_directory_contract import IPincodeDirectory
from app.api.delivery.exceptions import (
    NOT_SERVICEABLE_ERRORS,
    InvalidInputError,
    NoCoverageError,
    UpstreamUnavailableError,
    ZoneInactiveError,
)
from app.api.delivery.models.model_zone_region import RegionType, ZoneRegionModel
from app.api.delivery.repositories.repo_zone_region import ZoneRegionRepository
from app.api.delivery.schemas.schema_pincode_directory import PincodeLocality
from app.api.delivery.schemas.schema_resolution import (
    DeliveryResolution,
    PincodeAvailabilityOut,
)
from app.api.delivery.utils.region_keys import (
    build_region_key,
    candidate_sort_key,
    is_valid_pincode,
)
from app.utils.logger import logger
from app.utils.prometheus_metrics import record_resolution

LOCALITY_CACHE_PREFIX = "pincode-locality:"


class PincodeResolverService:
    """
    Resolves a 6-digit pincode to the delivery zone that serves it.

    Lookup order:
      1. region assigned directly to the pincode;
      2. otherwise the pincode is translated through the pincode directory into
         its district(s) and state(s), and those regions are looked up.

    Candidates are ordered by ``candidate_sort_key``: pincode before district
    before state, then by id. The first candidate wins; if its zone is
    inactive the pincode is reported as not serviceable.

    Only directory answers are cached, so zone and region edits take effect
    on the next request.
    """

    def __init__(self, db: Session, directory: IPincodeDirectory, cache: ICacheAdapter):
        self.db = db
        self.repo = ZoneRegionRepository(db)
        self.directory = directory
        self.cache = cache

    async def _localities(self, pincode: str) -> List[PincodeLocality]:
        cache_key = f"{LOCALITY_CACHE_PREFIX}{pincode}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        localities = await self.directory.lookup_pincode(pincode)
        self.cache.set(cache_key, localities)
        return localities

    @staticmethod
    def _locality_keys(localities: List[PincodeLocality]) -> List[str]:
        keys = []
        for locality in localities:
            if not locality.state_name:
                continue
            if locality.district_name:
                keys.append(
                    build_region_key(
                        RegionType.DISTRICT,
                        state_name=locality.state_name,
                        district_name=locality.district_name,
                    )
                )
            keys.append(build_region_key(RegionType.STATE, state_name=locality.state_name))
        return list(dict.fromkeys(keys))

    def _lookup(self, keys: List[str]) -> List[ZoneRegionModel]:
        try:
            return self.repo.list_by_keys(keys)
        except SQLAlchemyError as e:
            logger.error(f"[PincodeResolver] Region lookup failed for {keys}: {e}")
            raise UpstreamUnavailableError() from e

    async def resolve(self, pincode: str) -> DeliveryResolution:
        if not is_valid_pincode(pincode):
            record_resolution("invalid_input")
            raise InvalidInputError()

        try:
            candidates = self._lookup([build_region_key(RegionType.PINCODE, pincode=pincode)])
            if not candidates:
                localities = await self._localities(pincode)
                if not localities:
                    logger.info(f"[PincodeResolver] {pincode} unknown to the pincode directory")
                    raise NoCoverageError(pincode)
                candidates = self._lookup(self._locality_keys(localities))
        except UpstreamUnavailableError:
            record_resolution("upstream_unavailable")
            raise
        except NoCoverageError:
            record_resolution("no_coverage")
            raise

        if not candidates:
            logger.info(f"[PincodeResolver] No region covers pincode {pincode}")
            record_resolution("no_coverage")
            raise NoCoverageError(pincode)

        region = sorted(candidates, key=candidate_sort_key)[0]
        zone = region.delivery_zone

        if not zone.is_active:
            logger.warning(
                f"[PincodeResolver][ZONE_INACTIVE] {pincode} matched {region.region_key} "
                f"on inactive zone {zone.zone_number} (id={zone.id})"
            )
            record_resolution("zone_inactive")
            raise ZoneInactiveError(pincode, zone_id=zone.id, zone_number=zone.zone_number)

        record_resolution("resolved")
        logger.info(
            f"[PincodeResolver] {pincode} -> zone {zone.zone_number} via {region.region_key}"
        )
        return DeliveryResolution(
            pincode=pincode,
            zone_id=zone.id,
            zone_number=zone.zone_number,
            zone_name=zone.zone_name,
            delivery_days_min=zone.delivery_days_min,
            delivery_days_max=zone.delivery_days_max,
            delivery_charge=zone.delivery_charge,
            matched_state=region.state_name,
            matched_city=region.district_name or region.state_name,
            matched_region_type=region.region_type,
        )

    async def check_availability(self, pincode: str) -> PincodeAvailabilityOut:
        """
        Storefront contract: a resolution, or ``available=False`` when the
        pincode is not serviceable. Invalid input and upstream failures still
        raise so the caller can show the matching message.
        """
        try:
            delivery = await self.resolve(pincode)
        except NOT_SERVICEABLE_ERRORS as e:
            return PincodeAvailabilityOut(
                pincode=pincode,
                available=False,
                reason=e.error_code,
                message=e.message,
            )
        return PincodeAvailabilityOut(pincode=pincode, available=True, delivery=delivery)

    def clear_cache(self, pincode: Optional[str] = None):
        self.cache.clear(f"{LOCALITY_CACHE_PREFIX}{pincode}" if pincode else None)
