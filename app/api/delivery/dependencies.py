from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from app.api.delivery.adapters.cache_adapter import TTLCacheAdapter
from app.api.delivery.adapters.data_gov_pincode_adapter import DataGovPincodeAdapter
from app.api.delivery.contracts.cache_contract import ICacheAdapter
from app.api.delivery.contracts.pincode_directory_contract import IPincodeDirectory
from app.api.delivery.services.service_delivery_charge import DeliveryChargeService
from app.api.delivery.services.service_pincode_resolver import PincodeResolverService
from app.config import settings
from app.database.db_connection import get_db


@lru_cache(maxsize=1)
def _get_pincode_directory_instance() -> IPincodeDirectory:
    return DataGovPincodeAdapter()


def get_pincode_directory() -> IPincodeDirectory:
    """Dependency for the pincode directory adapter (singleton)."""
    return _get_pincode_directory_instance()


@lru_cache(maxsize=1)
def _get_delivery_cache_instance() -> ICacheAdapter:
    return TTLCacheAdapter(default_ttl=settings.DELIVERY_CACHE_TTL_SECONDS)


def get_delivery_cache() -> ICacheAdapter:
    """Dependency for the shared delivery cache (singleton)."""
    return _get_delivery_cache_instance()


def get_pincode_resolver(
    db: Session = Depends(get_db),
    directory: IPincodeDirectory = Depends(get_pincode_directory),
    cache: ICacheAdapter = Depends(get_delivery_cache),
) -> PincodeResolverService:
    return PincodeResolverService(db, directory=directory, cache=cache)


def get_delivery_charge_service(
    resolver: PincodeResolverService = Depends(get_pincode_resolver),
) -> DeliveryChargeService:
    return DeliveryChargeService(resolver)
