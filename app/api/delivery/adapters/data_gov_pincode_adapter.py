import asyncio
from typing import Awaitable, Callable, Dict, List, Optional

import httpx

from app.api.delivery.contracts.pincode_directory_contract import IPincodeDirectory
from app.api.delivery.exceptions import UpstreamUnavailableError
from app.api.delivery.schemas.schema_pincode_directory import (
    PincodeDirectoryPage,
    PincodeLocality,
)
from app.api.delivery.utils.region_keys import clean_name
from app.config import settings
from app.utils.logger import logger
from app.utils.prometheus_metrics import record_directory_request

RETRYABLE_STATUS_CODES = {408, 425, 429}
# row limit for the "list all" calls (states, districts)
BULK_LIST_LIMIT = 5000


class DataGovPincodeAdapter(IPincodeDirectory):
    """Adapter for the data.gov.in All India Pincode Directory."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_base: Optional[float] = None,
        backoff_max: Optional[float] = None,
        page_size: Optional[int] = None,
        page_delay: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.api_key = api_key or settings.PINCODE_API_KEY
        self.base_url = base_url or settings.PINCODE_API_BASE_URL
        self.timeout = timeout if timeout is not None else settings.PINCODE_API_TIMEOUT_SECONDS
        self.max_retries = max_retries if max_retries is not None else settings.PINCODE_API_MAX_RETRIES
        self.backoff_base = backoff_base if backoff_base is not None else settings.PINCODE_API_BACKOFF_BASE_SECONDS
        self.backoff_max = backoff_max if backoff_max is not None else settings.PINCODE_API_BACKOFF_MAX_SECONDS
        self.page_size = page_size or settings.PINCODE_API_PAGE_SIZE
        self.page_delay = page_delay if page_delay is not None else settings.PINCODE_API_PAGE_DELAY_SECONDS
        self._transport = transport
        self._sleep = sleep

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------
    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def backoff_delay(self, attempt: int) -> float:
        """Capped exponential backoff: base, 2*base, 4*base... up to backoff_max."""
        return min(self.backoff_base * (2 ** attempt), self.backoff_max)

    def _params(self, filters: Dict[str, str], limit: int, offset: int) -> Dict[str, str]:
        params = {
            "api-key": self.api_key,
            "format": "json",
            "limit": str(limit),
            "offset": str(offset),
        }
        for field, value in filters.items():
            params[f"filters[{field}]"] = value
        return params

    async def _request_page(
        self,
        client: httpx.AsyncClient,
        filters: Dict[str, str],
        limit: int,
        offset: int = 0,
    ) -> PincodeDirectoryPage:
        if not self.api_key:
            logger.warning("[PincodeDirectory] API key not configured")
            raise UpstreamUnavailableError("Pincode directory is not configured")

        params = self._params(filters, limit, offset)
        attempt = 0
        while True:
            try:
                response = await client.get(self.base_url, params=params)
            except httpx.TimeoutException:
                failure = "timeout"
            except httpx.TransportError as e:
                failure = f"transport error: {e}"
            else:
                status_code = response.status_code
                if status_code < 400:
                    try:
                        page = PincodeDirectoryPage.model_validate(response.json())
                    except ValueError as e:
                        record_directory_request("failed")
                        logger.error(f"[PincodeDirectory] Invalid response for {filters}: {e}")
                        raise UpstreamUnavailableError() from e
                    record_directory_request("ok")
                    return page
                if status_code not in RETRYABLE_STATUS_CODES and status_code < 500:
                    record_directory_request("failed")
                    logger.error(
                        f"[PincodeDirectory] Request rejected for {filters}: HTTP {status_code}"
                    )
                    raise UpstreamUnavailableError()
                failure = f"HTTP {status_code}"

            if attempt >= self.max_retries:
                record_directory_request("failed")
                logger.error(
                    f"[PincodeDirectory] Giving up on {filters} after {attempt + 1} attempts ({failure})"
                )
                raise UpstreamUnavailableError()

            record_directory_request("retry")
            delay = self.backoff_delay(attempt)
            logger.warning(
                f"[PincodeDirectory] {failure} for {filters}, retrying in {delay:.1f}s "
                f"(attempt {attempt + 1}/{self.max_retries})"
            )
            await self._sleep(delay)
            attempt += 1

    # ------------------------------------------------------------------
    # IPincodeDirectory
    # ------------------------------------------------------------------
    async def lookup_pincode(self, pincode: str) -> List[PincodeLocality]:
        async with self._client() as client:
            page = await self._request_page(client, {"pincode": pincode}, limit=self.page_size)

        localities = [r for r in page.records if r.pincode == pincode]
        logger.info(f"[PincodeDirectory] {pincode}: {len(localities)} post office(s) found")
        return localities

    async def fetch_pincodes(
        self,
        state_name: str,
        district_name: Optional[str] = None,
    ) -> List[PincodeLocality]:
        filters = {"statename": clean_name(state_name)}
        if district_name:
            filters["districtname"] = clean_name(district_name)

        records: List[PincodeLocality] = []
        offset = 0
        async with self._client() as client:
            while True:
                page = await self._request_page(client, filters, limit=self.page_size, offset=offset)
                records.extend(page.records)

                has_more = len(page.records) == self.page_size and (
                    page.total == 0 or len(records) < page.total
                )
                if not has_more:
                    break
                offset += self.page_size
                await self._sleep(self.page_delay)

        unique: Dict[str, PincodeLocality] = {}
        for record in records:
            unique.setdefault(record.pincode, record)

        logger.info(
            f"[PincodeDirectory] {filters}: {len(records)} records, {len(unique)} unique pincodes"
        )
        return list(unique.values())

    async def list_states(self) -> List[str]:
        async with self._client() as client:
            page = await self._request_page(client, {}, limit=BULK_LIST_LIMIT)
        return sorted({r.state_name for r in page.records if r.state_name})

    async def list_districts(self, state_name: str) -> List[str]:
        async with self._client() as client:
            page = await self._request_page(
                client, {"statename": clean_name(state_name)}, limit=BULK_LIST_LIMIT
            )
        return sorted({r.district_name for r in page.records if r.district_name})
