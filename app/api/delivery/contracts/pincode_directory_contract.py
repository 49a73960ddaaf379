from abc import ABC, abstractmethod
from typing import List, Optional

from app.api.delivery.schemas.schema_pincode_directory import PincodeLocality


class IPincodeDirectory(ABC):
    """Read-only pincode → state/district directory (e.g. data.gov.in)."""

    @abstractmethod
    async def lookup_pincode(self, pincode: str) -> List[PincodeLocality]:
        """
        Post-office records registered under a pincode.

        Returns:
            List of localities, empty when the pincode is unknown

        Raises:
            UpstreamUnavailableError: directory unreachable or timed out
        """
        pass

    @abstractmethod
    async def fetch_pincodes(
        self,
        state_name: str,
        district_name: Optional[str] = None,
    ) -> List[PincodeLocality]:
        """Every pincode of a state or district, across all pages, de-duplicated by pincode."""
        pass

    @abstractmethod
    async def list_states(self) -> List[str]:
        pass

    @abstractmethod
    async def list_districts(self, state_name: str) -> List[str]:
        pass
