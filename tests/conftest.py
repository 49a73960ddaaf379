import os

# must be set before the app modules read settings
os.environ["RUNNING_IN_DOCKER"] = "1"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["PINCODE_API_KEY"] = "test-api-key"

from decimal import Decimal  # noqa: E402
from typing import Dict, List, Optional  # noqa: E402

import pytest  # noqa: E402

from app.api.delivery import models  # noqa: E402,F401
from app.api.delivery.contracts.pincode_directory_contract import IPincodeDirectory  # noqa: E402
from app.api.delivery.exceptions import UpstreamUnavailableError  # noqa: E402
from app.api.delivery.models import DeliveryZoneModel  # noqa: E402
from app.api.delivery.schemas.schema_pincode_directory import PincodeLocality  # noqa: E402
from app.database.db_connection import Base, SessionLocal, engine  # noqa: E402


class FakePincodeDirectory(IPincodeDirectory):
    """In-memory directory: pincode -> post offices."""

    def __init__(self, localities: Optional[Dict[str, List[PincodeLocality]]] = None):
        self.localities = localities or {}
        self.lookups: List[str] = []
        self.unavailable = False

    def add(self, pincode: str, state_name: str, district_name: str, office_name: str = "Head Office"):
        self.localities.setdefault(pincode, []).append(
            PincodeLocality(
                pincode=pincode,
                state_name=state_name,
                district_name=district_name,
                office_name=office_name,
            )
        )

    async def lookup_pincode(self, pincode: str) -> List[PincodeLocality]:
        self.lookups.append(pincode)
        if self.unavailable:
            raise UpstreamUnavailableError()
        return list(self.localities.get(pincode, []))

    async def fetch_pincodes(self, state_name: str, district_name: Optional[str] = None) -> List[PincodeLocality]:
        if self.unavailable:
            raise UpstreamUnavailableError()
        result = []
        for records in self.localities.values():
            for record in records:
                if record.state_name.casefold() != state_name.casefold():
                    continue
                if district_name and record.district_name.casefold() != district_name.casefold():
                    continue
                result.append(record)
                break
        return result

    async def list_states(self) -> List[str]:
        return sorted({r.state_name for records in self.localities.values() for r in records})

    async def list_districts(self, state_name: str) -> List[str]:
        return sorted({
            r.district_name
            for records in self.localities.values()
            for r in records
            if r.state_name == state_name
        })


@pytest.fixture(autouse=True)
def _tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_directory():
    directory = FakePincodeDirectory()
    directory.add("632001", "Tamil Nadu", "Vellore", "Vellore H.O")
    directory.add("632001", "Tamil Nadu", "Vellore", "Vellore Fort S.O")
    directory.add("600001", "Tamil Nadu", "Chennai", "Chennai G.P.O")
    directory.add("560001", "Karnataka", "Bangalore", "Bangalore G.P.O")
    return directory


@pytest.fixture
def zone_factory(db):
    def make_zone(
        zone_number: int,
        charge: str = "50.00",
        days=(2, 3),
        is_active: bool = True,
        zone_name: Optional[str] = None,
    ) -> DeliveryZoneModel:
        zone = DeliveryZoneModel(
            zone_number=zone_number,
            zone_name=zone_name or f"Zone {zone_number}",
            delivery_days_min=days[0],
            delivery_days_max=days[1],
            delivery_charge=Decimal(charge),
            is_active=is_active,
        )
        db.add(zone)
        db.commit()
        db.refresh(zone)
        return zone

    return make_zone
