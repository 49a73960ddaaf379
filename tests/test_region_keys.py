from types import SimpleNamespace

import pytest

from app.api.delivery.models.model_zone_region import RegionType
from app.api.delivery.utils.region_keys import (
    build_region_key,
    candidate_sort_key,
    clean_name,
    is_valid_pincode,
    split_legacy_state_name,
)


@pytest.mark.parametrize("pincode", ["632001", "110001", "000000"])
def test_valid_pincodes(pincode):
    assert is_valid_pincode(pincode)


@pytest.mark.parametrize(
    "pincode",
    ["63200", "6320011", "63200a", " 632001", "632001 ", "६३२००१", "", None, 632001],
)
def test_invalid_pincodes(pincode):
    assert not is_valid_pincode(pincode)


def test_region_keys_ignore_case_and_spacing():
    assert build_region_key(RegionType.STATE, state_name="Tamil  Nadu") == "state:tamil nadu"
    assert build_region_key(RegionType.STATE, state_name=" TAMIL NADU ") == "state:tamil nadu"
    assert (
        build_region_key(RegionType.DISTRICT, state_name="TAMIL NADU", district_name="vellore")
        == "district:tamil nadu|vellore"
    )
    assert build_region_key("pincode", pincode="632001") == "pincode:632001"


def test_split_legacy_state_name():
    assert split_legacy_state_name("Tamil Nadu - Vellore") == ("Tamil Nadu", "Vellore")
    assert split_legacy_state_name("Karnataka") == ("Karnataka", None)
    assert clean_name("  Andhra   Pradesh ") == "Andhra Pradesh"


def test_candidates_sorted_most_specific_first_then_by_id():
    state = SimpleNamespace(id=1, region_type=RegionType.STATE)
    district_late = SimpleNamespace(id=9, region_type=RegionType.DISTRICT)
    district_early = SimpleNamespace(id=4, region_type=RegionType.DISTRICT)
    pincode = SimpleNamespace(id=12, region_type=RegionType.PINCODE)

    ordered = sorted([state, district_late, pincode, district_early], key=candidate_sort_key)

    assert [r.id for r in ordered] == [12, 4, 9, 1]
