import re
from typing import Optional, Tuple

from app.api.delivery.models.model_zone_region import RegionType

PINCODE_PATTERN = re.compile(r"[0-9]{6}")
LEGACY_SEPARATOR = " - "

# Lower value = more specific. Used to order resolution candidates.
REGION_SPECIFICITY = {
    RegionType.PINCODE: 0,
    RegionType.DISTRICT: 1,
    RegionType.STATE: 2,
}


def is_valid_pincode(pincode) -> bool:
    """Exactly six ASCII digits, nothing else."""
    return isinstance(pincode, str) and PINCODE_PATTERN.fullmatch(pincode) is not None


def clean_name(value: Optional[str]) -> Optional[str]:
    """Trims and collapses inner whitespace; keeps the original casing."""
    if value is None:
        return None
    cleaned = " ".join(value.split())
    return cleaned or None


def normalize_name(value: Optional[str]) -> str:
    return (clean_name(value) or "").casefold()


def split_legacy_state_name(state_name: str) -> Tuple[str, Optional[str]]:
    """
    Splits the legacy "State - District" representation.

    >>> split_legacy_state_name("Tamil Nadu - Vellore")
    ('Tamil Nadu', 'Vellore')
    """
    if LEGACY_SEPARATOR not in state_name:
        return clean_name(state_name), None
    state, district = state_name.split(LEGACY_SEPARATOR, 1)
    return clean_name(state), clean_name(district)


def build_region_key(
    region_type: RegionType,
    state_name: Optional[str] = None,
    district_name: Optional[str] = None,
    pincode: Optional[str] = None,
) -> str:
    region_type = RegionType(region_type)
    if region_type == RegionType.PINCODE:
        return f"pincode:{pincode}"
    if region_type == RegionType.DISTRICT:
        return f"district:{normalize_name(state_name)}|{normalize_name(district_name)}"
    return f"state:{normalize_name(state_name)}"


def candidate_sort_key(region) -> Tuple[int, int]:
    """Most specific match first; ties broken by insertion order (id)."""
    return REGION_SPECIFICITY[RegionType(region.region_type)], region.id
