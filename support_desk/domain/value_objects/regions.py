"""Region/Group map — static mapping between backend groups and service regions."""

from __future__ import annotations

from enum import Enum


class Region(str, Enum):
    ASIA_PACIFIC = "asia-pacific"
    MIDDLE_EAST = "middle-east"
    AFRICA = "africa"
    NORTH_AMERICA = "north-america"
    LATIN_AMERICA = "latin-america"
    EUROPE_ZONE_1 = "europe-zone-1"
    EUROPE_ZONE_2 = "europe-zone-2"
    CIS = "cis"


GROUP_REGION_MAPPING: dict[int, Region] = {
    1: Region.AFRICA,
    2: Region.EUROPE_ZONE_1,
    3: Region.MIDDLE_EAST,
    4: Region.ASIA_PACIFIC,
    5: Region.CIS,
    6: Region.NORTH_AMERICA,
    7: Region.LATIN_AMERICA,
    8: Region.EUROPE_ZONE_2,
}

REGION_GROUP_MAPPING: dict[Region, int] = {
    region: group_id for group_id, region in GROUP_REGION_MAPPING.items()
}


def region_for_group(group_id: int | None) -> Region | None:
    """Region serviced by a backend group, or None when the group is unmapped."""
    if group_id is None:
        return None
    return GROUP_REGION_MAPPING.get(group_id)


def group_for_region(region: Region | str) -> int:
    """Backend group id for a region value.

    Raises:
        ValueError: if *region* is not a known region value.
    """
    return REGION_GROUP_MAPPING[Region(region)]


def region_label(group_id: int | None, default: str | None = None) -> str:
    """Display label for a group's region.

    A lookup miss never raises: it yields *default*, or ``"Group <id>"``
    (``"unknown"`` for a missing group) when no default is given.
    """
    region = region_for_group(group_id)
    if region is not None:
        return region.value
    if default is not None:
        return default
    if group_id is None:
        return "unknown"
    return f"Group {group_id}"


def is_valid_region(value: str) -> bool:
    return value in {r.value for r in Region}
