"""Static directory of the UK grid regions and their health-area counterparts."""

import re
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping

from carbovid.exceptions import RegionNotFoundError
from carbovid.models import RegionDescriptor


# region id -> (carbon region name, covid area name, covid area type)
UK_REGIONS: Mapping[int, tuple] = MappingProxyType({
    1: ("North Scotland", "Scotland", "nation"),
    2: ("South Scotland", "Scotland", "nation"),
    3: ("North West England", "North West", "region"),
    4: ("North East England", "North East", "region"),
    5: ("Yorkshire", "Yorkshire and The Humber", "region"),
    6: ("North Wales", "Wales", "nation"),
    7: ("South Wales", "Wales", "nation"),
    8: ("West Midlands", "West Midlands", "region"),
    9: ("East Midlands", "East Midlands", "region"),
    10: ("East England", "East of England", "region"),
    11: ("South West England", "South West", "region"),
    12: ("South England", "England", "nation"),
    13: ("London", "London", "region"),
    14: ("South East England", "South East", "region"),
    15: ("England", "England", "nation"),
    16: ("Scotland", "Scotland", "nation"),
    17: ("Wales", "Wales", "nation"),
})

REGION_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_region_id(raw: Any) -> int:
    """Coerce a query value into a region id, rejecting non-integers."""
    if isinstance(raw, bool):
        raise RegionNotFoundError()
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        value = raw.strip()
        # int() would also take "1_5" and non-ASCII digits
        if not REGION_ID_PATTERN.fullmatch(value):
            raise RegionNotFoundError()
        return int(value)
    raise RegionNotFoundError()


class RegionDirectory:
    """Read-only lookup from region id to :class:`RegionDescriptor`."""

    def __init__(self, table: Mapping[int, tuple] = UK_REGIONS) -> None:
        regions: Dict[int, RegionDescriptor] = {}
        for region_id, (carbon_name, area_name, area_type) in table.items():
            regions[region_id] = RegionDescriptor(
                region_id=region_id,
                carbon_region_name=carbon_name,
                covid_area_name=area_name,
                covid_area_type=area_type,
            )
        self._regions = MappingProxyType(regions)

    def resolve(self, region_id: Any) -> RegionDescriptor:
        """Return the descriptor for ``region_id`` or raise RegionNotFoundError."""
        descriptor = self._regions.get(parse_region_id(region_id))
        if descriptor is None:
            raise RegionNotFoundError()
        return descriptor

    def __contains__(self, region_id: Any) -> bool:
        try:
            self.resolve(region_id)
        except RegionNotFoundError:
            return False
        return True

    def __iter__(self) -> Iterator[RegionDescriptor]:
        return iter(self._regions[key] for key in sorted(self._regions))

    def __len__(self) -> int:
        return len(self._regions)


DEFAULT_DIRECTORY = RegionDirectory()
