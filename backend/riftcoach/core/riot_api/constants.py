"""Riot API constants and enum definitions."""

from enum import Enum
from typing import Dict, NamedTuple, Optional, Tuple


class Region(str, Enum):
    """Riot API regions for regional routing."""

    AMERICAS = "americas"
    ASIA = "asia"
    EUROPE = "europe"
    SEA = "sea"


class Platform(str, Enum):
    """Riot API platforms for platform routing."""

    BR1 = "br1"
    EUN1 = "eun1"
    EUW1 = "euw1"
    JP1 = "jp1"
    KR = "kr"
    LA1 = "la1"
    LA2 = "la2"
    NA1 = "na1"
    OC1 = "oc1"
    PH2 = "ph2"
    RU = "ru"
    SG2 = "sg2"
    TH2 = "th2"
    TR1 = "tr1"
    TW2 = "tw2"
    VN2 = "vn2"


class QueueType(int, Enum):
    """Riot API queue ids the analysis cares about."""

    RANKED_SOLO_5X5 = 420
    RANKED_FLEX_5X5 = 440


RANKED_QUEUES: Tuple[int, ...] = (
    QueueType.RANKED_SOLO_5X5.value,
    QueueType.RANKED_FLEX_5X5.value,
)

# Queue filter -> (queue id for the match list, display name). None = no filter
QUEUE_FILTERS: Dict[str, Tuple[Optional[QueueType], str]] = {
    "solo": (QueueType.RANKED_SOLO_5X5, "Solo/Duo"),
    "flex": (QueueType.RANKED_FLEX_5X5, "Flex"),
    "all": (None, "All Ranked"),
}


class RegionInfo(NamedTuple):
    """Routing values and display name for a user-facing region key."""

    platform: Platform
    region: Region
    name: str


REGIONS: Dict[str, RegionInfo] = {
    # Europe
    "euw": RegionInfo(Platform.EUW1, Region.EUROPE, "Europe West"),
    "eune": RegionInfo(Platform.EUN1, Region.EUROPE, "Europe Nordic & East"),
    "tr": RegionInfo(Platform.TR1, Region.EUROPE, "Turkey"),
    "ru": RegionInfo(Platform.RU, Region.EUROPE, "Russia"),
    # Americas
    "na": RegionInfo(Platform.NA1, Region.AMERICAS, "North America"),
    "br": RegionInfo(Platform.BR1, Region.AMERICAS, "Brazil"),
    "lan": RegionInfo(Platform.LA1, Region.AMERICAS, "Latin America North"),
    "las": RegionInfo(Platform.LA2, Region.AMERICAS, "Latin America South"),
    # Asia
    "kr": RegionInfo(Platform.KR, Region.ASIA, "Korea"),
    "jp": RegionInfo(Platform.JP1, Region.ASIA, "Japan"),
    # South East Asia
    "oce": RegionInfo(Platform.OC1, Region.SEA, "Oceania"),
    "ph": RegionInfo(Platform.PH2, Region.SEA, "Philippines"),
    "sg": RegionInfo(Platform.SG2, Region.SEA, "Singapore"),
    "th": RegionInfo(Platform.TH2, Region.SEA, "Thailand"),
    "tw": RegionInfo(Platform.TW2, Region.SEA, "Taiwan"),
    "vn": RegionInfo(Platform.VN2, Region.SEA, "Vietnam"),
}


def get_region_info(key: str) -> Optional[RegionInfo]:
    """Look up a region key such as ``euw`` (case-insensitive)."""
    return REGIONS.get(key.strip().lower()) if key else None
