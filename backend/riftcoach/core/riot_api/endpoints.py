"""Riot API endpoint definitions and routing information."""

from typing import Dict, Optional, Union

from .constants import Region, QueueType


class RiotAPIEndpoints:
    """Match-v5 endpoint URLs for a default regional route."""

    def __init__(self, region: Region = Region.EUROPE):
        """
        Initialize endpoint configuration.

        Args:
            region: Default region for regional endpoints
        """
        self.region = region

    def get_base_url(self, region: Optional[Union[Region, str]] = None) -> str:
        """Get base URL for regional endpoints."""
        region = region or self.region
        region_str = region.value if isinstance(region, Region) else region
        return f"https://{region_str}.api.riotgames.com"

    def match_ids_by_puuid(
        self, puuid: str, region: Optional[Region] = None
    ) -> str:
        """Match id list endpoint."""
        return f"{self.get_base_url(region)}/lol/match/v5/matches/by-puuid/{puuid}/ids"

    @staticmethod
    def match_ids_params(
        start: int = 0, count: int = 20, queue: Optional[QueueType] = None
    ) -> Dict[str, int]:
        """Query parameters for the match id list endpoint."""
        params = {"start": start, "count": count}
        if queue is not None:
            params["queue"] = int(queue)
        return params

    def match_by_id(self, match_id: str, region: Optional[Region] = None) -> str:
        """Match detail endpoint."""
        return f"{self.get_base_url(region)}/lol/match/v5/matches/{match_id}"

    def match_timeline(self, match_id: str, region: Optional[Region] = None) -> str:
        """Match timeline endpoint."""
        return f"{self.get_base_url(region)}/lol/match/v5/matches/{match_id}/timeline"
