"""Gateway to the Riot match-v5 API.

Isolates the analysis pipeline from Riot transport details: listing a
player's match ids, then downloading detail records or timelines in
parallel with a concurrency cap and a deadline for the whole batch.
"""

import asyncio
from typing import (
    TYPE_CHECKING,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Tuple,
    TypeVar,
)

import httpx
import pydantic
import structlog

from riftcoach.core.riot_api.constants import QueueType, Region
from riftcoach.core.riot_api.errors import RiotAPIError
from riftcoach.core.riot_api.models import MatchDTO, TimelineDTO

if TYPE_CHECKING:
    from riftcoach.core.riot_api.client import RiotAPIClient

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Failures that cost one match and nothing else
DROPPABLE_ERRORS: Tuple[type, ...] = (
    RiotAPIError,
    pydantic.ValidationError,
    httpx.HTTPError,
)


class MatchGateway:
    """Fetches match ids and match records for the analysis pipeline."""

    def __init__(
        self,
        riot_client: "RiotAPIClient",
        concurrency: int = 8,
        timeout: float = 25.0,
    ):
        """Initialize gateway with Riot API client.

        :param riot_client: Riot API client instance
        :param concurrency: Maximum downloads in flight
        :param timeout: Seconds allowed for a whole batch of downloads
        """
        self.riot_client = riot_client
        self.concurrency = max(1, concurrency)
        self.timeout = timeout

    async def fetch_match_ids(
        self,
        puuid: str,
        region: Region,
        count: int = 50,
        queue: Optional[QueueType] = None,
    ) -> List[str]:
        """Fetch the player's most recent match ids, newest first.

        :param puuid: Player PUUID
        :param region: Regional route to query
        :param count: Number of ids to request
        :param queue: Queue id filter, None for every queue
        :returns: List of match ids
        :raises RiotAPIError: If the listing fails (rate limits included)
        """
        match_ids = await self.riot_client.get_match_ids(
            puuid, count=count, queue=queue, start=0, region=region
        )
        logger.debug(
            "match_ids_fetched",
            puuid=puuid,
            count=len(match_ids),
            queue=int(queue) if queue is not None else None,
        )
        return match_ids

    async def fetch_match(self, match_id: str, region: Region) -> MatchDTO:
        """Fetch a single match record."""
        return await self.riot_client.get_match(match_id, region=region)

    async def fetch_timeline(self, match_id: str, region: Region) -> TimelineDTO:
        """Fetch a single match timeline."""
        return await self.riot_client.get_match_timeline(match_id, region=region)

    async def fetch_matches(
        self, match_ids: List[str], region: Region
    ) -> List[MatchDTO]:
        """Download match records in parallel.

        Individual failures and downloads still running at the deadline are
        dropped. Surviving records keep the order of ``match_ids``.

        :param match_ids: Match ids to download
        :param region: Regional route to query
        :returns: Successfully downloaded matches
        """
        downloaded = await self._download_all(
            match_ids, lambda match_id: self.fetch_match(match_id, region), "match"
        )
        return [record for _, record in downloaded]

    async def fetch_timelines(
        self, match_ids: List[str], region: Region
    ) -> Dict[str, TimelineDTO]:
        """Download match timelines in parallel, same rules as ``fetch_matches``.

        :param match_ids: Match ids whose timelines to download
        :param region: Regional route to query
        :returns: Timelines keyed by match id
        """
        downloaded = await self._download_all(
            match_ids,
            lambda match_id: self.fetch_timeline(match_id, region),
            "timeline",
        )
        return dict(downloaded)

    async def _download_all(
        self,
        match_ids: List[str],
        fetch: Callable[[str], Awaitable[T]],
        kind: str,
    ) -> List[Tuple[str, T]]:
        """Run ``fetch`` for every id under the semaphore and the batch deadline."""
        if not match_ids:
            return []

        semaphore = asyncio.Semaphore(self.concurrency)

        async def _bounded_fetch(match_id: str) -> T:
            async with semaphore:
                return await fetch(match_id)

        tasks = [
            asyncio.create_task(_bounded_fetch(match_id)) for match_id in match_ids
        ]
        done, pending = await asyncio.wait(tasks, timeout=self.timeout)

        if pending:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning(
                f"{kind}_fetch_deadline_reached",
                pending=len(pending),
                completed=len(done),
                timeout=self.timeout,
            )

        results: List[Tuple[str, T]] = []
        for match_id, task in zip(match_ids, tasks):
            if task not in done:
                continue
            error = task.exception()
            if error is None:
                results.append((match_id, task.result()))
            elif isinstance(error, DROPPABLE_ERRORS):
                logger.warning(
                    f"{kind}_fetch_failed",
                    match_id=match_id,
                    error_type=type(error).__name__,
                    error=str(error),
                )
            else:
                logger.error(
                    f"{kind}_fetch_unexpected_error",
                    match_id=match_id,
                    error_type=type(error).__name__,
                    error=str(error),
                )

        logger.info(
            f"{kind}_downloads_finished",
            requested=len(match_ids),
            fetched=len(results),
        )
        return results
