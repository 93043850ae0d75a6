"""Scores a single match for one player."""

from typing import Optional

import structlog

from riftcoach.core.decorators import service_error_handler
from riftcoach.core.riot_api.constants import get_region_info
from riftcoach.features.benchmarks.schemas import BenchmarkRecord
from riftcoach.features.benchmarks.service import BenchmarkService
from riftcoach.features.matches.gateway import MatchGateway
from riftcoach.features.matches.normalizer import (
    MatchRecordNormalizer,
    NormalizedMatch,
)
from riftcoach.features.scoring.roles import SCORING_VERSION
from riftcoach.features.scoring.schemas import MatchScoreResponse
from riftcoach.features.scoring.scorer import SingleMatchScorer

logger = structlog.get_logger(__name__)


class MatchScoreService:
    """Fetches one match, normalizes it and grades the player's game."""

    def __init__(
        self,
        gateway: MatchGateway,
        benchmark_service: BenchmarkService,
        normalizer: Optional[MatchRecordNormalizer] = None,
        scorer: Optional[SingleMatchScorer] = None,
    ):
        self.gateway = gateway
        self.benchmark_service = benchmark_service
        self.normalizer = normalizer or MatchRecordNormalizer()
        self.scorer = scorer or SingleMatchScorer()

    async def _lookup_benchmark(
        self, normalized: NormalizedMatch
    ) -> Optional[BenchmarkRecord]:
        """Champion benchmark for the match, None when the store fails."""
        try:
            return await self.benchmark_service.get_benchmark(
                normalized.participant.champion_id, normalized.role
            )
        except Exception as e:
            logger.warning(
                "benchmark_lookup_failed",
                match_id=normalized.match_id,
                champion_id=normalized.participant.champion_id,
                error=str(e),
            )
            return None

    @service_error_handler("MatchScoreService")
    async def score_match(
        self, match_id: str, puuid: str, region: str
    ) -> MatchScoreResponse:
        """
        Score a player's performance in one match.

        :param match_id: Riot match id
        :param puuid: Player PUUID
        :param region: Region key such as ``euw``
        :returns: MatchScoreResponse with the GameScore
        :raises ValidationError: If the region key is unknown
        :raises NotFoundError: If the match does not exist
        :raises ParticipantNotFound: If the player is not in the match
        """
        region_info = get_region_info(region)
        if region_info is None:
            raise ValueError(f"Invalid region: {region}")

        match = await self.gateway.fetch_match(match_id, region_info.region)
        normalized = self.normalizer.normalize(match, puuid)
        benchmark = await self._lookup_benchmark(normalized)
        score = self.scorer.score(normalized, normalized.win, benchmark)

        return MatchScoreResponse(
            match_id=normalized.match_id,
            puuid=puuid,
            champion_id=normalized.participant.champion_id,
            champion_name=normalized.participant.champion_name,
            role=normalized.role.value,
            win=normalized.win,
            score=score,
            scoring_version=SCORING_VERSION,
        )
