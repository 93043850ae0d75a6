"""Player analysis pipeline: fetch, normalize, aggregate, coach."""

from typing import Dict, List, Optional, Sequence

import structlog

from riftcoach.core.cache import BestEffortCache, analysis_cache_key, analysis_store
from riftcoach.core.config import Settings, get_global_settings
from riftcoach.core.decorators import service_error_handler
from riftcoach.core.enums import DataQuality, QueueFilter
from riftcoach.core.exceptions import NoMatchesAvailable
from riftcoach.core.riot_api.constants import (
    QUEUE_FILTERS,
    RANKED_QUEUES,
    Region,
    get_region_info,
)
from riftcoach.features.analysis.champion_profiler import ChampionProfiler
from riftcoach.features.analysis.insights import InsightEngine
from riftcoach.features.analysis.schemas import PlayerAnalysis, TimelineAnalysis
from riftcoach.features.analysis.stats_builder import AggregateStatsBuilder
from riftcoach.features.analysis.timeline import TimelineAnalyzer
from riftcoach.features.analysis.trends import TrendAnalyzer
from riftcoach.features.benchmarks.schemas import BenchmarkRecord
from riftcoach.features.benchmarks.service import BenchmarkService
from riftcoach.features.matches.gateway import MatchGateway
from riftcoach.features.matches.normalizer import (
    MatchRecordNormalizer,
    NormalizedMatch,
)
from riftcoach.features.scoring.roles import SCORING_VERSION

logger = structlog.get_logger(__name__)

# (minimum analysed games, label), best first
DATA_QUALITY_CUTOFFS = [
    (40, DataQuality.EXCELLENT),
    (30, DataQuality.GOOD),
    (10, DataQuality.LIMITED),
]


def data_quality(games: int) -> DataQuality:
    """Label the sample size behind an analysis."""
    for minimum, label in DATA_QUALITY_CUTOFFS:
        if games >= minimum:
            return label
    return DataQuality.INSUFFICIENT


class PlayerAnalysisService:
    """Builds a ``PlayerAnalysis`` from a player's recent ranked matches."""

    def __init__(
        self,
        gateway: MatchGateway,
        benchmark_service: BenchmarkService,
        cache: Optional[BestEffortCache] = None,
        normalizer: Optional[MatchRecordNormalizer] = None,
        stats_builder: Optional[AggregateStatsBuilder] = None,
        champion_profiler: Optional[ChampionProfiler] = None,
        trend_analyzer: Optional[TrendAnalyzer] = None,
        insight_engine: Optional[InsightEngine] = None,
        timeline_analyzer: Optional[TimelineAnalyzer] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the service.

        Args:
            gateway: Match source
            benchmark_service: Champion benchmark lookups
            cache: Result cache, defaults to the process-wide analysis store
            normalizer: Match normalizer
            stats_builder: Aggregate builder shared with the trend analyzer
            champion_profiler: Per-champion aggregation
            trend_analyzer: Recent-form series
            insight_engine: Strengths, weaknesses and improvements
            timeline_analyzer: Lane differences from match timelines
            settings: Application settings, defaults to the global instance
        """
        self.gateway = gateway
        self.benchmark_service = benchmark_service
        self.cache = cache or BestEffortCache(analysis_store)
        self.normalizer = normalizer or MatchRecordNormalizer()
        self.stats_builder = stats_builder or AggregateStatsBuilder()
        self.champion_profiler = champion_profiler or ChampionProfiler()
        self.trend_analyzer = trend_analyzer or TrendAnalyzer(self.stats_builder)
        self.insight_engine = insight_engine or InsightEngine()
        self.timeline_analyzer = timeline_analyzer or TimelineAnalyzer()
        self.settings = settings or get_global_settings()

    async def _load_benchmarks(
        self, matches: Sequence[NormalizedMatch]
    ) -> Dict[str, BenchmarkRecord]:
        """Benchmarks for every (champion, role) played; empty when the store fails."""
        pairs = [(m.participant.champion_id, m.role) for m in matches]
        try:
            return await self.benchmark_service.get_batch(pairs)
        except Exception as e:
            logger.warning(
                "Benchmark lookup failed, continuing without benchmarks",
                pairs=len(pairs),
                error=str(e),
            )
            return {}

    async def _load_timeline(
        self, matches: Sequence[NormalizedMatch], region: Region
    ) -> Optional[TimelineAnalysis]:
        """Lane differences over the most recent matches; None when unavailable."""
        recent = matches[: self.settings.analysis_timeline_match_count]
        if not recent:
            return None
        try:
            timelines = await self.gateway.fetch_timelines(
                [m.match_id for m in recent], region
            )
        except Exception as e:
            logger.warning(
                "Timeline lookup failed, continuing without timelines",
                matches=len(recent),
                error=str(e),
            )
            return None
        return self.timeline_analyzer.analyze(recent, timelines)

    @service_error_handler("PlayerAnalysisService")
    async def analyze_player(
        self,
        puuid: str,
        region: str,
        game_name: str = "",
        tag_line: str = "",
        queue: QueueFilter = QueueFilter.SOLO,
        count: Optional[int] = None,
    ) -> PlayerAnalysis:
        """
        Analyse a player's recent ranked games.

        :param puuid: Player PUUID
        :param region: Region key such as ``euw``
        :param game_name: Riot id game name, echoed in the result
        :param tag_line: Riot id tag line, echoed in the result
        :param queue: Queue filter (solo, flex or all ranked)
        :param count: Matches to request, defaults to the configured count
        :returns: PlayerAnalysis
        :raises ValidationError: If the region key is unknown
        :raises RateLimitError: If the match list request is rate limited
        :raises NoMatchesAvailable: If no qualifying match could be analysed
        """
        region_info = get_region_info(region)
        if region_info is None:
            raise ValueError(f"Invalid region: {region}")

        cache_key = analysis_cache_key(puuid, queue.value)
        cached = await self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Analysis cache hit", puuid=puuid, queue=queue.value)
            return PlayerAnalysis.model_validate(cached)

        count = count or self.settings.analysis_match_count
        queue_type, queue_name = QUEUE_FILTERS[queue.value]

        match_ids = await self.gateway.fetch_match_ids(
            puuid, region_info.region, count=count, queue=queue_type
        )
        if not match_ids:
            raise NoMatchesAvailable(puuid, queue.value, requested=count)

        records = await self.gateway.fetch_matches(match_ids, region_info.region)
        records = sorted(records, key=lambda m: m.info.game_creation, reverse=True)
        if queue_type is None:
            records = [m for m in records if m.info.queue_id in RANKED_QUEUES]

        matches = self.normalizer.normalize_many(records, puuid)
        if not matches:
            raise NoMatchesAvailable(puuid, queue.value, requested=len(match_ids))

        analysis = self.build_analysis(
            matches,
            await self._load_benchmarks(matches),
            puuid=puuid,
            region=region_info.platform.value,
            game_name=game_name,
            tag_line=tag_line,
            queue_name=queue_name,
            timeline=await self._load_timeline(matches, region_info.region),
        )

        await self.cache.set(
            cache_key,
            analysis.model_dump(mode="json", by_alias=True),
            ttl=self.settings.analysis_cache_ttl_seconds,
        )
        logger.info(
            "Player analysed",
            puuid=puuid,
            queue=queue.value,
            requested=len(match_ids),
            analysed=len(matches),
            data_quality=analysis.data_quality.value,
        )
        return analysis

    def build_analysis(
        self,
        matches: List[NormalizedMatch],
        benchmarks: Dict[str, BenchmarkRecord],
        puuid: str,
        region: str,
        game_name: str,
        tag_line: str,
        queue_name: str,
        timeline: Optional[TimelineAnalysis] = None,
    ) -> PlayerAnalysis:
        """Pure aggregation step over already fetched matches."""
        overall = self.stats_builder.build(matches)
        role_stats = self.stats_builder.build_role_aggregates(matches)
        report = self.insight_engine.generate(overall, role_stats, matches)

        return PlayerAnalysis(
            puuid=puuid,
            game_name=game_name,
            tag_line=tag_line,
            region=region,
            queue_name=queue_name,
            analyzed_games=len(matches),
            data_quality=data_quality(len(matches)),
            overall_stats=overall,
            role_stats=role_stats,
            champion_analysis=self.champion_profiler.profile(matches, benchmarks),
            trends=self.trend_analyzer.analyze(matches),
            strengths=report.strengths,
            weaknesses=report.weaknesses,
            improvements=report.improvements,
            timeline_analysis=timeline,
            scoring_version=SCORING_VERSION,
        )
