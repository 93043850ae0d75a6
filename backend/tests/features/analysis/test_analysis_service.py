from unittest.mock import AsyncMock

import pytest

from riftcoach.core.cache import BestEffortCache, InMemoryKeyValueStore, TTLCache
from riftcoach.core.config import Settings
from riftcoach.core.enums import DataQuality, QueueFilter
from riftcoach.core.exceptions import (
    NoMatchesAvailable,
    ServiceException,
    ValidationError,
)
from riftcoach.core.riot_api.constants import QueueType, Region
from riftcoach.core.riot_api.errors import RateLimitError
from riftcoach.features.analysis.service import PlayerAnalysisService, data_quality
from riftcoach.features.scoring.roles import SCORING_VERSION

from tests.builders import (
    PLAYER_PUUID,
    build_benchmark,
    build_match,
    build_timeline,
    lane_frames,
)


def _matches(count, **kwargs):
    return [
        build_match(f"EUW1_{i}", game_creation=1_700_000_000_000 + i, **kwargs)
        for i in range(count)
    ]


@pytest.fixture
def gateway():
    mock = AsyncMock()
    records = _matches(12)
    mock.fetch_match_ids.return_value = [r.match_id for r in records]
    mock.fetch_matches.return_value = records
    mock.fetch_timelines.return_value = {}
    return mock


@pytest.fixture
def benchmark_service():
    mock = AsyncMock()
    mock.get_batch.return_value = {"103-MIDDLE": build_benchmark()}
    return mock


@pytest.fixture
def cache():
    return BestEffortCache(InMemoryKeyValueStore(TTLCache()))


@pytest.fixture
def service(gateway, benchmark_service, cache):
    return PlayerAnalysisService(gateway, benchmark_service, cache=cache)


@pytest.mark.parametrize(
    "games, quality",
    [
        (0, DataQuality.INSUFFICIENT),
        (9, DataQuality.INSUFFICIENT),
        (10, DataQuality.LIMITED),
        (30, DataQuality.GOOD),
        (40, DataQuality.EXCELLENT),
        (100, DataQuality.EXCELLENT),
    ],
)
def test_data_quality(games, quality):
    assert data_quality(games) == quality


async def test_analyze_player(service, gateway, benchmark_service):
    analysis = await service.analyze_player(
        PLAYER_PUUID, "euw", game_name="Player", tag_line="EUW"
    )

    assert analysis.analyzed_games == 12
    assert analysis.data_quality == DataQuality.LIMITED
    assert analysis.region == "euw1"
    assert analysis.queue_name == "Solo/Duo"
    assert analysis.game_name == "Player"
    assert analysis.scoring_version == SCORING_VERSION
    assert list(analysis.role_stats) == ["MIDDLE"]
    assert analysis.champion_analysis[0].high_elo_comparison is not None
    gateway.fetch_match_ids.assert_awaited_once_with(
        PLAYER_PUUID, Region.EUROPE, count=50, queue=QueueType.RANKED_SOLO_5X5
    )
    benchmark_service.get_batch.assert_awaited_once()
    assert analysis.timeline_analysis is None


async def test_matches_analysed_most_recent_first(service):
    analysis = await service.analyze_player(PLAYER_PUUID, "euw")

    best = analysis.champion_analysis[0].best_performance
    # Equal KDA everywhere, so the first analysed match is the best one
    assert best.match_id == "EUW1_11"


async def test_unknown_region(service, gateway):
    with pytest.raises(ValidationError):
        await service.analyze_player(PLAYER_PUUID, "atlantis")

    gateway.fetch_match_ids.assert_not_awaited()


async def test_no_match_ids(service, gateway):
    gateway.fetch_match_ids.return_value = []

    with pytest.raises(NoMatchesAvailable):
        await service.analyze_player(PLAYER_PUUID, "euw")

    gateway.fetch_matches.assert_not_awaited()


async def test_every_download_failed(service, gateway):
    gateway.fetch_matches.return_value = []

    with pytest.raises(NoMatchesAvailable):
        await service.analyze_player(PLAYER_PUUID, "euw")


async def test_match_without_player_is_dropped(service, gateway):
    records = _matches(4) + [build_match("EUW1_X", include_player=False)]
    gateway.fetch_match_ids.return_value = [r.match_id for r in records]
    gateway.fetch_matches.return_value = records

    analysis = await service.analyze_player(PLAYER_PUUID, "euw")

    assert analysis.analyzed_games == 4


async def test_rate_limit_propagates(service, gateway):
    gateway.fetch_match_ids.side_effect = RateLimitError("Rate limited", status_code=429)

    with pytest.raises(RateLimitError):
        await service.analyze_player(PLAYER_PUUID, "euw")


async def test_benchmark_failure_is_tolerated(service, benchmark_service):
    benchmark_service.get_batch.side_effect = ServiceException("store down")

    analysis = await service.analyze_player(PLAYER_PUUID, "euw")

    assert analysis.analyzed_games == 12
    assert analysis.champion_analysis[0].high_elo_comparison is None


async def test_cached_result_is_reused(service, gateway):
    first = await service.analyze_player(PLAYER_PUUID, "euw")
    second = await service.analyze_player(PLAYER_PUUID, "euw")

    assert second == first
    gateway.fetch_match_ids.assert_awaited_once()


async def test_cache_is_per_queue(service, gateway):
    await service.analyze_player(PLAYER_PUUID, "euw")
    await service.analyze_player(PLAYER_PUUID, "euw", queue=QueueFilter.FLEX)

    assert gateway.fetch_match_ids.await_count == 2


async def test_failing_cache_is_ignored(gateway, benchmark_service):
    store = AsyncMock()
    store.get.side_effect = ConnectionError("cache down")
    store.set.side_effect = ConnectionError("cache down")
    service = PlayerAnalysisService(
        gateway, benchmark_service, cache=BestEffortCache(store)
    )

    analysis = await service.analyze_player(PLAYER_PUUID, "euw")

    assert analysis.analyzed_games == 12


async def test_all_ranked_queue_keeps_only_ranked_matches(service, gateway):
    records = _matches(3) + [build_match("EUW1_ARAM", queue_id=450)]
    gateway.fetch_match_ids.return_value = [r.match_id for r in records]
    gateway.fetch_matches.return_value = records

    analysis = await service.analyze_player(PLAYER_PUUID, "euw", queue=QueueFilter.ALL)

    assert analysis.analyzed_games == 3
    assert analysis.queue_name == "All Ranked"
    assert gateway.fetch_match_ids.await_args.kwargs["queue"] is None


async def test_explicit_count(service, gateway):
    await service.analyze_player(PLAYER_PUUID, "euw", count=20)

    assert gateway.fetch_match_ids.await_args.kwargs["count"] == 20


async def test_timeline_analysis_covers_most_recent_matches(service, gateway):
    gateway.fetch_timelines.return_value = {
        "EUW1_11": build_timeline("EUW1_11", lane_frames({10: 500, 15: -100}))
    }

    analysis = await service.analyze_player(PLAYER_PUUID, "euw")

    gateway.fetch_timelines.assert_awaited_once_with(
        [f"EUW1_{i}" for i in range(11, 1, -1)], Region.EUROPE
    )
    timeline = analysis.timeline_analysis
    assert timeline.games_with_timeline == 1
    assert timeline.avg_gold_diff_at_10 == 500
    assert timeline.avg_gold_diff_at_15 == -100
    assert timeline.lead_conversion_rate is None

    cached = await service.analyze_player(PLAYER_PUUID, "euw")
    assert cached.timeline_analysis == timeline


async def test_timeline_failure_is_tolerated(service, gateway):
    gateway.fetch_timelines.side_effect = RateLimitError("Rate limited", status_code=429)

    analysis = await service.analyze_player(PLAYER_PUUID, "euw")

    assert analysis.analyzed_games == 12
    assert analysis.timeline_analysis is None


async def test_timeline_analysis_can_be_disabled(gateway, benchmark_service, cache):
    service = PlayerAnalysisService(
        gateway,
        benchmark_service,
        cache=cache,
        settings=Settings(analysis_timeline_match_count=0),
    )

    analysis = await service.analyze_player(PLAYER_PUUID, "euw")

    assert analysis.timeline_analysis is None
    gateway.fetch_timelines.assert_not_awaited()
