from unittest.mock import AsyncMock

import pytest

from riftcoach.core.cache import TTLCache
from riftcoach.core.enums import BenchmarkTier, Role
from riftcoach.core.exceptions import ServiceException
from riftcoach.features.benchmarks.repository import InMemoryBenchmarkRepository
from riftcoach.features.benchmarks.schemas import BenchmarkRecord
from riftcoach.features.benchmarks.service import BenchmarkService, prefer_high_elo

from tests.builders import build_benchmark


@pytest.fixture
def records():
    return [
        build_benchmark(103, "MIDDLE", tier="ALL_RANKS", avg_kda=250),
        build_benchmark(103, "MIDDLE", tier="HIGH_ELO", avg_kda=320),
        build_benchmark(103, "UTILITY", tier="ALL_RANKS", games_analyzed=40),
        build_benchmark(64, "JUNGLE", tier="ALL_RANKS", games_analyzed=900),
    ]


@pytest.fixture
def service(records):
    return BenchmarkService(InMemoryBenchmarkRepository(records), cache=TTLCache())


class TestBenchmarkRecord:
    def test_scaled_values(self):
        record = build_benchmark(avg_kda=325, avg_gold_per_min=410)

        assert record.value("avg_kda") == 3.25
        assert record.value("avg_gold_per_min") == 410.0
        assert record.value("avg_skillshots_hit") is None

    def test_usable_threshold(self):
        assert build_benchmark(games_analyzed=5).is_usable
        assert not build_benchmark(games_analyzed=4).is_usable

    def test_key(self):
        assert build_benchmark(64, "JUNGLE").key == "64-JUNGLE"

    def test_validates_from_aliases(self):
        record = BenchmarkRecord.model_validate(
            {"championId": 1, "championName": "Annie", "role": "MIDDLE", "avgKda": 280}
        )

        assert record.tier == BenchmarkTier.ALL_RANKS
        assert record.value("avg_kda") == 2.8


def test_prefer_high_elo_is_order_independent(records):
    forward = prefer_high_elo(records)
    backward = prefer_high_elo(reversed(records))

    assert forward["103-MIDDLE"].tier == BenchmarkTier.HIGH_ELO
    assert backward["103-MIDDLE"].tier == BenchmarkTier.HIGH_ELO
    assert set(forward) == {"103-MIDDLE", "103-UTILITY", "64-JUNGLE"}


async def test_get_benchmark_prefers_high_elo(service):
    record = await service.get_benchmark(103, Role.MIDDLE)

    assert record.tier == BenchmarkTier.HIGH_ELO
    assert record.value("avg_kda") == 3.2


async def test_get_benchmark_falls_back_to_all_ranks(service):
    record = await service.get_benchmark(103, Role.UTILITY)

    assert record.tier == BenchmarkTier.ALL_RANKS


async def test_get_benchmark_caches_misses():
    repository = AsyncMock()
    repository.get_best.return_value = None
    service = BenchmarkService(repository, cache=TTLCache())

    assert await service.get_benchmark(1, Role.TOP) is None
    assert await service.get_benchmark(1, Role.TOP) is None
    repository.get_best.assert_awaited_once_with(1, Role.TOP)


async def test_get_batch(service):
    found = await service.get_batch(
        [(103, Role.MIDDLE), (103, Role.MIDDLE), (64, Role.JUNGLE), (7, Role.TOP)]
    )

    assert set(found) == {"103-MIDDLE", "64-JUNGLE"}
    assert found["103-MIDDLE"].tier == BenchmarkTier.HIGH_ELO


async def test_get_batch_only_fetches_uncached_pairs(records):
    repository = AsyncMock()
    repository.get_for_champions.return_value = records
    service = BenchmarkService(repository, cache=TTLCache())

    await service.get_batch([(103, Role.MIDDLE), (7, Role.TOP)])
    found = await service.get_batch([(103, Role.MIDDLE), (7, Role.TOP)])

    assert set(found) == {"103-MIDDLE"}
    repository.get_for_champions.assert_awaited_once_with([7, 103])


async def test_store_failure_is_wrapped():
    repository = AsyncMock()
    repository.get_for_champions.side_effect = RuntimeError("boom")
    service = BenchmarkService(repository, cache=TTLCache())

    with pytest.raises(ServiceException):
        await service.get_batch([(103, Role.MIDDLE)])


async def test_get_map_empty(service):
    assert await service.get_map([]) == {}


async def test_list_all_most_sampled_first(service):
    records = await service.list_all()

    assert [r.games_analyzed for r in records] == [900, 100, 100, 40]
